"""
Users View

Project users ordered newest first, filtered by name, email or phone.
Operators can toggle the active flag, edit name/email/phone and add users.
Each mutation is followed by a full re-fetch; on failure the edit or add
form stays open and the list is left as it was.
"""
import logging
from typing import Any, Dict, Optional

from ..models.db_models import utcnow
from ..services.backend_client import BackendError
from .base import EntityView

logger = logging.getLogger(__name__)

TABLE = "project_users"
EDITABLE_FIELDS = ("full_name", "email", "phone")


class UsersView(EntityView):
    name = "users"
    search_fields = ("full_name", "email", "phone")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.editing_id: Optional[str] = None
        self.edit_form: Dict[str, Any] = {}
        self.add_form_open = False
        self.add_form: Dict[str, Any] = self._blank_add_form()

    def fetch(self):
        # reports_count is derived from trash_locations on every read
        return self.client.select(TABLE, embed=("reports_count",))

    # -------------------------------------------------------------------------
    # Active flag
    # -------------------------------------------------------------------------

    def toggle_active(self, user_id: str) -> bool:
        try:
            current = self.find(user_id) or self.client.get(TABLE, user_id)
            is_active = not current["is_active"]
            self.client.update(TABLE, user_id, {"is_active": is_active, "updated_at": utcnow()})
        except BackendError:
            logger.exception("Error toggling user status for %s", user_id)
            return False

        self.audit.record(
            "user_activated" if is_active else "user_deactivated",
            entity_type=TABLE,
            entity_id=user_id,
            details={"message": f"is_active set to {is_active}", "is_active": is_active},
        )
        self.load()
        return True

    # -------------------------------------------------------------------------
    # Edit
    # -------------------------------------------------------------------------

    def start_edit(self, user_id: str) -> bool:
        row = self.find(user_id)
        if row is None:
            return False
        self.editing_id = user_id
        self.edit_form = {field: row.get(field) for field in EDITABLE_FIELDS}
        return True

    def cancel_edit(self) -> None:
        self.editing_id = None
        self.edit_form = {}

    def save_edit(self, fields: Optional[Dict[str, Any]] = None) -> bool:
        """Write the submitted editable fields of the user being edited."""
        if self.editing_id is None:
            return False
        for field, value in (fields or {}).items():
            if field in EDITABLE_FIELDS:
                self.edit_form[field] = value

        user_id = self.editing_id
        updates = {field: self.edit_form[field] for field in EDITABLE_FIELDS if field in self.edit_form}
        if "phone" in updates:
            updates["phone"] = updates["phone"] or None
        updates["updated_at"] = utcnow()
        try:
            self.client.update(TABLE, user_id, updates)
        except BackendError:
            logger.exception("Error updating user %s", user_id)
            return False

        self.audit.record(
            "user_updated",
            entity_type=TABLE,
            entity_id=user_id,
            details={"message": "User details updated", "fields": sorted(k for k in updates if k != "updated_at")},
        )
        self.load()
        self.cancel_edit()
        return True

    # -------------------------------------------------------------------------
    # Add
    # -------------------------------------------------------------------------

    @staticmethod
    def _blank_add_form() -> Dict[str, Any]:
        return {"email": "", "full_name": "", "phone": ""}

    def open_add_form(self) -> None:
        self.add_form_open = True

    def close_add_form(self) -> None:
        self.add_form_open = False
        self.add_form = self._blank_add_form()

    def add_user(self, email: str, full_name: str, phone: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Insert a user from the add form. Returns the created row, or None on failure."""
        self.add_form_open = True
        self.add_form = {"email": email, "full_name": full_name, "phone": phone or ""}
        try:
            created = self.client.insert(TABLE, {"email": email, "full_name": full_name, "phone": phone or None})
        except BackendError:
            logger.exception("Error adding user %s", email)
            return None

        self.audit.record(
            "user_created",
            entity_type=TABLE,
            entity_id=created["id"],
            details={"message": "User created", "email": email},
        )
        self.load()
        self.close_add_form()
        return created

    # -------------------------------------------------------------------------
    # Presentation
    # -------------------------------------------------------------------------

    def present(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return {
            **row,
            "active_label": self.labels.active(row["is_active"]),
            "created_display": self.labels.format_datetime(row.get("created_at"), "date"),
        }

    def state(self) -> Dict[str, Any]:
        visible = self.filtered
        return {
            "users": [self.present(row) for row in visible],
            "total": len(self.rows),
            "active_count": sum(1 for row in self.rows if row["is_active"]),
            "reports_total": sum(row.get("reports_count") or 0 for row in self.rows),
            "visible": len(visible),
            "search": self.search,
            "loading": self.loading,
            "editing_id": self.editing_id,
            "add_form_open": self.add_form_open,
        }
