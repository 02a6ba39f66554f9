"""
Admin Users View

Operator accounts, read and updated but never created or deleted here.
Only the admin role may write; the backend policy enforces it.
"""
import logging
from typing import Any, Dict

from ..services.backend_client import BackendError
from .base import EntityView

logger = logging.getLogger(__name__)

TABLE = "admin_users"
EDITABLE_FIELDS = ("full_name", "role", "is_active")


class AdminUsersView(EntityView):
    name = "admin_users"
    search_fields = ("full_name", "email")

    def fetch(self):
        return self.client.select(TABLE)

    def update(self, admin_id: str, fields: Dict[str, Any]) -> bool:
        updates = {field: value for field, value in fields.items() if field in EDITABLE_FIELDS}
        if not updates:
            return False
        try:
            self.client.update(TABLE, admin_id, updates)
        except BackendError:
            logger.exception("Error updating admin user %s", admin_id)
            return False

        self.audit.record(
            "admin_user_updated",
            entity_type=TABLE,
            entity_id=admin_id,
            details={
                "message": "Admin user updated",
                "fields": sorted(updates),
            },
        )
        self.load()
        return True

    def present(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return {
            **row,
            "role_label": self.labels.role(row["role"]),
            "active_label": self.labels.active(row["is_active"]),
            "last_login_display": self.labels.format_datetime(row.get("last_login")),
        }

    def state(self) -> Dict[str, Any]:
        visible = self.filtered
        return {
            "admin_users": [self.present(row) for row in visible],
            "total": len(self.rows),
            "visible": len(visible),
            "search": self.search,
            "loading": self.loading,
        }
