"""
Map View

All trash reports as markers colored by status, an optional server-side
status filter, and a detail panel populated only by clicking a marker.
Changing a report's status re-fetches the list and closes the panel.
"""
import logging
from typing import Any, Dict, Optional

from ..models.db_models import TrashStatus
from ..services import map_markers
from ..services.backend_client import BackendError
from ..services.status_workflow import (
    build_transition, status_actions, status_style, priority_badge,
)
from .base import EntityView

logger = logging.getLogger(__name__)

TABLE = "trash_locations"


class MapView(EntityView):
    name = "map"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.status_filter: Optional[TrashStatus] = None
        self.selected: Optional[Dict[str, Any]] = None

    def set_status_filter(self, status: Optional[Any]) -> None:
        """None (or "all") shows every status."""
        if status in (None, "", "all"):
            self.status_filter = None
        else:
            self.status_filter = TrashStatus(getattr(status, "value", status))

    def fetch(self):
        filters = {"status": self.status_filter.value} if self.status_filter else None
        return self.client.select(TABLE, filters=filters, embed=("project_users",))

    # -------------------------------------------------------------------------
    # Markers and selection
    # -------------------------------------------------------------------------

    def markers(self):
        return map_markers.build_markers(self.rows, self.labels)

    def select(self, location_id: str) -> Optional[Dict[str, Any]]:
        """Marker click: open the detail panel for the clicked row."""
        self.selected = map_markers.resolve_click(self.rows, location_id)
        return self.selected

    def close_detail(self) -> None:
        self.selected = None

    def detail(self) -> Optional[Dict[str, Any]]:
        location = self.selected
        if location is None:
            return None
        style = status_style(location["status"])
        return {
            **location,
            "trash_type_label": self.labels.trash_type(location["trash_type"]),
            "status_label": self.labels.status(location["status"]),
            "status_icon": style["icon"],
            "status_badge": style["badge"],
            "priority_label": self.labels.priority(location["priority"]),
            "priority_badge": priority_badge(location["priority"]),
            "coordinates_display": f"{float(location['latitude']):.6f}, {float(location['longitude']):.6f}",
            "created_display": self.labels.format_datetime(location.get("created_at")),
            "cleaned_display": self.labels.format_datetime(location.get("cleaned_at")),
            "actions": status_actions(location["status"], self.labels),
        }

    # -------------------------------------------------------------------------
    # Status workflow
    # -------------------------------------------------------------------------

    def change_status(self, location_id: str, target: Any) -> bool:
        """
        Move a report to target status.

        Raises InvalidTransition for tokens outside the status enum and for the
        report's current status. Backend failures are logged; the panel and
        list are left untouched.
        """
        try:
            previous = self.find(location_id) or self.client.get(TABLE, location_id)
        except BackendError:
            logger.exception("Error reading status of %s", location_id)
            return False
        updates = build_transition(target, current=previous["status"])
        try:
            self.client.update(TABLE, location_id, updates)
        except BackendError:
            logger.exception("Error updating status of %s", location_id)
            return False

        self.audit.record(
            "trash_status_changed",
            entity_type=TABLE,
            entity_id=location_id,
            details={
                "message": f"Status changed to {updates['status']}",
                "from": previous["status"],
                "to": updates["status"],
            },
        )
        self.load()
        self.close_detail()
        return True

    def state(self) -> Dict[str, Any]:
        return {
            "map": map_markers.map_config(),
            "markers": self.markers(),
            "legend": map_markers.legend(self.labels),
            "total": len(self.rows),
            "status": self.status_filter.value if self.status_filter else None,
            "loading": self.loading,
            "selected": self.detail(),
        }
