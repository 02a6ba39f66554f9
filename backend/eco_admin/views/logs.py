"""
Logs View

The most recent system log entries (capped), optionally restricted to one
level on the server, filtered client-side by action label or entity type.
Read-only: nothing here updates or deletes an entry.
"""
from typing import Any, Dict, Optional

from .. import config
from ..models.db_models import LogLevel
from .base import EntityView

TABLE = "system_logs"

LEVEL_STYLE = {
    LogLevel.INFO: {"icon": "info", "badge": "bg-blue-100 text-blue-800"},
    LogLevel.WARNING: {"icon": "alert-triangle", "badge": "bg-yellow-100 text-yellow-800"},
    LogLevel.ERROR: {"icon": "alert-circle", "badge": "bg-orange-100 text-orange-800"},
    LogLevel.CRITICAL: {"icon": "x-circle", "badge": "bg-red-100 text-red-800"},
}

FALLBACK_LEVEL_STYLE = {"icon": "info", "badge": "bg-gray-100 text-gray-800"}


def level_style(level: Any) -> Dict[str, str]:
    try:
        parsed = LogLevel(getattr(level, "value", level))
    except ValueError:
        return dict(FALLBACK_LEVEL_STYLE)
    return dict(LEVEL_STYLE[parsed])


class LogsView(EntityView):
    name = "logs"
    search_fields = ("action", "entity_type")

    def __init__(self, *args, limit: Optional[int] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.level: Optional[LogLevel] = None
        self.limit = min(limit or config.LOG_ROW_LIMIT, config.MAX_LOG_ROWS)

    def set_level(self, level: Optional[Any]) -> None:
        """None (or "all") removes the level filter."""
        if level in (None, "", "all"):
            self.level = None
        else:
            self.level = LogLevel(getattr(level, "value", level))

    def fetch(self):
        filters = {"log_level": self.level.value} if self.level else None
        return self.client.select(TABLE, filters=filters, limit=self.limit)

    def present(self, row: Dict[str, Any]) -> Dict[str, Any]:
        details = row.get("details")
        message = details.get("message") if isinstance(details, dict) else None
        style = level_style(row.get("log_level"))
        return {
            **row,
            "message": str(message) if message is not None else None,
            "level_label": self.labels.log_level(row.get("log_level")),
            "icon": style["icon"],
            "badge": style["badge"],
            "created_display": self.labels.format_datetime(row.get("created_at"), "datetime_seconds"),
        }

    def state(self) -> Dict[str, Any]:
        visible = self.filtered
        return {
            "logs": [self.present(row) for row in visible],
            "total": len(self.rows),
            "visible": len(visible),
            "level": self.level.value if self.level else None,
            "search": self.search,
            "loading": self.loading,
        }
