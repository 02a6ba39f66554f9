"""
Dashboard shell: which entity view is mounted.
"""
from typing import Any, Dict

from ..services.labels import Labels

VIEWS = ("map", "logs", "users")
DEFAULT_VIEW = "map"

ICONS = {
    "map": "map-pin",
    "logs": "file-text",
    "users": "users",
}


def build_navigation(labels: Labels, current: str = DEFAULT_VIEW) -> Dict[str, Any]:
    if current not in VIEWS:
        current = DEFAULT_VIEW
    return {
        "title": labels.label("app", "title"),
        "subtitle": labels.label("app", "subtitle"),
        "current": current,
        "items": [
            {
                "id": view,
                "label": labels.label("navigation", view),
                "icon": ICONS[view],
                "active": view == current,
            }
            for view in VIEWS
        ],
    }
