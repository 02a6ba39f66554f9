"""
Trash Report Status Workflow

States: reported, in_progress, cleaned, rejected. New reports start in
"reported". The operator may move a report from any state to any other
state; the graph is fully connected, not a forward-only pipeline.

A transition writes exactly three things: status, updated_at and (only
when the target is "cleaned") cleaned_at. Leaving "cleaned" never clears
cleaned_at.

Presentation tables (marker preset, color, icon, badge classes) are total
over the closed enums and fall back to a neutral style for unknown tokens.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..models.db_models import TrashStatus, Priority, utcnow
from .labels import Labels


class InvalidTransition(ValueError):
    """Raised when a transition targets a token outside the status enum."""
    pass


INITIAL_STATUS = TrashStatus.REPORTED

# Order in which actions are offered in the detail panel
ACTION_ORDER = [
    TrashStatus.IN_PROGRESS,
    TrashStatus.CLEANED,
    TrashStatus.REJECTED,
    TrashStatus.REPORTED,
]

STATUS_STYLE = {
    TrashStatus.REPORTED: {
        "color": "red",
        "preset": "islands#redIcon",
        "icon": "map-pin",
        "badge": "bg-red-100 text-red-800",
        "button": "bg-red-500 hover:bg-red-600",
    },
    TrashStatus.IN_PROGRESS: {
        "color": "blue",
        "preset": "islands#blueIcon",
        "icon": "clock",
        "badge": "bg-blue-100 text-blue-800",
        "button": "bg-blue-500 hover:bg-blue-600",
    },
    TrashStatus.CLEANED: {
        "color": "green",
        "preset": "islands#greenIcon",
        "icon": "check-circle",
        "badge": "bg-green-100 text-green-800",
        "button": "bg-green-500 hover:bg-green-600",
    },
    TrashStatus.REJECTED: {
        "color": "gray",
        "preset": "islands#grayIcon",
        "icon": "x-circle",
        "badge": "bg-gray-100 text-gray-800",
        "button": "bg-gray-500 hover:bg-gray-600",
    },
}

# Unknown status tokens render like a fresh report, badge in neutral gray
FALLBACK_STYLE = {
    "color": "red",
    "preset": "islands#redIcon",
    "icon": "map-pin",
    "badge": "bg-gray-100 text-gray-800",
    "button": "bg-gray-500 hover:bg-gray-600",
}

PRIORITY_BADGE = {
    Priority.HIGH: "bg-red-100 text-red-800",
    Priority.MEDIUM: "bg-yellow-100 text-yellow-800",
    Priority.LOW: "bg-green-100 text-green-800",
}


def _parse_status(value: Any) -> Optional[TrashStatus]:
    try:
        return TrashStatus(getattr(value, "value", value))
    except ValueError:
        return None


def status_style(status: Any) -> Dict[str, str]:
    parsed = _parse_status(status)
    return dict(STATUS_STYLE.get(parsed, FALLBACK_STYLE))


def marker_color(status: Any) -> str:
    return status_style(status)["color"]


def marker_preset(status: Any) -> str:
    return status_style(status)["preset"]


def status_icon(status: Any) -> str:
    return status_style(status)["icon"]


def priority_badge(priority: Any) -> str:
    try:
        parsed = Priority(getattr(priority, "value", priority))
    except ValueError:
        return "bg-gray-100 text-gray-800"
    return PRIORITY_BADGE[parsed]


def available_transitions(current: Any) -> List[TrashStatus]:
    """Every status other than the current one."""
    parsed = _parse_status(current)
    return [status for status in ACTION_ORDER if status != parsed]


def status_actions(current: Any, labels: Labels) -> List[Dict[str, str]]:
    """Buttons offered in the detail panel for a report in the given status."""
    return [
        {
            "status": status.value,
            "label": labels.status_action(status),
            "style": STATUS_STYLE[status]["button"],
        }
        for status in available_transitions(current)
    ]


def build_transition(target: Any, now: Optional[datetime] = None, current: Any = None) -> Dict[str, Any]:
    """
    Update payload moving a report from current to target.

    Raises InvalidTransition when target is not a status token, or when it
    equals the current status (re-selecting the current state is not a move).
    """
    parsed = _parse_status(target)
    if parsed is None:
        raise InvalidTransition(f"Unknown status: {target!r}")
    if current is not None and parsed not in available_transitions(current):
        raise InvalidTransition(f"Report is already {parsed.value}")
    now = now or utcnow()
    updates = {"status": parsed.value, "updated_at": now}
    if parsed == TrashStatus.CLEANED:
        updates["cleaned_at"] = now
    return updates
