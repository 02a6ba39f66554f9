"""
Map marker descriptors for the external map widget.

The widget takes a center, a zoom level and a list of
(coordinate, preset, popup) descriptors and reports clicks by marker id.
"""
from html import escape
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .. import config
from ..models.db_models import TrashStatus
from .labels import Labels
from .status_workflow import marker_color, marker_preset


def map_config() -> Dict[str, Any]:
    return {
        "center": [config.MAP_CENTER_LAT, config.MAP_CENTER_LON],
        "zoom": config.MAP_ZOOM,
        "controls": ["zoomControl", "fullscreenControl"],
    }


def popup_html(location: Mapping, labels: Labels) -> str:
    return (
        '<div style="padding: 8px;">'
        f"<strong>{escape(str(location.get('description') or ''))}</strong><br/>"
        f'<span style="color: #666;">{escape(labels.label("popup", "type"))}: '
        f"{escape(labels.trash_type(location.get('trash_type')))}</span><br/>"
        f'<span style="color: #666;">{escape(labels.label("popup", "status"))}: '
        f"{escape(labels.status(location.get('status')))}</span>"
        "</div>"
    )


def build_marker(location: Mapping, labels: Labels) -> Dict[str, Any]:
    status = location.get("status")
    return {
        "id": location["id"],
        "coordinates": [float(location["latitude"]), float(location["longitude"])],
        "preset": marker_preset(status),
        "color": marker_color(status),
        "popup": popup_html(location, labels),
    }


def build_markers(locations: Iterable[Mapping], labels: Labels) -> List[Dict[str, Any]]:
    return [build_marker(location, labels) for location in locations]


def legend(labels: Labels) -> List[Dict[str, str]]:
    return [
        {"status": status.value, "label": labels.status(status), "color": marker_color(status)}
        for status in TrashStatus
    ]


def resolve_click(locations: Iterable[Mapping], marker_id: str) -> Optional[Mapping]:
    """Row behind a clicked marker, or None when it is no longer displayed."""
    for location in locations:
        if location["id"] == marker_id:
            return location
    return None
