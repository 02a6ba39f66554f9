"""
Eco Admin - Map Router
Trash report markers, the marker detail panel and status transitions.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ..models.db_models import TrashStatus
from ..services.audit import AuditTrail
from ..services.backend_client import BackendClient
from ..services.labels import Labels
from ..services.status_workflow import InvalidTransition
from ..views import MapView
from .deps import get_client, get_audit, get_labels

router = APIRouter(prefix="/map", tags=["map"])


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class MapSettings(BaseModel):
    center: List[float]
    zoom: int
    controls: List[str]


class Marker(BaseModel):
    """Descriptor handed to the map widget."""
    id: str
    coordinates: List[float]
    preset: str
    color: str
    popup: str


class LegendItem(BaseModel):
    status: str
    label: str
    color: str


class StatusAction(BaseModel):
    status: str
    label: str
    style: str


class LocationDetail(BaseModel):
    """Detail panel for one clicked marker."""
    id: str
    user_id: Optional[str] = None
    project_user_name: Optional[str] = None
    latitude: float
    longitude: float
    description: str
    trash_type: str
    trash_type_label: str
    status: str
    status_label: str
    status_icon: str
    status_badge: str
    priority: str
    priority_label: str
    priority_badge: str
    image_url: Optional[str] = None
    coordinates_display: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    cleaned_at: Optional[datetime] = None
    created_display: Optional[str] = None
    cleaned_display: Optional[str] = None
    actions: List[StatusAction]


class MapResponse(BaseModel):
    map: MapSettings
    markers: List[Marker]
    legend: List[LegendItem]
    total: int
    status: Optional[str] = None
    loading: bool
    selected: Optional[LocationDetail] = None


class StatusChangeResponse(MapResponse):
    ok: bool


class StatusChangeRequest(BaseModel):
    status: TrashStatus


def _map_view(client: BackendClient, labels: Labels, audit: AuditTrail, status: Optional[TrashStatus] = None) -> MapView:
    view = MapView(client, labels=labels, audit=audit)
    view.set_status_filter(status)
    view.load()
    return view


# =============================================================================
# API ENDPOINTS
# =============================================================================

@router.get("", response_model=MapResponse)
async def get_map(
    status: Optional[TrashStatus] = Query(None, description="Show only reports in this status"),
    client: BackendClient = Depends(get_client),
    audit: AuditTrail = Depends(get_audit),
    labels: Labels = Depends(get_labels),
):
    """Map settings, markers and legend for every report (newest first)."""
    view = _map_view(client, labels, audit, status)
    return view.state()


@router.get("/locations/{location_id}", response_model=LocationDetail)
async def get_location_detail(
    location_id: str,
    client: BackendClient = Depends(get_client),
    audit: AuditTrail = Depends(get_audit),
    labels: Labels = Depends(get_labels),
):
    """Detail panel for a clicked marker, with the status actions on offer."""
    view = _map_view(client, labels, audit)
    if view.select(location_id) is None:
        raise HTTPException(status_code=404, detail="Location not found")
    return view.detail()


@router.post("/locations/{location_id}/status", response_model=StatusChangeResponse)
async def change_location_status(
    location_id: str,
    request: StatusChangeRequest,
    status: Optional[TrashStatus] = Query(None, description="Active status filter to re-fetch with"),
    client: BackendClient = Depends(get_client),
    audit: AuditTrail = Depends(get_audit),
    labels: Labels = Depends(get_labels),
):
    """
    Move a report to another status.
    On success the markers are re-fetched and the detail panel is closed.
    """
    view = _map_view(client, labels, audit, status)
    # Only a displayed marker can be opened and acted on
    if view.select(location_id) is None:
        raise HTTPException(status_code=404, detail="Location not found")
    try:
        ok = view.change_status(location_id, request.status)
    except InvalidTransition as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {**view.state(), "ok": ok}
