"""
Eco Admin - Logs Router
Read-only view over the most recent system log entries.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ..models.db_models import LogLevel
from ..services.backend_client import BackendClient
from ..services.labels import Labels
from ..views import LogsView
from .deps import get_client, get_labels

router = APIRouter(prefix="/logs", tags=["logs"])


class LogEntryItem(BaseModel):
    id: str
    log_level: str
    level_label: str
    icon: str
    badge: str
    action: str
    message: Optional[str] = None
    user_id: Optional[str] = None
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    created_at: Optional[datetime] = None
    created_display: Optional[str] = None


class LogsResponse(BaseModel):
    logs: List[LogEntryItem]
    total: int
    visible: int
    level: Optional[str] = None
    search: str
    loading: bool


@router.get("", response_model=LogsResponse)
async def list_logs(
    level: Optional[LogLevel] = Query(None, description="Only entries of this level"),
    search: Optional[str] = Query(None, description="Case-insensitive match on action or entity type"),
    client: BackendClient = Depends(get_client),
    labels: Labels = Depends(get_labels),
):
    """Up to the configured cap of most recent entries, newest first."""
    view = LogsView(client, labels=labels)
    view.set_level(level)
    view.set_search(search)
    view.load()
    return view.state()
