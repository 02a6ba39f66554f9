"""
Eco Admin - Dashboard Router
Shell navigation: the views an operator can switch between.
"""
from typing import List

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ..auth import get_current_admin
from ..models.db_models import AdminUserDB
from ..services.labels import Labels
from ..views import build_navigation
from ..views.navigation import DEFAULT_VIEW
from .deps import get_labels

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


class NavigationItem(BaseModel):
    id: str
    label: str
    icon: str
    active: bool


class Operator(BaseModel):
    id: str
    email: str
    full_name: str
    role: str


class DashboardResponse(BaseModel):
    title: str
    subtitle: str
    current: str
    items: List[NavigationItem]
    operator: Operator


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    view: str = Query(DEFAULT_VIEW, description="Mounted view: map, logs or users"),
    admin: AdminUserDB = Depends(get_current_admin),
    labels: Labels = Depends(get_labels),
):
    return {
        **build_navigation(labels, view),
        "operator": {
            "id": admin.id,
            "email": admin.email,
            "full_name": admin.full_name,
            "role": admin.role,
        },
    }
