"""
Eco Admin - Admin Users Router
Operator accounts: listed for every operator, writable by the admin role.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from ..auth import require_admin
from ..models.db_models import AdminRole, AdminUserDB
from ..services.audit import AuditTrail
from ..services.backend_client import BackendClient
from ..services.labels import Labels
from ..views import AdminUsersView
from .deps import get_client, get_audit, get_labels

router = APIRouter(prefix="/admin-users", tags=["admin-users"])


class AdminUserItem(BaseModel):
    id: str
    email: str
    full_name: str
    role: str
    role_label: str
    is_active: bool
    active_label: str
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None
    last_login_display: Optional[str] = None


class AdminUsersResponse(BaseModel):
    admin_users: List[AdminUserItem]
    total: int
    visible: int
    search: str
    loading: bool


class AdminUserMutationResponse(AdminUsersResponse):
    ok: bool


class UpdateAdminUserRequest(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1)
    role: Optional[AdminRole] = None
    is_active: Optional[bool] = None


@router.get("", response_model=AdminUsersResponse)
async def list_admin_users(
    search: Optional[str] = Query(None, description="Case-insensitive match on name or email"),
    client: BackendClient = Depends(get_client),
    labels: Labels = Depends(get_labels),
):
    view = AdminUsersView(client, labels=labels)
    view.set_search(search)
    view.load()
    return view.state()


@router.patch("/{admin_id}", response_model=AdminUserMutationResponse)
async def update_admin_user(
    admin_id: str,
    request: UpdateAdminUserRequest,
    admin: AdminUserDB = Depends(require_admin),
    client: BackendClient = Depends(get_client),
    audit: AuditTrail = Depends(get_audit),
    labels: Labels = Depends(get_labels),
):
    """Change name, role or active flag of an operator account."""
    fields = request.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        raise HTTPException(status_code=422, detail="No fields to update")

    view = AdminUsersView(client, labels=labels, audit=audit)
    view.load()
    if view.find(admin_id) is None:
        raise HTTPException(status_code=404, detail="Admin user not found")
    ok = view.update(admin_id, fields)
    return {**view.state(), "ok": ok}
