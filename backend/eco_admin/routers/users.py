"""
Eco Admin - Users Router
Project user list with search, active toggle, edit and create.
Every mutation answers with the re-fetched list.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, EmailStr, Field, field_validator

from ..services.audit import AuditTrail
from ..services.backend_client import BackendClient
from ..services.labels import Labels
from ..views import UsersView
from .deps import get_client, get_audit, get_labels

router = APIRouter(prefix="/users", tags=["users"])


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class ProjectUserItem(BaseModel):
    """Project user row as displayed in the users table."""
    id: str
    email: str
    full_name: str
    phone: Optional[str] = None
    is_active: bool
    reports_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    active_label: str
    created_display: Optional[str] = None


class UsersListResponse(BaseModel):
    users: List[ProjectUserItem]
    total: int
    active_count: int
    reports_total: int
    visible: int
    search: str
    loading: bool


class UserMutationResponse(UsersListResponse):
    """Outcome of a mutation plus the re-fetched list."""
    ok: bool
    editing_id: Optional[str] = None
    add_form_open: bool = False


class CreateUserRequest(BaseModel):
    email: EmailStr
    full_name: str = Field(..., min_length=1)
    phone: Optional[str] = None


class UpdateUserRequest(BaseModel):
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None

    @field_validator("email", "full_name")
    @classmethod
    def not_null(cls, value):
        # Omit the field to keep it; only phone may be cleared
        if value is None:
            raise ValueError("must not be null")
        return value


def _users_view(client: BackendClient, labels: Labels, audit: AuditTrail, search: Optional[str] = None) -> UsersView:
    view = UsersView(client, labels=labels, audit=audit)
    view.set_search(search)
    view.load()
    return view


def _mutation_response(view: UsersView, ok: bool) -> dict:
    return {**view.state(), "ok": ok}


# =============================================================================
# API ENDPOINTS
# =============================================================================

@router.get("", response_model=UsersListResponse)
async def list_users(
    search: Optional[str] = Query(None, description="Case-insensitive match on name, email or phone"),
    client: BackendClient = Depends(get_client),
    audit: AuditTrail = Depends(get_audit),
    labels: Labels = Depends(get_labels),
):
    """All project users, newest first, filtered by the search text."""
    view = _users_view(client, labels, audit, search)
    return view.state()


@router.post("", response_model=UserMutationResponse)
async def create_user(
    request: CreateUserRequest,
    client: BackendClient = Depends(get_client),
    audit: AuditTrail = Depends(get_audit),
    labels: Labels = Depends(get_labels),
):
    """Add a project user from the email / name / phone form."""
    view = _users_view(client, labels, audit)
    view.open_add_form()
    created = view.add_user(request.email, request.full_name, request.phone)
    return _mutation_response(view, created is not None)


@router.patch("/{user_id}", response_model=UserMutationResponse)
async def update_user(
    user_id: str,
    request: UpdateUserRequest,
    client: BackendClient = Depends(get_client),
    audit: AuditTrail = Depends(get_audit),
    labels: Labels = Depends(get_labels),
):
    """Replace the submitted editable fields of one user."""
    view = _users_view(client, labels, audit)
    if not view.start_edit(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    ok = view.save_edit(request.model_dump(exclude_unset=True))
    return _mutation_response(view, ok)


@router.post("/{user_id}/toggle-active", response_model=UserMutationResponse)
async def toggle_user_active(
    user_id: str,
    client: BackendClient = Depends(get_client),
    audit: AuditTrail = Depends(get_audit),
    labels: Labels = Depends(get_labels),
):
    """Flip the active flag of one user."""
    view = _users_view(client, labels, audit)
    if view.find(user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")
    ok = view.toggle_active(user_id)
    return _mutation_response(view, ok)
