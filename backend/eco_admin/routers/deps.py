"""
Shared router dependencies: one backend client per request, bound to the
authenticated operator, plus the audit trail and locale tables.
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ..auth import get_current_admin
from ..database import get_db
from ..models.db_models import AdminUserDB
from ..services.audit import AuditTrail
from ..services.backend_client import BackendClient
from ..services.labels import Labels, load_labels


def get_client(
    db: Session = Depends(get_db),
    admin: AdminUserDB = Depends(get_current_admin),
) -> BackendClient:
    return BackendClient(db, actor=admin)


def get_audit(request: Request, client: BackendClient = Depends(get_client)) -> AuditTrail:
    ip_address = request.client.host if request.client else None
    return AuditTrail(client, ip_address=ip_address)


def get_labels() -> Labels:
    return load_labels()
