"""
Eco Admin - Authentication Utilities
Bearer JWT verification and admin-role dependencies.

Sign-in itself happens in the external auth service; it mints tokens with
the shared secret and the admin user id as subject.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from .config import JWT_SECRET_KEY, JWT_ALGORITHM
from .database import get_db
from .models.db_models import AdminUserDB, AdminRole

logger = logging.getLogger(__name__)

ACCESS_TOKEN_EXPIRE_HOURS = 24

# Bearer token security
security = HTTPBearer()


def create_access_token(admin_id: str, email: str, expires_in: timedelta = timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS)) -> str:
    """Mint a token the way the auth service does (dev tooling and tests)."""
    expire = datetime.now(timezone.utc) + expires_in
    to_encode = {
        "sub": admin_id,
        "email": email,
        "exp": expire,
    }
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT token (signature and expiry)."""
    try:
        return jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None


async def get_current_admin(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> AdminUserDB:
    """
    Dependency to get the current authenticated operator.
    Validates the JWT and requires an active admin_users row.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise credentials_exception

    admin_id: str = payload.get("sub")
    if admin_id is None:
        raise credentials_exception

    admin = db.query(AdminUserDB).filter(AdminUserDB.id == admin_id).first()
    if admin is None:
        raise credentials_exception

    if not admin.is_active:
        logger.warning("Rejected token for inactive admin %s", admin_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin account is inactive"
        )

    return admin


async def require_admin(current_admin: AdminUserDB = Depends(get_current_admin)) -> AdminUserDB:
    """
    Dependency to require the admin role.
    Use this on routes that write admin accounts.
    """
    if current_admin.role != AdminRole.ADMIN.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_admin
