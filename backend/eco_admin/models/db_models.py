"""
Eco Admin - SQLAlchemy ORM Models
Tables of the hosted backend: admin_users, project_users, trash_locations, system_logs
"""
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from sqlalchemy import (
    Column, String, Integer, Numeric, DateTime, Text, JSON, Boolean, ForeignKey,
    CheckConstraint, Index, inspect,
)
from sqlalchemy.orm import relationship

from ..database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp, the storage convention for every timestamp column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid4())


# =============================================================================
# CLOSED ENUMS
# =============================================================================

class AdminRole(str, Enum):
    """Authorization tier of an admin account."""
    ADMIN = "admin"
    MODERATOR = "moderator"
    VIEWER = "viewer"


class TrashType(str, Enum):
    PLASTIC = "plastic"
    METAL = "metal"
    GLASS = "glass"
    ORGANIC = "organic"
    ELECTRONIC = "electronic"
    MIXED = "mixed"
    OTHER = "other"


class TrashStatus(str, Enum):
    """Lifecycle of a trash report. Every state may move to every other state."""
    REPORTED = "reported"
    IN_PROGRESS = "in_progress"
    CLEANED = "cleaned"
    REJECTED = "rejected"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class LogLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _in_set(column: str, enum_cls) -> str:
    values = ", ".join(f"'{member.value}'" for member in enum_cls)
    return f"{column} IN ({values})"


class RowMixin:
    """Flat dict view of a row, the shape every view works with."""

    def as_row(self) -> dict:
        return {attr.key: getattr(self, attr.key) for attr in inspect(self).mapper.column_attrs}


# =============================================================================
# TABLES
# =============================================================================

class AdminUserDB(RowMixin, Base):
    """Operator account. Identity is shared with the external auth service."""
    __tablename__ = "admin_users"
    __table_args__ = (
        CheckConstraint(_in_set("role", AdminRole), name="ck_admin_users_role"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=AdminRole.VIEWER.value)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)
    last_login = Column(DateTime, nullable=True)


class ProjectUserDB(RowMixin, Base):
    """Citizen account of the reporting application."""
    __tablename__ = "project_users"
    __table_args__ = (
        Index("idx_project_users_active", "is_active"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    # Cached counter; reads derive the live value from trash_locations
    reports_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)

    locations = relationship("TrashLocationDB", back_populates="project_user", passive_deletes=True)


class TrashLocationDB(RowMixin, Base):
    """Geotagged trash report."""
    __tablename__ = "trash_locations"
    __table_args__ = (
        CheckConstraint(_in_set("trash_type", TrashType), name="ck_trash_locations_type"),
        CheckConstraint(_in_set("status", TrashStatus), name="ck_trash_locations_status"),
        CheckConstraint(_in_set("priority", Priority), name="ck_trash_locations_priority"),
        Index("idx_trash_locations_status", "status"),
        Index("idx_trash_locations_created_at", "created_at"),
        Index("idx_trash_locations_user_id", "user_id"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("project_users.id", ondelete="SET NULL"), nullable=True)
    latitude = Column(Numeric(10, 8, asdecimal=False), nullable=False)
    longitude = Column(Numeric(11, 8, asdecimal=False), nullable=False)
    description = Column(Text, nullable=False)
    trash_type = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default=TrashStatus.REPORTED.value)
    priority = Column(String(20), nullable=False, default=Priority.MEDIUM.value)
    image_url = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)
    cleaned_at = Column(DateTime, nullable=True)  # Set on entry into "cleaned", never cleared

    project_user = relationship("ProjectUserDB", back_populates="locations")


class SystemLogDB(RowMixin, Base):
    """Append-only audit entry. Rows are never updated or deleted."""
    __tablename__ = "system_logs"
    __table_args__ = (
        CheckConstraint(_in_set("log_level", LogLevel), name="ck_system_logs_level"),
        Index("idx_system_logs_level", "log_level"),
        Index("idx_system_logs_created_at", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    log_level = Column(String(20), nullable=False)
    action = Column(String(255), nullable=False)
    user_id = Column(String(36), nullable=True)
    entity_type = Column(String(100), nullable=True)
    entity_id = Column(String(36), nullable=True)
    details = Column(JSON, nullable=False, default=dict)
    ip_address = Column(String(64), nullable=True)
    created_at = Column(DateTime, default=utcnow)
