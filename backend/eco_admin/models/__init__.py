"""Eco Admin - Data Models"""
from .db_models import (
    # Enums
    AdminRole, TrashType, TrashStatus, Priority, LogLevel,
    # Tables
    AdminUserDB, ProjectUserDB, TrashLocationDB, SystemLogDB,
    utcnow,
)

__all__ = [
    "AdminRole", "TrashType", "TrashStatus", "Priority", "LogLevel",
    "AdminUserDB", "ProjectUserDB", "TrashLocationDB", "SystemLogDB",
    "utcnow",
]
