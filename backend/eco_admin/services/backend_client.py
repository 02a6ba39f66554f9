"""
Backend Client

Thin table gateway used by every view: select-with-filter-and-order,
insert-one and update-by-identity over the four tables.

Row-level policies of the hosted backend are evaluated here, before any SQL
runs. A client is bound to the acting admin; maintenance scripts use the
service role, which bypasses the policies (but still cannot rewrite the
audit log).
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional

from sqlalchemy import desc, asc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.db_models import (
    AdminRole, TrashType, TrashStatus, Priority, LogLevel,
    AdminUserDB, ProjectUserDB, TrashLocationDB, SystemLogDB,
)

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Raised when a query or mutation against the backend fails."""
    pass


class PermissionDenied(BackendError):
    """Raised when the acting admin is not allowed to perform an operation."""
    pass


class RowNotFound(BackendError):
    """Raised when an update targets an identity that does not exist."""
    pass


TABLES = {
    "admin_users": AdminUserDB,
    "project_users": ProjectUserDB,
    "trash_locations": TrashLocationDB,
    "system_logs": SystemLogDB,
}

# Closed value sets per column
ENUM_COLUMNS = {
    ("admin_users", "role"): AdminRole,
    ("trash_locations", "trash_type"): TrashType,
    ("trash_locations", "status"): TrashStatus,
    ("trash_locations", "priority"): Priority,
    ("system_logs", "log_level"): LogLevel,
}

IMMUTABLE_COLUMNS = {"id", "created_at"}


# =============================================================================
# ROW-LEVEL POLICIES
# =============================================================================

def _active_admin(actor: Optional[AdminUserDB]) -> bool:
    return actor is not None and bool(actor.is_active)


def _admin_role(actor: Optional[AdminUserDB]) -> bool:
    return _active_admin(actor) and actor.role == AdminRole.ADMIN.value


# (table, operation) -> predicate over the acting admin. Missing entries deny.
POLICIES: Dict[tuple, Callable[[Optional[AdminUserDB]], bool]] = {
    ("admin_users", "select"): _active_admin,
    ("admin_users", "update"): _admin_role,
    ("project_users", "select"): _active_admin,
    ("project_users", "insert"): _active_admin,
    ("project_users", "update"): _active_admin,
    ("trash_locations", "select"): _active_admin,
    ("trash_locations", "update"): _active_admin,
    ("system_logs", "select"): _active_admin,
    ("system_logs", "insert"): _active_admin,
}

# Operations nobody may perform, service role included
FORBIDDEN = {
    ("system_logs", "update"),
}


def _embed_project_user_name():
    return (
        select(ProjectUserDB.full_name)
        .where(ProjectUserDB.id == TrashLocationDB.user_id)
        .scalar_subquery()
    )


def _embed_reports_count():
    return (
        select(func.count(TrashLocationDB.id))
        .where(TrashLocationDB.user_id == ProjectUserDB.id)
        .scalar_subquery()
    )


# (table, embed name) -> (result key, correlated column factory)
EMBEDS = {
    ("trash_locations", "project_users"): ("project_user_name", _embed_project_user_name),
    ("project_users", "reports_count"): ("reports_count", _embed_reports_count),
}


class BackendClient:
    """
    Query/mutation gateway bound to one session and one acting admin.

    Rows are returned as plain dicts (column name -> value). Every failure
    surfaces as BackendError; the session is rolled back first.
    """

    def __init__(self, db: Session, actor: Optional[AdminUserDB] = None, service_role: bool = False):
        self.db = db
        self.actor = actor
        self.service_role = service_role

    @classmethod
    def service(cls, db: Session) -> "BackendClient":
        """Client for maintenance scripts; bypasses row-level policies."""
        return cls(db, actor=None, service_role=True)

    @property
    def actor_id(self) -> Optional[str]:
        return self.actor.id if self.actor is not None else None

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: str = "created_at",
        descending: bool = True,
        limit: Optional[int] = None,
        embed: Iterable[str] = (),
    ) -> List[Dict[str, Any]]:
        """All rows of table matching every equality filter, ordered and capped."""
        model = self._model(table)
        self._authorize(table, "select")
        filters = filters or {}
        for column in list(filters) + [order_by]:
            self._column(model, table, column)
        extras = [self._embed(table, name) for name in embed]

        try:
            query = self.db.query(model, *[factory().label(key) for key, factory in extras])
            for column, value in filters.items():
                query = query.filter(getattr(model, column) == _token(value))
            order_column = getattr(model, order_by)
            query = query.order_by(desc(order_column) if descending else asc(order_column))
            if limit is not None:
                query = query.limit(limit)
            results = query.all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendError(f"select on {table} failed: {e}") from e

        rows = []
        for result in results:
            if extras:
                row = result[0].as_row()
                for (key, _), value in zip(extras, result[1:]):
                    row[key] = value
            else:
                row = result.as_row()
            rows.append(row)
        return rows

    def get(self, table: str, row_id: str) -> Dict[str, Any]:
        """Single row by identity."""
        model = self._model(table)
        self._authorize(table, "select")
        try:
            obj = self.db.get(model, row_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendError(f"get on {table} failed: {e}") from e
        if obj is None:
            raise RowNotFound(f"{table} row {row_id} not found")
        return obj.as_row()

    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row; identity and defaults are assigned by the backend."""
        model = self._model(table)
        self._authorize(table, "insert")
        if "id" in values and not self.service_role:
            raise BackendError("identities are assigned by the backend")
        clean = self._clean(model, table, values, allow_id=self.service_role)

        obj = model(**clean)
        try:
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendError(f"insert into {table} failed: {e}") from e
        logger.debug("Inserted %s row %s", table, obj.id)
        return obj.as_row()

    def update(self, table: str, row_id: str, values: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the given fields of one row."""
        model = self._model(table)
        self._authorize(table, "update")
        clean = self._clean(model, table, values)

        try:
            obj = self.db.get(model, row_id)
            if obj is None:
                raise RowNotFound(f"{table} row {row_id} not found")
            if "updated_at" in clean:
                clean["updated_at"] = _monotonic(obj.updated_at, clean["updated_at"])
            for column, value in clean.items():
                setattr(obj, column, value)
            self.db.commit()
            self.db.refresh(obj)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendError(f"update of {table} row {row_id} failed: {e}") from e
        logger.debug("Updated %s row %s: %s", table, row_id, sorted(clean))
        return obj.as_row()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _model(self, table: str):
        model = TABLES.get(table)
        if model is None:
            raise BackendError(f"Unknown table: {table}")
        return model

    def _authorize(self, table: str, operation: str) -> None:
        if (table, operation) in FORBIDDEN:
            raise PermissionDenied(f"{operation} on {table} is not permitted")
        if self.service_role:
            return
        policy = POLICIES.get((table, operation))
        if policy is None or not policy(self.actor):
            raise PermissionDenied(
                f"{operation} on {table} denied for {self.actor_id or 'anonymous'}"
            )

    def _column(self, model, table: str, column: str) -> None:
        if column not in model.__table__.columns:
            raise BackendError(f"Unknown column {table}.{column}")

    def _embed(self, table: str, name: str):
        embed = EMBEDS.get((table, name))
        if embed is None:
            raise BackendError(f"Unknown embed {name} for {table}")
        return embed

    def _clean(self, model, table: str, values: Dict[str, Any], allow_id: bool = False) -> Dict[str, Any]:
        clean = {}
        for column, value in values.items():
            self._column(model, table, column)
            if column in IMMUTABLE_COLUMNS and not allow_id:
                raise BackendError(f"{table}.{column} cannot be written")
            enum_cls = ENUM_COLUMNS.get((table, column))
            if enum_cls is not None:
                value = _token(value)
                if value not in {member.value for member in enum_cls}:
                    raise BackendError(f"{value!r} is not a valid {table}.{column}")
            clean[column] = value
        return clean


def _token(value: Any) -> Any:
    """Enum members are stored as their raw tokens."""
    return getattr(value, "value", value)


def _monotonic(previous: Optional[datetime], stamp: datetime) -> datetime:
    # Update stamps on one row strictly increase even within clock resolution
    if previous is not None and stamp <= previous:
        return previous + timedelta(microseconds=1)
    return stamp
