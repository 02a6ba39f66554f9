"""
Shared fixtures: an in-memory SQLite backend, service-role and operator
clients, seeded rows, and an authenticated API client.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from eco_admin.auth import create_access_token
from eco_admin.database import Base, get_db
from eco_admin.main import app
from eco_admin.models import db_models  # noqa: F401  (registers tables)
from eco_admin.services.backend_client import BackendClient
from eco_admin.services.labels import load_labels


BASE_TIME = datetime(2025, 10, 7, 12, 0, 0)


# =============================================================================
# DATABASE
# =============================================================================

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def service(db):
    """Service-role client used to arrange rows."""
    return BackendClient.service(db)


@pytest.fixture
def labels():
    return load_labels("ru")


# =============================================================================
# OPERATORS
# =============================================================================

def _make_admin(service, email, role, is_active=True, minutes=0):
    return service.insert("admin_users", {
        "email": email,
        "full_name": email.split("@")[0].title(),
        "role": role,
        "is_active": is_active,
        "created_at": BASE_TIME + timedelta(minutes=minutes),
    })


@pytest.fixture
def admin_row(service):
    return _make_admin(service, "admin@eco-project.ru", "admin", minutes=0)


@pytest.fixture
def viewer_row(service):
    return _make_admin(service, "viewer@eco-project.ru", "viewer", minutes=1)


@pytest.fixture
def inactive_row(service):
    return _make_admin(service, "former@eco-project.ru", "moderator", is_active=False, minutes=2)


@pytest.fixture
def operator(db, admin_row):
    """Client bound to the active admin, as the API builds it per request."""
    from eco_admin.models.db_models import AdminUserDB
    actor = db.get(AdminUserDB, admin_row["id"])
    return BackendClient(db, actor=actor)


@pytest.fixture
def viewer(db, viewer_row):
    from eco_admin.models.db_models import AdminUserDB
    actor = db.get(AdminUserDB, viewer_row["id"])
    return BackendClient(db, actor=actor)


# =============================================================================
# SAMPLE DATA
# =============================================================================

@pytest.fixture
def project_users(service):
    """Three users, newest first once ordered by created_at desc: Алексей, Мария, Иван."""
    rows = []
    for minutes, (email, name, phone) in enumerate([
        ("user1@example.com", "Иван Петров", "+7 999 123-45-67"),
        ("user2@example.com", "Мария Сидорова", "+7 999 234-56-78"),
        ("user3@example.com", "Алексей Козлов", None),
    ]):
        rows.append(service.insert("project_users", {
            "email": email,
            "full_name": name,
            "phone": phone,
            "created_at": BASE_TIME + timedelta(minutes=minutes),
            "updated_at": BASE_TIME + timedelta(minutes=minutes),
        }))
    return rows


@pytest.fixture
def locations(service, project_users):
    """One report per status; the first two belong to Иван."""
    reports = [
        (project_users[0]["id"], "reported", "plastic", "high", "Большая куча пластиковых бутылок"),
        (project_users[0]["id"], "in_progress", "metal", "medium", "Строительный мусор на обочине"),
        (project_users[1]["id"], "cleaned", "mixed", "low", "Несанкционированная свалка"),
        (None, "rejected", "other", "medium", "Мусор в лесополосе"),
    ]
    rows = []
    for minutes, (user_id, status, trash_type, priority, description) in enumerate(reports):
        values = {
            "user_id": user_id,
            "latitude": 55.75 + minutes * 0.01,
            "longitude": 37.61 + minutes * 0.01,
            "description": description,
            "trash_type": trash_type,
            "status": status,
            "priority": priority,
            "created_at": BASE_TIME + timedelta(minutes=minutes),
            "updated_at": BASE_TIME + timedelta(minutes=minutes),
        }
        if status == "cleaned":
            values["cleaned_at"] = BASE_TIME + timedelta(minutes=minutes)
        rows.append(service.insert("trash_locations", values))
    return rows


@pytest.fixture
def log_entries(service):
    entries = [
        ("info", "user_login", "admin_users", "Успешный вход в систему"),
        ("info", "trash_location_created", "trash_locations", "Создана новая метка мусора"),
        ("warning", "failed_login_attempt", "admin_users", "Неудачная попытка входа"),
        ("info", "user_updated", "project_users", "Обновлены данные пользователя"),
        ("error", "database_connection_error", "system", "Ошибка подключения к базе данных"),
    ]
    return [
        service.insert("system_logs", {
            "log_level": level,
            "action": action,
            "entity_type": entity_type,
            "details": {"message": message},
            "created_at": BASE_TIME + timedelta(minutes=minutes),
        })
        for minutes, (level, action, entity_type, message) in enumerate(entries)
    ]


# =============================================================================
# API
# =============================================================================

@pytest.fixture
def api(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def bearer(row):
    return {"Authorization": f"Bearer {create_access_token(row['id'], row['email'])}"}


@pytest.fixture
def admin_headers(admin_row):
    return bearer(admin_row)


@pytest.fixture
def viewer_headers(viewer_row):
    return bearer(viewer_row)
