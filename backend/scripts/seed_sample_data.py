#!/usr/bin/env python3
"""
Sample Data Seed Script
Creates the demo operator, project users, trash reports around Moscow and a
few log entries, then prints a bearer token for the demo operator.

Usage:
    python -m scripts.seed_sample_data [admin_email]

Example:
    python -m scripts.seed_sample_data admin@eco-project.ru
"""
import logging
import random
import sys
import os

# Add the parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from eco_admin.auth import create_access_token
from eco_admin.database import SessionLocal, init_db
from eco_admin.models.db_models import TrashStatus, utcnow
from eco_admin.services.backend_client import BackendClient, BackendError

DEMO_ADMIN_ID = "00000000-0000-0000-0000-000000000001"

PROJECT_USERS = [
    {"email": "user1@example.com", "full_name": "Иван Петров", "phone": "+7 999 123-45-67"},
    {"email": "user2@example.com", "full_name": "Мария Сидорова", "phone": "+7 999 234-56-78"},
    {"email": "user3@example.com", "full_name": "Алексей Козлов", "phone": "+7 999 345-67-89"},
]

DESCRIPTIONS = [
    "Большая куча пластиковых бутылок",
    "Строительный мусор на обочине",
    "Несанкционированная свалка",
    "Мусор в лесополосе",
]

SAMPLE_LOGS = [
    ("info", "user_login", DEMO_ADMIN_ID, "admin_users", "Успешный вход в систему"),
    ("info", "trash_location_created", None, "trash_locations", "Создана новая метка мусора"),
    ("warning", "failed_login_attempt", None, "admin_users", "Неудачная попытка входа"),
    ("info", "user_updated", DEMO_ADMIN_ID, "project_users", "Обновлены данные пользователя"),
    ("error", "database_connection_error", None, "system", "Ошибка подключения к базе данных"),
]


def _existing(client: BackendClient, table: str, email: str):
    rows = client.select(table, filters={"email": email})
    return rows[0] if rows else None


def seed(admin_email: str) -> str:
    """Insert the sample rows (skipping ones already present) and return a demo token."""
    init_db()
    db = SessionLocal()
    client = BackendClient.service(db)
    try:
        if _existing(client, "admin_users", admin_email) is None:
            client.insert("admin_users", {
                "id": DEMO_ADMIN_ID,
                "email": admin_email,
                "full_name": "Главный Администратор",
                "role": "admin",
                "is_active": True,
            })
            print(f"Created admin user {admin_email}")
        admin = _existing(client, "admin_users", admin_email)

        for user in PROJECT_USERS:
            existing = _existing(client, "project_users", user["email"])
            if existing is not None:
                print(f"Project user {user['email']} already exists")
                continue
            created = client.insert("project_users", user)
            status = random.choice([TrashStatus.REPORTED, TrashStatus.IN_PROGRESS, TrashStatus.CLEANED])
            location = {
                "user_id": created["id"],
                "latitude": 55.7558 + (random.random() * 0.1 - 0.05),
                "longitude": 37.6173 + (random.random() * 0.1 - 0.05),
                "description": random.choice(DESCRIPTIONS),
                "trash_type": random.choice(["plastic", "metal", "mixed", "other"]),
                "status": status.value,
                "priority": random.choice(["medium", "high"]),
            }
            if status == TrashStatus.CLEANED:
                location["cleaned_at"] = utcnow()
            client.insert("trash_locations", location)
            print(f"Created project user {user['email']} with one report")

        if not client.select("system_logs", limit=1):
            for level, action, user_id, entity_type, message in SAMPLE_LOGS:
                client.insert("system_logs", {
                    "log_level": level,
                    "action": action,
                    "user_id": user_id,
                    "entity_type": entity_type,
                    "details": {"message": message},
                })
            print(f"Created {len(SAMPLE_LOGS)} log entries")

        return create_access_token(admin["id"], admin["email"])
    finally:
        db.close()


def main():
    logging.basicConfig(level=logging.INFO)
    admin_email = sys.argv[1] if len(sys.argv) > 1 else "admin@eco-project.ru"

    if "@" not in admin_email:
        print("Error: Invalid email format.")
        sys.exit(1)

    try:
        token = seed(admin_email)
    except BackendError as e:
        print(f"Error seeding sample data: {e}")
        sys.exit(1)

    print("\nSample data ready. Demo bearer token:")
    print(token)


if __name__ == "__main__":
    main()
