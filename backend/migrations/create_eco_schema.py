"""
Migration: Create the Eco Admin schema.

Creates the 4 tables of the admin panel with their closed-set check
constraints and query indexes:
1. admin_users - operator accounts (role admin / moderator / viewer)
2. project_users - citizen accounts
3. trash_locations - geotagged trash reports
4. system_logs - append-only audit log

Safe to re-run: existing tables are left untouched.
"""
from sqlalchemy import create_engine, text
import os

# Use same DB URL pattern as main app
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql://{os.getenv('USER', 'postgres')}@localhost:5432/eco_admin"
)


def table_exists(conn, table_name: str) -> bool:
    """Check if a table exists in the database."""
    result = conn.execute(text("""
        SELECT EXISTS (
            SELECT FROM information_schema.tables
            WHERE table_name = :table_name
        )
    """), {"table_name": table_name})
    return result.fetchone()[0]


TABLES = [
    ("admin_users", """
        CREATE TABLE admin_users (
            id VARCHAR(36) PRIMARY KEY,
            email VARCHAR(255) UNIQUE NOT NULL,
            full_name VARCHAR(255) NOT NULL,
            role VARCHAR(20) NOT NULL DEFAULT 'viewer'
                CONSTRAINT ck_admin_users_role CHECK (role IN ('admin', 'moderator', 'viewer')),
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            last_login TIMESTAMP
        )
    """, []),
    ("project_users", """
        CREATE TABLE project_users (
            id VARCHAR(36) PRIMARY KEY,
            email VARCHAR(255) UNIQUE NOT NULL,
            full_name VARCHAR(255) NOT NULL,
            phone VARCHAR(50),
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            reports_count INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """, [
        "CREATE INDEX idx_project_users_active ON project_users(is_active)",
    ]),
    ("trash_locations", """
        CREATE TABLE trash_locations (
            id VARCHAR(36) PRIMARY KEY,
            user_id VARCHAR(36) REFERENCES project_users(id) ON DELETE SET NULL,
            latitude NUMERIC(10, 8) NOT NULL,
            longitude NUMERIC(11, 8) NOT NULL,
            description TEXT NOT NULL,
            trash_type VARCHAR(20) NOT NULL
                CONSTRAINT ck_trash_locations_type CHECK (trash_type IN
                    ('plastic', 'metal', 'glass', 'organic', 'electronic', 'mixed', 'other')),
            status VARCHAR(20) NOT NULL DEFAULT 'reported'
                CONSTRAINT ck_trash_locations_status CHECK (status IN
                    ('reported', 'in_progress', 'cleaned', 'rejected')),
            priority VARCHAR(20) NOT NULL DEFAULT 'medium'
                CONSTRAINT ck_trash_locations_priority CHECK (priority IN ('low', 'medium', 'high')),
            image_url TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            cleaned_at TIMESTAMP
        )
    """, [
        "CREATE INDEX idx_trash_locations_status ON trash_locations(status)",
        "CREATE INDEX idx_trash_locations_created_at ON trash_locations(created_at DESC)",
        "CREATE INDEX idx_trash_locations_user_id ON trash_locations(user_id)",
    ]),
    ("system_logs", """
        CREATE TABLE system_logs (
            id VARCHAR(36) PRIMARY KEY,
            log_level VARCHAR(20) NOT NULL
                CONSTRAINT ck_system_logs_level CHECK (log_level IN ('info', 'warning', 'error', 'critical')),
            action VARCHAR(255) NOT NULL,
            user_id VARCHAR(36),
            entity_type VARCHAR(100),
            entity_id VARCHAR(36),
            details JSONB NOT NULL DEFAULT '{}'::jsonb,
            ip_address VARCHAR(64),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """, [
        "CREATE INDEX idx_system_logs_level ON system_logs(log_level)",
        "CREATE INDEX idx_system_logs_created_at ON system_logs(created_at DESC)",
    ]),
]


def run_migration():
    """Create the Eco Admin tables and indexes."""
    engine = create_engine(DATABASE_URL)

    with engine.connect() as conn:
        for table_name, ddl, indexes in TABLES:
            if table_exists(conn, table_name):
                print(f"{table_name} table already exists")
                continue
            conn.execute(text(ddl))
            for index in indexes:
                conn.execute(text(index))
            print(f"Created {table_name} table")

        conn.commit()
        print("\nEco Admin schema migration completed successfully!")


if __name__ == "__main__":
    run_migration()
