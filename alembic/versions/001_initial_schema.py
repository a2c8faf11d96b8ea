"""001 – Initial schema: users, attendance, geofences, requests, leaves, holidays, notifications.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17 09:00:00.000000
"""

from alembic import op

# Revision identifiers
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ENUM_TYPES: list[tuple[str, list[str]]] = [
    ("user_role", ["employee", "admin"]),
    ("request_status", ["pending", "approved", "rejected"]),
    ("manual_request_type", ["new", "edit"]),
    ("leave_type", ["sick", "casual", "paid", "unpaid", "other"]),
    ("notification_type", ["system", "attendance", "leave", "holiday"]),
]


def _create_enum(name: str, values: list[str]) -> None:
    vals = ", ".join(f"'{v}'" for v in values)
    op.execute(f"CREATE TYPE {name} AS ENUM ({vals})")


def _drop_enum(name: str) -> None:
    op.execute(f"DROP TYPE IF EXISTS {name}")


# ---------------------------------------------------------------------------
# UPGRADE
# ---------------------------------------------------------------------------


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    for name, values in ENUM_TYPES:
        _create_enum(name, values)

    # ── 1. users ──────────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE users (
            id            UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            full_name     VARCHAR(200) NOT NULL,
            email         VARCHAR(255) NOT NULL UNIQUE,
            password_hash VARCHAR(255) NOT NULL,
            mobile        VARCHAR(30),
            department    VARCHAR(100),
            designation   VARCHAR(100),
            role          user_role NOT NULL DEFAULT 'employee',
            photo_url     VARCHAR(500),
            birthday      DATE,
            is_active     BOOLEAN NOT NULL DEFAULT TRUE,
            created_at    TIMESTAMPTZ DEFAULT NOW(),
            updated_at    TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX idx_users_role ON users(role) WHERE is_active")

    # ── 2. geofences ──────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE geofences (
            id               UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            name             VARCHAR(200) NOT NULL,
            center_latitude  DOUBLE PRECISION NOT NULL,
            center_longitude DOUBLE PRECISION NOT NULL,
            radius           DOUBLE PRECISION NOT NULL,  -- meters
            active           BOOLEAN NOT NULL DEFAULT TRUE,
            created_at       TIMESTAMPTZ DEFAULT NOW(),
            updated_at       TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    # ── 3. attendance_records ─────────────────────────────────────────────
    op.execute("""
        CREATE TABLE attendance_records (
            id                   UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            employee_id          UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            date                 DATE NOT NULL,
            check_in_time        TIME,
            check_out_time       TIME,
            location_latitude    DOUBLE PRECISION,
            location_longitude   DOUBLE PRECISION,
            location_timestamp   TIMESTAMP,
            is_within_fence      BOOLEAN,
            late_checkout_reason TEXT,
            manually_added       BOOLEAN NOT NULL DEFAULT FALSE,
            manually_edited      BOOLEAN NOT NULL DEFAULT FALSE,
            auto_checkout        BOOLEAN NOT NULL DEFAULT FALSE,
            created_at           TIMESTAMPTZ DEFAULT NOW(),
            updated_at           TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT uq_attendance_employee_date UNIQUE (employee_id, date)
        )
    """)
    op.execute("CREATE INDEX idx_attendance_date ON attendance_records(date)")

    # ── 4. manual_attendance_requests ─────────────────────────────────────
    op.execute("""
        CREATE TABLE manual_attendance_requests (
            id                 UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            employee_id        UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            date               DATE NOT NULL,
            check_in_time      TIME,
            check_out_time     TIME,
            reason             TEXT NOT NULL,
            status             request_status NOT NULL DEFAULT 'pending',
            type               manual_request_type NOT NULL,
            original_record_id UUID REFERENCES attendance_records(id) ON DELETE SET NULL,
            reviewed_by        UUID REFERENCES users(id) ON DELETE SET NULL,
            reviewed_at        TIMESTAMP,
            created_at         TIMESTAMPTZ DEFAULT NOW(),
            updated_at         TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE UNIQUE INDEX uq_manual_request_pending
            ON manual_attendance_requests(employee_id, date)
            WHERE status = 'pending'
    """)

    # ── 5. leaves ─────────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE leaves (
            id           UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            employee_id  UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            start_date   DATE NOT NULL,
            end_date     DATE NOT NULL,
            type         leave_type NOT NULL,
            reason       TEXT NOT NULL,
            status       request_status NOT NULL DEFAULT 'pending',
            approved_by  UUID REFERENCES users(id) ON DELETE SET NULL,
            auto_applied BOOLEAN NOT NULL DEFAULT FALSE,
            created_at   TIMESTAMPTZ DEFAULT NOW(),
            updated_at   TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT ck_leave_range CHECK (start_date <= end_date)
        )
    """)
    op.execute(
        "CREATE INDEX ix_leaves_employee_range ON leaves(employee_id, start_date, end_date)"
    )

    # ── 6. holidays ───────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE holidays (
            id          UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            name        VARCHAR(200) NOT NULL,
            date        DATE NOT NULL UNIQUE,
            description TEXT,
            created_at  TIMESTAMPTZ DEFAULT NOW(),
            updated_at  TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    # ── 7. notifications ──────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE notifications (
            id           UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            user_id      UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            title        VARCHAR(200) NOT NULL,
            message      TEXT NOT NULL,
            type         notification_type DEFAULT 'system',
            reference_id UUID,
            is_read      BOOLEAN DEFAULT FALSE,
            read_at      TIMESTAMPTZ,
            created_at   TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX ix_notifications_user_id ON notifications(user_id)")
    op.execute(
        "CREATE INDEX idx_notifications_unread ON notifications(user_id) WHERE NOT is_read"
    )


# ---------------------------------------------------------------------------
# DOWNGRADE
# ---------------------------------------------------------------------------


def downgrade() -> None:
    # Drop tables in reverse dependency order
    tables = [
        "notifications",
        "holidays",
        "leaves",
        "manual_attendance_requests",
        "attendance_records",
        "geofences",
        "users",
    ]
    for table in tables:
        op.execute(f"DROP TABLE IF EXISTS {table} CASCADE")

    for name, _ in reversed(ENUM_TYPES):
        _drop_enum(name)
