"""Shared test fixtures — async DB, client, clock, auth helpers, factories.

Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL.
"""

from __future__ import annotations

import os

# Set test JWT_SECRET before any other import touches pydantic-settings
os.environ.setdefault("JWT_SECRET", "test-secret-for-ci-do-not-use-in-production")

import uuid
from datetime import datetime
from typing import AsyncGenerator
from unittest.mock import patch

import pytest
from fastapi import Depends
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from quickclock.auth.security import create_access_token, hash_password
from quickclock.common.clock import FixedClock, get_clock
from quickclock.common.constants import UserRole
from quickclock.database import Base, get_db
from quickclock.main import create_app
from quickclock.notifications.outbox import NotificationOutbox, get_outbox

# Import ALL model modules so every table is registered on Base.metadata
import quickclock.attendance.models  # noqa: F401
import quickclock.geofence.models  # noqa: F401
import quickclock.holidays.models  # noqa: F401
import quickclock.leave.models  # noqa: F401
import quickclock.manual_requests.models  # noqa: F401
import quickclock.notifications.models  # noqa: F401
from quickclock.users.models import User

# ── SQLite compat: compile PG UUID to CHAR(36) ──────────────────────

from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.ext.compiler import compiles


@compiles(PG_UUID, "sqlite")
def _uuid_sqlite(element, compiler, **kw):
    return "CHAR(36)"


# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionFactory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False,
)

# Wednesday; the previous working day is Tuesday 2026-03-17
TEST_NOW = datetime(2026, 3, 18, 9, 30, 0)


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter storage between tests to prevent cross-test interference."""
    from quickclock.common.rate_limit import limiter

    limiter.reset()
    yield


async def _override_get_outbox() -> AsyncGenerator[NotificationOutbox, None]:
    outbox = NotificationOutbox(session_factory=TestSessionFactory)
    try:
        yield outbox
    except Exception:
        outbox.clear()
        raise
    await outbox.flush()


async def _override_get_db(
    outbox: NotificationOutbox = Depends(get_outbox),
) -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Clock ───────────────────────────────────────────────────────────

@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(TEST_NOW)


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app(clock):
    """Create a fresh app instance with DB, outbox and clock overridden."""
    application = create_app()
    application.dependency_overrides[get_db] = _override_get_db
    application.dependency_overrides[get_outbox] = _override_get_outbox
    application.dependency_overrides[get_clock] = lambda: clock
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session (for direct DB operations in tests) ────────────

@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


@pytest.fixture
def outbox() -> NotificationOutbox:
    return NotificationOutbox(session_factory=TestSessionFactory)


# ── Model factories ─────────────────────────────────────────────────

TEST_PASSWORD = "correct-horse-battery"


def _make_user(
    *,
    email: str = "test.user@quickclock.io",
    full_name: str = "Test User",
    role: UserRole = UserRole.employee,
    is_active: bool = True,
) -> dict:
    return dict(
        id=uuid.uuid4(),
        full_name=full_name,
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        department="Engineering",
        designation="Developer",
        role=role,
        is_active=is_active,
    )


async def insert_user(db: AsyncSession, **kwargs) -> User:
    user = User(**_make_user(**kwargs))
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def employee(db) -> User:
    return await insert_user(db)


@pytest.fixture
async def other_employee(db) -> User:
    return await insert_user(db, email="other.user@quickclock.io", full_name="Other User")


@pytest.fixture
async def admin(db) -> User:
    return await insert_user(
        db, email="admin@quickclock.io", full_name="Admin User", role=UserRole.admin,
    )


# ── Auth helpers ────────────────────────────────────────────────────

def bearer(user: User) -> dict[str, str]:
    token, _ = create_access_token(user.id, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(employee) -> dict[str, str]:
    return bearer(employee)


@pytest.fixture
def admin_headers(admin) -> dict[str, str]:
    return bearer(admin)


# ── Failure injection ───────────────────────────────────────────────

def fail_geofence_lookup():
    """Make every session statement touching the geofences table fail."""
    original = AsyncSession.execute

    async def execute(self, statement, *args, **kwargs):
        if "geofences" in str(statement):
            raise OperationalError(str(statement), {}, Exception("connection lost"))
        return await original(self, statement, *args, **kwargs)

    return patch.object(AsyncSession, "execute", new=execute)
