"""Async SQLAlchemy engine and session management."""

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from quickclock.config import settings
from quickclock.notifications.outbox import NotificationOutbox, get_outbox

_engine_kwargs = {}
if not settings.DATABASE_URL.startswith("sqlite"):
    _engine_kwargs = {"pool_size": 10, "max_overflow": 20}

# Async engine for FastAPI
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.ENVIRONMENT == "development",
    pool_pre_ping=True,
    **_engine_kwargs,
)

# Async session factory
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


async def check_connection() -> None:
    """Run a trivial query; raises if the database is unreachable."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def get_db(
    outbox: NotificationOutbox = Depends(get_outbox),
) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yield an async database session.

    Depends on the request outbox so that the outbox is torn down (and its
    notifications dispatched) only after this session has committed.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
