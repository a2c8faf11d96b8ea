"""GeoFence ORM model — circular workplace boundaries."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from quickclock.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GeoFence(Base):
    __tablename__ = "geofences"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    center_latitude: Mapped[float] = mapped_column(sa.Float, nullable=False)
    center_longitude: Mapped[float] = mapped_column(sa.Float, nullable=False)
    radius: Mapped[float] = mapped_column(sa.Float, nullable=False, comment="meters")
    active: Mapped[bool] = mapped_column(sa.Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow,
    )
