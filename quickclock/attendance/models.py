"""Attendance ORM model — one record per employee per calendar day."""

from __future__ import annotations

import uuid
from datetime import date, datetime, time, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quickclock.database import Base
from quickclock.users.models import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AttendanceRecord(Base):
    __tablename__ = "attendance_records"
    __table_args__ = (
        sa.UniqueConstraint("employee_id", "date", name="uq_attendance_employee_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    employee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    check_in_time: Mapped[Optional[time]] = mapped_column(sa.Time)
    check_out_time: Mapped[Optional[time]] = mapped_column(sa.Time)
    location_latitude: Mapped[Optional[float]] = mapped_column(sa.Float)
    location_longitude: Mapped[Optional[float]] = mapped_column(sa.Float)
    # Local wall-clock time of the last location capture
    location_timestamp: Mapped[Optional[datetime]] = mapped_column(sa.DateTime)
    is_within_fence: Mapped[Optional[bool]] = mapped_column(sa.Boolean)
    late_checkout_reason: Mapped[Optional[str]] = mapped_column(sa.Text)
    manually_added: Mapped[bool] = mapped_column(sa.Boolean, default=False, nullable=False)
    manually_edited: Mapped[bool] = mapped_column(sa.Boolean, default=False, nullable=False)
    auto_checkout: Mapped[bool] = mapped_column(sa.Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow,
    )

    employee: Mapped[User] = relationship(lazy="raise")
