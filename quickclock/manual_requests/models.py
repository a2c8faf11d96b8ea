"""Manual attendance request ORM model."""

from __future__ import annotations

import uuid
from datetime import date, datetime, time, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quickclock.common.constants import ManualRequestType, RequestStatus
from quickclock.database import Base
from quickclock.users.models import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


_PENDING = sa.text("status = 'pending'")


class ManualAttendanceRequest(Base):
    __tablename__ = "manual_attendance_requests"
    __table_args__ = (
        # At most one pending request per employee and day
        sa.Index(
            "uq_manual_request_pending",
            "employee_id",
            "date",
            unique=True,
            postgresql_where=_PENDING,
            sqlite_where=_PENDING,
        ),
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
    reason: Mapped[str] = mapped_column(sa.Text, nullable=False)
    status: Mapped[RequestStatus] = mapped_column(
        sa.Enum(RequestStatus, name="request_status"),
        default=RequestStatus.pending,
        nullable=False,
    )
    type: Mapped[ManualRequestType] = mapped_column(
        sa.Enum(ManualRequestType, name="manual_request_type"),
        nullable=False,
    )
    original_record_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("attendance_records.id", ondelete="SET NULL"),
    )
    reviewed_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("users.id", ondelete="SET NULL"),
    )
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(sa.DateTime)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow,
    )

    employee: Mapped[User] = relationship(foreign_keys=[employee_id], lazy="raise")
