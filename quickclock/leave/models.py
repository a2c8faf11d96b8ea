"""Leave ORM model."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quickclock.common.constants import LeaveType, RequestStatus
from quickclock.database import Base
from quickclock.users.models import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Leave(Base):
    __tablename__ = "leaves"
    __table_args__ = (
        sa.CheckConstraint("start_date <= end_date", name="ck_leave_range"),
        sa.Index("ix_leaves_employee_range", "employee_id", "start_date", "end_date"),
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
    start_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    end_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    type: Mapped[LeaveType] = mapped_column(
        sa.Enum(LeaveType, name="leave_type"),
        nullable=False,
    )
    reason: Mapped[str] = mapped_column(sa.Text, nullable=False)
    status: Mapped[RequestStatus] = mapped_column(
        sa.Enum(RequestStatus, name="request_status"),
        default=RequestStatus.pending,
        nullable=False,
    )
    approved_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("users.id", ondelete="SET NULL"),
    )
    auto_applied: Mapped[bool] = mapped_column(sa.Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow,
    )

    employee: Mapped[User] = relationship(foreign_keys=[employee_id], lazy="raise")
