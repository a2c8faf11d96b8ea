"""Leave ledger — applications, admin decisions, cancellation, auto-deduction.

Date ranges are inclusive. An employee's leaves never overlap: any existing
leave touching the requested range blocks a new one, whatever its status.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quickclock.common.constants import (
    AUTO_LEAVE_REASON,
    Decision,
    LeaveType,
    NotificationType,
    RequestStatus,
)
from quickclock.common.exceptions import (
    ForbiddenException,
    InvalidRange,
    NotFoundException,
    NotPending,
    OverlapExists,
)
from quickclock.leave.models import Leave
from quickclock.notifications.outbox import NotificationOutbox
from quickclock.users.models import User

logger = logging.getLogger(__name__)


class LeaveService:

    @staticmethod
    async def find_overlapping(
        db: AsyncSession,
        employee_id: uuid.UUID,
        start_date: date,
        end_date: date,
    ) -> Optional[Leave]:
        """First leave of the employee sharing at least one day with the range."""
        result = await db.execute(
            select(Leave).where(
                Leave.employee_id == employee_id,
                Leave.start_date <= end_date,
                Leave.end_date >= start_date,
            )
        )
        return result.scalars().first()

    @staticmethod
    async def _get_leave(db: AsyncSession, leave_id: uuid.UUID) -> Leave:
        leave = await db.get(Leave, leave_id)
        if leave is None:
            raise NotFoundException("Leave", leave_id)
        return leave

    # ── Apply ───────────────────────────────────────────────────────

    @staticmethod
    async def apply(
        db: AsyncSession,
        user: User,
        start_date: date,
        end_date: date,
        leave_type: LeaveType,
        reason: str,
        *,
        outbox: NotificationOutbox,
    ) -> Leave:
        if start_date > end_date:
            raise InvalidRange()
        if await LeaveService.find_overlapping(db, user.id, start_date, end_date):
            raise OverlapExists()

        leave = Leave(
            employee_id=user.id,
            start_date=start_date,
            end_date=end_date,
            type=leave_type,
            reason=reason,
            status=RequestStatus.pending,
        )
        db.add(leave)
        await db.flush()
        logger.info(
            "Leave %s applied: user=%s %s..%s (%s)",
            leave.id, user.id, start_date, end_date, leave_type.value,
        )

        outbox.notify(
            user.id,
            "Leave Application Submitted",
            f"Your leave request from {start_date} to {end_date} has been "
            f"submitted and is awaiting approval.",
            NotificationType.leave,
            leave.id,
        )
        outbox.notify_admins(
            "New Leave Application",
            f"Employee {user.full_name} has applied for {leave_type.value} leave "
            f"from {start_date} to {end_date}.",
            NotificationType.leave,
            leave.id,
        )
        return leave

    # ── Decide (admin) ──────────────────────────────────────────────

    @staticmethod
    async def decide(
        db: AsyncSession,
        leave_id: uuid.UUID,
        decision: Decision,
        approver: User,
        *,
        outbox: NotificationOutbox,
    ) -> Leave:
        leave = await LeaveService._get_leave(db, leave_id)
        if leave.status != RequestStatus.pending:
            raise NotPending("Leave", leave.status)

        leave.status = RequestStatus(decision.value)
        leave.approved_by = approver.id
        await db.flush()
        logger.info("Leave %s %s by %s", leave.id, decision.value, approver.id)

        outbox.notify(
            leave.employee_id,
            f"Leave Application {decision.value.capitalize()}",
            f"Your leave request from {leave.start_date} to {leave.end_date} "
            f"has been {decision.value}.",
            NotificationType.leave,
            leave.id,
        )
        return leave

    # ── Cancel (owner) ──────────────────────────────────────────────

    @staticmethod
    async def cancel(
        db: AsyncSession,
        leave_id: uuid.UUID,
        caller: User,
        *,
        outbox: NotificationOutbox,
    ) -> None:
        leave = await LeaveService._get_leave(db, leave_id)
        if leave.employee_id != caller.id:
            raise ForbiddenException("You can only cancel your own leave.")
        if leave.status != RequestStatus.pending:
            raise NotPending("Leave", leave.status)

        start_date, end_date = leave.start_date, leave.end_date
        await db.delete(leave)
        await db.flush()
        logger.info("Leave %s cancelled by %s", leave_id, caller.id)

        outbox.notify_admins(
            "Leave Application Cancelled",
            f"Employee {caller.full_name} has cancelled their leave request "
            f"from {start_date} to {end_date}.",
            NotificationType.leave,
            leave_id,
        )

    # ── Auto-apply (scheduler) ──────────────────────────────────────

    @staticmethod
    async def auto_apply(
        db: AsyncSession,
        employee: User,
        day: date,
        *,
        outbox: NotificationOutbox,
    ) -> Optional[Leave]:
        """Deduct a single-day casual leave for an absence.

        Returns None when a leave already covers the day.
        """
        existing = await LeaveService.find_overlapping(db, employee.id, day, day)
        if existing is not None:
            logger.info(
                "Leave %s already covers %s for employee %s, skipping",
                existing.id, day, employee.id,
            )
            return None

        leave = Leave(
            employee_id=employee.id,
            start_date=day,
            end_date=day,
            type=LeaveType.casual,
            reason=AUTO_LEAVE_REASON,
            status=RequestStatus.pending,
            auto_applied=True,
        )
        db.add(leave)
        await db.flush()
        logger.info("Auto leave %s applied for employee %s on %s", leave.id, employee.id, day)

        outbox.notify(
            employee.id,
            "Auto Leave Applied",
            f"Leave has been automatically applied for {day} due to absence "
            f"(no check-in/check-out recorded).",
            NotificationType.leave,
            leave.id,
        )
        outbox.notify_admins(
            "Auto Leave Applied",
            f"Auto leave applied for employee {employee.full_name} on {day} "
            f"due to absence.",
            NotificationType.leave,
            leave.id,
        )
        return leave

    # ── Listings ────────────────────────────────────────────────────

    @staticmethod
    async def list_mine(db: AsyncSession, employee_id: uuid.UUID) -> Sequence[Leave]:
        result = await db.execute(
            select(Leave)
            .where(Leave.employee_id == employee_id)
            .order_by(Leave.start_date.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def list_all(
        db: AsyncSession,
        *,
        pending_only: bool = False,
    ) -> Sequence[Leave]:
        query = select(Leave).options(selectinload(Leave.employee))
        if pending_only:
            query = query.where(Leave.status == RequestStatus.pending)
        result = await db.execute(query.order_by(Leave.created_at.desc()))
        return result.scalars().all()
