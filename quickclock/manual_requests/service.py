"""Manual attendance request workflow — submit, review, cancel.

A request is pending until an admin decides it; the decision is final.
Approval writes the requested times onto the day's attendance record.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, time
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quickclock.attendance.service import AttendanceService
from quickclock.common.clock import Clock
from quickclock.common.constants import (
    Decision,
    ManualRequestType,
    NotificationType,
    RequestStatus,
)
from quickclock.common.exceptions import (
    DuplicatePendingRequest,
    ForbiddenException,
    FutureDateNotAllowed,
    NotFoundException,
    NotPending,
    ValidationException,
)
from quickclock.manual_requests.models import ManualAttendanceRequest
from quickclock.notifications.outbox import NotificationOutbox
from quickclock.users.models import User

logger = logging.getLogger(__name__)


class ManualRequestService:

    @staticmethod
    async def _get_request(
        db: AsyncSession,
        request_id: uuid.UUID,
    ) -> ManualAttendanceRequest:
        request = await db.get(ManualAttendanceRequest, request_id)
        if request is None:
            raise NotFoundException("ManualAttendanceRequest", request_id)
        return request

    @staticmethod
    async def _pending_for(
        db: AsyncSession,
        employee_id: uuid.UUID,
        day: date,
    ) -> Optional[ManualAttendanceRequest]:
        result = await db.execute(
            select(ManualAttendanceRequest).where(
                ManualAttendanceRequest.employee_id == employee_id,
                ManualAttendanceRequest.date == day,
                ManualAttendanceRequest.status == RequestStatus.pending,
            )
        )
        return result.scalars().first()

    # ── Submit ──────────────────────────────────────────────────────

    @staticmethod
    async def submit(
        db: AsyncSession,
        user: User,
        day: date,
        check_in_time: Optional[time],
        check_out_time: Optional[time],
        reason: str,
        *,
        clock: Clock,
        outbox: NotificationOutbox,
    ) -> ManualAttendanceRequest:
        errors: dict[str, list[str]] = {}
        if not reason or not reason.strip():
            errors["reason"] = ["A reason is required."]
        if check_in_time is None and check_out_time is None:
            errors["check_in_time"] = ["Provide a check-in or check-out time."]
        if errors:
            raise ValidationException(errors)

        if day > clock.today():
            raise FutureDateNotAllowed()

        if await ManualRequestService._pending_for(db, user.id, day) is not None:
            raise DuplicatePendingRequest(day)

        record = await AttendanceService.get_record(db, user.id, day)
        request = ManualAttendanceRequest(
            employee_id=user.id,
            date=day,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            reason=reason.strip(),
            status=RequestStatus.pending,
            type=ManualRequestType.edit if record else ManualRequestType.new,
            original_record_id=record.id if record else None,
        )
        db.add(request)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise DuplicatePendingRequest(day)

        logger.info(
            "Manual request %s submitted: user=%s date=%s type=%s",
            request.id, user.id, day, request.type.value,
        )

        verb = "editing" if record else "adding"
        outbox.notify(
            user.id,
            "Manual Attendance Request Submitted",
            f"Your request for {verb} attendance on {day} has been submitted "
            f"and is awaiting approval.",
            NotificationType.attendance,
            request.id,
        )
        outbox.notify_admins(
            "New Manual Attendance Request",
            f"Employee {user.full_name} has requested to "
            f"{'edit' if record else 'add'} attendance for {day}.",
            NotificationType.attendance,
            request.id,
        )
        return request

    # ── Process (admin) ─────────────────────────────────────────────

    @staticmethod
    async def process(
        db: AsyncSession,
        request_id: uuid.UUID,
        decision: Decision,
        reviewer: User,
        *,
        clock: Clock,
        outbox: NotificationOutbox,
    ) -> ManualAttendanceRequest:
        request = await ManualRequestService._get_request(db, request_id)
        if request.status != RequestStatus.pending:
            raise NotPending("ManualAttendanceRequest", request.status)

        request.status = RequestStatus(decision.value)
        request.reviewed_by = reviewer.id
        request.reviewed_at = clock.now()

        if decision == Decision.approved:
            # Approval marks the record manually_added even when editing
            await AttendanceService.apply_times(
                db,
                request.employee_id,
                request.date,
                request.check_in_time,
                request.check_out_time,
                mark_added=True,
            )
        await db.flush()

        logger.info(
            "Manual request %s %s by %s", request.id, decision.value, reviewer.id,
        )

        action = "edit" if request.type == ManualRequestType.edit else "add new"
        outbox.notify(
            request.employee_id,
            f"Manual Attendance Request {decision.value.capitalize()}",
            f"Your request to {action} attendance for {request.date} "
            f"has been {decision.value}.",
            NotificationType.attendance,
            request.id,
        )
        return request

    # ── Cancel (owner) ──────────────────────────────────────────────

    @staticmethod
    async def cancel(
        db: AsyncSession,
        request_id: uuid.UUID,
        caller: User,
        *,
        outbox: NotificationOutbox,
    ) -> None:
        request = await ManualRequestService._get_request(db, request_id)
        if request.employee_id != caller.id:
            raise ForbiddenException("You can only cancel your own requests.")
        if request.status != RequestStatus.pending:
            raise NotPending("ManualAttendanceRequest", request.status)

        day = request.date
        await db.delete(request)
        await db.flush()
        logger.info("Manual request %s cancelled by %s", request_id, caller.id)

        outbox.notify_admins(
            "Manual Attendance Request Cancelled",
            f"Employee {caller.full_name} has cancelled their manual attendance "
            f"request for {day}.",
            NotificationType.attendance,
            request_id,
        )

    # ── Listings ────────────────────────────────────────────────────

    @staticmethod
    async def list_mine(
        db: AsyncSession,
        employee_id: uuid.UUID,
    ) -> Sequence[ManualAttendanceRequest]:
        result = await db.execute(
            select(ManualAttendanceRequest)
            .where(ManualAttendanceRequest.employee_id == employee_id)
            .order_by(ManualAttendanceRequest.created_at.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def list_all(
        db: AsyncSession,
        *,
        pending_only: bool = False,
    ) -> Sequence[ManualAttendanceRequest]:
        query = select(ManualAttendanceRequest).options(
            selectinload(ManualAttendanceRequest.employee)
        )
        if pending_only:
            query = query.where(ManualAttendanceRequest.status == RequestStatus.pending)
        result = await db.execute(query.order_by(ManualAttendanceRequest.created_at.desc()))
        return result.scalars().all()
