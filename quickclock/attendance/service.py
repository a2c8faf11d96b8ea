"""Attendance service — daily check-in/check-out state and admin corrections.

Per (employee, day) a record moves NoRecord -> CheckedIn -> CheckedOut.
"Today" always comes from the injected clock.
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

from quickclock.attendance.models import AttendanceRecord
from quickclock.attendance.schemas import AttendanceActionResponse, AttendanceResponse
from quickclock.common.clock import Clock
from quickclock.common.constants import NotificationType
from quickclock.common.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    NoCheckInFound,
    NotFoundException,
)
from quickclock.geofence.service import is_within_geofence
from quickclock.notifications.outbox import NotificationOutbox
from quickclock.users.models import User

logger = logging.getLogger(__name__)

LOCATION_REQUIRED = "Please provide latitude and longitude."


def _stamp(value: time) -> str:
    return value.strftime("%H:%M:%S")


class AttendanceService:
    """Async attendance operations."""

    @staticmethod
    async def get_record(
        db: AsyncSession,
        employee_id: uuid.UUID,
        day: date,
    ) -> Optional[AttendanceRecord]:
        result = await db.execute(
            select(AttendanceRecord).where(
                AttendanceRecord.employee_id == employee_id,
                AttendanceRecord.date == day,
            )
        )
        return result.scalars().first()

    # ── Check in ────────────────────────────────────────────────────

    @staticmethod
    async def check_in(
        db: AsyncSession,
        user: User,
        latitude: Optional[float],
        longitude: Optional[float],
        *,
        clock: Clock,
        outbox: NotificationOutbox,
    ) -> AttendanceActionResponse:
        """Open today's record for the user."""
        if latitude is None or longitude is None:
            return AttendanceActionResponse(message=LOCATION_REQUIRED)

        now = clock.now()
        today = now.date()
        within = await is_within_geofence(db, latitude, longitude)

        if await AttendanceService.get_record(db, user.id, today) is not None:
            raise AlreadyCheckedIn()

        record = AttendanceRecord(
            employee_id=user.id,
            date=today,
            check_in_time=now.time().replace(microsecond=0),
            location_latitude=latitude,
            location_longitude=longitude,
            location_timestamp=now,
            is_within_fence=within,
        )
        db.add(record)
        try:
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent check-in for the same day
            await db.rollback()
            raise AlreadyCheckedIn()

        logger.info(
            "Check-in: user=%s date=%s within_fence=%s", user.id, today, within,
        )

        stamp = _stamp(record.check_in_time)
        outbox.notify(
            user.id,
            "Check-in Successful",
            f"You have checked in at {stamp}.",
            NotificationType.attendance,
            record.id,
        )
        outbox.notify_admins(
            "Employee Check-in",
            f"Employee {user.full_name} has checked in at {stamp}.",
            NotificationType.attendance,
            record.id,
        )
        return AttendanceActionResponse(
            message="Check-in successful",
            attendance=AttendanceResponse.model_validate(record),
            is_within_fence=within,
        )

    # ── Check out ───────────────────────────────────────────────────

    @staticmethod
    async def check_out(
        db: AsyncSession,
        user: User,
        latitude: Optional[float],
        longitude: Optional[float],
        late_checkout_reason: Optional[str] = None,
        *,
        clock: Clock,
        outbox: NotificationOutbox,
    ) -> AttendanceActionResponse:
        """Close today's record for the user."""
        if latitude is None or longitude is None:
            return AttendanceActionResponse(message=LOCATION_REQUIRED)

        now = clock.now()
        today = now.date()
        within = await is_within_geofence(db, latitude, longitude)

        record = await AttendanceService.get_record(db, user.id, today)
        if record is None:
            raise NoCheckInFound()
        if record.check_out_time is not None:
            raise AlreadyCheckedOut()

        record.check_out_time = now.time().replace(microsecond=0)
        record.location_latitude = latitude
        record.location_longitude = longitude
        record.location_timestamp = now
        if within is not None:
            record.is_within_fence = within
        record.late_checkout_reason = late_checkout_reason
        await db.flush()

        logger.info(
            "Check-out: user=%s date=%s within_fence=%s",
            user.id, today, record.is_within_fence,
        )

        stamp = _stamp(record.check_out_time)
        outbox.notify(
            user.id,
            "Check-out Successful",
            f"You have checked out at {stamp}.",
            NotificationType.attendance,
            record.id,
        )
        outbox.notify_admins(
            "Employee Check-out",
            f"Employee {user.full_name} has checked out at {stamp}.",
            NotificationType.attendance,
            record.id,
        )
        return AttendanceActionResponse(
            message="Check-out successful",
            attendance=AttendanceResponse.model_validate(record),
            is_within_fence=record.is_within_fence,
        )

    # ── Reads ───────────────────────────────────────────────────────

    @staticmethod
    async def get_today(
        db: AsyncSession,
        employee_id: uuid.UUID,
        *,
        clock: Clock,
    ) -> Optional[AttendanceRecord]:
        return await AttendanceService.get_record(db, employee_id, clock.today())

    @staticmethod
    async def get_history(
        db: AsyncSession,
        employee_id: uuid.UUID,
    ) -> Sequence[AttendanceRecord]:
        result = await db.execute(
            select(AttendanceRecord)
            .where(AttendanceRecord.employee_id == employee_id)
            .order_by(AttendanceRecord.date.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def get_employee_attendance(
        db: AsyncSession,
        employee_id: uuid.UUID,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records for one employee; either bound of the range may be open."""
        query = select(AttendanceRecord).where(AttendanceRecord.employee_id == employee_id)
        if start_date is not None:
            query = query.where(AttendanceRecord.date >= start_date)
        if end_date is not None:
            query = query.where(AttendanceRecord.date <= end_date)
        result = await db.execute(query.order_by(AttendanceRecord.date.desc()))
        return result.scalars().all()

    @staticmethod
    async def get_by_date(
        db: AsyncSession,
        day: Optional[date] = None,
        *,
        clock: Clock,
    ) -> Sequence[AttendanceRecord]:
        result = await db.execute(
            select(AttendanceRecord)
            .where(AttendanceRecord.date == (day or clock.today()))
            .options(selectinload(AttendanceRecord.employee))
        )
        return result.scalars().all()

    @staticmethod
    async def get_all(db: AsyncSession) -> Sequence[AttendanceRecord]:
        result = await db.execute(
            select(AttendanceRecord)
            .options(selectinload(AttendanceRecord.employee))
            .order_by(AttendanceRecord.date.desc())
        )
        return result.scalars().all()

    # ── Admin corrections ───────────────────────────────────────────

    @staticmethod
    async def apply_times(
        db: AsyncSession,
        employee_id: uuid.UUID,
        day: date,
        check_in_time: Optional[time],
        check_out_time: Optional[time],
        *,
        mark_added: bool = False,
    ) -> tuple[AttendanceRecord, bool]:
        """Patch the supplied times onto the day's record, creating it if needed.

        An existing record is flagged ``manually_edited``, or ``manually_added``
        when ``mark_added`` is set. Returns (record, created).
        """
        record = await AttendanceService.get_record(db, employee_id, day)
        if record is None:
            record = AttendanceRecord(
                employee_id=employee_id,
                date=day,
                check_in_time=check_in_time,
                check_out_time=check_out_time,
                manually_added=True,
            )
            db.add(record)
            await db.flush()
            return record, True

        if check_in_time is not None:
            record.check_in_time = check_in_time
        if check_out_time is not None:
            record.check_out_time = check_out_time
        if mark_added:
            record.manually_added = True
        else:
            record.manually_edited = True
        await db.flush()
        return record, False

    @staticmethod
    async def manual_upsert(
        db: AsyncSession,
        employee_id: uuid.UUID,
        day: date,
        check_in_time: Optional[time] = None,
        check_out_time: Optional[time] = None,
        *,
        outbox: NotificationOutbox,
    ) -> tuple[AttendanceRecord, bool]:
        """Admin add/edit of a day's attendance. Returns (record, created)."""
        employee = await db.get(User, employee_id)
        if employee is None:
            raise NotFoundException("User", employee_id)

        record, created = await AttendanceService.apply_times(
            db, employee_id, day, check_in_time, check_out_time,
        )
        logger.info(
            "Manual attendance %s: user=%s date=%s",
            "added" if created else "edited", employee_id, day,
        )

        if created:
            outbox.notify(
                employee_id,
                "Attendance Record Added",
                f"A new attendance record for {day} has been added by an administrator.",
                NotificationType.attendance,
                record.id,
            )
        else:
            outbox.notify(
                employee_id,
                "Attendance Record Updated",
                f"Your attendance record for {day} has been updated by an administrator.",
                NotificationType.attendance,
                record.id,
            )
        return record, created

    @staticmethod
    async def delete(db: AsyncSession, record_id: uuid.UUID) -> None:
        record = await db.get(AttendanceRecord, record_id)
        if record is None:
            raise NotFoundException("AttendanceRecord", record_id)
        await db.delete(record)
        await db.flush()
        logger.info("Deleted attendance record %s", record_id)
