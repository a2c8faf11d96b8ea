"""Absence reconciliation — turns missing attendance into auto-applied leave.

For the previous working day, every active employee without a complete
record (both check-in and check-out) gets a single-day casual leave, unless
a leave already covers that day. Each employee is reconciled in its own
transaction so one failure does not stop the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from quickclock.attendance.service import AttendanceService
from quickclock.common.constants import WEEKEND_ISO_DAYS
from quickclock.holidays.service import HolidayService
from quickclock.leave.service import LeaveService
from quickclock.notifications.outbox import NotificationOutbox
from quickclock.users.models import User
from quickclock.users.service import UserService

logger = logging.getLogger(__name__)

OUTCOME_COMPLETE = "complete"
OUTCOME_APPLIED = "applied"
OUTCOME_COVERED = "covered"


def previous_working_day(today: date) -> date:
    """The closest day before ``today`` that is not a Saturday or Sunday."""
    day = today - timedelta(days=1)
    while day.isoweekday() in WEEKEND_ISO_DAYS:
        day -= timedelta(days=1)
    return day


@dataclass
class AbsenceCheckSummary:
    date: date
    checked: int = 0
    complete: int = 0
    auto_applied: int = 0
    skipped: int = 0
    failed: int = 0
    holiday: bool = False


async def reconcile_employee(
    db: AsyncSession,
    employee: User,
    day: date,
    *,
    outbox: NotificationOutbox,
) -> str:
    """Reconcile one employee's attendance for ``day``. Returns the outcome."""
    record = await AttendanceService.get_record(db, employee.id, day)

    if record is None:
        logger.info("No attendance for %s (%s) on %s", employee.full_name, employee.id, day)
    elif record.check_in_time is None or record.check_out_time is None:
        missing = "check-in" if record.check_in_time is None else "check-out"
        logger.info(
            "Incomplete attendance for %s (%s) on %s, missing %s",
            employee.full_name, employee.id, day, missing,
        )
    else:
        logger.debug("Complete attendance for %s on %s", employee.id, day)
        return OUTCOME_COMPLETE

    leave = await LeaveService.auto_apply(db, employee, day, outbox=outbox)
    return OUTCOME_APPLIED if leave is not None else OUTCOME_COVERED


async def run_absence_check(
    today: Optional[date] = None,
    *,
    session_factory: Optional[Callable] = None,
    skip_holidays: Optional[bool] = None,
) -> AbsenceCheckSummary:
    """Reconcile the previous working day for every active employee."""
    from quickclock.config import settings

    if session_factory is None:
        from quickclock.database import async_session_factory

        session_factory = async_session_factory
    if today is None:
        from quickclock.common.clock import get_clock

        today = get_clock().today()
    if skip_holidays is None:
        skip_holidays = settings.ABSENCE_SKIP_HOLIDAYS

    target = previous_working_day(today)
    summary = AbsenceCheckSummary(date=target)
    logger.info("Starting absence check for %s", target)

    async with session_factory() as db:
        if skip_holidays and await HolidayService.is_holiday(db, target):
            summary.holiday = True
            logger.info("%s is a holiday, skipping absence check", target)
            return summary
        employees = await UserService.list_active_employees(db)

    logger.info("Found %d employees to check", len(employees))

    for employee in employees:
        summary.checked += 1
        outbox = NotificationOutbox(session_factory=session_factory)
        try:
            async with session_factory() as db:
                outcome = await reconcile_employee(db, employee, target, outbox=outbox)
                await db.commit()
        except Exception:
            summary.failed += 1
            logger.exception("Absence check failed for employee %s on %s", employee.id, target)
            continue

        await outbox.flush()
        if outcome == OUTCOME_COMPLETE:
            summary.complete += 1
        elif outcome == OUTCOME_APPLIED:
            summary.auto_applied += 1
        else:
            summary.skipped += 1

    logger.info(
        "Absence check for %s done: checked=%d complete=%d auto_applied=%d skipped=%d failed=%d",
        target, summary.checked, summary.complete, summary.auto_applied,
        summary.skipped, summary.failed,
    )
    return summary
