"""APScheduler wiring for the absence check."""

from __future__ import annotations

import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from quickclock.config import settings
from quickclock.reconciliation.service import run_absence_check

logger = logging.getLogger(__name__)

ABSENCE_CHECK_JOB_ID = "absence-check"


async def scheduled_absence_check() -> None:
    try:
        await run_absence_check()
    except Exception:
        logger.exception("Scheduled absence check failed")


def create_scheduler(cron: Optional[str] = None) -> AsyncIOScheduler:
    """Build (but do not start) a scheduler running the absence check on ``cron``."""
    scheduler = AsyncIOScheduler(timezone=settings.TIMEZONE or None)
    trigger = CronTrigger.from_crontab(
        cron or settings.ABSENCE_CHECK_CRON,
        timezone=settings.TIMEZONE or None,
    )
    scheduler.add_job(
        scheduled_absence_check,
        trigger,
        id=ABSENCE_CHECK_JOB_ID,
        replace_existing=True,
        coalesce=True,
        misfire_grace_time=3600,
    )
    return scheduler
