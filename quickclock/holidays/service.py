"""Holiday calendar — one named holiday per date."""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quickclock.common.exceptions import ConflictError, NotFoundException
from quickclock.holidays.models import Holiday
from quickclock.holidays.schemas import HolidayCreate, HolidayUpdate

logger = logging.getLogger(__name__)


class HolidayService:

    @staticmethod
    async def list_holidays(db: AsyncSession) -> Sequence[Holiday]:
        result = await db.execute(select(Holiday).order_by(Holiday.date.asc()))
        return result.scalars().all()

    @staticmethod
    async def get_holiday(db: AsyncSession, holiday_id: uuid.UUID) -> Holiday:
        holiday = await db.get(Holiday, holiday_id)
        if holiday is None:
            raise NotFoundException("Holiday", holiday_id)
        return holiday

    @staticmethod
    async def get_by_date(db: AsyncSession, day: date) -> Optional[Holiday]:
        result = await db.execute(select(Holiday).where(Holiday.date == day))
        return result.scalars().first()

    @staticmethod
    async def is_holiday(db: AsyncSession, day: date) -> bool:
        return await HolidayService.get_by_date(db, day) is not None

    @staticmethod
    async def create_holiday(db: AsyncSession, data: HolidayCreate) -> Holiday:
        if await HolidayService.is_holiday(db, data.date):
            raise ConflictError(f"A holiday already exists on {data.date}.")
        holiday = Holiday(**data.model_dump())
        db.add(holiday)
        await db.flush()
        logger.info("Created holiday '%s' on %s", holiday.name, holiday.date)
        return holiday

    @staticmethod
    async def update_holiday(
        db: AsyncSession,
        holiday_id: uuid.UUID,
        data: HolidayUpdate,
    ) -> Holiday:
        holiday = await HolidayService.get_holiday(db, holiday_id)
        changes = data.model_dump(exclude_unset=True)
        new_date = changes.get("date")
        if new_date is not None and new_date != holiday.date:
            if await HolidayService.is_holiday(db, new_date):
                raise ConflictError(f"A holiday already exists on {new_date}.")
        for field, value in changes.items():
            if value is not None:
                setattr(holiday, field, value)
        await db.flush()
        return holiday

    @staticmethod
    async def delete_holiday(db: AsyncSession, holiday_id: uuid.UUID) -> None:
        holiday = await HolidayService.get_holiday(db, holiday_id)
        await db.delete(holiday)
        await db.flush()
