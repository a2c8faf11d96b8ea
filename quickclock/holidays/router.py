"""Holiday calendar endpoints. Listing is public; changes are admin only."""


import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quickclock.auth.dependencies import require_admin
from quickclock.database import get_db
from quickclock.holidays.schemas import HolidayCreate, HolidayResponse, HolidayUpdate
from quickclock.holidays.service import HolidayService
from quickclock.users.models import User

router = APIRouter(prefix="", tags=["holidays"])


# ── GET / ───────────────────────────────────────────────────────────

@router.get("", response_model=list[HolidayResponse])
async def list_holidays(db: AsyncSession = Depends(get_db)):
    return await HolidayService.list_holidays(db)


# ── GET /{holiday_id} ───────────────────────────────────────────────

@router.get("/{holiday_id}", response_model=HolidayResponse)
async def get_holiday(
    holiday_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await HolidayService.get_holiday(db, holiday_id)


# ── POST / ──────────────────────────────────────────────────────────

@router.post("", response_model=HolidayResponse, status_code=201)
async def create_holiday(
    body: HolidayCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await HolidayService.create_holiday(db, body)


# ── PUT /{holiday_id} ───────────────────────────────────────────────

@router.put("/{holiday_id}", response_model=HolidayResponse)
async def update_holiday(
    holiday_id: uuid.UUID,
    body: HolidayUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await HolidayService.update_holiday(db, holiday_id, body)


# ── DELETE /{holiday_id} ────────────────────────────────────────────

@router.delete("/{holiday_id}", status_code=204)
async def delete_holiday(
    holiday_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await HolidayService.delete_holiday(db, holiday_id)
