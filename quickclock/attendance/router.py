"""Attendance router — check in/out, personal history, admin views and corrections.

All endpoints require authentication; admin endpoints use ``require_admin``.
"""


import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from quickclock.attendance.schemas import (
    AttendanceActionResponse,
    AttendanceResponse,
    AttendanceWithEmployee,
    CheckInRequest,
    CheckOutRequest,
    ManualAttendanceUpsert,
    TodayAttendanceResponse,
)
from quickclock.attendance.service import AttendanceService
from quickclock.auth.dependencies import get_current_user, require_admin
from quickclock.common.clock import Clock, get_clock
from quickclock.database import get_db
from quickclock.notifications.outbox import NotificationOutbox, get_outbox
from quickclock.users.models import User

router = APIRouter(prefix="", tags=["attendance"])


# ── POST /check-in ──────────────────────────────────────────────────

@router.post("/check-in", response_model=AttendanceActionResponse)
async def check_in(
    body: CheckInRequest,
    response: Response,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    outbox: NotificationOutbox = Depends(get_outbox),
):
    result = await AttendanceService.check_in(
        db, user, body.latitude, body.longitude, clock=clock, outbox=outbox,
    )
    if result.attendance is not None:
        response.status_code = 201
    return result


# ── POST /check-out ─────────────────────────────────────────────────

@router.post("/check-out", response_model=AttendanceActionResponse)
async def check_out(
    body: CheckOutRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    outbox: NotificationOutbox = Depends(get_outbox),
):
    return await AttendanceService.check_out(
        db,
        user,
        body.latitude,
        body.longitude,
        body.late_checkout_reason,
        clock=clock,
        outbox=outbox,
    )


# ── GET /today ──────────────────────────────────────────────────────

@router.get("/today", response_model=TodayAttendanceResponse)
async def today_attendance(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    record = await AttendanceService.get_today(db, user.id, clock=clock)
    return TodayAttendanceResponse(
        message="Today's attendance retrieved",
        attendance=AttendanceResponse.model_validate(record) if record else None,
    )


# ── GET /history ────────────────────────────────────────────────────

@router.get("/history", response_model=list[AttendanceResponse])
async def my_history(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await AttendanceService.get_history(db, user.id)


# ── GET /all (admin) ────────────────────────────────────────────────

@router.get("/all", response_model=list[AttendanceWithEmployee])
async def all_attendance(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await AttendanceService.get_all(db)


# ── GET /by-date (admin) ────────────────────────────────────────────

@router.get("/by-date", response_model=list[AttendanceWithEmployee])
async def attendance_by_date(
    day: Optional[date] = Query(None, alias="date", description="Defaults to today"),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    return await AttendanceService.get_by_date(db, day, clock=clock)


# ── GET /employee/{employee_id} (admin) ─────────────────────────────

@router.get("/employee/{employee_id}", response_model=list[AttendanceResponse])
async def employee_attendance(
    employee_id: uuid.UUID,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await AttendanceService.get_employee_attendance(
        db, employee_id, start_date, end_date,
    )


# ── POST /manual (admin) ────────────────────────────────────────────

@router.post("/manual", response_model=AttendanceActionResponse)
async def manual_attendance(
    body: ManualAttendanceUpsert,
    response: Response,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    outbox: NotificationOutbox = Depends(get_outbox),
):
    record, created = await AttendanceService.manual_upsert(
        db,
        body.employee_id,
        body.date,
        body.check_in_time,
        body.check_out_time,
        outbox=outbox,
    )
    if created:
        response.status_code = 201
    return AttendanceActionResponse(
        message="Attendance record added manually" if created
        else "Attendance record updated manually",
        attendance=AttendanceResponse.model_validate(record),
    )


# ── DELETE /{record_id} (admin) ─────────────────────────────────────

@router.delete("/{record_id}", status_code=204)
async def delete_attendance(
    record_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await AttendanceService.delete(db, record_id)
