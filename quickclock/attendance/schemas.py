"""Attendance Pydantic schemas."""


import uuid
from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, Field

from quickclock.users.schemas import UserBrief


# ── Requests ────────────────────────────────────────────────────────

class CheckInRequest(BaseModel):
    # Optional so that a missing coordinate gets an informational reply
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class CheckOutRequest(CheckInRequest):
    late_checkout_reason: Optional[str] = None


class ManualAttendanceUpsert(BaseModel):
    employee_id: uuid.UUID
    date: date
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None


# ── Responses ───────────────────────────────────────────────────────

class AttendanceResponse(BaseModel):
    id: uuid.UUID
    employee_id: uuid.UUID
    date: date
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None
    location_latitude: Optional[float] = None
    location_longitude: Optional[float] = None
    location_timestamp: Optional[datetime] = None
    is_within_fence: Optional[bool] = None
    late_checkout_reason: Optional[str] = None
    manually_added: bool
    manually_edited: bool
    auto_checkout: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AttendanceWithEmployee(AttendanceResponse):
    employee: UserBrief


class AttendanceActionResponse(BaseModel):
    """Outcome of a check-in / check-out / manual upsert."""

    message: str
    attendance: Optional[AttendanceResponse] = None
    is_within_fence: Optional[bool] = None


class TodayAttendanceResponse(BaseModel):
    message: str
    attendance: Optional[AttendanceResponse] = None
