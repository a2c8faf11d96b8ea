"""Manual attendance request Pydantic schemas."""


import uuid
from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, Field

from quickclock.common.constants import Decision, ManualRequestType, RequestStatus
from quickclock.users.schemas import UserBrief


# ── Requests ────────────────────────────────────────────────────────

class ManualRequestCreate(BaseModel):
    date: date
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None
    reason: str = Field(..., max_length=2000)


class ManualRequestDecision(BaseModel):
    status: Decision


# ── Responses ───────────────────────────────────────────────────────

class ManualRequestResponse(BaseModel):
    id: uuid.UUID
    employee_id: uuid.UUID
    date: date
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None
    reason: str
    status: RequestStatus
    type: ManualRequestType
    original_record_id: Optional[uuid.UUID] = None
    reviewed_by: Optional[uuid.UUID] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ManualRequestWithEmployee(ManualRequestResponse):
    employee: UserBrief
