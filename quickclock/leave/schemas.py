"""Leave Pydantic schemas."""


import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from quickclock.common.constants import Decision, LeaveType, RequestStatus
from quickclock.users.schemas import UserBrief


# ── Requests ────────────────────────────────────────────────────────

class LeaveApply(BaseModel):
    start_date: date
    end_date: date
    type: LeaveType
    reason: str = Field(..., min_length=1, max_length=2000)


class LeaveDecision(BaseModel):
    status: Decision


# ── Responses ───────────────────────────────────────────────────────

class LeaveResponse(BaseModel):
    id: uuid.UUID
    employee_id: uuid.UUID
    start_date: date
    end_date: date
    type: LeaveType
    reason: str
    status: RequestStatus
    approved_by: Optional[uuid.UUID] = None
    auto_applied: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LeaveWithEmployee(LeaveResponse):
    employee: UserBrief
