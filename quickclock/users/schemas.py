"""User Pydantic schemas."""


import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from quickclock.common.constants import UserRole


# ── Requests ────────────────────────────────────────────────────────

class UserCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=8)
    mobile: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    role: UserRole = UserRole.employee
    birthday: Optional[date] = None


class UserUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    mobile: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    role: Optional[UserRole] = None
    photo_url: Optional[str] = None
    birthday: Optional[date] = None
    is_active: Optional[bool] = None


# ── Responses ───────────────────────────────────────────────────────

class UserBrief(BaseModel):
    """Compact employee info joined into admin listings."""

    id: uuid.UUID
    full_name: str
    email: str
    department: Optional[str] = None
    designation: Optional[str] = None

    model_config = {"from_attributes": True}


class UserResponse(UserBrief):
    mobile: Optional[str] = None
    role: UserRole
    photo_url: Optional[str] = None
    birthday: Optional[date] = None
    is_active: bool
    created_at: datetime
