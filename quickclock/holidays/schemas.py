"""Holiday Pydantic schemas."""


import datetime as dt
import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class HolidayCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    date: date
    description: Optional[str] = None


class HolidayUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    date: Optional[dt.date] = None
    description: Optional[str] = None


class HolidayResponse(BaseModel):
    id: uuid.UUID
    name: str
    date: date
    description: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
