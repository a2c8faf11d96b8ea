"""GeoFence Pydantic schemas."""


import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class GeoFenceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    center_latitude: float = Field(..., ge=-90, le=90)
    center_longitude: float = Field(..., ge=-180, le=180)
    radius: float = Field(..., gt=0, description="Radius in meters")
    active: bool = True


class GeoFenceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    center_latitude: Optional[float] = Field(None, ge=-90, le=90)
    center_longitude: Optional[float] = Field(None, ge=-180, le=180)
    radius: Optional[float] = Field(None, gt=0)
    active: Optional[bool] = None


class GeoFenceResponse(BaseModel):
    id: uuid.UUID
    name: str
    center_latitude: float
    center_longitude: float
    radius: float
    active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LocationCheckRequest(BaseModel):
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class LocationCheckResponse(BaseModel):
    message: str
    is_within_fence: Optional[bool] = None
