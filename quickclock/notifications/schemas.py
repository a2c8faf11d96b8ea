"""Notification Pydantic schemas."""


import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from quickclock.common.constants import NotificationType


class NotificationResponse(BaseModel):
    """Single notification in API responses."""

    id: uuid.UUID
    title: str
    message: str
    type: NotificationType
    reference_id: Optional[uuid.UUID] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationListResponse(BaseModel):
    data: list[NotificationResponse]
    unread: int
