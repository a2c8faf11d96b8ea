"""Notification endpoints — list, mark read, unread count, delete."""


import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from quickclock.auth.dependencies import get_current_user
from quickclock.database import get_db
from quickclock.notifications.schemas import (
    NotificationListResponse,
    NotificationResponse,
)
from quickclock.notifications.service import NotificationService
from quickclock.users.models import User

router = APIRouter(prefix="", tags=["notifications"])


# ── GET / — list current user's notifications ───────────────────────

@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    is_read: Optional[bool] = Query(default=None, description="Filter by read status"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    rows = await NotificationService.list_for_user(db, user.id, is_read=is_read)
    unread = await NotificationService.get_unread_count(db, user.id)
    return NotificationListResponse(
        data=[NotificationResponse.model_validate(n) for n in rows],
        unread=unread,
    )


# ── GET /unread-count ───────────────────────────────────────────────
# Registered before /{notification_id} routes.

@router.get("/unread-count")
async def unread_count(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    count = await NotificationService.get_unread_count(db, user.id)
    return {"data": {"count": count}}


# ── PUT /read-all ───────────────────────────────────────────────────

@router.put("/read-all")
async def mark_all_read(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    count = await NotificationService.mark_all_read(db, user.id)
    return {"message": "All notifications marked as read", "data": {"count": count}}


# ── PUT /{notification_id}/read ─────────────────────────────────────

@router.put("/{notification_id}/read")
async def mark_read(
    notification_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    notification = await NotificationService.mark_read(db, notification_id, user.id)
    return {
        "message": "Notification marked as read",
        "data": NotificationResponse.model_validate(notification),
    }


# ── DELETE /{notification_id} ───────────────────────────────────────

@router.delete("/{notification_id}", status_code=204)
async def delete_notification(
    notification_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await NotificationService.delete(db, notification_id, user.id)
