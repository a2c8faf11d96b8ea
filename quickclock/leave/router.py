"""Leave endpoints — apply, list, decide, cancel."""


import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quickclock.auth.dependencies import get_current_user, require_admin
from quickclock.database import get_db
from quickclock.leave.schemas import (
    LeaveApply,
    LeaveDecision,
    LeaveResponse,
    LeaveWithEmployee,
)
from quickclock.leave.service import LeaveService
from quickclock.notifications.outbox import NotificationOutbox, get_outbox
from quickclock.users.models import User

router = APIRouter(prefix="", tags=["leaves"])


# ── POST / ──────────────────────────────────────────────────────────

@router.post("", response_model=LeaveResponse, status_code=201)
async def apply_leave(
    body: LeaveApply,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    outbox: NotificationOutbox = Depends(get_outbox),
):
    return await LeaveService.apply(
        db, user, body.start_date, body.end_date, body.type, body.reason, outbox=outbox,
    )


# ── GET /mine ───────────────────────────────────────────────────────

@router.get("/mine", response_model=list[LeaveResponse])
async def my_leaves(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await LeaveService.list_mine(db, user.id)


# ── GET / (admin) ───────────────────────────────────────────────────

@router.get("", response_model=list[LeaveWithEmployee])
async def all_leaves(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await LeaveService.list_all(db)


# ── GET /pending (admin) ────────────────────────────────────────────

@router.get("/pending", response_model=list[LeaveWithEmployee])
async def pending_leaves(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await LeaveService.list_all(db, pending_only=True)


# ── PUT /{leave_id}/status (admin) ──────────────────────────────────

@router.put("/{leave_id}/status", response_model=LeaveResponse)
async def decide_leave(
    leave_id: uuid.UUID,
    body: LeaveDecision,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    outbox: NotificationOutbox = Depends(get_outbox),
):
    return await LeaveService.decide(db, leave_id, body.status, admin, outbox=outbox)


# ── DELETE /{leave_id} ──────────────────────────────────────────────

@router.delete("/{leave_id}", status_code=204)
async def cancel_leave(
    leave_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    outbox: NotificationOutbox = Depends(get_outbox),
):
    await LeaveService.cancel(db, leave_id, user, outbox=outbox)
