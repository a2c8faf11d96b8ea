"""Manual attendance request endpoints."""


import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quickclock.auth.dependencies import get_current_user, require_admin
from quickclock.common.clock import Clock, get_clock
from quickclock.database import get_db
from quickclock.manual_requests.schemas import (
    ManualRequestCreate,
    ManualRequestDecision,
    ManualRequestResponse,
    ManualRequestWithEmployee,
)
from quickclock.manual_requests.service import ManualRequestService
from quickclock.notifications.outbox import NotificationOutbox, get_outbox
from quickclock.users.models import User

router = APIRouter(prefix="", tags=["manual-requests"])


# ── POST / ──────────────────────────────────────────────────────────

@router.post("", response_model=ManualRequestResponse, status_code=201)
async def submit_request(
    body: ManualRequestCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    outbox: NotificationOutbox = Depends(get_outbox),
):
    return await ManualRequestService.submit(
        db,
        user,
        body.date,
        body.check_in_time,
        body.check_out_time,
        body.reason,
        clock=clock,
        outbox=outbox,
    )


# ── GET /mine ───────────────────────────────────────────────────────

@router.get("/mine", response_model=list[ManualRequestResponse])
async def my_requests(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ManualRequestService.list_mine(db, user.id)


# ── GET / (admin) ───────────────────────────────────────────────────

@router.get("", response_model=list[ManualRequestWithEmployee])
async def all_requests(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await ManualRequestService.list_all(db)


# ── GET /pending (admin) ────────────────────────────────────────────

@router.get("/pending", response_model=list[ManualRequestWithEmployee])
async def pending_requests(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await ManualRequestService.list_all(db, pending_only=True)


# ── PUT /{request_id}/process (admin) ───────────────────────────────

@router.put("/{request_id}/process", response_model=ManualRequestResponse)
async def process_request(
    request_id: uuid.UUID,
    body: ManualRequestDecision,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    outbox: NotificationOutbox = Depends(get_outbox),
):
    return await ManualRequestService.process(
        db, request_id, body.status, admin, clock=clock, outbox=outbox,
    )


# ── DELETE /{request_id} ────────────────────────────────────────────

@router.delete("/{request_id}", status_code=204)
async def cancel_request(
    request_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    outbox: NotificationOutbox = Depends(get_outbox),
):
    await ManualRequestService.cancel(db, request_id, user, outbox=outbox)
