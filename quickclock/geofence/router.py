"""Geofence endpoints — fence administration and ad-hoc location checks."""


import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quickclock.auth.dependencies import get_current_user, require_admin
from quickclock.database import get_db
from quickclock.geofence.schemas import (
    GeoFenceCreate,
    GeoFenceResponse,
    GeoFenceUpdate,
    LocationCheckRequest,
    LocationCheckResponse,
)
from quickclock.geofence.service import GeoFenceService, is_within_geofence
from quickclock.users.models import User

router = APIRouter(prefix="", tags=["geofences"])

LOCATION_REQUIRED = "Please provide latitude and longitude."


# ── POST /check ─────────────────────────────────────────────────────

@router.post("/check", response_model=LocationCheckResponse)
async def check_location(
    body: LocationCheckRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Evaluate a coordinate against the active fences."""
    if body.latitude is None or body.longitude is None:
        return LocationCheckResponse(message=LOCATION_REQUIRED)
    within = await is_within_geofence(db, body.latitude, body.longitude)
    return LocationCheckResponse(message="Location checked.", is_within_fence=within)


# ── GET / ───────────────────────────────────────────────────────────

@router.get("", response_model=list[GeoFenceResponse])
async def list_fences(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await GeoFenceService.list_fences(db)


# ── POST / ──────────────────────────────────────────────────────────

@router.post("", response_model=GeoFenceResponse, status_code=201)
async def create_fence(
    body: GeoFenceCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await GeoFenceService.create_fence(db, body)


# ── GET /{fence_id} ─────────────────────────────────────────────────

@router.get("/{fence_id}", response_model=GeoFenceResponse)
async def get_fence(
    fence_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await GeoFenceService.get_fence(db, fence_id)


# ── PUT /{fence_id} ─────────────────────────────────────────────────

@router.put("/{fence_id}", response_model=GeoFenceResponse)
async def update_fence(
    fence_id: uuid.UUID,
    body: GeoFenceUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await GeoFenceService.update_fence(db, fence_id, body)


# ── DELETE /{fence_id} ──────────────────────────────────────────────

@router.delete("/{fence_id}", status_code=204)
async def delete_fence(
    fence_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await GeoFenceService.delete_fence(db, fence_id)
