"""Geofence evaluation and fence administration.

A location is within the fence when it lies inside at least one active
fence. With no active fence configured every location is accepted.
"""

from __future__ import annotations

import logging
import math
import uuid
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quickclock.common.constants import EARTH_RADIUS_METERS
from quickclock.common.exceptions import NotFoundException
from quickclock.config import settings
from quickclock.geofence.models import GeoFence
from quickclock.geofence.schemas import GeoFenceCreate, GeoFenceUpdate

logger = logging.getLogger(__name__)


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points, in meters."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    # Rounding can push a past 1 for near-antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def inside_any(latitude: float, longitude: float, fences: Sequence[GeoFence]) -> bool:
    if not fences:
        return True
    return any(
        haversine_distance(latitude, longitude, f.center_latitude, f.center_longitude)
        <= f.radius
        for f in fences
    )


async def is_within_geofence(
    db: AsyncSession,
    latitude: float,
    longitude: float,
    *,
    fail_open: Optional[bool] = None,
) -> Optional[bool]:
    """Evaluate a coordinate against all active fences.

    Returns None when the fences cannot be loaded and fail-open is disabled.
    The lookup runs in a savepoint so a failure leaves the caller's
    transaction and loaded objects intact.
    """
    if fail_open is None:
        fail_open = settings.GEOFENCE_FAIL_OPEN

    try:
        async with db.begin_nested():
            result = await db.execute(
                select(GeoFence).where(GeoFence.active.is_(True))
            )
            fences = result.scalars().all()
    except SQLAlchemyError:
        logger.exception("Geofence lookup failed for (%s, %s)", latitude, longitude)
        return True if fail_open else None

    return inside_any(latitude, longitude, fences)


class GeoFenceService:

    @staticmethod
    async def list_fences(db: AsyncSession) -> Sequence[GeoFence]:
        result = await db.execute(select(GeoFence).order_by(GeoFence.name))
        return result.scalars().all()

    @staticmethod
    async def get_fence(db: AsyncSession, fence_id: uuid.UUID) -> GeoFence:
        fence = await db.get(GeoFence, fence_id)
        if fence is None:
            raise NotFoundException("GeoFence", fence_id)
        return fence

    @staticmethod
    async def create_fence(db: AsyncSession, data: GeoFenceCreate) -> GeoFence:
        fence = GeoFence(**data.model_dump())
        db.add(fence)
        await db.flush()
        logger.info("Created geofence '%s' (%sm)", fence.name, fence.radius)
        return fence

    @staticmethod
    async def update_fence(
        db: AsyncSession,
        fence_id: uuid.UUID,
        data: GeoFenceUpdate,
    ) -> GeoFence:
        fence = await GeoFenceService.get_fence(db, fence_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(fence, field, value)
        await db.flush()
        return fence

    @staticmethod
    async def delete_fence(db: AsyncSession, fence_id: uuid.UUID) -> None:
        fence = await GeoFenceService.get_fence(db, fence_id)
        await db.delete(fence)
        await db.flush()
