"""User management endpoints (admin only)."""


import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quickclock.auth.dependencies import require_admin
from quickclock.database import get_db
from quickclock.users.models import User
from quickclock.users.schemas import UserCreate, UserResponse, UserUpdate
from quickclock.users.service import UserService

router = APIRouter(prefix="", tags=["users"])


# ── GET / ───────────────────────────────────────────────────────────

@router.get("", response_model=list[UserResponse])
async def list_users(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await UserService.list_users(db)


# ── POST / ──────────────────────────────────────────────────────────

@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    body: UserCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await UserService.create_user(db, body)


# ── GET /{user_id} ──────────────────────────────────────────────────

@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await UserService.get_user(db, user_id)


# ── PATCH /{user_id} ────────────────────────────────────────────────

@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: uuid.UUID,
    body: UserUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await UserService.update_user(db, user_id, body)
