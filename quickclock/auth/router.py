"""Auth router — password login and current user profile."""


from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from quickclock.auth.dependencies import get_current_user
from quickclock.auth.schemas import LoginRequest, TokenResponse
from quickclock.auth.service import login as login_user
from quickclock.common.rate_limit import limiter
from quickclock.database import get_db
from quickclock.users.models import User
from quickclock.users.schemas import UserResponse

router = APIRouter(prefix="", tags=["auth"])


# ── POST /login ─────────────────────────────────────────────────────

@router.post("/login", response_model=TokenResponse)
@limiter.limit("10/minute")
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    return await login_user(db, body.email, body.password)


# ── GET /me ─────────────────────────────────────────────────────────

@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)):
    return user
