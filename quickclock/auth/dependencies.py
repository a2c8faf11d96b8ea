"""Auth dependencies — JWT validation, admin enforcement."""

from __future__ import annotations

import logging
import uuid

from fastapi import Depends, Request
from fastapi.exceptions import HTTPException
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from quickclock.auth.security import decode_token
from quickclock.common.exceptions import ForbiddenException
from quickclock.database import get_db
from quickclock.users.models import User
from quickclock.users.service import is_admin

logger = logging.getLogger(__name__)


def _extract_bearer(request: Request) -> str:
    """Extract Bearer token from Authorization header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing or invalid Authorization header.")
    return auth_header[7:]


# ── Core dependency ─────────────────────────────────────────────────

async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Validate the JWT and return the authenticated, active user."""
    token = _extract_bearer(request)

    try:
        payload = decode_token(token)
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired.")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token.")

    if payload.get("type") != "access":
        raise HTTPException(status_code=401, detail="Invalid token type.")

    try:
        user_id = uuid.UUID(payload["sub"])
    except (KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token.")

    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        raise HTTPException(status_code=401, detail="User account is inactive or not found.")
    return user


# ── Role dependency ─────────────────────────────────────────────────

async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Admin-only gate. The role is read from the stored user, not the token."""
    if not is_admin(user):
        logger.warning("Denied admin access to user %s", user.id)
        raise ForbiddenException(detail="Admin access required.")
    return user
