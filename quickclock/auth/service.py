"""Auth service — credential check and token issuance."""

from __future__ import annotations

import logging

from fastapi.exceptions import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from quickclock.auth.schemas import TokenResponse
from quickclock.auth.security import create_access_token, verify_password
from quickclock.users.schemas import UserResponse
from quickclock.users.service import UserService

logger = logging.getLogger(__name__)


async def login(db: AsyncSession, email: str, password: str) -> TokenResponse:
    user = await UserService.get_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login for %s", email)
        raise HTTPException(status_code=401, detail="Invalid email or password.")
    if not user.is_active:
        raise HTTPException(status_code=401, detail="User account is inactive.")

    token, expires_in = create_access_token(user.id, user.role)
    return TokenResponse(
        access_token=token,
        expires_in=expires_in,
        user=UserResponse.model_validate(user),
    )
