"""User lookups used across modules, plus admin user management."""

from __future__ import annotations

import logging
import uuid
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quickclock.auth.security import hash_password
from quickclock.common.constants import UserRole
from quickclock.common.exceptions import ConflictError, NotFoundException
from quickclock.users.models import User
from quickclock.users.schemas import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


def is_admin(user: User) -> bool:
    return user.role == UserRole.admin


class UserService:

    @staticmethod
    async def get_user(db: AsyncSession, user_id: uuid.UUID) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundException("User", user_id)
        return user

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(
            select(User).where(User.email == email.lower())
        )
        return result.scalars().first()

    @staticmethod
    async def list_admins(db: AsyncSession) -> Sequence[User]:
        result = await db.execute(
            select(User).where(
                User.role == UserRole.admin,
                User.is_active.is_(True),
            )
        )
        return result.scalars().all()

    @staticmethod
    async def list_active_employees(db: AsyncSession) -> Sequence[User]:
        """Active non-admin users, the population the absence check covers."""
        result = await db.execute(
            select(User)
            .where(
                User.role == UserRole.employee,
                User.is_active.is_(True),
            )
            .order_by(User.full_name)
        )
        return result.scalars().all()

    @staticmethod
    async def list_users(db: AsyncSession) -> Sequence[User]:
        result = await db.execute(select(User).order_by(User.full_name))
        return result.scalars().all()

    @staticmethod
    async def create_user(db: AsyncSession, data: UserCreate) -> User:
        email = data.email.lower()
        if await UserService.get_by_email(db, email) is not None:
            raise ConflictError(f"A user with email '{email}' already exists.")

        user = User(
            full_name=data.full_name,
            email=email,
            password_hash=hash_password(data.password),
            mobile=data.mobile,
            department=data.department,
            designation=data.designation,
            role=data.role,
            birthday=data.birthday,
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise ConflictError(f"A user with email '{email}' already exists.")
        logger.info("Created %s user %s", user.role.value, email)
        return user

    @staticmethod
    async def update_user(
        db: AsyncSession,
        user_id: uuid.UUID,
        data: UserUpdate,
    ) -> User:
        user = await UserService.get_user(db, user_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        await db.flush()
        return user

    @staticmethod
    async def ensure_bootstrap_admin(
        db: AsyncSession,
        email: Optional[str],
        password: Optional[str],
    ) -> Optional[User]:
        """Create the first admin when none exists. Returns the new admin, if any."""
        if await UserService.list_admins(db):
            return None
        if not email or not password:
            logger.warning(
                "No admin user exists and BOOTSTRAP_ADMIN_EMAIL/PASSWORD are not set",
            )
            return None
        admin = await UserService.create_user(
            db,
            UserCreate(
                full_name="Administrator",
                email=email,
                password=password,
                role=UserRole.admin,
            ),
        )
        logger.info("Bootstrapped admin user %s", admin.email)
        return admin
