"""User Directory — minimal user lookup for membership and invitation checks.

Invariants:
    - Deleted users (is_deleted) are invisible to get() and find_by_email()
      and hold no administrator rights
    - Emails compared case-insensitively (stored lower-cased)
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teambuilder.core.domain_types import UserId
from teambuilder.core.errors import (
    ConcurrencyError, DuplicateEmailError, ResourceNotFoundError,
)
from teambuilder.infrastructure.database import unit_of_work
from teambuilder.models.user import User

logger = logging.getLogger(__name__)


class UserDirectory:
    """Read/create access to users."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self, email: str, username: str,
        first_name: str = "", last_name: str = "", is_admin: bool = False,
    ) -> User:
        email = email.strip().lower()
        try:
            async with unit_of_work(self.db):
                if await self.find_by_email(email) is not None:
                    raise DuplicateEmailError(email)
                user = User(
                    email=email, username=username,
                    first_name=first_name, last_name=last_name,
                    is_admin=is_admin,
                )
                self.db.add(user)
                await self.db.flush()
        except ConcurrencyError:
            raise DuplicateEmailError(email)
        logger.info(f"User {user.id} registered", extra={"user_id": user.id})
        return user

    async def get(self, user_id: UserId) -> User:
        result = await self.db.execute(
            select(User).where(User.id == user_id).where(User.is_deleted.is_(False)),
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user

    async def find_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User)
            .where(User.email == email.strip().lower())
            .where(User.is_deleted.is_(False))
        )
        return result.scalar_one_or_none()

    async def is_admin(self, user_id: UserId) -> bool:
        result = await self.db.execute(
            select(User.is_admin)
            .where(User.id == user_id)
            .where(User.is_deleted.is_(False)),
        )
        return bool(result.scalar_one_or_none())
