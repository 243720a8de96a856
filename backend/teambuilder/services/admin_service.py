"""Admin Service — system-administrator moderation of users and team chat.

Invariants:
    - Every operation requires the acting user to be an administrator
    - User deletion is soft (is_deleted); memberships and history stay intact,
      and recover() makes the same account visible again
    - Clearing a chat removes every message of the team and nothing else
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from teambuilder.core.domain_types import TeamId, UserId
from teambuilder.core.errors import NotAuthorizedError, ResourceNotFoundError
from teambuilder.infrastructure.database import unit_of_work
from teambuilder.models.chat_message import ChatMessage
from teambuilder.models.user import User
from teambuilder.services.result_boundary import returns_result
from teambuilder.services.team_aggregate import TeamAggregate
from teambuilder.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


class AdminService:
    """Soft-delete/recover users and clear team chat."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserDirectory(db)
        self.teams = TeamAggregate(db, users=self.users)

    async def _require_admin(self, acting_user_id: UserId, action: str) -> None:
        if not await self.users.is_admin(acting_user_id):
            raise NotAuthorizedError(action, user_id=acting_user_id)

    async def _load_any_user(self, user_id: UserId) -> User:
        # deleted users included, unlike UserDirectory.get
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user

    async def _set_deleted(
        self, user_id: UserId, acting_user_id: UserId, deleted: bool, action: str,
    ) -> User:
        async with unit_of_work(self.db):
            await self._require_admin(acting_user_id, action)
            user = await self._load_any_user(user_id)
            user.is_deleted = deleted
        logger.info(
            f"User {'deleted' if deleted else 'recovered'} by {acting_user_id}",
            extra={"user_id": user_id},
        )
        return user

    @returns_result
    async def delete_user(self, user_id: UserId, acting_user_id: UserId) -> User:
        return await self._set_deleted(user_id, acting_user_id, True, "delete users")

    @returns_result
    async def recover_user(self, user_id: UserId, acting_user_id: UserId) -> User:
        return await self._set_deleted(user_id, acting_user_id, False, "recover users")

    @returns_result
    async def clear_team_chat(self, team_id: TeamId, acting_user_id: UserId) -> int:
        """Delete all chat messages of a team; returns how many were removed."""
        async with unit_of_work(self.db):
            await self._require_admin(acting_user_id, "clear team chat")
            await self.teams.load_team(team_id)
            removed = (await self.db.execute(
                delete(ChatMessage).where(ChatMessage.team_id == team_id),
            )).rowcount or 0
        logger.info(
            f"Team chat cleared: {removed} messages",
            extra={"team_id": team_id, "user_id": acting_user_id},
        )
        return removed
