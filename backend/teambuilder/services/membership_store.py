"""Membership Store — durable (team, user) -> role mapping.

Invariants:
    - Single source of truth for "who is on which team"
    - add() is an atomic check-and-insert: the composite primary key rejects a
      concurrent duplicate that passed the pre-check
    - Never commits; a constraint violation aborts the caller's unit of work

Design Decisions:
    - find() (returns None) beside get() (raises): rule checks want the optional form
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from teambuilder.core.domain_types import TeamId, TeamRole, UserId
from teambuilder.core.errors import DuplicateMembershipError, ResourceNotFoundError
from teambuilder.models.membership import Membership

logger = logging.getLogger(__name__)


class MembershipStore:
    """Persistence for team memberships."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, team_id: TeamId, user_id: UserId, role: TeamRole) -> Membership:
        if await self.find(team_id, user_id) is not None:
            raise DuplicateMembershipError(team_id, user_id)
        membership = Membership(team_id=team_id, user_id=user_id, role=role.value)
        self.db.add(membership)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateMembershipError(team_id, user_id)
        return membership

    async def remove(self, team_id: TeamId, user_id: UserId) -> None:
        membership = await self.get(team_id, user_id)
        await self.db.delete(membership)
        await self.db.flush()

    async def get(self, team_id: TeamId, user_id: UserId) -> Membership:
        membership = await self.find(team_id, user_id)
        if membership is None:
            raise ResourceNotFoundError("Membership", f"{team_id}/{user_id}")
        return membership

    async def find(self, team_id: TeamId, user_id: UserId) -> Membership | None:
        result = await self.db.execute(
            select(Membership)
            .where(Membership.team_id == team_id)
            .where(Membership.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def list_by_team(self, team_id: TeamId) -> list[Membership]:
        result = await self.db.execute(
            select(Membership).where(Membership.team_id == team_id),
        )
        return list(result.scalars().all())

    async def list_by_user(self, user_id: UserId) -> list[Membership]:
        result = await self.db.execute(
            select(Membership).where(Membership.user_id == user_id),
        )
        return list(result.scalars().all())

    async def set_role(
        self, team_id: TeamId, user_id: UserId, role: TeamRole,
    ) -> Membership:
        membership = await self.get(team_id, user_id)
        membership.role = role.value
        await self.db.flush()
        return membership

    async def remove_all_for_team(self, team_id: TeamId) -> int:
        result = await self.db.execute(
            delete(Membership).where(Membership.team_id == team_id),
        )
        return result.rowcount or 0
