"""Invitation Ledger — invitation records and their response history.

Invariants:
    - At most one pending invitation per (team, invited user): pre-check plus the
      uq_invitations_pending_pair partial unique index
    - respond() is a conditional UPDATE (WHERE responded_at IS NULL): of two
      concurrent responses exactly one wins, the other gets AlreadyResponded
    - Responded invitations are never deleted by respond(); history is kept
    - Never commits; caller's unit of work owns the transaction

Design Decisions:
    - AlreadyInvitedError carries the existing invitation id so callers can treat
      the conflict as informational
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from teambuilder.core.domain_types import InvitationId, TeamId, UserId
from teambuilder.core.errors import (
    AlreadyInvitedError, AlreadyRespondedError, ResourceNotFoundError,
)
from teambuilder.models.invitation import Invitation

logger = logging.getLogger(__name__)


class InvitationLedger:
    """Persistence for invitations."""

    def __init__(self, db: AsyncSession, list_limit: int = 200):
        self.db = db
        self._list_limit = list_limit

    async def create(
        self, team_id: TeamId, invited_user_id: UserId, invited_by_id: UserId,
    ) -> Invitation:
        existing = await self.find_pending(team_id, invited_user_id)
        if existing is not None:
            raise AlreadyInvitedError(
                team_id, invited_user_id, existing.id,
                existing.team.name if existing.team else None,
            )
        invitation = Invitation(
            team_id=team_id,
            invited_user_id=invited_user_id,
            invited_by_id=invited_by_id,
            sent_at=datetime.now(timezone.utc),
            accepted=False,
        )
        self.db.add(invitation)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            # lost the race: the winner's row is committed by now
            winner = await self.find_pending(team_id, invited_user_id)
            raise AlreadyInvitedError(
                team_id, invited_user_id,
                winner.id if winner else None,
                winner.team.name if winner and winner.team else None,
            )
        return invitation

    async def respond(self, invitation_id: InvitationId, accept: bool) -> Invitation:
        invitation = await self.get(invitation_id)
        if invitation.responded_at is not None:
            raise AlreadyRespondedError(invitation_id)

        result = await self.db.execute(
            update(Invitation)
            .where(Invitation.id == invitation_id)
            .where(Invitation.responded_at.is_(None))
            .values(responded_at=datetime.now(timezone.utc), accepted=accept)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise AlreadyRespondedError(invitation_id)
        await self.db.refresh(invitation)
        return invitation

    async def get(self, invitation_id: InvitationId) -> Invitation:
        result = await self.db.execute(
            select(Invitation).where(Invitation.id == invitation_id),
        )
        invitation = result.scalar_one_or_none()
        if invitation is None:
            raise ResourceNotFoundError("Invitation", str(invitation_id))
        return invitation

    async def find_pending(
        self, team_id: TeamId, invited_user_id: UserId,
    ) -> Invitation | None:
        result = await self.db.execute(
            select(Invitation)
            .where(Invitation.team_id == team_id)
            .where(Invitation.invited_user_id == invited_user_id)
            .where(Invitation.responded_at.is_(None))
        )
        return result.scalar_one_or_none()

    async def list_pending_for_user(self, user_id: UserId) -> list[Invitation]:
        result = await self.db.execute(
            select(Invitation)
            .where(Invitation.invited_user_id == user_id)
            .where(Invitation.responded_at.is_(None))
            .order_by(Invitation.sent_at.desc())
            .limit(self._list_limit)
        )
        return list(result.scalars().all())

    async def list_for_team(self, team_id: TeamId) -> list[Invitation]:
        result = await self.db.execute(
            select(Invitation)
            .where(Invitation.team_id == team_id)
            .order_by(Invitation.sent_at.desc())
            .limit(self._list_limit)
        )
        return list(result.scalars().all())

    async def delete(self, invitation_id: InvitationId) -> bool:
        result = await self.db.execute(
            delete(Invitation).where(Invitation.id == invitation_id),
        )
        return (result.rowcount or 0) > 0

    async def delete_all_for_team(self, team_id: TeamId) -> int:
        result = await self.db.execute(
            delete(Invitation).where(Invitation.team_id == team_id),
        )
        return result.rowcount or 0
