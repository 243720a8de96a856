"""Invitation Workflow — issues and resolves invitations against the ledger and team aggregate.

Invariants:
    - Only the team's organizer of record invites (no administrator bypass)
    - A user who is already a member is never invited
    - State machine: pending -> accepted | declined; both terminal (AlreadyResponded)
    - Accept records the response and admits the member in ONE unit of work;
      if the user is already a member the response still records as accepted
      and no duplicate membership is created
    - Decline keeps the record as history, same as accept

Design Decisions:
    - A concurrent join that inserts the membership between our check and insert
      rolls back the whole unit of work; we retry once, and the retry takes the
      already-member merge path
    - invite_by_email resolves the user first, then follows invite()
    - Every mutation locks the team row before touching invitations or
      memberships, so the lock order is always team first
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from teambuilder.core.domain_types import InvitationId, TeamId, UserId
from teambuilder.core.errors import (
    AlreadyMemberError, ConcurrencyError, DuplicateMembershipError,
    NotAuthorizedError, ResourceNotFoundError,
)
from teambuilder.core.membership_rules import check_can_invite, is_organizer
from teambuilder.core.repository_protocols import InvitationLedgerLike
from teambuilder.infrastructure.database import unit_of_work
from teambuilder.models.invitation import Invitation
from teambuilder.services.invitation_ledger import InvitationLedger
from teambuilder.services.result_boundary import returns_result
from teambuilder.services.team_aggregate import TeamAggregate
from teambuilder.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)

RESPOND_ATTEMPTS: int = 2


class InvitationWorkflow:
    """Invite / respond / list / delete invitations."""

    def __init__(
        self,
        db: AsyncSession,
        teams: TeamAggregate | None = None,
        ledger: InvitationLedgerLike | None = None,
        users: UserDirectory | None = None,
    ):
        self.db = db
        self.users = users or UserDirectory(db)
        self.ledger = ledger or InvitationLedger(db)
        self.teams = teams or TeamAggregate(db, invitations=self.ledger, users=self.users)

    # ─── Issue ───────────────────────────────────────────────────

    @returns_result
    async def invite(
        self, team_id: TeamId, invited_user_id: UserId, invited_by_id: UserId,
    ) -> Invitation:
        async with unit_of_work(self.db):
            invitation = await self._invite(team_id, invited_user_id, invited_by_id)
        logger.info(
            f"Invitation sent by {invited_by_id}",
            extra={
                "team_id": team_id, "user_id": invited_user_id,
                "invitation_id": invitation.id,
            },
        )
        return invitation

    @returns_result
    async def invite_by_email(
        self, team_id: TeamId, email: str, invited_by_id: UserId,
    ) -> Invitation:
        async with unit_of_work(self.db):
            user = await self.users.find_by_email(email)
            if user is None:
                raise ResourceNotFoundError(
                    "User", email,
                    message=(
                        f"User with email '{email}' not found. "
                        "Please make sure the user is registered in the system."
                    ),
                )
            invitation = await self._invite(team_id, user.id, invited_by_id)
        logger.info(
            f"Invitation sent by {invited_by_id} (by email)",
            extra={
                "team_id": team_id, "user_id": user.id,
                "invitation_id": invitation.id,
            },
        )
        return invitation

    async def _invite(
        self, team_id: TeamId, invited_user_id: UserId, invited_by_id: UserId,
    ) -> Invitation:
        team = await self.teams.load_team(team_id, for_update=True)
        await self.users.get(invited_user_id)
        existing = await self.teams.memberships.find(team_id, invited_user_id)
        violation = check_can_invite(team, invited_user_id, invited_by_id, existing)
        if violation is not None:
            raise violation
        return await self.ledger.create(team_id, invited_user_id, invited_by_id)

    # ─── Resolve ─────────────────────────────────────────────────

    @returns_result
    async def respond(
        self, invitation_id: InvitationId, accept: bool,
        responder_id: UserId | None = None,
    ) -> Invitation:
        for attempt in range(RESPOND_ATTEMPTS):
            try:
                return await self._respond_once(invitation_id, accept, responder_id)
            except DuplicateMembershipError:
                logger.info(
                    f"Membership created concurrently (attempt {attempt + 1})",
                    extra={"invitation_id": invitation_id},
                )
        raise ConcurrencyError("Invitation response conflicted with a concurrent join")

    async def _respond_once(
        self, invitation_id: InvitationId, accept: bool, responder_id: UserId | None,
    ) -> Invitation:
        async with unit_of_work(self.db):
            invitation = await self.ledger.get(invitation_id)
            if responder_id is not None and invitation.invited_user_id != responder_id:
                raise NotAuthorizedError(
                    "respond to this invitation", invitation.team_id, responder_id,
                )
            await self.teams.load_team(invitation.team_id, for_update=True)
            invitation = await self.ledger.respond(invitation_id, accept)
            if accept:
                try:
                    await self.teams.admit_member(
                        invitation.team_id, invitation.invited_user_id,
                    )
                except AlreadyMemberError:
                    logger.info(
                        "Invitation accepted by existing member; no membership added",
                        extra={"invitation_id": invitation_id},
                    )
        logger.info(
            f"Invitation {'accepted' if accept else 'declined'}",
            extra={
                "team_id": invitation.team_id,
                "user_id": invitation.invited_user_id,
                "invitation_id": invitation_id,
            },
        )
        return invitation

    # ─── Read / cleanup ──────────────────────────────────────────

    @returns_result
    async def get(self, invitation_id: InvitationId) -> Invitation:
        return await self.ledger.get(invitation_id)

    async def list_pending_for_user(self, user_id: UserId) -> list[Invitation]:
        return await self.ledger.list_pending_for_user(user_id)

    @returns_result
    async def list_for_team(self, team_id: TeamId) -> list[Invitation]:
        await self.teams.load_team(team_id)
        return await self.ledger.list_for_team(team_id)

    @returns_result
    async def delete(self, invitation_id: InvitationId, acting_user_id: UserId) -> bool:
        """Withdraw an invitation; organizer of record or original sender only."""
        async with unit_of_work(self.db):
            invitation = await self.ledger.get(invitation_id)
            team = await self.teams.load_team(invitation.team_id, for_update=True)
            if not (
                is_organizer(team, acting_user_id)
                or invitation.invited_by_id == acting_user_id
            ):
                raise NotAuthorizedError(
                    "withdraw this invitation", team.id, acting_user_id,
                )
            removed = await self.ledger.delete(invitation_id)
        return removed
