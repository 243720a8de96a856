"""Team Aggregate — team-level business rules spanning team state and memberships.

Invariants:
    - Exactly one membership per team carries role=organizer, and its user_id
      equals team.organizer_id (create and transfer_ownership are the only writers)
    - A team is never observed without its organizer's membership (create is one unit of work)
    - Every mutation is one unit_of_work: rule check, store writes, commit, or nothing
    - delete() is an explicit fan-out; no orphaned membership/invitation/event/chat row

Design Decisions:
    - Rules decided by core/membership_rules (pure), applied here (imperative shell)
    - admit_member() is the raw entry point for callers already inside a unit of
      work (invitation acceptance); it skips the open/closed check by design of the
      invitation path and raises instead of returning a result
    - Team is re-read with populate_existing after mutations so the members list
      in the returned object reflects committed state
    - Mutations load the team row with SELECT ... FOR UPDATE: concurrent
      transfer/leave/kick/join on one team run one after another, so the
      organizer_id read by the rule check is still current at commit
"""

import logging

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from teambuilder.core.domain_types import TeamId, TeamRole, UserId
from teambuilder.core.errors import (
    AlreadyMemberError, DuplicateMembershipError, ResourceNotFoundError,
    TeamBuilderError,
)
from teambuilder.core.membership_rules import (
    check_can_join, check_can_kick, check_can_leave, check_can_manage,
    check_can_transfer, check_role_assignment,
)
from teambuilder.core.repository_protocols import (
    InvitationLedgerLike, MembershipStoreLike,
)
from teambuilder.infrastructure.database import unit_of_work
from teambuilder.models.chat_message import ChatMessage
from teambuilder.models.event import Event
from teambuilder.models.membership import Membership
from teambuilder.models.team import Team
from teambuilder.services.invitation_ledger import InvitationLedger
from teambuilder.services.membership_store import MembershipStore
from teambuilder.services.result_boundary import returns_result
from teambuilder.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


def team_query(team_id: TeamId, for_update: bool = False) -> Select:
    """Select one team; for_update takes the row lock held until commit."""
    stmt = (
        select(Team)
        .where(Team.id == team_id)
        .execution_options(populate_existing=True)
    )
    if for_update:
        stmt = stmt.with_for_update()
    return stmt


def _raise_if(violation: TeamBuilderError | None) -> None:
    if violation is not None:
        raise violation


class TeamAggregate:
    """Team create/join/leave/kick/role/ownership/delete operations."""

    def __init__(
        self,
        db: AsyncSession,
        memberships: MembershipStoreLike | None = None,
        invitations: InvitationLedgerLike | None = None,
        users: UserDirectory | None = None,
    ):
        self.db = db
        self.memberships = memberships or MembershipStore(db)
        self.invitations = invitations or InvitationLedger(db)
        self.users = users or UserDirectory(db)

    # ─── Reads ───────────────────────────────────────────────────

    async def load_team(self, team_id: TeamId, for_update: bool = False) -> Team:
        """Fetch team with fresh members list, or raise ResourceNotFoundError."""
        result = await self.db.execute(team_query(team_id, for_update))
        team = result.scalar_one_or_none()
        if team is None:
            raise ResourceNotFoundError("Team", str(team_id))
        return team

    @returns_result
    async def get(self, team_id: TeamId) -> Team:
        return await self.load_team(team_id)

    async def list_all(self) -> list[Team]:
        result = await self.db.execute(
            select(Team)
            .order_by(Team.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_for_user(self, user_id: UserId) -> list[Team]:
        result = await self.db.execute(
            select(Team)
            .join(Membership, Membership.team_id == Team.id)
            .where(Membership.user_id == user_id)
            .order_by(Team.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    @returns_result
    async def list_members(self, team_id: TeamId) -> list[Membership]:
        await self.load_team(team_id)
        return await self.memberships.list_by_team(team_id)

    # ─── Lifecycle ───────────────────────────────────────────────

    @returns_result
    async def create(
        self, name: str, description: str, is_open: bool, organizer_id: UserId,
    ) -> Team:
        """Team and organizer membership as a single unit."""
        async with unit_of_work(self.db):
            await self.users.get(organizer_id)
            team = Team(
                name=name, description=description or "",
                is_open=is_open, organizer_id=organizer_id,
            )
            self.db.add(team)
            await self.db.flush()
            await self.memberships.add(team.id, organizer_id, TeamRole.ORGANIZER)
        logger.info(
            f"Team '{name}' created",
            extra={"team_id": team.id, "user_id": organizer_id},
        )
        return await self.load_team(team.id)

    @returns_result
    async def update(
        self, team_id: TeamId, acting_user_id: UserId,
        name: str | None = None, description: str | None = None,
        is_open: bool | None = None,
    ) -> Team:
        async with unit_of_work(self.db):
            team = await self.load_team(team_id, for_update=True)
            _raise_if(check_can_manage(
                team, acting_user_id, "update the team",
                await self.users.is_admin(acting_user_id),
            ))
            if name is not None:
                team.name = name
            if description is not None:
                team.description = description
            if is_open is not None:
                team.is_open = is_open
        return await self.load_team(team_id)

    @returns_result
    async def delete(self, team_id: TeamId, acting_user_id: UserId) -> bool:
        """Explicit fan-out: chat, events, invitations, memberships, then the team."""
        async with unit_of_work(self.db):
            team = await self.load_team(team_id, for_update=True)
            _raise_if(check_can_manage(
                team, acting_user_id, "delete the team",
                await self.users.is_admin(acting_user_id),
            ))
            messages = (await self.db.execute(
                delete(ChatMessage).where(ChatMessage.team_id == team_id),
            )).rowcount or 0
            events = (await self.db.execute(
                delete(Event).where(Event.team_id == team_id),
            )).rowcount or 0
            invitations = await self.invitations.delete_all_for_team(team_id)
            members = await self.memberships.remove_all_for_team(team_id)
            await self.db.execute(delete(Team).where(Team.id == team_id))
        logger.info(
            f"Team deleted: {members} memberships, {invitations} invitations, "
            f"{events} events, {messages} chat messages",
            extra={"team_id": team_id, "user_id": acting_user_id},
        )
        return True

    # ─── Membership ──────────────────────────────────────────────

    @returns_result
    async def join(self, team_id: TeamId, user_id: UserId) -> Membership:
        async with unit_of_work(self.db):
            team = await self.load_team(team_id, for_update=True)
            await self.users.get(user_id)
            existing = await self.memberships.find(team_id, user_id)
            _raise_if(check_can_join(team, user_id, existing))
            try:
                membership = await self.memberships.add(
                    team_id, user_id, TeamRole.MEMBER,
                )
            except DuplicateMembershipError:
                raise AlreadyMemberError(team_id, user_id)
        logger.info("Member joined", extra={"team_id": team_id, "user_id": user_id})
        return membership

    async def admit_member(self, team_id: TeamId, user_id: UserId) -> Membership:
        """Add a Member-role membership regardless of is_open.

        Caller owns the unit of work. Raises AlreadyMemberError if the pair exists;
        DuplicateMembershipError if a concurrent insert won (the session is then
        rolled back and the caller must retry).
        """
        await self.load_team(team_id, for_update=True)
        if await self.memberships.find(team_id, user_id) is not None:
            raise AlreadyMemberError(team_id, user_id)
        return await self.memberships.add(team_id, user_id, TeamRole.MEMBER)

    @returns_result
    async def leave(self, team_id: TeamId, user_id: UserId) -> bool:
        async with unit_of_work(self.db):
            team = await self.load_team(team_id, for_update=True)
            existing = await self.memberships.find(team_id, user_id)
            _raise_if(check_can_leave(team, user_id, existing))
            await self.memberships.remove(team_id, user_id)
        logger.info("Member left", extra={"team_id": team_id, "user_id": user_id})
        return True

    @returns_result
    async def kick(
        self, team_id: TeamId, user_id: UserId, acting_user_id: UserId,
    ) -> bool:
        async with unit_of_work(self.db):
            team = await self.load_team(team_id, for_update=True)
            _raise_if(check_can_manage(
                team, acting_user_id, "remove members",
                await self.users.is_admin(acting_user_id),
            ))
            existing = await self.memberships.find(team_id, user_id)
            _raise_if(check_can_kick(team, user_id, existing))
            await self.memberships.remove(team_id, user_id)
        logger.info(
            f"Member removed by {acting_user_id}",
            extra={"team_id": team_id, "user_id": user_id},
        )
        return True

    @returns_result
    async def assign_role(
        self, team_id: TeamId, user_id: UserId, role: TeamRole,
        acting_user_id: UserId,
    ) -> Membership:
        """Never touches organizer_id; organizer moves only via transfer_ownership."""
        async with unit_of_work(self.db):
            team = await self.load_team(team_id, for_update=True)
            _raise_if(check_can_manage(
                team, acting_user_id, "assign roles",
                await self.users.is_admin(acting_user_id),
            ))
            existing = await self.memberships.find(team_id, user_id)
            _raise_if(check_role_assignment(team, user_id, existing, role))
            membership = await self.memberships.set_role(team_id, user_id, role)
        return membership

    @returns_result
    async def transfer_ownership(
        self, team_id: TeamId, new_organizer_id: UserId, acting_user_id: UserId,
    ) -> Team:
        """Demote old organizer, promote target, move organizer_id atomically."""
        async with unit_of_work(self.db):
            team = await self.load_team(team_id, for_update=True)
            _raise_if(check_can_manage(
                team, acting_user_id, "transfer ownership",
                await self.users.is_admin(acting_user_id),
            ))
            target = await self.memberships.find(team_id, new_organizer_id)
            _raise_if(check_can_transfer(team, new_organizer_id, target))
            previous_id = team.organizer_id
            if previous_id != new_organizer_id:
                previous = await self.memberships.find(team_id, previous_id)
                if previous is not None:
                    await self.memberships.set_role(team_id, previous_id, TeamRole.MEMBER)
                await self.memberships.set_role(
                    team_id, new_organizer_id, TeamRole.ORGANIZER,
                )
                team.organizer_id = new_organizer_id
        logger.info(
            f"Ownership transferred from {previous_id}",
            extra={"team_id": team_id, "user_id": new_organizer_id},
        )
        return await self.load_team(team_id)
