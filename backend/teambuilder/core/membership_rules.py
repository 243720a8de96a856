"""Membership Rules — pure checks for team-level business rules.

Invariants:
    - Every check is PURE: takes already-loaded state, returns an error or None
    - The organizer of record is team.organizer_id; membership.role is never consulted
    - Shell (team_aggregate, invitation_workflow) raises the returned error inside
      its unit of work so nothing is persisted on rejection

Design Decisions:
    - Checks return the error instead of raising: testable without a database
    - TeamLike/MembershipLike Protocols: no coupling to the ORM models
"""

from typing import Protocol
from uuid import UUID

from teambuilder.core.domain_types import TeamRole
from teambuilder.core.errors import (
    AlreadyMemberError,
    NotAuthorizedError,
    NotMemberError,
    OrganizerCannotBeKickedError,
    OrganizerCannotLeaveError,
    RoleRequiresTransferError,
    TeamBuilderError,
    TeamClosedError,
)


class TeamLike(Protocol):
    id: UUID
    is_open: bool
    organizer_id: UUID


class MembershipLike(Protocol):
    team_id: UUID
    user_id: UUID
    role: str


def is_organizer(team: TeamLike, user_id: UUID) -> bool:
    return team.organizer_id == user_id


def check_can_join(
    team: TeamLike, user_id: UUID, existing: MembershipLike | None,
) -> TeamBuilderError | None:
    """Closed teams are entered only through an accepted invitation."""
    if not team.is_open:
        return TeamClosedError(team.id)
    if existing is not None:
        return AlreadyMemberError(team.id, user_id)
    return None


def check_can_leave(
    team: TeamLike, user_id: UUID, existing: MembershipLike | None,
) -> TeamBuilderError | None:
    """Holds even for a single-member team: the organizer deletes instead."""
    if existing is None:
        return NotMemberError(team.id, user_id)
    if is_organizer(team, user_id):
        return OrganizerCannotLeaveError(team.id, user_id)
    return None


def check_can_manage(
    team: TeamLike, acting_user_id: UUID, action: str, acting_is_admin: bool = False,
) -> TeamBuilderError | None:
    """Organizer (or a system administrator) manages the team."""
    if is_organizer(team, acting_user_id) or acting_is_admin:
        return None
    return NotAuthorizedError(action, team.id, acting_user_id)


def check_can_kick(
    team: TeamLike, user_id: UUID, existing: MembershipLike | None,
) -> TeamBuilderError | None:
    if existing is None:
        return NotMemberError(team.id, user_id)
    if is_organizer(team, user_id):
        return OrganizerCannotBeKickedError(team.id, user_id)
    return None


def check_role_assignment(
    team: TeamLike, user_id: UUID, existing: MembershipLike | None, role: TeamRole,
) -> TeamBuilderError | None:
    """Roles may not drift from organizer_id; the organizer moves via transfer only."""
    if existing is None:
        return NotMemberError(team.id, user_id)
    wants_organizer = role == TeamRole.ORGANIZER
    if wants_organizer != is_organizer(team, user_id):
        return RoleRequiresTransferError(team.id, user_id)
    return None


def check_can_transfer(
    team: TeamLike, new_organizer_id: UUID, target: MembershipLike | None,
) -> TeamBuilderError | None:
    if target is None:
        return NotMemberError(team.id, new_organizer_id)
    return None


def check_can_invite(
    team: TeamLike, invited_user_id: UUID, invited_by_id: UUID,
    existing: MembershipLike | None,
) -> TeamBuilderError | None:
    """Only the organizer of record invites; no administrator bypass."""
    if not is_organizer(team, invited_by_id):
        return NotAuthorizedError("invite members", team.id, invited_by_id)
    if existing is not None:
        return AlreadyMemberError(team.id, invited_user_id)
    return None
