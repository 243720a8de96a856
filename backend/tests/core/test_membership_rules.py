"""Membership Rules — pure checks, no database.

Tests:
    - join: closed team before already-member
    - leave/kick: non-member and organizer protections
    - manage: organizer or administrator only
    - role assignment never moves the organizer
    - invite: organizer only, no administrator bypass
"""

from dataclasses import dataclass, field
from uuid import UUID, uuid4

from teambuilder.core.domain_types import TeamRole
from teambuilder.core.errors import (
    AlreadyMemberError, NotAuthorizedError, NotMemberError,
    OrganizerCannotBeKickedError, OrganizerCannotLeaveError,
    RoleRequiresTransferError, TeamClosedError,
)
from teambuilder.core.membership_rules import (
    check_can_invite, check_can_join, check_can_kick, check_can_leave,
    check_can_manage, check_can_transfer, check_role_assignment, is_organizer,
)


@dataclass
class FakeTeam:
    organizer_id: UUID
    is_open: bool = True
    id: UUID = field(default_factory=uuid4)


@dataclass
class FakeMembership:
    team_id: UUID
    user_id: UUID
    role: str = TeamRole.MEMBER.value


def _membership(team, user_id, role=TeamRole.MEMBER):
    return FakeMembership(team.id, user_id, role.value)


ORGANIZER = uuid4()
MEMBER = uuid4()
OUTSIDER = uuid4()


# --- join ---------------------------------------------------------------------

def test_join_open_team_allowed():
    team = FakeTeam(ORGANIZER)
    assert check_can_join(team, OUTSIDER, None) is None


def test_join_closed_team_rejected():
    team = FakeTeam(ORGANIZER, is_open=False)
    assert isinstance(check_can_join(team, OUTSIDER, None), TeamClosedError)


def test_join_closed_team_reports_closed_before_already_member():
    team = FakeTeam(ORGANIZER, is_open=False)
    error = check_can_join(team, MEMBER, _membership(team, MEMBER))
    assert isinstance(error, TeamClosedError)


def test_join_existing_member_rejected():
    team = FakeTeam(ORGANIZER)
    error = check_can_join(team, MEMBER, _membership(team, MEMBER))
    assert isinstance(error, AlreadyMemberError)
    assert error.http_status == 409


# --- leave / kick -------------------------------------------------------------

def test_member_can_leave():
    team = FakeTeam(ORGANIZER)
    assert check_can_leave(team, MEMBER, _membership(team, MEMBER)) is None


def test_non_member_cannot_leave():
    team = FakeTeam(ORGANIZER)
    assert isinstance(check_can_leave(team, OUTSIDER, None), NotMemberError)


def test_organizer_cannot_leave_even_when_alone():
    team = FakeTeam(ORGANIZER)
    error = check_can_leave(
        team, ORGANIZER, _membership(team, ORGANIZER, TeamRole.ORGANIZER),
    )
    assert isinstance(error, OrganizerCannotLeaveError)


def test_organizer_cannot_be_kicked():
    team = FakeTeam(ORGANIZER)
    error = check_can_kick(
        team, ORGANIZER, _membership(team, ORGANIZER, TeamRole.ORGANIZER),
    )
    assert isinstance(error, OrganizerCannotBeKickedError)


def test_kick_non_member_rejected():
    team = FakeTeam(ORGANIZER)
    assert isinstance(check_can_kick(team, OUTSIDER, None), NotMemberError)


# --- manage -------------------------------------------------------------------

def test_organizer_manages():
    team = FakeTeam(ORGANIZER)
    assert check_can_manage(team, ORGANIZER, "remove members") is None


def test_administrator_manages_without_membership():
    team = FakeTeam(ORGANIZER)
    assert check_can_manage(team, OUTSIDER, "remove members", acting_is_admin=True) is None


def test_plain_member_cannot_manage():
    team = FakeTeam(ORGANIZER)
    error = check_can_manage(team, MEMBER, "remove members")
    assert isinstance(error, NotAuthorizedError)
    assert error.http_status == 403
    assert error.context.user_id == str(MEMBER)


# --- roles / transfer ---------------------------------------------------------

def test_reassigning_current_role_is_allowed():
    team = FakeTeam(ORGANIZER)
    assert check_role_assignment(
        team, MEMBER, _membership(team, MEMBER), TeamRole.MEMBER,
    ) is None
    assert check_role_assignment(
        team, ORGANIZER, _membership(team, ORGANIZER, TeamRole.ORGANIZER),
        TeamRole.ORGANIZER,
    ) is None


def test_promoting_member_to_organizer_requires_transfer():
    team = FakeTeam(ORGANIZER)
    error = check_role_assignment(
        team, MEMBER, _membership(team, MEMBER), TeamRole.ORGANIZER,
    )
    assert isinstance(error, RoleRequiresTransferError)


def test_demoting_organizer_requires_transfer():
    team = FakeTeam(ORGANIZER)
    error = check_role_assignment(
        team, ORGANIZER, _membership(team, ORGANIZER, TeamRole.ORGANIZER),
        TeamRole.MEMBER,
    )
    assert isinstance(error, RoleRequiresTransferError)


def test_role_assignment_for_non_member_rejected():
    team = FakeTeam(ORGANIZER)
    error = check_role_assignment(team, OUTSIDER, None, TeamRole.MEMBER)
    assert isinstance(error, NotMemberError)


def test_transfer_requires_target_membership():
    team = FakeTeam(ORGANIZER)
    assert isinstance(check_can_transfer(team, OUTSIDER, None), NotMemberError)
    assert check_can_transfer(team, MEMBER, _membership(team, MEMBER)) is None


# --- invite -------------------------------------------------------------------

def test_organizer_invites_outsider():
    team = FakeTeam(ORGANIZER)
    assert check_can_invite(team, OUTSIDER, ORGANIZER, None) is None


def test_member_cannot_invite():
    team = FakeTeam(ORGANIZER)
    error = check_can_invite(team, OUTSIDER, MEMBER, None)
    assert isinstance(error, NotAuthorizedError)


def test_inviting_existing_member_rejected():
    team = FakeTeam(ORGANIZER)
    error = check_can_invite(team, MEMBER, ORGANIZER, _membership(team, MEMBER))
    assert isinstance(error, AlreadyMemberError)


def test_organizer_determined_by_team_not_role():
    team = FakeTeam(ORGANIZER)
    assert is_organizer(team, ORGANIZER)
    assert not is_organizer(team, MEMBER)
