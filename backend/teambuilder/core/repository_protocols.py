"""Boundary Protocols — contracts between the membership core and its stores.

Invariants:
    - Aggregate and workflow depend on these Protocols, not on concrete stores
    - Stores never commit; the caller's unit of work owns the transaction

Design Decisions:
    - Protocol over ABC: structural subtyping, tests can pass fakes
    - Async in Protocol: implementations do IO; the rule checks they feed are pure
"""

from typing import Any, Protocol

from teambuilder.core.domain_types import InvitationId, TeamId, TeamRole, UserId


class MembershipStoreLike(Protocol):
    """Contract for (team, user, role) persistence."""
    async def add(self, team_id: TeamId, user_id: UserId, role: TeamRole) -> Any: ...
    async def remove(self, team_id: TeamId, user_id: UserId) -> None: ...
    async def get(self, team_id: TeamId, user_id: UserId) -> Any: ...
    async def find(self, team_id: TeamId, user_id: UserId) -> Any | None: ...
    async def list_by_team(self, team_id: TeamId) -> list: ...
    async def list_by_user(self, user_id: UserId) -> list: ...
    async def set_role(self, team_id: TeamId, user_id: UserId, role: TeamRole) -> Any: ...
    async def remove_all_for_team(self, team_id: TeamId) -> int: ...


class InvitationLedgerLike(Protocol):
    """Contract for invitation persistence and response history."""
    async def create(
        self, team_id: TeamId, invited_user_id: UserId, invited_by_id: UserId,
    ) -> Any: ...
    async def respond(self, invitation_id: InvitationId, accept: bool) -> Any: ...
    async def get(self, invitation_id: InvitationId) -> Any: ...
    async def find_pending(self, team_id: TeamId, invited_user_id: UserId) -> Any | None: ...
    async def list_pending_for_user(self, user_id: UserId) -> list: ...
    async def list_for_team(self, team_id: TeamId) -> list: ...
    async def delete(self, invitation_id: InvitationId) -> bool: ...
    async def delete_all_for_team(self, team_id: TeamId) -> int: ...
