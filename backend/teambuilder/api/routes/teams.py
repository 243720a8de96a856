"""Team Routes — team lifecycle and membership management.

Invariants:
    - Every route requires caller identity (X-User-Id)
    - Routes never contain business logic: TeamAggregate decides, routes unwrap
    - Failed OperationResults re-raise their TeamBuilderError for the global handler

Design Decisions:
    - /teams/mine declared before /teams/{team_id} so the literal path wins
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from teambuilder.api.dependencies import get_current_user_id, get_team_aggregate
from teambuilder.core.domain_types import TeamId, UserId
from teambuilder.schemas.team import (
    ActionResponse, AssignRoleRequest, MemberAction, MemberResponse,
    TeamCreate, TeamResponse, TeamUpdate, TransferOwnershipRequest,
)
from teambuilder.services.team_aggregate import TeamAggregate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/teams", tags=["teams"])


@router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
async def create_team(
    body: TeamCreate,
    user_id: UserId = Depends(get_current_user_id),
    teams: TeamAggregate = Depends(get_team_aggregate),
):
    """Create a team; the caller becomes its organizer."""
    result = await teams.create(body.name, body.description, body.is_open, user_id)
    return result.unwrap()


@router.get("", response_model=list[TeamResponse])
async def list_teams(
    user_id: UserId = Depends(get_current_user_id),
    teams: TeamAggregate = Depends(get_team_aggregate),
):
    return await teams.list_all()


@router.get("/mine", response_model=list[TeamResponse])
async def list_my_teams(
    user_id: UserId = Depends(get_current_user_id),
    teams: TeamAggregate = Depends(get_team_aggregate),
):
    return await teams.list_for_user(user_id)


@router.get("/{team_id}", response_model=TeamResponse)
async def get_team(
    team_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    teams: TeamAggregate = Depends(get_team_aggregate),
):
    return (await teams.get(TeamId(team_id))).unwrap()


@router.put("/{team_id}", response_model=TeamResponse)
async def update_team(
    team_id: UUID,
    body: TeamUpdate,
    user_id: UserId = Depends(get_current_user_id),
    teams: TeamAggregate = Depends(get_team_aggregate),
):
    result = await teams.update(
        TeamId(team_id), user_id,
        name=body.name, description=body.description, is_open=body.is_open,
    )
    return result.unwrap()


@router.delete("/{team_id}", response_model=ActionResponse)
async def delete_team(
    team_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    teams: TeamAggregate = Depends(get_team_aggregate),
):
    """Delete the team and everything that belongs to it."""
    (await teams.delete(TeamId(team_id), user_id)).unwrap()
    return ActionResponse(message="Team deleted")


# ─── Membership ──────────────────────────────────────────────────

@router.post("/{team_id}/join", response_model=ActionResponse)
async def join_team(
    team_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    teams: TeamAggregate = Depends(get_team_aggregate),
):
    (await teams.join(TeamId(team_id), user_id)).unwrap()
    return ActionResponse(message="Joined the team")


@router.post("/{team_id}/leave", response_model=ActionResponse)
async def leave_team(
    team_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    teams: TeamAggregate = Depends(get_team_aggregate),
):
    (await teams.leave(TeamId(team_id), user_id)).unwrap()
    return ActionResponse(message="Left the team")


@router.post("/{team_id}/kick", response_model=ActionResponse)
async def kick_member(
    team_id: UUID,
    body: MemberAction,
    user_id: UserId = Depends(get_current_user_id),
    teams: TeamAggregate = Depends(get_team_aggregate),
):
    (await teams.kick(TeamId(team_id), UserId(body.user_id), user_id)).unwrap()
    return ActionResponse(message="Member removed")


@router.post("/{team_id}/assign-role", response_model=MemberResponse)
async def assign_role(
    team_id: UUID,
    body: AssignRoleRequest,
    user_id: UserId = Depends(get_current_user_id),
    teams: TeamAggregate = Depends(get_team_aggregate),
):
    result = await teams.assign_role(
        TeamId(team_id), UserId(body.user_id), body.role, user_id,
    )
    return result.unwrap()


@router.post("/{team_id}/transfer-ownership", response_model=TeamResponse)
async def transfer_ownership(
    team_id: UUID,
    body: TransferOwnershipRequest,
    user_id: UserId = Depends(get_current_user_id),
    teams: TeamAggregate = Depends(get_team_aggregate),
):
    result = await teams.transfer_ownership(
        TeamId(team_id), UserId(body.new_organizer_id), user_id,
    )
    return result.unwrap()


@router.get("/{team_id}/members", response_model=list[MemberResponse])
async def list_members(
    team_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    teams: TeamAggregate = Depends(get_team_aggregate),
):
    return (await teams.list_members(TeamId(team_id))).unwrap()
