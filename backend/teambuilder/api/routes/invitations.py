"""Invitation Routes — invite, respond, list and withdraw.

Invariants:
    - New invitation → 201; an existing pending one → 200 with already_invited=True
      and the existing id (informational, not an error)
    - Only the invited user may respond; response includes the team name
    - DELETE of an already-removed invitation → 404

Design Decisions:
    - /invitations/mine and /invitations/team/{id} declared before /invitations/{id}
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from teambuilder.api.dependencies import (
    get_current_user_id, get_invitation_workflow,
)
from teambuilder.core.domain_types import InvitationId, TeamId, UserId
from teambuilder.core.errors import AlreadyInvitedError, ResourceNotFoundError
from teambuilder.schemas.invitation import (
    InvitationCreateResponse, InvitationResponse, InviteRequest,
    RespondRequest, RespondResponse,
)
from teambuilder.schemas.team import ActionResponse
from teambuilder.services.invitation_workflow import InvitationWorkflow

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/invitations", tags=["invitations"])


@router.post(
    "", response_model=InvitationCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_invitation(
    body: InviteRequest,
    response: Response,
    user_id: UserId = Depends(get_current_user_id),
    workflow: InvitationWorkflow = Depends(get_invitation_workflow),
):
    """Invite by user id or by registered email."""
    team_id = TeamId(body.team_id)
    if body.invited_user_id is not None:
        result = await workflow.invite(team_id, UserId(body.invited_user_id), user_id)
    else:
        result = await workflow.invite_by_email(team_id, body.invited_user_email, user_id)

    if isinstance(result.error, AlreadyInvitedError):
        response.status_code = status.HTTP_200_OK
        return InvitationCreateResponse(
            id=result.error.existing_invitation_id,
            already_invited=True,
            message=result.error.message,
        )
    return InvitationCreateResponse(id=result.unwrap().id)


@router.post("/respond", response_model=RespondResponse)
async def respond_to_invitation(
    body: RespondRequest,
    user_id: UserId = Depends(get_current_user_id),
    workflow: InvitationWorkflow = Depends(get_invitation_workflow),
):
    result = await workflow.respond(
        InvitationId(body.invitation_id), body.accept, responder_id=user_id,
    )
    invitation = result.unwrap()
    return RespondResponse(
        id=invitation.id,
        accepted=invitation.accepted,
        team_name=invitation.team.name,
    )


@router.get("/mine", response_model=list[InvitationResponse])
async def list_my_invitations(
    user_id: UserId = Depends(get_current_user_id),
    workflow: InvitationWorkflow = Depends(get_invitation_workflow),
):
    """Pending invitations addressed to the caller, newest first."""
    return await workflow.list_pending_for_user(user_id)


@router.get("/team/{team_id}", response_model=list[InvitationResponse])
async def list_team_invitations(
    team_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    workflow: InvitationWorkflow = Depends(get_invitation_workflow),
):
    return (await workflow.list_for_team(TeamId(team_id))).unwrap()


@router.get("/{invitation_id}", response_model=InvitationResponse)
async def get_invitation(
    invitation_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    workflow: InvitationWorkflow = Depends(get_invitation_workflow),
):
    return (await workflow.get(InvitationId(invitation_id))).unwrap()


@router.delete("/{invitation_id}", response_model=ActionResponse)
async def delete_invitation(
    invitation_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    workflow: InvitationWorkflow = Depends(get_invitation_workflow),
):
    removed = (await workflow.delete(InvitationId(invitation_id), user_id)).unwrap()
    if not removed:
        raise ResourceNotFoundError("Invitation", str(invitation_id))
    return ActionResponse(message="Invitation withdrawn")
