"""Team Activity Routes — events and chat history under /teams/{team_id}.

Invariants:
    - Members only; non-members get 400 NOT_MEMBER, unknown teams 404
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from teambuilder.api.dependencies import (
    get_chat_service, get_current_user_id, get_event_service,
)
from teambuilder.core.domain_types import EventId, TeamId, UserId
from teambuilder.schemas.activity import (
    ChatMessageCreate, ChatMessageResponse, EventCreate, EventResponse, EventUpdate,
)
from teambuilder.schemas.team import ActionResponse
from teambuilder.services.chat_service import ChatService
from teambuilder.services.event_service import EventService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/teams", tags=["team-activity"])


# ─── Events ──────────────────────────────────────────────────────

@router.post(
    "/{team_id}/events", response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_event(
    team_id: UUID,
    body: EventCreate,
    user_id: UserId = Depends(get_current_user_id),
    events: EventService = Depends(get_event_service),
):
    result = await events.create(
        TeamId(team_id), user_id, body.name, body.date,
        description=body.description, location=body.location,
    )
    return result.unwrap()


@router.get("/{team_id}/events", response_model=list[EventResponse])
async def list_events(
    team_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    events: EventService = Depends(get_event_service),
):
    return (await events.list_for_team(TeamId(team_id), user_id)).unwrap()


@router.get("/{team_id}/events/{event_id}", response_model=EventResponse)
async def get_event(
    team_id: UUID,
    event_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    events: EventService = Depends(get_event_service),
):
    return (await events.get(TeamId(team_id), EventId(event_id), user_id)).unwrap()


@router.put("/{team_id}/events/{event_id}", response_model=EventResponse)
async def update_event(
    team_id: UUID,
    event_id: UUID,
    body: EventUpdate,
    user_id: UserId = Depends(get_current_user_id),
    events: EventService = Depends(get_event_service),
):
    result = await events.update(
        TeamId(team_id), EventId(event_id), user_id,
        **body.model_dump(exclude_unset=True),
    )
    return result.unwrap()


@router.delete("/{team_id}/events/{event_id}", response_model=ActionResponse)
async def delete_event(
    team_id: UUID,
    event_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    events: EventService = Depends(get_event_service),
):
    (await events.delete(TeamId(team_id), EventId(event_id), user_id)).unwrap()
    return ActionResponse(message="Event deleted")


# ─── Chat ────────────────────────────────────────────────────────

@router.post(
    "/{team_id}/messages", response_model=ChatMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def post_message(
    team_id: UUID,
    body: ChatMessageCreate,
    user_id: UserId = Depends(get_current_user_id),
    chat: ChatService = Depends(get_chat_service),
):
    return (await chat.post(TeamId(team_id), user_id, body.message)).unwrap()


@router.get("/{team_id}/messages", response_model=list[ChatMessageResponse])
async def list_messages(
    team_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    chat: ChatService = Depends(get_chat_service),
):
    return (await chat.history(TeamId(team_id), user_id)).unwrap()
