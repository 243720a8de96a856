"""Admin Routes — user soft-delete/recover and team chat moderation.

Invariants:
    - Non-administrators get 403 NOT_AUTHORIZED
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from teambuilder.api.dependencies import get_admin_service, get_current_user_id
from teambuilder.core.domain_types import TeamId, UserId
from teambuilder.schemas.activity import ChatClearResponse
from teambuilder.schemas.user import UserStatusResponse
from teambuilder.services.admin_service import AdminService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.delete("/users/{user_id}", response_model=UserStatusResponse)
async def delete_user(
    user_id: UUID,
    acting_user_id: UserId = Depends(get_current_user_id),
    admin: AdminService = Depends(get_admin_service),
):
    user = (await admin.delete_user(UserId(user_id), acting_user_id)).unwrap()
    return UserStatusResponse(id=user.id, is_deleted=user.is_deleted)


@router.put("/users/{user_id}/recover", response_model=UserStatusResponse)
async def recover_user(
    user_id: UUID,
    acting_user_id: UserId = Depends(get_current_user_id),
    admin: AdminService = Depends(get_admin_service),
):
    user = (await admin.recover_user(UserId(user_id), acting_user_id)).unwrap()
    return UserStatusResponse(id=user.id, is_deleted=user.is_deleted)


@router.delete("/teams/{team_id}/chat", response_model=ChatClearResponse)
async def clear_team_chat(
    team_id: UUID,
    acting_user_id: UserId = Depends(get_current_user_id),
    admin: AdminService = Depends(get_admin_service),
):
    removed = (await admin.clear_team_chat(TeamId(team_id), acting_user_id)).unwrap()
    return ChatClearResponse(removed=removed)
