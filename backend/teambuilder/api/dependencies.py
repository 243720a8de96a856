"""API Dependencies — caller identity, service wiring and result unwrapping.

Invariants:
    - X-User-Id missing or not a UUID → 401 before any service runs
    - X-Token-Id, when present, must not be in the revocation table → 401
    - Services constructed per request around the request's session

Design Decisions:
    - Identity from upstream gateway headers: token issuance/verification lives
      outside this service; only the revocation check is ours
"""

from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from teambuilder.api.error_handlers import error_body
from teambuilder.config import get_settings
from teambuilder.core.domain_types import UserId
from teambuilder.core.errors import ErrorSeverity
from teambuilder.infrastructure.database import get_db
from teambuilder.services.admin_service import AdminService
from teambuilder.services.chat_service import ChatService
from teambuilder.services.event_service import EventService
from teambuilder.services.invitation_ledger import InvitationLedger
from teambuilder.services.invitation_workflow import InvitationWorkflow
from teambuilder.services.team_aggregate import TeamAggregate
from teambuilder.services.token_revocation import TokenRevocationStore


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status.HTTP_401_UNAUTHORIZED,
        detail=error_body(
            "UNAUTHENTICATED", message, "authorization", ErrorSeverity.WARNING,
        ),
    )


async def get_current_user_id(
    x_user_id: str | None = Header(None),
    x_token_id: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
) -> UserId:
    """Resolve the caller from gateway headers."""
    if not x_user_id:
        raise _unauthorized("Missing X-User-Id header")
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise _unauthorized("Malformed X-User-Id header")
    if x_token_id and await TokenRevocationStore(db).is_revoked(x_token_id):
        raise _unauthorized("Token has been revoked")
    return UserId(user_id)


def get_team_aggregate(db: AsyncSession = Depends(get_db)) -> TeamAggregate:
    return TeamAggregate(db)


def get_invitation_workflow(db: AsyncSession = Depends(get_db)) -> InvitationWorkflow:
    ledger = InvitationLedger(db, list_limit=get_settings().invitation_list_limit)
    return InvitationWorkflow(db, ledger=ledger)


def get_event_service(db: AsyncSession = Depends(get_db)) -> EventService:
    return EventService(db)


def get_chat_service(db: AsyncSession = Depends(get_db)) -> ChatService:
    return ChatService(db, history_limit=get_settings().chat_history_limit)


def get_admin_service(db: AsyncSession = Depends(get_db)) -> AdminService:
    return AdminService(db)
