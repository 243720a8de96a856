"""Token Revocation Routes — logout support for the upstream gateway."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teambuilder.api.dependencies import get_current_user_id
from teambuilder.core.domain_types import UserId
from teambuilder.infrastructure.database import get_db
from teambuilder.schemas.user import TokenRevokeRequest, TokenRevokeResponse
from teambuilder.services.token_revocation import TokenRevocationStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/tokens", tags=["tokens"])


@router.post("/revoke", response_model=TokenRevokeResponse)
async def revoke_token(
    body: TokenRevokeRequest,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Idempotent: revoking an already-revoked token returns revoked=False."""
    revoked = await TokenRevocationStore(db).revoke(
        body.jti, body.expires_at, body.reason,
    )
    return TokenRevokeResponse(revoked=revoked)
