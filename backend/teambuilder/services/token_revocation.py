"""Token Revocation — shared-store list of tokens invalidated before expiry.

Invariants:
    - revoke() is idempotent: revoking an already-revoked jti returns False
    - is_revoked() is a single primary-key lookup
    - purge_expired() only removes rows whose token could no longer be used anyway

Design Decisions:
    - Database table over in-process set: consistent across instances and restarts
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from teambuilder.core.errors import ConcurrencyError
from teambuilder.infrastructure.database import unit_of_work
from teambuilder.models.revoked_token import RevokedToken

logger = logging.getLogger(__name__)


class TokenRevocationStore:
    """Revocation table access."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def revoke(self, jti: str, expires_at: datetime, reason: str = "logout") -> bool:
        try:
            async with unit_of_work(self.db):
                if await self.is_revoked(jti):
                    return False
                self.db.add(RevokedToken(jti=jti, expires_at=expires_at, reason=reason))
                await self.db.flush()
        except ConcurrencyError:
            # a concurrent logout of the same token got there first
            return False
        logger.info(f"Token revoked ({reason})")
        return True

    async def is_revoked(self, jti: str) -> bool:
        result = await self.db.execute(
            select(RevokedToken.jti).where(RevokedToken.jti == jti),
        )
        return result.scalar_one_or_none() is not None

    async def purge_expired(self, now: datetime | None = None) -> int:
        now = now or datetime.now(timezone.utc)
        async with unit_of_work(self.db):
            result = await self.db.execute(
                delete(RevokedToken)
                .where(RevokedToken.expires_at < now)
                .execution_options(synchronize_session=False)
            )
            count = result.rowcount or 0
        logger.info(f"Purged {count} expired revoked tokens", extra={"count": count})
        return count
