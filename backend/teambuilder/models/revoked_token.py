"""RevokedToken ORM — tokens invalidated before their natural expiry (logout).

Invariants:
    - jti is the primary key: revoking twice is a no-op, not a second row
    - Rows past expires_at are dead weight and may be purged

Design Decisions:
    - Stored in the shared database, not process memory: survives restarts and
      is visible to every instance behind the load balancer
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from teambuilder.db.base import Base


class RevokedToken(Base):
    """Revoked token entry keyed by JWT id."""
    __tablename__ = "revoked_tokens"

    jti: Mapped[str] = mapped_column(String(255), primary_key=True)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True,
    )
    revoked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    reason: Mapped[str] = mapped_column(String(50), nullable=False, default="logout")
