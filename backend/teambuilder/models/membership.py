"""Membership ORM — binds a user to a team with a display role.

Invariants:
    - (team_id, user_id) is the primary key: at most one membership per pair,
      enforced by the database even under concurrent inserts
    - role is denormalized from Team.organizer_id; only create and
      transfer_ownership rewrite it
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from teambuilder.core.domain_types import TeamRole
from teambuilder.db.base import Base


class Membership(Base):
    """Team membership — composite key (team_id, user_id)."""
    __tablename__ = "memberships"

    team_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("teams.id"), primary_key=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), primary_key=True,
    )
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TeamRole.MEMBER.value,
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    team: Mapped["Team"] = relationship("Team", back_populates="memberships")
