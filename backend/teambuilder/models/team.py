"""Team ORM — aggregate root for memberships, invitations, events and chat.

Invariants:
    - organizer_id always references a current member (enforced by team_aggregate)
    - organizer_id is the single source of truth for "who is organizer"
    - is_open=False means members join only through an accepted invitation

Design Decisions:
    - No ORM cascade on memberships: team deletion is an explicit fan-out in
      team_aggregate so orphan-freedom does not depend on the storage engine
    - memberships loaded with selectin: team responses always list members
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from teambuilder.db.base import Base


class Team(Base):
    """Team aggregate root."""
    __tablename__ = "teams"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_open: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    organizer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    memberships: Mapped[list["Membership"]] = relationship(
        "Membership", back_populates="team",
        lazy="selectin", passive_deletes=True,
    )
