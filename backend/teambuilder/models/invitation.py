"""Invitation ORM — an offer for a user to join a team, plus its response history.

Invariants:
    - responded_at IS NULL means pending; accepted is meaningful only once responded
    - At most one pending invitation per (team_id, invited_user_id): partial unique
      index, so concurrent invites cannot both insert
    - Mutated exactly once (on response); declined invitations are retained

Design Decisions:
    - Partial index declared for both postgresql and sqlite (tests run on sqlite)
    - status derived at read time via invitation_status(), never stored
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from teambuilder.core.domain_types import InvitationStatus, invitation_status
from teambuilder.db.base import Base


class Invitation(Base):
    """Invitation entity."""
    __tablename__ = "invitations"
    __table_args__ = (
        Index(
            "uq_invitations_pending_pair",
            "team_id", "invited_user_id",
            unique=True,
            postgresql_where=text("responded_at IS NULL"),
            sqlite_where=text("responded_at IS NULL"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    team_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("teams.id"), nullable=False,
    )
    invited_user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    invited_by_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    sent_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    responded_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    accepted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    team: Mapped["Team"] = relationship("Team", lazy="joined")

    @property
    def status(self) -> InvitationStatus:
        return invitation_status(self.responded_at, self.accepted)
