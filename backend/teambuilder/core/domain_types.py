"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - TeamId, UserId, InvitationId, EventId wrap UUIDs — never use bare UUID in domain logic
    - TeamRole is a display value; the organizer of record is Team.organizer_id
    - InvitationStatus is derived from (responded_at, accepted), never stored

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and to DB string columns without custom encoders
"""

from datetime import datetime
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

TeamId = NewType("TeamId", UUID)
UserId = NewType("UserId", UUID)
InvitationId = NewType("InvitationId", UUID)
EventId = NewType("EventId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class TeamRole(str, Enum):
    """Membership roles — maps to DB `memberships.role` column."""
    ORGANIZER = "organizer"
    MEMBER = "member"


class InvitationStatus(str, Enum):
    """Invitation lifecycle: pending -> accepted | declined (both terminal)."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


def invitation_status(
    responded_at: datetime | None, accepted: bool,
) -> InvitationStatus:
    """Derive lifecycle state from the persisted response fields."""
    if responded_at is None:
        return InvitationStatus.PENDING
    if accepted:
        return InvitationStatus.ACCEPTED
    return InvitationStatus.DECLINED
