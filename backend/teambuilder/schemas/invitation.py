"""Invitation Schemas — invite, respond and listing contracts.

Invariants:
    - InviteRequest names the invitee by exactly one of id or email
    - RespondResponse carries the team name so clients can confirm without a second read
    - Already-invited is a successful outcome (already_invited=True), not an error body
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, model_validator

from teambuilder.core.domain_types import InvitationStatus


class InviteRequest(BaseModel):
    team_id: UUID
    invited_user_id: UUID | None = None
    invited_user_email: EmailStr | None = None

    @model_validator(mode="after")
    def exactly_one_invitee(self) -> "InviteRequest":
        if (self.invited_user_id is None) == (self.invited_user_email is None):
            raise ValueError(
                "provide exactly one of invited_user_id or invited_user_email",
            )
        return self


class InvitationCreateResponse(BaseModel):
    success: bool = True
    id: UUID
    already_invited: bool = False
    message: str | None = None


class RespondRequest(BaseModel):
    invitation_id: UUID
    accept: bool


class RespondResponse(BaseModel):
    success: bool = True
    id: UUID
    accepted: bool
    team_name: str


class InvitationResponse(BaseModel):
    """Invitation record with derived status."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    team_id: UUID
    invited_user_id: UUID
    invited_by_id: UUID
    sent_at: datetime
    responded_at: datetime | None
    accepted: bool
    status: InvitationStatus
