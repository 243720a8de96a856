"""Team Schemas — request/response contracts for team and membership endpoints.

Invariants:
    - TeamCreate.name: 1-120 chars, stripped, non-empty
    - TeamResponse always embeds the member list with roles
    - role values limited to TeamRole (Pydantic rejects anything else)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from teambuilder.core.domain_types import TeamRole


def _strip_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("name cannot be empty or whitespace")
    return v


class TeamCreate(BaseModel):
    """Team creation; the caller becomes organizer."""
    name: str = Field(min_length=1, max_length=120)
    description: str = Field("", max_length=2000)
    is_open: bool = True

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_name(v)


class TeamUpdate(BaseModel):
    """Partial update; omitted fields stay unchanged."""
    name: str | None = Field(None, min_length=1, max_length=120)
    description: str | None = Field(None, max_length=2000)
    is_open: bool | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _strip_name(v) if v is not None else v


class MemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    role: TeamRole
    joined_at: datetime


class TeamResponse(BaseModel):
    """Team with its members."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str
    is_open: bool
    organizer_id: UUID
    created_at: datetime
    members: list[MemberResponse] = Field(
        default_factory=list, validation_alias="memberships",
    )


class MemberAction(BaseModel):
    """Target of kick."""
    user_id: UUID


class AssignRoleRequest(BaseModel):
    user_id: UUID
    role: TeamRole


class TransferOwnershipRequest(BaseModel):
    new_organizer_id: UUID


class ActionResponse(BaseModel):
    """Outcome of join/leave/kick/delete."""
    success: bool = True
    message: str
