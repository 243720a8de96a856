"""User & Token Schemas — minimal directory entries and logout revocation."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserCreate(BaseModel):
    email: EmailStr
    username: str = Field(min_length=1, max_length=100)
    first_name: str = Field("", max_length=100)
    last_name: str = Field("", max_length=100)
    is_admin: bool = False


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    username: str
    first_name: str
    last_name: str
    is_admin: bool
    created_at: datetime


class TokenRevokeRequest(BaseModel):
    jti: str = Field(min_length=1, max_length=255)
    expires_at: datetime
    reason: str = Field("logout", max_length=50)


class TokenRevokeResponse(BaseModel):
    success: bool = True
    revoked: bool


class UserStatusResponse(BaseModel):
    """Admin delete/recover outcome."""
    success: bool = True
    id: UUID
    is_deleted: bool
