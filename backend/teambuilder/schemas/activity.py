"""Activity Schemas — team events and chat messages."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EventCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = Field("", max_length=5000)
    date: datetime
    location: str | None = Field(None, max_length=300)


class EventUpdate(BaseModel):
    """Partial update; omitted fields keep their value."""
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    date: datetime | None = None
    location: str | None = Field(None, max_length=300)


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    team_id: UUID
    name: str
    description: str
    date: datetime
    location: str | None
    created_by: UUID
    created_at: datetime


class ChatMessageCreate(BaseModel):
    message: str = Field(min_length=1, max_length=4000)

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("message cannot be empty or whitespace")
        return v


class ChatMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    team_id: UUID
    sender_id: UUID
    message: str
    sent_at: datetime


class ChatClearResponse(BaseModel):
    success: bool = True
    removed: int
