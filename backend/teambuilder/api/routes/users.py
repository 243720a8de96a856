"""User Directory Routes — minimal registration and lookup.

Invariants:
    - Emails unique case-insensitively (409 DUPLICATE_EMAIL)
    - Deleted users are 404
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from teambuilder.core.domain_types import UserId
from teambuilder.infrastructure.database import get_db
from teambuilder.schemas.user import UserCreate, UserResponse
from teambuilder.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(body: UserCreate, db: AsyncSession = Depends(get_db)):
    return await UserDirectory(db).create(
        body.email, body.username,
        first_name=body.first_name, last_name=body.last_name,
        is_admin=body.is_admin,
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, db: AsyncSession = Depends(get_db)):
    return await UserDirectory(db).get(UserId(user_id))
