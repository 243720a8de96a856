"""Event Service — scheduling events scoped to a team.

Invariants:
    - Only members create, read or list a team's events
    - Organizer, event creator or administrator updates or deletes an event
    - Events die with their team (team_aggregate fan-out), never orphaned
"""

import logging
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from teambuilder.core.domain_types import EventId, TeamId, UserId
from teambuilder.core.errors import (
    NotAuthorizedError, NotMemberError, ResourceNotFoundError,
)
from teambuilder.core.membership_rules import is_organizer
from teambuilder.infrastructure.database import unit_of_work
from teambuilder.models.event import Event
from teambuilder.services.membership_store import MembershipStore
from teambuilder.services.result_boundary import returns_result
from teambuilder.services.team_aggregate import TeamAggregate
from teambuilder.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


class EventService:
    """Team event CRUD."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.memberships = MembershipStore(db)
        self.users = UserDirectory(db)
        self.teams = TeamAggregate(db, memberships=self.memberships, users=self.users)

    async def _require_member(self, team_id: TeamId, user_id: UserId) -> None:
        await self.teams.load_team(team_id)
        if await self.memberships.find(team_id, user_id) is None:
            raise NotMemberError(team_id, user_id)

    @returns_result
    async def create(
        self, team_id: TeamId, created_by: UserId, name: str, date: datetime,
        description: str = "", location: str | None = None,
    ) -> Event:
        async with unit_of_work(self.db):
            await self._require_member(team_id, created_by)
            event = Event(
                team_id=team_id, name=name, description=description or "",
                date=date, location=location, created_by=created_by,
            )
            self.db.add(event)
            await self.db.flush()
        logger.info(
            f"Event '{name}' scheduled",
            extra={"team_id": team_id, "user_id": created_by},
        )
        return event

    @returns_result
    async def list_for_team(self, team_id: TeamId, user_id: UserId) -> list[Event]:
        await self._require_member(team_id, user_id)
        result = await self.db.execute(
            select(Event).where(Event.team_id == team_id).order_by(Event.date.asc()),
        )
        return list(result.scalars().all())

    async def _load_event(self, team_id: TeamId, event_id: EventId) -> Event:
        result = await self.db.execute(
            select(Event).where(Event.id == event_id).where(Event.team_id == team_id),
        )
        event = result.scalar_one_or_none()
        if event is None:
            raise ResourceNotFoundError("Event", str(event_id))
        return event

    async def _load_for_change(
        self, team_id: TeamId, event_id: EventId, acting_user_id: UserId, action: str,
    ) -> Event:
        team = await self.teams.load_team(team_id)
        event = await self._load_event(team_id, event_id)
        allowed = (
            is_organizer(team, acting_user_id)
            or event.created_by == acting_user_id
            or await self.users.is_admin(acting_user_id)
        )
        if not allowed:
            raise NotAuthorizedError(action, team_id, acting_user_id)
        return event

    @returns_result
    async def get(self, team_id: TeamId, event_id: EventId, user_id: UserId) -> Event:
        await self._require_member(team_id, user_id)
        return await self._load_event(team_id, event_id)

    @returns_result
    async def update(
        self, team_id: TeamId, event_id: EventId, acting_user_id: UserId,
        name: str | None = None, description: str | None = None,
        date: datetime | None = None, location: str | None = None,
    ) -> Event:
        """Partial update; fields left as None keep their value."""
        async with unit_of_work(self.db):
            event = await self._load_for_change(
                team_id, event_id, acting_user_id, "update this event",
            )
            if name is not None:
                event.name = name
            if description is not None:
                event.description = description
            if date is not None:
                event.date = date
            if location is not None:
                event.location = location
        logger.info(
            f"Event {event_id} updated",
            extra={"team_id": team_id, "user_id": acting_user_id},
        )
        return event

    @returns_result
    async def delete(
        self, team_id: TeamId, event_id: EventId, acting_user_id: UserId,
    ) -> bool:
        async with unit_of_work(self.db):
            await self._load_for_change(
                team_id, event_id, acting_user_id, "delete this event",
            )
            await self.db.execute(delete(Event).where(Event.id == event_id))
        return True