"""Chat Service — persisted team chat history.

Invariants:
    - Only current members post or read a team's messages
    - History returned oldest-first, capped at chat_history_limit most recent

Design Decisions:
    - Transport (websocket fan-out) is out of scope; this is the store behind it
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teambuilder.core.domain_types import TeamId, UserId
from teambuilder.core.errors import NotMemberError
from teambuilder.infrastructure.database import unit_of_work
from teambuilder.models.chat_message import ChatMessage
from teambuilder.services.membership_store import MembershipStore
from teambuilder.services.result_boundary import returns_result
from teambuilder.services.team_aggregate import TeamAggregate

logger = logging.getLogger(__name__)


class ChatService:
    """Post and read team chat messages."""

    def __init__(self, db: AsyncSession, history_limit: int = 100):
        self.db = db
        self.memberships = MembershipStore(db)
        self.teams = TeamAggregate(db, memberships=self.memberships)
        self._history_limit = history_limit

    async def _require_member(self, team_id: TeamId, user_id: UserId) -> None:
        await self.teams.load_team(team_id)
        if await self.memberships.find(team_id, user_id) is None:
            raise NotMemberError(team_id, user_id)

    @returns_result
    async def post(self, team_id: TeamId, sender_id: UserId, message: str) -> ChatMessage:
        async with unit_of_work(self.db):
            await self._require_member(team_id, sender_id)
            chat = ChatMessage(team_id=team_id, sender_id=sender_id, message=message)
            self.db.add(chat)
            await self.db.flush()
        return chat

    @returns_result
    async def history(self, team_id: TeamId, user_id: UserId) -> list[ChatMessage]:
        await self._require_member(team_id, user_id)
        result = await self.db.execute(
            select(ChatMessage)
            .where(ChatMessage.team_id == team_id)
            .order_by(ChatMessage.sent_at.desc())
            .limit(self._history_limit)
        )
        return list(reversed(result.scalars().all()))
