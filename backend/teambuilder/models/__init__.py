"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Team is the aggregate root; memberships, invitations, events and chat
      messages are all scoped by team_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from teambuilder.models.user import User  # noqa: F401
from teambuilder.models.team import Team  # noqa: F401
from teambuilder.models.membership import Membership  # noqa: F401
from teambuilder.models.invitation import Invitation  # noqa: F401
from teambuilder.models.event import Event  # noqa: F401
from teambuilder.models.chat_message import ChatMessage  # noqa: F401
from teambuilder.models.revoked_token import RevokedToken  # noqa: F401
