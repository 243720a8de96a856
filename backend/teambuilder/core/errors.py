"""Error Hierarchy — typed, categorized exceptions for all TeamBuilder failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are expected outcomes callers branch on;
      infrastructure errors are retryable and never swallowed
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TeamBuilderError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHORIZATION = "authorization"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    team_id: str | None = None
    user_id: str | None = None
    invitation_id: str | None = None
    debug_info: dict[str, Any] | None = None


class TeamBuilderError(Exception):
    """Base exception for all TeamBuilder errors."""

    retryable: bool = False

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "retryable": self.retryable,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "team_id": self.context.team_id,
                    "user_id": self.context.user_id,
                    "invitation_id": self.context.invitation_id,
                },
            }
        }


def _ctx(team_id=None, user_id=None, invitation_id=None) -> ErrorContext:
    return ErrorContext(
        team_id=str(team_id) if team_id else None,
        user_id=str(user_id) if user_id else None,
        invitation_id=str(invitation_id) if invitation_id else None,
    )


# ─── Domain Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(TeamBuilderError):
    """Requested team, user, membership or invitation does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str,
        message: str | None = None, context: ErrorContext | None = None,
    ):
        super().__init__(
            message or f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class NotAuthorizedError(TeamBuilderError):
    """Caller lacks the role required for the operation."""
    def __init__(self, action: str, team_id=None, user_id=None):
        super().__init__(
            f"Not allowed to {action}",
            "NOT_AUTHORIZED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, _ctx(team_id, user_id), 403,
        )
        self.action = action


class AlreadyMemberError(TeamBuilderError):
    """User already holds a membership on the team."""
    def __init__(self, team_id, user_id):
        super().__init__(
            "User is already a member of this team",
            "ALREADY_MEMBER", ErrorCategory.CONFLICT,
            ErrorSeverity.INFO, _ctx(team_id, user_id), 409,
        )


class DuplicateMembershipError(TeamBuilderError):
    """Store-level uniqueness violation for a (team, user) pair."""
    def __init__(self, team_id, user_id):
        super().__init__(
            "Membership already exists for this team and user",
            "DUPLICATE_MEMBERSHIP", ErrorCategory.CONFLICT,
            ErrorSeverity.INFO, _ctx(team_id, user_id), 409,
        )


class AlreadyInvitedError(TeamBuilderError):
    """A pending invitation already exists for the (team, user) pair."""
    def __init__(self, team_id, user_id, existing_invitation_id, team_name: str | None = None):
        super().__init__(
            f'User has already been invited to team "{team_name or "Unknown Team"}"',
            "ALREADY_INVITED", ErrorCategory.CONFLICT,
            ErrorSeverity.INFO, _ctx(team_id, user_id, existing_invitation_id), 409,
        )
        self.existing_invitation_id = existing_invitation_id


class AlreadyRespondedError(TeamBuilderError):
    """Invitation has already reached a terminal state."""
    def __init__(self, invitation_id):
        super().__init__(
            "Invitation already responded to",
            "ALREADY_RESPONDED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, _ctx(invitation_id=invitation_id), 409,
        )


class NotMemberError(TeamBuilderError):
    """User has no membership on the team."""
    def __init__(self, team_id, user_id):
        super().__init__(
            "User is not a member of this team",
            "NOT_MEMBER", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, _ctx(team_id, user_id), 400,
        )


class TeamClosedError(TeamBuilderError):
    """Direct join attempted on a closed team."""
    def __init__(self, team_id):
        super().__init__(
            "Team is closed; members join by invitation only",
            "TEAM_CLOSED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, _ctx(team_id), 400,
        )


class OrganizerCannotLeaveError(TeamBuilderError):
    """Organizer attempted to leave without transferring ownership."""
    def __init__(self, team_id, user_id):
        super().__init__(
            "The organizer must transfer ownership or delete the team before leaving",
            "ORGANIZER_CANNOT_LEAVE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, _ctx(team_id, user_id), 400,
        )


class OrganizerCannotBeKickedError(TeamBuilderError):
    """Kick targeted the team's organizer."""
    def __init__(self, team_id, user_id):
        super().__init__(
            "The organizer cannot be removed from the team",
            "ORGANIZER_CANNOT_BE_KICKED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, _ctx(team_id, user_id), 400,
        )


class RoleRequiresTransferError(TeamBuilderError):
    """Role change would move the organizer role outside transfer_ownership."""
    def __init__(self, team_id, user_id):
        super().__init__(
            "The organizer role changes only through ownership transfer",
            "ROLE_REQUIRES_TRANSFER", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, _ctx(team_id, user_id), 400,
        )


class DuplicateEmailError(TeamBuilderError):
    """Another user already registered this email."""
    def __init__(self, email: str):
        super().__init__(
            f"Email '{email}' is already registered",
            "DUPLICATE_EMAIL", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, None, 409,
        )


# ─── Infrastructure Errors ──────────────────────────────────────

class DatabaseError(TeamBuilderError):
    """Database operation failed."""

    retryable = True

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class ConcurrencyError(TeamBuilderError):
    """Concurrent modification detected."""

    retryable = True

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
