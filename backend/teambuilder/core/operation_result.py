"""Operation Result — structured success/failure envelope returned by the membership core.

Invariants:
    - success=True carries a value and no error
    - success=False carries the TeamBuilderError that caused it; code/message mirror it
    - retryable is True only for infrastructure failures

Design Decisions:
    - Errors cross the core/caller boundary as data, not exceptions: the HTTP layer
      decides status mapping, other callers can branch on .code
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from teambuilder.core.errors import TeamBuilderError

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of a core operation."""
    success: bool
    value: T | None = None
    error: TeamBuilderError | None = None

    @classmethod
    def ok(cls, value: Any = None) -> "OperationResult":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: TeamBuilderError) -> "OperationResult":
        return cls(success=False, error=error)

    @property
    def code(self) -> str | None:
        return self.error.code if self.error else None

    @property
    def message(self) -> str | None:
        return self.error.message if self.error else None

    @property
    def retryable(self) -> bool:
        return bool(self.error and self.error.retryable)

    def unwrap(self) -> T:
        """Return the value, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value
