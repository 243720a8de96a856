"""Result Boundary — converts raised TeamBuilderErrors into OperationResults.

Invariants:
    - Only TeamBuilderError is converted; anything else propagates (programming error)
    - Retryable (infrastructure) failures logged at ERROR, domain rejections at INFO

Design Decisions:
    - Decorator over try/except in every method: the conversion policy lives in one place
"""

import functools
import logging
from typing import Any, Awaitable, Callable

from teambuilder.core.errors import TeamBuilderError
from teambuilder.core.operation_result import OperationResult

logger = logging.getLogger(__name__)


def returns_result(
    fn: Callable[..., Awaitable[Any]],
) -> Callable[..., Awaitable[OperationResult]]:
    """Wrap an async service method so errors come back as data."""

    @functools.wraps(fn)
    async def wrapper(*args, **kwargs) -> OperationResult:
        try:
            value = await fn(*args, **kwargs)
        except TeamBuilderError as e:
            level = logging.ERROR if e.retryable else logging.INFO
            logger.log(
                level, f"{fn.__qualname__} rejected: {e.message}",
                extra={
                    "error_code": e.code,
                    "team_id": e.context.team_id,
                    "user_id": e.context.user_id,
                    "invitation_id": e.context.invitation_id,
                },
            )
            return OperationResult.fail(e)
        return OperationResult.ok(value)

    return wrapper
