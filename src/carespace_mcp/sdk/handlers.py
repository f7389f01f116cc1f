"""
Completion adapters shared by the domain wrappers.

Turn a transport HTTPResult into an ApiResult carrying a decoded payload.
"""

import logging
from typing import Any, Callable, Optional

from carespace_mcp.sdk.types import (
    ApiResult,
    CarespaceError,
    ErrorType,
    HTTPResult,
    OnApiComplete,
    OnComplete,
)

logger = logging.getLogger(__name__)

PARSE_FAILED = "Failed to parse response"

# parse(body) -> payload, or None when the body is unusable
Parser = Callable[[str], Any]


def respond(
    on_complete: Optional[OnApiComplete],
    operation: str,
    parse: Optional[Parser] = None,
    parse_error: str = PARSE_FAILED,
) -> OnComplete:
    """
    Build a transport callback that decodes the body and forwards an ApiResult.

    Args:
        on_complete: Caller's callback
        operation: Name used in log lines (e.g. "GetUsers")
        parse: Body decoder; None means the payload is ignored
        parse_error: Message used when parse() returns None
    """
    def handle(result: HTTPResult) -> None:
        if not result.success:
            logger.error(f"{operation} failed - {result.error.message}")
            _deliver(on_complete, ApiResult(False, None, result.error, result.body))
            return

        if parse is None:
            _deliver(on_complete, ApiResult(True, None, raw=result.body))
            return

        try:
            data = parse(result.body)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"{operation}: unexpected response shape: {e}")
            data = None

        if data is None:
            logger.error(f"{operation}: {parse_error}")
            error = CarespaceError(ErrorType.UNKNOWN, parse_error, 0)
            _deliver(on_complete, ApiResult(False, None, error, result.body))
            return

        _deliver(on_complete, ApiResult(True, data, raw=result.body))

    return handle


def reject(on_complete: Optional[OnApiComplete], operation: str, message: str) -> None:
    """Fail an operation locally, without a network call."""
    logger.error(f"{operation} rejected - {message}")
    _deliver(on_complete, ApiResult(False, None, CarespaceError(ErrorType.VALIDATION, message, 0)))


def _deliver(on_complete: Optional[OnApiComplete], result: ApiResult) -> None:
    if on_complete is not None:
        on_complete(result)
