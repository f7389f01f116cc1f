"""
Transport outcome classification.

Maps a network failure, an HTTP status, and the raw response body to a
CarespaceError. One decision table serves every call site.
"""

import json
from typing import Optional

from carespace_mcp.sdk.types import CarespaceError, ErrorType

NETWORK_FAILED = "Network request failed"
INVALID_RESPONSE = "Invalid response"
AUTH_FAILED = "Authentication failed. Please check your API key."


def classify(
    transport_succeeded: bool,
    status_code: Optional[int],
    body: str = "",
) -> CarespaceError:
    """
    Classify a failed request.

    Args:
        transport_succeeded: False on DNS/connection/timeout/TLS failure
        status_code: HTTP status, or None when no usable response exists
        body: Raw response body text

    Returns:
        CarespaceError (never raises)
    """
    if not transport_succeeded:
        return CarespaceError(ErrorType.NETWORK, NETWORK_FAILED, 0)

    if status_code is None:
        return CarespaceError(ErrorType.UNKNOWN, INVALID_RESPONSE, 0)

    message = extract_message(body)

    if status_code == 401:
        return CarespaceError(ErrorType.AUTHENTICATION, message or AUTH_FAILED, status_code)
    if 400 <= status_code < 500:
        return CarespaceError(ErrorType.VALIDATION, message or f"Client error: {status_code}", status_code)
    if status_code >= 500:
        return CarespaceError(ErrorType.SERVER, message or f"Server error: {status_code}", status_code)
    return CarespaceError(ErrorType.UNKNOWN, message or f"Unknown error: {status_code}", status_code)


def extract_message(body: str) -> str:
    """Pull a `message` (or else `error`) string field out of a JSON body.

    Returns "" when the body is not a JSON object or has neither field.
    """
    if not body:
        return ""
    try:
        data = json.loads(body)
    except ValueError:
        return ""
    if not isinstance(data, dict):
        return ""

    if isinstance(data.get("message"), str):
        return data["message"]
    if isinstance(data.get("error"), str):
        return data["error"]
    return ""
