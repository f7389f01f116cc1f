"""
Shared utility functions for Carespace MCP server.

Validation and formatting helpers used across tool modules.
"""

from datetime import date, datetime
from typing import Iterable, Optional, TypeVar, Union

from carespace_mcp.sdk.types import CarespaceError, ErrorType

T = TypeVar("T")

PHONE_CHARS = set("0123456789 +-()")


def is_valid_email(email: str) -> bool:
    """Loose email check: has '@' and '.' and is longer than 5 characters."""
    if not email:
        return False
    return "@" in email and "." in email and len(email) > 5


def is_valid_phone(phone: str) -> bool:
    """Check a phone number uses only digits, spaces, and + - ( ).

    At least 10 characters are required.
    """
    if not phone or len(phone) < 10:
        return False
    return all(c in PHONE_CHARS for c in phone)


def format_full_name(first_name: str, last_name: str) -> str:
    """Join first and last name, skipping whichever is empty.

    Examples:
        format_full_name("Ada", "Lovelace") -> "Ada Lovelace"
        format_full_name("", "Lovelace") -> "Lovelace"
    """
    return " ".join(part for part in (first_name, last_name) if part)


def format_duration(seconds: int) -> str:
    """Format seconds as minutes and seconds.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string like "2m 30s", "5m", or "45s"
    """
    if not seconds or seconds <= 0:
        return "0s"
    m, s = divmod(int(seconds), 60)
    if m > 0 and s > 0:
        return f"{m}m {s}s"
    if m > 0:
        return f"{m}m"
    return f"{s}s"


def format_date(value: Optional[Union[date, datetime, str]]) -> str:
    """Format a date as YYYY-MM-DD, or "N/A" when unset.

    ISO strings from the API are accepted and truncated to the date.
    """
    if not value:
        return "N/A"
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return "N/A"
    if value in (date.min, datetime.min):
        return "N/A"
    return value.strftime("%Y-%m-%d")


ERROR_DESCRIPTIONS = {
    ErrorType.NONE: "No error",
    ErrorType.NETWORK: "Network error - check your internet connection",
    ErrorType.AUTHENTICATION: "Authentication error - check your credentials",
    ErrorType.VALIDATION: "Validation error - check your input data",
    ErrorType.SERVER: "Server error - please try again later",
    ErrorType.UNKNOWN: "Unknown error occurred",
}


def error_description(error_type: ErrorType) -> str:
    """Human-readable description for an error category."""
    return ERROR_DESCRIPTIONS.get(error_type, ERROR_DESCRIPTIONS[ErrorType.UNKNOWN])


def is_authentication_error(error: CarespaceError) -> bool:
    return error.error_type == ErrorType.AUTHENTICATION


def is_network_error(error: CarespaceError) -> bool:
    return error.error_type == ErrorType.NETWORK


def find_by_id(items: Iterable[T], item_id: str) -> Optional[T]:
    """Return the first item whose `id` equals item_id, or None."""
    for item in items:
        if getattr(item, "id", None) == item_id:
            return item
    return None
