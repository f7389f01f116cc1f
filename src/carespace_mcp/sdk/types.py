"""
Carespace transport types, enums, and constants.

Everything the transport core hands to a caller is defined here:
the HTTP verbs, the error taxonomy, and the uniform result envelope.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable


DEFAULT_BASE_URL = "https://api-dev.carespace.ai"
DEFAULT_TIMEOUT_SECONDS = 30.0

# Fixed endpoint paths
LOGIN = "/auth/login"
LOGOUT = "/auth/logout"
REFRESH = "/auth/refresh"
FORGOT_PASSWORD = "/auth/forgot-password"
RESET_PASSWORD = "/auth/reset-password"
CHANGE_PASSWORD = "/auth/change-password"
USERS = "/users"
CLIENTS = "/clients"
PROGRAMS = "/programs"


class HttpMethod(str, Enum):
    """HTTP verbs supported by the transport."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class ErrorType(Enum):
    """Classification of a failed request.

    NONE is only a placeholder on results that succeeded.
    """
    NONE = "none"
    NETWORK = "network"
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    SERVER = "server"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CarespaceError:
    """Typed error delivered with every failed result."""
    error_type: ErrorType = ErrorType.NONE
    message: str = ""
    status_code: int = 0  # 0 when no HTTP status was obtained

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "error_type": self.error_type.value,
            "status_code": self.status_code,
        }


NO_ERROR = CarespaceError()


@dataclass(frozen=True)
class HTTPResult:
    """Uniform completion envelope: (success, body, error)."""
    success: bool
    body: str = ""
    error: CarespaceError = NO_ERROR


@dataclass(frozen=True)
class ApiResult:
    """Completion envelope for the domain wrappers.

    `data` holds the decoded payload (a model, a list of models, or None).
    """
    success: bool
    data: Any = None
    error: CarespaceError = NO_ERROR
    raw: str = field(default="", repr=False)


OnComplete = Callable[[HTTPResult], None]
OnApiComplete = Callable[[ApiResult], None]
