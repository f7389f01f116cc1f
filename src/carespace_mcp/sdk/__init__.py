"""
Carespace Low-Level SDK.

Callback-based transport over the Carespace REST API plus thin typed
wrappers for auth, users, clients, and programs.
"""

from carespace_mcp.sdk.api import AuthAPI, CarespaceAPI
from carespace_mcp.sdk.client import CarespaceClient, ClientConfig
from carespace_mcp.sdk.errors import classify
from carespace_mcp.sdk.models import (
    Address,
    Client,
    CreateUserRequest,
    Exercise,
    LoginRequest,
    LoginResponse,
    Program,
    User,
)
from carespace_mcp.sdk.serialization import decode, encode
from carespace_mcp.sdk.testing import MockResponse, MockTransport
from carespace_mcp.sdk.transport import Transport
from carespace_mcp.sdk.types import (
    ApiResult,
    CarespaceError,
    ErrorType,
    HTTPResult,
    HttpMethod,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
)
from carespace_mcp.sdk.urls import build_url

__all__ = [
    "AuthAPI",
    "CarespaceAPI",
    "CarespaceClient",
    "ClientConfig",
    "Transport",
    "MockTransport",
    "MockResponse",
    "build_url",
    "classify",
    "encode",
    "decode",
    "ApiResult",
    "CarespaceError",
    "ErrorType",
    "HTTPResult",
    "HttpMethod",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT_SECONDS",
    "Address",
    "Client",
    "CreateUserRequest",
    "Exercise",
    "LoginRequest",
    "LoginResponse",
    "Program",
    "User",
]
