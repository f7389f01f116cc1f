"""
Carespace authentication SDK functions.

Each function issues one request through the given transport and reports
an ApiResult to `on_complete`.
"""

from typing import Optional

from carespace_mcp.sdk import types
from carespace_mcp.sdk.handlers import respond, reject
from carespace_mcp.sdk.models import LoginRequest, LoginResponse
from carespace_mcp.sdk.serialization import encode, unwrap
from carespace_mcp.sdk.transport import Transport
from carespace_mcp.sdk.types import HttpMethod, OnApiComplete


TOKEN_PARSE_FAILED = "Failed to parse access token from response"


def _parse_tokens(body: str) -> Optional[LoginResponse]:
    """Read tokens from `data` or from the top level of the body."""
    data = unwrap(body)
    if not isinstance(data, dict):
        return None
    tokens = LoginResponse.from_dict(data)
    if not tokens.access_token:
        return None
    return tokens


def login(
    transport: Transport,
    request: LoginRequest,
    on_complete: Optional[OnApiComplete] = None,
) -> None:
    """
    Authenticate with email and password.

    POST /auth/login

    Delivers:
        LoginResponse with access and refresh tokens

    Missing credentials fail locally as a VALIDATION error.
    """
    if not request.email or not request.password:
        reject(on_complete, "Login", "Missing credentials")
        return

    transport.send(
        HttpMethod.POST,
        types.LOGIN,
        encode(request),
        on_complete=respond(on_complete, "Login", _parse_tokens, TOKEN_PARSE_FAILED),
    )


def logout(transport: Transport, on_complete: Optional[OnApiComplete] = None) -> None:
    """
    Invalidate the current session on the server.

    POST /auth/logout (no body)
    """
    transport.send(HttpMethod.POST, types.LOGOUT, "", on_complete=respond(on_complete, "Logout"))


def refresh_token(
    transport: Transport,
    token: str,
    on_complete: Optional[OnApiComplete] = None,
) -> None:
    """
    Exchange a refresh token for a new access token.

    POST /auth/refresh

    Delivers:
        LoginResponse with the new tokens
    """
    if not token:
        reject(on_complete, "RefreshToken", "Missing refresh token")
        return

    transport.send(
        HttpMethod.POST,
        types.REFRESH,
        encode({"refresh_token": token}),
        on_complete=respond(on_complete, "RefreshToken", _parse_tokens, TOKEN_PARSE_FAILED),
    )


def forgot_password(
    transport: Transport,
    email: str,
    on_complete: Optional[OnApiComplete] = None,
) -> None:
    """Ask the server to email a password reset token.

    POST /auth/forgot-password
    """
    transport.send(
        HttpMethod.POST,
        types.FORGOT_PASSWORD,
        encode({"email": email}),
        on_complete=respond(on_complete, "ForgotPassword"),
    )


def reset_password(
    transport: Transport,
    token: str,
    new_password: str,
    on_complete: Optional[OnApiComplete] = None,
) -> None:
    """Complete a reset with the emailed token.

    POST /auth/reset-password
    """
    transport.send(
        HttpMethod.POST,
        types.RESET_PASSWORD,
        encode({"token": token, "password": new_password}),
        on_complete=respond(on_complete, "ResetPassword"),
    )


def change_password(
    transport: Transport,
    current_password: str,
    new_password: str,
    on_complete: Optional[OnApiComplete] = None,
) -> None:
    """Change the signed-in user's password.

    POST /auth/change-password
    """
    transport.send(
        HttpMethod.POST,
        types.CHANGE_PASSWORD,
        encode({"current_password": current_password, "new_password": new_password}),
        on_complete=respond(on_complete, "ChangePassword"),
    )
