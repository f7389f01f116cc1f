"""
API factory for Carespace MCP server.

Provides session-based API management using FastMCP Context.
Each MCP connection has isolated session state via mcp-session-id header.

Session Persistence:
- FastMCP Context state (ctx._state) doesn't persist across HTTP requests
- Solution: File-based session store using ctx.session_id as key
- Sessions stored in $CARESPACE_SESSION_DIR/{session_id}.json
"""

import os
import json
import logging
from pathlib import Path
from typing import Optional

from fastmcp import Context

from carespace_mcp.sdk.api import CarespaceAPI
from carespace_mcp.sdk.client import ClientConfig
from carespace_mcp.sdk.models import LoginResponse
from carespace_mcp.sdk.types import CarespaceError
from carespace_mcp.utils import error_description, is_authentication_error, is_network_error

logger = logging.getLogger(__name__)

CARESPACE_TOKENS_KEY = "carespace_tokens"
SESSION_STORE_DIR = Path(os.environ.get("CARESPACE_SESSION_DIR", "/data/carespace_sessions"))


def serialize_tokens(tokens: LoginResponse) -> str:
    """
    Serialize login tokens for storage.

    Args:
        tokens: LoginResponse from a successful login or refresh

    Returns:
        JSON string that can be used with parse_tokens()
    """
    return json.dumps({
        "access_token": tokens.access_token,
        "refresh_token": tokens.refresh_token,
    })


def parse_tokens(tokens: str) -> dict:
    """
    Parse stored session tokens.

    Raises:
        ValueError: If the tokens are not JSON or carry no access token
    """
    try:
        data = json.loads(tokens)
    except (TypeError, json.JSONDecodeError):
        raise ValueError("Invalid Carespace session tokens")
    if not isinstance(data, dict) or not data.get("access_token"):
        raise ValueError("Invalid Carespace session tokens: missing access_token")
    return data


def create_api(access_token: str = "") -> CarespaceAPI:
    """
    Create a Carespace API from environment settings.

    CARESPACE_BASE_URL and CARESPACE_TIMEOUT configure the connection. The
    access token, when given, takes precedence over CARESPACE_API_KEY.
    """
    config = ClientConfig.from_env()
    return CarespaceAPI(
        base_url=config.base_url,
        api_key=access_token or config.auth_token,
        timeout=config.timeout_seconds,
    )


def _get_session_file_path(session_id: str) -> Path:
    """Get the file path for a session's data."""
    SESSION_STORE_DIR.mkdir(parents=True, exist_ok=True)
    # Sanitize session_id to prevent path traversal
    safe_session_id = "".join(c for c in session_id if c.isalnum() or c in "-_")
    return SESSION_STORE_DIR / f"{safe_session_id}.json"


def _load_session_data(session_id: str) -> dict:
    """Load session data from file system."""
    session_file = _get_session_file_path(session_id)
    if not session_file.exists():
        return {}
    try:
        with open(session_file, "r") as f:
            return json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Ignoring unreadable session file {session_file}: {e}")
        return {}


def _save_session_data(session_id: str, data: dict) -> None:
    """Save session data to file system."""
    session_file = _get_session_file_path(session_id)
    try:
        with open(session_file, "w") as f:
            json.dump(data, f)
    except IOError as e:
        # Session won't persist but the tool call still succeeds
        logger.warning(f"Failed to save session data: {e}")


def _get_session_tokens(ctx: Context) -> Optional[str]:
    """
    Get Carespace tokens from persistent session store.

    First checks in-memory Context state, then falls back to the
    file-based session store for cross-request persistence.
    """
    tokens = ctx.get_state(CARESPACE_TOKENS_KEY)
    if tokens:
        return tokens

    try:
        session_id = ctx.session_id
    except RuntimeError:
        # Not in a request context
        return None

    tokens = _load_session_data(session_id).get(CARESPACE_TOKENS_KEY)
    if tokens:
        ctx.set_state(CARESPACE_TOKENS_KEY, tokens)
    return tokens


def get_api(ctx: Context, require_session: bool = True) -> CarespaceAPI:
    """
    Get a Carespace API for the current MCP session.

    Usage in tools:
        @app.tool()
        async def list_users(ctx: Context) -> str:
            with get_api(ctx) as api:
                result = await wait_for(api.get_users)

    Args:
        ctx: FastMCP Context (automatically injected by framework)
        require_session: When False, an unauthenticated API is returned
            if there is no session (used by login and password reset)

    Returns:
        CarespaceAPI carrying the session's access token

    Raises:
        ValueError: If no Carespace session is active and require_session is set
    """
    tokens = _get_session_tokens(ctx)
    if tokens:
        return create_api(parse_tokens(tokens)["access_token"])

    if require_session and not os.environ.get("CARESPACE_API_KEY"):
        raise ValueError("No Carespace session. Call carespace_login() first.")
    return create_api()


def set_session_tokens(ctx: Context, tokens: str) -> None:
    """
    Store Carespace tokens in both in-memory Context and on disk.

    Args:
        ctx: FastMCP Context
        tokens: Serialized tokens from serialize_tokens()

    Raises:
        ValueError: If the tokens carry no access token
    """
    parse_tokens(tokens)
    ctx.set_state(CARESPACE_TOKENS_KEY, tokens)

    try:
        session_id = ctx.session_id
    except RuntimeError:
        # Context state only (non-persistent)
        return

    session_data = _load_session_data(session_id)
    session_data[CARESPACE_TOKENS_KEY] = tokens
    _save_session_data(session_id, session_data)


def clear_session_tokens(ctx: Context) -> None:
    """Remove Carespace tokens from both in-memory context and disk."""
    ctx.set_state(CARESPACE_TOKENS_KEY, None)

    try:
        session_id = ctx.session_id
    except RuntimeError:
        return

    session_file = _get_session_file_path(session_id)
    if session_file.exists():
        session_file.unlink()


def handle_session_expired(ctx: Context) -> str:
    """
    Handle a rejected access token by clearing the session.

    The user is prompted to log in again on their next request.

    Returns:
        Error message to return to the user
    """
    try:
        clear_session_tokens(ctx)
    except OSError as e:
        logger.warning(f"Failed to clear expired session: {e}")

    return json.dumps({
        "error": "Your Carespace session has expired. Please log in again.",
        "error_code": "SESSION_EXPIRED",
    }, indent=2)


def failure_response(ctx: Context, error: CarespaceError) -> str:
    """
    Render a failed SDK result as a tool response.

    A rejected token (AUTHENTICATION) also ends the session.
    """
    if is_authentication_error(error):
        return handle_session_expired(ctx)

    payload = error.to_dict()
    payload["description"] = error_description(error.error_type)
    if is_network_error(error):
        payload["note"] = "The Carespace API could not be reached. Try again shortly."
    return json.dumps(payload, indent=2)
