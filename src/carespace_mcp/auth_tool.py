"""
Authentication tools for Carespace MCP server.

Provides login, session management, and password tools.
"""

import json
import logging

from fastmcp import Context

from carespace_mcp.bridge import wait_for
from carespace_mcp.client_factory import (
    get_api,
    set_session_tokens,
    clear_session_tokens,
    serialize_tokens,
    failure_response,
)
from carespace_mcp.sdk.models import LoginRequest
from carespace_mcp.utils import format_full_name, is_valid_email

logger = logging.getLogger(__name__)


def register_tools(app):
    """Register authentication tools with the MCP app."""

    @app.tool()
    async def carespace_login(email: str, password: str, ctx: Context) -> str:
        """
        Login to Carespace.

        Validates credentials with the Carespace API and stores session
        tokens for subsequent calls.

        Args:
            email: Carespace account email address
            password: Carespace account password

        Returns:
            JSON with login result and user info, or error
        """
        if not is_valid_email(email):
            return json.dumps({"success": False, "error": f"Invalid email address: {email}"}, indent=2)

        with get_api(ctx, require_session=False) as api:
            result = await wait_for(api.auth.login, LoginRequest(email, password))

        if not result.success:
            # Bad credentials are not an expired session
            return json.dumps({"success": False, **result.error.to_dict()}, indent=2)

        tokens = result.data
        session_tokens = serialize_tokens(tokens)
        set_session_tokens(ctx, session_tokens)

        response = {"success": True, "tokens": session_tokens}
        if tokens.user:
            response["user"] = {
                "id": tokens.user.id,
                "email": tokens.user.email,
                "name": tokens.user.name or format_full_name(tokens.user.first_name, tokens.user.last_name),
                "role": tokens.user.role,
            }
        return json.dumps(response, indent=2)

    @app.tool()
    async def set_carespace_session(carespace_tokens: str, ctx: Context) -> str:
        """
        Restore a Carespace session from stored tokens.

        Use this to restore a previous login without re-entering credentials.

        Args:
            carespace_tokens: Tokens JSON returned by carespace_login

        Returns:
            Session restoration result
        """
        try:
            set_session_tokens(ctx, carespace_tokens)
        except ValueError as e:
            logger.error(f"Error restoring Carespace session: {e}")
            return json.dumps({"success": False, "error": str(e)}, indent=2)
        return json.dumps({"success": True, "message": "Session restored"}, indent=2)

    @app.tool()
    async def carespace_logout(ctx: Context) -> str:
        """
        Logout from the current Carespace session.

        Invalidates the session on the server and clears local session data.

        Returns:
            Logout confirmation
        """
        try:
            api = get_api(ctx)
        except ValueError:
            # Nothing to invalidate remotely
            clear_session_tokens(ctx)
            return json.dumps({"success": True, "message": "Logged out"}, indent=2)

        with api:
            result = await wait_for(api.auth.logout)
        clear_session_tokens(ctx)

        if not result.success:
            logger.warning(f"Server-side logout failed: {result.error.message}")
        return json.dumps({"success": True, "message": "Logged out"}, indent=2)

    @app.tool()
    async def forgot_password(email: str, ctx: Context) -> str:
        """
        Request a password reset email.

        Args:
            email: Account email address

        Returns:
            Confirmation or error
        """
        if not is_valid_email(email):
            return json.dumps({"success": False, "error": f"Invalid email address: {email}"}, indent=2)

        with get_api(ctx, require_session=False) as api:
            result = await wait_for(api.auth.forgot_password, email)

        if not result.success:
            return failure_response(ctx, result.error)
        return json.dumps({"success": True, "message": f"Password reset email sent to {email}"}, indent=2)

    @app.tool()
    async def change_password(current_password: str, new_password: str, ctx: Context) -> str:
        """
        Change the signed-in user's password.

        Args:
            current_password: Current password
            new_password: New password

        Returns:
            Confirmation or error
        """
        with get_api(ctx) as api:
            result = await wait_for(api.auth.change_password, current_password, new_password)

        if not result.success:
            return failure_response(ctx, result.error)
        return json.dumps({"success": True, "message": "Password changed"}, indent=2)

    return app
