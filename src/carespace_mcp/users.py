"""
User tools for Carespace MCP server.

List, look up, and create platform users (clinicians, admins, client accounts).
"""

import json

from fastmcp import Context

from carespace_mcp.bridge import wait_for
from carespace_mcp.client_factory import get_api, failure_response
from carespace_mcp.sdk.models import CreateUserRequest, User
from carespace_mcp.utils import format_date, format_full_name, is_valid_email


def _format_user(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name or format_full_name(user.first_name, user.last_name),
        "email": user.email,
        "role": user.role,
        "is_active": user.is_active,
        "created": format_date(user.created_at),
    }


def register_tools(app):
    """Register user tools with the MCP app."""

    @app.tool()
    async def list_users(ctx: Context, page: int = 1, limit: int = 20, search: str = "") -> str:
        """
        List users, one page at a time.

        Args:
            page: Page number, starting at 1
            limit: Users per page
            search: Optional name/email filter

        Returns:
            JSON with users on the requested page
        """
        with get_api(ctx) as api:
            result = await wait_for(api.get_users, page=page, limit=limit, search=search)

        if not result.success:
            return failure_response(ctx, result.error)

        return json.dumps({
            "page": page,
            "count": len(result.data),
            "users": [_format_user(u) for u in result.data],
        }, indent=2)

    @app.tool()
    async def get_user(user_id: str, ctx: Context) -> str:
        """
        Get one user by id.

        Args:
            user_id: Carespace user id

        Returns:
            JSON with the user's details
        """
        with get_api(ctx) as api:
            result = await wait_for(api.get_user, user_id)

        if not result.success:
            return failure_response(ctx, result.error)
        return json.dumps(_format_user(result.data), indent=2)

    @app.tool()
    async def create_user(
        email: str,
        ctx: Context,
        first_name: str = "",
        last_name: str = "",
        role: str = "client",
        password: str = "",
    ) -> str:
        """
        Create a user.

        Args:
            email: Email address (must be unique)
            first_name: Given name
            last_name: Family name
            role: "client", "clinician", or "admin"
            password: Initial password; the server emails an invite when omitted

        Returns:
            JSON with the created user
        """
        if not is_valid_email(email):
            return json.dumps({"success": False, "error": f"Invalid email address: {email}"}, indent=2)

        request = CreateUserRequest(
            email=email,
            name=format_full_name(first_name, last_name),
            first_name=first_name,
            last_name=last_name,
            role=role,
            password=password,
        )
        with get_api(ctx) as api:
            result = await wait_for(api.create_user, request)

        if not result.success:
            return failure_response(ctx, result.error)
        return json.dumps({"success": True, "user": _format_user(result.data)}, indent=2)

    return app
