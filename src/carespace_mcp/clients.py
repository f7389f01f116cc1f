"""
Client (patient) tools for Carespace MCP server.
"""

import json

from fastmcp import Context

from carespace_mcp.bridge import wait_for
from carespace_mcp.client_factory import get_api, failure_response
from carespace_mcp.sdk.models import Client
from carespace_mcp.utils import format_date, is_valid_email, is_valid_phone


def _format_client(client: Client, detailed: bool = False) -> dict:
    result = {
        "id": client.id,
        "name": client.name,
        "email": client.email,
        "phone": client.phone,
        "is_active": client.is_active,
    }
    if detailed:
        address = client.address
        result.update({
            "date_of_birth": format_date(client.date_of_birth),
            "gender": client.gender,
            "address": {
                "street": address.street,
                "city": address.city,
                "state": address.state,
                "zip_code": address.zip_code,
                "country": address.country,
            },
            "medical_history": client.medical_history,
            "notes": client.notes,
        })
    return result


def register_tools(app):
    """Register client tools with the MCP app."""

    @app.tool()
    async def list_clients(ctx: Context, page: int = 1, limit: int = 20, search: str = "") -> str:
        """
        List clients (patients), one page at a time.

        Args:
            page: Page number, starting at 1
            limit: Clients per page
            search: Optional name/email filter

        Returns:
            JSON with clients on the requested page
        """
        with get_api(ctx) as api:
            result = await wait_for(api.get_clients, page=page, limit=limit, search=search)

        if not result.success:
            return failure_response(ctx, result.error)

        return json.dumps({
            "page": page,
            "count": len(result.data),
            "clients": [_format_client(c) for c in result.data],
        }, indent=2)

    @app.tool()
    async def get_client(client_id: str, ctx: Context) -> str:
        """
        Get a client's full record, including address and medical notes.

        Args:
            client_id: Carespace client id

        Returns:
            JSON with the client record
        """
        with get_api(ctx) as api:
            result = await wait_for(api.get_client, client_id)

        if not result.success:
            return failure_response(ctx, result.error)
        return json.dumps(_format_client(result.data, detailed=True), indent=2)

    @app.tool()
    async def create_client(
        name: str,
        ctx: Context,
        email: str = "",
        phone: str = "",
        date_of_birth: str = "",
        gender: str = "",
        medical_history: str = "",
        notes: str = "",
    ) -> str:
        """
        Register a new client.

        Args:
            name: Full name
            email: Email address (optional)
            phone: Phone number, at least 10 characters (optional)
            date_of_birth: YYYY-MM-DD (optional)
            gender: Gender (optional)
            medical_history: Relevant history (optional)
            notes: Clinician notes (optional)

        Returns:
            JSON with the created client
        """
        if email and not is_valid_email(email):
            return json.dumps({"success": False, "error": f"Invalid email address: {email}"}, indent=2)
        if phone and not is_valid_phone(phone):
            return json.dumps({"success": False, "error": f"Invalid phone number: {phone}"}, indent=2)

        client = Client(
            name=name,
            email=email,
            phone=phone,
            date_of_birth=date_of_birth or None,
            gender=gender,
            medical_history=medical_history,
            notes=notes,
        )
        with get_api(ctx) as api:
            result = await wait_for(api.create_client, client)

        if not result.success:
            return failure_response(ctx, result.error)
        return json.dumps({"success": True, "client": _format_client(result.data, detailed=True)}, indent=2)

    return app
