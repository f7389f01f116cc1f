"""
Carespace clients (patients) SDK functions.
"""

from functools import partial
from typing import Optional

from carespace_mcp.sdk import types
from carespace_mcp.sdk.handlers import respond, reject
from carespace_mcp.sdk.models import Client
from carespace_mcp.sdk.serialization import decode_item, decode_list, encode
from carespace_mcp.sdk.transport import Transport
from carespace_mcp.sdk.types import HttpMethod, OnApiComplete


def list_clients(
    transport: Transport,
    page: int = 1,
    limit: int = 20,
    search: str = "",
    on_complete: Optional[OnApiComplete] = None,
) -> None:
    """
    Get a page of clients.

    GET /clients?page=&limit=&search=

    Delivers:
        list[Client]
    """
    params = {
        "page": str(page),
        "limit": str(limit),
        "search": search,
    }
    transport.send(
        HttpMethod.GET,
        types.CLIENTS,
        query_params=params,
        on_complete=respond(on_complete, "GetClients", partial(decode_list, shape=Client, key="clients")),
    )


def get_client(
    transport: Transport,
    client_id: str,
    on_complete: Optional[OnApiComplete] = None,
) -> None:
    """
    Get one client.

    GET /clients/{id}
    """
    if not client_id:
        reject(on_complete, "GetClient", "Missing client id")
        return

    transport.send(
        HttpMethod.GET,
        f"{types.CLIENTS}/{client_id}",
        on_complete=respond(on_complete, "GetClient", partial(decode_item, shape=Client, key="client")),
    )


def create_client(
    transport: Transport,
    client: Client,
    on_complete: Optional[OnApiComplete] = None,
) -> None:
    """
    Create a client.

    POST /clients
    """
    if not client.name:
        reject(on_complete, "CreateClient", "Missing client name")
        return

    transport.send(
        HttpMethod.POST,
        types.CLIENTS,
        encode(client),
        on_complete=respond(on_complete, "CreateClient", partial(decode_item, shape=Client, key="client")),
    )
