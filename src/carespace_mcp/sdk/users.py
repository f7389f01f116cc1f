"""
Carespace users SDK functions.
"""

from functools import partial
from typing import Optional

from carespace_mcp.sdk import types
from carespace_mcp.sdk.handlers import respond, reject
from carespace_mcp.sdk.models import CreateUserRequest, User
from carespace_mcp.sdk.serialization import decode_item, decode_list, encode
from carespace_mcp.sdk.transport import Transport
from carespace_mcp.sdk.types import HttpMethod, OnApiComplete


def list_users(
    transport: Transport,
    page: int = 1,
    limit: int = 20,
    search: str = "",
    on_complete: Optional[OnApiComplete] = None,
) -> None:
    """
    Get a page of users.

    GET /users?page=&limit=&search=

    Delivers:
        list[User]
    """
    params = {
        "page": str(page),
        "limit": str(limit),
        "search": search,
    }
    transport.send(
        HttpMethod.GET,
        types.USERS,
        query_params=params,
        on_complete=respond(on_complete, "GetUsers", partial(decode_list, shape=User, key="users")),
    )


def get_user(
    transport: Transport,
    user_id: str,
    on_complete: Optional[OnApiComplete] = None,
) -> None:
    """
    Get one user.

    GET /users/{id}

    Delivers:
        User
    """
    if not user_id:
        reject(on_complete, "GetUser", "Missing user id")
        return

    transport.send(
        HttpMethod.GET,
        f"{types.USERS}/{user_id}",
        on_complete=respond(on_complete, "GetUser", partial(decode_item, shape=User, key="user")),
    )


def create_user(
    transport: Transport,
    request: CreateUserRequest,
    on_complete: Optional[OnApiComplete] = None,
) -> None:
    """
    Create a user.

    POST /users

    Delivers:
        The created User
    """
    if not request.email:
        reject(on_complete, "CreateUser", "Missing email")
        return

    transport.send(
        HttpMethod.POST,
        types.USERS,
        encode(request),
        on_complete=respond(on_complete, "CreateUser", partial(decode_item, shape=User, key="user")),
    )
