"""
Carespace rehabilitation programs SDK functions.
"""

from functools import partial
from typing import Optional

from carespace_mcp.sdk import types
from carespace_mcp.sdk.handlers import respond, reject
from carespace_mcp.sdk.models import Program
from carespace_mcp.sdk.serialization import decode_item, decode_list, encode
from carespace_mcp.sdk.transport import Transport
from carespace_mcp.sdk.types import HttpMethod, OnApiComplete


def list_programs(
    transport: Transport,
    page: int = 1,
    limit: int = 20,
    category: str = "",
    on_complete: Optional[OnApiComplete] = None,
) -> None:
    """
    Get a page of programs, optionally filtered by category
    (e.g. "physical-therapy").

    GET /programs?page=&limit=&category=

    Delivers:
        list[Program]
    """
    params = {
        "page": str(page),
        "limit": str(limit),
        "category": category,
    }
    transport.send(
        HttpMethod.GET,
        types.PROGRAMS,
        query_params=params,
        on_complete=respond(on_complete, "GetPrograms", partial(decode_list, shape=Program, key="programs")),
    )


def get_program(
    transport: Transport,
    program_id: str,
    on_complete: Optional[OnApiComplete] = None,
) -> None:
    """
    Get one program with its exercises.

    GET /programs/{id}
    """
    if not program_id:
        reject(on_complete, "GetProgram", "Missing program id")
        return

    transport.send(
        HttpMethod.GET,
        f"{types.PROGRAMS}/{program_id}",
        on_complete=respond(on_complete, "GetProgram", partial(decode_item, shape=Program, key="program")),
    )


def create_program(
    transport: Transport,
    program: Program,
    on_complete: Optional[OnApiComplete] = None,
) -> None:
    """
    Create a program.

    POST /programs
    """
    if not program.name:
        reject(on_complete, "CreateProgram", "Missing program name")
        return

    transport.send(
        HttpMethod.POST,
        types.PROGRAMS,
        encode(program),
        on_complete=respond(on_complete, "CreateProgram", partial(decode_item, shape=Program, key="program")),
    )
