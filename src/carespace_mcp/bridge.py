"""
Await callback-style SDK operations from async tool handlers.

The SDK reports results through `on_complete`, possibly from a worker
thread. wait_for() hands the result back to the running event loop.
"""

import asyncio
from typing import Any, Callable

from carespace_mcp.sdk.types import ApiResult


async def wait_for(start: Callable[..., Any], *args, **kwargs) -> ApiResult:
    """
    Start an SDK operation and wait for its completion.

    Args:
        start: SDK callable accepting an `on_complete` keyword
        *args, **kwargs: Forwarded to `start`

    Returns:
        The ApiResult delivered to `on_complete`

    Usage:
        result = await wait_for(api.get_users, page=1, limit=20)
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def resolve(result: ApiResult) -> None:
        if not future.done():
            future.set_result(result)

    def on_complete(result: ApiResult) -> None:
        loop.call_soon_threadsafe(resolve, result)

    start(*args, on_complete=on_complete, **kwargs)
    return await future
