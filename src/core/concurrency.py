"""Fail-fast joining of independent coroutines."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, List


async def gather_all(*awaitables: Awaitable[Any]) -> List[Any]:
    """Run awaitables concurrently and return their results in order.

    The first failure cancels every sibling and waits for them to settle
    before re-raising, so no work outlives the call.
    """

    tasks = [asyncio.ensure_future(item) for item in awaitables]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
