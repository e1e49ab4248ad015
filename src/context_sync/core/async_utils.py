"""Async utilities for running blocking filesystem calls from coroutines."""

import asyncio
import logging
from typing import Any, Callable, TypeVar

T = TypeVar("T")
logger = logging.getLogger(__name__)


async def run_sync(
    func: Callable[..., T], *args: Any, **kwargs: Any
) -> T:
    """Run a synchronous function in a thread pool without blocking the event loop.

    Every filesystem read and write in the sync core goes through this
    function, so each one is a suspension point for the caller.  Callers
    await each call before starting the next dependent step; nothing is
    gathered concurrently.

    Args:
        func: Synchronous function to call
        *args: Positional arguments for func
        **kwargs: Keyword arguments for func

    Returns:
        Result of func(*args, **kwargs)

    Example:
        content = await run_sync(path.read_bytes)
    """
    return await asyncio.to_thread(func, *args, **kwargs)
