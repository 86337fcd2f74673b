"""
Helpers for driving the synchronous Azure SDK clients from asyncio code.
"""

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

T = TypeVar("T")


async def run_blocking(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Run a blocking function in an executor to avoid blocking the event loop.

    Args:
        func: The blocking function to run
        *args: Positional arguments for the function
        **kwargs: Keyword arguments for the function

    Returns:
        Result of the function call
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, lambda: func(*args, **kwargs))


async def with_deadline(awaitable: Awaitable[T], timeout: float) -> T:
    """Await ``awaitable`` but give up with ``asyncio.TimeoutError`` after ``timeout`` seconds."""
    return await asyncio.wait_for(awaitable, timeout=timeout)
