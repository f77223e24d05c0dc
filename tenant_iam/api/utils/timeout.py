import asyncio
from typing import Awaitable, TypeVar

from config import ApplicationConfig

T = TypeVar("T")


async def run_with_timeout(awaitable: Awaitable[T]) -> T:
    """
    Bound a use-case call by STORE_TIMEOUT_SECONDS. asyncio.TimeoutError
    propagates to the app's handler and becomes a 503.
    """
    return await asyncio.wait_for(awaitable, timeout=ApplicationConfig.STORE_TIMEOUT_SECONDS)
