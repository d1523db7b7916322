"""
clusterkube/utils/async_retry.py

Provides a decorator to run an async function up to a fixed number of times.
Commands in clusterkube default to a single attempt; the decorator exists so
callers can opt into retries per call without changing the runner.
"""

import asyncio
import logging
from typing import Any, Callable, Coroutine, Tuple, Type
from typing_extensions import ParamSpec, TypeVar

P = ParamSpec("P")
R = TypeVar("R")

logger = logging.getLogger(__name__)


def async_retry(
    retries: int = 1,
    delay: float = 1.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
) -> Callable[
    [Callable[P, Coroutine[Any, Any, R]]], Callable[P, Coroutine[Any, Any, R]]
]:
    """Decorates an async function to retry upon failure.

    Args:
        retries (int, optional):
            Maximum number of total attempts, at least 1. Defaults to 1.
        delay (float, optional):
            Delay in seconds between attempts. Defaults to 1.0.
        retry_on (Tuple[Type[BaseException], ...], optional):
            Exception types that trigger another attempt. Anything else is
            raised immediately.

    Returns:
        A decorator that wraps an async function with the retry loop. The
        last exception is re-raised once attempts are exhausted.
    """
    attempts = max(retries, 1)

    def decorator(
        func: Callable[P, Coroutine[Any, Any, R]]
    ) -> Callable[P, Coroutine[Any, Any, R]]:
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            for attempt_number in range(1, attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except retry_on as exc:
                    if attempt_number == attempts:
                        raise
                    logger.warning(
                        "Attempt %d/%d for %r failed: %s",
                        attempt_number,
                        attempts,
                        func.__qualname__,
                        exc,
                    )
                    await asyncio.sleep(delay)
            raise AssertionError("unreachable")

        return wrapper

    return decorator
