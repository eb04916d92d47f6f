"""Bounded backoff for one-shot calls that hit quota limits."""

import asyncio
from typing import Awaitable, Callable, TypeVar

from ..errors import QuotaExceededError
from ..logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


async def call_with_quota_retry(
    call: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    backoff_seconds: float = 2.0,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """Run ``call``, retrying only on QuotaExceededError.

    Retry ``n`` (0-based) waits ``(n + 1) * backoff_seconds``. Every other
    error propagates immediately.
    """
    attempt = 0
    while True:
        try:
            return await call()
        except QuotaExceededError:
            if attempt >= max_retries:
                logger.error(f"Quota still exhausted after {attempt} retries")
                raise
            delay = (attempt + 1) * backoff_seconds
            logger.warning(
                f"Quota exhausted, retrying in {delay:.1f}s",
                extra={"attempt": attempt + 1},
            )
            await sleep(delay)
            attempt += 1
