from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from paperchat.core.classifier import Context, classify
from paperchat.core.errors import ErrorRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

BASE_DELAY_MS = 1000
MAX_DELAY_MS = 10000

Sleep = Callable[[float], Awaitable[None]]
OnRetry = Callable[[int, BaseException], None]


def get_retry_delay(retry_count: int) -> int:
    """Exponential backoff in milliseconds: 1000, 2000, 4000, 8000, then 10000."""
    return min(BASE_DELAY_MS * 2 ** retry_count, MAX_DELAY_MS)


def should_retry(error: ErrorRecord, retry_count: int, max_retries: int = 3) -> bool:
    return error.retryable and retry_count < max_retries


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    on_retry: Optional[OnRetry] = None,
    *,
    sleep: Sleep = asyncio.sleep,
    context: Context = "chat",
) -> T:
    """
    Run ``operation`` until it succeeds, at most ``max_retries + 1`` times.

    A failure that classifies as non-retryable is re-raised at once. When the
    attempts run out the last exception is re-raised unchanged.
    """
    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as exc:
            if attempt >= max_retries:
                raise

            record = classify(exc, context)
            if not should_retry(record, attempt, max_retries):
                raise

            if on_retry is not None:
                on_retry(attempt + 1, exc)

            delay_ms = get_retry_delay(attempt)
            logger.info("retrying op=%s attempt=%d delay_ms=%d kind=%s", context, attempt + 1, delay_ms, record.kind.value)
            await sleep(delay_ms / 1000)
            attempt += 1
