"""Retry policy for idempotent daemon calls."""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

import structlog

from ...models.errors import DaemonUnreachable

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff on ``DaemonUnreachable``.

    Only used for calls that are safe to repeat (pod info reads and image
    pulls). ``attempts=1`` disables retrying.
    """

    attempts: int = 1
    backoff_seconds: float = 0.5
    max_backoff_seconds: float = 5.0

    def delay(self, attempt: int) -> float:
        """Backoff before the given retry (1-based)."""
        return min(self.backoff_seconds * (2 ** (attempt - 1)), self.max_backoff_seconds)

    async def run(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        """Await ``call()``, retrying while the daemon is unreachable."""
        attempt = 1
        while True:
            try:
                return await call()
            except DaemonUnreachable as e:
                if attempt >= self.attempts:
                    raise
                delay = self.delay(attempt)
                logger.warning(
                    "Daemon unreachable, retrying",
                    operation=operation,
                    attempt=attempt,
                    max_attempts=self.attempts,
                    delay_seconds=delay,
                    error=str(e),
                )
                await asyncio.sleep(delay)
                attempt += 1


NO_RETRY = RetryPolicy()
