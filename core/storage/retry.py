"""Fixed-bound retry with exponential backoff for storage primitives."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from loguru import logger

from core.exceptions import RetryExhaustedError

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 1.0  # seconds

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must not be negative")

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the given (1-based) failed attempt."""
        return self.base_delay * 2 ** (attempt - 1)


DEFAULT_RETRY_POLICY = RetryPolicy()


async def with_retry(
    operation: str,
    key: str,
    call: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    error_cls: type[RetryExhaustedError] = RetryExhaustedError,
) -> T:
    """Await ``call`` until it succeeds or ``policy.max_attempts`` is spent.

    Every exception counts as a failed attempt. Attempts run one after the
    other; the last failure is wrapped into ``error_cls``.
    """
    last_error: Exception | None = None

    for attempt in range(1, policy.max_attempts + 1):
        logger.debug(
            "{operation} attempt {attempt}/{total} for key {key}",
            operation=operation,
            attempt=attempt,
            total=policy.max_attempts,
            key=key,
        )
        try:
            return await call()
        except Exception as exc:
            last_error = exc
            logger.warning(
                "{operation} attempt {attempt} failed for key {key}: {error}",
                operation=operation,
                attempt=attempt,
                key=key,
                error=str(exc),
            )
        if attempt < policy.max_attempts:
            await asyncio.sleep(policy.delay_for(attempt))

    message = f"Failed to {operation} file after {policy.max_attempts} attempts: {last_error}"
    logger.error(message)
    raise error_cls(
        message,
        operation=operation,
        key=key,
        attempts=policy.max_attempts,
        last_error=last_error,
    ) from last_error


__all__ = ["RetryPolicy", "DEFAULT_RETRY_POLICY", "with_retry"]
