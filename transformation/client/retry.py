"""
Client Retry Logic.

Bounded retries with a fixed delay for idempotent reads. Writes are never
passed through a RetryPolicy so a flaky connection cannot create duplicates.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx

from transformation.errors import TransformationError, log_error_with_context

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Configuration for read retries."""

    max_attempts: int = 3
    """Total attempts including the first"""

    delay: float = 1.0
    """Seconds to wait between attempts"""


def is_retryable_error(error: Exception) -> bool:
    """
    Determine if an error should trigger a retry.

    Server errors (5xx) and transport failures are retryable; client errors
    such as 400 and 404 are not.
    """
    if isinstance(error, TransformationError):
        return error.retryable
    return isinstance(error, httpx.TransportError)


class RetryPolicy:
    """
    Retries an async call a bounded number of times with fixed backoff.

    Example:
        >>> policy = RetryPolicy(RetryConfig(max_attempts=3, delay=0.5))
        >>> tasks = await policy.execute_async(client.get_tasks)
    """

    def __init__(self, config: Optional[RetryConfig] = None):
        self.config = config or RetryConfig()

    async def execute_async(
        self,
        func: Callable[..., Any],
        *args,
        **kwargs,
    ) -> Any:
        """
        Execute an async function with retry logic.

        Args:
            func: Async function to execute
            *args: Positional arguments for function
            **kwargs: Keyword arguments for function

        Returns:
            Result from the first successful attempt

        Raises:
            Exception: The last error once attempts are exhausted, or the
                first non-retryable error
        """
        name = getattr(func, "__name__", repr(func))
        last_exception = None

        for attempt in range(self.config.max_attempts):
            try:
                result = await func(*args, **kwargs)
                if attempt > 0:
                    logger.info(f"{name} succeeded on attempt {attempt + 1}")
                return result

            except Exception as e:
                last_exception = e

                if not is_retryable_error(e):
                    raise

                log_error_with_context(
                    e,
                    component="retry_policy",
                    additional_context={
                        "attempt": attempt + 1,
                        "max_attempts": self.config.max_attempts,
                        "function": name,
                    },
                )

                if attempt + 1 >= self.config.max_attempts:
                    logger.error(
                        f"All {self.config.max_attempts} attempts exhausted for {name}"
                    )
                    break

                logger.info(
                    f"Retrying {name} in {self.config.delay:.2f}s "
                    f"(attempt {attempt + 1}/{self.config.max_attempts})"
                )
                await asyncio.sleep(self.config.delay)

        raise last_exception
