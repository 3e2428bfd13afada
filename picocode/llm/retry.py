"""
Retry strategy for completion requests.

Rate limits and connection failures are retried with exponential backoff.
Everything the provider reports is turned into a picocode exception once
retries are exhausted.
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from openai import APIConnectionError
from openai import APIError as OpenAIAPIError
from openai import RateLimitError as OpenAIRateLimitError

from picocode.constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_BASE_DELAY,
    DEFAULT_RETRY_MAX_DELAY,
)
from picocode.exceptions import APIError, ConnectionError, RateLimitError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryStrategy:
    """
    Strategy for retrying failed operations with exponential backoff.

    Parameters
    ----------
    max_retries : int, default=3
        Maximum number of retry attempts.
    base_delay : float, default=1.0
        Base delay in seconds for exponential backoff.
    max_delay : float, default=60.0
        Maximum delay in seconds between retries.

    Examples
    --------
    >>> strategy = RetryStrategy(max_retries=3, base_delay=1.0)
    >>> response = await strategy.execute(lambda: client.chat.completions.create(**kwargs))
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = DEFAULT_RETRY_BASE_DELAY,
        max_delay: float = DEFAULT_RETRY_MAX_DELAY,
    ) -> None:
        self.max_retries: int = max_retries
        self.base_delay: float = base_delay
        self.max_delay: float = max_delay

    def _calculate_delay(self, attempt: int) -> float:
        delay: float = self.base_delay * (2**attempt)
        return min(delay, self.max_delay)

    async def execute(
        self,
        func: Callable[[], Awaitable[T]],
        *,
        on_retry: Callable[[Exception, int], None] | None = None,
    ) -> T:
        """
        Execute a function with retry logic.

        Parameters
        ----------
        func : Callable[[], Awaitable[T]]
            Async function to execute.
        on_retry : Callable[[Exception, int], None] | None, optional
            Called before each retry with the exception and attempt number.

        Returns
        -------
        T
            Result of the function.

        Raises
        ------
        RateLimitError
            If the provider kept rate limiting after all retries.
        ConnectionError
            If the provider stayed unreachable after all retries.
        APIError
            If the provider rejected the request. Not retried.
        """
        last_delay: float | None = None
        error: Exception

        for attempt in range(self.max_retries + 1):
            try:
                return await func()
            except OpenAIRateLimitError as e:
                error = e
                if attempt >= self.max_retries:
                    raise RateLimitError(
                        f"Rate limit exceeded after {self.max_retries} retries: {e}",
                        retry_after=last_delay,
                        cause=e,
                    ) from e
                last_delay = self._calculate_delay(attempt)
                logger.warning(
                    f"Rate limit exceeded (attempt {attempt + 1}/{self.max_retries + 1}), "
                    f"retrying in {last_delay:.2f}s",
                )
            except APIConnectionError as e:
                error = e
                if attempt >= self.max_retries:
                    raise ConnectionError(
                        f"Connection failed after {self.max_retries} retries: {e}",
                        cause=e,
                    ) from e
                last_delay = self._calculate_delay(attempt)
                logger.warning(
                    f"Connection error (attempt {attempt + 1}/{self.max_retries + 1}), "
                    f"retrying in {last_delay:.2f}s: {e}",
                )
            except OpenAIAPIError as e:
                # API errors are typically not retryable
                logger.error(f"API error: {e}")
                raise APIError(
                    str(e),
                    status_code=getattr(e, "status_code", None),
                    cause=e,
                ) from e

            if on_retry:
                on_retry(error, attempt)
            await asyncio.sleep(last_delay)

        raise RuntimeError("Retry strategy exhausted without result")
