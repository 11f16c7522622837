"""
Error types and retry mechanisms for the yt-news-feed system.

This module defines the exception hierarchy shared by the scraping, enrichment
and serving stages, together with a retry policy value and generic wrappers
that retry a fallible operation a fixed number of times with a fixed delay.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, Tuple, Type

logger = logging.getLogger(__name__)


class NewsFeedError(Exception):
    """Base exception for yt-news-feed errors."""
    pass


class MissingCredentialError(NewsFeedError):
    """Raised when a required external credential is not configured."""
    pass


class InvalidCategoryError(NewsFeedError):
    """Raised when a category selector does not resolve to a category."""
    pass


class DatasetValidationError(NewsFeedError):
    """Raised when scraped data fails validation before being saved."""
    pass


class ScrapeError(NewsFeedError):
    """Raised when the news feed could not be scraped."""
    pass


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed-count, fixed-delay retry policy."""
    max_attempts: int = 3
    delay: float = 5.0  # seconds between attempts

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay < 0:
            raise ValueError("delay cannot be negative")


def _attempt_failed(operation: str, attempt: int, policy: RetryPolicy, error: Exception) -> None:
    error_msg = f"Attempt {attempt}/{policy.max_attempts} failed for {operation}: {error}"
    if attempt < policy.max_attempts:
        logger.warning(error_msg)
    else:
        logger.error(f"All retry attempts exhausted: {error_msg}")


def retry_call(
    func: Callable[..., Any],
    *args,
    policy: Optional[RetryPolicy] = None,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
    **kwargs
) -> Any:
    """
    Call a function, retrying on failure according to a retry policy.

    Args:
        func: Function to call
        policy: Retry policy (defaults to 3 attempts, 5 seconds apart)
        exceptions: Exception types that trigger a retry
        sleep: Sleep function used between attempts
        *args, **kwargs: Arguments to pass to func

    Returns:
        The function's result

    Raises:
        The last exception raised by func once all attempts are exhausted
    """
    policy = policy or RetryPolicy()
    name = getattr(func, '__name__', repr(func))
    last_exception = None

    for attempt in range(1, policy.max_attempts + 1):
        if attempt > 1 and policy.delay > 0:
            logger.info(f"Retrying {name} in {policy.delay:.2f}s (attempt {attempt}/{policy.max_attempts})")
            sleep(policy.delay)
        try:
            result = func(*args, **kwargs)
            if attempt > 1:
                logger.info(f"Retry successful for {name} on attempt {attempt}")
            return result
        except exceptions as e:
            last_exception = e
            _attempt_failed(name, attempt, policy, e)

    raise last_exception


async def retry_async(
    func: Callable[..., Awaitable[Any]],
    *args,
    policy: Optional[RetryPolicy] = None,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    **kwargs
) -> Any:
    """
    Await a coroutine function, retrying on failure according to a retry policy.

    Same semantics as retry_call, with asyncio.sleep between attempts.
    """
    policy = policy or RetryPolicy()
    name = getattr(func, '__name__', repr(func))
    last_exception = None

    for attempt in range(1, policy.max_attempts + 1):
        if attempt > 1 and policy.delay > 0:
            logger.info(f"Retrying {name} in {policy.delay:.2f}s (attempt {attempt}/{policy.max_attempts})")
            await asyncio.sleep(policy.delay)
        try:
            result = await func(*args, **kwargs)
            if attempt > 1:
                logger.info(f"Retry successful for {name} on attempt {attempt}")
            return result
        except exceptions as e:
            last_exception = e
            _attempt_failed(name, attempt, policy, e)

    raise last_exception


def handle_fetch_errors(operation: str):
    """
    Decorator that turns any exception raised by a fetch into a None result.

    The wrapped function takes the video ID as its first positional argument
    after self.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(self, video_id: str, *args, **kwargs):
            try:
                return func(self, video_id, *args, **kwargs)
            except Exception as e:
                logger.error(f"{operation} failed for video {video_id}: {e}")
                return None
        return wrapper
    return decorator
