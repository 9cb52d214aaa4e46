"""
Retry wrapper for calls to the generative model service.

Every model call goes through call_with_retry(): each attempt runs on a
worker thread and the caller waits for it with a hard deadline. Failed
attempts are classified (rate limit, timeout, other) and retried after a
class-specific backoff with jitter.
"""
import logging
import random
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Callable, Optional, TypeVar

import requests

from chalkboard.core.config import settings
from chalkboard.core.exceptions import (
    ConfigurationError,
    ContentBlockedError,
    EmptyResponseError,
    RateLimitError,
    ResponseParseError,
    RetryExhaustedError,
    UpstreamTimeoutError,
    ValidationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

RATE_LIMIT = "rate_limit"
TIMEOUT = "timeout"
OTHER = "other"

MAX_WAIT_SECONDS = 10.0
MAX_JITTER_SECONDS = 0.5

# Raised immediately, never retried
NON_RETRYABLE_ERRORS = (
    ContentBlockedError,
    EmptyResponseError,
    ResponseParseError,
    ValidationError,
    ConfigurationError,
)

# Attempts that miss their deadline while running keep going here until they settle
_executor = ThreadPoolExecutor(max_workers=16, thread_name_prefix="gemini-call")


def classify_error(error: BaseException) -> str:
    """
    Classify a failed attempt.

    Args:
        error: Exception raised by the attempt

    Returns:
        RATE_LIMIT, TIMEOUT or OTHER
    """
    if isinstance(error, RateLimitError):
        return RATE_LIMIT
    if isinstance(error, (UpstreamTimeoutError, requests.exceptions.Timeout, FutureTimeoutError)):
        return TIMEOUT

    message = str(error).lower()
    if "rate limit" in message or "quota" in message or "429" in message:
        return RATE_LIMIT
    if "timeout" in message or "timed out" in message:
        return TIMEOUT
    return OTHER


def base_backoff(kind: str, attempt: int) -> float:
    """Wait in seconds before the next attempt, without jitter. `attempt` is the 1-based attempt that failed."""
    if kind == RATE_LIMIT:
        return 2.0 * (2 ** (attempt - 1))
    if kind == TIMEOUT:
        return 0.5 * attempt
    return 1.0 * (2 ** (attempt - 1))


def backoff_delay(kind: str, attempt: int, jitter: Optional[float] = None) -> float:
    """Wait in seconds before the next attempt, jitter included, capped at MAX_WAIT_SECONDS."""
    if jitter is None:
        jitter = random.uniform(0, MAX_JITTER_SECONDS)
    return min(base_backoff(kind, attempt) + jitter, MAX_WAIT_SECONDS)


def run_with_deadline(func: Callable[[], T], timeout: float) -> T:
    """
    Run `func` on the shared executor and wait at most `timeout` seconds for it.

    When the deadline fires, a call still waiting for a worker is cancelled; a
    call already running is abandoned and its result dropped.

    Raises:
        UpstreamTimeoutError: If the deadline fires first
        Exception: Whatever `func` raised
    """
    future = _executor.submit(func)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError:
        if future.done():
            # func itself raised a timeout
            raise
        future.cancel()
        raise UpstreamTimeoutError(f"Request timeout after {timeout:g} seconds") from None


def call_with_retry(
    func: Callable[[], T],
    operation: str,
    max_attempts: Optional[int] = None,
    timeout: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
    jitter: Optional[Callable[[], float]] = None,
) -> T:
    """
    Call `func` with a per-attempt deadline and class-specific backoff between attempts.

    Args:
        func: Zero-argument callable performing exactly one remote call
        operation: Name used in logs and in the final error (e.g. "generate hint")
        max_attempts: Attempts before giving up (defaults to settings.gemini_max_attempts)
        timeout: Per-attempt deadline in seconds (defaults to settings.gemini_timeout_seconds)
        sleep: Function used to wait between attempts
        jitter: Function returning the jitter in seconds added to each wait

    Returns:
        Whatever `func` returned on the first successful attempt

    Raises:
        RetryExhaustedError: If every attempt failed with a retryable error
        ContentBlockedError, EmptyResponseError, ...: Non-retryable errors, raised immediately
    """
    max_attempts = max_attempts or settings.gemini_max_attempts
    timeout = timeout or settings.gemini_timeout_seconds

    last_error: Optional[BaseException] = None
    last_kind = OTHER

    for attempt in range(1, max_attempts + 1):
        try:
            logger.info(f"Gemini {operation} attempt {attempt}/{max_attempts}")
            result = run_with_deadline(func, timeout)
            logger.info(f"Gemini {operation} succeeded on attempt {attempt}")
            return result
        except NON_RETRYABLE_ERRORS:
            raise
        except Exception as e:
            last_error = e
            last_kind = classify_error(e)
            logger.warning(f"Gemini {operation} attempt {attempt}/{max_attempts} failed ({last_kind}): {e}")

            if attempt < max_attempts:
                wait = backoff_delay(last_kind, attempt, jitter() if jitter else None)
                logger.info(f"Waiting {wait:.2f}s before retry...")
                sleep(wait)

    logger.error(f"All {max_attempts} attempts failed for {operation}")
    raise RetryExhaustedError(operation, max_attempts, last_kind, last_error) from last_error
