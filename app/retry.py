"""
app/retry.py

Retry policy shared by outbound API callers.

The helper blocks only the calling thread and sleeps through a
``threading.Event`` so a caller can abandon a multi-attempt sequence by
setting the event.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar, cast

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryCancelledError(RuntimeError):
    """
    Raised when a caller cancels a retry sequence between attempts.
    """


class RetryExhaustedError(RuntimeError):
    """
    Raised when every attempt of a retry sequence failed.

    Attributes:
        attempts: Number of attempts made.
        last_error: Exception raised by the final attempt.
    """

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Operation failed after {attempts} attempt(s): {last_error}")


def linear_backoff(step_seconds: float) -> Callable[[int], float]:
    """
    Backoff that waits ``attempt * step_seconds`` after a failed attempt.
    """

    return lambda attempt: attempt * step_seconds


@dataclass(frozen=True)
class RetryPolicy:
    """
    Maximum attempts plus the delay to wait after attempt ``n`` (1-based) fails.
    """

    max_attempts: int = 3
    backoff: Callable[[int], float] = field(default=linear_backoff(1.0))

    def delay_after(self, attempt: int) -> float:
        return max(0.0, float(self.backoff(attempt)))


def wait_or_cancel(seconds: float, cancel_event: threading.Event | None = None) -> None:
    """
    Sleep for ``seconds`` unless ``cancel_event`` is set first.

    Raises RetryCancelledError when the event is (or becomes) set.
    """

    event = cancel_event or threading.Event()
    if event.is_set():
        raise RetryCancelledError("Retry sequence cancelled.")
    if seconds <= 0:
        return
    if event.wait(seconds):
        raise RetryCancelledError("Retry sequence cancelled.")


def run_with_retry(
    operation: Callable[[int], T],
    policy: RetryPolicy,
    *,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    cancel_event: threading.Event | None = None,
    description: str = "operation",
) -> T:
    """
    Call ``operation(attempt)`` until it succeeds or the policy is exhausted.

    Only exceptions matching ``retry_on`` are retried; anything else propagates
    immediately. No delay follows the final attempt.

    Raises:
        RetryExhaustedError: every attempt failed with a retryable error.
        RetryCancelledError: ``cancel_event`` was set between attempts.
    """

    attempts = max(1, policy.max_attempts)
    last_error: BaseException | None = None

    for attempt in range(1, attempts + 1):
        if cancel_event is not None and cancel_event.is_set():
            raise RetryCancelledError(f"{description} cancelled before attempt {attempt}.")
        try:
            return operation(attempt)
        except retry_on as exc:
            last_error = exc
            if attempt >= attempts:
                break
            delay = policy.delay_after(attempt)
            logger.warning(
                "Retrying %s attempt=%s/%s wait_seconds=%.2f error=%s",
                description,
                attempt,
                attempts,
                delay,
                exc,
            )
            wait_or_cancel(delay, cancel_event)

    failure = cast(BaseException, last_error)
    raise RetryExhaustedError(attempts, failure) from failure
