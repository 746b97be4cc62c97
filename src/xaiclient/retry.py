"""Opt-in exponential-backoff retries for the connection phase of a call.

Only the "send the request and receive the status" step is ever retried.
Once a stream has started producing chunks, failures are raised as they are:
resuming a partial stream is unsafe.

Retried: :class:`~xaiclient.errors.ConnectionFailedError`,
:class:`~xaiclient.errors.TimeoutError`, and HTTP 429 / 5xx responses.
Everything else is raised immediately.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from xaiclient.errors import (
    APIError,
    ConnectionFailedError,
    TimeoutError,
    UnexpectedHTTPStatusError,
)

_log = structlog.get_logger(__name__)

R = TypeVar("R")


def is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, ConnectionFailedError | TimeoutError):
        return True
    if isinstance(exc, APIError | UnexpectedHTTPStatusError):
        return exc.status == 429 or exc.status >= 500
    return False


async def _sleep(seconds: float) -> None:
    await asyncio.sleep(seconds)


def _before_sleep(retry_state: RetryCallState) -> None:
    """Tenacity ``before_sleep`` hook that emits a structured warning."""
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    next_action = retry_state.next_action
    wait_seconds = next_action.sleep if next_action is not None else 0.0
    _log.warning(
        "xai_request_retry",
        attempt=retry_state.attempt_number,
        wait_seconds=round(wait_seconds, 2),
        error_type=type(exc).__name__ if exc else None,
        error=str(exc) if exc else None,
    )


async def call_with_retries(
    call: Callable[[], Awaitable[R]],
    *,
    max_attempts: int = 1,
) -> R:
    """Await ``call()``, retrying transient failures up to *max_attempts* in total.

    With the default ``max_attempts=1`` the call is made exactly once.
    """
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max(1, max_attempts)),
        retry=retry_if_exception(is_retryable),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        sleep=_sleep,
        before_sleep=_before_sleep,
        reraise=True,
    ):
        with attempt:
            return await call()
    raise AssertionError("unreachable: tenacity reraises the last error")
