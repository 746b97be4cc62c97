"""Tests for the opt-in retry helper (retry.py).

``xaiclient.retry._sleep`` is replaced with an AsyncMock so backoff waits
complete instantly.
"""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from xaiclient.errors import (
    APIError,
    ConnectionFailedError,
    DeserializationError,
    EncodingError,
    TimeoutError,
    UnexpectedHTTPStatusError,
)
from xaiclient.retry import call_with_retries, is_retryable


@pytest.fixture
def no_backoff(mocker: Any) -> AsyncMock:
    return mocker.patch("xaiclient.retry._sleep", new=AsyncMock(return_value=None))


class TestIsRetryable:
    @pytest.mark.parametrize(
        "exc",
        [
            ConnectionFailedError("refused"),
            TimeoutError("slow"),
            APIError(429, "rate limited"),
            APIError(503, "overloaded"),
            UnexpectedHTTPStatusError(502, "Bad Gateway"),
        ],
    )
    def test_transient(self, exc: Exception) -> None:
        assert is_retryable(exc)

    @pytest.mark.parametrize(
        "exc",
        [
            APIError(400, "bad request"),
            APIError(401, "bad key"),
            UnexpectedHTTPStatusError(404, "not found"),
            DeserializationError("{}", ValueError("x")),
            EncodingError("x"),
            ValueError("not ours"),
        ],
    )
    def test_permanent(self, exc: Exception) -> None:
        assert not is_retryable(exc)


class TestCallWithRetries:
    async def test_default_is_single_attempt(self, no_backoff: AsyncMock) -> None:
        call = AsyncMock(side_effect=ConnectionFailedError("refused"))

        with pytest.raises(ConnectionFailedError):
            await call_with_retries(call)

        assert call.await_count == 1
        no_backoff.assert_not_awaited()

    async def test_succeeds_after_transient_failures(self, no_backoff: AsyncMock) -> None:
        call = AsyncMock(side_effect=[APIError(429, "slow down"), TimeoutError("t"), "ok"])

        assert await call_with_retries(call, max_attempts=3) == "ok"
        assert call.await_count == 3
        assert no_backoff.await_count == 2

    async def test_exhausted_reraises_last_error(self, no_backoff: AsyncMock) -> None:
        call = AsyncMock(side_effect=[APIError(500, "a"), APIError(503, "b")])

        with pytest.raises(APIError) as exc_info:
            await call_with_retries(call, max_attempts=2)

        assert exc_info.value.status == 503

    async def test_permanent_error_not_retried(self, no_backoff: AsyncMock) -> None:
        call = AsyncMock(side_effect=APIError(401, "bad key"))

        with pytest.raises(APIError):
            await call_with_retries(call, max_attempts=5)

        assert call.await_count == 1

    async def test_backoff_is_exponential(self, no_backoff: AsyncMock) -> None:
        call = AsyncMock(side_effect=[TimeoutError("t")] * 3 + ["ok"])

        await call_with_retries(call, max_attempts=4)

        waits = [c.args[0] for c in no_backoff.await_args_list]
        assert waits == [2, 2, 4]
