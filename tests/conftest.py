"""Shared test doubles.

``RecordingByteStream`` stands in for a response body: it hands out
pre-recorded chunks, counts how many were read and how often it was closed,
and can raise a transport error after the last chunk.  ``ScriptedTransport``
returns queued responses (or raises queued errors) and records every request
it was asked to execute.
"""

from collections.abc import AsyncIterator, Callable, Iterable

import pytest

from xaiclient.http.request import OutboundRequest
from xaiclient.http.transport import TransportResponse


class RecordingByteStream:
    def __init__(self, chunks: Iterable[bytes], error: Exception | None = None) -> None:
        self._chunks = list(chunks)
        self._error = error
        self.reads = 0
        self.close_count = 0

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for chunk in self._chunks:
            self.reads += 1
            yield chunk
        if self._error is not None:
            raise self._error

    async def aclose(self) -> None:
        self.close_count += 1


class ScriptedTransport:
    def __init__(self, *outcomes: TransportResponse | Exception) -> None:
        self._outcomes = list(outcomes)
        self.requests: list[OutboundRequest] = []

    async def execute(self, request: OutboundRequest) -> TransportResponse:
        self.requests.append(request)
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def sse(*payloads: str, delimiter: str = "\n\n") -> bytes:
    """Render *payloads* as ``data:`` frames."""
    return "".join(f"data: {p}{delimiter}" for p in payloads).encode("utf-8")


def response(
    status: int, *chunks: bytes, headers: dict[str, str] | None = None
) -> tuple[TransportResponse, RecordingByteStream]:
    body = RecordingByteStream(chunks)
    return TransportResponse(status=status, headers=headers or {}, body=body), body


@pytest.fixture
def make_stream() -> Callable[..., RecordingByteStream]:
    return RecordingByteStream


@pytest.fixture
def make_response() -> Callable[..., tuple[TransportResponse, RecordingByteStream]]:
    return response


@pytest.fixture
def make_sse() -> Callable[..., bytes]:
    return sse


@pytest.fixture
def make_transport() -> Callable[..., ScriptedTransport]:
    return ScriptedTransport
