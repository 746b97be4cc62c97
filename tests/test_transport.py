"""Tests for HttpxTransport (http/transport.py) using ``httpx.MockTransport``."""

from collections.abc import AsyncIterator

import httpx
import pytest

from xaiclient.errors import ConnectionFailedError, TimeoutError
from xaiclient.http.request import build_direct_request
from xaiclient.http.transport import HttpxTransport

_REQUEST = build_direct_request(
    "https://api.x.ai", "/v1/chat/completions", "POST", api_key="xai-key", body=b'{"a":1}'
)


def _transport(handler) -> HttpxTransport:  # type: ignore[no-untyped-def]
    return HttpxTransport(httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class _FailingBody(httpx.AsyncByteStream):
    """Yields one chunk, then the connection drops."""

    async def __aiter__(self) -> AsyncIterator[bytes]:
        yield b"data: {}\n\n"
        raise httpx.ReadError("connection reset")


class _StalledBody(httpx.AsyncByteStream):
    """Yields one chunk, then the server stops sending."""

    async def __aiter__(self) -> AsyncIterator[bytes]:
        yield b"data: {}\n\n"
        raise httpx.ReadTimeout("read timed out")


class TestExecute:
    async def test_sends_request_as_described(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"ok", headers={"x-request-id": "r1"})

        transport = _transport(handler)
        response = await transport.execute(_REQUEST)

        assert response.status == 200
        assert response.headers["x-request-id"] == "r1"
        assert seen[0].method == "POST"
        assert str(seen[0].url) == "https://api.x.ai/v1/chat/completions"
        assert seen[0].headers["authorization"] == "Bearer xai-key"
        assert seen[0].headers["content-type"] == "application/json"
        assert seen[0].content == b'{"a":1}'
        assert seen[0].extensions["timeout"]["read"] == 60.0
        await response.body.aclose()

    async def test_body_streamed(self) -> None:
        transport = _transport(lambda request: httpx.Response(200, content=b"hello"))
        response = await transport.execute(_REQUEST)

        data = b"".join([chunk async for chunk in response.body])

        assert data == b"hello"
        await response.body.aclose()

    async def test_timeout_mapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        with pytest.raises(TimeoutError) as exc_info:
            await _transport(handler).execute(_REQUEST)
        assert isinstance(exc_info.value.original_error, httpx.ReadTimeout)

    async def test_connect_error_mapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ConnectionFailedError, match="api.x.ai"):
            await _transport(handler).execute(_REQUEST)

    async def test_error_while_reading_mapped(self) -> None:
        transport = _transport(lambda request: httpx.Response(200, stream=_FailingBody()))
        response = await transport.execute(_REQUEST)
        received: list[bytes] = []

        with pytest.raises(ConnectionFailedError):
            async for chunk in response.body:
                received.append(chunk)

        assert received == [b"data: {}\n\n"]
        assert response.body.closed  # type: ignore[attr-defined]

    async def test_timeout_while_reading_mapped(self) -> None:
        transport = _transport(lambda request: httpx.Response(200, stream=_StalledBody()))
        response = await transport.execute(_REQUEST)
        received: list[bytes] = []

        with pytest.raises(TimeoutError) as exc_info:
            async for chunk in response.body:
                received.append(chunk)

        assert received == [b"data: {}\n\n"]
        assert isinstance(exc_info.value.original_error, httpx.ReadTimeout)
        assert response.body.closed  # type: ignore[attr-defined]

    async def test_body_close_idempotent(self) -> None:
        transport = _transport(lambda request: httpx.Response(200, content=b"x"))
        response = await transport.execute(_REQUEST)

        await response.body.aclose()
        await response.body.aclose()

        assert response.body.closed  # type: ignore[attr-defined]


class TestLifecycle:
    async def test_supplied_client_left_open(self) -> None:
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        async with HttpxTransport(client):
            pass
        assert not client.is_closed
        await client.aclose()

    async def test_owned_client_closed(self) -> None:
        transport = HttpxTransport()
        await transport.aclose()
        assert transport._client.is_closed
