"""HTTP transport collaborator.

The rest of the client only depends on the :class:`Transport` protocol: take
an :class:`~xaiclient.http.request.OutboundRequest`, return the status, the
headers and an unread :class:`ByteStream`.  :class:`HttpxTransport` is the
default implementation, built on ``httpx.AsyncClient``.

All ``httpx`` exceptions are translated here, both while connecting and while
reading the body:

=============================  ==============================================
httpx exception                Client exception
=============================  ==============================================
``httpx.TimeoutException``     :class:`~xaiclient.errors.TimeoutError`
``httpx.TransportError``       :class:`~xaiclient.errors.ConnectionFailedError`
=============================  ==============================================
"""

from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass
from typing import Protocol

import httpx

from xaiclient.errors import ConnectionFailedError, TimeoutError
from xaiclient.http.request import OutboundRequest


class ByteStream(Protocol):
    """A single-pass async iterator of body bytes with an idempotent close."""

    def __aiter__(self) -> AsyncIterator[bytes]: ...

    async def aclose(self) -> None: ...


@dataclass(frozen=True)
class TransportResponse:
    status: int
    headers: Mapping[str, str]
    body: ByteStream


class Transport(Protocol):
    async def execute(self, request: OutboundRequest) -> TransportResponse: ...


def _map_httpx_error(exc: httpx.HTTPError, url: str) -> Exception:
    if isinstance(exc, httpx.TimeoutException):
        return TimeoutError(f"Request to {url} timed out: {exc!r}", original_error=exc)
    return ConnectionFailedError(f"Connection to {url} failed: {exc!r}", original_error=exc)


class _HttpxByteStream:
    """Adapts a streamed ``httpx.Response`` to :class:`ByteStream`."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aiter__(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_bytes():
                yield chunk
        except (httpx.TimeoutException, httpx.TransportError) as exc:
            await self.aclose()
            raise _map_httpx_error(exc, str(self._response.url)) from exc

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._response.aclose()


class HttpxTransport:
    """:class:`Transport` backed by a shared ``httpx.AsyncClient``.

    The client's connection pool is the only state shared between calls and
    is safe for concurrent use.

    Args:
        client: Client to send requests with.  When omitted a new client is
            created and closed by :meth:`aclose`.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client if client is not None else httpx.AsyncClient()
        self._owns_client = client is None

    async def execute(self, request: OutboundRequest) -> TransportResponse:
        http_request = self._client.build_request(
            request.method,
            request.url,
            headers=dict(request.headers),
            content=request.body,
            timeout=httpx.Timeout(request.timeout),
        )
        try:
            response = await self._client.send(http_request, stream=True)
        except (httpx.TimeoutException, httpx.TransportError) as exc:
            raise _map_httpx_error(exc, request.url) from exc

        return TransportResponse(
            status=response.status_code,
            headers=response.headers,
            body=_HttpxByteStream(response),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
