"""Send requests and turn responses into typed results.

:class:`ResponseDispatcher` is the only reader of a response body.  One-shot
calls read it fully and validate it against a response model; streaming calls
hand it, unread, to a :class:`~xaiclient.streaming.ChunkStream`.

Status handling:

==================================  ==============================================
Response                            Result
==================================  ==============================================
2xx, one-shot, body matches model   model instance
2xx, one-shot, body does not match  :class:`~xaiclient.errors.DeserializationError`
2xx, streaming                      :class:`~xaiclient.streaming.ChunkStream`
non-2xx, error envelope             :class:`~xaiclient.errors.APIError`
non-2xx, anything else              :class:`~xaiclient.errors.UnexpectedHTTPStatusError`
==================================  ==============================================

Nothing is retried here.
"""

from typing import Any, TypeVar

from pydantic import ValidationError

from xaiclient.errors import APIError, DeserializationError, UnexpectedHTTPStatusError
from xaiclient.http.request import OutboundRequest
from xaiclient.http.transport import ByteStream, Transport, TransportResponse
from xaiclient.models.base import ResponseModel
from xaiclient.streaming import DEFAULT_DELIMITERS, DONE_SENTINEL, ChunkStream

M = TypeVar("M", bound=ResponseModel)


class ErrorDetail(ResponseModel):
    message: str | None = None
    type: str | None = None
    code: str | int | None = None


class ErrorEnvelope(ResponseModel):
    """Error body returned with non-2xx statuses.

    xAI answers either in the OpenAI shape ``{"error": {"message": ...}}`` or
    flat as ``{"code": ..., "error": "<message>"}``.
    """

    error: ErrorDetail | str
    code: str | int | None = None

    @property
    def provider_message(self) -> str | None:
        if isinstance(self.error, str):
            return self.error
        return self.error.message


async def read_body(stream: ByteStream) -> bytes:
    """Read *stream* to the end and close it."""
    parts: list[bytes] = []
    try:
        async for chunk in stream:
            parts.append(chunk)
    finally:
        await stream.aclose()
    return b"".join(parts)


def _text(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


class ResponseDispatcher:
    """Sends :class:`OutboundRequest` objects through a :class:`Transport`.

    Holds no per-call state, so one dispatcher may serve concurrent calls.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def send_once(self, request: OutboundRequest, response_model: type[M]) -> M:
        """Send *request* and parse the whole body as *response_model*.

        Raises:
            APIError: Non-2xx status with a provider error body.
            UnexpectedHTTPStatusError: Non-2xx status with any other body.
            DeserializationError: 2xx body that does not match *response_model*.
            TimeoutError: The transport timed out.
            ConnectionFailedError: The transport could not reach the provider.
        """
        response = await self._transport.execute(request)
        await self._raise_for_status(response)

        raw = await read_body(response.body)
        try:
            return response_model.model_validate_json(raw)
        except ValidationError as exc:
            raise DeserializationError(_text(raw), exc) from exc

    async def send_streaming(
        self,
        request: OutboundRequest,
        chunk_model: type[M],
        *,
        sentinel: str | None = DONE_SENTINEL,
        delimiters: tuple[bytes, ...] = DEFAULT_DELIMITERS,
        log: Any = None,
    ) -> ChunkStream[M]:
        """Send *request* and return a lazy stream of *chunk_model* instances.

        Status errors are raised here, before any chunk is produced.  Errors
        while decoding are raised from the returned stream.
        """
        response = await self._transport.execute(request)
        await self._raise_for_status(response)
        return ChunkStream(
            response.body,
            chunk_model.model_validate_json,
            sentinel=sentinel,
            delimiters=delimiters,
            log=log,
        )

    async def _raise_for_status(self, response: TransportResponse) -> None:
        if 200 <= response.status < 300:
            return

        raw = await read_body(response.body)
        try:
            envelope = ErrorEnvelope.model_validate_json(raw)
        except ValidationError:
            raise UnexpectedHTTPStatusError(response.status, _text(raw)) from None
        raise APIError(response.status, envelope.provider_message)
