"""xAI service: the public call surface of the client.

:class:`XAIService` is the protocol every xAI service implements.
:class:`XAIDirectService` implements it by calling the xAI API directly with a
caller-supplied key; a proxied implementation would satisfy the same protocol.

On top of the request pipeline this module adds:

* an OpenTelemetry span per call using GenAI semantic conventions
* structured logging via structlog with a per-call request ID
* optional exponential-backoff retry of the connection phase
  (:mod:`xaiclient.retry`)
"""

import time
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any, Protocol, TypeVar

import structlog
from opentelemetry import trace
from opentelemetry.trace import Span, StatusCode

from xaiclient.config import Settings
from xaiclient.encoding import RequestBody, encode_body
from xaiclient.errors import XAIClientError
from xaiclient.http.dispatcher import ResponseDispatcher
from xaiclient.http.request import OutboundRequest, build_direct_request
from xaiclient.http.transport import HttpxTransport, Transport
from xaiclient.models.base import ResponseModel
from xaiclient.models.chat import (
    ChatCompletionChunk,
    ChatCompletionRequestBody,
    ChatCompletionResponseBody,
    StreamOptions,
)
from xaiclient.models.images import (
    CreateImageEditRequestBody,
    CreateImageRequestBody,
    CreateImageResponseBody,
)
from xaiclient.models.responses import (
    CreateResponseRequestBody,
    ResponseObject,
    ResponseStreamEvent,
)
from xaiclient.retry import call_with_retries
from xaiclient.streaming import DONE_SENTINEL, ChunkStream

_log = structlog.get_logger(__name__)
_tracer = trace.get_tracer(__name__)

DEFAULT_BASE_URL = "https://api.x.ai"

M = TypeVar("M", bound=ResponseModel)
R = TypeVar("R")


class XAIService(Protocol):
    async def chat_completion(
        self, body: ChatCompletionRequestBody, seconds_to_wait: int | None = None
    ) -> ChatCompletionResponseBody: ...

    async def streaming_chat_completion(
        self, body: ChatCompletionRequestBody, seconds_to_wait: int | None = None
    ) -> ChunkStream[ChatCompletionChunk]: ...

    async def create_response(
        self, body: CreateResponseRequestBody, seconds_to_wait: int | None = None
    ) -> ResponseObject: ...

    async def streaming_create_response(
        self, body: CreateResponseRequestBody, seconds_to_wait: int | None = None
    ) -> ChunkStream[ResponseStreamEvent]: ...

    async def create_image(
        self, body: CreateImageRequestBody, seconds_to_wait: int | None = None
    ) -> CreateImageResponseBody: ...

    async def create_image_edit(
        self, body: CreateImageEditRequestBody, seconds_to_wait: int | None = None
    ) -> CreateImageResponseBody: ...


class XAIDirectService:
    """Calls the xAI API directly with an API key held by the caller.

    Example::

        async with XAIDirectService("xai-...") as service:
            body = ChatCompletionRequestBody(
                model="grok-3-mini",
                messages=[SystemMessage("be terse"), UserMessage("hi")],
            )
            async with await service.streaming_chat_completion(body) as stream:
                async for chunk in stream:
                    print(chunk.content, end="", flush=True)

    Every call is independent: the service holds no per-call state, so one
    instance can be used from many tasks at once.

    Args:
        unprotected_api_key: xAI API key, sent as a bearer token.  Never
            logged.
        base_url: API root.  Defaults to ``https://api.x.ai``.
        transport: HTTP transport.  Defaults to a new :class:`HttpxTransport`
            that :meth:`aclose` shuts down.
        timeout: Seconds to wait for xAI when a call passes no
            ``seconds_to_wait``.
        max_attempts: Total attempts for the connection phase of each call.
            ``1`` (the default) disables retries.
    """

    def __init__(
        self,
        unprotected_api_key: str,
        base_url: str | None = None,
        transport: Transport | None = None,
        timeout: int = 60,
        max_attempts: int = 1,
    ) -> None:
        self._api_key = unprotected_api_key
        self._base_url = base_url or DEFAULT_BASE_URL
        self._owned_transport = HttpxTransport() if transport is None else None
        self._dispatcher = ResponseDispatcher(transport or self._owned_transport)
        self._timeout = timeout
        self._max_attempts = max_attempts

    # ------------------------------------------------------------------
    # Chat Completions
    # ------------------------------------------------------------------

    async def chat_completion(
        self, body: ChatCompletionRequestBody, seconds_to_wait: int | None = None
    ) -> ChatCompletionResponseBody:
        """Request a complete chat completion.

        Raises:
            APIError: xAI rejected the request.
            UnexpectedHTTPStatusError: Non-2xx status without an error body.
            DeserializationError: The response did not match the expected shape.
            TimeoutError: No response within *seconds_to_wait*.
            ConnectionFailedError: xAI could not be reached.
        """
        body = replace(body, stream=False, stream_options=None)
        return await self._send_once(
            "/v1/chat/completions", body, ChatCompletionResponseBody, seconds_to_wait
        )

    async def streaming_chat_completion(
        self, body: ChatCompletionRequestBody, seconds_to_wait: int | None = None
    ) -> ChunkStream[ChatCompletionChunk]:
        """Start a streaming chat completion.

        Returns once the response headers arrive.  The final chunk carries
        token usage.  Decoding errors are raised while iterating.
        """
        body = replace(body, stream=True, stream_options=StreamOptions(include_usage=True))
        return await self._send_streaming(
            "/v1/chat/completions", body, ChatCompletionChunk, seconds_to_wait
        )

    # ------------------------------------------------------------------
    # Responses API
    # ------------------------------------------------------------------

    async def create_response(
        self, body: CreateResponseRequestBody, seconds_to_wait: int | None = None
    ) -> ResponseObject:
        body = replace(body, stream=False)
        return await self._send_once("/v1/responses", body, ResponseObject, seconds_to_wait)

    async def streaming_create_response(
        self, body: CreateResponseRequestBody, seconds_to_wait: int | None = None
    ) -> ChunkStream[ResponseStreamEvent]:
        body = replace(body, stream=True)
        return await self._send_streaming(
            "/v1/responses", body, ResponseStreamEvent, seconds_to_wait
        )

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    async def create_image(
        self, body: CreateImageRequestBody, seconds_to_wait: int | None = None
    ) -> CreateImageResponseBody:
        return await self._send_once(
            "/v1/images/generations", body, CreateImageResponseBody, seconds_to_wait
        )

    async def create_image_edit(
        self, body: CreateImageEditRequestBody, seconds_to_wait: int | None = None
    ) -> CreateImageResponseBody:
        """Edit an image.  xAI takes a JSON body with the image as a data URI."""
        return await self._send_once(
            "/v1/images/edits", body, CreateImageResponseBody, seconds_to_wait
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        if self._owned_transport is not None:
            await self._owned_transport.aclose()

    async def __aenter__(self) -> "XAIDirectService":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _build(self, path: str, body: RequestBody, seconds_to_wait: int) -> OutboundRequest:
        return build_direct_request(
            self._base_url,
            path,
            "POST",
            api_key=self._api_key,
            body=encode_body(body),
            timeout=seconds_to_wait,
        )

    async def _send_once(
        self,
        path: str,
        body: RequestBody,
        response_model: type[M],
        seconds_to_wait: int | None,
    ) -> M:
        async def send(request: OutboundRequest, log: Any) -> M:
            return await self._dispatcher.send_once(request, response_model)

        return await self._call(path, body, seconds_to_wait, stream=False, send=send)

    async def _send_streaming(
        self,
        path: str,
        body: RequestBody,
        chunk_model: type[M],
        seconds_to_wait: int | None,
    ) -> ChunkStream[M]:
        async def send(request: OutboundRequest, log: Any) -> ChunkStream[M]:
            return await self._dispatcher.send_streaming(
                request, chunk_model, sentinel=DONE_SENTINEL, log=log
            )

        # The span covers the request up to the response headers; the stream's
        # own log events cover the rest of its lifetime.
        return await self._call(path, body, seconds_to_wait, stream=True, send=send)

    async def _call(
        self,
        path: str,
        body: RequestBody,
        seconds_to_wait: int | None,
        *,
        stream: bool,
        send: Callable[[OutboundRequest, Any], Awaitable[R]],
    ) -> R:
        request_id = str(uuid.uuid4())
        timeout = seconds_to_wait if seconds_to_wait is not None else self._timeout
        start_time = time.monotonic()
        model = getattr(body, "model", None)

        with _tracer.start_as_current_span("xai.request") as span:
            span.set_attribute("gen_ai.system", "xai")
            span.set_attribute("http.request.method", "POST")
            span.set_attribute("url.path", path)
            span.set_attribute("llm.stream", stream)
            if model is not None:
                span.set_attribute("gen_ai.request.model", model)

            log = _log.bind(request_id=request_id, path=path, model=model, stream=stream)
            log.info("xai_request_start", timeout=timeout)

            try:
                request = self._build(path, body, timeout)
                result = await call_with_retries(
                    lambda: send(request, log), max_attempts=self._max_attempts
                )
            except XAIClientError as exc:
                _record_error(span, exc)
                log.error(
                    "xai_request_error",
                    error_type=type(exc).__name__,
                    error=exc.message,
                    status=getattr(exc, "status", None),
                )
                raise
            finally:
                duration_ms = round((time.monotonic() - start_time) * 1000, 2)
                log.info("xai_request_complete", duration_ms=duration_ms)

            span.set_status(StatusCode.OK)
            return result


def _record_error(span: Span, exc: XAIClientError) -> None:
    span.record_exception(exc)
    span.set_status(StatusCode.ERROR, exc.message)
    status = getattr(exc, "status", None)
    if status is not None:
        span.set_attribute("http.response.status_code", status)


def direct_service(
    unprotected_api_key: str | None = None,
    base_url: str | None = None,
    *,
    settings: Settings | None = None,
    transport: Transport | None = None,
) -> XAIDirectService:
    """Create an :class:`XAIDirectService`, filling gaps from :class:`Settings`.

    Raises:
        XAIClientError: If no API key is given and ``XAI_API_KEY`` is unset.
    """
    settings = settings or Settings()
    if unprotected_api_key is None:
        if settings.api_key is None:
            raise XAIClientError("No API key given and XAI_API_KEY is not set")
        unprotected_api_key = settings.api_key.get_secret_value()
    return XAIDirectService(
        unprotected_api_key,
        base_url=base_url or settings.base_url,
        transport=transport,
        timeout=settings.timeout_seconds,
        max_attempts=settings.max_attempts,
    )
