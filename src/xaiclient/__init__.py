"""Async client for the xAI API.

Everything an application needs is re-exported here; the submodule layout
is not part of the public API.

Example::

    from xaiclient import (
        ChatCompletionRequestBody,
        SystemMessage,
        UserMessage,
        direct_service,
    )

    async with direct_service() as service:  # reads XAI_API_KEY
        body = ChatCompletionRequestBody(
            model="grok-3-mini",
            messages=[SystemMessage("be terse"), UserMessage("hi")],
        )
        async with await service.streaming_chat_completion(body) as stream:
            async for chunk in stream:
                print(chunk.content, end="")
"""

from xaiclient.config import Settings
from xaiclient.errors import (
    APIError,
    ConnectionFailedError,
    DecodeError,
    DeserializationError,
    EncodingError,
    InvalidURLError,
    MalformedValue,
    TimeoutError,
    UnexpectedHTTPStatusError,
    XAIClientError,
)
from xaiclient.http.dispatcher import ResponseDispatcher
from xaiclient.http.request import OutboundRequest, build_direct_request, build_request
from xaiclient.http.transport import ByteStream, HttpxTransport, Transport, TransportResponse
from xaiclient.models import *  # noqa: F403
from xaiclient.models import __all__ as _models_all
from xaiclient.service import XAIDirectService, XAIService, direct_service
from xaiclient.streaming import ChunkStream

__all__ = [
    # Service
    "XAIService",
    "XAIDirectService",
    "direct_service",
    "Settings",
    # Pipeline
    "ByteStream",
    "ChunkStream",
    "HttpxTransport",
    "OutboundRequest",
    "ResponseDispatcher",
    "Transport",
    "TransportResponse",
    "build_direct_request",
    "build_request",
    # Errors
    "XAIClientError",
    "APIError",
    "ConnectionFailedError",
    "DecodeError",
    "DeserializationError",
    "EncodingError",
    "InvalidURLError",
    "MalformedValue",
    "TimeoutError",
    "UnexpectedHTTPStatusError",
    # Models
    *_models_all,
]
