"""Server-sent event decoding.

A streaming response body arrives as arbitrary byte chunks.  Decoding happens
in two layers:

* :class:`FrameReassembler` buffers bytes and cuts them into frames at the
  event delimiter.  The delimiter is searched for in bytes, so it makes no
  difference where the network split the body, even inside a multi-byte
  UTF-8 sequence.
* :func:`decode_stream` pulls bytes only when its consumer asks for the next
  chunk, parses each frame's payload into a typed chunk and stops at the
  sentinel, at the end of the body, or at the first frame that fails to
  parse (raising :class:`~xaiclient.errors.DecodeError`).

Whichever way decoding finishes the byte stream is closed exactly once,
including when the consumer calls :meth:`ChunkStream.aclose` before pulling
anything.

Example::

    async with ChunkStream(body, ChatCompletionChunk.model_validate_json) as stream:
        async for chunk in stream:
            print(chunk.content, end="")
"""

import asyncio
import re
from collections.abc import AsyncGenerator, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

import structlog

from xaiclient.errors import DecodeError, MalformedValue, XAIClientError
from xaiclient.http.transport import ByteStream

_log = structlog.get_logger(__name__)

T = TypeVar("T")

DONE_SENTINEL = "[DONE]"
DEFAULT_DELIMITERS: tuple[bytes, ...] = (b"\n\n", b"\r\n\r\n")

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class FrameKind(Enum):
    PAYLOAD = "payload"
    SENTINEL = "sentinel"
    EMPTY = "empty"


@dataclass(frozen=True)
class StreamFrame:
    """One delimiter-bounded event.

    Attributes:
        kind: Whether the frame carries a payload, is the sentinel, or is a
            keep-alive without data.
        text: The payload (the frame's ``data:`` lines joined by newlines).
        raw: The frame exactly as received, without its delimiter.
    """

    kind: FrameKind
    text: str = ""
    raw: str = ""


def parse_frame(raw: str, sentinel: str | None = DONE_SENTINEL) -> StreamFrame:
    """Classify one frame's text.

    Only ``data:`` fields contribute to the payload; ``event:``, ``id:``,
    ``retry:``, unknown fields and ``:`` comments are ignored.
    """
    data_lines: list[str] = []
    for line in _LINE_BREAK.split(raw):
        if not line or line.startswith(":"):
            continue
        name, _, value = line.partition(":")
        if name != "data":
            continue
        data_lines.append(value[1:] if value.startswith(" ") else value)

    payload = "\n".join(data_lines)
    if not payload.strip():
        return StreamFrame(FrameKind.EMPTY, raw=raw)
    if sentinel is not None and payload.strip() == sentinel:
        return StreamFrame(FrameKind.SENTINEL, payload, raw)
    return StreamFrame(FrameKind.PAYLOAD, payload, raw)


class FrameReassembler:
    """Accumulates body bytes and extracts complete frames.

    Args:
        sentinel: Payload that marks the end of the stream, or ``None`` when
            the provider ends streams by closing the body.
        delimiters: Byte sequences that end a frame.  The earliest match in
            the buffer wins.
    """

    def __init__(
        self,
        sentinel: str | None = DONE_SENTINEL,
        delimiters: tuple[bytes, ...] = DEFAULT_DELIMITERS,
    ) -> None:
        self._sentinel = sentinel
        self._delimiters = delimiters
        self._overlap = max(len(d) for d in delimiters) - 1
        self._buffer = bytearray()
        self._scan_from = 0

    @property
    def pending(self) -> bytes:
        """Bytes received that do not yet form a complete frame."""
        return bytes(self._buffer)

    def feed(self, data: bytes) -> None:
        self._buffer.extend(data)

    def next_frame(self) -> StreamFrame | None:
        """Return the next complete frame, or ``None`` if more bytes are needed.

        Raises:
            DecodeError: If the frame is not valid UTF-8.
        """
        end, delimiter = self._find_delimiter()
        if end < 0:
            self._scan_from = max(0, len(self._buffer) - self._overlap)
            return None

        raw = bytes(self._buffer[:end])
        del self._buffer[: end + len(delimiter)]
        self._scan_from = 0

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(raw.decode("utf-8", errors="replace"), exc) from exc
        return parse_frame(text, self._sentinel)

    def _find_delimiter(self) -> tuple[int, bytes]:
        best, best_delimiter = -1, b""
        for delimiter in self._delimiters:
            index = self._buffer.find(delimiter, self._scan_from)
            if index >= 0 and (best < 0 or index < best):
                best, best_delimiter = index, delimiter
        return best, best_delimiter


def _parse_chunk(frame: StreamFrame, parse: Callable[[str], T]) -> T:
    try:
        return parse(frame.text)
    except (ValueError, TypeError, MalformedValue) as exc:
        # pydantic.ValidationError and json.JSONDecodeError are both ValueErrors.
        raise DecodeError(frame.raw, exc) from exc


async def decode_stream(
    body: ByteStream,
    parse: Callable[[str], T],
    *,
    sentinel: str | None = DONE_SENTINEL,
    delimiters: tuple[bytes, ...] = DEFAULT_DELIMITERS,
    log: Any = None,
) -> AsyncGenerator[T, None]:
    """Decode a server-sent event body into typed chunks.

    Args:
        body: The response byte stream.  Owned by the generator from now on.
        parse: Turns one frame payload into a chunk, e.g.
            ``ChatCompletionChunk.model_validate_json``.
        sentinel: Payload that ends the stream without producing a chunk.
        delimiters: Byte sequences that end a frame.
        log: Bound structlog logger carrying the caller's request context.

    Yields:
        One chunk per payload frame, in arrival order.

    Raises:
        DecodeError: A frame could not be parsed.  No further bytes are read.
        TimeoutError: The transport timed out waiting for bytes.
        ConnectionFailedError: The connection dropped mid-stream.
    """
    log = log if log is not None else _log
    reassembler = FrameReassembler(sentinel=sentinel, delimiters=delimiters)
    chunks = body.__aiter__()
    produced = 0
    ended = "closed"
    try:
        async for data in chunks:
            reassembler.feed(data)
            while (frame := reassembler.next_frame()) is not None:
                if frame.kind is FrameKind.SENTINEL:
                    ended = "sentinel"
                    return
                if frame.kind is FrameKind.EMPTY:
                    continue
                chunk = _parse_chunk(frame, parse)
                produced += 1
                yield chunk

        ended = "eof"
        if reassembler.pending:
            log.debug("xai_stream_frame_discarded", size=len(reassembler.pending))
    except DecodeError as exc:
        ended = "error"
        log.error("xai_stream_decode_error", error=exc.message, chunks=produced)
        raise
    except XAIClientError:
        ended = "error"
        raise
    finally:
        close_chunks = getattr(chunks, "aclose", None)
        if close_chunks is not None:
            await close_chunks()
        await body.aclose()
        log.info("xai_stream_complete", chunks=produced, ended=ended)


class ChunkStream(Generic[T]):
    """A lazy, single-pass, cancellable sequence of chunks.

    Iterate it with ``async for``; a clean end of stream ends the loop, any
    failure is raised from it.  Call :meth:`aclose` (or use ``async with``) to
    stop early: the byte stream is released even if no chunk was ever pulled.

    Example::

        async with await service.streaming_chat_completion(body) as stream:
            async for chunk in stream:
                print(chunk.content, end="")
    """

    def __init__(
        self,
        body: ByteStream,
        parse: Callable[[str], T],
        *,
        sentinel: str | None = DONE_SENTINEL,
        delimiters: tuple[bytes, ...] = DEFAULT_DELIMITERS,
        log: Any = None,
    ) -> None:
        self._started = False
        self._closed = False
        self._body = body
        self._chunks = decode_stream(
            body, parse, sentinel=sentinel, delimiters=delimiters, log=log
        )

    def __aiter__(self) -> "ChunkStream[T]":
        return self

    async def __anext__(self) -> T:
        if self._closed:
            raise StopAsyncIteration
        self._started = True
        return await self._chunks.__anext__()

    async def aclose(self) -> None:
        """Stop decoding and release the byte stream.  Safe to call repeatedly."""
        if self._closed:
            return
        self._closed = True
        await self._chunks.aclose()
        if not self._started:
            # A generator that never ran has no cleanup of its own.
            await self._body.aclose()

    def __del__(self) -> None:
        # A started generator closes the body when asyncio finalizes it; an
        # unstarted one never will, so the close is scheduled here.
        if self._started or self._closed:
            return
        self._closed = True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _log.warning("xai_stream_dropped_without_loop")
            return
        loop.create_task(self._body.aclose())

    async def __aenter__(self) -> "ChunkStream[T]":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
