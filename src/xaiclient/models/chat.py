"""Request and response types for xAI's Chat Completions API (``/v1/chat/completions``).

Request types are frozen dataclasses.  Fields whose wire shape depends on the
alternative chosen (message role, content part, tool, tool choice, response
format) are closed unions of small dataclasses; :mod:`xaiclient.encoding`
turns them into JSON.

Response types are pydantic models that ignore fields they do not know about,
so new provider fields never break parsing.

See https://docs.x.ai/api/endpoints#chat-completions
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import TypeAlias

from pydantic import Field

from xaiclient.models.base import ResponseModel
from xaiclient.wire import WireValue

# ---------------------------------------------------------------------------
# Content parts
# ---------------------------------------------------------------------------


class ImageDetail(StrEnum):
    AUTO = "auto"
    LOW = "low"
    HIGH = "high"


@dataclass(frozen=True)
class TextPart:
    """A text segment of a multimodal user message."""

    text: str


@dataclass(frozen=True)
class ImageURLPart:
    """An image segment of a multimodal user message.

    Args:
        url: Image URL, typically a ``data:image/jpeg;base64,...`` URI.
        detail: Resolution hint.  Omitted from the wire when ``None``.
    """

    url: str
    detail: ImageDetail | None = None


ContentPart: TypeAlias = TextPart | ImageURLPart

# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SystemMessage:
    content: str


@dataclass(frozen=True)
class UserMessage:
    """A user turn: plain text or a list of text and image parts."""

    content: str | tuple[ContentPart, ...] | list[ContentPart]


@dataclass(frozen=True)
class AssistantMessage:
    content: str


@dataclass(frozen=True)
class ToolMessage:
    """The result of a tool call, matched to the call by ``tool_call_id``."""

    content: str
    tool_call_id: str


Message: TypeAlias = SystemMessage | UserMessage | AssistantMessage | ToolMessage

# ---------------------------------------------------------------------------
# Response format
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextFormat:
    """Instructs the model to produce plain text."""


@dataclass(frozen=True)
class JSONObjectFormat:
    """Enables JSON mode."""


@dataclass(frozen=True)
class JSONSchemaFormat:
    """Enables structured outputs constrained by a JSON schema.

    Args:
        name: Schema name.
        description: What the schema describes.
        schema: The JSON schema itself, as a WireValue mapping.
        strict: Whether the provider must follow the schema exactly.
    """

    name: str
    description: str | None = None
    schema: dict[str, WireValue] | None = None
    strict: bool | None = None


ResponseFormat: TypeAlias = TextFormat | JSONObjectFormat | JSONSchemaFormat

# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FunctionTool:
    """A function the model can call.

    Args:
        name: Function name.
        description: What the function does.
        parameters: JSON schema of the function arguments.
        strict: Whether arguments must follow ``parameters`` exactly.
    """

    name: str
    description: str | None = None
    parameters: dict[str, WireValue] | None = None
    strict: bool | None = None


Tool: TypeAlias = FunctionTool


class ToolChoiceMode(StrEnum):
    """Tool choices that carry no payload; each encodes as a bare string."""

    NONE = "none"
    AUTO = "auto"
    REQUIRED = "required"


@dataclass(frozen=True)
class SpecificFunction:
    """Forces the model to call the named function."""

    name: str


ToolChoice: TypeAlias = ToolChoiceMode | SpecificFunction

# ---------------------------------------------------------------------------
# Request body
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StreamOptions:
    include_usage: bool


@dataclass(frozen=True)
class ChatCompletionRequestBody:
    """Parameters for one chat completion call.

    ``stream`` and ``stream_options`` are overwritten by the service: the
    one-shot call forces ``stream=False`` and the streaming call forces
    ``stream=True`` with usage reporting enabled.

    Args:
        model: Model ID, e.g. ``"grok-3-mini"``.
        messages: Conversation so far, oldest first.
        frequency_penalty: Number between -2.0 and 2.0.
        max_tokens: Maximum tokens to generate.
        n: Number of choices to generate.
        presence_penalty: Number between -2.0 and 2.0.
        response_format: Output format constraint.
        seed: Best-effort deterministic sampling seed.
        stop: Up to 4 stop sequences.
        stream: Whether to stream partial deltas.
        stream_options: Streaming options.
        temperature: Sampling temperature between 0 and 2.
        tools: Tools the model may call.
        tool_choice: Which tool, if any, the model must call.
        top_p: Nucleus sampling mass.
    """

    model: str
    messages: tuple[Message, ...] | list[Message]
    frequency_penalty: float | None = None
    max_tokens: int | None = None
    n: int | None = None
    presence_penalty: float | None = None
    response_format: ResponseFormat | None = None
    seed: int | None = None
    stop: tuple[str, ...] | list[str] | None = None
    stream: bool | None = None
    stream_options: StreamOptions | None = None
    temperature: float | None = None
    tools: tuple[Tool, ...] | list[Tool] | None = None
    tool_choice: ToolChoice | None = None
    top_p: float | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class FunctionCall(ResponseModel):
    name: str | None = None
    arguments: str | None = None


class ToolCall(ResponseModel):
    id: str | None = None
    type: str | None = None
    index: int | None = None
    function: FunctionCall | None = None


class Usage(ResponseModel):
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


class ChatMessage(ResponseModel):
    role: str | None = None
    content: str | None = None
    reasoning_content: str | None = None
    tool_calls: list[ToolCall] | None = None


class ChatChoice(ResponseModel):
    index: int = 0
    message: ChatMessage
    finish_reason: str | None = None


class ChatCompletionResponseBody(ResponseModel):
    """Full result of a non-streaming chat completion."""

    id: str | None = None
    object: str | None = None
    created: int | None = None
    model: str | None = None
    choices: list[ChatChoice]
    usage: Usage | None = None
    system_fingerprint: str | None = None


class ChunkDelta(ResponseModel):
    role: str | None = None
    content: str | None = None
    reasoning_content: str | None = None
    tool_calls: list[ToolCall] | None = None


class ChunkChoice(ResponseModel):
    index: int = 0
    delta: ChunkDelta
    finish_reason: str | None = None


class ChatCompletionChunk(ResponseModel):
    """One incremental delta of a streaming chat completion.

    The final chunk of a stream started with usage reporting carries
    ``usage`` and an empty ``choices`` list.
    """

    id: str | None = None
    object: str | None = None
    created: int | None = None
    model: str | None = None
    choices: list[ChunkChoice] = Field(default_factory=list)
    usage: Usage | None = None
    system_fingerprint: str | None = None

    @property
    def content(self) -> str:
        """Concatenated text content of every choice in this chunk."""
        return "".join(choice.delta.content or "" for choice in self.choices)
