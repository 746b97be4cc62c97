"""Request and response types for xAI's Responses API (``/v1/responses``).

See https://docs.x.ai/api/endpoints#create-responses
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import TypeAlias

from pydantic import Field

from xaiclient.models.base import ResponseModel
from xaiclient.models.chat import (
    ImageDetail,
    JSONObjectFormat,
    JSONSchemaFormat,
    TextFormat,
    ToolChoiceMode,
)
from xaiclient.wire import WireValue

# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InputText:
    text: str


@dataclass(frozen=True)
class InputImage:
    """An image input; ``image_url`` may be a data URI."""

    image_url: str
    detail: ImageDetail | None = None


InputContent: TypeAlias = InputText | InputImage


@dataclass(frozen=True)
class InputMessage:
    """One input item.

    Args:
        role: ``"user"``, ``"assistant"``, ``"system"`` or ``"developer"``.
        content: Plain text or a list of input parts.
    """

    role: str
    content: str | tuple[InputContent, ...] | list[InputContent]


Input: TypeAlias = str | tuple[InputMessage, ...] | list[InputMessage]

# ---------------------------------------------------------------------------
# Text configuration, reasoning, truncation
# ---------------------------------------------------------------------------

TextOutputFormat: TypeAlias = TextFormat | JSONObjectFormat | JSONSchemaFormat


@dataclass(frozen=True)
class TextConfiguration:
    """Output format for a text response.

    Unlike the chat API, a JSON schema format is encoded flat:
    ``{"type": "json_schema", "name": ..., "schema": ...}``.
    """

    format: TextOutputFormat | None = None


class ReasoningEffort(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Reasoning:
    effort: ReasoningEffort | None = None


class Truncation(StrEnum):
    AUTO = "auto"
    DISABLED = "disabled"


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WebSearchTool:
    """Lets the model search the web.  xAI's web search takes no parameters."""


@dataclass(frozen=True)
class ResponsesFunctionTool:
    """A function the model can call, encoded flat (no nested ``function`` key).

    ``parameters`` is always sent; ``strict`` defaults to ``True``.
    """

    name: str
    parameters: dict[str, WireValue]
    strict: bool | None = True
    description: str | None = None


ResponsesTool: TypeAlias = WebSearchTool | ResponsesFunctionTool


@dataclass(frozen=True)
class FunctionChoice:
    """Forces the model to call the named function."""

    name: str


ResponsesToolChoice: TypeAlias = ToolChoiceMode | FunctionChoice

# ---------------------------------------------------------------------------
# Request body
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CreateResponseRequestBody:
    """Parameters for one Responses API call.

    Args:
        model: Model ID, e.g. ``"grok-3-mini-fast"``.
        input: Text or input messages.
        instructions: System (or developer) message placed first in context.
        previous_response_id: Continue the conversation of an earlier response.
        reasoning: Reasoning options for reasoning models.
        store: Whether the provider stores the response for later retrieval.
        stream: Whether to stream events.  Overwritten by the service.
        temperature: Sampling temperature between 0 and 2.
        text: Output format configuration.
        tool_choice: Which tool, if any, the model must call.
        tools: Tools the model may call.
        top_p: Nucleus sampling mass.
        truncation: Context truncation strategy.
    """

    model: str
    input: Input | None = None
    instructions: str | None = None
    previous_response_id: str | None = None
    reasoning: Reasoning | None = None
    store: bool | None = None
    stream: bool | None = None
    temperature: float | None = None
    text: TextConfiguration | None = None
    tool_choice: ResponsesToolChoice | None = None
    tools: tuple[ResponsesTool, ...] | list[ResponsesTool] | None = None
    top_p: float | None = None
    truncation: Truncation | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class OutputContent(ResponseModel):
    type: str
    text: str | None = None


class OutputItem(ResponseModel):
    type: str
    id: str | None = None
    role: str | None = None
    status: str | None = None
    content: list[OutputContent] | None = None


class ResponseUsage(ResponseModel):
    input_tokens: int | None = None
    output_tokens: int | None = None
    total_tokens: int | None = None


class ResponseObject(ResponseModel):
    """Result of a Responses API call."""

    id: str
    object: str | None = None
    created_at: int | None = None
    model: str | None = None
    status: str | None = None
    output: list[OutputItem] = Field(default_factory=list)
    usage: ResponseUsage | None = None

    @property
    def output_text(self) -> str:
        """Concatenated ``output_text`` parts of every message in ``output``."""
        return "".join(
            part.text or ""
            for item in self.output
            if item.type == "message"
            for part in item.content or ()
            if part.type == "output_text"
        )


class ResponseStreamEvent(ResponseModel):
    """One server-sent event of a streaming Responses API call.

    ``type`` names the event, e.g. ``"response.output_text.delta"`` (carrying
    ``delta``) or ``"response.completed"`` (carrying ``response``).
    """

    type: str
    sequence_number: int | None = None
    item_id: str | None = None
    output_index: int | None = None
    content_index: int | None = None
    delta: str | None = None
    response: ResponseObject | None = None
