"""Typed request and response models for the xAI API."""

from xaiclient.models.chat import (
    AssistantMessage,
    ChatCompletionChunk,
    ChatCompletionRequestBody,
    ChatCompletionResponseBody,
    ContentPart,
    FunctionTool,
    ImageDetail,
    ImageURLPart,
    JSONObjectFormat,
    JSONSchemaFormat,
    Message,
    ResponseFormat,
    SpecificFunction,
    StreamOptions,
    SystemMessage,
    TextFormat,
    TextPart,
    Tool,
    ToolChoice,
    ToolChoiceMode,
    ToolMessage,
    UserMessage,
)
from xaiclient.models.images import (
    CreateImageEditRequestBody,
    CreateImageRequestBody,
    CreateImageResponseBody,
    ImageReference,
)
from xaiclient.models.responses import (
    CreateResponseRequestBody,
    FunctionChoice,
    InputImage,
    InputMessage,
    InputText,
    Reasoning,
    ReasoningEffort,
    ResponseObject,
    ResponsesFunctionTool,
    ResponseStreamEvent,
    TextConfiguration,
    Truncation,
    WebSearchTool,
)

__all__ = [
    # Chat
    "AssistantMessage",
    "ChatCompletionChunk",
    "ChatCompletionRequestBody",
    "ChatCompletionResponseBody",
    "ContentPart",
    "FunctionTool",
    "ImageDetail",
    "ImageURLPart",
    "JSONObjectFormat",
    "JSONSchemaFormat",
    "Message",
    "ResponseFormat",
    "SpecificFunction",
    "StreamOptions",
    "SystemMessage",
    "TextFormat",
    "TextPart",
    "Tool",
    "ToolChoice",
    "ToolChoiceMode",
    "ToolMessage",
    "UserMessage",
    # Images
    "CreateImageEditRequestBody",
    "CreateImageRequestBody",
    "CreateImageResponseBody",
    "ImageReference",
    # Responses API
    "CreateResponseRequestBody",
    "FunctionChoice",
    "InputImage",
    "InputMessage",
    "InputText",
    "Reasoning",
    "ReasoningEffort",
    "ResponseObject",
    "ResponseStreamEvent",
    "ResponsesFunctionTool",
    "TextConfiguration",
    "Truncation",
    "WebSearchTool",
]
