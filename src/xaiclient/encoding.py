"""Wire encoding for request bodies and their tagged-union fields.

Each ``encode_*`` function maps one closed union onto the JSON shape xAI
expects, via a ``match`` over the alternative's type:

* alternatives that carry data become objects with a ``type`` or ``role``
  discriminator;
* payload-less choices (:class:`~xaiclient.models.chat.ToolChoiceMode`)
  become bare strings;
* optional fields that are ``None`` are left out of the object.

Encoding is pure: :func:`encode_body` returns identical bytes every time it
is given an equal body.
"""

from typing import Any

from xaiclient.errors import EncodingError, MalformedValue
from xaiclient.models.chat import (
    AssistantMessage,
    ChatCompletionRequestBody,
    ContentPart,
    FunctionTool,
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
from xaiclient.models.images import CreateImageEditRequestBody, CreateImageRequestBody
from xaiclient.models.responses import (
    CreateResponseRequestBody,
    FunctionChoice,
    Input,
    InputContent,
    InputImage,
    InputMessage,
    InputText,
    Reasoning,
    ResponsesFunctionTool,
    ResponsesTool,
    ResponsesToolChoice,
    TextConfiguration,
    TextOutputFormat,
    WebSearchTool,
)
from xaiclient.wire import WireValue, dumps, from_native

RequestBody = (
    ChatCompletionRequestBody
    | CreateResponseRequestBody
    | CreateImageRequestBody
    | CreateImageEditRequestBody
)


def _unsupported(kind: str, value: Any) -> EncodingError:
    return EncodingError(f"No wire encoding for {kind} {type(value).__name__}: {value!r}")


def _compact(**fields: WireValue) -> dict[str, WireValue]:
    """Build a JSON object, dropping fields whose value is ``None``."""
    return {key: value for key, value in fields.items() if value is not None}


def _schema(value: Any, field: str) -> WireValue:
    if value is None:
        return None
    try:
        return from_native(value)
    except MalformedValue as exc:
        raise EncodingError(
            f"{field} is not valid JSON: {exc.message}", original_error=exc
        ) from exc


def _str(value: Any) -> str | None:
    return None if value is None else str(value)


# ---------------------------------------------------------------------------
# Chat Completions
# ---------------------------------------------------------------------------


def encode_content_part(part: ContentPart) -> WireValue:
    match part:
        case TextPart(text=text):
            return {"type": "text", "text": text}
        case ImageURLPart(url=url, detail=detail):
            return {"type": "image_url", "image_url": _compact(url=url, detail=_str(detail))}
    raise _unsupported("content part", part)


def encode_message(message: Message) -> WireValue:
    match message:
        case SystemMessage(content=content):
            return {"role": "system", "content": content}
        case UserMessage(content=str() as text):
            return {"role": "user", "content": text}
        case UserMessage(content=parts):
            return {"role": "user", "content": [encode_content_part(p) for p in parts]}
        case AssistantMessage(content=content):
            return {"role": "assistant", "content": content}
        case ToolMessage(content=content, tool_call_id=tool_call_id):
            return {"role": "tool", "content": content, "tool_call_id": tool_call_id}
    raise _unsupported("message", message)


def encode_response_format(response_format: ResponseFormat) -> WireValue:
    match response_format:
        case TextFormat():
            return {"type": "text"}
        case JSONObjectFormat():
            return {"type": "json_object"}
        case JSONSchemaFormat(name=name, description=description, schema=schema, strict=strict):
            return {
                "type": "json_schema",
                "json_schema": _compact(
                    name=name,
                    description=description,
                    schema=_schema(schema, "json_schema.schema"),
                    strict=strict,
                ),
            }
    raise _unsupported("response format", response_format)


def encode_tool(tool: Tool) -> WireValue:
    match tool:
        case FunctionTool(name=name, description=description, parameters=parameters, strict=strict):
            return {
                "type": "function",
                "function": _compact(
                    name=name,
                    description=description,
                    parameters=_schema(parameters, "function.parameters"),
                    strict=strict,
                ),
            }
    raise _unsupported("tool", tool)


def encode_tool_choice(choice: ToolChoice) -> WireValue:
    """Encode a tool choice as a bare string (modes) or an object (specific function)."""
    match choice:
        case ToolChoiceMode():
            return choice.value
        case SpecificFunction(name=name):
            return {"type": "function", "function": {"name": name}}
    raise _unsupported("tool choice", choice)


def _encode_stream_options(options: StreamOptions | None) -> WireValue:
    if options is None:
        return None
    return {"include_usage": options.include_usage}


def encode_chat_completion_body(body: ChatCompletionRequestBody) -> WireValue:
    return _compact(
        model=body.model,
        messages=[encode_message(m) for m in body.messages],
        frequency_penalty=body.frequency_penalty,
        max_tokens=body.max_tokens,
        n=body.n,
        presence_penalty=body.presence_penalty,
        response_format=(
            encode_response_format(body.response_format)
            if body.response_format is not None
            else None
        ),
        seed=body.seed,
        stop=list(body.stop) if body.stop is not None else None,
        stream=body.stream,
        stream_options=_encode_stream_options(body.stream_options),
        temperature=body.temperature,
        tools=[encode_tool(t) for t in body.tools] if body.tools is not None else None,
        tool_choice=encode_tool_choice(body.tool_choice) if body.tool_choice is not None else None,
        top_p=body.top_p,
    )


# ---------------------------------------------------------------------------
# Responses API
# ---------------------------------------------------------------------------


def encode_input_content(part: InputContent) -> WireValue:
    match part:
        case InputText(text=text):
            return {"type": "input_text", "text": text}
        case InputImage(image_url=image_url, detail=detail):
            return _compact(type="input_image", image_url=image_url, detail=_str(detail))
    raise _unsupported("input content", part)


def encode_input(value: Input) -> WireValue:
    """Encode a Responses API input: a bare string or a list of message objects."""
    if isinstance(value, str):
        return value
    items: list[WireValue] = []
    for item in value:
        match item:
            case InputMessage(role=role, content=str() as text):
                items.append({"role": role, "content": text})
            case InputMessage(role=role, content=parts):
                items.append({"role": role, "content": [encode_input_content(p) for p in parts]})
            case _:
                raise _unsupported("input item", item)
    return items


def encode_text_format(text_format: TextOutputFormat) -> WireValue:
    match text_format:
        case TextFormat():
            return {"type": "text"}
        case JSONObjectFormat():
            return {"type": "json_object"}
        case JSONSchemaFormat(name=name, description=description, schema=schema, strict=strict):
            return _compact(
                type="json_schema",
                name=name,
                description=description,
                schema=_schema(schema, "format.schema"),
                strict=strict,
            )
    raise _unsupported("text format", text_format)


def _encode_text_configuration(text: TextConfiguration | None) -> WireValue:
    if text is None:
        return None
    return _compact(format=encode_text_format(text.format) if text.format is not None else None)


def _encode_reasoning(reasoning: Reasoning | None) -> WireValue:
    if reasoning is None:
        return None
    return _compact(effort=_str(reasoning.effort))


def encode_responses_tool(tool: ResponsesTool) -> WireValue:
    match tool:
        case WebSearchTool():
            return {"type": "web_search"}
        case ResponsesFunctionTool(
            name=name, parameters=parameters, strict=strict, description=description
        ):
            return _compact(
                type="function",
                name=name,
                description=description,
                parameters=_schema(parameters, "function.parameters"),
                strict=strict,
            )
    raise _unsupported("tool", tool)


def encode_responses_tool_choice(choice: ResponsesToolChoice) -> WireValue:
    match choice:
        case ToolChoiceMode():
            return choice.value
        case FunctionChoice(name=name):
            return {"type": "function", "name": name}
    raise _unsupported("tool choice", choice)


def encode_create_response_body(body: CreateResponseRequestBody) -> WireValue:
    return _compact(
        model=body.model,
        input=encode_input(body.input) if body.input is not None else None,
        instructions=body.instructions,
        previous_response_id=body.previous_response_id,
        reasoning=_encode_reasoning(body.reasoning),
        store=body.store,
        stream=body.stream,
        temperature=body.temperature,
        text=_encode_text_configuration(body.text),
        tool_choice=(
            encode_responses_tool_choice(body.tool_choice) if body.tool_choice is not None else None
        ),
        tools=[encode_responses_tool(t) for t in body.tools] if body.tools is not None else None,
        top_p=body.top_p,
        truncation=_str(body.truncation),
    )


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------


def encode_create_image_body(body: CreateImageRequestBody) -> WireValue:
    return _compact(
        model=body.model,
        prompt=body.prompt,
        n=body.n,
        response_format=body.response_format,
    )


def encode_create_image_edit_body(body: CreateImageEditRequestBody) -> WireValue:
    return _compact(
        model=body.model,
        prompt=body.prompt,
        image={"url": body.image.url, "type": body.image.type},
        n=body.n,
        response_format=body.response_format,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def encode_body(body: RequestBody) -> bytes:
    """Serialize a request body to the JSON bytes sent on the wire.

    Raises:
        EncodingError: If *body*, or any tagged field inside it, is not one of
            the supported alternatives, or a field holds a value with no JSON
            form (e.g. a NaN temperature).
    """
    match body:
        case ChatCompletionRequestBody():
            value = encode_chat_completion_body(body)
        case CreateResponseRequestBody():
            value = encode_create_response_body(body)
        case CreateImageRequestBody():
            value = encode_create_image_body(body)
        case CreateImageEditRequestBody():
            value = encode_create_image_edit_body(body)
        case _:
            raise _unsupported("request body", body)
    try:
        return dumps(value)
    except (TypeError, ValueError) as exc:
        raise EncodingError(
            f"{type(body).__name__} is not valid JSON: {exc}", original_error=exc
        ) from exc
