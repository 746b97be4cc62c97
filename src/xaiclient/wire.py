"""Schema-free JSON values.

Tool parameters and JSON-schema blobs have a shape chosen by the caller at
runtime, so they travel as :data:`WireValue` trees rather than typed models.
A WireValue is one of ``None``, ``bool``, ``int``, ``float``, ``str``, a list
of WireValues, or a ``str``-keyed dict of WireValues.

Example::

    schema = from_native({"type": "object", "properties": {"city": {"type": "string"}}})
    dumps(schema)  # b'{"properties":{"city":{"type":"string"}},"type":"object"}'
"""

import json
import math
from collections.abc import Mapping
from typing import Any, TypeAlias

from pydantic import JsonValue

from xaiclient.errors import MalformedValue

WireValue: TypeAlias = JsonValue

_FRAGMENT_LIMIT = 80


def _fragment(value: Any) -> str:
    text = repr(value)
    if len(text) > _FRAGMENT_LIMIT:
        return text[: _FRAGMENT_LIMIT - 3] + "..."
    return text


def from_native(value: Any) -> WireValue:
    """Return a WireValue copy of *value*.

    Tuples are accepted as lists and any :class:`~collections.abc.Mapping`
    with string keys as a dict.

    Raises:
        MalformedValue: If *value* (or anything nested in it) has no JSON
            representation, e.g. a set, a non-string key or a NaN.
    """
    return _convert(value, "$")


def _convert(value: Any, path: str) -> WireValue:
    if value is None or isinstance(value, bool | str):
        return value
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise MalformedValue(f"{path}: non-finite number has no JSON form", _fragment(value))
        return value
    if isinstance(value, list | tuple):
        return [_convert(item, f"{path}[{i}]") for i, item in enumerate(value)]
    if isinstance(value, Mapping):
        converted: dict[str, WireValue] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise MalformedValue(f"{path}: object keys must be strings", _fragment(key))
            converted[key] = _convert(item, f"{path}.{key}")
        return converted
    raise MalformedValue(
        f"{path}: {type(value).__name__} has no JSON representation", _fragment(value)
    )


def to_native(value: WireValue) -> Any:
    """Return a deep copy of *value* built from plain dicts, lists and scalars."""
    if isinstance(value, list):
        return [to_native(item) for item in value]
    if isinstance(value, dict):
        return {key: to_native(item) for key, item in value.items()}
    return value


def dumps(value: WireValue) -> bytes:
    """Serialize *value* to compact UTF-8 JSON.

    Keys are sorted so equal values always produce identical bytes.
    """
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def loads(data: str | bytes) -> WireValue:
    """Parse external JSON text into a WireValue.

    Raises:
        MalformedValue: If *data* is not a valid JSON document.
    """
    try:
        return json.loads(data, parse_constant=_reject_constant)
    except (ValueError, UnicodeDecodeError) as exc:
        raise MalformedValue(f"Invalid JSON: {exc}", _fragment(data), original_error=exc) from exc
