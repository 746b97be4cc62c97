"""Tests for the schema-free JSON value model (wire.py)."""

import math
from collections import OrderedDict

import pytest

from xaiclient.errors import MalformedValue
from xaiclient.wire import dumps, from_native, loads, to_native


class TestFromNative:
    def test_scalars_pass_through(self) -> None:
        assert from_native(None) is None
        assert from_native(True) is True
        assert from_native(3) == 3
        assert from_native(2.5) == 2.5
        assert from_native("x") == "x"

    def test_nested_structures_are_copied(self) -> None:
        source = {"a": [1, {"b": "c"}]}
        converted = from_native(source)
        assert converted == source
        source["a"].append(2)
        assert converted == {"a": [1, {"b": "c"}]}

    def test_tuple_becomes_list(self) -> None:
        assert from_native((1, 2)) == [1, 2]

    def test_any_mapping_accepted(self) -> None:
        assert from_native(OrderedDict(a=1)) == {"a": 1}

    def test_empty_containers_differ_from_null(self) -> None:
        assert from_native([]) == []
        assert from_native({}) == {}
        assert dumps(from_native([])) == b"[]"
        assert dumps(from_native({})) == b"{}"
        assert dumps(from_native(None)) == b"null"

    def test_set_raises_with_path(self) -> None:
        """The error message points at the offending node."""
        with pytest.raises(MalformedValue, match=r"\$\.a\[1\]"):
            from_native({"a": [1, {2, 3}]})

    def test_non_string_key_raises(self) -> None:
        with pytest.raises(MalformedValue, match="keys must be strings") as exc_info:
            from_native({1: "x"})
        assert exc_info.value.fragment == "1"

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_float_raises(self, value: float) -> None:
        with pytest.raises(MalformedValue, match="non-finite"):
            from_native({"x": value})

    def test_long_fragment_is_truncated(self) -> None:
        with pytest.raises(MalformedValue) as exc_info:
            from_native(object.__new__(type("Blob" * 40, (), {})))
        assert len(exc_info.value.fragment) <= 80


class TestToNative:
    def test_returns_independent_copy(self) -> None:
        value = {"a": [1, 2]}
        copy = to_native(value)
        copy["a"].append(3)
        assert value == {"a": [1, 2]}


class TestDumps:
    def test_keys_sorted_and_compact(self) -> None:
        assert dumps({"b": 1, "a": [1, 2]}) == b'{"a":[1,2],"b":1}'

    def test_equal_values_identical_bytes(self) -> None:
        first = {"z": {"y": 1, "x": 2}, "a": None}
        second = {"a": None, "z": {"x": 2, "y": 1}}
        assert dumps(first) == dumps(second)

    def test_non_ascii_is_utf8(self) -> None:
        assert dumps("héllo") == '"héllo"'.encode()


class TestLoads:
    def test_parses_document(self) -> None:
        assert loads(b'{"a": [1, null, true]}') == {"a": [1, None, True]}

    def test_invalid_json_raises(self) -> None:
        with pytest.raises(MalformedValue, match="Invalid JSON"):
            loads("{not json")

    def test_nan_literal_rejected(self) -> None:
        with pytest.raises(MalformedValue):
            loads('{"a": NaN}')

    def test_invalid_utf8_raises(self) -> None:
        with pytest.raises(MalformedValue):
            loads(b'"\xff"')
