from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import pytest
from pydantic import BaseModel

from common.codec import decode, encode, format_path, from_json_text, to_json_text
from common.errors import DecodeError, EncodeError


class Item(BaseModel):
    name: str
    qty: int


class Order(BaseModel):
    id: int
    items: List[Item]
    note: Optional[str] = None


@dataclass
class Point:
    x: int
    y: int


@pytest.mark.parametrize(
    "value, tp",
    [
        ({"count": 3}, Dict[str, int]),
        ([1, 2, 3], List[int]),
        ("hello", str),
        (Point(1, 2), Point),
        (Order(id=7, items=[Item(name="a", qty=1)], note="n"), Order),
    ],
)
def test_roundtrip_compact_and_pretty(value, tp):
    assert decode(encode(value), tp) == value
    assert decode(encode(value, pretty=True), tp) == value


def test_compact_output_has_no_whitespace():
    assert encode({"count": 3}) == b'{"count":3}'


def test_pretty_output_is_indented():
    out = encode({"count": 3}, pretty=True)
    assert out == b'{\n  "count": 3\n}'


def test_bytes_identity():
    raw = b"\x00\xffnot json"
    assert encode(raw) == raw
    assert encode(bytearray(raw)) == raw
    assert decode(raw, bytes) == raw


def test_encode_unserializable_raises():
    with pytest.raises(EncodeError):
        encode({"x": object()})


def test_decode_malformed():
    with pytest.raises(DecodeError) as ei:
        decode(b'{"count": ', Dict[str, int])
    assert ei.value.kind == DecodeError.MALFORMED


def test_decode_missing_field_reports_path():
    data = b'{"id": 1, "items": [{"name": "a", "qty": 1}, {"name": "b"}]}'
    with pytest.raises(DecodeError) as ei:
        decode(data, Order)
    assert ei.value.kind == DecodeError.MISSING_FIELD
    assert ei.value.path == "items[1].qty"


def test_decode_type_mismatch_reports_path():
    data = b'{"id": 1, "items": [{"name": "a", "qty": "lots"}]}'
    with pytest.raises(DecodeError) as ei:
        decode(data, Order)
    assert ei.value.kind == DecodeError.TYPE_MISMATCH
    assert ei.value.path == "items[0].qty"
    assert "items[0].qty" in str(ei.value)


def test_decode_unreadable_bytes():
    with pytest.raises(DecodeError) as ei:
        decode(b"\xff\xfe{}", Dict[str, int])
    assert ei.value.kind == DecodeError.UNREADABLE
    assert ei.value.path == ""


def test_json_text_helpers():
    text = to_json_text({"a": [1, 2]})
    assert "\n" in text
    assert from_json_text(text, Dict[str, List[int]]) == {"a": [1, 2]}
    assert to_json_text({"a": 1}, pretty=False) == '{"a":1}'


def test_format_path():
    assert format_path(()) == ""
    assert format_path(("a", 0, "b")) == "a[0].b"
    assert format_path((2, "x")) == "[2].x"


def test_decode_does_not_coerce_numeric_strings():
    with pytest.raises(DecodeError) as ei:
        decode(b'{"count":"3"}', Dict[str, int])
    assert ei.value.kind == DecodeError.TYPE_MISMATCH
    assert ei.value.path == "count"
