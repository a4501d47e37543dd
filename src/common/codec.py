from __future__ import annotations

from functools import lru_cache
from typing import Any, Optional, Sequence, Type, TypeVar, Union

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from .errors import DecodeError, EncodeError


T = TypeVar("T")

PRETTY_INDENT = 2

_MISSING_TYPES = {"missing", "missing_argument", "missing_keyword_only_argument", "missing_positional_only_argument"}
_MALFORMED_TYPES = {"json_invalid", "json_type"}


@lru_cache(maxsize=128)
def _cached_adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


def _adapter(tp: Any) -> TypeAdapter:
    try:
        return _cached_adapter(tp)
    except TypeError:
        # Unhashable type expressions (e.g. Annotated with dict metadata)
        return TypeAdapter(tp)


def format_path(loc: Sequence[Union[str, int]]) -> str:
    """Render a pydantic error location as `items[2].name`."""
    out = ""
    for part in loc:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}" if out else str(part)
    return out


def _classify(err: ValidationError) -> DecodeError:
    first = err.errors()[0]
    etype = first.get("type", "")
    path = format_path(first.get("loc", ()))
    msg = first.get("msg", str(err))
    if etype in _MALFORMED_TYPES:
        kind = DecodeError.MALFORMED
    elif etype in _MISSING_TYPES:
        kind = DecodeError.MISSING_FIELD
    else:
        kind = DecodeError.TYPE_MISMATCH
    return DecodeError(msg, kind=kind, path=path)


def encode(value: Any, pretty: bool = False, *, as_type: Optional[Any] = None) -> bytes:
    """Serialize `value` to UTF-8 JSON bytes.

    - Raw `bytes`/`bytearray` are returned as-is (identity encode).
    - `pretty` indents nested structures; the decoded value is the same either way.
    - `as_type` overrides the runtime type used to pick the serializer.

    Raises EncodeError when the value (or a nested member) is not serializable.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    tp = as_type if as_type is not None else type(value)
    try:
        adapter = _adapter(tp)
        return adapter.dump_json(value, indent=PRETTY_INDENT if pretty else None)
    except (PydanticSerializationError, PydanticSchemaGenerationError) as ex:
        raise EncodeError(f"cannot encode value of type {type(value).__name__}: {ex}") from ex


def decode(data: bytes, target_type: Type[T]) -> T:
    """Deserialize UTF-8 JSON bytes into `target_type`.

    Decoding into `bytes` returns the source bytes unchanged (identity decode).
    Raises DecodeError carrying the failure kind and the nested field path.
    """
    if target_type is bytes:
        return bytes(data)  # type: ignore[return-value]
    try:
        text = bytes(data).decode("utf-8")
    except UnicodeDecodeError as ex:
        raise DecodeError(f"invalid UTF-8 at byte {ex.start}", kind=DecodeError.UNREADABLE) from ex
    try:
        adapter = _adapter(target_type)
    except PydanticSchemaGenerationError as ex:
        raise DecodeError(f"unsupported target type {target_type!r}", kind=DecodeError.TYPE_MISMATCH) from ex
    try:
        return adapter.validate_json(text, strict=True)
    except ValidationError as ex:
        raise _classify(ex) from ex


def to_json_text(value: Any, pretty: bool = True) -> str:
    """JSON text of `value`, pretty-printed by default."""
    data = encode(value, pretty=pretty)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as ex:
        raise EncodeError("raw bytes are not valid UTF-8 text") from ex


def from_json_text(text: str, target_type: Type[T]) -> T:
    return decode(text.encode("utf-8"), target_type)


__all__ = [
    "encode",
    "decode",
    "to_json_text",
    "from_json_text",
    "format_path",
]
