from __future__ import annotations

from typing import Optional


class EzioError(RuntimeError):
    """Base error for every ezio operation."""


class EncodeError(EzioError):
    """A value could not be serialized."""


class DecodeError(EzioError):
    """
    Bytes could not be turned back into the requested type.

    Attributes
    - kind: one of MALFORMED, MISSING_FIELD, TYPE_MISMATCH, UNREADABLE.
    - path: dotted location of the failing nested field ("" for the root).
    """

    MALFORMED = "malformed"
    MISSING_FIELD = "missing_field"
    TYPE_MISMATCH = "type_mismatch"
    UNREADABLE = "unreadable"

    def __init__(self, message: str, *, kind: str, path: str = "") -> None:
        self.kind = kind
        self.path = path
        where = f" at '{path}'" if path else ""
        super().__init__(f"{kind}{where}: {message}")


class NotFound(EzioError):
    """No entry is stored under the requested key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"key not found: {key!r}")


class PermissionDenied(EzioError):
    """The OS refused access to an external resource."""


class StaleLocator(EzioError):
    """A locator could not be resolved to a resource any more."""


class IOFailure(EzioError):
    """Underlying read/write failed (not found, permission, I/O)."""

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        self.path = path
        super().__init__(message if path is None else f"{message}: {path}")


__all__ = [
    "EzioError",
    "EncodeError",
    "DecodeError",
    "NotFound",
    "PermissionDenied",
    "StaleLocator",
    "IOFailure",
]
