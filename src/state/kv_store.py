from __future__ import annotations

import base64
import binascii
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Type, TypeVar

from common.codec import decode, encode
from common.errors import IOFailure, NotFound
from common.settings import Settings


logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeyValueStore(Protocol):
    """String key -> bytes, last-write-wins, no transactions."""

    def set(self, key: str, data: bytes) -> None: ...

    def get(self, key: str) -> bytes: ...

    def delete(self, key: str) -> None: ...

    def contains(self, key: str) -> bool: ...


class InMemoryKeyValueStore:
    """Process-local store; contents vanish with the process."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None) -> None:
        self._data: Dict[str, bytes] = dict(initial or {})

    def set(self, key: str, data: bytes) -> None:
        self._data[key] = bytes(data)

    def get(self, key: str) -> bytes:
        try:
            return self._data[key]
        except KeyError:
            raise NotFound(key) from None

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def contains(self, key: str) -> bool:
        return key in self._data

    def keys(self):
        return list(self._data)


class FileKeyValueStore:
    """
    Durable store backed by a single JSON file: { key: base64(bytes), ... }.

    - Loaded lazily on first access; a corrupt or unreadable file is treated
      as empty (the OS or user may clear the store at any time).
    - Every `set`/`delete` rewrites the file immediately via a temp file and
      `os.replace`, so a crash never leaves a half-written store.
    - Write failures raise `IOFailure`.
    """

    def __init__(self, path: os.PathLike[str] | str) -> None:
        self._path = Path(path)
        self._data: Dict[str, str] = {}
        self._loaded = False

    @classmethod
    def from_env(cls) -> "FileKeyValueStore":
        return cls(Settings.from_env().store_path)

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        try:
            if self._path.exists():
                with self._path.open("r", encoding="utf-8") as f:
                    raw: Any = json.load(f)
                if isinstance(raw, dict):
                    self._data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
        except (OSError, ValueError) as ex:
            logger.warning("ignoring unreadable store %s: %s", self._path, ex)
            self._data = {}

    def _save(self, data: Dict[str, str]) -> None:
        """Persist `data`, then adopt it; `_data` is unchanged if the write fails."""
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp, self._path)
        except OSError as ex:
            raise IOFailure("failed writing key-value store", path=str(self._path)) from ex
        self._data = data

    def set(self, key: str, data: bytes) -> None:
        self._ensure_loaded()
        updated = dict(self._data)
        updated[key] = base64.b64encode(bytes(data)).decode("ascii")
        self._save(updated)

    def get(self, key: str) -> bytes:
        self._ensure_loaded()
        raw = self._data.get(key)
        if raw is None:
            raise NotFound(key)
        try:
            return base64.b64decode(raw.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError):
            logger.warning("dropping corrupt entry %r in %s", key, self._path)
            raise NotFound(key) from None

    def delete(self, key: str) -> None:
        self._ensure_loaded()
        if key in self._data:
            updated = dict(self._data)
            del updated[key]
            self._save(updated)

    def contains(self, key: str) -> bool:
        self._ensure_loaded()
        return key in self._data

    def keys(self):
        self._ensure_loaded()
        return list(self._data)


# -------- Typed convenience helpers --------
def store_obj(store: KeyValueStore, obj: Any, key: str, *, pretty: bool = False) -> None:
    """Encode `obj` and keep it under `key`. Raises EncodeError / IOFailure."""
    store.set(key, encode(obj, pretty=pretty))


def load_obj(store: KeyValueStore, target_type: Type[T], key: str) -> T:
    """Load and decode the value under `key`. Raises NotFound / DecodeError."""
    return decode(store.get(key), target_type)


__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "FileKeyValueStore",
    "store_obj",
    "load_obj",
]
