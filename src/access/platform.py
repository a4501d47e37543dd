from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Protocol

from common.errors import IOFailure, StaleLocator
from state.models import ResourceHandle, Resolution


logger = logging.getLogger(__name__)


class AccessControl(Protocol):
    """OS-level, per-resource access grant (security-scoped resources)."""

    def start_accessing(self, handle: ResourceHandle) -> bool: ...

    def stop_accessing(self, handle: ResourceHandle) -> None: ...


class BookmarkService(Protocol):
    """Issues durable bookmark bytes for a handle and resolves them back."""

    def create_bookmark(self, handle: ResourceHandle) -> bytes: ...

    def resolve_bookmark(self, data: bytes) -> Resolution: ...


class Filesystem(Protocol):
    def read_bytes(self, handle: ResourceHandle, name: str) -> bytes: ...

    def write_bytes(self, handle: ResourceHandle, name: str, data: bytes) -> None: ...


class LocalAccessControl:
    """
    Grants access when the path exists and this process may read it.

    Write permission is not part of the grant: a save into a read-only folder
    fails in `LocalFilesystem.write_bytes` with `IOFailure`.

    Outstanding grants are counted per path so that unbalanced release shows up
    in `outstanding()` rather than silently passing.
    """

    def __init__(self) -> None:
        self._grants: Dict[Path, int] = {}

    def start_accessing(self, handle: ResourceHandle) -> bool:
        path = handle.path
        if not path.exists() or not os.access(path, os.R_OK):
            return False
        self._grants[path] = self._grants.get(path, 0) + 1
        return True

    def stop_accessing(self, handle: ResourceHandle) -> None:
        count = self._grants.get(handle.path, 0)
        if count <= 1:
            self._grants.pop(handle.path, None)
        else:
            self._grants[handle.path] = count - 1

    def outstanding(self) -> int:
        return sum(self._grants.values())


class LocalBookmarkService:
    """
    Bookmarks for local paths: JSON of path, folder flag, device and inode.

    Resolution is stale when the path is gone or now names a different file
    (same path, different inode: the bookmarked file was moved or replaced).
    """

    def create_bookmark(self, handle: ResourceHandle) -> bytes:
        try:
            st = handle.path.stat()
        except (OSError, ValueError) as ex:
            raise IOFailure("couldn't create bookmark", path=str(handle.path)) from ex
        payload = {
            "path": str(handle.path.resolve()),
            "folder": handle.is_folder,
            "dev": st.st_dev,
            "ino": st.st_ino,
        }
        return json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")

    def resolve_bookmark(self, data: bytes) -> Resolution:
        try:
            raw = json.loads(data.decode("utf-8"))
            path = Path(raw["path"])
            handle = ResourceHandle(path=path, is_folder=bool(raw.get("folder", True)))
            dev, ino = int(raw["dev"]), int(raw["ino"])
        except (ValueError, KeyError, TypeError) as ex:
            raise StaleLocator("didn't resolve bookmark data") from ex
        try:
            st = path.stat()
        except (OSError, ValueError):
            logger.debug("bookmark target missing: %s", path)
            return Resolution(handle, True)
        return Resolution(handle, (st.st_dev, st.st_ino) != (dev, ino))


class LocalFilesystem:
    """Byte-level read/write; OS errors and unusable file names surface as `IOFailure`."""

    def read_bytes(self, handle: ResourceHandle, name: str) -> bytes:
        target = handle.child(name)
        try:
            return target.read_bytes()
        except FileNotFoundError as ex:
            raise IOFailure("file not found", path=str(target)) from ex
        except PermissionError as ex:
            raise IOFailure("permission denied reading", path=str(target)) from ex
        except OSError as ex:
            raise IOFailure("failed reading", path=str(target)) from ex
        except ValueError as ex:
            raise IOFailure("invalid file name", path=repr(name)) from ex

    def write_bytes(self, handle: ResourceHandle, name: str, data: bytes) -> None:
        target = handle.child(name)
        try:
            target.write_bytes(data)
        except PermissionError as ex:
            raise IOFailure("permission denied writing", path=str(target)) from ex
        except OSError as ex:
            raise IOFailure("failed writing", path=str(target)) from ex
        except ValueError as ex:
            raise IOFailure("invalid file name", path=repr(name)) from ex


__all__ = [
    "AccessControl",
    "BookmarkService",
    "Filesystem",
    "LocalAccessControl",
    "LocalBookmarkService",
    "LocalFilesystem",
]
