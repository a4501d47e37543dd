from __future__ import annotations

import base64
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class ResourceHandle:
    """
    Live reference to an external file or folder.

    Only valid inside an access-scope bracket; never persisted directly
    (its `Locator` is).
    """

    path: Path
    is_folder: bool = True

    @property
    def name(self) -> str:
        return self.path.name

    def child(self, name: str) -> Path:
        """Target path for `name`: joined to a folder, or the file itself."""
        return self.path / name if self.is_folder else self.path


class Locator(BaseModel):
    """
    Opaque, platform-issued token for an external resource.

    Fields
    - token: base64 text of the platform bookmark bytes.

    Notes
    - A Locator says nothing about validity on its own. Resolve it and check
      the staleness flag before trusting the handle it yields.
    """

    token: str = Field(..., description="Base64 of the platform bookmark bytes")

    @classmethod
    def from_bytes(cls, data: bytes) -> "Locator":
        return cls(token=base64.b64encode(data).decode("ascii"))

    @property
    def data(self) -> bytes:
        return base64.b64decode(self.token.encode("ascii"))


class Resolution(NamedTuple):
    handle: ResourceHandle
    stale: bool


__all__ = ["ResourceHandle", "Locator", "Resolution"]
