from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

import pyperclip


@dataclass(frozen=True)
class Color:
    """RGBA color, each channel in 0..1."""

    red: float
    green: float
    blue: float
    alpha: float = 1.0

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue", "alpha"):
            v = getattr(self, name)
            if not 0.0 <= v <= 1.0:
                raise ValueError(f"{name} must be within 0..1, got {v}")


@dataclass(frozen=True)
class ClipboardImage:
    data: bytes
    format: str = "png"


class Pasteboard(Protocol):
    """System clipboard slots and their "has value" capability flags."""

    has_strings: bool
    has_images: bool
    has_colors: bool
    has_urls: bool

    string: Optional[str]
    image: Optional[ClipboardImage]
    color: Optional[Color]
    url: Optional[str]


class InMemoryPasteboard:
    """
    Pasteboard holding a single active item, like the system one: writing a
    slot replaces whatever was there before, writing None empties it.
    """

    def __init__(self) -> None:
        self._kind: Optional[str] = None
        self._value: object = None

    def _get(self, kind: str):
        return self._value if self._kind == kind else None

    def _set(self, kind: str, value: object) -> None:
        if value is None:
            if self._kind == kind:
                self._kind, self._value = None, None
            return
        self._kind, self._value = kind, value

    @property
    def has_strings(self) -> bool:
        return self._kind == "string"

    @property
    def has_images(self) -> bool:
        return self._kind == "image"

    @property
    def has_colors(self) -> bool:
        return self._kind == "color"

    @property
    def has_urls(self) -> bool:
        return self._kind == "url"

    @property
    def string(self) -> Optional[str]:
        return self._get("string")

    @string.setter
    def string(self, value: Optional[str]) -> None:
        self._set("string", value)

    @property
    def image(self) -> Optional[ClipboardImage]:
        return self._get("image")

    @image.setter
    def image(self, value: Optional[ClipboardImage]) -> None:
        self._set("image", value)

    @property
    def color(self) -> Optional[Color]:
        return self._get("color")

    @color.setter
    def color(self, value: Optional[Color]) -> None:
        self._set("color", value)

    @property
    def url(self) -> Optional[str]:
        return self._get("url")

    @url.setter
    def url(self, value: Optional[str]) -> None:
        self._set("url", value)


class SystemTextPasteboard:
    """Desktop clipboard through pyperclip. Only the text slot is backed."""

    has_images = False
    has_colors = False
    has_urls = False
    image = None
    color = None
    url = None

    @property
    def has_strings(self) -> bool:
        return pyperclip.paste() != ""

    @property
    def string(self) -> Optional[str]:
        return pyperclip.paste() or None

    @string.setter
    def string(self, value: Optional[str]) -> None:
        pyperclip.copy(value or "")


class ClipboardAdapter:
    """
    Typed access to the text, image, color and URL clipboard slots.

    Getters check the capability flag first and return None when the active
    content is of another type; the slot itself is never read in that case.

    Setters overwrite the slot. `color = None` clears it. `image = None` is
    a no-op: there is no public path to clear an image slot.
    """

    def __init__(self, pasteboard: Optional[Pasteboard] = None) -> None:
        self._pb = pasteboard if pasteboard is not None else InMemoryPasteboard()

    @property
    def has_text(self) -> bool:
        return self._pb.has_strings

    @property
    def has_image(self) -> bool:
        return self._pb.has_images

    @property
    def has_color(self) -> bool:
        return self._pb.has_colors

    @property
    def has_url(self) -> bool:
        return self._pb.has_urls

    @property
    def text(self) -> Optional[str]:
        return self._pb.string if self._pb.has_strings else None

    @text.setter
    def text(self, value: Optional[str]) -> None:
        self._pb.string = value

    @property
    def eztext(self) -> str:
        """Text content, or "" when there is none."""
        return self.text or ""

    @property
    def image(self) -> Optional[ClipboardImage]:
        return self._pb.image if self._pb.has_images else None

    @image.setter
    def image(self, value: Optional[ClipboardImage]) -> None:
        if value is None:
            return
        self._pb.image = value

    @property
    def color(self) -> Optional[Color]:
        return self._pb.color if self._pb.has_colors else None

    @color.setter
    def color(self, value: Optional[Color]) -> None:
        self._pb.color = value

    @property
    def url(self) -> Optional[str]:
        return self._pb.url if self._pb.has_urls else None

    @url.setter
    def url(self, value: Optional[str]) -> None:
        self._pb.url = value


__all__ = [
    "Color",
    "ClipboardImage",
    "Pasteboard",
    "InMemoryPasteboard",
    "SystemTextPasteboard",
    "ClipboardAdapter",
]
