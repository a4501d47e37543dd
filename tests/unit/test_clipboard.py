from __future__ import annotations

import pytest

from clipboard import adapter as clip
from clipboard.adapter import ClipboardAdapter, ClipboardImage, Color, InMemoryPasteboard


PNG = ClipboardImage(data=b"\x89PNG\r\n\x1a\nfake")


class _SpyPasteboard(InMemoryPasteboard):
    """Counts reads of the string slot."""

    def __init__(self) -> None:
        super().__init__()
        self.string_reads = 0

    @property
    def string(self):
        self.string_reads += 1
        return InMemoryPasteboard.string.fget(self)

    @string.setter
    def string(self, value):
        InMemoryPasteboard.string.fset(self, value)


def test_image_only_text_is_none_without_reading_slot():
    pb = _SpyPasteboard()
    pb.image = PNG
    cb = ClipboardAdapter(pb)

    assert cb.text is None
    assert pb.string_reads == 0
    assert cb.eztext == ""
    assert cb.image == PNG
    assert cb.has_image and not cb.has_text


def test_setting_a_slot_replaces_active_content():
    cb = ClipboardAdapter()
    cb.text = "hello"
    assert cb.text == "hello"

    cb.color = Color(1.0, 0.5, 0.0)
    assert cb.text is None
    assert cb.color == Color(1.0, 0.5, 0.0, 1.0)

    cb.url = "file:///tmp/x.json"
    assert cb.url == "file:///tmp/x.json"
    assert cb.color is None


def test_color_none_clears():
    cb = ClipboardAdapter()
    cb.color = Color(0, 0, 0)
    cb.color = None
    assert cb.color is None
    assert not cb.has_color


def test_image_none_is_noop():
    cb = ClipboardAdapter()
    cb.image = PNG
    cb.image = None
    assert cb.image == PNG


def test_color_channels_validated():
    with pytest.raises(ValueError):
        Color(1.5, 0, 0)


def test_system_text_pasteboard(monkeypatch):
    buf = {"v": ""}
    monkeypatch.setattr(clip.pyperclip, "copy", lambda text: buf.update(v=text))
    monkeypatch.setattr(clip.pyperclip, "paste", lambda: buf["v"])

    cb = ClipboardAdapter(clip.SystemTextPasteboard())
    assert cb.text is None
    cb.text = "copied"
    assert cb.text == "copied"
    assert cb.image is None and cb.color is None and cb.url is None
