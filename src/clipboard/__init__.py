from .adapter import ClipboardAdapter, ClipboardImage, Color, InMemoryPasteboard, SystemTextPasteboard

__all__ = ["ClipboardAdapter", "ClipboardImage", "Color", "InMemoryPasteboard", "SystemTextPasteboard"]
