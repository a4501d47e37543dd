"""
Durable state for ezio: the key-value store and bookmark registry.

Values are encoded with `common.codec` and kept as raw bytes under
string keys. Locators for external folders are stored the same way.
"""

from .models import Locator, ResourceHandle, Resolution

__all__ = ["Locator", "ResourceHandle", "Resolution"]
