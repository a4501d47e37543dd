"""
Access to resources outside the app's own storage.

- platform: protocols for OS services plus local-filesystem implementations
- scope: `SecureAccessScope`, the acquire/release bracket around every use
"""

from .scope import SecureAccessScope

__all__ = ["SecureAccessScope"]
