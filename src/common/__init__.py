"""
Shared building blocks for ezio.

Modules:
- codec: typed value <-> JSON bytes (pydantic TypeAdapter)
- errors: error taxonomy raised by every layer
- settings: environment-driven configuration
- log: logging setup for applications
"""

__all__ = [
    "codec",
    "errors",
    "settings",
    "log",
]
