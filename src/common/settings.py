from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# Environment variable names
ENV_STORE_PATH = "EZIO_STORE_PATH"
ENV_PRETTY_JSON = "EZIO_PRETTY_JSON"
ENV_LOG_LEVEL = "EZIO_LOG_LEVEL"

DEFAULT_STORE_PATH = Path(".ezio") / "store.json"
DEFAULT_LOG_LEVEL = "WARNING"

_TRUTHY = {"1", "true", "yes", "on"}
_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.environ.get(name)
    return v if v not in (None, "") else default


@dataclass(frozen=True)
class Settings:
    """
    Process-wide configuration, read from the environment.

    Environment variables (all optional)
    - `EZIO_STORE_PATH`:  JSON file backing the durable key-value store
    - `EZIO_PRETTY_JSON`: "1/true/yes/on" to pretty-print saved files
    - `EZIO_LOG_LEVEL`:   logging level name (default WARNING)
    """

    store_path: Path = DEFAULT_STORE_PATH
    pretty_json: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "Settings":
        store_path = _getenv(ENV_STORE_PATH)
        pretty = _getenv(ENV_PRETTY_JSON, "")
        level = (_getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper()
        if level not in _LEVELS:
            raise RuntimeError(f"Invalid {ENV_LOG_LEVEL}: {level!r} (expected one of {', '.join(sorted(_LEVELS))})")
        return cls(
            store_path=Path(store_path).expanduser() if store_path else DEFAULT_STORE_PATH,
            pretty_json=(pretty or "").strip().lower() in _TRUTHY,
            log_level=level,
        )


__all__ = ["Settings", "ENV_STORE_PATH", "ENV_PRETTY_JSON", "ENV_LOG_LEVEL"]
