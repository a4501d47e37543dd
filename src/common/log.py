from __future__ import annotations

import logging
import sys
from typing import Optional

from .settings import Settings


LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a single stderr handler to the package loggers.

    Libraries only call `logging.getLogger(__name__)`; applications call this
    once at startup. The level falls back to `EZIO_LOG_LEVEL`.
    """
    level_name = (level or Settings.from_env().log_level).upper()
    root = logging.getLogger()
    if not any(getattr(h, "_ezio", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handler._ezio = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(getattr(logging, level_name, logging.WARNING))
    return root
