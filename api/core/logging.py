"""
Process-wide logging setup.
"""

from __future__ import annotations

import logging
import os
import sys


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def setup_logging(level: str | None = None) -> None:
    root = logging.getLogger()
    if root.handlers:
        return None
    root.setLevel(level or log_level())
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    )
    root.addHandler(handler)
