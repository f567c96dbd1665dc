"""Logging setup for the viewer and CLI."""

from __future__ import annotations

import logging
import sys

# requests logs every connection at DEBUG through urllib3.
_NOISY_LOGGERS = ("urllib3",)


def setup_logging(level: str | None = "INFO") -> None:
    """Configure the root logger. Unknown or empty level names fall back to INFO."""
    resolved = getattr(logging, (level or "INFO").upper(), logging.INFO)
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
