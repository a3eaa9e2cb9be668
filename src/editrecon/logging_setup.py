"""Logging configuration — one Rich handler on stderr."""

from __future__ import annotations

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_LOG_LEVEL_ENV = "EDITRECON_LOG_LEVEL"


def _resolve_level(level: Optional[int]) -> int:
    if level is not None:
        return level
    name = os.getenv(_LOG_LEVEL_ENV, "WARNING").upper()
    return getattr(logging, name, logging.WARNING)


def configure_logging(level: Optional[int] = None) -> None:
    """Install (or re-level) the editrecon Rich handler on the package logger."""
    logger = logging.getLogger("editrecon")
    handler = next(
        (h for h in logger.handlers if getattr(h, "_editrecon_managed", False)), None
    )
    if handler is None:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            show_time=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._editrecon_managed = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.setLevel(_resolve_level(level))
    logger.propagate = False
