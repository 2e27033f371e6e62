"""Logging helpers for the editor."""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOGGER: Optional[logging.Logger] = None


def get_logger() -> logging.Logger:
    """Return the package logger configured for the editor."""

    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger("sleek_editor")
        if not _LOGGER.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            handler.setFormatter(formatter)
            _LOGGER.addHandler(handler)
        _LOGGER.setLevel(logging.INFO)
    return _LOGGER


def configure_logging(level: Union[int, str]) -> logging.Logger:
    """Apply *level* (``"DEBUG"``, ``logging.INFO``...) to the package logger."""

    log = get_logger()
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        # getLevelName returns "Level X" for unknown names
        level = resolved if isinstance(resolved, int) else logging.INFO
    log.setLevel(level)
    return log
