"""Logging setup for the command-line tools.

Library modules log through ``logging.getLogger(__name__)`` and never attach
handlers; tools call :func:`get_logger` once to route the ``idmfollow``
hierarchy to stderr.
"""
from __future__ import annotations

import logging
from typing import Optional

PACKAGE_LOGGER = "idmfollow"
_DEF_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(
    name: str = PACKAGE_LOGGER,
    verbose: bool = False,
    fmt: Optional[str] = None,
) -> logging.Logger:
    """Return ``name``'s logger with a single stream handler attached.

    Repeated calls reuse the existing handler but still apply ``verbose``.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt or _DEF_FORMAT))
        logger.addHandler(handler)
    return logger


__all__ = ["PACKAGE_LOGGER", "get_logger"]
