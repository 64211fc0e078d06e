"""Logging setup for the nostradiffmus CLI, hooks and service."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

_LOGGER_NAME = "nostradiffmus"
DEBUG_ENV_VAR = "NOSTRADIFFMUS_DEBUG"

_STREAM_FORMAT = "[nostradiffmus] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the nostradiffmus hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def debug_requested(environ: Mapping[str, str] | None = None) -> bool:
    """True when ``NOSTRADIFFMUS_DEBUG=1`` is set."""
    env = os.environ if environ is None else environ
    return env.get(DEBUG_ENV_VAR, "").strip() == "1"


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> logging.Logger:
    """Configure the nostradiffmus logger.

    ``verbose`` or ``NOSTRADIFFMUS_DEBUG=1`` selects DEBUG; otherwise only
    warnings (oversized diffs, hook problems) reach stderr. Calling this again
    replaces the previous handlers.
    """
    level = logging.DEBUG if verbose or debug_requested(environ) else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter(_STREAM_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    return logger


__all__ = ["DEBUG_ENV_VAR", "configure_logging", "debug_requested", "get_logger"]
