"""Logger setup for the tauri-typegen command line."""

from __future__ import annotations

import logging

ROOT_LOGGER = "typegen"

_QUIET_FORMAT = "tauri-typegen: %(levelname)s %(message)s"
_VERBOSE_FORMAT = "tauri-typegen: %(levelname)s [%(name)s] %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``typegen.<name>``, or the package logger when ``name`` is empty."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Route typegen records to stderr.

    Only warnings and errors are shown by default; generation results are
    printed by the CLI itself. ``verbose`` shows the per-stage progress at
    DEBUG level and tags each line with the emitting module.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_VERBOSE_FORMAT if verbose else _QUIET_FORMAT))
    logger.addHandler(handler)
    return logger


__all__ = ["ROOT_LOGGER", "configure_logging", "get_logger"]
