#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Logging setup for the command-line entry point.

The library itself only creates module loggers; handlers are installed here,
and only when the CLI asks for them.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

# Third-party loggers that are chatty at DEBUG
_QUIET_LOGGERS = ("bs4",)


def resolve_level(log_level: int | str) -> int:
    """Turn a level name such as ``"info"`` into its numeric value, defaulting to INFO."""
    if isinstance(log_level, int):
        return log_level
    return getattr(logging, str(log_level).upper(), logging.INFO)


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Install stderr (and optional file) handlers on the root logger.

    Parameters
    ----------
    log_level : int or str
        Numeric level or level name
    log_file : str, optional
        Also append log records to this file
    trace_mode : bool, default False
        Include timestamps and logger names in each record

    Returns
    -------
    logging.Logger
        The configured root logger

    """
    level = resolve_level(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if trace_mode:
        formatter = logging.Formatter("[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s", "%Y-%m-%d %H:%M:%S")
    else:
        formatter = logging.Formatter("%(levelname)s: %(message)s")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            root_logger.warning("Could not open log file %s: %s", log_file, exc)
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            root_logger.debug("Logging to file: %s", log_file)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return root_logger
