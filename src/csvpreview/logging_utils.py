"""Centralized logging utilities for the csvpreview entry points."""

from __future__ import annotations

import logging
import sys
from typing import Optional


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Configure root logging handlers for the command line.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or string name (e.g., "INFO").
    log_file : str, optional
        Path of an error log. When given, diagnostics are appended to this
        file instead of being written to stderr.
    trace_mode : bool, default False
        When true, emit timestamps and logger names for debugging traces.

    Returns
    -------
    logging.Logger
        The configured root logger instance.

    """
    resolved_level = log_level if isinstance(log_level, int) else getattr(logging, str(log_level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved_level)
    root_logger.handlers.clear()

    format_str = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s" if trace_mode else "%(levelname)s: %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S" if trace_mode else None
    formatter = logging.Formatter(format_str, datefmt=date_format)

    handler: logging.Handler
    if log_file:
        try:
            handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(formatter)
            root_logger.addHandler(handler)
            root_logger.warning("Could not open error log %s, logging to stderr: %s", log_file, exc)
            return root_logger
    else:
        handler = logging.StreamHandler(sys.stderr)

    handler.setLevel(resolved_level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    return root_logger
