#!/usr/bin/env python3
"""
logging_setup.py
================
Configures the root logger with a console handler and, when a path is
given, a rotating file handler (1 MB, 2 backups).

Call :func:`setup_logging` once at startup. Library modules only create
named loggers (``world``, ``buildings``, ``trees``, ``signals``) and never
install handlers themselves.
"""

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """Apply a unified log format to console and optional file output.

    Parameters
    ----------
    level : int
        Minimum severity level (e.g. ``logging.DEBUG``, ``logging.INFO``).
    log_file : str, optional
        Path of a rotating log file. No file is written when omitted.
    """
    root = logging.getLogger()
    root.setLevel(level)

    fmt = logging.Formatter(LOG_FORMAT)

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)

    root.handlers.clear()
    root.addHandler(ch)

    if log_file:
        fh = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=2)
        fh.setFormatter(fmt)
        root.addHandler(fh)
