"""Logging setup for the command line.

Console records are short (``[LEVEL] message``); an optional rotating log
file gets timestamps and logger names.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from config import CONFIG

_installed: List[logging.Handler] = []


def level_for(verbosity: int) -> int:
    """Map a ``-v`` count to a console level."""

    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(verbosity: int = 0, log_file: Optional[Path] = None) -> logging.Logger:
    """Configure the root logger.

    Calling it again replaces the handlers installed by the previous call.

    Parameters
    ----------
    verbosity
        Number of ``-v`` flags given.
    log_file
        If set, also log DEBUG and above to this rotating file.
    """

    root = logging.getLogger()
    for handler in _installed:
        root.removeHandler(handler)
        handler.close()
    _installed.clear()

    root.setLevel(logging.DEBUG)  # handlers filter

    console = logging.StreamHandler()
    console.setLevel(level_for(verbosity))
    console.setFormatter(logging.Formatter(CONFIG.logging.console_format))
    root.addHandler(console)
    _installed.append(console)

    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=CONFIG.logging.max_bytes,
            backupCount=CONFIG.logging.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(CONFIG.logging.file_format, datefmt="%Y-%m-%d %H:%M:%S")
        )
        root.addHandler(file_handler)
        _installed.append(file_handler)
    return root
