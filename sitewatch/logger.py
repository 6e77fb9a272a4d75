"""Logging setup.

Modules log through ``logging.getLogger(__name__)`` with short
``key=value`` messages. setup_logging() installs one colored stdout handler
without timestamps on the root logger.
"""
from __future__ import annotations

import logging
import sys
from typing import Dict, Union

from colorama import Fore, Style
from colorama import init as colorama_init

LEVEL_STYLE: Dict[int, str] = {
    logging.DEBUG: Style.DIM + Fore.CYAN,
    logging.INFO: Style.NORMAL + Fore.GREEN,
    logging.WARNING: Style.NORMAL + Fore.YELLOW,
    logging.ERROR: Style.BRIGHT + Fore.RED,
    logging.CRITICAL: Style.BRIGHT + Fore.RED,
}

LOG_FORMAT = "[ %(levelname)5s ] %(name)s : %(message)s"


class ColorFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        style = LEVEL_STYLE.get(record.levelno)
        if not style:
            return base
        return f"{style}{base}{Style.RESET_ALL}"


def setup_logging(level: Union[int, str] = logging.INFO, stream=None) -> logging.Handler:
    """Replace the root handlers with a single colored stream handler."""
    colorama_init()
    if isinstance(level, str):
        name = level.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"unknown log level {name!r}")
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(ColorFormatter(fmt=LOG_FORMAT))
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    root.setLevel(level)
    return handler


__all__ = ["ColorFormatter", "setup_logging"]
