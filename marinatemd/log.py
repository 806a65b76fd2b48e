"""
Logging setup for the command line.
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "marinatemd"

_FORMAT = "%(levelname)s %(message)s"
_DEBUG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever sys.stderr is when a record is emitted."""

    def __init__(self, level=logging.NOTSET):
        logging.Handler.__init__(self, level)

    @property
    def stream(self):
        return sys.stderr


def setup_logging(verbose: bool = False, debug: bool = False) -> logging.Logger:
    """
    Configure the package logger.

    Warnings and errors are always shown; --verbose adds informational
    messages and --debug everything, with timestamps.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = _StderrHandler()
    if debug:
        handler.setFormatter(logging.Formatter(_DEBUG_FORMAT, datefmt="%H:%M:%S"))
        logger.setLevel(logging.DEBUG)
    else:
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.setLevel(logging.INFO if verbose else logging.WARNING)

    logger.addHandler(handler)
    return logger
