"""Logging setup for scripts and host applications."""

import logging
import sys

from . import config

_FORMAT = '%(asctime)s %(levelname)-7s %(name)s: %(message)s'


def configure_logging(level=None):
    """Send package logs to stdout in a human-readable format.

    Safe to call more than once; the handler is only installed the first time.
    """
    logger = logging.getLogger('cryptocanvas')
    logger.setLevel(level or config.LOG_LEVEL)

    if not any(getattr(h, '_cryptocanvas', False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt='%H:%M:%S'))
        handler._cryptocanvas = True
        logger.addHandler(handler)

    return logger
