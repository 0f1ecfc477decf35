"""
Logging Configuration Module

Console logging for the catalog service plus silencing of chatty
third-party loggers outside debug mode.
"""

import logging
import sys


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"

NOISY_LOGGERS = ("werkzeug", "urllib3")


def setup_logging(debug=False, level=None):
    """
    Configure root logging for the application.

    Args:
        debug: Whether to enable debug logging
        level: Optional level name overriding the debug default (e.g. "WARNING")
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    resolved = logging.DEBUG if debug else logging.INFO
    if level:
        resolved = getattr(logging, str(level).upper(), resolved)
    root_logger.setLevel(resolved)

    if not debug:
        _silence_noisy_libraries()


def _silence_noisy_libraries():
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)