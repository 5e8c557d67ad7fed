"""
Logging Configuration
=====================
One place that decides where throttlemap's log records end up.

Why is this file needed?
------------------------
1. Modules only ever call `logging.getLogger(__name__)`. Handlers are
   attached once, to the package logger, by the entry point.
2. The GUI logs to stdout. The CLI prints the lookup table on stdout, so it
   passes stderr here instead.
"""
import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "throttlemap"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
TIME_FORMAT = '%H:%M:%S'


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=TIME_FORMAT))
    logger.addHandler(handler)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Route every `throttlemap.*` record to a console stream and, optionally,
    a log file that is truncated on start.

    Calling it again replaces the handlers of the previous call.

    Args:
        level: Threshold for the package logger and its handlers.
        log_file: Path of the log file, or None for console only.
        stream: Console stream, sys.stdout when omitted.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    _attach(logger, logging.StreamHandler(stream or sys.stdout), level)
    if log_file:
        _attach(logger, logging.FileHandler(log_file, mode='w', encoding='utf-8'), level)

    logger.debug(f"Log handlers ready (level {logging.getLevelName(level)}, file {log_file or 'none'})")
    return logger
