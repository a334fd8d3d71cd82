"""
Logging setup for PrepMatch.

Everything the app logs goes through the ``prepmatch`` logger tree
(``prepmatch.matching.engine``, ``prepmatch.matching.registry``, ...).
Console output always; a size-rotated file unless disabled; plain or
JSON-lines format.
"""

import logging
import logging.handlers
import os
from typing import Optional

PLAIN_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
JSON_FORMAT = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'

LOG_FILE_NAME = 'prepmatch.log'
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Third-party loggers that are chatty at INFO: werkzeug logs every request,
# APScheduler every run of the once-a-second timer job.
NOISY_LOGGERS = ('werkzeug', 'apscheduler.executors.default', 'apscheduler.scheduler')


def _default_log_dir() -> str:
    base_dir = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
    return os.path.join(base_dir, 'logs')


def _file_handler(log_dir: str, level: int, formatter: logging.Formatter) -> logging.Handler:
    os.makedirs(log_dir, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        os.path.join(log_dir, LOG_FILE_NAME),
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding='utf-8',
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    app=None,
    log_level: str = 'INFO',
    log_dir: Optional[str] = None,
    json_format: bool = False,
    log_to_file: bool = True
) -> logging.Logger:
    """
    Configure the ``prepmatch`` logger.

    Args:
        app: Flask application instance; when given, third-party request and
            scheduler loggers are turned down to WARNING
        log_level: DEBUG shows ignored selections and suppressed stale timers
        log_dir: Directory for the rotating log file (default: <project>/logs)
        json_format: One JSON object per line instead of plain text
        log_to_file: Attach the rotating file handler

    Returns:
        The configured ``prepmatch`` logger
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = logging.Formatter(JSON_FORMAT if json_format else PLAIN_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    logger = logging.getLogger('prepmatch')
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_to_file:
        log_dir = log_dir or _default_log_dir()
        logger.addHandler(_file_handler(log_dir, level, formatter))

    if app:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logger.info("Logging initialized: level=%s, file=%s",
                log_level, os.path.join(log_dir, LOG_FILE_NAME) if log_to_file else '<none>')
    return logger


def get_logger(name: str = 'prepmatch') -> logging.Logger:
    """Get a logger by name."""
    return logging.getLogger(name)
