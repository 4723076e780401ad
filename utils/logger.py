"""
Logging for the signal engine.

Every component takes an optional `logger` argument; `resolve_logger` falls
back to a console logger built by `setup_logger`. Output goes through
`SecureFormatter`, so API keys never reach the console or a log file.

The verbosity of default loggers follows the process-wide LoggingContext,
seeded from the LOG_MODE environment variable:
    standalone    every component logs at the requested level
    orchestrated  only the runner and workflow report progress
    silent        only critical records (test runs)
"""

import logging
import os
import re
from enum import Enum
from typing import Optional

from config.settings import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Loggers that stay at their requested level in orchestrated mode
PROGRESS_LOGGERS = frozenset({'run_signals', 'trading_workflow'})


class LoggingContext(Enum):
    STANDALONE = "standalone"
    ORCHESTRATED = "orchestrated"
    SILENT = "silent"


def _mode_from_env() -> LoggingContext:
    raw = os.getenv('LOG_MODE', LoggingContext.STANDALONE.value).strip().lower()
    try:
        return LoggingContext(raw)
    except ValueError:
        return LoggingContext.STANDALONE


_mode = _mode_from_env()


def set_logging_mode(mode: LoggingContext) -> None:
    """Switch the mode used by loggers created from now on."""
    global _mode
    _mode = mode


def get_logging_mode() -> LoggingContext:
    return _mode


def _effective_level(name: str, requested: int) -> int:
    if _mode is LoggingContext.SILENT:
        return logging.CRITICAL
    if _mode is LoggingContext.ORCHESTRATED and name not in PROGRESS_LOGGERS:
        return max(requested, logging.ERROR)
    return requested


class SecureFormatter(logging.Formatter):
    """Formatter that masks anything shaped like an API key or bearer token."""

    KEY_PATTERN = re.compile(r'\b(?:sk-)?[A-Za-z0-9_\-]{20,}\b')

    def format(self, record):
        text = super().format(record)
        return self.KEY_PATTERN.sub(lambda m: settings.mask_api_key(m.group(0)), text)


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(SecureFormatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    return handler


def setup_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the named logger with a masked console handler.

    Args:
        name: Logger name, usually the component name
        level: Requested level; the current LoggingContext may raise it
        log_file: Optional path that receives the same records

    Returns:
        The configured logger. Calling again replaces its handlers.
    """
    effective = _effective_level(name, level)
    logger = logging.getLogger(name)
    logger.setLevel(effective)
    logger.handlers.clear()

    logger.addHandler(_handler(logging.StreamHandler(), effective))
    if log_file:
        logger.addHandler(_handler(logging.FileHandler(log_file, encoding='utf-8'), effective))

    return logger


def resolve_logger(logger: Optional[logging.Logger], name: str) -> logging.Logger:
    """Return the injected logger, or a configured default named `name`."""
    if logger is not None:
        return logger
    existing = logging.getLogger(name)
    if existing.handlers:
        return existing
    return setup_logger(name)
