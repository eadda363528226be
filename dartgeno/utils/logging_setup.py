"""Logging configuration utilities."""

import logging
import time
import json
from typing import Optional

__all__ = ["DEFAULT_VERBOSITY", "JsonFormatter", "verbosity_to_level", "setup_logger"]

DEFAULT_VERBOSITY = 2

# 0 silent/fatal errors, 1 begin and end, 2 progress log,
# 3 progress and results summary, 5 full report
_VERBOSITY_LEVELS = {
    0: logging.ERROR,
    1: logging.WARNING,
    2: logging.INFO,
}


class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "time": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
        }
        return json.dumps(payload, ensure_ascii=False)


def verbosity_to_level(verbose: int) -> int:
    """Map a 0-5 verbosity value onto a logging level.

    Example:
        >>> verbosity_to_level(0) == logging.ERROR
        True
        >>> verbosity_to_level(3) == logging.DEBUG
        True
    """
    return _VERBOSITY_LEVELS.get(verbose, logging.DEBUG)


def setup_logger(
    name: str,
    verbose: int = DEFAULT_VERBOSITY,
    format_type: str = "text",
    level: Optional[str] = None,
) -> logging.Logger:
    """Configure and return a logger with specified settings.

    Args:
        name: Logger name
        verbose: Verbosity 0-5; out-of-range values are reset to 2 with a warning
        format_type: Output format: "text" or "json"
        level: Explicit logging level name (DEBUG, INFO, WARNING, ERROR),
            overriding ``verbose``

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()

        if format_type == "json":
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))

        logger.addHandler(handler)
        logger.propagate = False

    reset = not 0 <= verbose <= 5
    if reset:
        verbose = DEFAULT_VERBOSITY

    if level is not None:
        log_level = getattr(logging, level.upper(), logging.INFO)
    else:
        log_level = verbosity_to_level(verbose)
    logger.setLevel(log_level)

    if reset:
        logger.warning(
            "Parameter 'verbose' must be an integer between 0 [silent] and "
            "5 [full report], set to 2"
        )

    return logger
