"""
Structured Logging Configuration

One line per record: timestamp, level, logger name, message, then any
scoring context passed through ``extra=`` as ``key=value`` pairs.
"""
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

# LogRecord attributes that are never treated as context fields
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}

# Chatty third-party loggers held at WARNING unless running at DEBUG
_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def _context_fields(record: logging.LogRecord) -> str:
    pairs = [
        f"{key}={value}"
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    ]
    return " ".join(pairs)


class StructuredFormatter(logging.Formatter):
    """Formats records for both the console and log files."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_color: bool = False):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        line = f"[{timestamp}] {record.levelname:8} [{record.name}] {record.getMessage()}"

        context = _context_fields(record)
        if context:
            line += f" | {context}"

        if self.use_color and record.levelname in self.COLORS:
            line = f"{self.COLORS[record.levelname]}{line}{self.RESET}"

        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"

        return line


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure the root logger for the service.

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Optional file path that receives an uncoloured copy
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter(use_color=sys.stdout.isatty()))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Get a module logger (pass ``__name__``)."""
    return logging.getLogger(name)
