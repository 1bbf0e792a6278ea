"""
PageFeed Logging Configuration
==============================

Logging setup for the server and CLI. Every component logs through a
``pagefeed.<component>`` logger wrapped in an adapter that stamps the
component name (and, where known, the page URL) on each record, so one
request can be followed across fetch, model call and cache.
"""

import json
import logging
import logging.handlers
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


# Attributes every LogRecord carries; anything else was passed via ``extra``
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

# Context fields promoted to the top level of JSON records
_PROMOTED_FIELDS = ("component", "page_url", "stage")

# Loggers of libraries that are chatty at INFO
_NOISY_LOGGERS = ("aiohttp.access", "aiohttp.client", "urllib3", "google", "feedparser")


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, for log files and log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        extra = _extra_fields(record)

        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in _PROMOTED_FIELDS:
            if name in extra:
                log_data[name] = extra.pop(name)

        log_data["location"] = f"{record.module}:{record.funcName}:{record.lineno}"

        if extra:
            log_data["extra"] = extra

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class ColoredConsoleFormatter(logging.Formatter):
    """Compact colored lines for an interactive terminal."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        component = getattr(record, "component", None) or record.name

        line = f"{color}{timestamp} {record.levelname:<8}{self.RESET} [{component}] {record.getMessage()}"

        duration = getattr(record, "duration_seconds", None)
        if duration is not None:
            line += f" ({duration * 1000:.0f}ms)"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


def setup_logger(
    name: str = "pagefeed",
    level: str = "INFO",
    log_file: Optional[str] = None,
    console: bool = True,
    structured: bool = False,
    max_file_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """Attach console and/or rotating file handlers to a logger.

    Existing handlers are replaced, so calling this twice does not
    duplicate output. Files always receive JSON lines; the console gets
    JSON only when ``structured`` is set.

    Args:
        name: Logger name
        level: Logging level name
        log_file: Path of the rotating log file, or None for no file
        console: Whether to log to stdout
        structured: JSON instead of colored console output
        max_file_size: Rotate after this many bytes
        backup_count: Rotated files to keep

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if console:
        stream = logging.StreamHandler(sys.stdout)
        stream.setFormatter(StructuredFormatter() if structured else ColoredConsoleFormatter())
        logger.addHandler(stream)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = logging.handlers.RotatingFileHandler(
            path, maxBytes=max_file_size, backupCount=backup_count, encoding="utf-8"
        )
        rotating.setFormatter(StructuredFormatter())
        logger.addHandler(rotating)

    return logger


class LoggerAdapter(logging.LoggerAdapter):
    """Adapter merging its fixed context into each call's ``extra``.

    Per-call ``extra`` keys win over the adapter's own context.
    """

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> tuple:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger_for_component(
    component_name: str,
    url: Optional[str] = None,
) -> LoggerAdapter:
    """Get the logger adapter for a PageFeed component.

    Args:
        component_name: Component name, e.g. ``page_fetcher`` or ``pipeline``
        url: Page URL the logger is bound to, if any

    Returns:
        Adapter over ``pagefeed.<component_name>``
    """
    context: Dict[str, Any] = {"component": component_name}
    if url:
        context["page_url"] = url
    return LoggerAdapter(logging.getLogger(f"pagefeed.{component_name}"), context)


def configure_application_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = "logs/pagefeed.log",
    enable_console: bool = True,
    structured_logging: bool = False,
    max_file_size_mb: int = 10,
    backup_count: int = 5,
) -> None:
    """Configure the ``pagefeed`` logger tree and quiet noisy libraries."""
    setup_logger(
        name="pagefeed",
        level=log_level,
        log_file=log_file,
        console=enable_console,
        structured=structured_logging,
        max_file_size=max_file_size_mb * 1024 * 1024,
        backup_count=backup_count,
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class PerformanceLogger:
    """Times a block and logs its outcome.

    Success is logged at INFO and failure at WARNING; the exception itself
    is left to propagate. ``duration`` holds the elapsed seconds afterwards.
    """

    def __init__(self, logger, operation: str, **context):
        self.logger = logger
        self.operation = operation
        self.context = context
        self.duration: Optional[float] = None
        self._started: Optional[float] = None

    def __enter__(self) -> "PerformanceLogger":
        self._started = time.perf_counter()
        self.logger.debug(f"Starting {self.operation}", extra=dict(self.context))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.duration = time.perf_counter() - self._started
        extra = {**self.context, "duration_seconds": self.duration, "success": exc_type is None}

        if exc_type is None:
            self.logger.info(f"Completed {self.operation}", extra=extra)
        else:
            self.logger.warning(
                f"Failed {self.operation} after {self.duration:.3f}s: {exc_type.__name__}",
                extra=extra,
            )
