# logging_utils.py
"""Structured logging utilities for the campaign reporter."""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

LOGGER_NAMESPACE = "campaign_reporter"

# Extra fields lifted to the top level of structured records
PROMOTED_FIELDS = ("campaign_id",)

# LogRecord attributes that are never copied into the "extra" payload
_STANDARD_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "message", "taskName",
}


class StructuredFormatter(logging.Formatter):
    """Formatter that renders log records as single-line JSON documents.

    A campaign ID attached to a record, directly or through LogContext, is
    written as a top-level ``campaign_id`` key so that every line of one
    campaign's build can be selected with a single filter.
    """

    def __init__(
        self,
        service_name: str = "campaign-reporter",
        include_timestamp: bool = True,
        include_extra: bool = True,
    ):
        """Initialize the structured formatter.

        Args:
            service_name: Name of the service to include in logs
            include_timestamp: Whether to include timestamp in output
            include_extra: Whether to include extra fields from log record
        """
        super().__init__()
        self.service_name = service_name
        self.include_timestamp = include_timestamp
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a JSON string.

        Args:
            record: The log record to format

        Returns:
            JSON-formatted log string
        """
        log_data: Dict[str, Any] = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "service": self.service_name,
        }

        if self.include_timestamp:
            log_data["timestamp"] = datetime.now(timezone.utc).isoformat()

        log_data["source"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }

        for field in PROMOTED_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            extra_fields = self._extra_fields(record)
            if extra_fields:
                log_data["extra"] = extra_fields

        return json.dumps(log_data, default=str)

    def _extra_fields(self, record: logging.LogRecord) -> Dict[str, Any]:
        """Collect the non-standard attributes of a record.

        Values that cannot be serialized, such as enum stages or models, are
        replaced by their string form.
        """
        extra_fields: Dict[str, Any] = {}
        for key, value in record.__dict__.items():
            if key in _STANDARD_ATTRS or key in PROMOTED_FIELDS or key.startswith("_"):
                continue
            try:
                json.dumps(value)
                extra_fields[key] = value
            except (TypeError, ValueError):
                extra_fields[key] = str(value)
        return extra_fields


class HumanReadableFormatter(logging.Formatter):
    """Human-readable formatter for development environments."""

    # ANSI colors per level
    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        """Initialize the human-readable formatter.

        Args:
            use_colors: Whether to use ANSI colors when stdout is a terminal
        """
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as one readable line.

        The campaign ID, when present, is shown after the logger name.

        Args:
            record: The log record to format

        Returns:
            Human-readable formatted log string
        """
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname
        message = record.getMessage()

        if self.use_colors:
            color = self.COLORS.get(level, "")
            level_str = f"{color}{level:8}{self.RESET}"
        else:
            level_str = f"{level:8}"

        campaign_id = getattr(record, "campaign_id", None)
        scope = f"[{record.name}]"
        if campaign_id is not None:
            scope = f"[{record.name} campaign={campaign_id}]"

        formatted = f"[{timestamp}] {level_str} {scope} {message}"

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


def setup_logging(
    level: Optional[str] = None,
    structured: Optional[bool] = None,
    service_name: str = "campaign-reporter",
) -> logging.Logger:
    """Set up logging configuration for the campaign reporter.

    Configures the root logger with a single stdout handler and returns the
    package logger. Structured JSON output is used outside development.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to LOG_LEVEL env var or INFO.
        structured: Whether to use structured JSON logging.
                   Defaults to True unless APP_ENV is 'dev'.
        service_name: Service name to include in structured logs.

    Returns:
        Logger instance for campaign_reporter

    Example:
        >>> logger = setup_logging(level="DEBUG", structured=False)
        >>> logger.info("Building report", extra={"campaigns": 3})
    """
    if level is None:
        level = os.environ.get("LOG_LEVEL", "INFO").upper()

    log_level = getattr(logging, level, logging.INFO)

    if structured is None:
        app_env = os.environ.get("APP_ENV", "prod")
        structured = app_env != "dev"

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    if structured:
        formatter = StructuredFormatter(service_name=service_name)
    else:
        formatter = HumanReadableFormatter(use_colors=True)

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    _configure_third_party_loggers(log_level)

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.info(
        "Logging initialized",
        extra={
            "log_level": level,
            "structured": structured,
            "service": service_name,
        }
    )

    return logger


def _configure_third_party_loggers(log_level: int) -> None:
    """Quiet the HTTP client loggers used by the API client.

    Args:
        log_level: The current log level being used
    """
    noisy_loggers = ["urllib3", "requests"]

    # WARNING unless running in DEBUG mode
    third_party_level = logging.WARNING if log_level > logging.DEBUG else log_level

    for logger_name in noisy_loggers:
        logging.getLogger(logger_name).setLevel(third_party_level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance within the campaign_reporter namespace.

    Args:
        name: The name of the logger (prefixed with 'campaign_reporter.' if needed)

    Returns:
        A logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Saved reporting window", extra={"path": "logs/x.json"})
    """
    if not name.startswith(LOGGER_NAMESPACE):
        name = f"{LOGGER_NAMESPACE}.{name}"
    return logging.getLogger(name)


class LogContext:
    """Context manager for adding extra fields to log messages.

    Fields set here are picked up by ContextAdapter loggers for every
    message logged inside the block. Nested contexts add to the outer
    fields and restore them on exit.

    Example:
        >>> with LogContext(campaign_id="1100394165290"):
        ...     logger.info("Pivoting tracking")  # includes campaign_id
    """

    _context: Dict[str, Any] = {}

    def __init__(self, **kwargs: Any):
        """Initialize the log context with extra fields.

        Args:
            **kwargs: Key-value pairs to add to log context
        """
        self.new_context = kwargs
        self.old_context: Dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        """Enter the context and set new fields."""
        self.old_context = LogContext._context.copy()
        LogContext._context.update(self.new_context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit the context and restore the previous fields."""
        LogContext._context = self.old_context

    @classmethod
    def get_context(cls) -> Dict[str, Any]:
        """Get the current log context.

        Returns:
            Copy of the current context fields
        """
        return cls._context.copy()


class ContextAdapter(logging.LoggerAdapter):
    """Logger adapter that automatically includes LogContext fields.

    Example:
        >>> logger = ContextAdapter(get_logger(__name__), {})
        >>> with LogContext(campaign_id="1100394165290"):
        ...     logger.info("Ranking domains")  # automatically includes campaign_id
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        """Process the log message to include context fields.

        The caller's ``extra`` dict is copied, never updated in place.

        Args:
            msg: The log message
            kwargs: Additional keyword arguments

        Returns:
            Tuple of (message, kwargs) with context added
        """
        extra = dict(kwargs.get("extra") or {})
        extra.update(LogContext.get_context())
        kwargs["extra"] = extra
        return msg, kwargs
