"""
Logging configuration for the image operations service.

Features:
- JSON structured logs via structlog for production
- Pretty console output for development
- Request trace IDs carried in a context variable
- Third-party library noise filtering
- Dual streams: INFO/DEBUG -> stdout, WARNING/ERROR/CRITICAL -> stderr

Architecture:
- structlog: Structured logging with context
- python-json-logger: JSON formatting for log aggregation
- Standard library logging: Backend compatibility
"""

import logging
import logging.config
from contextvars import ContextVar
from typing import Any, Dict, Optional
import structlog
from structlog.types import EventDict
from pythonjsonlogger import jsonlogger


# Trace ID of the request being served (set by middleware).
# A ContextVar keeps concurrent requests on threads and tasks isolated.
_trace_id_context: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)


def set_trace_id(trace_id: str) -> None:
    """Set the trace ID for the current request context."""
    _trace_id_context.set(trace_id)


def get_trace_id() -> Optional[str]:
    """Get the current trace ID.

    Returns:
        Trace ID if set, None otherwise
    """
    return _trace_id_context.get()


def clear_trace_id() -> None:
    """Clear the trace ID after request completes."""
    _trace_id_context.set(None)


# Aliases for clients that still send X-Correlation-ID
set_correlation_id = set_trace_id
get_correlation_id = get_trace_id
clear_correlation_id = clear_trace_id


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add service name, version, environment and trace ID to every record."""
    from imageops.core.config import settings

    event_dict["service"] = settings.SERVICE_NAME
    event_dict["version"] = settings.VERSION
    event_dict["environment"] = settings.ENVIRONMENT

    trace_id = get_trace_id()
    if trace_id:
        event_dict["trace_id"] = trace_id
        event_dict["correlation_id"] = trace_id

    return event_dict


def add_log_level(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add log level to event dict for consistency."""
    event_dict["level"] = method_name.upper()
    return event_dict


def configure_structlog(debug: bool = False, json_logs: bool = True) -> None:
    """Configure structlog for structured logging.

    Args:
        debug: Colorize console output
        json_logs: Use JSON formatting (True) or console (False)
    """
    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        add_log_level,
    ]

    if not json_logs:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(
                colors=debug,
                exception_formatter=structlog.dev.plain_traceback,
            )
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that guarantees timestamp, level, logger and trace fields."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get('timestamp'):
            log_record['timestamp'] = self.formatTime(record, self.datefmt)

        if not log_record.get('level'):
            log_record['level'] = record.levelname.upper()
        else:
            log_record['level'] = log_record['level'].upper()

        log_record['logger'] = record.name

        trace_id = get_trace_id()
        if trace_id:
            log_record.setdefault('trace_id', trace_id)
            log_record.setdefault('correlation_id', trace_id)


class InfoAndBelowFilter(logging.Filter):
    """Filter that only allows INFO and below (DEBUG) to pass.

    Used to separate INFO/DEBUG logs on stdout from WARNING and above on stderr.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= logging.INFO


def get_logging_config(debug: bool = False, json_logs: bool = True) -> Dict[str, Any]:
    """Generate logging dictConfig.

    Creates dual-stream logging configuration:
    - stdout: INFO and DEBUG level logs
    - stderr: WARNING, ERROR and CRITICAL level logs

    Args:
        debug: Enable debug mode
        json_logs: Use JSON formatting

    Returns:
        Dictionary configuration for logging.config.dictConfig
    """
    from imageops.core.config import settings

    log_level = settings.LOG_LEVEL.upper()

    if debug and not json_logs:
        formatter_class = "logging.Formatter"
        formatter_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    else:
        formatter_class = "imageops.core.logging_config.CustomJsonFormatter"
        formatter_format = "%(timestamp)s %(level)s %(name)s %(message)s"

    handlers = ["stdout", "stderr"]

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": formatter_class,
                "format": formatter_format,
            },
            "console": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "level": "DEBUG",
                "formatter": "json" if json_logs else "console",
                "stream": "ext://sys.stdout",
                "filters": ["info_and_below"],
            },
            "stderr": {
                "class": "logging.StreamHandler",
                "level": "WARNING",
                "formatter": "json" if json_logs else "console",
                "stream": "ext://sys.stderr",
            },
        },
        "filters": {
            "info_and_below": {
                "()": "imageops.core.logging_config.InfoAndBelowFilter",
            },
        },
        "loggers": {
            "": {"handlers": handlers, "level": log_level, "propagate": False},
            "imageops": {"handlers": handlers, "level": log_level, "propagate": False},
            "fastapi": {"handlers": handlers, "level": "INFO", "propagate": False},
            "uvicorn": {"handlers": handlers, "level": "INFO", "propagate": False},
            # Disabled - RequestLoggingMiddleware logs every request
            "uvicorn.access": {"handlers": [], "level": "CRITICAL", "propagate": False},
            "uvicorn.error": {"handlers": ["stderr"], "level": "INFO", "propagate": False},
            "asyncio": {"handlers": ["stderr"], "level": "WARNING", "propagate": False},
            # Pillow logs every plugin lookup at DEBUG
            "PIL": {"handlers": handlers, "level": "WARNING", "propagate": False},
        },
    }


def setup_logging(debug: bool = False, json_logs: bool = True) -> None:
    """Initialize the complete logging system.

    Call this once at application startup.

    Example:
        >>> from imageops.core.config import settings
        >>> from imageops.core.logging_config import setup_logging
        >>> setup_logging(debug=settings.is_debug_mode, json_logs=settings.use_json_logs)
    """
    logging.config.dictConfig(get_logging_config(debug=debug, json_logs=json_logs))
    configure_structlog(debug=debug, json_logs=json_logs)

    logger = get_logger(__name__)
    logger.info(
        "logging_system_initialized",
        debug_mode=debug,
        json_logs=json_logs,
        log_level=logging.getLevelName(logging.root.level),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("operation_completed", operation="resize", duration_ms=12.4)
    """
    return structlog.get_logger(name)
