"""Structured logging module for multi-model-advisor.

Provides JSON-formatted structured logging using structlog.

Patterns applied:
- Singleton _configured flag prevents reconfiguration
- configure_logging() called ONCE at startup
- Underscore-prefix for unused structlog params
- JSON output via JSONRenderer, written to stderr (stdout stays free
  for hosts that speak a protocol over stdio)
- Correlation ID support via contextvars
- Trace ID of the active span, so log lines join up with traces
"""

import contextvars
import sys
import uuid
from typing import Any, TextIO

import structlog
from structlog.types import EventDict

from multi_model_advisor.observability.tracing import get_current_trace_id


# =============================================================================
# Singleton Configuration State
# =============================================================================
_configured: bool = False
# True while only the implicit defaults from get_logger() are installed
_implicit: bool = False


# =============================================================================
# Correlation ID Context (for request tracing)
# =============================================================================
_correlation_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


def set_correlation_id(correlation_id: str) -> None:
    """Set correlation ID for current async context.

    Args:
        correlation_id: Unique request identifier for tracing.
    """
    _correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    """Get current correlation ID.

    Returns:
        Correlation ID if set, None otherwise.
    """
    return _correlation_id_var.get()


def new_correlation_id() -> str:
    """Generate a correlation ID and bind it to the current context."""
    correlation_id = uuid.uuid4().hex
    set_correlation_id(correlation_id)
    return correlation_id


# =============================================================================
# Custom Processors
# =============================================================================
def add_correlation_id(
    _logger: object, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add correlation ID to log event if set.

    Args:
        _logger: Logger instance (unused - required by structlog interface).
        _method_name: Method name (unused).
        event_dict: Event dictionary to process.

    Returns:
        Event dictionary with correlation_id added if set.
    """
    correlation_id = get_correlation_id()
    if correlation_id is not None:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def add_trace_id(
    _logger: object, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add the active OpenTelemetry trace ID, if any, to the log event."""
    trace_id = get_current_trace_id()
    if trace_id is not None:
        event_dict["trace_id"] = trace_id
    return event_dict


def _level_to_int(level: str) -> int:
    """Convert log level string to integer.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    Returns:
        Integer log level for structlog filtering.
    """
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# =============================================================================
# Singleton Configuration
# =============================================================================
def configure_logging(
    level: str = "INFO",
    stream: TextIO | None = None,
    force: bool = False,
) -> None:
    """Configure structlog ONCE at application startup.

    Subsequent calls are no-ops unless force=True (for testing). The
    defaults installed implicitly by get_logger() are replaced by the
    first explicit call.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        stream: Output stream. Defaults to sys.stderr.
        force: Force reconfiguration (for testing only).
    """
    global _configured, _implicit

    if _configured and not _implicit and not force:
        return

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        add_correlation_id,
        add_trace_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_to_int(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )

    _configured = True
    _implicit = False


def reset_logging() -> None:
    """Reset configuration state for test isolation.

    Only use in tests to allow reconfiguration between tests.
    """
    global _configured, _implicit
    _configured = False
    _implicit = False


def get_logger(name: str) -> Any:
    """Get logger by name.

    Auto-configures with defaults if not already configured. The returned
    logger is a lazy proxy, so module-level loggers pick up the level set
    by the explicit configure_logging() call at startup.

    Args:
        name: Logger name (typically __name__ of the module).

    Returns:
        structlog logger proxy with ``logger_name=name`` bound. The key is
        not ``logger`` because structlog reserves that keyword.
    """
    global _implicit

    if not _configured:
        configure_logging()
        _implicit = True
    return structlog.get_logger(logger_name=name)


def preview(text: str, limit: int = 50) -> str:
    """Shorten text for log output."""
    return text if len(text) <= limit else f"{text[:limit]}..."
