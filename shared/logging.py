"""
Shared logging configuration for the Cedar policy boundary.
"""

import sys
import structlog
import logging
import uuid
import time
from typing import Any, Dict, Optional, TextIO
from contextvars import ContextVar

try:
    from opentelemetry import trace
    HAS_OPENTELEMETRY = True
except ImportError:
    HAS_OPENTELEMETRY = False

# Context variables for correlation IDs
call_id_var: ContextVar[Optional[str]] = ContextVar('call_id', default=None)
operation_var: ContextVar[Optional[str]] = ContextVar('operation', default=None)


def configure_structlog() -> None:
    """Route structlog through the standard library logging module."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_service_context,
            add_trace_context,
            add_correlation_context,
            add_timestamp,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def ensure_logging() -> None:
    """Configure structlog unless the application already has.

    Only structlog is set up here. Levels and handlers stay with the
    application's standard library logging configuration.
    """
    if not structlog.is_configured():
        configure_structlog()


def configure_logging(service_name: str, log_level: str = "info", stream: Optional[TextIO] = None) -> None:
    """Configure structured logging for a process.

    Logs go to stderr unless another stream is given; stdout is reserved for
    envelopes when the boundary runs from the command line.
    """
    configure_structlog()

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=getattr(logging, log_level.upper()),
    )


def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add service context to log events."""
    # Extract service name from logger name
    logger_name = event_dict.get("logger", "")
    if "." in logger_name:
        service_name = logger_name.split(".")[0]
        event_dict["service"] = service_name

    return event_dict


def add_trace_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add trace context to log events."""
    if HAS_OPENTELEMETRY:
        # Get current trace context
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                event_dict["trace_id"] = f"{span_context.trace_id:032x}"
            if span_context.span_id != 0:
                event_dict["span_id"] = f"{span_context.span_id:016x}"

    return event_dict


def add_correlation_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add correlation context to log events."""
    call_id = call_id_var.get()
    if call_id:
        event_dict["call_id"] = call_id

    operation = operation_var.get()
    if operation:
        event_dict.setdefault("operation", operation)

    return event_dict


def add_timestamp(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add high-precision timestamp to log events."""
    event_dict["timestamp"] = time.time()
    return event_dict


def set_call_context(operation: str, call_id: Optional[str] = None) -> str:
    """Set the correlation context for one boundary call."""
    if call_id is None:
        call_id = str(uuid.uuid4())
    call_id_var.set(call_id)
    operation_var.set(operation)
    return call_id


def clear_context():
    """Clear all context variables."""
    call_id_var.set(None)
    operation_var.set(None)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
