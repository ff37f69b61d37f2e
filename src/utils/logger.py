"""
Structured logging configuration using structlog.

Provides:
- Structured logging with JSON output (production) or console (development)
- Correlation ID context variables for automatic propagation across logs
- Utilities for setting/clearing correlation context
"""
import logging
import sys
from contextvars import ContextVar
from typing import Any, Optional

import structlog
from config import settings


# =============================================================================
# CORRELATION ID CONTEXT VARIABLES
# =============================================================================
# Propagated across awaits (including the fan-out tasks, which copy the
# current context) and added to every entry by add_correlation_ids.

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
generation_id_var: ContextVar[Optional[str]] = ContextVar("generation_id", default=None)


def set_correlation_context(
    request_id: Optional[str] = None,
    generation_id: Optional[str] = None,
) -> None:
    """
    Set correlation IDs in context for automatic log propagation.

    Args:
        request_id: HTTP request identifier
        generation_id: Identifier of one pipeline invocation
    """
    if request_id is not None:
        request_id_var.set(request_id)
    if generation_id is not None:
        generation_id_var.set(generation_id)


def clear_correlation_context() -> None:
    """
    Clear all correlation context variables.

    Call this at the end of a request to prevent context leakage
    between requests.
    """
    request_id_var.set(None)
    generation_id_var.set(None)


def add_correlation_ids(
    logger: Any,
    method_name: str,
    event_dict: dict,
) -> dict:
    """Structlog processor that adds correlation IDs to all log entries."""
    if request_id_var.get():
        event_dict["request_id"] = request_id_var.get()
    if generation_id_var.get():
        event_dict["generation_id"] = generation_id_var.get()
    return event_dict


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================


def configure_logging() -> None:
    """Configure structured logging."""

    # Configure standard logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )

    # Configure structlog
    processors = [
        structlog.contextvars.merge_contextvars,
        add_correlation_ids,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.enable_structured_logging:
        # JSON output for production
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Human-readable output for development
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)


# Initialize logging on import
configure_logging()
