"""Utility modules."""
from .logger import get_logger, configure_logging, set_correlation_context, clear_correlation_context
from .metrics import registry

__all__ = [
    "get_logger",
    "configure_logging",
    "set_correlation_context",
    "clear_correlation_context",
    "registry",
]
