"""Utility modules."""

from threadmail.utils.logger import bind_context, clear_context, get_logger
from threadmail.utils.tracing import get_tracer, init_tracing, shutdown_tracing

__all__ = [
    "get_logger",
    "bind_context",
    "clear_context",
    "get_tracer",
    "init_tracing",
    "shutdown_tracing",
]
