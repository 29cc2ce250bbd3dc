"""Observability - Logging and metrics."""

from .logger import LogContext, configure_logging
from .metrics import LoggerBackend, MetricsCollector

__all__ = [
    "MetricsCollector",
    "LoggerBackend",
    "configure_logging",
    "LogContext",
]
