"""Utilities package for QuattroDue."""
from .logging_setup import (
    TRACE,
    get_logger,
    log_check,
    log_function_call,
    setup_logging,
)
from .structured_logging import configure_structlog, get_structured_logger

__all__ = [
    "setup_logging",
    "get_logger",
    "log_function_call",
    "log_check",
    "TRACE",
    "configure_structlog",
    "get_structured_logger",
]
