"""
Structured Logging
==================
structlog integration for cache and engine events.

Events are routed through the standard ``logging`` tree, so handlers set
up by ``setup_logging`` (and pytest's ``caplog``) receive them.

Usage:
    from quattrodue.utils.structured_logging import get_structured_logger

    log = get_structured_logger("quattrodue.cache")
    log.info("cache_miss", month="2024-02")
"""
import logging
from typing import Any

import structlog


def configure_structlog(json_output: bool = False, level: str = "INFO") -> None:
    """
    Configure structlog for the application.

    Args:
        json_output: If True, render JSON (for production).
                    If False, render key=value console lines.
        level: Minimum level passed on to the stdlib logger.
    """
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        # Production: JSON output
        processors += [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        # Development: key=value console output
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_structured_logger(name: str) -> Any:
    """
    Get a structured logger.

    Args:
        name: Logger name (e.g., "quattrodue.cache")

    Returns:
        structlog bound logger
    """
    if not structlog.is_configured():
        # Let the stdlib handlers decide what is emitted
        configure_structlog(level="DEBUG")
    return structlog.get_logger(name)


def bind_context(**kwargs) -> None:
    """
    Bind context variables for all subsequent log calls.

    Args:
        **kwargs: Context values (e.g., request_id="abc123")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all context variables."""
    structlog.contextvars.clear_contextvars()
