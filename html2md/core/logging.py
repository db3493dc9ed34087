"""
Structured logging for html2md.

structlog is routed through the standard library so the usual logging levels
and handlers apply; output goes to stderr because stdout carries Markdown when
the command line tool is used.
"""

import logging
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Optional

import structlog

from .config import Html2MdSettings, get_settings

_is_configured = False
_logger_context: ContextVar[Dict[str, Any]] = ContextVar(
    "html2md_log_context", default={}
)


class ContextProcessor:
    """Add the bound correlation ID and block context to all log entries."""

    def __call__(self, logger, method_name, event_dict):
        context = _logger_context.get()

        if "correlation_id" not in event_dict:
            event_dict["correlation_id"] = context.get("correlation_id", "unknown")

        for key, value in context.items():
            if key in ("correlation_id", "operation_start_time"):
                continue
            event_dict.setdefault(key, value)

        if "operation_start_time" in context:
            duration = time.perf_counter() - context["operation_start_time"]
            event_dict["operation_duration_ms"] = round(duration * 1000, 2)

        return event_dict


class ComponentProcessor:
    """Add component information."""

    def __call__(self, logger, method_name, event_dict):
        event_dict["component"] = "html2md"
        return event_dict


def configure_structured_logging(
    settings: Optional[Html2MdSettings] = None, force: bool = False
) -> None:
    """
    Configure structlog on top of the standard library.

    Args:
        settings: Configuration settings (uses global settings if None)
        force: Reconfigure even if logging was already set up
    """
    global _is_configured

    if _is_configured and not force:
        return

    if settings is None:
        settings = get_settings()

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        ContextProcessor(),
        ComponentProcessor(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.structured_logging:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    level = logging.DEBUG if settings.debug else getattr(logging, settings.level_name)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    logging.getLogger("html2md").setLevel(level)

    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        logging.getLogger("html2md").addHandler(file_handler)

    _is_configured = True


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger with the specified name.

    Args:
        name: Logger name (defaults to the html2md root logger)

    Returns:
        Configured structlog logger
    """
    if not _is_configured:
        configure_structured_logging()

    return structlog.get_logger(name or "html2md")


@contextmanager
def log_context(**kwargs):
    """
    Context manager for adding context to logs.

    Example:
        with log_context(source="page.html"):
            logger.info("Converting document")
    """
    context = dict(_logger_context.get())
    context.update(kwargs)
    token = _logger_context.set(context)
    try:
        yield
    finally:
        _logger_context.reset(token)


@contextmanager
def correlation_context(correlation_id: Optional[str] = None):
    """
    Tag every log entry inside the block with one correlation ID.

    Args:
        correlation_id: Custom correlation ID (generates UUID if None)

    Yields:
        The correlation ID in effect
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    with log_context(correlation_id=correlation_id):
        yield correlation_id


@contextmanager
def performance_context(operation_name: str):
    """
    Context manager for timing an operation at debug level.

    Example:
        with performance_context("html_conversion"):
            converter.convert()
    """
    logger = get_logger()
    start_time = time.perf_counter()

    with log_context(operation=operation_name, operation_start_time=start_time):
        logger.debug("Operation started", operation=operation_name)
        try:
            yield
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.error(
                "Operation failed",
                operation=operation_name,
                duration_ms=round(duration * 1000, 2),
                status="error",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        duration = time.perf_counter() - start_time
        logger.debug(
            "Operation completed",
            operation=operation_name,
            duration_ms=round(duration * 1000, 2),
            status="success",
        )


def log_conversion(
    html_size: int,
    markdown_size: int,
    well_formed: bool,
    duration: Optional[float] = None,
) -> None:
    """Log one HTML to Markdown conversion with standard fields."""
    logger = get_logger("html2md.conversion")

    log_data = {
        "event_type": "conversion",
        "html_size": html_size,
        "markdown_size": markdown_size,
        "well_formed": well_formed,
    }

    if duration is not None:
        log_data["duration_ms"] = round(duration * 1000, 2)

    logger.debug("Conversion completed", **log_data)
