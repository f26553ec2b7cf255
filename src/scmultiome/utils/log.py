"""Structured logging setup

Every pipeline step logs through structlog with a ``step`` field, on top of
the standard library logging machinery so that handlers and levels behave
as usual.
"""
import logging
import sys

import structlog

_CONFIGURED = False


def setup_logging(level: str = "INFO", log_format: str = "console") -> None:
    """
    Configure structlog and the root logger

    Args:
        level: Minimum log level name (DEBUG, INFO, WARNING, ...)
        log_format: "console" for human-readable output, "json" for one JSON
            object per line
    """
    global _CONFIGURED

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer(sort_keys=True)
        if log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )

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
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    _CONFIGURED = True


def get_logger(name: str, **context) -> structlog.stdlib.BoundLogger:
    """
    Return a logger bound to the given context

    Configures logging with defaults on first use if setup_logging has not
    been called yet.

    Example:
        >>> log = get_logger(__name__, step="split")
        >>> log.info("modalities_split", n_expression=10, n_peaks=20)
    """
    if not _CONFIGURED:
        setup_logging()
    logger = structlog.get_logger(name)
    return logger.bind(**context) if context else logger
