"""structlog setup: coloured console lines plus one JSON object per line in output/logs/app.jsonl.

Configured on the first ``get_logger`` call. Request handlers bind ``method``/``path`` with
``bind_context`` so every event logged while serving a request carries them.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

from threadmail.config import LOG_FILE, LOG_LEVEL, VERBOSE_LOGGING

BoundLogger = structlog.stdlib.BoundLogger

# Libraries whose INFO output drowns ours: per-statement SQL, per-request access lines, form parsing
NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access", "multipart", "python_multipart")

_configured = False


def _level() -> int:
    if VERBOSE_LOGGING:
        return logging.DEBUG
    if LOG_LEVEL.isdigit():
        return int(LOG_LEVEL)
    value = logging.getLevelName(LOG_LEVEL)  # int for known names, "Level X" otherwise
    return value if isinstance(value, int) else logging.INFO


def _handler(handler: logging.Handler, renderer: Any, level: int, shared: list) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared))
    return handler


def _configure_logging() -> None:
    global _configured
    if _configured:
        return

    level = _level()
    shared = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(_handler(logging.StreamHandler(), structlog.dev.ConsoleRenderer(colors=True), level, shared))
    root.addHandler(
        _handler(logging.FileHandler(LOG_FILE, encoding="utf-8"), structlog.processors.JSONRenderer(), level, shared)
    )
    logging.captureWarnings(True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=[
            *shared,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str = "threadmail", **bindings: Any) -> BoundLogger:
    """Return a structlog logger named ``name``, bound with ``bindings``."""
    _configure_logging()
    logger = structlog.get_logger(name)
    return logger.bind(**bindings) if bindings else logger


def bind_context(**context: Any) -> None:
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
