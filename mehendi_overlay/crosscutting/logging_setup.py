"""Logging configuration helpers using structlog."""

from __future__ import annotations

import logging
from typing import Any, Callable

import structlog

LOG_FORMATS = ("console", "json")


def app_context(**context: Any) -> Callable[[Any, str, dict], dict]:
    """Processor stamping every event with fixed application fields."""

    fields = {key: value for key, value in context.items() if value}

    def add_app_context(logger: Any, method_name: str, event_dict: dict) -> dict:
        for key, value in fields.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_app_context


def build_processors(log_format: str = "console", **context: Any) -> list[Any]:
    """Processor chain shared by every logger; only the renderer varies."""

    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format {log_format!r}, expected one of {LOG_FORMATS}")
    renderer = structlog.processors.JSONRenderer() if log_format == "json" else structlog.dev.ConsoleRenderer()
    return [
        structlog.stdlib.filter_by_level,
        app_context(**context),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def setup_logging(
    level: str = "INFO",
    log_format: str = "console",
    app_name: str | None = None,
    app_version: str | None = None,
) -> None:
    """Initialise structlog over stdlib logging and tag events with the app."""

    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
    )
    structlog.configure(
        processors=build_processors(log_format, app=app_name, version=app_version),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, **kwargs: Any) -> structlog.stdlib.BoundLogger:
    """Return a configured structlog logger bound to ``name``."""

    logger = structlog.get_logger(name)
    if kwargs:
        logger = logger.bind(**kwargs)
    return logger


__all__ = ["LOG_FORMATS", "app_context", "build_processors", "setup_logging", "get_logger"]
