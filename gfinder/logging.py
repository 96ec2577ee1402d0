"""Structured JSON logging for the bot process."""

from __future__ import annotations

import logging
from typing import Any

import structlog

SERVICE_NAME = "gfinder"


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: int | str = logging.INFO, *, environment: str | None = None) -> None:
    """Route stdlib and structlog output to stdout as one JSON object per line.

    Every event carries ``service`` and, when given, ``environment`` so lines
    from several deployments can share a sink.
    """

    resolved = _resolve_level(level)
    context: dict[str, Any] = {"service": SERVICE_NAME}
    if environment:
        context["environment"] = environment

    def add_context(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        for key, value in context.items():
            event_dict.setdefault(key, value)
        return event_dict

    logging.basicConfig(level=resolved, format="%(message)s", handlers=[logging.StreamHandler()])
    structlog.configure(
        processors=[
            add_context,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolved),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger()

__all__ = ["SERVICE_NAME", "configure_logging", "logger"]
