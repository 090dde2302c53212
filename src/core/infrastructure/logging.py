"""Logging configuration with structlog integration.

Two loggers with separate jobs:
1. loguru: diagnostic logs for developers
2. structlog: structured business events (placements, rejections, removals)
"""

import sys
from typing import Any

import structlog
from loguru import logger

from src.core.config import settings


def setup_logging() -> None:
    """Configure application logging with structlog and loguru."""
    _configure_structlog()
    _configure_loguru()

    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog() -> None:
    """Configure the structlog processor chain."""
    if settings.ENVIRONMENT == "local":
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(settings.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru() -> None:
    """Configure loguru sinks."""
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if settings.ENVIRONMENT != "local":
        logger.add(
            "logs/scheduler_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="30 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _get_log_level_number(level: str) -> int:
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# Business event logger
# ============================================================================


class BusinessEvents:
    """Helpers that keep business event names and fields consistent.

    Usage:
        BusinessEvents.entry_scheduled(entry_id="e1", venue_id="v1", ...)
        BusinessEvents.placement_rejected(venue_id="v1", day="2025-06-01", ...)
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def entry_scheduled(
        cls,
        entry_id: str,
        venue_id: str,
        day: str,
        start: str,
        end: str,
        content_kind: str,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "entry_scheduled",
            event_type="schedule",
            entry_id=entry_id,
            venue_id=venue_id,
            day=day,
            start=start,
            end=end,
            content_kind=content_kind,
            **extra,
        )

    @classmethod
    def entry_rescheduled(
        cls,
        entry_id: str,
        updated_fields: list[str],
        **extra: Any,
    ) -> None:
        cls._log.info(
            "entry_rescheduled",
            event_type="schedule",
            entry_id=entry_id,
            updated_fields=updated_fields,
            **extra,
        )

    @classmethod
    def entry_removed(cls, entry_id: str, venue_id: str, day: str, **extra: Any) -> None:
        cls._log.info(
            "entry_removed",
            event_type="schedule",
            entry_id=entry_id,
            venue_id=venue_id,
            day=day,
            **extra,
        )

    @classmethod
    def placement_rejected(
        cls,
        venue_id: str,
        day: str,
        reason: str,
        **extra: Any,
    ) -> None:
        cls._log.warning(
            "placement_rejected",
            event_type="conflict",
            venue_id=venue_id,
            day=day,
            reason=reason,
            **extra,
        )
