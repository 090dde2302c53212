"""Scheduling module application dependencies.

Provides services without importing infrastructure; repositories are bound
through dependency overrides in main.py.
"""

from typing import NoReturn

from fastapi import Depends

from src.modules.catalog.application.dependencies import get_catalog_repository
from src.modules.catalog.domain.repository import CatalogRepository
from src.modules.scheduling.application.services import (
    ScheduleService,
    TimelineQueryService,
)
from src.modules.scheduling.domain.repository import ScheduleEntryRepository
from src.modules.scheduling.domain.timeline import TimelineProjector


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_schedule_entry_repository() -> ScheduleEntryRepository:
    _missing_dependency("ScheduleEntryRepository")


def get_timeline_projector() -> TimelineProjector:
    return TimelineProjector.from_settings()


async def get_schedule_service(
    repository: ScheduleEntryRepository = Depends(get_schedule_entry_repository),
    catalog: CatalogRepository = Depends(get_catalog_repository),
) -> ScheduleService:
    return ScheduleService(repository=repository, catalog=catalog)


async def get_timeline_service(
    schedule_service: ScheduleService = Depends(get_schedule_service),
    catalog: CatalogRepository = Depends(get_catalog_repository),
    projector: TimelineProjector = Depends(get_timeline_projector),
) -> TimelineQueryService:
    return TimelineQueryService(
        schedule_service=schedule_service,
        catalog=catalog,
        projector=projector,
    )
