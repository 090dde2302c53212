"""Scheduling module infrastructure dependencies."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.domain.events import get_event_bus
from src.core.infrastructure.database.session import get_db_session
from src.modules.scheduling.infrastructure.mappers import ScheduleEntryMapper
from src.modules.scheduling.infrastructure.repositories import (
    PostgreSQLScheduleEntryRepository,
)


def get_schedule_entry_mapper() -> ScheduleEntryMapper:
    return ScheduleEntryMapper()


async def get_schedule_entry_repository(
    session: AsyncSession = Depends(get_db_session),
    mapper: ScheduleEntryMapper = Depends(get_schedule_entry_mapper),
) -> PostgreSQLScheduleEntryRepository:
    return PostgreSQLScheduleEntryRepository(session, mapper, get_event_bus())
