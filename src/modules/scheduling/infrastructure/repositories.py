"""Schedule entry repository implementation."""

from datetime import date

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from src.core.domain.events import EventBus
from src.core.domain.exceptions import EntityNotFoundError
from src.core.infrastructure.database.event_aware_repository import EventAwareRepository
from src.modules.scheduling.domain.entities import ScheduleEntry
from src.modules.scheduling.domain.intervals import SlotKey
from src.modules.scheduling.domain.repository import ScheduleEntryRepository
from src.modules.scheduling.infrastructure.mappers import ScheduleEntryMapper
from src.modules.scheduling.infrastructure.models import ScheduleEntryModel


class PostgreSQLScheduleEntryRepository(
    EventAwareRepository[ScheduleEntry], ScheduleEntryRepository
):
    """PostgreSQL schedule entry repository implementation."""

    def __init__(
        self,
        session: AsyncSession,
        mapper: ScheduleEntryMapper,
        event_publisher: EventBus,
    ):
        super().__init__(event_publisher)
        self.session = session
        self.mapper = mapper

    async def get_by_id(self, entry_id: str) -> ScheduleEntry | None:
        model = await self.session.get(
            ScheduleEntryModel, entry_id, populate_existing=True
        )
        return self.mapper.to_domain(model) if model else None

    async def list_by_slot(self, venue_id: str, day: date) -> list[ScheduleEntry]:
        statement = (
            select(ScheduleEntryModel)
            .where(
                ScheduleEntryModel.venue_id == venue_id,
                ScheduleEntryModel.day == day,
            )
            .order_by(col(ScheduleEntryModel.start_time))
        )
        result = await self.session.execute(statement)
        return self.mapper.to_domain_list(list(result.scalars().all()))

    async def list_entries(
        self,
        edition_id: str,
        day: date | None = None,
        venue_id: str | None = None,
    ) -> list[ScheduleEntry]:
        statement = select(ScheduleEntryModel).where(
            ScheduleEntryModel.edition_id == edition_id
        )
        if day is not None:
            statement = statement.where(ScheduleEntryModel.day == day)
        if venue_id is not None:
            statement = statement.where(ScheduleEntryModel.venue_id == venue_id)
        statement = statement.order_by(
            col(ScheduleEntryModel.day), col(ScheduleEntryModel.start_time)
        )
        result = await self.session.execute(statement)
        return self.mapper.to_domain_list(list(result.scalars().all()))

    async def lock_slots(self, keys: list[SlotKey]) -> None:
        """Take a transaction-scoped advisory lock per slot, in sorted order.

        The locks are released by the commit or rollback that ends the
        request's transaction.
        """
        for key in sorted(set(keys)):
            await self.session.execute(
                text("SELECT pg_advisory_xact_lock(hashtextextended(:name, 0))"),
                {"name": key.lock_name()},
            )

    async def create(self, entry: ScheduleEntry) -> ScheduleEntry:
        model = self.mapper.to_model(entry)
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        await self._publish_events_from_entity(entry)
        return self.mapper.to_domain(model)

    async def update(self, entry: ScheduleEntry) -> ScheduleEntry:
        existing = await self.session.get(ScheduleEntryModel, entry.id)
        if not existing:
            raise EntityNotFoundError("Schedule entry", entry.id)

        self.mapper.copy_to_model(entry, existing)

        self.session.add(existing)
        await self.session.flush()
        await self.session.refresh(existing)
        await self._publish_events_from_entity(entry)
        return self.mapper.to_domain(existing)

    async def delete(self, entry: ScheduleEntry | str) -> bool:
        entry_id = entry.id if isinstance(entry, ScheduleEntry) else entry
        model = await self.session.get(ScheduleEntryModel, entry_id)
        if not model:
            return False

        await self.session.delete(model)
        await self.session.flush()
        if isinstance(entry, ScheduleEntry):
            await self._publish_events_from_entity(entry)
        return True
