"""
pytest configuration and shared fixtures.

Test layout:
- unit/: unit tests, no external services; repositories are in-memory fakes

Usage:
    # run everything
    uv run pytest

    # unit tests only
    uv run pytest tests/unit/
"""

import asyncio
from collections.abc import AsyncGenerator
from datetime import date, time

import pytest
from httpx import ASGITransport, AsyncClient

from src.core.domain.events import EventBus
from src.core.infrastructure.database.event_aware_repository import EventAwareRepository
from src.modules.catalog.domain.entities import Group, GroupMember, Venue, Work
from src.modules.catalog.domain.repository import CatalogRepository
from src.modules.scheduling.application.commands import CreateScheduleEntryCommand
from src.modules.scheduling.application.locks import SlotLockRegistry
from src.modules.scheduling.application.services import ScheduleService
from src.modules.scheduling.domain.entities import ScheduleEntry
from src.modules.scheduling.domain.intervals import SlotKey
from src.modules.scheduling.domain.repository import ScheduleEntryRepository

EDITION = "2025"
FESTIVAL_DAY = date(2025, 6, 12)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


# ============================================
# In-memory repositories
# ============================================


class InMemoryCatalogRepository(CatalogRepository):
    """Catalog backed by dicts; tests may edit works and groups in place."""

    def __init__(
        self,
        venues: list[Venue] | None = None,
        works: list[Work] | None = None,
        groups: list[Group] | None = None,
    ) -> None:
        self.venues = {v.id: v for v in venues or []}
        self.works = {w.id: w for w in works or []}
        self.groups = {g.id: g for g in groups or []}

    async def get_venue(self, venue_id: str) -> Venue | None:
        return self.venues.get(venue_id)

    async def list_venues(self, active_only: bool = False) -> list[Venue]:
        venues = [v for v in self.venues.values() if v.is_active or not active_only]
        return sorted(venues, key=lambda v: (v.sort_order, v.name_cs))

    async def get_work(self, work_id: str) -> Work | None:
        return self.works.get(work_id)

    async def get_works(self, work_ids: list[str]) -> dict[str, Work]:
        return {wid: self.works[wid] for wid in work_ids if wid in self.works}

    async def get_group(self, group_id: str) -> Group | None:
        return self.groups.get(group_id)


class InMemoryScheduleEntryRepository(
    EventAwareRepository[ScheduleEntry], ScheduleEntryRepository
):
    """Stores copies, so callers never share state with the store.

    Reads yield to the event loop once, which lets concurrent writers
    interleave between their overlap check and their insert.
    """

    def __init__(self, event_publisher: EventBus | None = None) -> None:
        super().__init__(event_publisher or EventBus())
        self._entries: dict[str, ScheduleEntry] = {}
        self.locked_slots: list[list[SlotKey]] = []

    @staticmethod
    def _copy(entry: ScheduleEntry) -> ScheduleEntry:
        return ScheduleEntry(**entry.model_dump())

    async def get_by_id(self, entity_id: str) -> ScheduleEntry | None:
        await asyncio.sleep(0)
        entry = self._entries.get(entity_id)
        return self._copy(entry) if entry else None

    async def create(self, entity: ScheduleEntry) -> ScheduleEntry:
        self._entries[entity.id] = self._copy(entity)
        await self._publish_events_from_entity(entity)
        return self._copy(entity)

    async def update(self, entity: ScheduleEntry) -> ScheduleEntry:
        self._entries[entity.id] = self._copy(entity)
        await self._publish_events_from_entity(entity)
        return self._copy(entity)

    async def delete(self, entity: ScheduleEntry | str) -> bool:
        entry_id = entity.id if isinstance(entity, ScheduleEntry) else entity
        if self._entries.pop(entry_id, None) is None:
            return False
        if isinstance(entity, ScheduleEntry):
            await self._publish_events_from_entity(entity)
        return True

    async def list_by_slot(self, venue_id: str, day: date) -> list[ScheduleEntry]:
        await asyncio.sleep(0)
        entries = [
            e for e in self._entries.values() if e.venue_id == venue_id and e.day == day
        ]
        return [self._copy(e) for e in sorted(entries, key=lambda e: e.start_time)]

    async def list_entries(
        self,
        edition_id: str,
        day: date | None = None,
        venue_id: str | None = None,
    ) -> list[ScheduleEntry]:
        entries = [
            e
            for e in self._entries.values()
            if e.edition_id == edition_id
            and (day is None or e.day == day)
            and (venue_id is None or e.venue_id == venue_id)
        ]
        return [self._copy(e) for e in sorted(entries, key=lambda e: (e.day, e.start_time))]

    async def lock_slots(self, keys: list[SlotKey]) -> None:
        self.locked_slots.append(list(keys))

    def __len__(self) -> int:
        return len(self._entries)


# ============================================
# Catalog fixtures
# ============================================


@pytest.fixture
def catalog() -> InMemoryCatalogRepository:
    """Three venues (one closed), a handful of works and two groups."""
    return InMemoryCatalogRepository(
        venues=[
            Venue(id="hall", name_cs="Velký sál", name_en="Main Hall", sort_order=1),
            Venue(id="studio", name_cs="Studio", name_en="Studio", sort_order=2),
            Venue(
                id="closed",
                name_cs="Kinosál 3",
                name_en="Cinema 3",
                sort_order=3,
                is_active=False,
            ),
        ],
        works=[
            Work(
                id="feature",
                edition_id=EDITION,
                name_cs="Celovečerní",
                runtime_minutes=90,
                director="A. Director",
                section="Competition",
            ),
            Work(id="short-30", edition_id=EDITION, name_cs="Krátký", runtime_minutes=30),
            Work(id="short-40", edition_id=EDITION, name_cs="Krátký 40", runtime_minutes=40),
            Work(id="short-25", edition_id=EDITION, name_cs="Krátký 25", runtime_minutes="25 min"),
            Work(id="unknown-runtime", edition_id=EDITION, name_cs="Bez délky"),
        ],
        groups=[
            Group(
                id="shorts",
                edition_id=EDITION,
                name_cs="Pásmo krátkých filmů",
                name_en="Shorts programme",
                members=[
                    GroupMember(work_id="short-25", sort_order=2),
                    GroupMember(work_id="short-40", sort_order=1),
                ],
            ),
            Group(id="empty", edition_id=EDITION, name_cs="Prázdné pásmo"),
        ],
    )


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def schedule_repository(event_bus: EventBus) -> InMemoryScheduleEntryRepository:
    return InMemoryScheduleEntryRepository(event_bus)


@pytest.fixture
def schedule_service(
    schedule_repository: InMemoryScheduleEntryRepository,
    catalog: InMemoryCatalogRepository,
) -> ScheduleService:
    return ScheduleService(
        repository=schedule_repository,
        catalog=catalog,
        locks=SlotLockRegistry(),
    )


def make_create_command(**overrides) -> CreateScheduleEntryCommand:
    """A valid placement of the 90 minute feature in the hall at 10:00."""
    data = {
        "venue_id": "hall",
        "day": FESTIVAL_DAY,
        "start_time": time(10, 0),
        "work_id": "feature",
    }
    data.update(overrides)
    return CreateScheduleEntryCommand(**data)


# ============================================
# HTTP client fixtures
# ============================================


@pytest.fixture
async def async_client(
    catalog: InMemoryCatalogRepository,
    schedule_repository: InMemoryScheduleEntryRepository,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with repositories replaced by fakes."""
    from main import app
    from src.modules.catalog.application import dependencies as catalog_app_deps
    from src.modules.scheduling.application import (
        dependencies as scheduling_app_deps,
    )

    original_overrides = dict(app.dependency_overrides)
    app.dependency_overrides[catalog_app_deps.get_catalog_repository] = lambda: catalog
    app.dependency_overrides[scheduling_app_deps.get_schedule_entry_repository] = (
        lambda: schedule_repository
    )

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
    app.dependency_overrides.update(original_overrides)
