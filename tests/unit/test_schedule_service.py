"""Tests for the schedule service."""

import asyncio
from datetime import time

import pytest

from src.core.domain.events import subscribe_to_event
from src.modules.scheduling.application.commands import (
    CheckOverlapCommand,
    DeleteScheduleEntryCommand,
    UpdateScheduleEntryCommand,
)
from src.modules.scheduling.domain.entities import ContentKind, TitleOverride
from src.modules.scheduling.domain.events import (
    ScheduleEntryCreatedEvent,
    ScheduleEntryDeletedEvent,
    ScheduleEntryUpdatedEvent,
)
from src.modules.scheduling.domain.exceptions import (
    InvalidContentError,
    InvalidPlacementError,
    OverlapConflictError,
    ScheduleEntryNotFoundError,
)
from src.modules.scheduling.domain.intervals import SlotKey
from tests.conftest import EDITION, FESTIVAL_DAY, make_create_command

pytestmark = pytest.mark.anyio

NEXT_DAY = FESTIVAL_DAY.replace(day=13)


# ============================================
# Create
# ============================================


class TestCreateEntry:
    async def test_create_resolves_content_and_timing(self, schedule_service) -> None:
        entry = await schedule_service.create_entry(
            make_create_command(discussion_minutes=15, notes="Q&A with director")
        )

        assert entry.edition_id == EDITION
        assert entry.venue_name_cs == "Velký sál"
        assert entry.start_time == time(10, 0)
        assert entry.end_time == "11:45"
        assert entry.total_minutes == 105
        assert entry.content.kind == ContentKind.WORK
        assert entry.content.director == "A. Director"
        assert entry.display_title == "Celovečerní"
        assert entry.notes == "Q&A with director"

    async def test_title_override_replaces_display_title(self, schedule_service) -> None:
        entry = await schedule_service.create_entry(
            make_create_command(title_override=TitleOverride(cs="Zahájení", en="Opening"))
        )
        assert entry.display_title == "Zahájení"
        assert entry.title_override.en == "Opening"

    async def test_group_entry_sums_members(self, schedule_service) -> None:
        entry = await schedule_service.create_entry(
            make_create_command(work_id=None, group_id="shorts", start_time=time(14, 0))
        )
        assert entry.content.kind == ContentKind.GROUP
        assert entry.content.member_count == 2
        assert entry.total_minutes == 65
        assert entry.end_time == "15:05"

    async def test_start_time_is_truncated_to_minute(self, schedule_service) -> None:
        entry = await schedule_service.create_entry(
            make_create_command(start_time=time(10, 0, 42))
        )
        assert entry.start_time == time(10, 0)

    async def test_scenario_back_to_back_then_conflict(
        self, schedule_service, schedule_repository
    ) -> None:
        first = await schedule_service.create_entry(make_create_command())
        await schedule_service.create_entry(
            make_create_command(work_id="short-30", start_time=time(11, 30))
        )

        with pytest.raises(OverlapConflictError) as exc_info:
            await schedule_service.create_entry(
                make_create_command(work_id="short-30", start_time=time(11, 0))
            )

        assert "10:00-11:30" in exc_info.value.message
        assert exc_info.value.conflict.existing_entry_id == first.id
        assert len(schedule_repository) == 2

    async def test_same_time_in_other_venue_is_allowed(self, schedule_service) -> None:
        await schedule_service.create_entry(make_create_command())
        other = await schedule_service.create_entry(make_create_command(venue_id="studio"))
        assert other.venue_id == "studio"

    @pytest.mark.parametrize(
        ("overrides", "error"),
        [
            ({"work_id": "feature", "group_id": "shorts"}, InvalidContentError),
            ({"work_id": None}, InvalidContentError),
            ({"work_id": "missing"}, InvalidContentError),
            ({"work_id": None, "group_id": "missing"}, InvalidContentError),
            ({"venue_id": None}, InvalidPlacementError),
            ({"venue_id": "nowhere"}, InvalidPlacementError),
            ({"day": None}, InvalidPlacementError),
            ({"start_time": None}, InvalidPlacementError),
            ({"discussion_minutes": -5}, InvalidPlacementError),
        ],
    )
    async def test_invalid_requests_persist_nothing(
        self, schedule_service, schedule_repository, overrides, error
    ) -> None:
        with pytest.raises(error):
            await schedule_service.create_entry(make_create_command(**overrides))
        assert len(schedule_repository) == 0

    async def test_explicit_edition_is_kept(self, schedule_service) -> None:
        entry = await schedule_service.create_entry(make_create_command(edition_id="2026"))
        assert entry.edition_id == "2026"

    async def test_create_takes_slot_lock_and_publishes_event(
        self, schedule_service, schedule_repository, event_bus
    ) -> None:
        received = []

        @subscribe_to_event(ScheduleEntryCreatedEvent, bus=event_bus)
        def on_created(event):
            received.append(event)

        entry = await schedule_service.create_entry(make_create_command())

        assert schedule_repository.locked_slots == [[SlotKey("hall", FESTIVAL_DAY)]]
        assert [e.entry_id for e in received] == [entry.id]
        assert received[0].content_kind == "work"

    async def test_concurrent_creates_admit_exactly_one(
        self, schedule_service, schedule_repository
    ) -> None:
        results = await asyncio.gather(
            *(
                schedule_service.create_entry(
                    make_create_command(start_time=time(10, minute))
                )
                for minute in (0, 15, 30)
            ),
            return_exceptions=True,
        )

        created = [r for r in results if not isinstance(r, Exception)]
        rejected = [r for r in results if isinstance(r, OverlapConflictError)]
        assert len(created) == 1
        assert len(rejected) == 2
        assert len(schedule_repository) == 1


# ============================================
# Update
# ============================================


class TestUpdateEntry:
    async def test_move_ignores_its_own_interval(self, schedule_service) -> None:
        entry = await schedule_service.create_entry(make_create_command())

        moved = await schedule_service.update_entry(
            UpdateScheduleEntryCommand(entry_id=entry.id, start_time=time(10, 30))
        )

        assert moved.start_time == time(10, 30)
        assert moved.end_time == "12:00"

    async def test_move_into_another_entry_is_rejected(
        self, schedule_service, schedule_repository
    ) -> None:
        await schedule_service.create_entry(make_create_command())
        later = await schedule_service.create_entry(
            make_create_command(work_id="short-30", start_time=time(12, 0))
        )

        with pytest.raises(OverlapConflictError):
            await schedule_service.update_entry(
                UpdateScheduleEntryCommand(entry_id=later.id, start_time=time(11, 0))
            )

        stored = await schedule_repository.get_by_id(later.id)
        assert stored.start_time == time(12, 0)

    async def test_longer_discussion_is_checked(self, schedule_service) -> None:
        entry = await schedule_service.create_entry(make_create_command())
        await schedule_service.create_entry(
            make_create_command(work_id="short-30", start_time=time(11, 30))
        )

        with pytest.raises(OverlapConflictError):
            await schedule_service.update_entry(
                UpdateScheduleEntryCommand(entry_id=entry.id, discussion_minutes=10)
            )

    async def test_content_swap_uses_new_runtime(self, schedule_service) -> None:
        entry = await schedule_service.create_entry(make_create_command())

        updated = await schedule_service.update_entry(
            UpdateScheduleEntryCommand(entry_id=entry.id, group_id="shorts")
        )

        assert updated.content.kind == ContentKind.GROUP
        assert updated.total_minutes == 65

    async def test_move_to_other_venue_and_day(
        self, schedule_service, schedule_repository
    ) -> None:
        entry = await schedule_service.create_entry(make_create_command())

        moved = await schedule_service.update_entry(
            UpdateScheduleEntryCommand(entry_id=entry.id, venue_id="studio", day=NEXT_DAY)
        )

        assert (moved.venue_id, moved.day) == ("studio", NEXT_DAY)
        assert schedule_repository.locked_slots[-1] == sorted(
            [SlotKey("hall", FESTIVAL_DAY), SlotKey("studio", NEXT_DAY)]
        )

    async def test_notes_only_update_skips_overlap_check(
        self, schedule_service, schedule_repository, catalog
    ) -> None:
        first = await schedule_service.create_entry(make_create_command())
        await schedule_service.create_entry(
            make_create_command(work_id="short-30", start_time=time(11, 30))
        )
        # the first entry now runs into the second one
        catalog.works["feature"].runtime_minutes = 120
        locks_before = len(schedule_repository.locked_slots)

        updated = await schedule_service.update_entry(
            UpdateScheduleEntryCommand(entry_id=first.id, notes="Print arrives Tuesday")
        )

        assert updated.notes == "Print arrives Tuesday"
        assert len(schedule_repository.locked_slots) == locks_before

    async def test_explicit_null_clears_notes(self, schedule_service) -> None:
        entry = await schedule_service.create_entry(make_create_command(notes="draft"))

        updated = await schedule_service.update_entry(
            UpdateScheduleEntryCommand(entry_id=entry.id, notes=None)
        )

        assert updated.notes is None

    async def test_both_content_references_are_rejected(self, schedule_service) -> None:
        entry = await schedule_service.create_entry(make_create_command())

        with pytest.raises(InvalidContentError):
            await schedule_service.update_entry(
                UpdateScheduleEntryCommand(
                    entry_id=entry.id, work_id="short-30", group_id="shorts"
                )
            )

    async def test_clearing_start_time_is_rejected(self, schedule_service) -> None:
        entry = await schedule_service.create_entry(make_create_command())

        with pytest.raises(InvalidPlacementError):
            await schedule_service.update_entry(
                UpdateScheduleEntryCommand(entry_id=entry.id, start_time=None)
            )

    async def test_unknown_entry(self, schedule_service) -> None:
        with pytest.raises(ScheduleEntryNotFoundError):
            await schedule_service.update_entry(
                UpdateScheduleEntryCommand(entry_id="missing", notes="x")
            )

    async def test_update_publishes_changed_fields(
        self, schedule_service, event_bus
    ) -> None:
        received = []

        @subscribe_to_event(ScheduleEntryUpdatedEvent, bus=event_bus)
        def on_updated(event):
            received.append(event)

        entry = await schedule_service.create_entry(make_create_command())
        await schedule_service.update_entry(
            UpdateScheduleEntryCommand(entry_id=entry.id, start_time=time(9, 0))
        )

        assert received[0].updated_fields == ["start_time"]


# ============================================
# Delete / read
# ============================================


class TestDeleteAndRead:
    async def test_delete_frees_the_slot(
        self, schedule_service, schedule_repository, event_bus
    ) -> None:
        received = []

        @subscribe_to_event(ScheduleEntryDeletedEvent, bus=event_bus)
        def on_deleted(event):
            received.append(event)

        entry = await schedule_service.create_entry(make_create_command())
        deleted_id = await schedule_service.delete_entry(
            DeleteScheduleEntryCommand(entry_id=entry.id)
        )

        assert deleted_id == entry.id
        assert len(schedule_repository) == 0
        assert received[0].venue_id == "hall"
        await schedule_service.create_entry(make_create_command())

    async def test_delete_unknown_entry(self, schedule_service) -> None:
        with pytest.raises(ScheduleEntryNotFoundError):
            await schedule_service.delete_entry(
                DeleteScheduleEntryCommand(entry_id="missing")
            )

    async def test_list_orders_by_day_start_and_venue(self, schedule_service) -> None:
        await schedule_service.create_entry(make_create_command(day=NEXT_DAY))
        await schedule_service.create_entry(make_create_command(venue_id="studio"))
        await schedule_service.create_entry(make_create_command())
        await schedule_service.create_entry(
            make_create_command(work_id="short-30", start_time=time(8, 0))
        )

        entries = await schedule_service.list_entries(EDITION)

        assert [(e.day, e.start_time, e.venue_id) for e in entries] == [
            (FESTIVAL_DAY, time(8, 0), "hall"),
            (FESTIVAL_DAY, time(10, 0), "hall"),
            (FESTIVAL_DAY, time(10, 0), "studio"),
            (NEXT_DAY, time(10, 0), "hall"),
        ]

    async def test_list_filters(self, schedule_service) -> None:
        await schedule_service.create_entry(make_create_command(day=NEXT_DAY))
        await schedule_service.create_entry(make_create_command(venue_id="studio"))

        by_day = await schedule_service.list_entries(EDITION, day=NEXT_DAY)
        by_venue = await schedule_service.list_entries(EDITION, venue_id="studio")
        other_edition = await schedule_service.list_entries("2024")

        assert [e.day for e in by_day] == [NEXT_DAY]
        assert [e.venue_id for e in by_venue] == ["studio"]
        assert other_edition == []

    async def test_list_returns_snapshots(
        self, schedule_service, schedule_repository
    ) -> None:
        await schedule_service.create_entry(make_create_command())

        listed = await schedule_service.list_entries(EDITION)
        listed[0].start_time = time(20, 0)
        listed[0].notes = "changed"

        stored = await schedule_repository.list_entries(EDITION)
        assert stored[0].start_time == time(10, 0)
        assert stored[0].notes is None

    async def test_entry_detail_lists_members_in_order(self, schedule_service) -> None:
        entry = await schedule_service.create_entry(
            make_create_command(work_id=None, group_id="shorts")
        )

        detail = await schedule_service.get_entry(entry.id)

        assert [m.work_id for m in detail.members] == ["short-40", "short-25"]
        assert [m.runtime_minutes for m in detail.members] == [40, 25]

    async def test_check_overlap_dry_run(
        self, schedule_service, schedule_repository
    ) -> None:
        entry = await schedule_service.create_entry(make_create_command())

        clash = await schedule_service.check_overlap(
            CheckOverlapCommand(
                venue_id="hall", day=FESTIVAL_DAY, start_time=time(11, 0), work_id="short-30"
            )
        )
        own_slot = await schedule_service.check_overlap(
            CheckOverlapCommand(
                venue_id="hall",
                day=FESTIVAL_DAY,
                start_time=time(10, 30),
                work_id="feature",
                exclude_entry_id=entry.id,
            )
        )

        assert clash.has_overlap is True
        assert clash.conflict_details.existing_entry_id == entry.id
        assert own_slot.has_overlap is False
        assert len(schedule_repository) == 1

    async def test_check_overlap_refuses_unknown_venue(self, schedule_service) -> None:
        with pytest.raises(InvalidPlacementError):
            await schedule_service.check_overlap(
                CheckOverlapCommand(
                    venue_id="nowhere",
                    day=FESTIVAL_DAY,
                    start_time=time(11, 0),
                    work_id="short-30",
                )
            )

    async def test_availability_lists_booked_slots(self, schedule_service) -> None:
        await schedule_service.create_entry(
            make_create_command(work_id="short-30", start_time=time(14, 0))
        )
        await schedule_service.create_entry(make_create_command(discussion_minutes=20))

        availability = await schedule_service.get_availability("hall", FESTIVAL_DAY)

        assert [(s.start_time, s.end_time) for s in availability.booked_slots] == [
            ("10:00", "11:50"),
            ("14:00", "14:30"),
        ]

    async def test_stats(self, schedule_service) -> None:
        await schedule_service.create_entry(make_create_command())
        await schedule_service.create_entry(
            make_create_command(work_id=None, group_id="shorts", venue_id="studio")
        )
        await schedule_service.create_entry(make_create_command(day=NEXT_DAY))

        stats = await schedule_service.get_stats(EDITION)

        assert stats.total_entries == 3
        assert stats.single_works == 2
        assert stats.groups == 1
        assert stats.venues_used == 2
        assert stats.programming_days == 2
        assert stats.total_runtime_minutes == 90 + 65 + 90
        assert [(v.venue_id, v.entries_count) for v in stats.by_venue] == [
            ("hall", 2),
            ("studio", 1),
        ]
