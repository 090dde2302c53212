"""Schedule application services."""

from dataclasses import dataclass
from datetime import date, time

from loguru import logger

from src.core.infrastructure.logging import BusinessEvents
from src.modules.catalog.domain.entities import Venue
from src.modules.catalog.domain.repository import CatalogRepository
from src.modules.scheduling.application.commands import (
    CheckOverlapCommand,
    CreateScheduleEntryCommand,
    DeleteScheduleEntryCommand,
    UpdateScheduleEntryCommand,
)
from src.modules.scheduling.application.locks import SlotLockRegistry, get_slot_locks
from src.modules.scheduling.application.models import (
    AvailabilityData,
    BookedSlotData,
    ContentSummaryData,
    GroupMemberData,
    OverlapCheckData,
    ScheduleEntryData,
    ScheduleEntryDetailData,
    ScheduleStatsData,
    TimelineBoxData,
    TimelineData,
    TimelineRowData,
    VenueStatsData,
)
from src.modules.scheduling.domain.entities import (
    ContentKind,
    GroupContent,
    ScheduleEntry,
    WorkContent,
    content_from_refs,
)
from src.modules.scheduling.domain.exceptions import (
    InvalidContentError,
    InvalidPlacementError,
    OverlapConflictError,
    ScheduleEntryNotFoundError,
)
from src.modules.scheduling.domain.intervals import Interval, SlotKey, format_minutes
from src.modules.scheduling.domain.overlap import OverlapDetector, require_placement
from src.modules.scheduling.domain.repository import ScheduleEntryRepository
from src.modules.scheduling.domain.runtime import RuntimeAggregator, work_minutes
from src.modules.scheduling.domain.timeline import TimelineProjector


@dataclass(frozen=True)
class _Placement:
    """Merged placement fields of an entry being written."""

    venue_id: str
    day: date
    start_time: time
    content: WorkContent | GroupContent
    discussion_minutes: int

    @property
    def slot_key(self) -> SlotKey:
        return SlotKey(self.venue_id, self.day)


class ScheduleService:
    """Owns schedule entries and guards every write with an overlap check.

    Check and write for a slot run under that slot's lock, both in-process
    and, through ``ScheduleEntryRepository.lock_slots``, in the database
    transaction, so concurrent requests cannot double-book a venue.
    """

    def __init__(
        self,
        repository: ScheduleEntryRepository,
        catalog: CatalogRepository,
        locks: SlotLockRegistry | None = None,
    ) -> None:
        self._repo = repository
        self._catalog = catalog
        self._locks = locks if locks is not None else get_slot_locks()
        self.runtime = RuntimeAggregator(catalog)
        self.detector = OverlapDetector(repository, self.runtime)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_entry(
        self, command: CreateScheduleEntryCommand
    ) -> ScheduleEntryData:
        """Place a work or group.

        Raises:
            InvalidPlacementError: Venue, day or time missing or unknown venue.
            InvalidContentError: Not exactly one existing work or group.
            OverlapConflictError: The slot is taken.
        """
        content = content_from_refs(command.work_id, command.group_id)
        require_placement(
            command.venue_id,
            command.day,
            command.start_time,
            command.discussion_minutes,
        )
        content_edition_id = await self._require_content(content)
        await self._require_venue(command.venue_id)

        placement = _Placement(
            venue_id=command.venue_id,
            day=command.day,
            start_time=command.start_time,
            content=content,
            discussion_minutes=command.discussion_minutes,
        )
        async with self._locks.hold([placement.slot_key]):
            await self._repo.lock_slots([placement.slot_key])
            await self._ensure_free(placement)

            entry = ScheduleEntry.schedule(
                edition_id=command.edition_id or content_edition_id,
                venue_id=placement.venue_id,
                day=placement.day,
                start_time=placement.start_time,
                content=content,
                discussion_minutes=placement.discussion_minutes,
                title_override=command.title_override,
                notes=command.notes,
            )
            created = await self._repo.create(entry)

        data = await self._to_data(created)
        BusinessEvents.entry_scheduled(
            entry_id=data.id,
            venue_id=data.venue_id,
            day=data.day.isoformat(),
            start=data.start_time.strftime("%H:%M"),
            end=data.end_time,
            content_kind=data.content.kind.value,
        )
        return data

    async def update_entry(
        self, command: UpdateScheduleEntryCommand
    ) -> ScheduleEntryData:
        """Apply a partial update.

        Notes-only and title-only edits skip the overlap check. Anything that
        moves the interval is checked with the merged values, ignoring the
        entry itself.
        """
        entry = await self._get_entry_or_raise(command.entry_id)

        if not command.touches_placement():
            updated_fields = entry.apply_changes(command.metadata_changes())
            if updated_fields:
                entry = await self._repo.update(entry)
                BusinessEvents.entry_rescheduled(
                    entry_id=entry.id, updated_fields=updated_fields
                )
            return await self._to_data(entry)

        if command.changes_content():
            await self._require_content(
                content_from_refs(command.work_id, command.group_id)
            )

        placement = self._merge(entry, command)
        if placement.venue_id != entry.venue_id:
            await self._require_venue(placement.venue_id)

        while True:
            # moves hold both the slot they leave and the slot they enter
            keys = sorted({entry.slot_key, placement.slot_key})
            async with self._locks.hold(keys):
                await self._repo.lock_slots(keys)

                # another writer may have moved the entry while we waited
                entry = await self._get_entry_or_raise(command.entry_id)
                placement = self._merge(entry, command)
                if {entry.slot_key, placement.slot_key} - set(keys):
                    continue

                await self._ensure_free(placement, exclude_entry_id=entry.id)
                updated_fields = entry.apply_changes(
                    {
                        "venue_id": placement.venue_id,
                        "day": placement.day,
                        "start_time": placement.start_time,
                        "content": placement.content,
                        "discussion_minutes": placement.discussion_minutes,
                        **command.metadata_changes(),
                    }
                )
                if not updated_fields:
                    return await self._to_data(entry)
                saved = await self._repo.update(entry)
                break

        BusinessEvents.entry_rescheduled(entry_id=saved.id, updated_fields=updated_fields)
        return await self._to_data(saved)

    async def delete_entry(self, command: DeleteScheduleEntryCommand) -> str:
        """Remove an entry; no other records are touched."""
        entry = await self._get_entry_or_raise(command.entry_id)
        entry.mark_removed()
        if not await self._repo.delete(entry):
            raise ScheduleEntryNotFoundError(command.entry_id)

        BusinessEvents.entry_removed(
            entry_id=entry.id, venue_id=entry.venue_id, day=entry.day.isoformat()
        )
        return entry.id

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def check_overlap(self, command: CheckOverlapCommand) -> OverlapCheckData:
        """Run the placement check without writing anything."""
        content = content_from_refs(command.work_id, command.group_id)
        require_placement(
            command.venue_id,
            command.day,
            command.start_time,
            command.discussion_minutes,
        )
        await self._require_content(content)
        await self._require_venue(command.venue_id)

        result = await self.detector.check_overlap(
            venue_id=command.venue_id,
            day=command.day,
            start_time=command.start_time,
            content=content,
            discussion_minutes=command.discussion_minutes,
            exclude_entry_id=command.exclude_entry_id,
        )
        return OverlapCheckData(
            has_overlap=result.overlaps,
            conflict_details=result.conflict,
        )

    async def get_entry(self, entry_id: str) -> ScheduleEntryDetailData:
        entry = await self._get_entry_or_raise(entry_id)
        summary, members = await self._summarize(entry.content)
        data = await self._to_data(entry, summary=summary)
        return ScheduleEntryDetailData(**data.model_dump(), members=members)

    async def list_entries(
        self,
        edition_id: str,
        day: date | None = None,
        venue_id: str | None = None,
    ) -> list[ScheduleEntryData]:
        """Entries ordered by day, start time and venue position."""
        entries = await self._repo.list_entries(edition_id, day=day, venue_id=venue_id)
        venues = {venue.id: venue for venue in await self._catalog.list_venues()}

        items = [await self._to_data(entry, venues=venues) for entry in entries]
        items.sort(key=lambda item: (item.day, item.start_time, item.venue_sort_order))
        return items

    async def get_availability(self, venue_id: str, day: date) -> AvailabilityData:
        """Booked intervals of a venue on a day, in start order."""
        booked: list[BookedSlotData] = []
        for entry in await self._repo.list_by_slot(venue_id, day):
            total = await self.runtime.entry_duration(entry)
            interval = Interval.from_start(entry.start_time, total)
            booked.append(
                BookedSlotData(
                    entry_id=entry.id,
                    start_time=interval.format_start(),
                    end_time=interval.format_end(),
                    total_minutes=total,
                )
            )
        return AvailabilityData(venue_id=venue_id, day=day, booked_slots=booked)

    async def get_stats(self, edition_id: str) -> ScheduleStatsData:
        """Programme totals and per-venue load for active venues."""
        entries = await self._repo.list_entries(edition_id)

        totals: dict[str, int] = {}
        counts: dict[str, int] = {}
        total_runtime = 0
        for entry in entries:
            minutes = await self.runtime.entry_duration(entry)
            total_runtime += minutes
            totals[entry.venue_id] = totals.get(entry.venue_id, 0) + minutes
            counts[entry.venue_id] = counts.get(entry.venue_id, 0) + 1

        by_venue = [
            VenueStatsData(
                venue_id=venue.id,
                venue_name=venue.name_cs,
                entries_count=counts.get(venue.id, 0),
                total_runtime_minutes=totals.get(venue.id, 0),
            )
            for venue in await self._catalog.list_venues(active_only=True)
        ]

        return ScheduleStatsData(
            total_entries=len(entries),
            single_works=sum(
                1 for entry in entries if isinstance(entry.content, WorkContent)
            ),
            groups=sum(
                1 for entry in entries if isinstance(entry.content, GroupContent)
            ),
            venues_used=len(counts),
            programming_days=len({entry.day for entry in entries}),
            total_runtime_minutes=total_runtime,
            by_venue=by_venue,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get_entry_or_raise(self, entry_id: str) -> ScheduleEntry:
        entry = await self._repo.get_by_id(entry_id)
        if entry is None:
            raise ScheduleEntryNotFoundError(entry_id)
        return entry

    async def _require_venue(self, venue_id: str) -> Venue:
        venue = await self._catalog.get_venue(venue_id)
        if venue is None:
            raise InvalidPlacementError(f"Venue '{venue_id}' does not exist")
        return venue

    async def _require_content(self, content: WorkContent | GroupContent) -> str:
        """Check the referenced work or group exists; return its edition."""
        if isinstance(content, WorkContent):
            work = await self._catalog.get_work(content.work_id)
            if work is None:
                raise InvalidContentError(f"Work '{content.work_id}' does not exist")
            return work.edition_id

        group = await self._catalog.get_group(content.group_id)
        if group is None:
            raise InvalidContentError(f"Group '{content.group_id}' does not exist")
        return group.edition_id

    @staticmethod
    def _merge(
        entry: ScheduleEntry, command: UpdateScheduleEntryCommand
    ) -> _Placement:
        specified = command.specified_fields()
        venue_id = command.venue_id if "venue_id" in specified else entry.venue_id
        day = command.day if "day" in specified else entry.day
        start_time = command.start_time if "start_time" in specified else entry.start_time
        discussion = (
            command.discussion_minutes
            if command.discussion_minutes is not None
            else entry.discussion_minutes
        )
        require_placement(venue_id, day, start_time, discussion)

        content = entry.content
        if command.changes_content():
            content = content_from_refs(command.work_id, command.group_id)

        return _Placement(
            venue_id=venue_id,
            day=day,
            start_time=start_time,
            content=content,
            discussion_minutes=discussion,
        )

    async def _ensure_free(
        self, placement: _Placement, exclude_entry_id: str | None = None
    ) -> None:
        result = await self.detector.check_overlap(
            venue_id=placement.venue_id,
            day=placement.day,
            start_time=placement.start_time,
            content=placement.content,
            discussion_minutes=placement.discussion_minutes,
            exclude_entry_id=exclude_entry_id,
        )
        if result.overlaps and result.conflict is not None:
            BusinessEvents.placement_rejected(
                venue_id=placement.venue_id,
                day=placement.day.isoformat(),
                reason="overlap",
                conflicting_entry_id=result.conflict.existing_entry_id,
                candidate_start=result.conflict.candidate_start,
                candidate_end=result.conflict.candidate_end,
            )
            raise OverlapConflictError(result.conflict)

    async def _summarize(
        self, content: WorkContent | GroupContent
    ) -> tuple[ContentSummaryData, list[GroupMemberData]]:
        if isinstance(content, WorkContent):
            work = await self._catalog.get_work(content.work_id)
            return (
                ContentSummaryData(
                    kind=ContentKind.WORK,
                    id=content.work_id,
                    name_cs=work.name_cs if work else None,
                    name_en=work.name_en if work else None,
                    runtime_minutes=work_minutes(work),
                    director=work.director if work else None,
                    section=work.section if work else None,
                ),
                [],
            )

        group = await self._catalog.get_group(content.group_id)
        if group is None:
            logger.warning(f"Scheduled group {content.group_id} missing from catalog")
            return (
                ContentSummaryData(kind=ContentKind.GROUP, id=content.group_id),
                [],
            )

        works = await self._catalog.get_works(group.ordered_work_ids())
        members = [
            GroupMemberData(
                work_id=member.work_id,
                sort_order=member.sort_order,
                name_cs=works[member.work_id].name_cs if member.work_id in works else None,
                name_en=works[member.work_id].name_en if member.work_id in works else None,
                runtime_minutes=work_minutes(works.get(member.work_id)),
                director=(
                    works[member.work_id].director if member.work_id in works else None
                ),
            )
            for member in sorted(group.members, key=lambda m: m.sort_order)
        ]
        return (
            ContentSummaryData(
                kind=ContentKind.GROUP,
                id=group.id,
                name_cs=group.name_cs,
                name_en=group.name_en,
                runtime_minutes=sum(m.runtime_minutes for m in members),
                member_count=len(members),
            ),
            members,
        )

    async def _to_data(
        self,
        entry: ScheduleEntry,
        venues: dict[str, Venue] | None = None,
        summary: ContentSummaryData | None = None,
    ) -> ScheduleEntryData:
        venue = (
            venues.get(entry.venue_id)
            if venues is not None
            else await self._catalog.get_venue(entry.venue_id)
        )
        if summary is None:
            summary, _ = await self._summarize(entry.content)

        total = summary.runtime_minutes + entry.discussion_minutes
        interval = Interval.from_start(entry.start_time, total)

        return ScheduleEntryData(
            id=entry.id,
            edition_id=entry.edition_id,
            venue_id=entry.venue_id,
            venue_name_cs=venue.name_cs if venue else None,
            venue_name_en=venue.name_en if venue else None,
            venue_sort_order=venue.sort_order if venue else 0,
            day=entry.day,
            start_time=entry.start_time,
            end_time=interval.format_end(),
            content=summary,
            discussion_minutes=entry.discussion_minutes,
            total_minutes=total,
            title_override=entry.title_override,
            display_title=entry.title_override.cs or summary.name_cs,
            notes=entry.notes,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )


class TimelineQueryService:
    """Lays a day's programme out as positioned boxes per venue row."""

    def __init__(
        self,
        schedule_service: ScheduleService,
        catalog: CatalogRepository,
        projector: TimelineProjector,
    ) -> None:
        self._schedule = schedule_service
        self._catalog = catalog
        self._projector = projector

    async def build(self, edition_id: str, day: date) -> TimelineData:
        entries = await self._schedule.list_entries(edition_id, day=day)
        venues = await self._catalog.list_venues(active_only=True)

        rows = []
        for venue in venues:
            boxes = []
            for item in entries:
                if item.venue_id != venue.id:
                    continue
                left = self._projector.time_to_fraction(item.start_time)
                width = min(
                    self._projector.duration_to_fraction(item.total_minutes),
                    1.0 - left,
                )
                boxes.append(
                    TimelineBoxData(
                        entry_id=item.id,
                        title=item.display_title,
                        start_time=item.start_time.strftime("%H:%M"),
                        end_time=item.end_time,
                        total_minutes=item.total_minutes,
                        left=left,
                        width=width,
                    )
                )
            rows.append(
                TimelineRowData(
                    venue_id=venue.id,
                    venue_name_cs=venue.name_cs,
                    venue_name_en=venue.name_en,
                    boxes=boxes,
                )
            )

        projector = self._projector
        return TimelineData(
            edition_id=edition_id,
            day=day,
            window_start=format_minutes(projector.window_start_minute),
            window_end=f"{projector.end_hour:02d}:00",
            step_minutes=projector.step_minutes,
            hour_marks=[
                mark.strftime("%H:%M")
                for mark in projector.step_times()
                if mark.minute == 0
            ],
            rows=rows,
        )
