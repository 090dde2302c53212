"""Venue/day overlap detection."""

from dataclasses import dataclass
from datetime import date, time

from src.modules.scheduling.domain.entities import GroupContent, WorkContent
from src.modules.scheduling.domain.exceptions import (
    InvalidContentError,
    InvalidPlacementError,
)
from src.modules.scheduling.domain.intervals import ConflictDetails, Interval
from src.modules.scheduling.domain.repository import ScheduleEntryRepository
from src.modules.scheduling.domain.runtime import RuntimeAggregator


@dataclass(frozen=True)
class OverlapResult:
    """Outcome of an overlap check."""

    overlaps: bool
    conflict: ConflictDetails | None = None
    candidate: Interval | None = None


def require_placement(
    venue_id: str | None,
    day: date | None,
    start_time: time | None,
    discussion_minutes: int | None = 0,
) -> None:
    """Reject placements that cannot be checked at all.

    Raises:
        InvalidPlacementError: If venue, day or start time is missing, or the
            discussion time is negative.
    """
    missing = [
        name
        for name, value in (
            ("venue", venue_id),
            ("day", day),
            ("start time", start_time),
        )
        if value is None or value == ""
    ]
    if missing:
        raise InvalidPlacementError(
            f"Venue, day and start time are required (missing: {', '.join(missing)})"
        )
    if discussion_minutes is not None and discussion_minutes < 0:
        raise InvalidPlacementError("Discussion time must not be negative")


class OverlapDetector:
    """Finds the first existing entry a candidate placement would collide with.

    Intervals are half-open, so an entry ending at 11:30 and one starting at
    11:30 in the same venue are legal back-to-back placements. Existing
    intervals are recomputed from current runtimes on every call.
    """

    def __init__(
        self,
        repository: ScheduleEntryRepository,
        runtime: RuntimeAggregator,
    ) -> None:
        self._repo = repository
        self._runtime = runtime

    async def check_overlap(
        self,
        venue_id: str | None,
        day: date | None,
        start_time: time | None,
        content: WorkContent | GroupContent | None,
        discussion_minutes: int = 0,
        exclude_entry_id: str | None = None,
    ) -> OverlapResult:
        require_placement(venue_id, day, start_time, discussion_minutes)
        if not isinstance(content, WorkContent | GroupContent):
            raise InvalidContentError(
                "Content must be exactly one work or exactly one group"
            )

        duration = await self._runtime.duration(content) + discussion_minutes
        candidate = Interval.from_start(start_time, duration)

        for existing in await self._repo.list_by_slot(venue_id, day):
            if exclude_entry_id is not None and existing.id == exclude_entry_id:
                continue

            existing_interval = Interval.from_start(
                existing.start_time,
                await self._runtime.entry_duration(existing),
            )
            if candidate.overlaps(existing_interval):
                return OverlapResult(
                    overlaps=True,
                    conflict=ConflictDetails.between(
                        existing.id, existing_interval, candidate
                    ),
                    candidate=candidate,
                )

        return OverlapResult(overlaps=False, candidate=candidate)
