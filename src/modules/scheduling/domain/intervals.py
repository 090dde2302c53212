"""Wall-clock intervals within a single festival day.

Times are whole minutes since midnight of the entry's day. No timezone is
ever applied; an interval may run past midnight (end > 1440) and is still
compared on the same day.
"""

from dataclasses import dataclass
from datetime import date, time
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

MINUTES_PER_DAY = 24 * 60


def minutes_of(value: time) -> int:
    """Minutes elapsed since midnight."""
    return value.hour * 60 + value.minute


def time_of(minutes: int) -> time:
    """Inverse of minutes_of for 0 <= minutes < 1440."""
    return time(hour=minutes // 60, minute=minutes % 60)


def format_minutes(minutes: int) -> str:
    """Format as HH:MM time of day; ends past midnight wrap around."""
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class SlotKey(NamedTuple):
    """The unit of mutual exclusion: one venue on one day."""

    venue_id: str
    day: date

    def lock_name(self) -> str:
        return f"schedule:{self.venue_id}:{self.day.isoformat()}"


@dataclass(frozen=True)
class Interval:
    """Half-open [start, end) range in minutes."""

    start: int
    end: int

    @classmethod
    def from_start(cls, start_time: time, duration_minutes: int) -> "Interval":
        start = minutes_of(start_time)
        return cls(start=start, end=start + max(duration_minutes, 0))

    @property
    def duration(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "Interval") -> bool:
        # touching ends are back-to-back, not a conflict
        return self.start < other.end and self.end > other.start

    def format_start(self) -> str:
        return format_minutes(self.start)

    def format_end(self) -> str:
        return format_minutes(self.end)


class ConflictDetails(BaseModel):
    """The two intervals behind a rejected placement, formatted for operators."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    existing_entry_id: str
    existing_start: str
    existing_end: str
    candidate_start: str
    candidate_end: str

    @classmethod
    def between(
        cls, existing_entry_id: str, existing: Interval, candidate: Interval
    ) -> "ConflictDetails":
        return cls(
            existing_entry_id=existing_entry_id,
            existing_start=existing.format_start(),
            existing_end=existing.format_end(),
            candidate_start=candidate.format_start(),
            candidate_end=candidate.format_end(),
        )
