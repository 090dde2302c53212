"""Schedule application data models.

These are snapshots handed to callers; mutating them never touches stored
entries.
"""

from datetime import date, datetime, time

from pydantic import BaseModel, Field

from src.modules.scheduling.domain.entities import ContentKind, TitleOverride
from src.modules.scheduling.domain.intervals import ConflictDetails


class GroupMemberData(BaseModel):
    """A work inside a scheduled group."""

    work_id: str
    sort_order: int
    name_cs: str | None = None
    name_en: str | None = None
    runtime_minutes: int = 0
    director: str | None = None


class ContentSummaryData(BaseModel):
    """Resolved work or group behind an entry."""

    kind: ContentKind
    id: str
    name_cs: str | None = None
    name_en: str | None = None
    runtime_minutes: int = 0
    director: str | None = None
    section: str | None = None
    member_count: int | None = None


class ScheduleEntryData(BaseModel):
    """Schedule entry with venue, content and derived timing resolved."""

    id: str
    edition_id: str
    venue_id: str
    venue_name_cs: str | None = None
    venue_name_en: str | None = None
    venue_sort_order: int = 0
    day: date
    start_time: time
    end_time: str
    content: ContentSummaryData
    discussion_minutes: int
    total_minutes: int
    title_override: TitleOverride
    display_title: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class ScheduleEntryDetailData(ScheduleEntryData):
    """Entry detail including the ordered works of a group."""

    members: list[GroupMemberData] = Field(default_factory=list)


class OverlapCheckData(BaseModel):
    """Dry-run outcome."""

    has_overlap: bool
    conflict_details: ConflictDetails | None = None


class BookedSlotData(BaseModel):
    entry_id: str
    start_time: str
    end_time: str
    total_minutes: int


class AvailabilityData(BaseModel):
    """Occupied intervals of one venue on one day."""

    venue_id: str
    day: date
    booked_slots: list[BookedSlotData]


class VenueStatsData(BaseModel):
    venue_id: str
    venue_name: str
    entries_count: int = 0
    total_runtime_minutes: int = 0


class ScheduleStatsData(BaseModel):
    """Programme totals of an edition."""

    total_entries: int = 0
    single_works: int = 0
    groups: int = 0
    venues_used: int = 0
    programming_days: int = 0
    total_runtime_minutes: int = 0
    by_venue: list[VenueStatsData] = Field(default_factory=list)


class TimelineBoxData(BaseModel):
    """An entry positioned on a venue row."""

    entry_id: str
    title: str | None
    start_time: str
    end_time: str
    total_minutes: int
    left: float
    width: float


class TimelineRowData(BaseModel):
    venue_id: str
    venue_name_cs: str
    venue_name_en: str
    boxes: list[TimelineBoxData] = Field(default_factory=list)


class TimelineData(BaseModel):
    """A day of programme laid out on the timeline window."""

    edition_id: str
    day: date
    window_start: str
    window_end: str
    step_minutes: int
    hour_marks: list[str]
    rows: list[TimelineRowData]
