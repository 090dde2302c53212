"""Schedule API schemas.

JSON field names are camelCase; Python code uses the snake_case names.
"""

from datetime import date, datetime, time

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from src.core.config import settings
from src.modules.scheduling.domain.entities import ContentKind
from src.modules.scheduling.domain.intervals import ConflictDetails


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _default_discussion_minutes() -> int:
    return settings.DEFAULT_DISCUSSION_MINUTES


class TitleOverrideSchema(CamelModel):
    cs: str | None = Field(default=None, max_length=300)
    en: str | None = Field(default=None, max_length=300)


# Placement fields are optional here so that missing venue, day, time or
# content is reported as INVALID_PLACEMENT / INVALID_CONTENT, not a schema error.


class CreateScheduleEntryRequest(CamelModel):
    """Place a work or a group in a venue."""

    edition_id: str | None = Field(
        default=None, description="Defaults to the edition of the work or group"
    )
    venue_id: str | None = Field(default=None, description="Venue ID")
    day: date | None = Field(default=None, description="Calendar day")
    start_time: time | None = Field(default=None, description="Start time, HH:MM")
    work_id: str | None = Field(default=None, description="Single work")
    group_id: str | None = Field(default=None, description="Group of works")
    discussion_minutes: int = Field(
        default_factory=_default_discussion_minutes,
        description="Q&A time after the screening",
    )
    title_override: TitleOverrideSchema | None = None
    notes: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "venueId": "venue-1",
                "day": "2025-06-12",
                "startTime": "10:00",
                "workId": "work-1",
                "discussionMinutes": 15,
            }
        }
    )


class UpdateScheduleEntryRequest(CamelModel):
    """Partial update; omitted fields keep their stored values."""

    venue_id: str | None = None
    day: date | None = None
    start_time: time | None = None
    work_id: str | None = None
    group_id: str | None = None
    discussion_minutes: int | None = None
    title_override: TitleOverrideSchema | None = None
    notes: str | None = None


class CheckOverlapRequest(CamelModel):
    """Dry-run placement."""

    venue_id: str | None = None
    day: date | None = None
    start_time: time | None = None
    work_id: str | None = None
    group_id: str | None = None
    discussion_minutes: int = Field(
        default_factory=_default_discussion_minutes,
        description="Q&A time after the screening",
    )
    exclude_entry_id: str | None = Field(
        default=None, description="Entry being moved; ignored by the check"
    )


class ContentSummaryResponse(CamelModel):
    kind: ContentKind
    id: str
    name_cs: str | None = None
    name_en: str | None = None
    runtime_minutes: int
    director: str | None = None
    section: str | None = None
    member_count: int | None = None


class GroupMemberResponse(CamelModel):
    work_id: str
    sort_order: int
    name_cs: str | None = None
    name_en: str | None = None
    runtime_minutes: int
    director: str | None = None


class ScheduleEntryResponse(CamelModel):
    """Schedule entry as shown in programme views."""

    id: str
    edition_id: str
    venue_id: str
    venue_name_cs: str | None = None
    venue_name_en: str | None = None
    day: date
    start_time: time
    end_time: str = Field(..., description="HH:MM, wraps past midnight")
    content: ContentSummaryResponse
    discussion_minutes: int
    total_minutes: int
    title_override: TitleOverrideSchema
    display_title: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    @field_serializer("start_time")
    def _format_start_time(self, value: time) -> str:
        return value.strftime("%H:%M")


class ScheduleEntryDetailResponse(ScheduleEntryResponse):
    members: list[GroupMemberResponse] = Field(default_factory=list)


class ScheduleEntryListResponse(CamelModel):
    entries: list[ScheduleEntryResponse]
    total: int


class DeleteScheduleEntryResponse(CamelModel):
    id: str
    deleted: bool = True


class OverlapCheckResponse(CamelModel):
    has_overlap: bool
    conflict_details: ConflictDetails | None = None


class BookedSlotResponse(CamelModel):
    entry_id: str
    start_time: str
    end_time: str
    total_minutes: int


class AvailabilityResponse(CamelModel):
    venue_id: str
    day: date
    booked_slots: list[BookedSlotResponse]


class VenueStatsResponse(CamelModel):
    venue_id: str
    venue_name: str
    entries_count: int
    total_runtime_minutes: int


class ScheduleStatsResponse(CamelModel):
    total_entries: int
    single_works: int
    groups: int
    venues_used: int
    programming_days: int
    total_runtime_minutes: int
    by_venue: list[VenueStatsResponse]


class TimelineBoxResponse(CamelModel):
    entry_id: str
    title: str | None = None
    start_time: str
    end_time: str
    total_minutes: int
    left: float = Field(..., description="Offset from window start, 0..1")
    width: float = Field(..., description="Share of the window, 0..1")


class TimelineRowResponse(CamelModel):
    venue_id: str
    venue_name_cs: str
    venue_name_en: str
    boxes: list[TimelineBoxResponse]


class TimelineResponse(CamelModel):
    edition_id: str
    day: date
    window_start: str
    window_end: str
    step_minutes: int
    hour_marks: list[str]
    rows: list[TimelineRowResponse]
