"""Schedule entry domain events."""

from datetime import date, time

from pydantic import Field

from src.core.domain.events import DomainEvent


class ScheduleEntryCreatedEvent(DomainEvent):
    """Raised when an entry is placed."""

    entry_id: str = Field(..., description="Entry ID")
    venue_id: str = Field(..., description="Venue ID")
    day: date = Field(..., description="Calendar day")
    start_time: time = Field(..., description="Start time of day")
    content_kind: str = Field(..., description="work or group")


class ScheduleEntryUpdatedEvent(DomainEvent):
    """Raised when an entry is edited."""

    entry_id: str = Field(..., description="Entry ID")
    updated_fields: list[str] = Field(..., description="Changed fields")


class ScheduleEntryDeletedEvent(DomainEvent):
    """Raised when an entry is removed."""

    entry_id: str = Field(..., description="Entry ID")
    venue_id: str = Field(..., description="Venue ID")
    day: date = Field(..., description="Calendar day")
