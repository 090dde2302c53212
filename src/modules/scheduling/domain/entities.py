"""Schedule entry aggregate."""

from datetime import date, time
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.domain.aggregate_root import AggregateRoot
from src.modules.scheduling.domain.exceptions import InvalidContentError
from src.modules.scheduling.domain.intervals import SlotKey


class ContentKind(str, Enum):
    """What a schedule entry screens."""

    WORK = "work"
    GROUP = "group"


class WorkContent(BaseModel):
    """Entry screens a single work."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["work"] = "work"
    work_id: str


class GroupContent(BaseModel):
    """Entry screens a group of works back to back."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["group"] = "group"
    group_id: str


ScheduledContent = Annotated[WorkContent | GroupContent, Field(discriminator="kind")]


def content_from_refs(
    work_id: str | None, group_id: str | None
) -> WorkContent | GroupContent:
    """Build entry content from a pair of optional references.

    Raises:
        InvalidContentError: If both or neither reference is given.
    """
    if work_id and group_id:
        raise InvalidContentError(
            "Either work ID or group ID must be provided, but not both"
        )
    if work_id:
        return WorkContent(work_id=work_id)
    if group_id:
        return GroupContent(group_id=group_id)
    raise InvalidContentError("Either work ID or group ID must be provided")


class TitleOverride(BaseModel):
    """Optional per-entry display title, one per locale."""

    model_config = ConfigDict(frozen=True)

    cs: str | None = None
    en: str | None = None


def _truncate_to_minute(value: time) -> time:
    return value.replace(second=0, microsecond=0, tzinfo=None)


class ScheduleEntry(AggregateRoot):
    """A work or group placed in one venue, on one day, at one start time."""

    edition_id: str = Field(..., description="Festival edition")
    venue_id: str = Field(..., description="Venue ID")
    day: date = Field(..., description="Calendar day")
    start_time: time = Field(..., description="Start time of day, minute precision")
    content: ScheduledContent
    discussion_minutes: int = Field(default=0, ge=0, description="Q&A after the screening")
    title_override: TitleOverride = Field(default_factory=TitleOverride)
    notes: str | None = Field(default=None)

    @field_validator("start_time")
    @classmethod
    def _minute_precision(cls, value: time) -> time:
        return _truncate_to_minute(value)

    @property
    def slot_key(self) -> SlotKey:
        return SlotKey(self.venue_id, self.day)

    @classmethod
    def schedule(
        cls,
        *,
        edition_id: str,
        venue_id: str,
        day: date,
        start_time: time,
        content: WorkContent | GroupContent,
        discussion_minutes: int = 0,
        title_override: TitleOverride | None = None,
        notes: str | None = None,
    ) -> "ScheduleEntry":
        """Create a new entry and record its creation event."""
        entry = cls(
            edition_id=edition_id,
            venue_id=venue_id,
            day=day,
            start_time=start_time,
            content=content,
            discussion_minutes=discussion_minutes,
            title_override=title_override or TitleOverride(),
            notes=notes,
        )

        from src.modules.scheduling.domain.events import ScheduleEntryCreatedEvent

        entry.add_domain_event(
            ScheduleEntryCreatedEvent(
                entry_id=entry.id,
                venue_id=entry.venue_id,
                day=entry.day,
                start_time=entry.start_time,
                content_kind=entry.content.kind,
            )
        )
        return entry

    def apply_changes(self, changes: dict[str, Any]) -> list[str]:
        """Overwrite the given fields; return the names that actually changed."""
        updated_fields: list[str] = []

        for name, value in changes.items():
            if name == "id" or name not in type(self).model_fields:
                continue
            if name == "start_time" and value is not None:
                value = _truncate_to_minute(value)
            if getattr(self, name) != value:
                setattr(self, name, value)
                updated_fields.append(name)

        if updated_fields:
            self._update_timestamp()
            from src.modules.scheduling.domain.events import ScheduleEntryUpdatedEvent

            self.add_domain_event(
                ScheduleEntryUpdatedEvent(
                    entry_id=self.id,
                    updated_fields=updated_fields,
                )
            )

        return updated_fields

    def mark_removed(self) -> None:
        """Record the removal event; the repository deletes the row."""
        from src.modules.scheduling.domain.events import ScheduleEntryDeletedEvent

        self.add_domain_event(
            ScheduleEntryDeletedEvent(
                entry_id=self.id,
                venue_id=self.venue_id,
                day=self.day,
            )
        )
