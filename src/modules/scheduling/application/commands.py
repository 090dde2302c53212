"""Schedule application commands."""

from datetime import date, time
from typing import Any

from pydantic import BaseModel, Field

from src.modules.scheduling.domain.entities import TitleOverride

# Fields whose change moves the entry's interval and so requires a new check.
PLACEMENT_FIELDS = frozenset(
    {"venue_id", "day", "start_time", "work_id", "group_id", "discussion_minutes"}
)


class CreateScheduleEntryCommand(BaseModel):
    """Place a work or group."""

    edition_id: str | None = None  # defaults to the content's edition
    venue_id: str | None = None
    day: date | None = None
    start_time: time | None = None
    work_id: str | None = None
    group_id: str | None = None
    discussion_minutes: int = 0
    title_override: TitleOverride | None = None
    notes: str | None = None


class UpdateScheduleEntryCommand(BaseModel):
    """Partially update an entry.

    Only fields explicitly set on the command are applied; everything else
    keeps its stored value.
    """

    entry_id: str
    venue_id: str | None = None
    day: date | None = None
    start_time: time | None = None
    work_id: str | None = None
    group_id: str | None = None
    discussion_minutes: int | None = None
    title_override: TitleOverride | None = None
    notes: str | None = None

    def specified_fields(self) -> set[str]:
        return set(self.model_fields_set) - {"entry_id"}

    def touches_placement(self) -> bool:
        return bool(self.specified_fields() & PLACEMENT_FIELDS)

    def changes_content(self) -> bool:
        return self.work_id is not None or self.group_id is not None

    def metadata_changes(self) -> dict[str, Any]:
        """Specified non-placement fields, with None meaning clear."""
        changes: dict[str, Any] = {}
        if "title_override" in self.model_fields_set:
            changes["title_override"] = self.title_override or TitleOverride()
        if "notes" in self.model_fields_set:
            changes["notes"] = self.notes
        return changes


class CheckOverlapCommand(BaseModel):
    """Dry-run a placement without persisting anything."""

    venue_id: str | None = None
    day: date | None = None
    start_time: time | None = None
    work_id: str | None = None
    group_id: str | None = None
    discussion_minutes: int = Field(default=0)
    exclude_entry_id: str | None = None


class DeleteScheduleEntryCommand(BaseModel):
    """Remove an entry."""

    entry_id: str
