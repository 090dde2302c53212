"""Catalog domain entities.

Venues, works and groups are owned by the catalog; the scheduler only reads
them. Group durations are never stored, see RuntimeAggregator.
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field

from src.core.domain.base_entity import BaseEntity


def _parse_runtime(value: Any) -> int | None:
    """Coerce a stored runtime to whole minutes, None when unusable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        return int(value) if value >= 0 else None
    if isinstance(value, str):
        text = value.strip().lower().removesuffix("min").strip()
        if text.isdigit():
            return int(text)
    return None


RuntimeMinutes = Annotated[int | None, BeforeValidator(_parse_runtime)]


class Venue(BaseEntity):
    """A physical screening room."""

    name_cs: str = Field(..., description="Czech display name")
    name_en: str = Field(default="", description="English display name")
    sort_order: int = Field(default=0, description="Position in venue listings")
    is_active: bool = Field(default=True)


class Work(BaseEntity):
    """A single schedulable work (a film)."""

    edition_id: str = Field(..., description="Festival edition")
    name_cs: str = Field(..., description="Czech title")
    name_en: str = Field(default="", description="English title")
    runtime_minutes: RuntimeMinutes = Field(
        default=None, description="Intrinsic runtime, None when missing or unparseable"
    )
    director: str | None = Field(default=None)
    section: str | None = Field(default=None)


class GroupMember(BaseModel):
    """A work's slot inside a group."""

    work_id: str
    sort_order: int = 0


class Group(BaseEntity):
    """An ordered set of works screened as one unit."""

    edition_id: str = Field(..., description="Festival edition")
    name_cs: str = Field(..., description="Czech name")
    name_en: str = Field(default="", description="English name")
    description_cs: str = Field(default="")
    description_en: str = Field(default="")
    members: list[GroupMember] = Field(default_factory=list)

    def ordered_work_ids(self) -> list[str]:
        """Member work ids in display order."""
        return [m.work_id for m in sorted(self.members, key=lambda m: m.sort_order)]
