"""Schedule entry entity-model mapper."""

from src.core.infrastructure.database.mapper import BaseMapper
from src.modules.scheduling.domain.entities import (
    GroupContent,
    ScheduleEntry,
    TitleOverride,
    WorkContent,
    content_from_refs,
)
from src.modules.scheduling.infrastructure.models import ScheduleEntryModel


class ScheduleEntryMapper(BaseMapper[ScheduleEntry, ScheduleEntryModel]):
    """Schedule entry entity-model mapper."""

    def to_domain(self, model: ScheduleEntryModel) -> ScheduleEntry:
        return ScheduleEntry(
            id=model.id,
            edition_id=model.edition_id,
            venue_id=model.venue_id,
            day=model.day,
            start_time=model.start_time,
            content=content_from_refs(model.work_id, model.group_id),
            discussion_minutes=model.discussion_minutes,
            title_override=TitleOverride(
                cs=model.title_override_cs,
                en=model.title_override_en,
            ),
            notes=model.notes,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def to_model(self, entity: ScheduleEntry) -> ScheduleEntryModel:
        model = ScheduleEntryModel(
            id=entity.id,
            created_at=entity.created_at,
        )
        self.copy_to_model(entity, model)
        return model

    def copy_to_model(self, entity: ScheduleEntry, model: ScheduleEntryModel) -> None:
        """Write every mutable field of ``entity`` onto ``model``."""
        model.edition_id = entity.edition_id
        model.venue_id = entity.venue_id
        model.day = entity.day
        model.start_time = entity.start_time
        model.work_id = (
            entity.content.work_id if isinstance(entity.content, WorkContent) else None
        )
        model.group_id = (
            entity.content.group_id if isinstance(entity.content, GroupContent) else None
        )
        model.discussion_minutes = entity.discussion_minutes
        model.title_override_cs = entity.title_override.cs
        model.title_override_en = entity.title_override.en
        model.notes = entity.notes
        model.updated_at = entity.updated_at
