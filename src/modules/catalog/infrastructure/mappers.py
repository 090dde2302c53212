"""Catalog model-to-entity mappers.

The catalog is read-only for this service; ``to_model`` is only used to seed
rows.
"""

from src.core.infrastructure.database.mapper import BaseMapper
from src.modules.catalog.domain.entities import Group, GroupMember, Venue, Work
from src.modules.catalog.infrastructure.models import (
    GroupModel,
    GroupWorkModel,
    VenueModel,
    WorkModel,
)


class VenueMapper(BaseMapper[Venue, VenueModel]):
    def to_domain(self, model: VenueModel) -> Venue:
        return Venue(
            id=model.id,
            name_cs=model.name_cs,
            name_en=model.name_en,
            sort_order=model.sort_order,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def to_model(self, entity: Venue) -> VenueModel:
        return VenueModel(
            id=entity.id,
            name_cs=entity.name_cs,
            name_en=entity.name_en,
            sort_order=entity.sort_order,
            is_active=entity.is_active,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


class WorkMapper(BaseMapper[Work, WorkModel]):
    def to_domain(self, model: WorkModel) -> Work:
        # runtime text is parsed by the entity; garbage becomes None
        return Work(
            id=model.id,
            edition_id=model.edition_id,
            name_cs=model.name_cs,
            name_en=model.name_en,
            runtime_minutes=model.runtime,
            director=model.director,
            section=model.section,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def to_model(self, entity: Work) -> WorkModel:
        return WorkModel(
            id=entity.id,
            edition_id=entity.edition_id,
            name_cs=entity.name_cs,
            name_en=entity.name_en,
            runtime=(
                str(entity.runtime_minutes)
                if entity.runtime_minutes is not None
                else None
            ),
            director=entity.director,
            section=entity.section,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


class GroupMapper:
    """Builds a Group from its row plus membership rows."""

    def to_domain(self, model: GroupModel, members: list[GroupWorkModel]) -> Group:
        return Group(
            id=model.id,
            edition_id=model.edition_id,
            name_cs=model.name_cs,
            name_en=model.name_en,
            description_cs=model.description_cs,
            description_en=model.description_en,
            members=[
                GroupMember(work_id=m.work_id, sort_order=m.sort_order)
                for m in members
            ],
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
