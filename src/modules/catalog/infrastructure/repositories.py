"""Catalog repository implementation."""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from src.modules.catalog.domain.entities import Group, Venue, Work
from src.modules.catalog.domain.repository import CatalogRepository
from src.modules.catalog.infrastructure.mappers import (
    GroupMapper,
    VenueMapper,
    WorkMapper,
)
from src.modules.catalog.infrastructure.models import (
    GroupModel,
    GroupWorkModel,
    VenueModel,
    WorkModel,
)


class PostgreSQLCatalogRepository(CatalogRepository):
    """PostgreSQL catalog reader."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.venue_mapper = VenueMapper()
        self.work_mapper = WorkMapper()
        self.group_mapper = GroupMapper()

    async def get_venue(self, venue_id: str) -> Venue | None:
        model = await self.session.get(VenueModel, venue_id)
        return self.venue_mapper.to_domain(model) if model else None

    async def list_venues(self, active_only: bool = False) -> list[Venue]:
        statement = select(VenueModel)
        if active_only:
            statement = statement.where(col(VenueModel.is_active).is_(True))
        statement = statement.order_by(
            col(VenueModel.sort_order), col(VenueModel.name_cs)
        )
        result = await self.session.execute(statement)
        return self.venue_mapper.to_domain_list(list(result.scalars().all()))

    async def get_work(self, work_id: str) -> Work | None:
        model = await self.session.get(WorkModel, work_id)
        return self.work_mapper.to_domain(model) if model else None

    async def get_works(self, work_ids: list[str]) -> dict[str, Work]:
        if not work_ids:
            return {}
        statement = select(WorkModel).where(col(WorkModel.id).in_(set(work_ids)))
        result = await self.session.execute(statement)
        return {
            model.id: self.work_mapper.to_domain(model)
            for model in result.scalars().all()
        }

    async def get_group(self, group_id: str) -> Group | None:
        model = await self.session.get(GroupModel, group_id)
        if model is None:
            return None

        statement = (
            select(GroupWorkModel)
            .where(GroupWorkModel.group_id == group_id)
            .order_by(col(GroupWorkModel.sort_order))
        )
        result = await self.session.execute(statement)
        return self.group_mapper.to_domain(model, list(result.scalars().all()))
