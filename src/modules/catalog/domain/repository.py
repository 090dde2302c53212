"""Catalog repository interface (read-only)."""

from abc import ABC, abstractmethod

from src.modules.catalog.domain.entities import Group, Venue, Work


class CatalogRepository(ABC):
    """Read access to venues, works and groups."""

    @abstractmethod
    async def get_venue(self, venue_id: str) -> Venue | None:
        pass

    @abstractmethod
    async def list_venues(self, active_only: bool = False) -> list[Venue]:
        """Venues ordered by sort position."""
        pass

    @abstractmethod
    async def get_work(self, work_id: str) -> Work | None:
        pass

    @abstractmethod
    async def get_works(self, work_ids: list[str]) -> dict[str, Work]:
        """Works keyed by id; unknown ids are left out."""
        pass

    @abstractmethod
    async def get_group(self, group_id: str) -> Group | None:
        """Group with its current member list."""
        pass
