"""Base repository interface."""

from abc import ABC, abstractmethod
from typing import TypeVar

T = TypeVar("T")


class BaseRepository[T](ABC):
    """Common persistence operations for an aggregate."""

    @abstractmethod
    async def get_by_id(self, entity_id: str) -> T | None:
        """Return the entity with the given id, or None."""
        pass

    @abstractmethod
    async def create(self, entity: T) -> T:
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        pass

    @abstractmethod
    async def delete(self, entity: T | str) -> bool:
        """Delete the entity; return False when it did not exist."""
        pass
