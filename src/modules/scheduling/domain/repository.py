"""Schedule entry repository interface."""

from abc import abstractmethod
from datetime import date

from src.core.domain.repository import BaseRepository
from src.modules.scheduling.domain.entities import ScheduleEntry
from src.modules.scheduling.domain.intervals import SlotKey


class ScheduleEntryRepository(BaseRepository[ScheduleEntry]):
    """Schedule entry repository interface."""

    @abstractmethod
    async def list_by_slot(self, venue_id: str, day: date) -> list[ScheduleEntry]:
        """Entries of one venue on one day, ordered by start time."""
        pass

    @abstractmethod
    async def list_entries(
        self,
        edition_id: str,
        day: date | None = None,
        venue_id: str | None = None,
    ) -> list[ScheduleEntry]:
        """Entries of an edition, optionally narrowed to a day and/or venue."""
        pass

    @abstractmethod
    async def lock_slots(self, keys: list[SlotKey]) -> None:
        """Serialize writers of the given slots until the current transaction ends.

        Implementations whose writes cannot interleave may do nothing.
        """
        pass
