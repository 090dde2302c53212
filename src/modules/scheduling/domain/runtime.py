"""Runtime aggregation for schedulable content."""

from src.modules.catalog.domain.entities import Work
from src.modules.catalog.domain.repository import CatalogRepository
from src.modules.scheduling.domain.entities import (
    GroupContent,
    ScheduleEntry,
    WorkContent,
)


def work_minutes(work: Work | None) -> int:
    """A work's runtime, 0 when the work or its runtime is unknown."""
    if work is None or work.runtime_minutes is None:
        return 0
    return max(work.runtime_minutes, 0)


class RuntimeAggregator:
    """Computes how long a work or group occupies a venue.

    Group totals are summed from the current members on every call; nothing
    is cached, since a member's runtime can be edited in the catalog at any
    time. Unknown references count as 0 so display paths keep rendering.
    """

    def __init__(self, catalog: CatalogRepository) -> None:
        self._catalog = catalog

    async def duration(self, content: WorkContent | GroupContent) -> int:
        if isinstance(content, WorkContent):
            return work_minutes(await self._catalog.get_work(content.work_id))

        if isinstance(content, GroupContent):
            group = await self._catalog.get_group(content.group_id)
            if group is None:
                return 0
            work_ids = group.ordered_work_ids()
            works = await self._catalog.get_works(work_ids)
            return sum(work_minutes(works.get(work_id)) for work_id in work_ids)

        return 0

    async def entry_duration(self, entry: ScheduleEntry) -> int:
        """Content runtime plus discussion time."""
        return await self.duration(entry.content) + entry.discussion_minutes
