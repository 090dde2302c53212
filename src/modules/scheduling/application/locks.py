"""In-process serialization of schedule writes per venue and day."""

import asyncio
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager

from src.modules.scheduling.domain.intervals import SlotKey


class SlotLockRegistry:
    """One asyncio.Lock per (venue, day), created on demand and dropped when idle.

    Overlap check and write must run under the lock of the target slot so two
    requests cannot both pass the check before either writes. Several keys
    are always acquired in sorted order.
    """

    def __init__(self) -> None:
        self._locks: dict[SlotKey, asyncio.Lock] = {}
        self._waiters: dict[SlotKey, int] = {}

    @asynccontextmanager
    async def hold(self, keys: Iterable[SlotKey]) -> AsyncIterator[None]:
        ordered = sorted(set(keys))
        for key in ordered:
            self._waiters[key] = self._waiters.get(key, 0) + 1
            self._locks.setdefault(key, asyncio.Lock())

        acquired: list[SlotKey] = []
        try:
            for key in ordered:
                await self._locks[key].acquire()
                acquired.append(key)
            yield
        finally:
            for key in reversed(acquired):
                self._locks[key].release()
            for key in ordered:
                self._release_waiter(key)

    def _release_waiter(self, key: SlotKey) -> None:
        remaining = self._waiters[key] - 1
        if remaining:
            self._waiters[key] = remaining
        else:
            del self._waiters[key]
            del self._locks[key]

    def is_locked(self, key: SlotKey) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)


_slot_locks: SlotLockRegistry | None = None


def get_slot_locks() -> SlotLockRegistry:
    """Process-wide registry shared by every request."""
    global _slot_locks
    if _slot_locks is None:
        _slot_locks = SlotLockRegistry()
    return _slot_locks
