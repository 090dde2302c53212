"""Tests for the per-slot lock registry."""

import asyncio

import pytest

from src.modules.scheduling.application.locks import SlotLockRegistry, get_slot_locks
from src.modules.scheduling.domain.intervals import SlotKey
from tests.conftest import FESTIVAL_DAY

pytestmark = pytest.mark.anyio

HALL = SlotKey("hall", FESTIVAL_DAY)
STUDIO = SlotKey("studio", FESTIVAL_DAY)


async def test_same_slot_is_serialized() -> None:
    registry = SlotLockRegistry()
    order: list[str] = []

    async def writer(name: str) -> None:
        async with registry.hold([HALL]):
            order.append(f"{name}:start")
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            order.append(f"{name}:end")

    await asyncio.gather(writer("a"), writer("b"))

    assert order == ["a:start", "a:end", "b:start", "b:end"]


async def test_different_slots_run_concurrently() -> None:
    registry = SlotLockRegistry()
    inside = asyncio.Event()

    async def hold_hall() -> None:
        async with registry.hold([HALL]):
            await inside.wait()

    task = asyncio.create_task(hold_hall())
    await asyncio.sleep(0)

    async with registry.hold([STUDIO]):
        assert registry.is_locked(HALL)
        assert registry.is_locked(STUDIO)

    inside.set()
    await task


async def test_idle_locks_are_dropped() -> None:
    registry = SlotLockRegistry()

    async with registry.hold([STUDIO, HALL, HALL]):
        assert len(registry) == 2

    assert len(registry) == 0
    assert not registry.is_locked(HALL)


async def test_lock_released_when_body_raises() -> None:
    registry = SlotLockRegistry()

    with pytest.raises(RuntimeError):
        async with registry.hold([HALL]):
            raise RuntimeError("write failed")

    async with registry.hold([HALL]):
        assert registry.is_locked(HALL)


def test_registry_is_shared_per_process() -> None:
    assert get_slot_locks() is get_slot_locks()
