"""Drag-to-reschedule interaction state.

Pointer positions are fractions of the timeline window, as produced by
``TimelineProjector``. Pointer handling is synchronous; only ``drop`` awaits,
because it commits through the schedule service.
"""

from dataclasses import dataclass
from datetime import date, time
from enum import Enum

from fastapi import status
from loguru import logger

from src.core.domain.exceptions import DomainException
from src.modules.scheduling.application.commands import UpdateScheduleEntryCommand
from src.modules.scheduling.application.models import ScheduleEntryData
from src.modules.scheduling.application.services import ScheduleService
from src.modules.scheduling.domain.timeline import TimelineProjector


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    DROPPED = "dropped"
    CANCELLED = "cancelled"


class DragStateError(DomainException):
    """Input event that is not a valid transition from the current state."""

    http_status_code = status.HTTP_409_CONFLICT
    error_code = "DRAG_STATE"


@dataclass(frozen=True)
class DragPreview:
    """Ghost box shown while dragging, always in the entry's own venue row."""

    entry_id: str
    venue_id: str
    day: date
    start_time: time
    left: float
    width: float


@dataclass(frozen=True)
class DropOutcome:
    """Result of a drop.

    ``start_time`` is where the entry now sits: the new time when accepted,
    the original time when rejected or unchanged.
    """

    entry_id: str
    accepted: bool
    start_time: time
    message: str | None = None


@dataclass
class _DragSession:
    entry_id: str
    venue_id: str
    day: date
    original_start: time
    offset: float
    width: float
    preview_start: time


class DragRescheduler:
    """Idle -> Dragging -> (Dropped | Cancelled) -> Idle.

    One drag at a time. An entry whose drop is still being committed cannot be
    picked up again until the commit resolves; other entries can.
    """

    def __init__(
        self, service: ScheduleService, projector: TimelineProjector
    ) -> None:
        self._service = service
        self._projector = projector
        self._state = DragState.IDLE
        self._active: _DragSession | None = None
        self._committing: set[str] = set()

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def active_entry_id(self) -> str | None:
        return self._active.entry_id if self._active else None

    def is_committing(self, entry_id: str) -> bool:
        return entry_id in self._committing

    def begin(self, entry: ScheduleEntryData, pointer: float) -> DragPreview:
        """Pick up ``entry`` at ``pointer``, remembering where inside the box it was grabbed."""
        if self._active is not None:
            raise DragStateError(
                f"Entry '{self._active.entry_id}' is already being dragged"
            )
        if entry.id in self._committing:
            raise DragStateError(
                f"Entry '{entry.id}' is still being saved; try again shortly"
            )

        left = self._projector.time_to_fraction(entry.start_time)
        self._active = _DragSession(
            entry_id=entry.id,
            venue_id=entry.venue_id,
            day=entry.day,
            original_start=entry.start_time,
            offset=pointer - left,
            width=self._projector.duration_to_fraction(entry.total_minutes),
            preview_start=entry.start_time,
        )
        self._state = DragState.DRAGGING
        return self._preview(self._active)

    def move(self, pointer: float) -> DragPreview:
        session = self._require_active("move")
        session.preview_start = self._projector.position_to_time(
            pointer - session.offset
        )
        return self._preview(session)

    async def drop(self) -> DropOutcome:
        """Commit the previewed start time.

        A rejection from the schedule service is reported with its message
        unchanged and the entry reverts to its original start.
        """
        session = self._require_active("drop")
        self._active = None
        self._state = DragState.DROPPED

        if session.preview_start == session.original_start:
            self._settle()
            return DropOutcome(
                entry_id=session.entry_id,
                accepted=True,
                start_time=session.original_start,
            )

        self._committing.add(session.entry_id)
        try:
            saved = await self._service.update_entry(
                UpdateScheduleEntryCommand(
                    entry_id=session.entry_id,
                    start_time=session.preview_start,
                )
            )
        except DomainException as e:
            logger.info(f"Drop of entry {session.entry_id} rejected: {e.message}")
            return DropOutcome(
                entry_id=session.entry_id,
                accepted=False,
                start_time=session.original_start,
                message=e.message,
            )
        finally:
            self._committing.discard(session.entry_id)
            self._settle()

        return DropOutcome(
            entry_id=session.entry_id,
            accepted=True,
            start_time=saved.start_time,
        )

    def cancel(self) -> None:
        """Abandon the drag; nothing is written."""
        self._require_active("cancel")
        self._active = None
        self._state = DragState.CANCELLED
        self._settle()

    def leave(self) -> None:
        """Pointer left the timeline without a drop target."""
        self.cancel()

    def _settle(self) -> None:
        # a drag begun while a drop was committing keeps its state
        if self._active is not None or self._state == DragState.IDLE:
            return
        logger.debug(f"Drag {self._state.value}, back to idle")
        self._state = DragState.IDLE

    def _require_active(self, action: str) -> _DragSession:
        if self._active is None:
            raise DragStateError(f"Cannot {action}: no drag in progress")
        return self._active

    def _preview(self, session: _DragSession) -> DragPreview:
        return DragPreview(
            entry_id=session.entry_id,
            venue_id=session.venue_id,
            day=session.day,
            start_time=session.preview_start,
            left=self._projector.time_to_fraction(session.preview_start),
            width=session.width,
        )
