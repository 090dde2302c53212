"""Domain events and the in-process event bus."""

import inspect
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import TypeVar, cast
from uuid import uuid4

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field


class DomainEvent(BaseModel, ABC):
    """Base class for all domain events."""

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = ConfigDict(frozen=True)

    @property
    def event_type(self) -> str:
        return self.__class__.__name__


class DomainEventHandler(ABC):
    """Base class for domain event handlers."""

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        pass


HandlerFunc = Callable[[DomainEvent], Awaitable[None] | None]
THandlerFunc = TypeVar("THandlerFunc", bound=HandlerFunc)


class EventBus:
    """Publishes domain events to the handlers subscribed to their type.

    A failing handler is logged and does not prevent the remaining handlers
    from running; the write that raised the event has already happened.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[DomainEventHandler]] = {}

    def subscribe(
        self, event_type: type[DomainEvent], handler: DomainEventHandler
    ) -> None:
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(
            f"Subscribed handler {handler.__class__.__name__} to {event_type.__name__}"
        )

    async def publish(self, event: DomainEvent) -> None:
        handlers = self._handlers.get(type(event), [])
        logger.debug(f"Publishing event {event.event_type} to {len(handlers)} handlers")

        for handler in handlers:
            try:
                await handler.handle(event)
            except Exception as e:
                logger.error(
                    f"Error handling event {event.event_type} "
                    f"by {handler.__class__.__name__}: {e}"
                )

    async def publish_all(self, events: list[DomainEvent]) -> None:
        for event in events:
            await self.publish(event)

    def clear_handlers(self) -> None:
        self._handlers.clear()

    def has_handlers(self, event_type: type[DomainEvent]) -> bool:
        return bool(self._handlers.get(event_type))


_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get the global event bus instance."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus


def reset_global_event_bus() -> None:
    """Reset the global event bus instance."""
    global _event_bus
    if _event_bus is not None:
        _event_bus.clear_handlers()
    _event_bus = EventBus()


def subscribe_to_event(
    event_type: type[DomainEvent],
    bus: EventBus | None = None,
) -> Callable[[THandlerFunc], THandlerFunc]:
    """Decorator to subscribe a plain function as an event handler."""

    def decorator(handler_func: THandlerFunc) -> THandlerFunc:
        class FunctionHandler(DomainEventHandler):
            async def handle(self, event: DomainEvent) -> None:
                result = handler_func(event)
                if inspect.isawaitable(result):
                    await cast(Awaitable[None], result)

        (bus or get_event_bus()).subscribe(event_type, FunctionHandler())
        return handler_func

    return decorator
