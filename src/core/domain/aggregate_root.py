"""Aggregate root base class."""

from typing import TYPE_CHECKING

from src.core.domain.base_entity import BaseEntity

if TYPE_CHECKING:
    from src.core.domain.events import DomainEvent


class AggregateRoot(BaseEntity):
    """Base class for aggregates that record domain events for publication."""

    def add_domain_event(self, event: "DomainEvent") -> None:
        """Record an event; repositories publish it after persisting."""
        self._add_domain_event(event)

    def has_domain_events(self) -> bool:
        return len(self._domain_events) > 0
