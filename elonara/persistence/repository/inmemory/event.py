"""In-memory event repository for testing."""

from typing import Optional

from elonara.domain.model import Event
from elonara.domain.repository import EventRepository
from elonara.domain.value import EventId

from .base import SnapshotMixin


class InMemoryEventRepository(SnapshotMixin, EventRepository):
    """In-memory implementation of EventRepository for testing."""

    _state_attrs = ("_events",)

    def __init__(self) -> None:
        self._events: dict[EventId, Event] = {}

    async def find_by_id(self, event_id: EventId) -> Optional[Event]:
        return self._events.get(event_id)

    async def save(self, event: Event) -> Event:
        self._events[event.id] = event
        return event
