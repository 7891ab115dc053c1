"""Event receivers for push-style consumption.

Parser.load() feeds every event to a receiver instead of handing them out
one pull at a time. Anything with an on_event(event) method qualifies.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from yamlet.events import Event, EventType


@runtime_checkable
class EventReceiver(Protocol):
    """Protocol for objects that consume parser events.

    Thread Safety:
        A receiver is driven by one parser on one thread. Implementations
        need no locking unless they share state with other threads.

    """

    def on_event(self, event: Event) -> None:
        """Handle one event. Events arrive in document order."""
        ...


class EventCollector:
    """Receiver that records every event it is given.

    Usage:
            >>> collector = EventCollector()
            >>> Parser("a: 1").load(collector)
            >>> [e.type.name for e in collector.events][:3]
            ['STREAM_START', 'DOCUMENT_START', 'MAPPING_START']

    """

    __slots__ = ("events",)

    def __init__(self) -> None:
        self.events: list[Event] = []

    def on_event(self, event: Event) -> None:
        self.events.append(event)

    def documents(self) -> list[list[Event]]:
        """Group the collected events by document, markers excluded."""
        documents: list[list[Event]] = []
        current: list[Event] | None = None
        for event in self.events:
            if event.type is EventType.DOCUMENT_START:
                current = []
            elif event.type is EventType.DOCUMENT_END:
                if current is not None:
                    documents.append(current)
                current = None
            elif current is not None:
                current.append(event)
        return documents
