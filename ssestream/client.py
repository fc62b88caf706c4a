"""High-level client that turns an event stream into typed events for listeners."""

from __future__ import annotations

import queue
import threading
from typing import Callable
from urllib.parse import SplitResult

from .bus import Bus
from .data import BuilderStatus, Event, EventBuilder
from .protocol import State, parse_url
from .stream import EventStream

EventListener = Callable[[Event], object]

_OPEN_EVENT = "stream_opened"
_ERROR_EVENT = "error"
_MESSAGE_EVENT = "message"


class EventSource:
    """Connects to an event stream and dispatches its events by type.

    Connection errors are published as events of type ``error``; events
    without an ``event`` field have the type ``message``.
    """

    def __init__(self, url: str | SplitResult) -> None:
        parts = url if isinstance(url, SplitResult) else parse_url(url)
        self._bus: Bus[Event] = Bus()
        self._builder = EventBuilder()
        self._builder_lock = threading.Lock()
        self._stream = EventStream(parts)
        self._stream.on_open(self._publish_open)
        self._stream.on_error(self._publish_error)
        self._stream.on_message(self._handle_line)

    def close(self) -> None:
        """Close the connection."""
        self._stream.close()

    def on_open(self, listener: Callable[[], object]) -> None:
        """Call ``listener`` each time the connection with the stream is established."""
        self.add_event_listener(_OPEN_EVENT, lambda _event: listener())

    def on_message(self, listener: EventListener) -> None:
        """Call ``listener`` for every event of type ``message``."""
        self.add_event_listener(_MESSAGE_EVENT, listener)

    def add_event_listener(self, event_type: str, listener: EventListener) -> None:
        """Call ``listener`` for every event of type ``event_type``."""
        self._bus.subscribe(event_type, listener)

    def state(self) -> State:
        """Return the connection state."""
        return self._stream.state()

    def receiver(self) -> "queue.Queue[Event]":
        """Return a queue that receives every ``message`` and ``error`` event."""
        events: "queue.Queue[Event]" = queue.Queue()
        self.on_message(events.put)
        self.add_event_listener(_ERROR_EVENT, events.put)
        return events

    def __enter__(self) -> "EventSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _publish_open(self) -> None:
        self._bus.publish(_OPEN_EVENT, Event(event=_OPEN_EVENT))

    def _publish_error(self, message: str) -> None:
        self._bus.publish(_ERROR_EVENT, Event(event=_ERROR_EVENT, data=message))

    def _handle_line(self, line: str) -> None:
        with self._builder_lock:
            state = self._builder.update(line)
            if state.status is not BuilderStatus.COMPLETE or state.event is None:
                return
            event = state.event
            self._builder.clear()
        if event.id is not None:
            self._stream.set_last_id(event.id)
        if event.event is not None:
            self._bus.publish(event.event, event)