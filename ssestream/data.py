"""Server-Sent Events message model and the line-by-line event builder."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Event:
    """A single event sent by the server.

    Each attribute holds the value of the matching message field, or ``None``
    when the field did not appear.
    """

    event: str | None = None
    data: str | None = None
    id: str | None = None
    retry: str | None = None


class BuilderStatus(enum.Enum):
    """Progress of the event currently being assembled."""

    EMPTY = "empty"
    PENDING = "pending"
    COMPLETE = "complete"


@dataclass(frozen=True)
class BuilderState:
    """Status of the builder and the event it holds, if any."""

    status: BuilderStatus
    event: Event | None = None


_EMPTY = BuilderState(BuilderStatus.EMPTY)


def parse_field(message: str) -> tuple[str, str]:
    """Split a stream line into its field name and value.

    A line without a colon is a field name with an empty value. A single
    space following the colon is dropped from the value.
    """
    name, colon, value = message.partition(":")
    if not colon:
        return name, ""
    if value.startswith(" "):
        value = value[1:]
    return name, value


class EventBuilder:
    """Assembles events from the lines of an event stream."""

    def __init__(self) -> None:
        self._state = _EMPTY

    def update(self, message: str) -> BuilderState:
        """Feed one line to the builder and return the resulting state."""
        if message == "":
            self._finalize()
        elif not message.startswith(":"):
            self._state = BuilderState(BuilderStatus.PENDING, self._apply(message))
        return self._state

    def clear(self) -> None:
        """Drop whatever event is being assembled."""
        self._state = _EMPTY

    def state(self) -> BuilderState:
        """Return the current state."""
        return self._state

    def _finalize(self) -> None:
        status = self._state.status
        if status is BuilderStatus.COMPLETE:
            self._state = _EMPTY
        elif status is BuilderStatus.PENDING:
            self._state = BuilderState(BuilderStatus.COMPLETE, self._state.event)

    def _apply(self, message: str) -> Event:
        if self._state.status is BuilderStatus.PENDING and self._state.event is not None:
            event = self._state.event
        else:
            event = Event(event="message")

        name, value = parse_field(message)
        if name == "event":
            return replace(event, event=value)
        if name == "data":
            data = value if event.data is None else f"{event.data}\n{value}"
            return replace(event, data=data)
        if name == "id":
            return replace(event, id=value)
        if name == "retry":
            return replace(event, retry=value)
        return event