"""A self-reconnecting connection to an event stream that reports raw lines."""

from __future__ import annotations

import socket
import threading
from typing import Callable, Optional
from urllib.parse import SplitResult

from .protocol import (
    Close,
    InvalidURLError,
    Move,
    MovePermanently,
    Reconnect,
    State,
    build_request,
    handle_new_location,
    open_connection,
    parse_url,
    reconnection_delay,
    validate_content_type,
    validate_status_code,
)

LineListener = Callable[[str], object]
OpenListener = Callable[[], object]


def _strip_line_ending(raw: bytes) -> str:
    text = raw.decode("utf-8", errors="replace")
    if text.endswith("\n"):
        text = text[:-1]
        if text.endswith("\r"):
            text = text[:-1]
    return text


class EventStream:
    """Connection to an event stream, run on a background thread.

    The connection follows redirections, reconnects with an exponential
    backoff when it is lost, and hands every line of the stream body to the
    message listener.
    """

    def __init__(self, url: str | SplitResult) -> None:
        self._url = url if isinstance(url, SplitResult) else parse_url(url)
        self._lock = threading.Lock()
        self._state = State.CONNECTING
        self._closed = False
        self._wake = threading.Event()
        self._socket: Optional[socket.socket] = None
        self._last_event_id: Optional[str] = None
        self._failed_attempts = 0
        self._on_open: Optional[OpenListener] = None
        self._on_message: Optional[LineListener] = None
        self._on_error: Optional[LineListener] = None
        self._thread = threading.Thread(target=self._run, name="event-stream", daemon=True)
        self._thread.start()

    def close(self) -> None:
        """Close the connection; no reconnection will be attempted."""
        with self._lock:
            self._closed = True
            self._state = State.CLOSED
            sock = self._socket
        self._wake.set()
        if sock is not None:
            try:
                sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass

    def on_open(self, listener: OpenListener) -> None:
        """Set the function called each time the stream opens."""
        with self._lock:
            self._on_open = listener

    def on_message(self, listener: LineListener) -> None:
        """Set the function called with every line of the stream body."""
        with self._lock:
            self._on_message = listener

    def on_error(self, listener: LineListener) -> None:
        """Set the function called with a description of every connection error."""
        with self._lock:
            self._on_error = listener

    def state(self) -> State:
        """Return the current connection state."""
        with self._lock:
            return self._state

    def set_last_id(self, id: str) -> None:
        """Remember the last event id, sent as ``Last-Event-ID`` when reconnecting."""
        with self._lock:
            self._last_event_id = id

    def _run(self) -> None:
        origin = self._url
        target = origin
        while not self._closed:
            try:
                self._listen(target)
            except Reconnect as action:
                if not self._transition(State.CONNECTING):
                    return
                self._emit_error(action.message)
                delay = reconnection_delay(self._failed_attempts)
                self._failed_attempts += 1
                if self._wake.wait(delay):
                    return
                target = origin
            except Close as action:
                if not self._transition(State.CLOSED):
                    return
                self._emit_error(action.message)
                return
            except MovePermanently as action:
                if not self._transition(State.CONNECTING):
                    return
                origin = target = action.url
            except Move as action:
                if not self._transition(State.CONNECTING):
                    return
                target = action.url
            else:
                return

    def _transition(self, state: State) -> bool:
        with self._lock:
            if self._closed:
                return False
            self._state = state
            return True

    def _listen(self, url: SplitResult) -> None:
        try:
            sock = open_connection(url)
        except OSError as error:
            raise Reconnect(str(error)) from None

        with self._lock:
            if self._closed:
                sock.close()
                return
            self._socket = sock
            last_id = self._last_event_id

        try:
            with sock, sock.makefile("rb") as reader:
                sock.sendall(build_request(url, last_id))
                self._read(reader)
        except OSError as error:
            if self._closed:
                return
            raise Reconnect(str(error)) from None
        finally:
            with self._lock:
                if self._socket is sock:
                    self._socket = None

    def _read(self, reader) -> None:
        status_line = reader.readline().decode("utf-8", errors="replace")
        status_code = validate_status_code(status_line)

        for raw in reader:
            if self._closed:
                return
            line = _strip_line_ending(raw)
            with self._lock:
                connecting = self._state is State.CONNECTING
                listener = self._on_message
            if connecting:
                self._handle_header(line, status_code)
            elif listener is not None:
                listener(line)

        if not self._closed:
            raise Reconnect("connection closed by server")

    def _handle_header(self, line: str, status_code: int) -> None:
        if line == "":
            self._open()
        elif line.startswith("Content-Type"):
            validate_content_type(line)
        elif line.startswith("Location:"):
            try:
                handle_new_location(line, status_code)
            except InvalidURLError as error:
                raise Close(str(error)) from None

    def _open(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._state = State.OPEN
            listener = self._on_open
        if listener is not None:
            listener()
        self._failed_attempts = 0

    def _emit_error(self, message: str) -> None:
        with self._lock:
            listener = self._on_error
        if listener is not None:
            listener(message)