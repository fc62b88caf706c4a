"""Wire-level pieces of the event-stream protocol: URLs, requests, status lines."""

from __future__ import annotations

import enum
import re
import socket
import ssl
from urllib.parse import SplitResult, urlsplit

DEFAULT_READ_TIMEOUT = 60.0
INITIAL_RECONNECTION_DELAY_MS = 500

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443, "ftp": 21}
_SECURE_SCHEMES = frozenset({"https", "wss"})


class State(enum.Enum):
    """Connection state of a client."""

    CONNECTING = "connecting"
    """Trying to connect or reconnect to the stream."""
    OPEN = "open"
    """The stream is open."""
    CLOSED = "closed"
    """The connection is closed and no reconnection will be attempted."""


class InvalidURLError(ValueError):
    """Raised when a stream address cannot be parsed."""


class StreamAction(Exception):
    """What a connection must do next instead of carrying on reading."""


class Reconnect(StreamAction):
    """The connection failed in a way that warrants another attempt."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Close(StreamAction):
    """The connection failed for good; no reconnection should follow."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Move(StreamAction):
    """The stream is temporarily served from another address."""

    def __init__(self, url: SplitResult) -> None:
        super().__init__(url.geturl())
        self.url = url


class MovePermanently(StreamAction):
    """The stream has moved to another address for good."""

    def __init__(self, url: SplitResult) -> None:
        super().__init__(url.geturl())
        self.url = url


def parse_url(url: str) -> SplitResult:
    """Parse an absolute URL, raising :class:`InvalidURLError` when it is not one."""
    text = url.strip()
    if not _SCHEME_RE.match(text):
        raise InvalidURLError(f"relative URL without a base: {url!r}")
    try:
        parts = urlsplit(text)
        port = parts.port
    except ValueError as error:
        raise InvalidURLError(f"invalid URL {url!r}: {error}") from error

    scheme = parts.scheme.lower()
    if scheme in _DEFAULT_PORTS:
        if not parts.hostname:
            raise InvalidURLError(f"empty host in URL: {url!r}")
        if port is not None and port == _DEFAULT_PORTS[scheme]:
            port = None
    path = parts.path or ("/" if scheme in _DEFAULT_PORTS else "")
    return parts._replace(scheme=scheme, path=path)


def _as_url(url: str | SplitResult) -> SplitResult:
    return url if isinstance(url, SplitResult) else parse_url(url)


def _host_name(url: SplitResult) -> str:
    host = url.hostname
    if not host:
        return "localhost"
    return f"[{host}]" if ":" in host else host


def _port(url: SplitResult) -> int | None:
    return url.port if url.port is not None else _DEFAULT_PORTS.get(url.scheme)


def get_host(url: str | SplitResult) -> str:
    """Return ``host:port`` for the URL, using the scheme's default port if none is given."""
    parts = _as_url(url)
    host = _host_name(parts)
    port = _port(parts)
    return host if port is None else f"{host}:{port}"


def get_path_with_query_params(url: str | SplitResult) -> str:
    """Return the request target: the path followed by the query string, if any."""
    parts = _as_url(url)
    return f"{parts.path}?{parts.query}" if parts.query else parts.path


def build_request(url: str | SplitResult, last_event_id: str | None = None) -> bytes:
    """Build the HTTP request that opens an event stream."""
    parts = _as_url(url)
    extra_headers = "" if last_event_id is None else f"Last-Event-ID: {last_event_id}\r\n"
    request = (
        f"GET {get_path_with_query_params(parts)} HTTP/1.1\r\n"
        "Accept: text/event-stream\r\n"
        f"Host: {get_host(parts)}\r\n"
        f"{extra_headers}\r\n"
    )
    return request.encode("utf-8")


def validate_status_code(line: str) -> int:
    """Return the status code of an acceptable status line.

    Raises :class:`Close` or :class:`Reconnect` for statuses that do not open
    a stream.
    """
    if len(line) <= 9:
        raise Close("Invalid status line")
    status = line[9:].rstrip()
    try:
        status_code = int(status[:3])
    except ValueError:
        raise Close("Invalid status line") from None

    if status_code in (200, 301, 302, 303, 307):
        return status_code
    if status_code == 204:
        raise Close(status)
    if 201 <= status_code <= 299:
        raise Reconnect(status)
    raise Close(status)


def validate_content_type(line: str) -> None:
    """Raise :class:`Close` unless the Content-Type header names an event stream."""
    if "text/event-stream" not in line:
        raise Close("Wrong Content-Type")


def handle_new_location(line: str, status_code: int) -> None:
    """Raise the redirection a Location header calls for under ``status_code``."""
    location = line[10:].strip()
    if status_code == 301:
        raise MovePermanently(parse_url(location))
    if status_code in (302, 303, 307):
        raise Move(parse_url(location))


def reconnection_delay(failed_attempts: int) -> float:
    """Seconds to wait before the next attempt after ``failed_attempts`` failures."""
    millis = INITIAL_RECONNECTION_DELAY_MS + 15 * (2**failed_attempts - 1)
    return millis / 1000


def open_connection(url: str | SplitResult, timeout: float = DEFAULT_READ_TIMEOUT) -> socket.socket:
    """Open a socket to the URL's host, wrapped in TLS for secure schemes.

    Raises :class:`OSError` when the connection cannot be made.
    """
    parts = _as_url(url)
    port = _port(parts)
    if port is None:
        raise OSError(f"no port known for {parts.geturl()!r}")
    hostname = parts.hostname or "localhost"

    sock = socket.create_connection((hostname, port), timeout=timeout)
    if parts.scheme in _SECURE_SCHEMES:
        try:
            sock = ssl.create_default_context().wrap_socket(sock, server_hostname=hostname)
        except OSError:
            sock.close()
            raise
    sock.settimeout(timeout)
    return sock