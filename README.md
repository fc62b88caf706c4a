# ssestream

A client library for streams of Server-Sent Events. It has no dependencies
outside the standard library.

What it does:

- Opens the connection and follows redirects.
- Reconnects when the connection drops. It waits a little longer after each
  failed attempt and resets that wait once a connection opens again.
- Sends a `Last-Event-ID` header carrying the id of the last event it received.
- Parses the stream into events and hands each one to the listeners for its type.

## Installation

```
pip install ssestream
```

Streams can be `http://` or `https://`. For `https://` the socket is wrapped in
TLS using the standard `ssl` module and its default context.

## Callbacks

```python
from ssestream.client import EventSource

source = EventSource("http://localhost:8080/sub")

source.on_open(lambda: print("connection established"))
source.on_message(lambda event: print("message:", event.data))
source.add_event_listener("myEvent", lambda event: print(event.event, event.data))
source.add_event_listener("error", lambda event: print("error:", event.data))
```

The connection runs on a background thread, so listeners are called on that thread.
You can register several listeners for the same event type. They are called in the
order they were added.

Events are `ssestream.data.Event` objects. Each has four attributes: `event`, `data`,
`id` and `retry`. An attribute is `None` when the field was absent. An event that has
no `event` field is given the type `message`. When several `data` lines arrive they
are joined with newlines.

Connection problems are reported as events of type `error`. The `data` attribute
describes what went wrong, for example `"500 Internal Server Error"` or
`"connection closed by server"`.

## Blocking use

`receiver()` returns a `queue.Queue`. Every `message` event and every `error` event
is put on it:

```python
from ssestream.client import EventSource

with EventSource("http://localhost:8080/sub") as source:
    events = source.receiver()
    while True:
        event = events.get()
        print(event.event, event.data)
```

The connection is closed when the `with` block ends.

## State

`source.state()` returns one of the values of `ssestream.protocol.State`:

- `State.CONNECTING`: connecting, reconnecting, or following a redirect.
- `State.OPEN`: the stream is open.
- `State.CLOSED`: the connection is closed and no further attempt will be made.

The client stops for good in these cases:

- `close()` is called.
- The server answers with `204`.
- The server answers with a status it does not handle, such as `4xx` or `5xx`.
- The server sends a `Content-Type` other than `text/event-stream`.
- The status line or a `Location` header cannot be parsed.

After other `2xx` statuses, lost connections and failed connects, the client tries
again. A `301` redirect replaces the address used for later reconnections. After a
`302`, `303` or `307` redirect, reconnections go back to the original address.

## Errors

`EventSource(url)` raises `ssestream.protocol.InvalidURLError` if the URL is not a
valid absolute URL. `InvalidURLError` is a subclass of `ValueError`.

## Lower-level pieces

- `ssestream.data.EventBuilder` turns stream lines into `Event` objects. Its state
  is reported as a `BuilderState`.
- `ssestream.bus.Bus` is a small publish/subscribe registry.
- `ssestream.stream.EventStream` manages the raw connection and passes each line of
  the body to a single message listener.
- `ssestream.protocol` contains the URL, request, status-line and backoff helpers.

## Limitations

- The `retry` field is parsed and stored on the event. It does not change the
  reconnection delay.
- There is no command-line tool. There are also no settings for proxies,
  authentication or extra request headers.