import pytest

from ssestream.data import (
    BuilderState,
    BuilderStatus,
    Event,
    EventBuilder,
    parse_field,
)

EMPTY = BuilderState(BuilderStatus.EMPTY)


def feed(*lines):
    builder = EventBuilder()
    for line in lines:
        builder.update(line)
    return builder


@pytest.mark.parametrize(
    "lines, expected",
    [
        (["data: test"], Event(event="message", data="test")),
        (["event: some_event"], Event(event="some_event")),
        (["id: 123abc"], Event(event="message", id="123abc")),
        (["retry: 3000"], Event(event="message", retry="3000")),
        (["event: some_event", "data: test"], Event(event="some_event", data="test")),
        (
            ["event: some_event", "data: test", "", "data: test2"],
            Event(event="message", data="test2"),
        ),
        (
            ["event: some_event", ":some commentary", "data: test"],
            Event(event="some_event", data="test"),
        ),
        (
            ["event: some:id:with:colons", "data: some:data:with:colons"],
            Event(event="some:id:with:colons", data="some:data:with:colons"),
        ),
        (
            [
                "event: some_event",
                "this is a random message that should be ignored",
                "data: test",
            ],
            Event(event="some_event", data="test"),
        ),
    ],
)
def test_pending_event_is_filled(lines, expected):
    state = feed(*lines).state()
    assert state.status is BuilderStatus.PENDING
    assert state.event == expected


@pytest.mark.parametrize(
    "lines, expected_data",
    [
        (["data: test"], "test"),
        (["data: YHOO", "data: +2", "data: 10"], "YHOO\n+2\n10"),
        (["data", "data"], "\n"),
    ],
)
def test_empty_line_completes_event(lines, expected_data):
    state = feed(*lines).update("")
    assert state.status is BuilderStatus.COMPLETE
    assert state.event.data == expected_data


@pytest.mark.parametrize(
    "lines",
    [
        [],
        [""],
        ["data: test", "", ""],
        [":hi", ""],
    ],
)
def test_state_is_empty(lines):
    assert feed(*lines).state() == EMPTY


def test_should_return_event_on_update():
    builder = EventBuilder()
    for line in ["event: some_event", "data: test"]:
        assert builder.update(line) == builder.state()


def test_clear_resets_to_empty():
    builder = feed("data: test")
    builder.clear()
    assert builder.state() == EMPTY


@pytest.mark.parametrize(
    "line, expected",
    [
        ("data: test", ("data", "test")),
        ("data:test", ("data", "test")),
        ("data:  two spaces", ("data", " two spaces")),
        ("data", ("data", "")),
        ("data:", ("data", "")),
        ("id\n", ("id\n", "")),
        ("event: a:b:c", ("event", "a:b:c")),
    ],
)
def test_parse_field(line, expected):
    assert parse_field(line) == expected