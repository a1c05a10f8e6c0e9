from __future__ import annotations

from interviewstream.schemas import (
    CompleteEvent,
    ErrorEvent,
    ProgressEvent,
    UnknownEvent,
    parse_event,
)


def test_parse_event_dispatches_on_type():
    assert isinstance(parse_event({"type": "progress"}), ProgressEvent)
    assert isinstance(parse_event({"type": "complete"}), CompleteEvent)
    assert isinstance(parse_event({"type": "error"}), ErrorEvent)


def test_parse_event_keeps_extra_fields():
    event = parse_event({"type": "progress", "content": "x", "stage": "attributes"})

    assert isinstance(event, ProgressEvent)
    assert event.model_extra == {"stage": "attributes"}


def test_parse_event_wraps_non_object_payloads():
    assert parse_event(42) == UnknownEvent(raw=42)
    assert parse_event(["a"]) == UnknownEvent(raw=["a"])
    assert parse_event({"content": "no type"}) == UnknownEvent(raw={"content": "no type"})


def test_parse_event_falls_back_when_fields_do_not_validate():
    raw = {"type": "progress", "progress": "half"}

    assert parse_event(raw) == UnknownEvent(raw=raw)
