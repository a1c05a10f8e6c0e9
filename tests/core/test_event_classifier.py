from __future__ import annotations

from interviewstream.core import DoneSignal, MalformedPayload, classify_line
from interviewstream.schemas import CompleteEvent, ErrorEvent, ProgressEvent, UnknownEvent


def test_lines_without_data_prefix_are_ignored():
    assert classify_line("") is None
    assert classify_line(": keep-alive") is None
    assert classify_line("event: progress") is None
    assert classify_line('data:{"type":"progress"}') is None


def test_done_sentinel_is_recognised_without_json():
    assert classify_line("data: [DONE]") == DoneSignal()
    assert classify_line("data: [DONE]\r") == DoneSignal()


def test_known_event_types_are_parsed():
    progress = classify_line('data: {"type":"progress","content":"x","progress":50}')
    complete = classify_line('data: {"type":"complete","result":"done"}')
    error = classify_line('data: {"type":"error","message":"boom"}')

    assert isinstance(progress, ProgressEvent)
    assert progress.content == "x"
    assert progress.progress == 50
    assert isinstance(complete, CompleteEvent)
    assert complete.result == "done"
    assert isinstance(error, ErrorEvent)
    assert error.message == "boom"


def test_unknown_payloads_are_kept_verbatim():
    item = classify_line('data: {"type":"attribute","name":"Communication"}')

    assert isinstance(item, UnknownEvent)
    assert item.raw == {"type": "attribute", "name": "Communication"}


def test_invalid_json_yields_malformed_payload():
    item = classify_line("data: {not valid json}")

    assert isinstance(item, MalformedPayload)
    assert item.raw == "{not valid json}"
    assert item.reason


def test_non_string_type_values_pass_through_as_unknown():
    listed = classify_line('data: {"type": ["progress"], "content": "x"}')
    nested = classify_line('data: {"type": {"k": 1}}')

    assert listed == UnknownEvent(raw={"type": ["progress"], "content": "x"})
    assert nested == UnknownEvent(raw={"type": {"k": 1}})
