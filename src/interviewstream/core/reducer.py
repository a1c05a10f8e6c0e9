"""Pure state transitions for stream events."""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Any

from ..schemas.events import (
    CompleteEvent,
    ErrorEvent,
    ProgressEvent,
    StreamEvent,
    UnknownEvent,
)
from ..schemas.state import StreamState
from .classifier import DoneSignal, MalformedPayload, StreamItem

DEFAULT_ERROR_MESSAGE = "Stream error"


def reduce_event(state: StreamState, event: StreamEvent) -> StreamState:
    """Apply one parsed server event to ``state``.

    ``content`` is always flattened to text because consumers render it as
    preformatted output.
    """
    if isinstance(event, ProgressEvent):
        content = _flatten(event.content) if "content" in event.model_fields_set else None
        return replace(state, content=content, progress=event.progress)

    if isinstance(event, CompleteEvent):
        return replace(
            state,
            content=_complete_content(event),
            is_streaming=False,
            complete=True,
        )

    if isinstance(event, ErrorEvent):
        message = event.message
        if message is None or message == "":
            message = DEFAULT_ERROR_MESSAGE
        elif not isinstance(message, str):
            message = _flatten(message)
        return replace(state, error=message, is_streaming=False)

    if isinstance(event, UnknownEvent):
        return replace(state, content=_flatten(event.raw))

    raise TypeError(f"Unsupported stream event: {type(event).__name__}")


def apply_item(state: StreamState, item: StreamItem) -> StreamState:
    """Apply any classified stream item, including the sentinel and parse failures."""
    if isinstance(item, DoneSignal):
        return replace(state, is_streaming=False, complete=True)
    if isinstance(item, MalformedPayload):
        return replace(
            state,
            error=f"Failed to parse server response: {item.raw}",
            is_streaming=False,
        )
    return reduce_event(state, item)


def _complete_content(event: CompleteEvent) -> str | None:
    if "result" not in event.model_fields_set:
        return None
    result = event.result
    if isinstance(result, str):
        return result
    if isinstance(result, dict) and result.get("content"):
        return _flatten(result["content"])
    return _flatten(result)


def _flatten(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, ensure_ascii=False)


__all__ = ["DEFAULT_ERROR_MESSAGE", "apply_item", "reduce_event"]
