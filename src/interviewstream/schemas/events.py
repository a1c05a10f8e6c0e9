"""Wire-level event models emitted by the generation endpoints."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


class ProgressEvent(BaseModel):
    """Intermediate generation output with an optional 0-100 completion hint."""

    type: Literal["progress"] = "progress"
    content: Any = None
    progress: int | float | None = None

    model_config = ConfigDict(extra="allow")


class CompleteEvent(BaseModel):
    """Final generation result."""

    type: Literal["complete"] = "complete"
    result: Any = None

    model_config = ConfigDict(extra="allow")


class ErrorEvent(BaseModel):
    """Server-side generation failure."""

    type: Literal["error"] = "error"
    message: Any = None

    model_config = ConfigDict(extra="allow")


class UnknownEvent(BaseModel):
    """Any decoded payload that is not one of the known event shapes."""

    raw: Any = None

    model_config = ConfigDict(frozen=True)


KnownEvent = Annotated[
    Union[ProgressEvent, CompleteEvent, ErrorEvent],
    Field(discriminator="type"),
]

StreamEvent = Union[ProgressEvent, CompleteEvent, ErrorEvent, UnknownEvent]

_KNOWN_TYPES = frozenset({"progress", "complete", "error"})
_known_adapter: TypeAdapter[ProgressEvent | CompleteEvent | ErrorEvent] = TypeAdapter(KnownEvent)


def parse_event(raw: Any) -> StreamEvent:
    """Map a decoded JSON value onto the event union.

    Objects with a recognised ``type`` validate into their variant. Everything
    else, including a known type whose fields do not validate, is kept as an
    :class:`UnknownEvent` so no server payload is dropped.
    """
    event_type = raw.get("type") if isinstance(raw, dict) else None
    if isinstance(event_type, str) and event_type in _KNOWN_TYPES:
        try:
            return _known_adapter.validate_python(raw)
        except ValidationError:
            return UnknownEvent(raw=raw)
    return UnknownEvent(raw=raw)


__all__ = [
    "CompleteEvent",
    "ErrorEvent",
    "ProgressEvent",
    "StreamEvent",
    "UnknownEvent",
    "parse_event",
]
