"""Recognise ``data:`` framed lines and extract their payloads."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Union

from ..schemas.events import StreamEvent, parse_event

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


@dataclass(frozen=True, slots=True)
class DoneSignal:
    """The ``[DONE]`` sentinel that ends a stream without a JSON payload."""


@dataclass(frozen=True, slots=True)
class MalformedPayload:
    """A ``data:`` payload that is neither the sentinel nor valid JSON."""

    raw: str
    reason: str


StreamItem = Union[StreamEvent, DoneSignal, MalformedPayload]


def classify_line(line: str) -> StreamItem | None:
    """Classify one complete line; ``None`` means the line carries nothing."""
    if line.endswith("\r"):
        line = line[:-1]
    if not line.startswith(DATA_PREFIX):
        return None

    payload = line[len(DATA_PREFIX):]
    if payload == DONE_SENTINEL:
        return DoneSignal()

    try:
        decoded = json.loads(payload)
    except json.JSONDecodeError as exc:
        return MalformedPayload(raw=payload, reason=str(exc))
    return parse_event(decoded)


__all__ = [
    "DATA_PREFIX",
    "DONE_SENTINEL",
    "DoneSignal",
    "MalformedPayload",
    "StreamItem",
    "classify_line",
]
