"""Core stream decoding and state transition components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .classifier import (
    DATA_PREFIX,
    DONE_SENTINEL,
    DoneSignal,
    MalformedPayload,
    StreamItem,
    classify_line,
)
from .decoder import LineBufferDecoder
from .reducer import apply_item, reduce_event

__all__ = [
    "DATA_PREFIX",
    "DONE_SENTINEL",
    "DoneSignal",
    "MalformedPayload",
    "StreamItem",
    "classify_line",
    "LineBufferDecoder",
    "apply_item",
    "reduce_event",
]
