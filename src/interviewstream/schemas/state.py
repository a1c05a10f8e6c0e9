"""Observed state of a single logical stream."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class StreamState:
    """Immutable snapshot exposed to listeners and callers."""

    is_streaming: bool = False
    content: str | None = None
    progress: float | None = None
    error: str | None = None
    complete: bool = False


INITIAL_STATE = StreamState()
STARTED_STATE = StreamState(is_streaming=True)
