"""Pydantic and dataclass definitions shared across the stream client."""

from __future__ import annotations

from .config import AppConfig, ClientConfig, TranscriptConfig
from .events import (
    CompleteEvent,
    ErrorEvent,
    ProgressEvent,
    StreamEvent,
    UnknownEvent,
    parse_event,
)
from .state import INITIAL_STATE, STARTED_STATE, StreamState

__all__ = [
    "AppConfig",
    "ClientConfig",
    "TranscriptConfig",
    "CompleteEvent",
    "ErrorEvent",
    "ProgressEvent",
    "StreamEvent",
    "UnknownEvent",
    "parse_event",
    "INITIAL_STATE",
    "STARTED_STATE",
    "StreamState",
]
