"""Append-only JSONL transcript of received stream frames."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pendulum

from .core import DoneSignal, MalformedPayload, StreamItem
from .schemas import CompleteEvent, ErrorEvent, ProgressEvent, UnknownEvent


class TranscriptLogger:
    """Append-only transcript writing JSON lines."""

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def record(self, url: str, item: StreamItem) -> None:
        kind, payload = describe_item(item)
        self.append(
            {
                "timestamp": pendulum.now().to_iso8601_string(),
                "url": url,
                "kind": kind,
                "payload": payload,
            }
        )

    def append(self, record: dict) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False, default=str))
            handle.write("\n")


def describe_item(item: StreamItem) -> tuple[str, Any]:
    """Return the transcript kind and a JSON-friendly payload for ``item``."""
    if isinstance(item, DoneSignal):
        return "done", None
    if isinstance(item, MalformedPayload):
        return "malformed", {"raw": item.raw, "reason": item.reason}
    if isinstance(item, UnknownEvent):
        return "unknown", item.raw
    if isinstance(item, (ProgressEvent, CompleteEvent, ErrorEvent)):
        return item.type, item.model_dump(mode="json")
    raise TypeError(f"Unsupported stream item: {type(item).__name__}")
