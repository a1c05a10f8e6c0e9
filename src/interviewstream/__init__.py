"""Client for server-sent AI generation streams."""

from __future__ import annotations

__version__ = "0.1.0"

from .client import StreamController, StreamOutcome  # noqa: E402
from .schemas import StreamState  # noqa: E402

__all__ = ["StreamController", "StreamOutcome", "StreamState", "__version__"]
