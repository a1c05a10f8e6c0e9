"""Stream transport and lifecycle controller."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Literal

import httpx
import structlog

from .core import (
    LineBufferDecoder,
    MalformedPayload,
    StreamItem,
    apply_item,
    classify_line,
)
from .schemas import INITIAL_STATE, STARTED_STATE, ClientConfig, StreamState
from .transcript import TranscriptLogger

StreamOutcome = Literal["completed", "failed", "cancelled", "ended"]
StateListener = Callable[[StreamState], Any]

UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"

_BODYLESS_STATUS = frozenset({204, 304})


class StreamError(RuntimeError):
    """Base class for transport failures surfaced through ``StreamState.error``."""


class StreamHTTPError(StreamError):
    """Raised when the endpoint answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"HTTP error! status: {status_code} - {body}")
        self.status_code = status_code
        self.body = body


class StreamBodyMissingError(StreamError):
    """Raised when a successful response carries no body to stream."""

    def __init__(self) -> None:
        super().__init__("No response body")


class CancellationToken:
    """Per-stream flag checked before every state write."""

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class StreamController:
    """Owns one logical stream at a time and the state it produces.

    ``start_stream`` cancels whatever stream is active, then drives the new
    request to completion. ``stop_stream`` may be called from any other task on
    the same loop; the pending request or body read is cancelled and the state
    returns to its initial shape without an error.
    """

    def __init__(
        self,
        *,
        settings: ClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        transcript: TranscriptLogger | None = None,
    ) -> None:
        self._settings = settings or ClientConfig()
        self._client = client
        self._owns_client = client is None
        self._transport = transport
        self._transcript = transcript
        self._state = INITIAL_STATE
        self._listeners: list[StateListener] = []
        self._token: CancellationToken | None = None
        self._task: asyncio.Task[StreamOutcome] | None = None
        self._logger = structlog.get_logger(__name__)

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def settings(self) -> ClientConfig:
        return self._settings

    def add_listener(self, listener: StateListener) -> None:
        """Register a callable receiving every committed state."""
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        self._listeners = [ln for ln in self._listeners if ln != listener]

    async def start_stream(
        self,
        url: str,
        *,
        method: str | None = None,
        headers: dict[str, str] | None = None,
        body: Any = None,
    ) -> StreamOutcome:
        """Run one stream to its end and report how it finished.

        Failures are reported through :attr:`state` and the returned outcome,
        never raised.
        """
        previous = self._task
        self.stop_stream()
        if previous is not None and previous is not asyncio.current_task():
            await asyncio.wait({previous})

        token = CancellationToken()
        self._token = token
        self._publish(STARTED_STATE)

        task = asyncio.create_task(
            self._consume(
                token,
                url,
                method=(method or self._settings.method).upper(),
                headers=headers,
                body=body,
            )
        )
        self._task = task
        try:
            return await task
        except asyncio.CancelledError:
            if token.cancelled:
                self._logger.info("stream.cancelled", url=url)
                return "cancelled"
            # The awaiting task itself was cancelled: tear the stream down too.
            if self._token is token:
                self.stop_stream()
            raise
        finally:
            if self._task is task:
                self._task = None

    def stop_stream(self) -> None:
        """Cancel the active stream, if any, and reset state. Idempotent."""
        token, task = self._token, self._task
        self._token = None
        self._task = None
        if token is not None:
            token.cancel()
        if task is not None and not task.done():
            task.cancel()
        if self._state != INITIAL_STATE:
            self._publish(INITIAL_STATE)

    async def aclose(self) -> None:
        """Stop any stream and release the HTTP client this controller created."""
        task = self._task
        self.stop_stream()
        if task is not None and task is not asyncio.current_task():
            await asyncio.wait({task})
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "StreamController":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _http_client(self) -> httpx.AsyncClient:
        if self._client is None:
            timeout = self._settings.timeout
            self._client = httpx.AsyncClient(
                base_url=self._settings.base_url,
                timeout=httpx.Timeout(timeout),
                follow_redirects=self._settings.follow_redirects,
                transport=self._transport,
            )
        return self._client

    async def _consume(
        self,
        token: CancellationToken,
        url: str,
        *,
        method: str,
        headers: dict[str, str] | None,
        body: Any,
    ) -> StreamOutcome:
        request_headers = {
            "Content-Type": "application/json",
            **self._settings.headers,
            **(headers or {}),
        }
        try:
            self._logger.info(
                "stream.start",
                url=url,
                method=method,
                has_body=body is not None,
                body_keys=sorted(map(str, body)) if isinstance(body, dict) else [],
            )
            content = json.dumps(body, ensure_ascii=False) if body is not None else None
            client = self._http_client()
            async with client.stream(
                method,
                url,
                headers=request_headers,
                content=content.encode("utf-8") if content is not None else None,
            ) as response:
                self._logger.debug(
                    "stream.response",
                    url=url,
                    status=response.status_code,
                    headers=dict(response.headers),
                )
                if not response.is_success:
                    error_text = (await response.aread()).decode("utf-8", errors="replace")
                    self._logger.error(
                        "stream.http_error",
                        url=url,
                        status=response.status_code,
                        body=error_text,
                    )
                    raise StreamHTTPError(response.status_code, error_text)
                if method == "HEAD" or response.status_code in _BODYLESS_STATUS:
                    raise StreamBodyMissingError()
                return await self._read_events(token, url, response)
        except Exception as exc:  # noqa: BLE001
            message = str(exc) or UNKNOWN_ERROR_MESSAGE
            self._logger.warning("stream.failed", url=url, error=message)
            self._commit(token, StreamState(error=message))
            return "failed"

    async def _read_events(
        self,
        token: CancellationToken,
        url: str,
        response: httpx.Response,
    ) -> StreamOutcome:
        decoder = LineBufferDecoder()
        async for chunk in response.aiter_bytes():
            for line in decoder.feed(chunk):
                item = classify_line(line)
                if item is None:
                    continue
                self._log_item(url, item)
                next_state = apply_item(self._state, item)
                if not self._commit(token, next_state):
                    return "cancelled"
                if not next_state.is_streaming:
                    return "completed" if next_state.complete else "failed"

        if decoder.pending:
            self._logger.warning(
                "stream.unterminated_line",
                url=url,
                discarded_chars=len(decoder.pending),
            )
        self._logger.info("stream.ended", url=url)
        self._commit(token, StreamState(content=self._state.content, progress=self._state.progress))
        return "ended"

    def _log_item(self, url: str, item: StreamItem) -> None:
        if isinstance(item, MalformedPayload):
            self._logger.warning(
                "stream.malformed_payload", url=url, raw=item.raw[:100], reason=item.reason
            )
        else:
            self._logger.debug("stream.event", url=url, kind=type(item).__name__)
        if self._transcript is not None:
            self._transcript.record(url, item)

    def _commit(self, token: CancellationToken, state: StreamState) -> bool:
        """Write ``state`` only if ``token`` still owns the controller."""
        if token.cancelled or token is not self._token:
            return False
        self._publish(state)
        return True

    def _publish(self, state: StreamState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:  # noqa: BLE001
                self._logger.exception("stream.listener_failed", listener=repr(listener))


__all__ = [
    "CancellationToken",
    "StateListener",
    "StreamBodyMissingError",
    "StreamController",
    "StreamError",
    "StreamHTTPError",
    "StreamOutcome",
    "UNKNOWN_ERROR_MESSAGE",
]
