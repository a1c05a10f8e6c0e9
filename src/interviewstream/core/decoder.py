"""Incremental byte-to-line decoding for streamed response bodies."""

from __future__ import annotations

import codecs


class LineBufferDecoder:
    """Turn arbitrarily split byte chunks into complete text lines.

    Bytes are decoded incrementally, so a multi-byte character split across
    two chunks still decodes correctly. Text after the last ``\\n`` is held in
    :attr:`pending` until more bytes arrive.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Unterminated text carried over to the next chunk."""
        return self._buffer

    def feed(self, chunk: bytes) -> list[str]:
        """Append ``chunk`` and return every line it completed."""
        self._buffer += self._decoder.decode(chunk)
        *lines, self._buffer = self._buffer.split("\n")
        return lines
