# =============================================================================
# setu_core/chat/stream_decoder.py
# Line-buffered decoder for server-sent chat completions
# =============================================================================
"""
StreamDecoder - turns arbitrarily split byte chunks into cumulative text.

Wire format (one event per line):
    : keep-alive comment             -> ignored
    data: {"choices":[{"delta":{"content":"Hel"}}]}
    data: [DONE]                     -> end of stream

Bytes go through an incremental UTF-8 decoder, so a character split across
chunks is kept intact. Chunks without a line break are collected in a list
and joined only once a line break arrives. Complete lines are read from a
buffer through a cursor; the consumed prefix is dropped once the cursor
passes half the buffer.
"""

from __future__ import annotations
import codecs
import json
from typing import AsyncIterator, Callable, List, Optional, Union
import logging

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"

_IGNORED = object()
_DONE = object()
_MALFORMED = object()


class StreamDecoder:
    """
    Push-style SSE decoder.

    Usage:
        decoder = StreamDecoder()
        for text in decoder.feed(chunk):
            message.set_content(text)
        final_text = decoder.finish()
    """

    def __init__(self):
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._cursor = 0
        self._pending: List[str] = []
        self.text = ""
        self.done = False
        self.malformed_lines = 0

    def _parse_line(self, line: str):
        if line.endswith("\r"):
            line = line[:-1]
        if not line or line.startswith(":") or not line.startswith(DATA_PREFIX):
            return _IGNORED

        payload = line[len(DATA_PREFIX):].strip()
        if payload == DONE_SENTINEL:
            return _DONE

        try:
            event = json.loads(payload)
        except json.JSONDecodeError:
            return _MALFORMED

        content = None
        choices = event.get("choices") if isinstance(event, dict) else None
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            delta = choices[0].get("delta")
            if isinstance(delta, dict):
                content = delta.get("content")

        if isinstance(content, str) and content:
            self.text += content
            return self.text
        return _IGNORED

    def _compact(self) -> None:
        if self._cursor >= len(self._buffer):
            self._buffer, self._cursor = "", 0
        elif self._cursor > len(self._buffer) // 2:
            self._buffer, self._cursor = self._buffer[self._cursor:], 0

    def _take_pending(self) -> None:
        if self._pending:
            self._buffer = self._buffer[self._cursor:] + "".join(self._pending)
            self._cursor = 0
            self._pending = []

    def _drain(self, final: bool = False) -> List[str]:
        updates: List[str] = []
        while not self.done:
            newline = self._buffer.find("\n", self._cursor)
            if newline == -1:
                break

            line = self._buffer[self._cursor:newline]
            outcome = self._parse_line(line)

            if outcome is _MALFORMED:
                if not final and self._buffer.find("\n", newline + 1) == -1:
                    # Leave the cursor at the line start and wait for more bytes
                    break
                self.malformed_lines += 1
                logger.warning(f"Skipping malformed stream line: {line[:80]!r}")
            elif outcome is _DONE:
                self.done = True
            elif outcome is not _IGNORED:
                updates.append(outcome)

            self._cursor = newline + 1

        self._compact()
        return updates

    def feed(self, chunk: Union[bytes, str]) -> List[str]:
        """
        Add a chunk; returns the cumulative text after each new fragment.

        Once the sentinel has been seen, further chunks are ignored.
        """
        if self.done:
            return []
        if isinstance(chunk, bytes):
            chunk = self._utf8.decode(chunk)
        self._pending.append(chunk)
        if "\n" not in chunk:
            return []
        self._take_pending()
        return self._drain()

    def finish(self) -> str:
        """Flush whatever is left (including an unterminated last line)."""
        if not self.done:
            self._pending.append(self._utf8.decode(b"", final=True))
            self._take_pending()
            self._drain(final=True)

        if not self.done and self._cursor < len(self._buffer):
            tail = self._buffer[self._cursor:]
            outcome = self._parse_line(tail)
            if outcome is _DONE:
                self.done = True
            elif outcome is _MALFORMED:
                logger.debug(f"Dropping incomplete trailing stream line: {tail[:80]!r}")

        self._buffer, self._cursor, self._pending = "", 0, []
        return self.text

    async def consume(
        self,
        source: AsyncIterator[bytes],
        on_update: Optional[Callable[[str], None]] = None,
    ) -> str:
        """
        Drain an async byte source, reporting cumulative text as it grows.

        The source is always closed, including on cancellation. Errors raised
        by the source propagate to the caller.
        """
        try:
            async for chunk in source:
                for text in self.feed(chunk):
                    if on_update is not None:
                        on_update(text)
                if self.done:
                    break
        finally:
            aclose = getattr(source, "aclose", None)
            if aclose is not None:
                await aclose()

        before = self.text
        final_text = self.finish()
        if final_text != before and on_update is not None:
            on_update(final_text)
        return final_text
