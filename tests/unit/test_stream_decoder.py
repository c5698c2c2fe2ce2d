# =============================================================================
# tests/unit/test_stream_decoder.py
# Unit Tests for the SSE StreamDecoder
# =============================================================================

import asyncio

import pytest

from setu_core.chat.stream_decoder import StreamDecoder


def feed_all(decoder, chunks):
    updates = []
    for chunk in chunks:
        updates.extend(decoder.feed(chunk))
    return updates


class FakeSource:
    """Async byte source that records whether it was closed"""

    def __init__(self, chunks, delay: float = 0.0):
        self.chunks = list(chunks)
        self.delay = delay
        self.closed = False

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.chunks:
            raise StopAsyncIteration
        chunk = self.chunks.pop(0)
        if isinstance(chunk, Exception):
            raise chunk
        return chunk

    async def aclose(self):
        self.closed = True


class TestFraming:
    """Test line framing over arbitrary chunk boundaries"""

    def test_fragments_split_across_chunks(self, sse):
        """'Hel' + 'lo' arriving in odd pieces yields cumulative updates"""
        body = sse.body("Hel", "lo")
        decoder = StreamDecoder()

        updates = feed_all(decoder, [body[:7], body[7:30], body[30:]])

        assert updates == ["Hel", "Hello"]
        assert decoder.done
        assert decoder.finish() == "Hello"

    def test_every_split_offset_gives_same_text(self, sse):
        body = sse.body("Namaste ", "दुनिया", "!")

        for offset in range(1, len(body)):
            decoder = StreamDecoder()
            feed_all(decoder, [body[:offset], body[offset:]])
            assert decoder.finish() == "Namaste दुनिया!", f"split at {offset}"

    def test_long_line_in_tiny_chunks_is_joined_once(self, sse, monkeypatch):
        """Chunks without a line break are only joined when the break arrives"""
        body = sse.body("क" * 2000, done=False)
        decoder = StreamDecoder()
        joins = []
        original = decoder._take_pending

        def counting_take():
            joins.append(len(decoder._pending))
            original()

        monkeypatch.setattr(decoder, "_take_pending", counting_take)

        updates = feed_all(decoder, [body[i:i + 3] for i in range(0, len(body), 3)])

        assert updates == ["क" * 2000]
        assert len(joins) == 1
        assert joins[0] == len(range(0, len(body), 3))

    def test_multibyte_character_split_between_chunks(self, sse):
        """A Devanagari character cut in half is reassembled, not replaced"""
        body = sse.body("गणित")
        cut = body.index("ग".encode("utf-8")) + 1
        decoder = StreamDecoder()

        feed_all(decoder, [body[:cut], body[cut:]])

        assert decoder.text == "गणित"
        assert "�" not in decoder.text

    def test_byte_by_byte_feed(self, sse):
        body = sse.body("a", "b", "c")
        decoder = StreamDecoder()

        updates = feed_all(decoder, [body[i:i + 1] for i in range(len(body))])

        assert updates == ["a", "ab", "abc"]


class TestLineHandling:
    """Test comments, blank lines, sentinel and malformed lines"""

    def test_comments_blank_lines_and_crlf(self, sse):
        body = (
            b": keep-alive\r\n"
            b"\r\n"
            + sse.event("Hi").replace(b"\n", b"\r\n")
            + b"event: ping\n"
            + b"data: [DONE]\r\n"
        )
        decoder = StreamDecoder()

        assert decoder.feed(body) == ["Hi"]
        assert decoder.done
        assert decoder.malformed_lines == 0

    def test_events_without_content_are_ignored(self):
        decoder = StreamDecoder()

        updates = decoder.feed(
            b'data: {"choices":[{"delta":{"role":"assistant"}}]}\n'
            b'data: {"choices":[]}\n'
            b'data: {"id":"x"}\n'
        )

        assert updates == []
        assert decoder.malformed_lines == 0

    def test_done_stops_processing(self, sse):
        decoder = StreamDecoder()

        decoder.feed(sse.event("one") + b"data: [DONE]\n" + sse.event("two"))
        later = decoder.feed(sse.event("three"))

        assert decoder.text == "one"
        assert later == []

    def test_malformed_line_skipped_when_more_lines_follow(self, sse):
        decoder = StreamDecoder()

        updates = decoder.feed(b"data: {broken\n" + sse.event("ok"))

        assert updates == ["ok"]
        assert decoder.malformed_lines == 1

    def test_malformed_last_line_waits_for_more_data(self, sse):
        """A bad final line is kept until another line arrives"""
        decoder = StreamDecoder()

        assert decoder.feed(b"data: {broken\n") == []
        assert decoder.malformed_lines == 0

        assert decoder.feed(sse.event("next")) == ["next"]
        assert decoder.malformed_lines == 1

    def test_finish_flushes_unterminated_tail(self):
        decoder = StreamDecoder()
        decoder.feed(b'data: {"choices":[{"delta":{"content":"tail"}}]}')

        assert decoder.text == ""
        assert decoder.finish() == "tail"

    def test_finish_counts_pending_malformed_line(self):
        decoder = StreamDecoder()
        decoder.feed(b"data: {broken\n")

        assert decoder.finish() == ""
        assert decoder.malformed_lines == 1


class TestConsume:
    """Test draining an async byte source"""

    @pytest.mark.asyncio
    async def test_consume_reports_updates_and_closes(self, sse):
        body = sse.body("Hel", "lo")
        source = FakeSource([body[:10], body[10:]])
        seen = []

        text = await StreamDecoder().consume(source, on_update=seen.append)

        assert text == "Hello"
        assert seen == ["Hel", "Hello"]
        assert source.closed

    @pytest.mark.asyncio
    async def test_consume_reports_flushed_tail(self):
        source = FakeSource([b'data: {"choices":[{"delta":{"content":"end"}}]}'])
        seen = []

        text = await StreamDecoder().consume(source, on_update=seen.append)

        assert text == "end"
        assert seen == ["end"]

    @pytest.mark.asyncio
    async def test_consume_closes_source_on_error(self, sse):
        source = FakeSource([sse.event("partial"), ConnectionResetError("reset")])
        decoder = StreamDecoder()

        with pytest.raises(ConnectionResetError):
            await decoder.consume(source)

        assert source.closed
        assert decoder.text == "partial"

    @pytest.mark.asyncio
    async def test_consume_closes_source_on_cancel(self, sse):
        source = FakeSource([sse.event("a")] * 100, delay=0.01)
        decoder = StreamDecoder()
        task = asyncio.ensure_future(decoder.consume(source))

        await asyncio.sleep(0.035)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert source.closed
        assert decoder.text.startswith("a")
