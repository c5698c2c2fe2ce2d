# =============================================================================
# tests/unit/test_learning_data_service.py
# Unit Tests for the LearningDataService
# =============================================================================

import pytest

from setu_core.errors import RemoteUnavailableError
from setu_core.offline.durable_cache import Namespace
from setu_core.offline.learning_data_service import LearningDataService
from setu_core.offline.remote_store import PROGRESS_UPSERT, QUIZ_SCORE_UPSERT
from setu_core.offline.sync_engine import Synchronizer

SUMMARY_ROWS = [
    {"id": "s2", "class": "8", "subject": "Mathematics", "chapter_id": "Algebra", "summary_text": "Letters stand for numbers.", "updated_at": "2024-06-02"},
    {"id": "s1", "class": "7", "subject": "Science", "chapter_id": "Photosynthesis", "summary_text": "Plants make food.", "updated_at": "2024-06-01"},
]


@pytest.fixture
def online_service(cache, remote, online_monitor):
    return LearningDataService(cache, remote, online_monitor, Synchronizer(cache, remote, online_monitor))


@pytest.fixture
def offline_service(cache, remote, offline_monitor):
    return LearningDataService(cache, remote, offline_monitor, Synchronizer(cache, remote, offline_monitor))


async def unreachable(operation):
    raise RemoteUnavailableError("Remote store unreachable")


class TestReads:
    """Test fetch-and-cache reads"""

    @pytest.mark.asyncio
    async def test_online_fetch_refreshes_cache(self, online_service, remote, cache):
        remote.rows["content"] = [{"id": "lesson-1", "title": "Fractions"}]

        rows = await online_service.fetch_and_cache(Namespace.CONTENT)

        assert rows == [{"id": "lesson-1", "title": "Fractions"}]
        assert cache.get(Namespace.CONTENT) == rows

    @pytest.mark.asyncio
    async def test_offline_serves_cached_snapshot(self, offline_service, remote, cache):
        cache.put(Namespace.QUIZZES, [{"id": "q1"}])

        rows = await offline_service.fetch_and_cache(Namespace.QUIZZES)

        assert rows == [{"id": "q1"}]
        assert remote.fetch_calls == []

    @pytest.mark.asyncio
    async def test_failed_online_fetch_falls_back_to_cache(self, online_service, remote, cache):
        cache.put(Namespace.CONTENT, [{"id": "lesson-1"}])
        remote.fetch_error = RemoteUnavailableError("timeout")

        rows = await online_service.fetch_and_cache(Namespace.CONTENT)

        assert rows == [{"id": "lesson-1"}]


class TestWrites:
    """Test online-first writes with queue fallback"""

    @pytest.mark.asyncio
    async def test_online_completion_goes_straight_to_remote(self, online_service, remote, cache):
        assert await online_service.mark_content_complete("u1", "c1") is True

        row = remote.tables["progress"][("u1", "c1")]
        assert row["completed"] is True
        assert "completed_at" in row
        assert cache.pending_count == 0
        assert cache.get(Namespace.PROGRESS)[0]["id"] == "u1:c1"

    @pytest.mark.asyncio
    async def test_offline_completion_is_queued(self, offline_service, remote, cache):
        assert await offline_service.mark_content_complete("u1", "c1") is False

        queued = cache.drain_queue()
        assert [op.type for op in queued] == [PROGRESS_UPSERT]
        assert queued[0].payload["content_id"] == "c1"
        assert remote.applied == []
        assert offline_service.pending_sync_count == 1
        assert cache.get(Namespace.PROGRESS)[0]["completed"] is True

    @pytest.mark.asyncio
    async def test_remote_failure_while_online_is_queued(self, online_service, remote, cache):
        remote.before_apply = unreachable

        assert await online_service.submit_quiz_score("u1", "q1", score=1) is False

        queued = cache.drain_queue()
        assert [op.type for op in queued] == [QUIZ_SCORE_UPSERT]
        assert queued[0].payload["score"] == 1
        assert queued[0].payload["total_questions"] == 1

    @pytest.mark.asyncio
    async def test_online_write_queues_behind_unsynced_write_to_same_row(self, online_service, remote, cache):
        remote.before_apply = unreachable
        await online_service.submit_quiz_score("u1", "q1", score=0)
        remote.before_apply = None

        assert await online_service.submit_quiz_score("u1", "q1", score=1) is False
        assert await online_service.submit_quiz_score("u1", "q2", score=1) is True

        assert [op.payload["score"] for op in cache.drain_queue()] == [0, 1]
        assert await online_service.sync_now() is True
        assert remote.tables["quiz_scores"][("u1", "q1")]["score"] == 1

    @pytest.mark.asyncio
    async def test_latest_quiz_attempt_replaces_cached_one(self, offline_service, cache):
        await offline_service.submit_quiz_score("u1", "q1", score=0)
        await offline_service.submit_quiz_score("u1", "q1", score=1)

        scores = cache.get(Namespace.QUIZ_SCORES)
        assert len(scores) == 1
        assert scores[0]["score"] == 1
        assert cache.pending_count == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("score, total", [(-1, 1), (3, 2), (0, 0)])
    async def test_invalid_score_rejected(self, offline_service, cache, score, total):
        with pytest.raises(ValueError):
            await offline_service.submit_quiz_score("u1", "q1", score=score, total_questions=total)

        assert cache.pending_count == 0


class TestChapterSummaries:
    """Test the summary refresh used by the offline chat"""

    @pytest.mark.asyncio
    async def test_sync_caches_summaries(self, online_service, remote):
        remote.rows["chatbot_summaries"] = SUMMARY_ROWS

        count = await online_service.sync_chapter_summaries()

        assert count == 2
        assert remote.fetch_calls == ["chatbot_summaries"]
        assert online_service.get_chapter_summaries() == SUMMARY_ROWS
        assert online_service.last_summary_sync is not None

    @pytest.mark.asyncio
    async def test_offline_sync_returns_none(self, offline_service, remote):
        assert await offline_service.sync_chapter_summaries() is None
        assert remote.fetch_calls == []

    @pytest.mark.asyncio
    async def test_failed_sync_keeps_previous_cache(self, online_service, remote, cache):
        cache.put(Namespace.CHAPTER_SUMMARIES, SUMMARY_ROWS[:1])
        remote.fetch_error = RemoteUnavailableError("timeout")

        assert await online_service.sync_chapter_summaries() is None
        assert online_service.get_chapter_summaries() == SUMMARY_ROWS[:1]
        assert online_service.last_summary_sync is None

    @pytest.mark.asyncio
    async def test_reconnect_refreshes_summaries(self, cache, remote, offline_monitor, waiter):
        remote.rows["chatbot_summaries"] = SUMMARY_ROWS
        service = LearningDataService(cache, remote, offline_monitor, summary_settle_seconds=0)
        await service.initialize(start_sync=False, check_connection=False)

        offline_monitor.set_online(True)
        await waiter(lambda: len(service.get_chapter_summaries()) == 2)

        await service.cleanup()


class TestStatus:

    @pytest.mark.asyncio
    async def test_status_callbacks_receive_online_flag(self, offline_service, offline_monitor):
        events = []
        offline_service.register_status_callback(events.append)
        await offline_service.initialize(start_sync=False, check_connection=False)

        offline_monitor.set_online(True)
        offline_monitor.set_online(False)

        assert events == [True, False]
        await offline_service.cleanup()

    @pytest.mark.asyncio
    async def test_sync_now_offline_is_false(self, offline_service):
        assert await offline_service.sync_now() is False

    @pytest.mark.asyncio
    async def test_sync_now_online_drains_queue(self, online_service, remote, cache):
        remote.before_apply = unreachable
        await online_service.mark_content_complete("u1", "c1")
        remote.before_apply = None

        assert await online_service.sync_now() is True
        assert cache.pending_count == 0

    def test_get_status(self, offline_service, cache):
        cache.put(Namespace.CHAPTER_SUMMARIES, SUMMARY_ROWS)

        status = offline_service.get_status()

        assert status["is_online"] is False
        assert status["pending_sync"] == 0
        assert status["durable"] is True
        assert status["summary_count"] == 2
        assert status["connection"]["status"] == "offline"
        assert status["sync"]["pending_count"] == 0
