# =============================================================================
# tests/integration/test_offline_roundtrip.py
# Integration Tests for the offline round trip (Offline → Restart → Reconnect)
# =============================================================================

from types import SimpleNamespace

import pytest

from setu_core.chat import ChatOrchestrator
from setu_core.config import Settings
from setu_core.offline import ConnectivityMonitor, Namespace, build_offline_stack
from setu_core.offline.remote_store import PROGRESS_UPSERT, QUIZ_SCORE_UPSERT


@pytest.fixture
def network(monkeypatch):
    """Simulated network: flip network.up to make every probe host reachable"""
    state = SimpleNamespace(up=False, attempts=0)

    async def _can_connect(self, host, port):
        state.attempts += 1
        return state.up

    monkeypatch.setattr(ConnectivityMonitor, "_can_connect", _can_connect)
    return state


class TestOfflineRoundTrip:
    """
    Integration tests for the complete offline flow.

    Tests the flow:
    1. Learner activity while offline is queued in SQLite
    2. The queue and cached snapshots survive an app restart
    3. Reconnecting replays the queue and refreshes chapter summaries
    4. The offline chat answers from the refreshed summaries
    """

    @pytest.fixture
    def settings(self, tmp_path):
        return Settings(
            storage_path=tmp_path / "setu_storage.db",
            sync_settle_seconds=0,
            summary_settle_seconds=0,
        )

    @pytest.fixture
    def summary_rows(self):
        return [
            {
                "id": "s1",
                "class": "7",
                "subject": "Science",
                "chapter_id": "Nutrition in Plants",
                "summary_text": "Plants prepare food by photosynthesis.",
                "key_points": ["Chlorophyll traps sunlight"],
                "language": "english",
                "updated_at": "2024-06-01T00:00:00+00:00",
            },
        ]

    @pytest.mark.asyncio
    async def test_queue_survives_restart_and_syncs(self, settings, remote, summary_rows, network, waiter):
        # Session 1: offline activity
        first = build_offline_stack(settings, remote=remote)
        await first.initialize()
        assert not first.is_online
        assert network.attempts > 0

        await first.mark_content_complete("student-1", "lesson-fractions")
        await first.submit_quiz_score("student-1", "quiz-fractions", score=1)
        assert first.pending_sync_count == 2
        await first.cleanup()
        first.cache.storage.close()

        # Session 2: restart, still offline
        second = build_offline_stack(settings, remote=remote)
        queued = second.cache.drain_queue()
        assert [op.type for op in queued] == [PROGRESS_UPSERT, QUIZ_SCORE_UPSERT]
        assert second.cache.get(Namespace.PROGRESS)[0]["content_id"] == "lesson-fractions"

        # Reconnect: the next probe flips the signal, then queue replay and summary refresh
        remote.rows["chatbot_summaries"] = summary_rows
        await second.initialize()
        assert not second.is_online
        network.up = True
        assert await second.monitor.probe() is True

        await waiter(lambda: second.pending_sync_count == 0 and len(second.get_chapter_summaries()) == 1)
        await second.synchronizer.wait_until_idle()

        assert remote.applied_ids == [op.id for op in queued]
        assert ("student-1", "lesson-fractions") in remote.tables["progress"]
        assert remote.tables["quiz_scores"][("student-1", "quiz-fractions")]["score"] == 1
        assert second.synchronizer.status.sync_success is True

        # Offline chat answers from the refreshed summaries
        network.up = False
        await second.monitor.probe()
        chat = ChatOrchestrator(second.monitor, second.cache)
        reply = await chat.send("photosynthesis")

        assert reply.content.startswith("📖 **Nutrition in Plants** (Science)")

        await second.cleanup()
        second.cache.storage.close()

        # Session 3: the chat transcript was persisted
        third = build_offline_stack(settings, remote=remote)
        restored = ChatOrchestrator(third.monitor, third.cache)

        assert [m.content for m in restored.messages] == ["photosynthesis", reply.content]
        assert third.pending_sync_count == 0
        third.cache.storage.close()

    @pytest.mark.asyncio
    async def test_session_starting_online_syncs_without_platform_events(self, settings, remote, summary_rows, network, waiter):
        # Queue work in an offline session
        first = build_offline_stack(settings, remote=remote)
        await first.initialize()
        await first.mark_content_complete("student-1", "lesson-1")
        await first.cleanup()
        first.cache.storage.close()

        # Next session starts with the network up
        network.up = True
        remote.rows["chatbot_summaries"] = summary_rows
        second = build_offline_stack(settings, remote=remote)
        await second.initialize()

        assert second.is_online
        await waiter(lambda: second.pending_sync_count == 0 and len(second.get_chapter_summaries()) == 1)
        assert ("student-1", "lesson-1") in remote.tables["progress"]
        assert second.get_status()["connection"]["status"] == "online"

        # Writes now go straight to the remote store
        assert await second.submit_quiz_score("student-1", "quiz-1", score=1) is True
        assert second.pending_sync_count == 0

        await second.cleanup()
        assert second.monitor._monitor_task is None
        second.cache.storage.close()

    @pytest.mark.asyncio
    async def test_remote_rejection_surfaces_poisoned_operation(self, settings, remote):
        from setu_core.errors import RemoteRejectedError

        service = build_offline_stack(settings.with_overrides(max_sync_attempts=1), remote=remote)
        await service.mark_content_complete("student-1", "lesson-1")
        op = service.cache.drain_queue()[0]
        remote.failures[op.id] = RemoteRejectedError("permission denied", status="42501")

        service.monitor.set_online(True)
        assert await service.sync_now() is False

        poisoned = service.cache.poisoned_operations()
        assert [p.id for p in poisoned] == [op.id]
        assert service.get_status()["sync"]["poisoned_count"] == 1
        assert service.get_status()["sync"]["sync_success"] is False

        assert service.synchronizer.discard() == 1
        assert service.pending_sync_count == 0
        service.cache.storage.close()
