# =============================================================================
# tests/unit/test_sync_engine.py
# Unit Tests for the Synchronizer
# =============================================================================

import asyncio

import pytest

from setu_core.errors import RemoteRejectedError, RemoteUnavailableError
from setu_core.offline.durable_cache import OperationStatus, PendingOperation
from setu_core.offline.remote_store import PROGRESS_UPSERT, QUIZ_SCORE_UPSERT
from setu_core.offline.sync_engine import Synchronizer


def progress_op(content_id: str, user_id: str = "student-1") -> PendingOperation:
    return PendingOperation(
        PROGRESS_UPSERT,
        {"user_id": user_id, "content_id": content_id, "completed": True},
    )


class TestSynchronizerConstruction:

    def test_max_attempts_must_be_positive(self, cache, remote, online_monitor):
        with pytest.raises(ValueError):
            Synchronizer(cache, remote, online_monitor, max_attempts=0)

    def test_initial_status_reflects_queue(self, cache, remote, online_monitor):
        cache.enqueue(progress_op("c1"))

        sync = Synchronizer(cache, remote, online_monitor)

        assert sync.status.pending_count == 1
        assert sync.status.last_sync_time is None
        assert not sync.is_syncing


class TestConnectivityTriggeredSync:
    """Test passes started by offline -> online edges"""

    @pytest.mark.asyncio
    async def test_reconnect_replays_queue_in_order(self, cache, remote, offline_monitor, waiter):
        """Operations queued offline are applied in FIFO order after reconnect"""
        ops = [
            cache.enqueue(progress_op("c1")),
            cache.enqueue(PendingOperation(QUIZ_SCORE_UPSERT, {"user_id": "student-1", "quiz_id": "q1", "score": 1})),
            cache.enqueue(progress_op("c2")),
        ]
        sync = Synchronizer(cache, remote, offline_monitor, settle_seconds=0)
        sync.start()

        offline_monitor.set_online(True)
        await waiter(lambda: sync.status.last_sync_time is not None)
        await sync.wait_until_idle()

        assert remote.applied_ids == [op.id for op in ops]
        assert cache.pending_count == 0
        assert sync.status.sync_success is True
        assert sync.status.synced_count == 3
        assert sync.status.pending_count == 0

    @pytest.mark.asyncio
    async def test_offline_edge_cancels_settle_timer(self, cache, remote, offline_monitor):
        """Going offline again before the settle delay elapses means no pass"""
        cache.enqueue(progress_op("c1"))
        sync = Synchronizer(cache, remote, offline_monitor, settle_seconds=0.05)
        sync.start()

        offline_monitor.set_online(True)
        offline_monitor.set_online(False)
        await asyncio.sleep(0.1)

        assert remote.applied == []
        assert sync.status.last_sync_time is None
        assert cache.pending_count == 1

    @pytest.mark.asyncio
    async def test_edges_during_pass_coalesce_into_one_rerun(self, cache, remote, offline_monitor, waiter):
        """Any number of reconnects during a pass cause exactly one extra pass"""
        cache.enqueue(progress_op("c1"))
        gate = asyncio.Event()

        async def hold(operation):
            await gate.wait()

        remote.before_apply = hold
        passes = []
        sync = Synchronizer(cache, remote, offline_monitor, settle_seconds=0)
        sync.register_callback(lambda status: passes.append(status.is_syncing))
        sync.start()

        offline_monitor.set_online(True)
        await waiter(lambda: sync.is_syncing)
        for _ in range(3):
            offline_monitor.set_online(False)
            offline_monitor.set_online(True)
        gate.set()
        await sync.wait_until_idle()

        assert passes.count(True) == 2
        assert len(remote.applied) == 1
        assert cache.pending_count == 0

    @pytest.mark.asyncio
    async def test_stop_detaches_from_monitor(self, cache, remote, offline_monitor):
        cache.enqueue(progress_op("c1"))
        sync = Synchronizer(cache, remote, offline_monitor, settle_seconds=0)
        sync.start()
        await sync.stop()

        offline_monitor.set_online(True)
        await asyncio.sleep(0.02)

        assert remote.applied == []


class TestReplayOutcomes:
    """Test per-operation outcomes of a pass"""

    @pytest.mark.asyncio
    async def test_sync_now_offline_does_nothing(self, cache, remote, offline_monitor):
        cache.enqueue(progress_op("c1"))
        sync = Synchronizer(cache, remote, offline_monitor)

        status = await sync.sync_now()

        assert remote.applied == []
        assert status.last_sync_time is None
        assert cache.pending_count == 1

    @pytest.mark.asyncio
    async def test_transient_failure_keeps_only_failed_operation(self, cache, remote, online_monitor):
        """Unreachable remote leaves the failed op queued without spending an attempt"""
        a = cache.enqueue(progress_op("c1"))
        b = cache.enqueue(progress_op("c2"))
        c = cache.enqueue(progress_op("c3"))
        remote.failures[b.id] = RemoteUnavailableError("Remote store unreachable")
        sync = Synchronizer(cache, remote, online_monitor)

        status = await sync.sync_now()

        assert remote.applied_ids == [a.id, c.id]
        remaining = cache.drain_queue()
        assert [op.id for op in remaining] == [b.id]
        assert remaining[0].attempts == 0
        assert remaining[0].last_error == "Remote store unreachable"
        assert status.sync_success is False
        assert status.failed_count == 1
        assert status.pending_count == 1

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_transient(self, cache, remote, online_monitor):
        op = cache.enqueue(progress_op("c1"))
        remote.failures[op.id] = RuntimeError("boom")
        sync = Synchronizer(cache, remote, online_monitor, max_attempts=1)

        await sync.sync_now()

        assert cache.drain_queue()[0].status == OperationStatus.PENDING

    @pytest.mark.asyncio
    async def test_lost_acknowledgement_replay_is_idempotent(self, cache, remote, online_monitor):
        """A write whose ack was lost is replayed as an upsert, not duplicated"""
        op = cache.enqueue(progress_op("c1"))
        remote.lost_acks.add(op.id)
        sync = Synchronizer(cache, remote, online_monitor)

        first = await sync.sync_now()
        assert first.sync_success is False
        assert cache.pending_count == 1

        second = await sync.sync_now()

        assert second.sync_success is True
        assert cache.pending_count == 0
        assert len(remote.applied) == 2
        assert len(remote.tables["progress"]) == 1

    @pytest.mark.asyncio
    async def test_operation_enqueued_mid_pass_waits_for_next(self, cache, remote, online_monitor):
        """An op queued during a pass is not lost and not cleared by that pass"""
        first = cache.enqueue(progress_op("c1"))
        late = []

        async def enqueue_during_pass(operation):
            if not late:
                late.append(cache.enqueue(progress_op("c2")))

        remote.before_apply = enqueue_during_pass
        sync = Synchronizer(cache, remote, online_monitor)

        status = await sync.sync_now()

        assert remote.applied_ids == [first.id]
        assert [op.id for op in cache.drain_queue()] == [late[0].id]
        assert status.pending_count == 1

        await sync.sync_now()
        assert cache.pending_count == 0


class TestPoisonedOperations:
    """Test bounded retries for rejected operations"""

    @pytest.mark.asyncio
    async def test_repeated_rejection_poisons_operation(self, cache, remote, online_monitor):
        op = cache.enqueue(progress_op("c1"))
        remote.failures[op.id] = RemoteRejectedError("violates row-level security policy", status="42501")
        poisoned = []
        sync = Synchronizer(cache, remote, online_monitor, max_attempts=2)
        sync.register_poison_callback(poisoned.append)

        await sync.sync_now()
        assert cache.drain_queue()[0].attempts == 1
        assert poisoned == []

        status = await sync.sync_now()

        stored = cache.drain_queue()[0]
        assert stored.status == OperationStatus.POISONED
        assert stored.attempts == 2
        assert len(poisoned) == 1
        assert poisoned[0][0].id == op.id
        assert status.poisoned_count == 1

    @pytest.mark.asyncio
    async def test_poisoned_operation_is_skipped(self, cache, remote, online_monitor):
        op = cache.enqueue(progress_op("c1"))
        remote.failures[op.id] = RemoteRejectedError("bad payload")
        attempts = []

        async def count(operation):
            attempts.append(operation.id)

        remote.before_apply = count
        sync = Synchronizer(cache, remote, online_monitor, max_attempts=1)

        await sync.sync_now()
        status = await sync.sync_now()

        assert attempts == [op.id]
        assert status.sync_success is False
        assert status.failed_count == 0
        assert status.pending_count == 1

    @pytest.mark.asyncio
    async def test_success_requires_no_poisoned_operations_left(self, cache, remote, online_monitor):
        """A clean pass still reports partial sync while poisoned work is queued"""
        bad = cache.enqueue(progress_op("c1"))
        remote.failures[bad.id] = RemoteRejectedError("bad payload")
        sync = Synchronizer(cache, remote, online_monitor, max_attempts=1)
        await sync.sync_now()

        cache.enqueue(progress_op("c2"))
        partial = await sync.sync_now()

        assert partial.synced_count == 1
        assert partial.sync_success is False
        assert partial.poisoned_count == 1

        sync.discard()
        cache.enqueue(progress_op("c3"))
        clean = await sync.sync_now()

        assert clean.sync_success is True
        assert clean.pending_count == 0

    @pytest.mark.asyncio
    async def test_unknown_operation_type_is_poisoned(self, cache, remote, online_monitor):
        cache.enqueue(PendingOperation("mystery-op", {}))
        sync = Synchronizer(cache, remote, online_monitor, max_attempts=1)

        await sync.sync_now()

        assert len(cache.poisoned_operations()) == 1

    @pytest.mark.asyncio
    async def test_requeue_gives_fresh_budget(self, cache, remote, online_monitor):
        op = cache.enqueue(progress_op("c1"))
        remote.failures[op.id] = RemoteRejectedError("bad payload")
        sync = Synchronizer(cache, remote, online_monitor, max_attempts=1)
        await sync.sync_now()

        del remote.failures[op.id]
        assert sync.requeue_poisoned() == 1
        restored = cache.drain_queue()[0]
        assert restored.attempts == 0
        assert restored.status == OperationStatus.PENDING

        await sync.sync_now()
        assert remote.applied_ids == [op.id]
        assert cache.pending_count == 0

    @pytest.mark.asyncio
    async def test_discard_only_touches_poisoned(self, cache, remote, online_monitor):
        bad = cache.enqueue(progress_op("c1"))
        ok = cache.enqueue(progress_op("c2"))
        remote.failures[bad.id] = RemoteRejectedError("bad payload")
        remote.failures[ok.id] = RemoteUnavailableError("timeout")
        sync = Synchronizer(cache, remote, online_monitor, max_attempts=1)
        await sync.sync_now()

        assert sync.discard([bad.id, ok.id]) == 1
        assert [op.id for op in cache.drain_queue()] == [ok.id]
        assert sync.status.poisoned_count == 0


class TestSameRowOrdering:
    """Test that writes to one remote row are never applied out of order"""

    @staticmethod
    def timed_progress_op(content_id: str, completed_at: str) -> PendingOperation:
        return PendingOperation(
            PROGRESS_UPSERT,
            {"user_id": "student-1", "content_id": content_id, "completed": True, "completed_at": completed_at},
        )

    @pytest.mark.asyncio
    async def test_failed_write_holds_back_later_write_to_same_row(self, cache, remote, online_monitor):
        older = cache.enqueue(self.timed_progress_op("c1", "T1-old"))
        newer = cache.enqueue(self.timed_progress_op("c1", "T2-new"))
        other = cache.enqueue(self.timed_progress_op("c2", "T3"))
        remote.failures[older.id] = RemoteUnavailableError("timeout")
        sync = Synchronizer(cache, remote, online_monitor)

        first = await sync.sync_now()

        assert remote.applied_ids == [other.id]
        assert [op.id for op in cache.drain_queue()] == [older.id, newer.id]
        assert first.sync_success is False
        assert first.failed_count == 2

        del remote.failures[older.id]
        second = await sync.sync_now()

        assert remote.applied_ids == [other.id, older.id, newer.id]
        assert remote.tables["progress"][("student-1", "c1")]["completed_at"] == "T2-new"
        assert second.sync_success is True
        assert cache.pending_count == 0

    @pytest.mark.asyncio
    async def test_held_write_spends_no_attempts(self, cache, remote, online_monitor):
        older = cache.enqueue(self.timed_progress_op("c1", "T1-old"))
        newer = cache.enqueue(self.timed_progress_op("c1", "T2-new"))
        remote.failures[older.id] = RemoteRejectedError("bad payload")
        sync = Synchronizer(cache, remote, online_monitor, max_attempts=3)

        await sync.sync_now()

        stored = {op.id: op for op in cache.drain_queue()}
        assert stored[older.id].attempts == 1
        assert stored[newer.id].attempts == 0
        assert stored[newer.id].last_error is None

    @pytest.mark.asyncio
    async def test_poisoned_write_holds_back_same_row_until_discarded(self, cache, remote, online_monitor):
        older = cache.enqueue(self.timed_progress_op("c1", "T1-old"))
        newer = cache.enqueue(self.timed_progress_op("c1", "T2-new"))
        remote.failures[older.id] = RemoteRejectedError("bad payload")
        sync = Synchronizer(cache, remote, online_monitor, max_attempts=1)
        await sync.sync_now()

        status = await sync.sync_now()

        assert remote.applied == []
        assert status.pending_count == 2

        sync.discard([older.id])
        status = await sync.sync_now()

        assert remote.applied_ids == [newer.id]
        assert status.sync_success is True
