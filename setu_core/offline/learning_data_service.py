# =============================================================================
# setu_core/offline/learning_data_service.py
# Learning Data Service - online-first writes, fetch-and-cache reads
# =============================================================================
"""
LearningDataService - the API pages use for learner data.

This service automatically handles:
- Online mode: direct remote reads/writes, snapshots cached locally
- Offline mode: cached snapshots, mutations captured into the pending queue
- Remote failure while "online": same as offline
- Chapter summaries refreshed shortly after connectivity returns

Usage:
------
service = LearningDataService(cache, remote, monitor, synchronizer)
await service.initialize()

lessons = await service.fetch_and_cache(Namespace.CONTENT)
await service.mark_content_complete(user_id, content_id)
await service.submit_quiz_score(user_id, quiz_id, score=1, total_questions=1)
"""

from __future__ import annotations
import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
import logging

from setu_core.errors import ErrorContext, RemoteStoreError
from setu_core.offline.connection_manager import ConnectivityMonitor
from setu_core.offline.durable_cache import DurableCache, Namespace, PendingOperation
from setu_core.offline.remote_store import PROGRESS_UPSERT, QUIZ_SCORE_UPSERT, RemoteStore, entity_key
from setu_core.offline.sync_engine import Synchronizer

logger = logging.getLogger(__name__)

# Cache namespace -> remote table
TABLE_MAPPING: Dict[str, str] = {
    Namespace.CONTENT: "content",
    Namespace.PROGRESS: "progress",
    Namespace.QUIZZES: "quizzes",
    Namespace.QUIZ_SCORES: "quiz_scores",
    Namespace.CHAPTER_SUMMARIES: "chatbot_summaries",
}

SUMMARIES_LAST_SYNC = "chapter_summaries_last_sync"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class LearningDataService:
    """Online-first façade over the DurableCache and the RemoteStore."""

    SUMMARY_SETTLE_SECONDS = 2.0

    def __init__(
        self,
        cache: DurableCache,
        remote: RemoteStore,
        monitor: ConnectivityMonitor,
        synchronizer: Optional[Synchronizer] = None,
        summary_settle_seconds: float = SUMMARY_SETTLE_SECONDS,
    ):
        self.cache = cache
        self.remote = remote
        self.monitor = monitor
        self.synchronizer = synchronizer
        self.summary_settle_seconds = summary_settle_seconds

        self._summary_handle: Optional[asyncio.TimerHandle] = None
        self._summary_task: Optional[asyncio.Task] = None
        self._summaries_syncing = False
        self._callbacks: List[Callable[[bool], None]] = []
        self._initialized = False

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def is_online(self) -> bool:
        return self.monitor.is_online

    @property
    def pending_sync_count(self) -> int:
        return self.cache.pending_count

    @property
    def last_summary_sync(self) -> Optional[datetime]:
        value = self.cache.get_setting(SUMMARIES_LAST_SYNC)
        return datetime.fromisoformat(value) if value else None

    # =========================================================================
    # INITIALIZATION
    # =========================================================================

    async def initialize(self, start_sync: bool = True, check_connection: bool = True) -> None:
        """
        Subscribe to connectivity changes and compute the initial signal.

        The first probe runs after subscribing, so a session that starts
        online gets its first sync pass and summary refresh from that edge.

        Args:
            start_sync: Whether to also start the Synchronizer
            check_connection: Whether to probe now and keep monitoring
        """
        if self._initialized:
            return

        self.monitor.subscribe(self._on_connection_change)
        if start_sync and self.synchronizer is not None:
            self.synchronizer.start()
        self._initialized = True

        if check_connection:
            await self.monitor.probe()
            self.monitor.start_monitoring()

        logger.info(f"LearningDataService initialized. Online: {self.is_online}")

    def _on_connection_change(self, online: bool, previous: bool) -> None:
        logger.info(f"Connection changed: online={online}")

        if online and not previous:
            self._schedule_summary_sync()
        elif not online and self._summary_handle is not None:
            self._summary_handle.cancel()
            self._summary_handle = None

        for callback in list(self._callbacks):
            try:
                callback(online)
            except Exception as e:
                logger.error(f"Error in connection callback: {e}")

    def _schedule_summary_sync(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; chapter summaries not refreshed")
            return

        if self._summary_handle is not None:
            self._summary_handle.cancel()
        self._summary_handle = loop.call_later(self.summary_settle_seconds, self._launch_summary_sync)

    def _launch_summary_sync(self) -> None:
        self._summary_handle = None
        if self._summary_task is not None and not self._summary_task.done():
            return
        self._summary_task = asyncio.get_running_loop().create_task(self.sync_chapter_summaries())

    def register_status_callback(self, callback: Callable[[bool], None]) -> None:
        """Register a callback for online/offline status changes."""
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unregister_status_callback(self, callback: Callable[[bool], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    # =========================================================================
    # READS
    # =========================================================================

    async def fetch_and_cache(
        self,
        namespace: str,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        """
        Fetch a table online and cache it; fall back to the cached snapshot.

        Args:
            namespace: Cache namespace (see TABLE_MAPPING)
            order_by: Optional remote ordering column
            descending: Ordering direction

        Returns:
            List of records
        """
        table = TABLE_MAPPING.get(namespace, namespace)

        if self.is_online:
            try:
                rows = await self.remote.fetch(table, order_by=order_by, descending=descending)
            except RemoteStoreError as e:
                logger.warning(f"Online fetch failed for {table}: {e}")
            else:
                self.cache.put(namespace, rows)
                logger.debug(f"Fetched {len(rows)} rows from remote: {table}")
                return rows

        cached = self.cache.get(namespace)
        logger.debug(f"Serving {len(cached)} cached rows for {namespace}")
        return cached

    # =========================================================================
    # WRITES
    # =========================================================================

    def _row_has_queued_write(self, operation: PendingOperation) -> bool:
        key = entity_key(operation)
        return key is not None and any(entity_key(op) == key for op in self.cache.drain_queue())

    async def _write(self, operation: PendingOperation, namespace: str, record: Dict[str, Any]) -> bool:
        """
        Update the local snapshot, then try the remote write; queue on failure.

        A row that still has a queued write gets this one queued behind it.

        Returns:
            True if the remote store confirmed the write
        """
        self.cache.put_record(namespace, record)

        if self.is_online and self._row_has_queued_write(operation):
            logger.info(f"Queueing {operation.type} behind an unsynced write to the same row")
        elif self.is_online:
            try:
                await self.remote.apply(operation)
                return True
            except RemoteStoreError as e:
                logger.warning(f"Remote write failed, queueing {operation.type}: {e}")

        self.cache.enqueue(operation)
        return False

    async def mark_content_complete(self, user_id: str, content_id: str) -> bool:
        """Record that a learner finished a lesson."""
        completed_at = _now_iso()
        payload = {
            "user_id": user_id,
            "content_id": content_id,
            "completed": True,
            "completed_at": completed_at,
        }
        record = {"id": f"{user_id}:{content_id}", **payload}
        return await self._write(PendingOperation(PROGRESS_UPSERT, payload), Namespace.PROGRESS, record)

    async def submit_quiz_score(
        self,
        user_id: str,
        quiz_id: str,
        score: int,
        total_questions: int = 1,
    ) -> bool:
        """Record a quiz attempt; the latest attempt per quiz wins."""
        if score < 0 or total_questions < 1 or score > total_questions:
            raise ValueError(f"Invalid quiz score {score}/{total_questions}")

        payload = {
            "user_id": user_id,
            "quiz_id": quiz_id,
            "score": score,
            "total_questions": total_questions,
            "attempted_at": _now_iso(),
        }
        record = {"id": f"{user_id}:{quiz_id}", **payload}
        return await self._write(PendingOperation(QUIZ_SCORE_UPSERT, payload), Namespace.QUIZ_SCORES, record)

    # =========================================================================
    # CHAPTER SUMMARIES
    # =========================================================================

    async def sync_chapter_summaries(self) -> Optional[int]:
        """
        Refresh the cached chapter summaries used by the offline chat.

        Returns:
            Number of summaries cached, or None if nothing was fetched
        """
        if not self.is_online or self._summaries_syncing:
            return None

        self._summaries_syncing = True
        try:
            with ErrorContext("Syncing chapter summaries") as ctx:
                rows = await self.remote.fetch(
                    TABLE_MAPPING[Namespace.CHAPTER_SUMMARIES],
                    order_by="updated_at",
                    descending=True,
                )
        finally:
            self._summaries_syncing = False

        if ctx.error is not None:
            return None

        self.cache.put(Namespace.CHAPTER_SUMMARIES, rows)
        self.cache.set_setting(SUMMARIES_LAST_SYNC, _now_iso())
        logger.info(f"{len(rows)} chapter summaries synced")
        return len(rows)

    def get_chapter_summaries(self) -> List[Dict[str, Any]]:
        return self.cache.get(Namespace.CHAPTER_SUMMARIES)

    # =========================================================================
    # SYNC & STATUS
    # =========================================================================

    async def sync_now(self) -> bool:
        """
        Trigger an immediate queue replay.

        Returns:
            True if the pass finished without failures
        """
        if self.synchronizer is None or not self.is_online:
            logger.warning("Cannot sync: offline")
            return False
        status = await self.synchronizer.sync_now()
        return bool(status.sync_success)

    def get_status(self) -> Dict[str, Any]:
        """Status information for UI display."""
        last_summary_sync = self.last_summary_sync
        return {
            "connection": self.monitor.get_status_display(),
            "sync": self.synchronizer.get_status_display() if self.synchronizer else None,
            "is_online": self.is_online,
            "pending_sync": self.pending_sync_count,
            "durable": self.cache.is_durable,
            "summary_count": len(self.get_chapter_summaries()),
            "last_summary_sync": last_summary_sync.isoformat() if last_summary_sync else None,
        }

    async def cleanup(self) -> None:
        """Detach from the monitor and stop background work."""
        self.monitor.unsubscribe(self._on_connection_change)
        if self._summary_handle is not None:
            self._summary_handle.cancel()
            self._summary_handle = None
        if self.synchronizer is not None:
            await self.synchronizer.stop()
        await self.monitor.stop_monitoring()
        self._initialized = False
