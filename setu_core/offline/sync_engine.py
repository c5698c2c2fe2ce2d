# =============================================================================
# setu_core/offline/sync_engine.py
# Connectivity-Triggered Synchronization Engine
# =============================================================================
"""
Synchronizer - replays the pending-mutation queue against the remote store.

Features:
- One pass per offline -> online edge, after a settle delay
- Strict FIFO replay, one operation at a time
- A failed write holds back later writes to the same row
- Only confirmed operations leave the queue
- Edges during a pass coalesce into a single follow-up pass
- Bounded retries: repeatedly rejected operations are poisoned
- Event callbacks for status and poisoned operations
"""

from __future__ import annotations
import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple
import logging

from setu_core.errors import RemoteRejectedError, RemoteStoreError
from setu_core.logging import LogContext
from setu_core.offline.connection_manager import ConnectivityMonitor
from setu_core.offline.durable_cache import DurableCache, OperationStatus, PendingOperation
from setu_core.offline.remote_store import RemoteStore, entity_key

logger = logging.getLogger(__name__)


@dataclass
class SyncStatus:
    """Observable outcome of the most recent pass."""
    is_syncing: bool = False
    last_sync_time: Optional[datetime] = None
    pending_count: int = 0
    sync_success: Optional[bool] = None
    synced_count: int = 0
    failed_count: int = 0
    poisoned_count: int = 0


class Synchronizer:
    """
    Drains the pending queue once connectivity is confirmed.

    Usage:
        sync = Synchronizer(cache, remote, monitor)
        sync.start()               # react to offline -> online edges
        status = await sync.sync_now()
    """

    SETTLE_SECONDS = 1.0        # Delay between an online edge and the pass
    MAX_RETRY_ATTEMPTS = 5      # Rejections before an operation is poisoned

    def __init__(
        self,
        cache: DurableCache,
        remote: RemoteStore,
        monitor: ConnectivityMonitor,
        settle_seconds: float = SETTLE_SECONDS,
        max_attempts: int = MAX_RETRY_ATTEMPTS,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.cache = cache
        self.remote = remote
        self.monitor = monitor
        self.settle_seconds = settle_seconds
        self.max_attempts = max_attempts

        self._status = SyncStatus(pending_count=cache.pending_count)
        self._callbacks: List[Callable[[SyncStatus], None]] = []
        self._poison_callbacks: List[Callable[[List[PendingOperation]], None]] = []
        self._settle_handle: Optional[asyncio.TimerHandle] = None
        self._pass_task: Optional[asyncio.Task] = None
        self._rerun_requested = False
        self._started = False

    @classmethod
    def from_settings(cls, settings, cache, remote, monitor) -> Synchronizer:
        return cls(
            cache,
            remote,
            monitor,
            settle_seconds=settings.sync_settle_seconds,
            max_attempts=settings.max_sync_attempts,
        )

    @property
    def status(self) -> SyncStatus:
        return self._status

    @property
    def is_syncing(self) -> bool:
        return self._status.is_syncing

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self) -> None:
        """Subscribe to connectivity edges."""
        if self._started:
            return
        self.monitor.subscribe(self._on_connectivity_change)
        self._started = True
        logger.info("Synchronizer started")

    async def stop(self) -> None:
        """Unsubscribe and wait for any running pass to finish."""
        self.monitor.unsubscribe(self._on_connectivity_change)
        self._cancel_settle()
        self._started = False
        await self.wait_until_idle()
        logger.info("Synchronizer stopped")

    async def wait_until_idle(self) -> None:
        """Wait for the running pass (and any coalesced follow-up) to finish."""
        if self._pass_running:
            await asyncio.shield(self._pass_task)

    def _on_connectivity_change(self, online: bool, previous: bool) -> None:
        if online and not previous:
            logger.info("Connection restored, scheduling sync")
            self._schedule_pass()
        elif not online:
            self._cancel_settle()

    def _cancel_settle(self) -> None:
        if self._settle_handle is not None:
            self._settle_handle.cancel()
            self._settle_handle = None
            logger.debug("Pending sync cancelled: connection lost")

    def _schedule_pass(self) -> None:
        if self._pass_running:
            self._rerun_requested = True
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; online edge not synced")
            return

        self._cancel_settle()
        self._settle_handle = loop.call_later(self.settle_seconds, self._launch_pass)

    def _launch_pass(self) -> None:
        self._settle_handle = None
        if not self.monitor.is_online:
            return
        if self._pass_running:
            self._rerun_requested = True
            return
        self._pass_task = asyncio.get_running_loop().create_task(self._run_passes())

    @property
    def _pass_running(self) -> bool:
        return self._pass_task is not None and not self._pass_task.done()

    async def _run_passes(self) -> None:
        while True:
            self._rerun_requested = False
            await self._perform_sync()
            if not (self._rerun_requested and self.monitor.is_online):
                break
            logger.info("Online edge arrived during sync; running one more pass")
        self._rerun_requested = False

    async def sync_now(self) -> SyncStatus:
        """
        Run a pass immediately (or join the one already running).

        Returns:
            The resulting SyncStatus
        """
        if not self.monitor.is_online:
            logger.debug("Cannot sync: offline")
            return self._status

        self._cancel_settle()
        if self._pass_running:
            self._rerun_requested = True
        else:
            self._pass_task = asyncio.get_running_loop().create_task(self._run_passes())

        # A caller giving up must not cancel the pass itself
        await asyncio.shield(self._pass_task)
        return self._status

    # =========================================================================
    # REPLAY
    # =========================================================================

    async def _perform_sync(self) -> None:
        queue = self.cache.drain_queue()

        self._status.is_syncing = True
        self._notify_callbacks()

        succeeded: List[str] = []
        failed: List[PendingOperation] = []
        held: List[PendingOperation] = []
        newly_poisoned: List[PendingOperation] = []
        # Rows with an earlier operation still queued; later writes to them wait
        blocked: Set[Tuple[Any, ...]] = set()

        try:
            replayable = sum(1 for op in queue if not op.is_poisoned)
            level = logging.INFO if replayable else logging.DEBUG
            with LogContext(logger, f"Sync pass over {replayable} pending operations", level=level):
                for op in queue:
                    key = entity_key(op)
                    if op.is_poisoned:
                        if key is not None:
                            blocked.add(key)
                        continue
                    if key in blocked:
                        held.append(op)
                        logger.info(f"Operation {op.id} held behind an earlier unsynced write to the same row")
                        continue

                    try:
                        await self.remote.apply(op)
                    except RemoteRejectedError as e:
                        op.attempts += 1
                        op.last_error = e.message
                        if op.attempts >= self.max_attempts:
                            op.status = OperationStatus.POISONED
                            newly_poisoned.append(op)
                            logger.error(
                                f"Operation {op.id} ({op.type}) poisoned after "
                                f"{op.attempts} rejections: {e.message}"
                            )
                        else:
                            logger.warning(f"Operation {op.id} rejected ({op.attempts}/{self.max_attempts}): {e}")
                        failed.append(op)
                    except RemoteStoreError as e:
                        op.last_error = e.message
                        failed.append(op)
                        logger.warning(f"Operation {op.id} not synced: {e}")
                    except Exception as e:
                        op.last_error = str(e)
                        failed.append(op)
                        logger.error(f"Unexpected error syncing operation {op.id}: {e}", exc_info=True)
                    else:
                        succeeded.append(op.id)
                        continue

                    if key is not None:
                        blocked.add(key)

                # Read-decide-write: no suspension between these two calls
                self.cache.clear(succeeded)
                self.cache.update_operations(failed)

            logger.info(
                f"Sync complete: {len(succeeded)} success, {len(failed)} failed, {len(held)} held"
            )
        finally:
            poisoned_count = len(self.cache.poisoned_operations())
            self._status.is_syncing = False
            self._status.last_sync_time = datetime.now()
            self._status.pending_count = self.cache.pending_count
            self._status.sync_success = not failed and not held and poisoned_count == 0
            self._status.synced_count = len(succeeded)
            self._status.failed_count = len(failed) + len(held)
            self._status.poisoned_count = poisoned_count
            self._notify_callbacks()

        if newly_poisoned:
            self._notify_poisoned(newly_poisoned)

    # =========================================================================
    # POISONED OPERATIONS
    # =========================================================================

    def _select_poisoned(self, ids: Optional[Iterable[str]]) -> List[PendingOperation]:
        poisoned = self.cache.poisoned_operations()
        if ids is None:
            return poisoned
        wanted = set(ids)
        return [op for op in poisoned if op.id in wanted]

    def _refresh_counts(self) -> None:
        self._status.pending_count = self.cache.pending_count
        self._status.poisoned_count = len(self.cache.poisoned_operations())
        self._notify_callbacks()

    def requeue_poisoned(self, ids: Optional[Iterable[str]] = None) -> int:
        """Give poisoned operations a fresh retry budget (all of them if ids is None)."""
        selected = self._select_poisoned(ids)
        for op in selected:
            op.status = OperationStatus.PENDING
            op.attempts = 0
            op.last_error = None
        self.cache.update_operations(selected)
        if selected:
            logger.info(f"Requeued {len(selected)} poisoned operations")
            self._refresh_counts()
        return len(selected)

    def discard(self, ids: Optional[Iterable[str]] = None) -> int:
        """Drop poisoned operations the user gave up on. Pending ones are never touched."""
        selected = self._select_poisoned(ids)
        removed = self.cache.clear(op.id for op in selected)
        if removed:
            logger.warning(f"Discarded {removed} poisoned operations")
            self._refresh_counts()
        return removed

    # =========================================================================
    # OBSERVERS
    # =========================================================================

    def register_callback(self, callback: Callable[[SyncStatus], None]) -> None:
        """Register a callback for sync status changes."""
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unregister_callback(self, callback: Callable[[SyncStatus], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def register_poison_callback(self, callback: Callable[[List[PendingOperation]], None]) -> None:
        """Register a callback receiving operations that were just poisoned."""
        if callback not in self._poison_callbacks:
            self._poison_callbacks.append(callback)

    def unregister_poison_callback(self, callback: Callable[[List[PendingOperation]], None]) -> None:
        if callback in self._poison_callbacks:
            self._poison_callbacks.remove(callback)

    def _notify_callbacks(self) -> None:
        for callback in list(self._callbacks):
            try:
                callback(self._status)
            except Exception as e:
                logger.error(f"Error in sync callback: {e}")

    def _notify_poisoned(self, operations: List[PendingOperation]) -> None:
        for callback in list(self._poison_callbacks):
            try:
                callback(operations)
            except Exception as e:
                logger.error(f"Error in poison callback: {e}")

    def get_status_display(self) -> Dict[str, Any]:
        """Get sync status for UI display."""
        return {
            "is_syncing": self._status.is_syncing,
            "last_sync": self._status.last_sync_time.isoformat() if self._status.last_sync_time else None,
            "sync_success": self._status.sync_success,
            "pending_count": self.cache.pending_count,
            "synced_count": self._status.synced_count,
            "failed_count": self._status.failed_count,
            "poisoned_count": self._status.poisoned_count,
        }
