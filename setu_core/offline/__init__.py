# =============================================================================
# setu_core/offline/__init__.py
# Offline-Resilience Layer for Shiksha Setu
# =============================================================================
"""
Offline-First Architecture Module

Learner writes never wait for the network: they go to the remote store when
it is reachable and into the pending queue when it is not. The queue is
replayed once connectivity returns.

Architecture:
------------
┌─────────────────────────────────────────────────────────────────┐
│                    OFFLINE-FIRST ARCHITECTURE                    │
├─────────────────────────────────────────────────────────────────┤
│                                                                  │
│   ┌──────────────────────────────────────────────────────────┐  │
│   │                LearningDataService                        │  │
│   │        (online-first writes, fetch-and-cache reads)       │  │
│   └──────────────────────────────────────────────────────────┘  │
│                            │                                     │
│              ┌─────────────┴─────────────┐                      │
│              ▼                           ▼                      │
│   ┌──────────────────┐        ┌──────────────────┐             │
│   │ ConnectivityMon. │        │   DurableCache   │             │
│   │ (online boolean) │        │ (snapshots+queue)│             │
│   └──────────────────┘        └──────────────────┘             │
│              │ false->true               │                      │
│              ▼                           ▼                      │
│   ┌──────────────────┐        ┌──────────────────┐             │
│   │   Synchronizer   │───────►│   RemoteStore    │             │
│   │  (FIFO replay)   │        │    (Supabase)    │             │
│   └──────────────────┘        └──────────────────┘             │
└─────────────────────────────────────────────────────────────────┘

Usage:
------
from setu_core.offline import build_offline_stack

service = build_offline_stack(load_settings())
await service.initialize()
await service.mark_content_complete(user_id, content_id)
print(service.pending_sync_count)
"""

from setu_core.offline.storage import (
    KeyValueStorage,
    MemoryStorage,
    SQLiteStorage,
)

from setu_core.offline.durable_cache import (
    DurableCache,
    Namespace,
    OperationStatus,
    PendingOperation,
    StorageWarning,
)

from setu_core.offline.connection_manager import (
    ConnectivityMonitor,
    ConnectionState,
    ConnectionStatus,
)

from setu_core.offline.remote_store import (
    OPERATION_HANDLERS,
    PROGRESS_UPSERT,
    QUIZ_SCORE_UPSERT,
    RemoteStore,
    SupabaseRemoteStore,
)

from setu_core.offline.sync_engine import (
    Synchronizer,
    SyncStatus,
)

from setu_core.offline.learning_data_service import (
    LearningDataService,
    TABLE_MAPPING,
)


def build_offline_stack(settings, storage=None, remote=None) -> LearningDataService:
    """
    Wire storage, cache, monitor, remote store and synchronizer from Settings.

    Args:
        settings: setu_core.config.Settings
        storage: Optional storage backend (default: SQLiteStorage at settings.storage_path)
        remote: Optional RemoteStore (default: SupabaseRemoteStore from settings)
    """
    storage = storage or SQLiteStorage(settings.storage_path, max_bytes=settings.storage_max_bytes)
    cache = DurableCache(
        storage,
        namespace_limits={Namespace.CHAT_MESSAGES: settings.chat_history_limit},
    )
    monitor = ConnectivityMonitor(
        supabase_url=settings.supabase_url,
        probe_hosts=settings.probe_hosts,
        timeout=settings.probe_timeout_seconds,
    )
    remote = remote or SupabaseRemoteStore.from_settings(settings)
    synchronizer = Synchronizer.from_settings(settings, cache, remote, monitor)
    return LearningDataService(
        cache,
        remote,
        monitor,
        synchronizer,
        summary_settle_seconds=settings.summary_settle_seconds,
    )


__all__ = [
    "KeyValueStorage",
    "MemoryStorage",
    "SQLiteStorage",
    "DurableCache",
    "Namespace",
    "OperationStatus",
    "PendingOperation",
    "StorageWarning",
    "ConnectivityMonitor",
    "ConnectionState",
    "ConnectionStatus",
    "OPERATION_HANDLERS",
    "PROGRESS_UPSERT",
    "QUIZ_SCORE_UPSERT",
    "RemoteStore",
    "SupabaseRemoteStore",
    "Synchronizer",
    "SyncStatus",
    "LearningDataService",
    "TABLE_MAPPING",
    "build_offline_stack",
]
