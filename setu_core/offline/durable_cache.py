# =============================================================================
# setu_core/offline/durable_cache.py
# Durable Cache and Pending-Mutation Queue
# =============================================================================
"""
DurableCache - namespaced snapshots of domain records plus the queue of
mutations that have not yet been confirmed by the remote store.

Features:
- Whole-namespace snapshots (newest successful read wins)
- FIFO pending queue, persisted on every change
- Bounded transient namespaces (chat history)
- Corrupt payloads read as empty and are discarded
- Write failures keep the in-memory state and raise a durability warning
"""

from __future__ import annotations
import copy
import json
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Set
import logging

from setu_core.errors import StorageError
from setu_core.offline.storage import KeyValueStorage

logger = logging.getLogger(__name__)

STORAGE_PREFIX = "shiksha_setu_"
PENDING_QUEUE_KEY = "pending_sync"
SETTINGS_PREFIX = "setting_"


class Namespace:
    """Well-known record namespaces."""
    CONTENT = "content"
    PROGRESS = "progress"
    QUIZZES = "quizzes"
    QUIZ_SCORES = "quiz_scores"
    CHAPTER_SUMMARIES = "chapter_summaries"
    CHAT_MESSAGES = "chat_messages"


# Transient namespaces keep only their most recent N records
DEFAULT_NAMESPACE_LIMITS: Dict[str, int] = {
    Namespace.CHAT_MESSAGES: 50,
}


class OperationStatus(Enum):
    """Lifecycle of a queued mutation."""
    PENDING = "pending"      # Waiting for the next sync pass
    POISONED = "poisoned"    # Rejected too often; needs user attention


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@dataclass
class PendingOperation:
    """A locally recorded intent to change remote state."""
    type: str
    payload: Dict[str, Any]
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=_utcnow)
    attempts: int = 0
    status: OperationStatus = OperationStatus.PENDING
    last_error: Optional[str] = None

    @property
    def is_poisoned(self) -> bool:
        return self.status == OperationStatus.POISONED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "payload": self.payload,
            "createdAt": self.created_at.isoformat(),
            "attempts": self.attempts,
            "status": self.status.value,
            "lastError": self.last_error,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PendingOperation:
        created = data.get("createdAt")
        return cls(
            id=str(data["id"]),
            type=str(data["type"]),
            payload=dict(data.get("payload") or {}),
            created_at=datetime.fromisoformat(created) if created else _utcnow(),
            attempts=int(data.get("attempts", 0)),
            status=OperationStatus(data.get("status", OperationStatus.PENDING.value)),
            last_error=data.get("lastError"),
        )


@dataclass
class StorageWarning:
    """Raised to listeners when cached state is no longer durable."""
    key: str
    message: str
    error: Optional[BaseException] = None
    occurred_at: datetime = field(default_factory=_utcnow)


class DurableCache:
    """
    Key-namespaced persistent cache with a pending-mutation queue.

    Usage:
        cache = DurableCache(SQLiteStorage(path))
        cache.put(Namespace.CONTENT, rows)
        cache.enqueue(PendingOperation("progress-upsert", {...}))
        for op in cache.drain_queue():
            ...
        cache.clear([op.id])
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        namespace_limits: Optional[Dict[str, int]] = None,
        prefix: str = STORAGE_PREFIX,
    ):
        self.storage = storage
        self.prefix = prefix
        self.namespace_limits = dict(DEFAULT_NAMESPACE_LIMITS)
        if namespace_limits:
            self.namespace_limits.update(namespace_limits)

        self._snapshots: Dict[str, List[Dict[str, Any]]] = {}
        self._queue: Optional[List[PendingOperation]] = None
        self._undurable_keys: Set[str] = set()
        self._last_warning: Optional[StorageWarning] = None
        self._warning_callbacks: List[Callable[[StorageWarning], None]] = []

    # =========================================================================
    # DURABILITY
    # =========================================================================

    @property
    def is_durable(self) -> bool:
        """False while any in-memory change has failed to reach storage."""
        return not self._undurable_keys

    @property
    def storage_warning(self) -> Optional[StorageWarning]:
        return self._last_warning if self._undurable_keys else None

    def register_warning_callback(self, callback: Callable[[StorageWarning], None]) -> None:
        if callback not in self._warning_callbacks:
            self._warning_callbacks.append(callback)

    def unregister_warning_callback(self, callback: Callable[[StorageWarning], None]) -> None:
        if callback in self._warning_callbacks:
            self._warning_callbacks.remove(callback)

    def _notify_warning(self, warning: StorageWarning) -> None:
        for callback in self._warning_callbacks:
            try:
                callback(warning)
            except Exception as e:
                logger.error(f"Error in storage warning callback: {e}")

    def _key(self, name: str) -> str:
        return f"{self.prefix}{name}"

    def _persist(self, key: str, value: Any) -> bool:
        """Serialize and write; failures are logged and turn into a warning."""
        try:
            raw = json.dumps(value, ensure_ascii=False, default=_json_default)
            self.storage.set_item(key, raw)
        except (TypeError, ValueError, StorageError) as e:
            logger.error(f"Could not persist '{key}': {e}")
            first_failure = key not in self._undurable_keys
            self._undurable_keys.add(key)
            self._last_warning = StorageWarning(
                key=key,
                message="Offline changes are only kept until the app is closed",
                error=e,
            )
            if first_failure:
                self._notify_warning(self._last_warning)
            return False

        if key in self._undurable_keys:
            self._undurable_keys.discard(key)
            logger.info(f"Storage for '{key}' is durable again")
        return True

    def _read(self, key: str) -> Optional[Any]:
        """Read and parse a stored value; corrupt payloads are discarded."""
        try:
            raw = self.storage.get_item(key)
        except Exception as e:
            logger.error(f"Could not read '{key}': {e}")
            return None

        if raw is None:
            return None

        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Discarding corrupt cached payload '{key}': {e}")
            self._discard(key)
            return None

    def _discard(self, key: str) -> None:
        try:
            self.storage.remove_item(key)
        except StorageError as e:
            logger.error(f"Could not remove '{key}': {e}")

    # =========================================================================
    # RECORD SNAPSHOTS
    # =========================================================================

    def _check_namespace(self, namespace: str) -> None:
        if not namespace or namespace == PENDING_QUEUE_KEY or namespace.startswith(SETTINGS_PREFIX):
            raise ValueError(f"Reserved or empty namespace: {namespace!r}")

    def _bound(self, namespace: str, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        limit = self.namespace_limits.get(namespace)
        if limit is not None and len(records) > limit:
            return records[-limit:]
        return records

    def put(self, namespace: str, records: Iterable[Dict[str, Any]]) -> bool:
        """
        Replace the full snapshot of a namespace.

        Returns:
            True if the snapshot reached storage
        """
        self._check_namespace(namespace)
        snapshot = self._bound(namespace, [dict(r) for r in records])
        self._snapshots[namespace] = snapshot
        return self._persist(self._key(namespace), snapshot)

    def get(self, namespace: str) -> List[Dict[str, Any]]:
        """Return the current snapshot, or [] if never populated. Never raises."""
        self._check_namespace(namespace)
        if namespace not in self._snapshots:
            data = self._read(self._key(namespace))
            if data is None:
                data = []
            elif not isinstance(data, list):
                logger.warning(f"Discarding non-list snapshot for '{namespace}'")
                self._discard(self._key(namespace))
                data = []
            self._snapshots[namespace] = [r for r in data if isinstance(r, dict)]
        return copy.deepcopy(self._snapshots[namespace])

    def put_record(self, namespace: str, record: Dict[str, Any]) -> bool:
        """Replace (or append) the single record sharing ``record['id']``."""
        if "id" not in record:
            raise ValueError("Cached records need an 'id'")

        records = self.get(namespace)
        for index, existing in enumerate(records):
            if existing.get("id") == record["id"]:
                records[index] = dict(record)
                break
        else:
            records.append(dict(record))
        return self.put(namespace, records)

    def forget(self, namespace: str, record_id: Any) -> bool:
        """Drop one record; returns False if it was not cached."""
        records = self.get(namespace)
        remaining = [r for r in records if r.get("id") != record_id]
        if len(remaining) == len(records):
            return False
        self.put(namespace, remaining)
        return True

    def clear_namespace(self, namespace: str) -> None:
        self._check_namespace(namespace)
        self._snapshots.pop(namespace, None)
        self._undurable_keys.discard(self._key(namespace))
        self._discard(self._key(namespace))

    # =========================================================================
    # PENDING QUEUE
    # =========================================================================

    def _load_queue(self) -> List[PendingOperation]:
        if self._queue is None:
            data = self._read(self._key(PENDING_QUEUE_KEY)) or []
            queue: List[PendingOperation] = []
            for item in data if isinstance(data, list) else []:
                try:
                    queue.append(PendingOperation.from_dict(item))
                except (KeyError, TypeError, ValueError) as e:
                    logger.warning(f"Dropping unreadable pending operation: {e}")
            self._queue = queue
        return self._queue

    def _persist_queue(self) -> bool:
        return self._persist(
            self._key(PENDING_QUEUE_KEY),
            [op.to_dict() for op in self._load_queue()],
        )

    def enqueue(self, operation: PendingOperation) -> PendingOperation:
        """Append an operation and persist the queue immediately."""
        queue = self._load_queue()
        queue.append(replace(operation))
        self._persist_queue()
        logger.info(f"Queued {operation.type} ({operation.id}); {len(queue)} pending")
        return operation

    def drain_queue(self) -> List[PendingOperation]:
        """Return the ordered queue without clearing it."""
        return [replace(op, payload=copy.deepcopy(op.payload)) for op in self._load_queue()]

    def clear(self, ids: Iterable[str]) -> int:
        """Remove exactly the given operation ids. Returns the number removed."""
        targets = set(ids)
        if not targets:
            return 0
        queue = self._load_queue()
        kept = [op for op in queue if op.id not in targets]
        removed = len(queue) - len(kept)
        if removed:
            self._queue = kept
            self._persist_queue()
        return removed

    def update_operations(self, operations: Iterable[PendingOperation]) -> None:
        """Write back bookkeeping (attempts, status) for operations still queued."""
        updates = {op.id: op for op in operations}
        if not updates:
            return
        self._queue = [
            replace(updates[op.id]) if op.id in updates else op
            for op in self._load_queue()
        ]
        self._persist_queue()

    @property
    def pending_count(self) -> int:
        return len(self._load_queue())

    def poisoned_operations(self) -> List[PendingOperation]:
        return [op for op in self.drain_queue() if op.is_poisoned]

    # =========================================================================
    # SETTINGS
    # =========================================================================

    def get_setting(self, name: str, default: Any = None) -> Any:
        value = self._read(self._key(SETTINGS_PREFIX + name))
        return default if value is None else value

    def set_setting(self, name: str, value: Any) -> bool:
        return self._persist(self._key(SETTINGS_PREFIX + name), value)
