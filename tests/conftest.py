# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import asyncio
import json
from collections import defaultdict
from types import SimpleNamespace
from typing import Awaitable, Callable, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from setu_core.offline.connection_manager import ConnectivityMonitor
from setu_core.offline.durable_cache import DurableCache, PendingOperation
from setu_core.offline.remote_store import handler_for
from setu_core.offline.storage import MemoryStorage


# =============================================================================
# FAKES
# =============================================================================

class FakeRemoteStore:
    """
    In-memory RemoteStore with upsert semantics.

    failures: op id -> exception raised on every apply until removed
    lost_acks: op ids whose write lands but whose acknowledgement is lost once
    before_apply: coroutine awaited before each apply (for interleaving tests)
    """

    def __init__(self):
        self.applied: List[PendingOperation] = []
        self.tables: Dict[str, Dict[tuple, dict]] = defaultdict(dict)
        self.rows: Dict[str, List[dict]] = {}
        self.failures: Dict[str, Exception] = {}
        self.lost_acks: set = set()
        self.fetch_error: Optional[Exception] = None
        self.fetch_calls: List[str] = []
        self.before_apply: Optional[Callable[[PendingOperation], Awaitable[None]]] = None

    async def apply(self, operation: PendingOperation) -> None:
        from setu_core.errors import RemoteUnavailableError

        if self.before_apply is not None:
            await self.before_apply(operation)
        if operation.id in self.failures:
            raise self.failures[operation.id]

        handler = handler_for(operation)
        key = tuple(operation.payload.get(c) for c in handler.on_conflict.split(","))
        self.tables[handler.table][key] = dict(operation.payload)
        self.applied.append(operation)

        if operation.id in self.lost_acks:
            self.lost_acks.discard(operation.id)
            raise RemoteUnavailableError("Connection reset before acknowledgement")

    async def fetch(self, table, order_by=None, descending=False):
        self.fetch_calls.append(table)
        if self.fetch_error is not None:
            raise self.fetch_error
        return [dict(r) for r in self.rows.get(table, [])]

    @property
    def applied_ids(self) -> List[str]:
        return [op.id for op in self.applied]


# =============================================================================
# CORE FIXTURES
# =============================================================================

@pytest.fixture
def memory_storage():
    """Session-scoped storage without a capacity limit"""
    return MemoryStorage()


@pytest.fixture
def cache(memory_storage):
    """DurableCache over in-memory storage"""
    return DurableCache(memory_storage)


@pytest.fixture
def remote():
    """Fake remote store"""
    return FakeRemoteStore()


@pytest.fixture
def online_monitor():
    return ConnectivityMonitor(initial_online=True)


@pytest.fixture
def offline_monitor():
    return ConnectivityMonitor(initial_online=False)


# =============================================================================
# MOCK FIXTURES
# =============================================================================

@pytest.fixture
def mock_supabase():
    """Mock async Supabase client (query builders are sync, execute() is awaited)"""
    mock_client = MagicMock()
    table = mock_client.table.return_value
    table.upsert.return_value.execute = AsyncMock(return_value=MagicMock(data=[]))
    table.select.return_value.execute = AsyncMock(return_value=MagicMock(data=[]))
    table.select.return_value.order.return_value.execute = AsyncMock(return_value=MagicMock(data=[]))
    return mock_client


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def sse_event(content: str) -> bytes:
    """One server-sent chat event carrying a content fragment"""
    payload = {"choices": [{"delta": {"content": content}}]}
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n".encode("utf-8")


def sse_body(*fragments: str, done: bool = True) -> bytes:
    body = b"".join(sse_event(f) for f in fragments)
    if done:
        body += b"data: [DONE]\n"
    return body


async def wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    """Poll the event loop until predicate() holds"""
    async def _poll():
        while not predicate():
            await asyncio.sleep(0.005)

    await asyncio.wait_for(_poll(), timeout=timeout)


@pytest.fixture
def sse():
    """SSE body builders: sse.event("Hel"), sse.body("Hel", "lo")"""
    return SimpleNamespace(event=sse_event, body=sse_body)


@pytest.fixture
def waiter():
    return wait_until
