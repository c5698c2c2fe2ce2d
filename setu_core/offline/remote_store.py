# =============================================================================
# setu_core/offline/remote_store.py
# Remote data store boundary (Supabase)
# =============================================================================
"""
Applies pending operations to, and reads snapshots from, the remote store.

Every failure is translated into one of two classes the synchronizer acts on:
- RemoteRejectedError: the store answered and refused the write
- RemoteUnavailableError: the store could not be reached
"""

from __future__ import annotations
import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable
import logging

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from setu_core.errors import (
    RemoteRejectedError,
    RemoteStoreError,
    RemoteUnavailableError,
    UnknownOperationError,
)
from setu_core.offline.durable_cache import PendingOperation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationHandler:
    """Where an operation type lands remotely and how it is deduplicated."""
    table: str
    on_conflict: str


PROGRESS_UPSERT = "progress-upsert"
QUIZ_SCORE_UPSERT = "quiz-score-upsert"

OPERATION_HANDLERS: Dict[str, OperationHandler] = {
    PROGRESS_UPSERT: OperationHandler(table="progress", on_conflict="user_id,content_id"),
    QUIZ_SCORE_UPSERT: OperationHandler(table="quiz_scores", on_conflict="user_id,quiz_id"),
}

# Fields that only exist in the local cache
LOCAL_ONLY_FIELDS = ("id", "sync_status", "pending")


def handler_for(operation: PendingOperation) -> OperationHandler:
    handler = OPERATION_HANDLERS.get(operation.type)
    if handler is None:
        raise UnknownOperationError(
            f"No handler for operation type '{operation.type}'",
            operation_type=operation.type,
            operation_id=operation.id,
        )
    return handler


def entity_key(operation: PendingOperation) -> Optional[Tuple[Any, ...]]:
    """
    Remote row an operation writes: (table, *conflict column values).

    None for operation types without a handler.
    """
    try:
        handler = handler_for(operation)
    except UnknownOperationError:
        return None
    columns = handler.on_conflict.split(",")
    return (handler.table, *(operation.payload.get(c) for c in columns))


@runtime_checkable
class RemoteStore(Protocol):
    """Boundary consumed by the Synchronizer and the LearningDataService."""

    async def apply(self, operation: PendingOperation) -> None:
        ...

    async def fetch(
        self,
        table: str,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        ...


class SupabaseRemoteStore:
    """
    RemoteStore backed by the async Supabase client.

    The client is created lazily on first use so constructing the store
    never touches the network.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        key: Optional[str] = None,
        client: Optional[AsyncClient] = None,
    ):
        self.url = url
        self.key = key
        self._client = client

    @classmethod
    def from_settings(cls, settings) -> SupabaseRemoteStore:
        settings.require_remote()
        return cls(url=settings.supabase_url, key=settings.supabase_key)

    async def _get_client(self) -> AsyncClient:
        if self._client is None:
            if not self.url or not self.key:
                raise RemoteUnavailableError("Supabase credentials are not configured")
            self._client = await acreate_client(self.url, self.key)
        return self._client

    async def _execute(self, query, table: str, operation_id: Optional[str] = None):
        try:
            return await query.execute()
        except APIError as e:
            raise RemoteRejectedError(
                e.message or str(e),
                status=str(e.code) if e.code else None,
                table=table,
                operation_id=operation_id,
            ) from e
        except (httpx.TransportError, OSError, asyncio.TimeoutError) as e:
            raise RemoteUnavailableError(
                f"Remote store unreachable: {e}",
                table=table,
                operation_id=operation_id,
            ) from e

    async def apply(self, operation: PendingOperation) -> None:
        """Upsert the operation payload into its target table."""
        handler = handler_for(operation)
        payload = {k: v for k, v in operation.payload.items() if k not in LOCAL_ONLY_FIELDS}

        client = await self._get_client()
        query = client.table(handler.table).upsert(payload, on_conflict=handler.on_conflict)
        await self._execute(query, handler.table, operation.id)
        logger.debug(f"Applied {operation.type} ({operation.id}) to {handler.table}")

    async def fetch(
        self,
        table: str,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        client = await self._get_client()
        query = client.table(table).select("*")
        if order_by:
            query = query.order(order_by, desc=descending)

        response = await self._execute(query, table)
        rows = response.data or []
        if not isinstance(rows, list):
            raise RemoteStoreError(f"Unexpected response shape from {table}", table=table)
        return rows
