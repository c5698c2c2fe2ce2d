# =============================================================================
# setu_core/chat/models.py
# Chat messages and transcript
# =============================================================================

from __future__ import annotations
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional
import logging

from setu_core.errors import MessageFinalizedError

logger = logging.getLogger(__name__)


class Role(Enum):
    USER = "user"
    ASSISTANT = "assistant"


def new_message_id(role: Role) -> str:
    return f"{role.value}_{uuid.uuid4().hex[:12]}"


@dataclass
class ChatMessage:
    """
    One transcript entry.

    A streaming assistant message starts empty and is updated in place
    until finalize() is called; afterwards it is immutable.
    """
    role: Role
    content: str = ""
    id: str = ""
    timestamp: datetime = field(default_factory=datetime.now)
    finalized: bool = False

    def __post_init__(self):
        if not self.id:
            self.id = new_message_id(self.role)

    def set_content(self, content: str) -> None:
        if self.finalized:
            raise MessageFinalizedError("Cannot modify a finalized message", message_id=self.id)
        self.content = content

    def finalize(self) -> ChatMessage:
        self.finalized = True
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ChatMessage:
        """Restored messages are always finalized."""
        timestamp = data.get("timestamp")
        return cls(
            id=str(data["id"]),
            role=Role(data["role"]),
            content=str(data.get("content", "")),
            timestamp=datetime.fromisoformat(timestamp) if timestamp else datetime.now(),
            finalized=True,
        )


class ChatTranscript:
    """Append-only, ordered list of messages."""

    def __init__(self, messages: Optional[Iterable[ChatMessage]] = None):
        self._messages: List[ChatMessage] = list(messages or [])

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self._messages)

    @property
    def messages(self) -> List[ChatMessage]:
        return list(self._messages)

    @property
    def last(self) -> Optional[ChatMessage]:
        return self._messages[-1] if self._messages else None

    def append(self, message: ChatMessage) -> ChatMessage:
        self._messages.append(message)
        return message

    def get(self, message_id: str) -> Optional[ChatMessage]:
        for message in self._messages:
            if message.id == message_id:
                return message
        return None

    def clear(self) -> None:
        self._messages.clear()

    def history_for_request(self, exclude_ids: Iterable[str] = ()) -> List[Dict[str, str]]:
        """Role/content pairs sent to the chat endpoint (empty messages skipped)."""
        excluded = set(exclude_ids)
        return [
            {"role": m.role.value, "content": m.content}
            for m in self._messages
            if m.content and m.id not in excluded
        ]

    def to_records(self) -> List[Dict[str, Any]]:
        """Finalized messages only; an in-flight stream is never persisted half-done."""
        return [m.to_dict() for m in self._messages if m.finalized]

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]]) -> ChatTranscript:
        messages = []
        for record in records:
            try:
                messages.append(ChatMessage.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping unreadable chat message: {e}")
        return cls(messages)
