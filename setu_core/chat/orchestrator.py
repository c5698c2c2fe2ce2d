# =============================================================================
# setu_core/chat/orchestrator.py
# Chat Orchestrator - streamed answers online, local answers offline
# =============================================================================
"""
ChatOrchestrator - coordinates the online (streamed) and offline (matched)
answer paths for the tutor chat.

Rules:
- Blank input is ignored
- Offline: the answer is produced locally, no network call is attempted
- Online: the assistant message is allocated first and grows per fragment
- Any transport failure falls back to the local answer with a soft notice
- The transcript is kept in the DurableCache (most recent messages only)
"""

from __future__ import annotations
import asyncio
from typing import Callable, List, Optional, Sequence
import logging

from setu_core.chat.chat_client import ChatEndpointClient
from setu_core.chat.knowledge_base import (
    GREETING_QUESTION,
    KNOWLEDGE_BASE,
    WELCOME_ONLINE,
    KeywordEntry,
    answer_for,
)
from setu_core.chat.matcher import match
from setu_core.chat.models import ChatMessage, ChatTranscript, Role
from setu_core.chat.stream_decoder import StreamDecoder
from setu_core.chat.summaries import answer_from_summaries
from setu_core.errors import ChatTransportError, handle_error
from setu_core.errors.handlers import Notifier
from setu_core.offline.connection_manager import ConnectivityMonitor
from setu_core.offline.durable_cache import DurableCache, Namespace, StorageWarning

logger = logging.getLogger(__name__)

WELCOME_ID = "welcome"

SUMMARY_COUNT_LINES = {
    "en": "\n\n📚 I have {count} chapter summaries available.",
    "hi": "\n\n📚 मेरे पास {count} अध्याय सारांश उपलब्ध हैं।",
}

FALLBACK_NOTICES = {
    "en": "Couldn't reach the AI tutor, showing an offline answer instead.",
    "hi": "AI ट्यूटर से संपर्क नहीं हो सका, ऑफ़लाइन जवाब दिखाया जा रहा है।",
}


class ChatOrchestrator:
    """
    Tutor chat session.

    Usage:
        chat = ChatOrchestrator(monitor, cache, ChatEndpointClient.from_settings(settings))
        chat.add_notice_listener(lambda level, msg: print(level, msg))
        reply = await chat.send("How can I score better in exams?")
    """

    def __init__(
        self,
        monitor: ConnectivityMonitor,
        cache: DurableCache,
        client: Optional[ChatEndpointClient] = None,
        language: str = "en",
        knowledge_base: Sequence[KeywordEntry] = KNOWLEDGE_BASE,
    ):
        self.monitor = monitor
        self.cache = cache
        self.client = client
        self.language = language
        self.knowledge_base = knowledge_base

        self.transcript = ChatTranscript.from_records(cache.get(Namespace.CHAT_MESSAGES))
        self._listeners: List[Notifier] = []
        self._stream_task: Optional[asyncio.Task] = None
        self._cancel_requested = False

        cache.register_warning_callback(self._on_storage_warning)

    @property
    def messages(self) -> List[ChatMessage]:
        return self.transcript.messages

    @property
    def is_streaming(self) -> bool:
        return self._stream_task is not None and not self._stream_task.done()

    # =========================================================================
    # NOTICES
    # =========================================================================

    def add_notice_listener(self, listener: Notifier) -> None:
        """Register a callback receiving (level, message) soft notices."""
        if listener not in self._listeners:
            self._listeners.append(listener)
        warning = self.cache.storage_warning
        if warning is not None:
            listener("warning", warning.message)

    def remove_notice_listener(self, listener: Notifier) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, level: str, message: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(level, message)
            except Exception as e:
                logger.error(f"Error in notice listener: {e}")

    def _on_storage_warning(self, warning: StorageWarning) -> None:
        self._notify("warning", warning.message)

    # =========================================================================
    # ANSWERS
    # =========================================================================

    def offline_answer(self, question: str) -> str:
        """Cached chapter summaries first, then the static knowledge base."""
        summary = answer_from_summaries(
            self.cache.get(Namespace.CHAPTER_SUMMARIES),
            question,
            self.language,
        )
        if summary is not None:
            return summary
        return match(question, self.language, entries=self.knowledge_base)

    def welcome_message(self) -> ChatMessage:
        """Add (once) and return the greeting shown at the top of an empty chat."""
        existing = self.transcript.get(WELCOME_ID)
        if existing is not None:
            return existing

        if self.monitor.is_online and self.client is not None:
            text = WELCOME_ONLINE.get(self.language, WELCOME_ONLINE["en"])
        else:
            greeting = next(e for e in KNOWLEDGE_BASE if e.question == GREETING_QUESTION)
            text = answer_for(greeting, self.language)
            count = len(self.cache.get(Namespace.CHAPTER_SUMMARIES))
            if count:
                text += SUMMARY_COUNT_LINES.get(self.language, SUMMARY_COUNT_LINES["en"]).format(count=count)

        message = ChatMessage(Role.ASSISTANT, text, id=WELCOME_ID).finalize()
        if len(self.transcript) == 0:
            self.transcript.append(message)
        return message

    # =========================================================================
    # SENDING
    # =========================================================================

    async def send(self, text: str) -> Optional[ChatMessage]:
        """
        Answer one user message.

        Returns:
            The final assistant message, or None for blank input
        """
        question = text.strip()
        if not question:
            return None
        if self.is_streaming:
            self._notify("warning", "Please wait for the current answer to finish.")
            return None

        self.transcript.append(ChatMessage(Role.USER, question).finalize())

        if not self.monitor.is_online or self.client is None:
            reply = self.transcript.append(
                ChatMessage(Role.ASSISTANT, self.offline_answer(question)).finalize()
            )
            self._persist()
            return reply

        reply = await self._stream_reply(question)
        self._persist()
        return reply

    async def _stream_reply(self, question: str) -> ChatMessage:
        assistant = self.transcript.append(ChatMessage(Role.ASSISTANT))
        history = self.transcript.history_for_request(exclude_ids=(WELCOME_ID, assistant.id))
        decoder = StreamDecoder()

        self._cancel_requested = False
        self._stream_task = asyncio.ensure_future(
            decoder.consume(
                self.client.stream_chat(history, self.language),
                on_update=assistant.set_content,
            )
        )

        try:
            await self._stream_task
        except asyncio.CancelledError:
            if not self._cancel_requested:
                # The caller itself was cancelled
                self._stream_task.cancel()
                assistant.finalize()
                raise
            logger.info("Chat stream cancelled by user")
        except (ChatTransportError, OSError, asyncio.TimeoutError) as e:
            handle_error(e, log_error=True)
            self._notify("warning", FALLBACK_NOTICES.get(self.language, FALLBACK_NOTICES["en"]))
            return self._fall_back(assistant, question)
        finally:
            self._stream_task = None

        if not assistant.content:
            logger.info("Chat stream ended without text; using offline answer")
            return self._fall_back(assistant, question)

        return assistant.finalize()

    def _fall_back(self, assistant: ChatMessage, question: str) -> ChatMessage:
        answer = self.offline_answer(question)
        if assistant.content:
            assistant.finalize()
            return self.transcript.append(ChatMessage(Role.ASSISTANT, answer).finalize())
        assistant.set_content(answer)
        return assistant.finalize()

    def cancel(self) -> bool:
        """Abandon the in-flight stream; the partial answer is kept."""
        if not self.is_streaming:
            return False
        self._cancel_requested = True
        self._stream_task.cancel()
        return True

    def clear(self) -> None:
        """Wipe the transcript here and in storage."""
        self.cancel()
        self.transcript.clear()
        self.cache.clear_namespace(Namespace.CHAT_MESSAGES)

    def _persist(self) -> None:
        self.cache.put(Namespace.CHAT_MESSAGES, self.transcript.to_records())

    def close(self) -> None:
        self.cache.unregister_warning_callback(self._on_storage_warning)
