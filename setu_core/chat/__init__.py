# =============================================================================
# setu_core/chat/__init__.py
# Setu Saarthi tutor chat: streamed online answers, matched offline answers
# =============================================================================

from setu_core.chat.models import ChatMessage, ChatTranscript, Role
from setu_core.chat.stream_decoder import StreamDecoder
from setu_core.chat.chat_client import ChatEndpointClient
from setu_core.chat.knowledge_base import (
    DEFAULT_ANSWER,
    KNOWLEDGE_BASE,
    DefaultEntry,
    KeywordEntry,
    KnowledgeEntry,
)
from setu_core.chat.matcher import best_entry, match, score_entry
from setu_core.chat.summaries import (
    ChapterSummary,
    answer_from_summaries,
    format_summary,
    search_summaries,
)
from setu_core.chat.orchestrator import ChatOrchestrator

__all__ = [
    "ChatMessage",
    "ChatTranscript",
    "Role",
    "StreamDecoder",
    "ChatEndpointClient",
    "DEFAULT_ANSWER",
    "KNOWLEDGE_BASE",
    "DefaultEntry",
    "KeywordEntry",
    "KnowledgeEntry",
    "best_entry",
    "match",
    "score_entry",
    "ChapterSummary",
    "answer_from_summaries",
    "format_summary",
    "search_summaries",
    "ChatOrchestrator",
]
