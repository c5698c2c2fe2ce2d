# =============================================================================
# setu_core/chat/matcher.py
# Offline Knowledge Matcher - scored keyword matching
# =============================================================================
"""
Deterministic keyword scoring over the static knowledge base.

Each keyword found in the lowercased question adds its length to the entry's
score, plus WHOLE_WORD_BONUS when it stands as a whole word. The strictly
highest score wins, so ties keep the earliest entry. Nothing above zero means
the default answer.
"""

import unicodedata
from typing import Optional, Sequence

from setu_core.chat.knowledge_base import (
    DEFAULT_ANSWER,
    KNOWLEDGE_BASE,
    DefaultEntry,
    KeywordEntry,
    answer_for,
)

WHOLE_WORD_BONUS = 5


def _is_word_char(ch: str) -> bool:
    # Combining marks (Devanagari matras, viramas) belong to the word
    return ch.isalnum() or ch == "_" or unicodedata.category(ch).startswith("M")


def _occurs_as_word(text: str, keyword: str) -> bool:
    start = text.find(keyword)
    while start != -1:
        end = start + len(keyword)
        before_ok = start == 0 or not _is_word_char(text[start - 1])
        after_ok = end == len(text) or not _is_word_char(text[end])
        if before_ok and after_ok:
            return True
        start = text.find(keyword, start + 1)
    return False


def score_entry(entry: KeywordEntry, user_text: str) -> int:
    """Score one entry against a question. Pure."""
    text = user_text.lower().strip()
    score = 0
    for keyword in entry.keywords:
        needle = keyword.lower()
        if not needle or needle not in text:
            continue
        score += len(needle)
        if _occurs_as_word(text, needle):
            score += WHOLE_WORD_BONUS
    return score


def best_entry(
    user_text: str,
    entries: Sequence[KeywordEntry] = KNOWLEDGE_BASE,
) -> Optional[KeywordEntry]:
    """The highest-scoring entry, or None if no keyword matched."""
    best: Optional[KeywordEntry] = None
    best_score = 0
    for entry in entries:
        score = score_entry(entry, user_text)
        if score > best_score:
            best, best_score = entry, score
    return best


def match(
    user_text: str,
    language: str = "en",
    entries: Sequence[KeywordEntry] = KNOWLEDGE_BASE,
    default: DefaultEntry = DEFAULT_ANSWER,
) -> str:
    """
    Answer a question from the static knowledge base.

    Args:
        user_text: The learner's question
        language: "en" or "hi" (anything else falls back to English)
        entries: Knowledge base to search
        default: Answer used when nothing matches

    Returns:
        Answer text
    """
    entry = best_entry(user_text, entries)
    return answer_for(entry if entry is not None else default, language)
