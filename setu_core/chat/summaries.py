# =============================================================================
# setu_core/chat/summaries.py
# Teacher-written chapter summaries answered offline
# =============================================================================
"""
Chapter summaries are fetched from the ``chatbot_summaries`` table while
online and cached. Offline questions are checked against them before the
static knowledge base.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
import logging

logger = logging.getLogger(__name__)

# Summary rows store the language name, the chat uses the code
LANGUAGE_NAMES = {"en": "english", "hi": "hindi"}

SUBJECT_KEYWORDS: Dict[str, List[str]] = {
    "mathematics": ["maths", "math", "algebra", "geometry", "गणित", "बीजगणित", "ज्यामिति", "arithmetic", "trigonometry"],
    "science": ["science", "physics", "chemistry", "biology", "विज्ञान", "भौतिकी", "रसायन", "जीव विज्ञान"],
    "social_science": ["social", "history", "geography", "civics", "इतिहास", "भूगोल", "नागरिक शास्त्र", "सामाजिक"],
    "hindi": ["hindi", "हिंदी", "व्याकरण", "grammar"],
    "english": ["english", "अंग्रेज़ी", "अंग्रेजी"],
}

KEY_POINTS_HEADERS = {
    "en": "\n\n🔑 **Key Points:**",
    "hi": "\n\n🔑 **मुख्य बिंदु:**",
}


@dataclass
class ChapterSummary:
    id: str
    class_name: str
    subject: str
    chapter_id: str
    summary_text: str
    key_points: List[str] = field(default_factory=list)
    language: str = "english"
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChapterSummary":
        return cls(
            id=str(data.get("id", "")),
            class_name=str(data.get("class", "")),
            subject=str(data.get("subject", "")),
            chapter_id=str(data.get("chapter_id", "")),
            summary_text=str(data.get("summary_text", "")),
            key_points=[str(p) for p in data.get("key_points") or []],
            language=str(data.get("language", "english")),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "class": self.class_name,
            "subject": self.subject,
            "chapter_id": self.chapter_id,
            "summary_text": self.summary_text,
            "key_points": list(self.key_points),
            "language": self.language,
            "updated_at": self.updated_at,
        }

    def mentions(self, query: str) -> bool:
        needle = query.lower()
        return (
            needle in self.summary_text.lower()
            or needle in self.subject.lower()
            or needle in self.chapter_id.lower()
            or any(needle in p.lower() for p in self.key_points)
        )


def parse_summaries(records: Iterable[Dict[str, Any]]) -> List[ChapterSummary]:
    """Parse cached rows, skipping any that are not mappings."""
    summaries = []
    for record in records:
        if isinstance(record, dict):
            summaries.append(ChapterSummary.from_dict(record))
        else:
            logger.debug(f"Skipping malformed summary row: {record!r}")
    return summaries


def search_summaries(
    summaries: Iterable[ChapterSummary],
    query: str,
    student_class: Optional[str] = None,
    language: Optional[str] = None,
) -> List[ChapterSummary]:
    """
    Summaries whose text, subject, chapter or key points contain the query.

    Args:
        summaries: Candidate summaries (cache order is newest first)
        query: Substring to look for, case-insensitive
        student_class: Restrict to one class
        language: Restrict to "english" / "hindi"
    """
    if not query.strip():
        return []
    return [
        s for s in summaries
        if s.mentions(query)
        and (not student_class or s.class_name == student_class)
        and (not language or s.language == language)
    ]


def find_summary(
    summaries: Iterable[ChapterSummary],
    student_class: str,
    subject: str,
    chapter_id: Optional[str] = None,
    language: Optional[str] = None,
) -> Optional[ChapterSummary]:
    for s in summaries:
        if (
            s.class_name == student_class
            and s.subject.lower() == subject.lower()
            and (not chapter_id or chapter_id.lower() in s.chapter_id.lower())
            and (not language or s.language == language)
        ):
            return s
    return None


def detect_subject(message: str) -> Optional[str]:
    lower = message.lower()
    for subject, keywords in SUBJECT_KEYWORDS.items():
        if any(k.lower() in lower for k in keywords):
            return subject
    return None


def format_summary(summary: ChapterSummary, language: str = "en") -> str:
    """Render a summary (and its key points) as a chat answer."""
    response = f"📖 **{summary.chapter_id}** ({summary.subject})\n\n{summary.summary_text}"
    if summary.key_points:
        response += KEY_POINTS_HEADERS.get(language, KEY_POINTS_HEADERS["en"])
        for point in summary.key_points:
            response += f"\n• {point}"
    return response


def answer_from_summaries(
    records: Iterable[Dict[str, Any]],
    question: str,
    language: str = "en",
) -> Optional[str]:
    """
    Best cached summary answer for a question, if any.

    The whole question is tried first, then the subject it mentions.
    """
    summaries = parse_summaries(records)
    if not summaries:
        return None

    language_name = LANGUAGE_NAMES.get(language, LANGUAGE_NAMES["en"])
    hits = search_summaries(summaries, question, language=language_name)
    if not hits:
        subject = detect_subject(question)
        if subject:
            hits = search_summaries(summaries, subject, language=language_name)

    return format_summary(hits[0], language) if hits else None
