"""Pattern-based entity recognition for calendar event extraction.

Uses ordered, per-category regex tables to find dates, times, event
nouns and locations in message text. Every match becomes a positioned
EntityCandidate; dates and times are additionally scored by how many
category trigger words surround them and normalized to canonical form.
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Mapping

from src.event_extraction.config import EventExtractionConfig
from src.event_extraction.normalizer import TemporalNormalizer
from src.event_extraction.schemas import EntityCandidate, RecognizedEntities

logger = logging.getLogger(__name__)


# Reusable pattern fragments
_MONTHS = r"(?:january|february|march|april|may|june|july|august|september|october|november|december)"
_MONTHS_ABBR = r"(?:jan|feb|mar|apr|jun|jul|aug|sept?|oct|nov|dec)"
_WEEKDAYS = r"(?:monday|tuesday|wednesday|thursday|friday|saturday|sunday)"
_ORDINAL = r"(?:st|nd|rd|th)?"
_MERIDIEM = r"[ap]\.?m\.?"
_CAPITALIZED_MONTH_OR_DAY = (
    r"(?:January|February|March|April|May|June|July|August|September|October"
    r"|November|December|Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday)\b"
)

# Pattern tables: (pattern, flags) in the order they are applied.
# Course codes and capitalized location phrases are case-sensitive.
ENTITY_PATTERNS: Mapping[str, tuple[tuple[str, int], ...]] = MappingProxyType({
    "date": (
        # "3/15/2024", "03-15-24"
        (r"\b\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4}\b", 0),
        # "March 15th, 2024", "March 15"
        (rf"\b{_MONTHS}\s+\d{{1,2}}{_ORDINAL},?(?:\s*\d{{4}})?\b", re.IGNORECASE),
        # "Mar. 15", "Sept 3rd 2024"
        (rf"\b{_MONTHS_ABBR}\.?\s+\d{{1,2}}{_ORDINAL},?(?:\s*\d{{4}})?\b", re.IGNORECASE),
        # "Friday, 15th March 2024"
        (rf"\b{_WEEKDAYS},?\s+\d{{1,2}}{_ORDINAL}\s+{_MONTHS}(?:\s*\d{{4}})?\b", re.IGNORECASE),
        # "next Friday", "this Monday"
        (rf"\b(?:next|this|coming|last)\s+{_WEEKDAYS}\b", re.IGNORECASE),
        # "Friday" not already covered by a qualifier or a day-month form
        (
            rf"(?<!next\s)(?<!this\s)(?<!last\s)(?<!coming\s)\b{_WEEKDAYS}\b"
            rf"(?!,?\s+(?:\d{{1,2}}{_ORDINAL}\s+(?:of\s+)?)?(?:{_MONTHS}|{_MONTHS_ABBR})\b)",
            re.IGNORECASE,
        ),
        # "today", "tomorrow", "tonight"
        (r"\b(?:today|tonight|tomorrow|tmrw|yesterday)\b", re.IGNORECASE),
        # "15th of March", "3 June 2024"
        (rf"\b\d{{1,2}}{_ORDINAL}\s+(?:of\s+)?{_MONTHS}(?:\s*\d{{4}})?\b", re.IGNORECASE),
    ),
    "time": (
        # "12:30pm", "14:00", "9:15:00 a.m."
        (rf"\b\d{{1,2}}:\d{{2}}(?::\d{{2}})?(?:\s*{_MERIDIEM})?(?!\w)", re.IGNORECASE),
        # "3pm", "11 a.m." but not the tail of "12:30pm"
        (rf"(?<![:\d])\b\d{{1,2}}\s*{_MERIDIEM}(?!\w)", re.IGNORECASE),
        # Hour words without a clock reading
        (r"\b(?:noon|midnight|morning|afternoon|evening)\b", re.IGNORECASE),
    ),
    "event_kind": (
        # Keyword-triggered event nouns
        (
            r"\b(meeting|conference|call|appointment|session|class|lecture|lab"
            r"|tutorial|exam|test|quiz|midterm|assignment|homework|project"
            r"|presentation|demo|interview|workshop|seminar|webinar"
            r"|lunch|dinner|breakfast|brunch|coffee|party)\b",
            re.IGNORECASE,
        ),
        # Emphasized phrases: "**Lab 3: Sorting**"
        (r"\*\*([^*]+)\*\*", 0),
        # Course codes: "CS101", "MATH-221"
        (r"\b([A-Z]{2,4}[\s\-]?\d{3}[\w\-]*)\b", 0),
    ),
    "location": (
        # "at Joe's Diner tomorrow", "in Room 204 on Friday"
        (
            rf"\b(?i:at|in)\s+(?!{_CAPITALIZED_MONTH_OR_DAY})"
            r"((?:[Tt]he\s+)?[A-Z][^,.;!?\n]*?)"
            r"(?=\s+(?i:on|at|from|by|to|for|with|until|tomorrow|today|tonight|this|next)\b"
            r"|[,.;!?\n]|$)",
            0,
        ),
        # "Location: Building 5", "venue: the main hall"
        (r"\b(?:venue|location|where|address)\s*:\s*([^,.;\n]+)", re.IGNORECASE),
        # "Room 204", "Hall B"
        (r"\b((?i:room|hall|building|auditorium)\s+[A-Z0-9][\w\-]*)", 0),
        # "[Zoom link]"
        (r"\[([^\[\]\n]{2,80})\]", 0),
        # Meeting links
        (r"(https?://[^\s<>\"']+)", 0),
    ),
})

# Trigger words counted around dates/times for the context-affinity score
CONTEXT_WORDS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "date": ("due", "deadline", "on", "by", "before", "date", "when", "scheduled"),
    "time": ("at", "from", "to", "between", "time", "duration", "starts", "ends"),
})

# Coarse kind lookup for event nouns; first matching entry wins
EVENT_KIND_KEYWORDS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "meeting": ("meeting", "call", "conference", "sync", "standup", "interview", "appointment"),
    "assignment": ("assignment", "homework", "lab", "project", "due"),
    "exam": ("exam", "test", "quiz", "midterm", "final"),
    "class": ("class", "lecture", "tutorial", "seminar", "workshop"),
    "social": ("lunch", "dinner", "breakfast", "brunch", "coffee", "party", "gathering"),
})

_ZERO_WIDTH = re.compile(r"[\u200b-\u200d\ufeff]")


def _build_patterns() -> dict[str, list[re.Pattern[str]]]:
    """
    Compile the entity pattern tables.

    Returns:
        Dict mapping entity category to its compiled patterns, in order.
    """
    return {
        category: [re.compile(pattern, flags) for pattern, flags in table]
        for category, table in ENTITY_PATTERNS.items()
    }


def preprocess_text(text: str) -> str:
    """Collapse whitespace runs and drop zero-width characters."""
    if not text:
        return ""
    text = _ZERO_WIDTH.sub("", text)
    return re.sub(r"\s+", " ", text).strip()


def classify_event_kind(value: str) -> str:
    """Map an event noun to its coarse kind, defaulting to 'general'."""
    lower = value.lower()
    for kind, keywords in EVENT_KIND_KEYWORDS.items():
        if any(keyword in lower for keyword in keywords):
            return kind
    return "general"


class EntityRecognizer:
    """
    Regex-based recognizer for calendar entities.

    Lazily compiles patterns on first use. Scans the whole text with
    each category's patterns and returns every match, unfiltered, as an
    EntityCandidate.

    Usage:
        recognizer = EntityRecognizer()
        entities = recognizer.recognize("Lunch tomorrow at 12:30pm")
    """

    def __init__(
        self,
        config: EventExtractionConfig | None = None,
        normalizer: TemporalNormalizer | None = None,
    ):
        self._config = config or EventExtractionConfig()
        self._normalizer = normalizer or TemporalNormalizer()
        self._patterns: dict[str, list[re.Pattern[str]]] | None = None

    @property
    def patterns(self) -> dict[str, list[re.Pattern[str]]]:
        """Lazy-compile patterns on first access."""
        if self._patterns is None:
            self._patterns = _build_patterns()
        return self._patterns

    def recognize(self, text: str) -> RecognizedEntities:
        """
        Find all entity candidates in text.

        Args:
            text: Preprocessed message text.

        Returns:
            RecognizedEntities with one list per category, each in
            discovery order (pattern order, then text position).
        """
        entities = RecognizedEntities()
        if not text:
            return entities

        for match in self._iter_matches("date", text):
            entities.dates.append(
                EntityCandidate(
                    category="date",
                    value=match.group(0),
                    position=match.start(),
                    context_score=self._context_score(text, match.start(), "date"),
                    normalized=self._normalizer.normalize_date(match.group(0)),
                )
            )

        for match in self._iter_matches("time", text):
            entities.times.append(
                EntityCandidate(
                    category="time",
                    value=match.group(0),
                    position=match.start(),
                    context_score=self._context_score(text, match.start(), "time"),
                    normalized=self._normalizer.normalize_time(match.group(0)),
                )
            )

        for match in self._iter_matches("event_kind", text):
            value = self._captured_value(match)
            if value is None:
                continue
            entities.event_kinds.append(
                EntityCandidate(
                    category="event_kind",
                    value=value,
                    position=match.start(),
                    kind=classify_event_kind(value),
                )
            )

        for match in self._iter_matches("location", text):
            value = self._captured_value(match)
            if value is None:
                continue
            entities.locations.append(
                EntityCandidate(
                    category="location",
                    value=value,
                    position=match.start(),
                )
            )

        logger.debug(
            "Recognized %d dates, %d times, %d event kinds, %d locations",
            len(entities.dates),
            len(entities.times),
            len(entities.event_kinds),
            len(entities.locations),
        )
        return entities

    def _iter_matches(self, category: str, text: str):
        for pattern in self.patterns[category]:
            yield from pattern.finditer(text)

    def _context_score(self, text: str, position: int, category: str) -> int:
        """Count trigger words inside the window centred on position."""
        window = self._config.context_window
        lo = max(0, position - window)
        hi = min(len(text), position + window)
        context = text[lo:hi].lower()
        return sum(1 for word in CONTEXT_WORDS[category] if word in context)

    @staticmethod
    def _captured_value(match: re.Match) -> str | None:
        """Prefer the first capture group, cleaned of trailing punctuation."""
        value = match.group(1) if match.re.groups and match.group(1) else match.group(0)
        cleaned = value.strip().rstrip(",.;:!?)")
        return cleaned if cleaned else None
