"""Message context classification.

Infers what kind of message is being read (meeting invite, assignment
notice, exam announcement, class, social plan) from trigger keyword
density in the body and subject, and pulls out a primary title phrase
with the winning rule's extractors.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from src.event_extraction.schemas import ContextDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContextRule:
    """
    A message type with its trigger keywords and title extractors.

    Attributes:
        type: Context type name.
        triggers: Keywords counted as case-insensitive substrings.
        title_extractors: Patterns tried in order to find a title phrase.
    """

    type: str
    triggers: tuple[str, ...]
    title_extractors: tuple[re.Pattern[str], ...]


# Declaration order matters: on equal scores the earlier rule wins.
CONTEXT_RULES: tuple[ContextRule, ...] = (
    ContextRule(
        type="assignment",
        triggers=(
            "assignment", "homework", "lab", "project",
            "due", "deadline", "submit", "submission",
        ),
        title_extractors=(
            re.compile(r"(?:assignment|lab|project|homework)(?:\s+\d+)?:\s*([^.\n]+)", re.IGNORECASE),
            re.compile(r"\*\*([^*]+)\*\*"),
            re.compile(r"([A-Z]{2,4}[\s\-]?\d{3}[^:\n]*):?\s*([^.\n]+)"),
        ),
    ),
    ContextRule(
        type="meeting",
        triggers=("meeting", "meet", "call", "conference", "discussion", "catch up", "sync"),
        title_extractors=(
            re.compile(r"(?:meeting|call)\s+(?:with|about|regarding|for)\s+([^.\n]+)", re.IGNORECASE),
            re.compile(r"(?:discuss|discussing|discussion\s+(?:on|about))\s+([^.\n]+)", re.IGNORECASE),
        ),
    ),
    ContextRule(
        type="exam",
        triggers=("exam", "test", "quiz", "midterm", "final"),
        title_extractors=(
            re.compile(r"(?:exam|test|quiz)\s+(?:on|for|in)\s+([^.\n]+)", re.IGNORECASE),
            re.compile(r"([A-Z]{2,4}[\s\-]?\d{3}[^:\n]*?)\s+(?:exam|test|quiz)", re.IGNORECASE),
        ),
    ),
    ContextRule(
        type="class",
        triggers=("class", "lecture", "tutorial", "seminar", "office hours"),
        title_extractors=(
            re.compile(r"(?:lecture|class|seminar|tutorial)\s+(?:on|about)\s+([^.\n]+)", re.IGNORECASE),
            re.compile(r"([A-Z]{2,4}[\s\-]?\d{3})\s+(?:lecture|class|seminar|tutorial)"),
        ),
    ),
    ContextRule(
        type="social",
        triggers=(
            "lunch", "dinner", "breakfast", "brunch", "coffee",
            "drinks", "party", "celebration", "let's", "hang out",
        ),
        title_extractors=(
            re.compile(r"(?:lunch|dinner|breakfast|brunch|coffee|drinks)\s+with\s+([^.,!\n]+)", re.IGNORECASE),
            re.compile(r"((?:birthday|farewell|holiday|welcome)\s+(?:party|celebration|dinner))", re.IGNORECASE),
        ),
    ),
)


class ContextClassifier:
    """
    Keyword-density classifier over a fixed rule table.

    Usage:
        classifier = ContextClassifier()
        context = classifier.classify("Homework 2 is due Friday", "CS101")
    """

    def __init__(self, rules: tuple[ContextRule, ...] = CONTEXT_RULES):
        self._rules = rules

    @property
    def rules(self) -> tuple[ContextRule, ...]:
        return self._rules

    def classify(self, text: str, subject: str = "") -> ContextDescriptor:
        """
        Classify a message by its trigger keywords.

        Args:
            text: Message body.
            subject: Message subject line.

        Returns:
            ContextDescriptor for the highest-scoring rule, or a general
            descriptor with confidence 0 when no trigger matched.
        """
        text = text or ""
        subject = subject or ""
        lower_text = text.lower()
        lower_subject = subject.lower()

        best_type = "general"
        best_score = 0
        primary_entity: str | None = None

        for rule in self._rules:
            score = sum(
                1
                for trigger in rule.triggers
                if trigger in lower_text or trigger in lower_subject
            )
            if score <= best_score:
                continue

            best_type = rule.type
            best_score = score
            title = self._extract_title(rule, text, subject)
            if title:
                primary_entity = title

        logger.debug(
            "Classified context as %s (score=%d, primary=%r)",
            best_type,
            best_score,
            primary_entity,
        )
        return ContextDescriptor(
            type=best_type,
            confidence=best_score,
            primary_entity=primary_entity,
        )

    @staticmethod
    def _extract_title(rule: ContextRule, text: str, subject: str) -> str | None:
        """Run the rule's extractors in order; text first, then subject."""
        for extractor in rule.title_extractors:
            match = extractor.search(text) or extractor.search(subject)
            if match is None:
                continue
            value = match.group(1) if match.re.groups and match.group(1) else match.group(0)
            value = value.strip()
            if value:
                return value
        return None
