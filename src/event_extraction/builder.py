"""Candidate event construction.

Fuses recognized entities and the message context into scored
CandidateEvents: one per recognized date, with the nearest time and
location attached, or a single "Date TBD" event when the message is
clearly about an event but names no date.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Sequence

from src.event_extraction.config import EventExtractionConfig
from src.event_extraction.deduplication import dedupe_events
from src.event_extraction.schemas import (
    DATE_TBD,
    TIME_TBD,
    CandidateEvent,
    ContextDescriptor,
    EntityCandidate,
    RecognizedEntities,
)

logger = logging.getLogger(__name__)

_COURSE_CODE = re.compile(r"[A-Z]{2,4}[\s\-]?\d{3}")

# Subjects that say nothing about the event
_PLACEHOLDER_SUBJECTS = frozenset({"no subject", "(no subject)", "inbox", "untitled"})

Associator = Callable[
    [EntityCandidate, Sequence[EntityCandidate], int], EntityCandidate | None
]


def find_closest_entity(
    reference: EntityCandidate,
    candidates: Sequence[EntityCandidate],
    max_distance: int = 100,
) -> EntityCandidate | None:
    """
    Find the candidate nearest to reference by character offset.

    Args:
        reference: Entity to associate from (usually a date).
        candidates: Entities to choose from.
        max_distance: The nearest candidate must be strictly closer than this.

    Returns:
        The nearest candidate (earliest on ties), or None when there are
        no candidates or the nearest one is too far away.
    """
    closest: EntityCandidate | None = None
    min_distance: int | None = None
    for candidate in candidates:
        distance = abs(candidate.position - reference.position)
        if min_distance is None or distance < min_distance:
            min_distance = distance
            closest = candidate

    if min_distance is None or min_distance >= max_distance:
        return None
    return closest


class EventBuilder:
    """
    Builds candidate events from entities and context.

    Args:
        config: Extraction configuration (thresholds, windows).
        associate: Strategy used to attach times and locations to a date.
            Defaults to nearest-by-offset with a hard distance cutoff.
    """

    def __init__(
        self,
        config: EventExtractionConfig | None = None,
        associate: Associator | None = None,
    ):
        self._config = config or EventExtractionConfig()
        self._associate = associate or find_closest_entity

    def build(
        self,
        entities: RecognizedEntities,
        context: ContextDescriptor,
        text: str,
        subject: str = "",
    ) -> list[CandidateEvent]:
        """
        Build, admit and deduplicate candidate events.

        Args:
            entities: Entities recognized in text.
            context: Context descriptor for the message.
            text: The text the entity positions refer to.
            subject: Message subject line.

        Returns:
            Deduplicated list of admitted CandidateEvents.
        """
        subject = subject or ""
        dates = sorted(entities.dates, key=lambda e: -e.context_score)
        times = sorted(entities.times, key=lambda e: -e.context_score)
        max_distance = self._config.association_max_distance

        events: list[CandidateEvent] = []
        for date_entity in dates:
            confidence = self._compute_confidence(date_entity, entities, context)
            if confidence <= self._config.min_confidence:
                continue

            time_entity = self._associate(date_entity, times, max_distance)
            location_entity = self._associate(
                date_entity, entities.locations, max_distance
            )
            events.append(
                CandidateEvent(
                    title=self._resolve_title(entities, context, subject),
                    date=date_entity.normalized or date_entity.value,
                    time=(time_entity.normalized or time_entity.value) if time_entity else None,
                    location=location_entity.value if location_entity else None,
                    description=self._extract_description(text, date_entity.position),
                    type=context.type,
                    confidence=confidence,
                )
            )

        if not events and context.confidence > self._config.fallback_context_threshold:
            events.append(self._fallback_event(entities, times, context, text, subject))

        result = dedupe_events(events)
        if len(result) > self._config.max_events_per_doc:
            result = result[: self._config.max_events_per_doc]
        return result

    def _fallback_event(
        self,
        entities: RecognizedEntities,
        times: list[EntityCandidate],
        context: ContextDescriptor,
        text: str,
        subject: str,
    ) -> CandidateEvent:
        """Synthesize the single Date TBD event for a dateless message."""
        logger.debug(
            "No dated candidates admitted, synthesizing %s fallback event",
            context.type,
        )
        return CandidateEvent(
            title=context.primary_entity or subject or f"{context.type} Event",
            date=DATE_TBD,
            time=times[0].value if times else TIME_TBD,
            location=entities.locations[0].value if entities.locations else None,
            description=text[: self._config.fallback_description_chars],
            type=context.type,
            confidence=self._config.fallback_confidence,
        )

    @staticmethod
    def _resolve_title(
        entities: RecognizedEntities,
        context: ContextDescriptor,
        subject: str,
    ) -> str:
        """
        Pick an event title by priority.

        1. The context's primary entity.
        2. A course-code event entity, else the first event entity.
        3. The subject, when it is meaningful.
        4. "<Type> Event".
        """
        if context.primary_entity:
            return context.primary_entity

        if entities.event_kinds:
            for entity in entities.event_kinds:
                if _COURSE_CODE.search(entity.value):
                    return entity.value
            return entities.event_kinds[0].value

        stripped = subject.strip()
        if len(stripped) > 3 and stripped.lower() not in _PLACEHOLDER_SUBJECTS:
            return stripped

        return f"{context.type.capitalize()} Event"

    def _extract_description(self, text: str, position: int) -> str:
        """Cut a window around the date, ending at its first full sentence."""
        start = max(0, position - self._config.description_chars_before)
        end = min(len(text), position + self._config.description_chars_after)
        description = text[start:end].strip()

        first_period = description.find(".")
        if 0 < first_period < len(description) - 1:
            description = description[: first_period + 1]
        return description

    @staticmethod
    def _compute_confidence(
        date_entity: EntityCandidate,
        entities: RecognizedEntities,
        context: ContextDescriptor,
    ) -> float:
        """
        Compute confidence score for a date-anchored candidate.

        Base: 0.3.
        +0.1 per trigger word near the date.
        +0.1 per context keyword matched.
        +0.2 if any time was recognized.
        +0.2 if any event noun was recognized.
        +0.1 if any location was recognized.
        Clamped to 0.0-1.0.

        Summed in integer tenths so the 0.5 admission boundary and the
        1.0 cap are exact.
        """
        tenths = 3
        tenths += date_entity.context_score
        tenths += context.confidence
        if entities.times:
            tenths += 2
        if entities.event_kinds:
            tenths += 2
        if entities.locations:
            tenths += 1
        return min(1.0, max(0.0, tenths / 10))
