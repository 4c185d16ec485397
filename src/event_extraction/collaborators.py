"""Interfaces to the collaborators around the extraction engine.

The engine performs no I/O. Messages arrive from a DocumentSource,
finished events leave through a CalendarSink, and optional
SupplementalExtractors (for example an LLM-backed extractor) may
propose extra events that are merged through the same deduplication.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import date
from typing import Any, Iterable, Protocol, runtime_checkable

from src.event_extraction.normalizer import TemporalNormalizer
from src.event_extraction.schemas import (
    DATE_TBD,
    VALID_EVENT_TYPES,
    CandidateEvent,
    RawDocument,
)

logger = logging.getLogger(__name__)

_CANONICAL_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")
_CANONICAL_TIME = re.compile(r"(?:[01]\d|2[0-3]):[0-5]\d")

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 200


@runtime_checkable
class DocumentSource(Protocol):
    """Supplies raw messages to extract from."""

    def documents(self) -> Iterable[RawDocument]: ...


@runtime_checkable
class CalendarSink(Protocol):
    """
    Persists extracted events.

    Implementations own the mapping to calendar payloads and must be
    idempotent per source document (see CandidateEvent.calendar_key).
    """

    def add_events(self, doc: RawDocument, events: list[CandidateEvent]) -> None: ...


@runtime_checkable
class SupplementalExtractor(Protocol):
    """Proposes additional events for a message, e.g. from an LLM."""

    def extract(self, text: str, subject: str) -> list[CandidateEvent]: ...


def sanitize_event(
    event: CandidateEvent,
    normalizer: TemporalNormalizer,
) -> CandidateEvent | None:
    """
    Validate an externally produced event like a core one.

    Args:
        event: Event proposed by a collaborator.
        normalizer: Normalizer used to canonicalize its date and time.

    Returns:
        A cleaned CandidateEvent, or None if it has no title or no
        usable date.
    """
    title = (event.title or "").strip()[:MAX_TITLE_LENGTH]
    if not title:
        return None

    event_date = _validate_date(event.date, normalizer)
    if event_date is None:
        return None

    return CandidateEvent(
        title=title,
        date=event_date,
        time=_validate_time(event.time, normalizer),
        location=event.location or None,
        description=(event.description or "")[:MAX_DESCRIPTION_LENGTH],
        type=event.type if event.type in VALID_EVENT_TYPES else "general",
        confidence=event.confidence,
    )


def parse_llm_events(
    raw: str | None,
    normalizer: TemporalNormalizer | None = None,
) -> list[CandidateEvent]:
    """
    Parse an LLM reply containing a JSON array of events.

    The array may be surrounded by prose. Entries that are not objects or
    that lack a valid date are dropped. Returns [] on any parse failure
    (graceful degradation).

    Args:
        raw: Raw model output.
        normalizer: Normalizer for dates and times. Defaults to today.

    Returns:
        List of validated CandidateEvents.
    """
    if not raw or not raw.strip():
        return []

    normalizer = normalizer or TemporalNormalizer()
    payload = raw.strip()
    array_match = re.search(r"\[[\s\S]*\]", payload)
    if array_match:
        payload = array_match.group(0)

    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        logger.warning("Failed to parse supplemental response as JSON")
        return []

    if not isinstance(data, list):
        logger.warning("Supplemental response is not a JSON array")
        return []

    events: list[CandidateEvent] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        event = _event_from_item(item, normalizer)
        if event is not None:
            events.append(event)
    return events


def _event_from_item(
    item: dict[str, Any],
    normalizer: TemporalNormalizer,
) -> CandidateEvent | None:
    try:
        confidence = float(item.get("confidence") or 0.5)
    except (TypeError, ValueError):
        confidence = 0.5

    candidate = CandidateEvent(
        title=str(item.get("title") or "Event"),
        date=str(item.get("date") or ""),
        time=str(item["time"]) if item.get("time") else None,
        location=str(item["location"]) if item.get("location") else None,
        description=str(item.get("description") or ""),
        type=str(item.get("type") or "general"),
        confidence=confidence,
    )
    return sanitize_event(candidate, normalizer)


def _validate_date(raw: str | None, normalizer: TemporalNormalizer) -> str | None:
    if not raw:
        return None
    if raw == DATE_TBD:
        return raw
    normalized = normalizer.normalize_date(raw)
    if not _CANONICAL_DATE.fullmatch(normalized):
        return None
    try:
        date.fromisoformat(normalized)
    except ValueError:
        return None
    return normalized


def _validate_time(raw: str | None, normalizer: TemporalNormalizer) -> str | None:
    if not raw:
        return None
    normalized = normalizer.normalize_time(raw)
    if _CANONICAL_TIME.fullmatch(normalized):
        return normalized
    return None
