"""
Calendar event extraction for email-style messages.

This module provides deterministic, pattern-based extraction of calendar
event candidates from message bodies and subjects, following the
opt-in service pattern with lazy initialization and graceful error
handling.

Components:
- EventExtractionConfig: Configuration for the extraction service
- EventExtractionService: Top-level extract() entry point
- EntityRecognizer: Regex-based date/time/event/location recognizer
- ContextClassifier: Keyword-density message classifier
- EventBuilder: Fuses entities and context into scored candidates
- dedupe_events: Collapses candidates sharing title, date and time
- TemporalNormalizer: Normalizer for date and time references
- CandidateEvent / RawDocument: Data passed to and from collaborators
"""

from src.event_extraction.builder import EventBuilder, find_closest_entity
from src.event_extraction.collaborators import (
    CalendarSink,
    DocumentSource,
    SupplementalExtractor,
    parse_llm_events,
)
from src.event_extraction.config import EventExtractionConfig
from src.event_extraction.context import ContextClassifier
from src.event_extraction.deduplication import dedupe_events
from src.event_extraction.normalizer import TemporalNormalizer
from src.event_extraction.patterns import EntityRecognizer
from src.event_extraction.schemas import (
    CandidateEvent,
    ContextDescriptor,
    EntityCandidate,
    EventType,
    RawDocument,
    RecognizedEntities,
)
from src.event_extraction.service import EventExtractionService

__all__ = [
    "CalendarSink",
    "CandidateEvent",
    "ContextClassifier",
    "ContextDescriptor",
    "DocumentSource",
    "EntityCandidate",
    "EntityRecognizer",
    "EventBuilder",
    "EventExtractionConfig",
    "EventExtractionService",
    "EventType",
    "RawDocument",
    "RecognizedEntities",
    "SupplementalExtractor",
    "TemporalNormalizer",
    "dedupe_events",
    "find_closest_entity",
    "parse_llm_events",
]
