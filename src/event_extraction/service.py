"""
Event Extraction Service for email-style messages.

Turns a message body and subject into calendar event candidates by
running the pattern pipeline end to end:

- Text preprocessing (whitespace collapse, zero-width removal)
- Entity recognition (dates, times, event nouns, locations)
- Context classification (meeting / assignment / exam / class / social)
- Event building with confidence scoring and admission threshold
- Deduplication, including events proposed by supplemental extractors

Architecture:
- Lazy table compilation (patterns compiled on first extract() call)
- Stateless per call; safe to share between threads once initialized
- Graceful degradation (malformed input yields fewer events, never errors)
- Configurable via environment variables (EVENTS_*)
"""

import logging
from datetime import date, datetime
from typing import Sequence

from src.event_extraction.builder import EventBuilder
from src.event_extraction.collaborators import (
    CalendarSink,
    DocumentSource,
    SupplementalExtractor,
    sanitize_event,
)
from src.event_extraction.config import EventExtractionConfig
from src.event_extraction.context import ContextClassifier
from src.event_extraction.deduplication import dedupe_events
from src.event_extraction.normalizer import TemporalNormalizer
from src.event_extraction.patterns import EntityRecognizer, preprocess_text
from src.event_extraction.schemas import CandidateEvent, RawDocument

logger = logging.getLogger(__name__)


class EventExtractionService:
    """
    Calendar event extraction service.

    Usage:
        >>> service = EventExtractionService(reference=date(2024, 3, 15))
        >>> events = service.extract(
        ...     "Let's have lunch at Joe's Diner tomorrow at 12:30pm.",
        ...     subject="Catch up",
        ... )
        >>> events[0].date, events[0].time
        ('2024-03-16', '12:30')

    Note:
        Pattern tables are compiled lazily on the first extract() call.
        Supplemental extractors are optional; their failures are logged
        and never affect the core result.
    """

    def __init__(
        self,
        config: EventExtractionConfig | None = None,
        normalizer: TemporalNormalizer | None = None,
        reference: date | datetime | None = None,
        supplemental: Sequence[SupplementalExtractor] = (),
    ):
        """
        Initialize the extraction service.

        Args:
            config: Extraction configuration. If None, uses default config.
            normalizer: Temporal normalizer. If None, one is built for reference.
            reference: Instant relative dates resolve against. Defaults to today.
            supplemental: Extra extractors whose events are merged in.
        """
        self.config = config or EventExtractionConfig()
        self._normalizer = normalizer or TemporalNormalizer(reference)
        self._supplemental = tuple(supplemental)
        self._recognizer: EntityRecognizer | None = None
        self._classifier: ContextClassifier | None = None
        self._builder: EventBuilder | None = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        """Check if pattern tables are compiled."""
        return self._initialized

    @property
    def normalizer(self) -> TemporalNormalizer:
        return self._normalizer

    def _initialize(self) -> None:
        """
        Compile pattern tables and build the pipeline stages.

        This is called lazily on first extract() call and is idempotent.
        """
        if self._initialized:
            return

        self._recognizer = EntityRecognizer(self.config, self._normalizer)
        # Touch the property so compilation happens once, here
        compiled = self._recognizer.patterns
        self._classifier = ContextClassifier()
        self._builder = EventBuilder(self.config)
        self._initialized = True
        logger.info(
            "Event extraction %s initialized with %d entity patterns and %d context rules",
            self.config.extractor_version,
            sum(len(patterns) for patterns in compiled.values()),
            len(self._classifier.rules),
        )

    def extract(self, text: str, subject: str = "") -> list[CandidateEvent]:
        """
        Extract calendar event candidates from a message.

        Args:
            text: Message body.
            subject: Message subject line.

        Returns:
            Deduplicated CandidateEvents; empty when nothing qualifies.
        """
        if not text or not text.strip():
            return []

        self._initialize()

        if len(text) > self.config.max_text_length:
            text = text[: self.config.max_text_length]
            logger.debug(f"Text truncated to {self.config.max_text_length} chars")

        subject = (subject or "").strip()
        processed = preprocess_text(text)

        entities = self._recognizer.recognize(processed)
        context = self._classifier.classify(processed, subject)
        events = self._builder.build(entities, context, processed, subject)

        if self._supplemental:
            events = self._merge_supplemental(events, processed, subject)

        logger.debug(
            "Extracted %d events (context=%s, entities=%d)",
            len(events),
            context.type,
            len(entities),
        )
        return events

    def extract_document(self, doc: RawDocument) -> list[CandidateEvent]:
        """Extract events from a RawDocument."""
        return self.extract(doc.text, doc.subject)

    def process(self, source: DocumentSource, sink: CalendarSink) -> int:
        """
        Extract events for every document of a source and hand them to a sink.

        Documents without events are not passed to the sink. Sink errors
        propagate to the caller.

        Args:
            source: Supplier of raw documents.
            sink: Receiver of extracted events.

        Returns:
            Total number of events handed to the sink.
        """
        total = 0
        for doc in source.documents():
            events = self.extract_document(doc)
            if not events:
                continue
            sink.add_events(doc, events)
            total += len(events)
            logger.debug(
                "Delivered %d events for document %s", len(events), doc.doc_id
            )
        return total

    def _merge_supplemental(
        self,
        events: list[CandidateEvent],
        text: str,
        subject: str,
    ) -> list[CandidateEvent]:
        """Append validated supplemental events and deduplicate the union."""
        merged = list(events)
        for extractor in self._supplemental:
            try:
                proposed = extractor.extract(text, subject)
            except Exception as e:
                logger.warning(
                    "Supplemental extractor %s failed: %s",
                    type(extractor).__name__,
                    e,
                )
                continue

            for event in proposed or []:
                cleaned = sanitize_event(event, self._normalizer)
                if cleaned is not None:
                    merged.append(cleaned)

        result = dedupe_events(merged)
        return result[: self.config.max_events_per_doc]
