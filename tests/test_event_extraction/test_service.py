"""Tests for EventExtractionService end to end."""

import logging
from unittest.mock import MagicMock

import pytest

from src.event_extraction.config import EventExtractionConfig
from src.event_extraction.schemas import DATE_TBD, TIME_TBD, CandidateEvent, RawDocument
from src.event_extraction.service import EventExtractionService


class _StaticExtractor:
    def __init__(self, events):
        self._events = events

    def extract(self, text, subject):
        return list(self._events)


class _BrokenExtractor:
    def extract(self, text, subject):
        raise RuntimeError("model unavailable")


class _ListSource:
    def __init__(self, docs):
        self._docs = docs

    def documents(self):
        return iter(self._docs)


class _ListSink:
    def __init__(self):
        self.calls = []

    def add_events(self, doc, events):
        self.calls.append((doc, events))


class TestInitialization:
    """Tests for lazy initialization."""

    def test_not_initialized_until_first_extract(self, service):
        assert not service.is_initialized
        service.extract("Lunch tomorrow at noon")
        assert service.is_initialized

    def test_blank_text_skips_initialization(self, service):
        assert service.extract("   ") == []
        assert not service.is_initialized

    def test_reference_anchors_normalizer(self, service, reference_date):
        assert service.normalizer.reference == reference_date


class TestExtract:
    """End-to-end extraction scenarios."""

    def test_lunch_invitation(self, service, sample_messages):
        text, subject = sample_messages["social"]
        events = service.extract(text, subject)

        assert len(events) == 1
        event = events[0]
        assert event.title == "lunch"
        assert event.date == "2024-03-16"
        assert event.time == "12:30"
        assert event.location == "Joe's Diner"
        assert event.type == "social"
        assert event.confidence == 1.0
        assert event.description == text

    def test_plain_thanks_has_no_events(self, service, sample_messages):
        text, subject = sample_messages["none"]
        assert service.extract(text, subject) == []

    def test_assignment_duplicate_dates_collapse(self, service, sample_messages):
        text, subject = sample_messages["assignment"]
        events = service.extract(text, subject)

        assert len(events) == 1
        assert events[0].type == "assignment"
        assert events[0].date == "2024-03-22"
        assert events[0].time == "23:59"

    def test_meeting_with_room(self, service, sample_messages):
        text, subject = sample_messages["meeting"]
        events = service.extract(text, subject)

        assert len(events) == 1
        assert events[0].type == "meeting"
        assert events[0].date == "2024-03-20"
        assert events[0].time == "14:00"
        assert events[0].location == "Room 204"

    def test_exam_with_hall(self, service, sample_messages):
        text, subject = sample_messages["exam"]
        events = service.extract(text, subject)

        assert len(events) == 1
        assert events[0].type == "exam"
        assert events[0].date == "2024-03-28"
        assert events[0].time == "09:00"
        assert events[0].location == "Hall B"

    def test_dateless_meeting_gets_fallback(self, service):
        events = service.extract("We need a meeting call to discuss the conference agenda.")

        assert len(events) == 1
        event = events[0]
        assert event.title == "the conference agenda"
        assert event.date == DATE_TBD
        assert event.time == TIME_TBD
        assert event.type == "meeting"
        assert event.confidence == pytest.approx(0.4)

    def test_zero_width_characters_are_ignored(self, service):
        events = service.extract("Lunch to\u200bmorrow at 12:30pm?")
        assert events[0].date == "2024-03-16"

    def test_long_text_is_truncated(self, reference_date):
        service = EventExtractionService(
            config=EventExtractionConfig(max_text_length=100),
            reference=reference_date,
        )
        text = "x" * 200 + " Lunch tomorrow at 12:30pm"
        assert service.extract(text) == []

    def test_extract_document(self, service, sample_messages):
        text, subject = sample_messages["social"]
        doc = RawDocument(text=text, subject=subject, doc_id="msg-1")
        assert service.extract_document(doc) == service.extract(text, subject)


class TestSupplementalExtractors:
    """Tests for merging supplemental extractor output."""

    def test_events_are_merged_and_deduplicated(self, event_config, reference_date, sample_messages):
        text, subject = sample_messages["social"]
        supplemental = _StaticExtractor([
            CandidateEvent(title="lunch", date="2024-03-16", time="12:30", confidence=0.6),
            CandidateEvent(title="Team offsite", date="next Monday", time="9am", confidence=0.8),
        ])
        service = EventExtractionService(
            config=event_config, reference=reference_date, supplemental=[supplemental]
        )

        events = service.extract(text, subject)

        assert [e.title for e in events] == ["lunch", "Team offsite"]
        assert events[0].confidence == 1.0
        assert events[1].date == "2024-03-18"
        assert events[1].time == "09:00"

    def test_invalid_supplemental_events_are_dropped(self, event_config, reference_date, sample_messages):
        text, subject = sample_messages["social"]
        supplemental = _StaticExtractor([CandidateEvent(title="Someday", date="eventually")])
        service = EventExtractionService(
            config=event_config, reference=reference_date, supplemental=[supplemental]
        )
        assert [e.title for e in service.extract(text, subject)] == ["lunch"]

    def test_failing_extractor_is_logged(self, event_config, reference_date, sample_messages, caplog):
        text, subject = sample_messages["social"]
        service = EventExtractionService(
            config=event_config, reference=reference_date, supplemental=[_BrokenExtractor()]
        )

        with caplog.at_level(logging.WARNING):
            events = service.extract(text, subject)

        assert [e.title for e in events] == ["lunch"]
        assert "_BrokenExtractor failed" in caplog.text


class TestProcess:
    """Tests for source-to-sink processing."""

    def test_delivers_only_documents_with_events(self, service, sample_messages):
        docs = [
            RawDocument(*sample_messages["social"], doc_id="1"),
            RawDocument(*sample_messages["none"], doc_id="2"),
            RawDocument(*sample_messages["exam"], doc_id="3"),
        ]
        sink = _ListSink()

        total = service.process(_ListSource(docs), sink)

        assert total == 2
        assert [doc.doc_id for doc, _ in sink.calls] == ["1", "3"]

    def test_sink_errors_propagate(self, service, sample_messages):
        docs = [RawDocument(*sample_messages["social"])]
        sink = MagicMock()
        sink.add_events.side_effect = ConnectionError("calendar offline")

        with pytest.raises(ConnectionError):
            service.process(_ListSource(docs), sink)

    def test_sink_receives_document_and_events(self, service, sample_messages):
        doc = RawDocument(*sample_messages["social"], doc_id="msg-1")
        sink = MagicMock()

        assert service.process(_ListSource([doc]), sink) == 1

        sink.add_events.assert_called_once()
        called_doc, called_events = sink.add_events.call_args.args
        assert called_doc is doc
        assert called_events[0].title == "lunch"


class TestProperties:
    """Properties that hold for any message."""

    def test_confidence_is_bounded(self, service, sample_messages):
        for text, subject in sample_messages.values():
            for event in service.extract(text, subject):
                assert 0.0 <= event.confidence <= 1.0

    def test_every_event_has_title_and_date(self, service, sample_messages):
        for text, subject in sample_messages.values():
            for event in service.extract(text, subject):
                assert event.title
                assert event.date

    def test_dateless_weak_context_is_empty(self, service):
        assert service.extract("Could you send me the slides from the meeting?", "Slides") == []
