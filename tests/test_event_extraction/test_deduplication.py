"""Tests for candidate event deduplication."""

from src.event_extraction.deduplication import dedupe_events
from src.event_extraction.schemas import CandidateEvent


def _event(title="Lunch", date="2024-03-16", time="12:30", confidence=0.6, **kwargs):
    return CandidateEvent(title=title, date=date, time=time, confidence=confidence, **kwargs)


class TestDedupeEvents:
    """Tests for dedupe_events."""

    def test_empty(self):
        assert dedupe_events([]) == []

    def test_distinct_events_are_kept_in_order(self):
        events = [_event(date="2024-03-16"), _event(date="2024-03-17"), _event(time=None)]
        assert dedupe_events(events) == events

    def test_first_wins_on_equal_confidence(self):
        first = _event(location="Joe's Diner")
        second = _event(location="Cafe")
        assert dedupe_events([first, second]) == [first]

    def test_more_confident_replaces_in_place(self):
        weak = _event(confidence=0.6)
        other = _event(title="Dinner", confidence=0.7)
        strong = _event(confidence=0.9)

        result = dedupe_events([weak, other, strong])

        assert result == [strong, other]

    def test_less_confident_is_dropped(self):
        strong = _event(confidence=0.9)
        weak = _event(confidence=0.6)
        assert dedupe_events([strong, weak]) == [strong]

    def test_title_case_matters(self):
        events = [_event(title="Lunch"), _event(title="lunch")]
        assert len(dedupe_events(events)) == 2

    def test_accepts_any_iterable(self):
        result = dedupe_events(_event() for _ in range(3))
        assert len(result) == 1

    def test_keeps_most_confident_regardless_of_order(self):
        low = _event(confidence=0.6)
        high = _event(confidence=0.8)
        assert dedupe_events([low, high]) == [high]
        assert dedupe_events([high, low]) == [high]
