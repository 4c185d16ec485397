"""Deduplication of candidate events.

Candidates sharing a title, date and time describe the same calendar
entry; only the most confident one is kept.
"""

from __future__ import annotations

from typing import Iterable

from src.event_extraction.schemas import CandidateEvent


def dedupe_events(events: Iterable[CandidateEvent]) -> list[CandidateEvent]:
    """
    Collapse events that share an identity key.

    Walks the input once. The first event seen for a key is kept; a later
    event with the same key replaces it only when its confidence is
    strictly higher, taking over the kept event's slot.

    Args:
        events: Candidate events in discovery order.

    Returns:
        Deduplicated events, ordered by first sighting of each key.
    """
    kept: list[CandidateEvent] = []
    slots: dict[str, int] = {}

    for event in events:
        key = event.identity_key
        slot = slots.get(key)
        if slot is None:
            slots[key] = len(kept)
            kept.append(event)
        elif event.confidence > kept[slot].confidence:
            kept[slot] = event

    return kept
