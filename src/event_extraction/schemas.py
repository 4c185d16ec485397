"""Schema definitions for calendar event extraction.

Provides the input document, the positioned entity candidates produced
by the recognizer, the context descriptor produced by the classifier and
the CandidateEvent dataclass handed to calendar sinks.
"""

from dataclasses import dataclass, field
from typing import Any, Literal

EntityCategory = Literal["date", "time", "event_kind", "location"]

EventType = Literal[
    "meeting",
    "assignment",
    "exam",
    "class",
    "social",
    "general",
]

VALID_EVENT_TYPES: set[str] = {
    "meeting",
    "assignment",
    "exam",
    "class",
    "social",
    "general",
}

# Placeholders for events synthesized without an explicit date/time
DATE_TBD = "Date TBD"
TIME_TBD = "Time TBD"


@dataclass(frozen=True)
class RawDocument:
    """
    A message handed to the engine by a document source.

    Attributes:
        text: Message body.
        subject: Message subject line (may be empty).
        doc_id: Optional source identifier, used by sinks for idempotency.
    """

    text: str
    subject: str = ""
    doc_id: str | None = None


@dataclass(frozen=True)
class EntityCandidate:
    """
    A substring match tagged with its category and position.

    Attributes:
        category: Entity category (date, time, event_kind, location).
        value: Text as found in the document (or the captured phrase).
        position: Character offset of the match in the text.
        context_score: Number of category trigger words near the match.
        normalized: Canonical form for dates/times, None otherwise.
        kind: Coarse event kind for event_kind candidates.
    """

    category: EntityCategory
    value: str
    position: int
    context_score: int = 0
    normalized: str | None = None
    kind: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert entity to dictionary for JSON serialization."""
        return {
            "category": self.category,
            "value": self.value,
            "position": self.position,
            "context_score": self.context_score,
            "normalized": self.normalized,
            "kind": self.kind,
        }


@dataclass
class RecognizedEntities:
    """Entity candidates found in one text, one list per category."""

    dates: list[EntityCandidate] = field(default_factory=list)
    times: list[EntityCandidate] = field(default_factory=list)
    event_kinds: list[EntityCandidate] = field(default_factory=list)
    locations: list[EntityCandidate] = field(default_factory=list)

    def __len__(self) -> int:
        return (
            len(self.dates)
            + len(self.times)
            + len(self.event_kinds)
            + len(self.locations)
        )


@dataclass(frozen=True)
class ContextDescriptor:
    """
    Inferred classification of a whole message.

    Attributes:
        type: Winning context rule, or "general" when nothing matched.
        confidence: Number of trigger keywords the winning rule matched.
        primary_entity: Title phrase pulled out by the rule's extractors.
    """

    type: EventType = "general"
    confidence: int = 0
    primary_entity: str | None = None


@dataclass(frozen=True)
class CandidateEvent:
    """
    A calendar event candidate extracted from a message.

    Attributes:
        title: Event title (never empty).
        date: Canonical YYYY-MM-DD date or DATE_TBD.
        time: 24-hour HH:MM time, TIME_TBD on fallback events, or None.
        location: Associated location text, if any.
        description: Text surrounding the date.
        type: Context type of the message the event came from.
        confidence: Extraction confidence, clamped to 0.0-1.0.
    """

    title: str
    date: str
    time: str | None = None
    location: str | None = None
    description: str = ""
    type: EventType = "general"
    confidence: float = 0.5

    def __post_init__(self) -> None:
        clamped = min(1.0, max(0.0, float(self.confidence)))
        object.__setattr__(self, "confidence", clamped)

    @property
    def identity_key(self) -> str:
        """Case-sensitive key used to collapse duplicates within one call."""
        return f"{self.title}-{self.date}-{self.time}"

    @property
    def calendar_key(self) -> str:
        """Fused lowercase key for comparing against already stored events."""
        return f"{self.title.lower()}{self.date}{self.time}"

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "date": self.date,
            "time": self.time,
            "location": self.location,
            "description": self.description,
            "type": self.type,
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CandidateEvent":
        """
        Create CandidateEvent from dictionary.

        Args:
            data: Dictionary with event fields.

        Returns:
            CandidateEvent instance.

        Raises:
            KeyError: If title or date is missing.
        """
        return cls(
            title=data["title"],
            date=data["date"],
            time=data.get("time"),
            location=data.get("location"),
            description=data.get("description", ""),
            type=data.get("type", "general"),
            confidence=data.get("confidence", 0.5),
        )
