"""Configuration for the event extraction service.

Uses Pydantic settings for environment-based configuration,
following the same pattern as other configs in the project.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EventExtractionConfig(BaseSettings):
    """
    Configuration for the Event Extraction service.

    All settings can be overridden via environment variables with EVENTS_ prefix.
    Example: EVENTS_MIN_CONFIDENCE=0.6

    Attributes:
        extractor_version: Version string for extractor provenance tracking.
        min_confidence: Admission threshold; a candidate must score strictly above it.
        fallback_context_threshold: Context confidence a document must exceed
            before a "Date TBD" fallback event is synthesized.
        fallback_confidence: Fixed confidence assigned to the fallback event.
        association_max_distance: Character distance below which a time or
            location is attached to a date.
        context_window: Half-width of the window scanned for trigger words.
        description_chars_before: Characters kept before a date in the description.
        description_chars_after: Characters kept after a date in the description.
        fallback_description_chars: Length of the fallback event description.
        max_text_length: Longer texts are truncated before extraction.
        max_events_per_doc: Maximum events returned for a single document.
    """

    model_config = SettingsConfigDict(
        env_prefix="EVENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    extractor_version: str = Field(
        default="1.0.0",
        description="Version string for extractor provenance tracking.",
    )
    min_confidence: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Candidates must score strictly above this to be admitted.",
    )
    fallback_context_threshold: int = Field(
        default=2,
        ge=0,
        description="Context confidence required for a Date TBD fallback event.",
    )
    fallback_confidence: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Confidence assigned to the Date TBD fallback event.",
    )
    association_max_distance: int = Field(
        default=100,
        ge=1,
        description="Maximum character distance for time/location association.",
    )
    context_window: int = Field(
        default=50,
        ge=1,
        description="Half-width of the trigger-word window around an entity.",
    )
    description_chars_before: int = Field(
        default=50,
        ge=0,
        description="Characters of text kept before the date in a description.",
    )
    description_chars_after: int = Field(
        default=150,
        ge=1,
        description="Characters of text kept after the date in a description.",
    )
    fallback_description_chars: int = Field(
        default=200,
        ge=1,
        description="Characters of text used as the fallback event description.",
    )
    max_text_length: int = Field(
        default=10000,
        ge=100,
        description="Maximum text length to process. Longer texts are truncated.",
    )
    max_events_per_doc: int = Field(
        default=50,
        ge=1,
        le=200,
        description="Maximum events to extract from a single document.",
    )
