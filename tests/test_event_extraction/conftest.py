"""Shared fixtures for event extraction tests."""

import pytest

from src.event_extraction.builder import EventBuilder
from src.event_extraction.config import EventExtractionConfig
from src.event_extraction.context import ContextClassifier
from src.event_extraction.normalizer import TemporalNormalizer
from src.event_extraction.patterns import EntityRecognizer
from src.event_extraction.service import EventExtractionService


@pytest.fixture
def event_config():
    """Default event extraction config."""
    return EventExtractionConfig()


@pytest.fixture
def normalizer(reference_date):
    """Normalizer anchored on Friday 2024-03-15."""
    return TemporalNormalizer(reference_date)


@pytest.fixture
def recognizer(event_config, normalizer):
    """EntityRecognizer with default config."""
    return EntityRecognizer(config=event_config, normalizer=normalizer)


@pytest.fixture
def classifier():
    """ContextClassifier over the default rule table."""
    return ContextClassifier()


@pytest.fixture
def builder(event_config):
    """EventBuilder with default config."""
    return EventBuilder(config=event_config)


@pytest.fixture
def service(event_config, reference_date):
    """Uninitialized extraction service anchored on the reference date."""
    return EventExtractionService(config=event_config, reference=reference_date)


@pytest.fixture
def sample_messages():
    """Sample messages for each context type, with subjects."""
    return {
        "social": (
            "Let's have lunch at Joe's Diner tomorrow at 12:30pm to discuss the project.",
            "Catch up",
        ),
        "assignment": (
            "Reminder: Assignment 3: Binary Trees is due on Friday, 22nd March by 11:59pm.",
            "CS201 coursework",
        ),
        "meeting": (
            "Team meeting about the Q2 roadmap on March 20 at 2pm in Room 204.",
            "Weekly sync",
        ),
        "exam": (
            "The midterm exam for Data Structures is on 3/28/2024 at 9am in Hall B.",
            "Exam schedule",
        ),
        "none": (
            "Thanks for your help with the report.",
            "Thanks",
        ),
    }
