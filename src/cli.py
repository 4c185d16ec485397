"""
Command-line interface for event-extractor.

Provides commands to extract calendar events from a message and to
check how individual date/time references normalize.

Usage:
    event-extractor extract "Lunch tomorrow at noon" --subject "Catch up"
    event-extractor extract --file message.txt --reference-date 2024-03-15
    event-extractor normalize "next Friday" --reference-date 2024-03-15
    event-extractor normalize "12:30pm" --time
"""

import json
import os
from datetime import datetime

import click

from src.config.settings import get_settings
from src.event_extraction.config import EventExtractionConfig
from src.event_extraction.normalizer import TemporalNormalizer
from src.event_extraction.service import EventExtractionService
from src.observability.logging import get_logger, setup_logging

_DATE_FORMAT = ["%Y-%m-%d"]

logger = get_logger(__name__)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Event Extractor - Calendar events from email text."""
    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()


@main.command()
@click.argument("text", required=False)
@click.option("--file", "file_", type=click.File("r"), help="Read the message body from a file ('-' for stdin)")
@click.option("--subject", default="", help="Message subject line")
@click.option(
    "--reference-date",
    type=click.DateTime(formats=_DATE_FORMAT),
    default=None,
    help="Date relative references resolve against (default: today)",
)
@click.option(
    "--min-confidence",
    type=click.FloatRange(0.0, 1.0),
    default=None,
    help="Override the admission threshold",
)
def extract(
    text: str | None,
    file_,
    subject: str,
    reference_date: datetime | None,
    min_confidence: float | None,
) -> None:
    """Extract calendar events and print them as JSON."""
    if text is None and file_ is None:
        raise click.UsageError("Provide the message TEXT or --file.")
    if text is None:
        text = file_.read()

    overrides = {}
    if min_confidence is not None:
        overrides["min_confidence"] = min_confidence
    config = EventExtractionConfig(**overrides)

    service = EventExtractionService(config=config, reference=reference_date)
    events = service.extract(text, subject)
    logger.info(
        "Extraction finished",
        count=len(events),
        reference_date=service.normalizer.reference.isoformat(),
    )
    click.echo(json.dumps([event.to_dict() for event in events], indent=2))


@main.command()
@click.argument("value")
@click.option("--time", "is_time", is_flag=True, help="Normalize as a clock time")
@click.option(
    "--reference-date",
    type=click.DateTime(formats=_DATE_FORMAT),
    default=None,
    help="Date relative references resolve against (default: today)",
)
def normalize(value: str, is_time: bool, reference_date: datetime | None) -> None:
    """Normalize a single date (or, with --time, time) reference."""
    normalizer = TemporalNormalizer(reference_date)
    result = normalizer.normalize_time(value) if is_time else normalizer.normalize_date(value)

    if result == value:
        click.echo(f"Could not normalize: {value}", err=True)
    click.echo(result)


if __name__ == "__main__":
    main()
