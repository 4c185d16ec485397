"""Temporal normalizer for calendar event extraction.

Converts relative and informal date/time references from message text
into canonical YYYY-MM-DD dates and 24-hour HH:MM times.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta


# Month name → number mapping
_MONTH_MAP: dict[str, int] = {
    "january": 1, "february": 2, "march": 3, "april": 4,
    "may": 5, "june": 6, "july": 7, "august": 8,
    "september": 9, "october": 10, "november": 11, "december": 12,
    "jan": 1, "feb": 2, "mar": 3, "apr": 4,
    "jun": 6, "jul": 7, "aug": 8, "sep": 9,
    "sept": 9, "oct": 10, "nov": 11, "dec": 12,
}

# Weekday name → date.weekday() index
_WEEKDAY_MAP: dict[str, int] = {
    "monday": 0, "tuesday": 1, "wednesday": 2, "thursday": 3,
    "friday": 4, "saturday": 5, "sunday": 6,
}

# Relative day word → offset from the reference date
_RELATIVE_DAYS: dict[str, int] = {
    "today": 0,
    "tonight": 0,
    "this evening": 0,
    "tomorrow": 1,
    "tmrw": 1,
    "yesterday": -1,
}

_ORDINAL = r"(?:st|nd|rd|th)?"


class TemporalNormalizer:
    """
    Stateless normalizer for date and time references in message text.

    Converts references like "tomorrow", "next Friday", "3/14/2024",
    "March 14th" and "2:30pm" into canonical strings. Input that cannot
    be parsed is returned unchanged, so callers can detect failure by
    comparing the result with the raw value.

    Args:
        reference: Base instant for resolving relative references.
            Defaults to today in the host's local zone.
    """

    def __init__(self, reference: date | datetime | None = None):
        if isinstance(reference, datetime):
            reference = reference.date()
        self._ref = reference or date.today()

    @property
    def reference(self) -> date:
        return self._ref

    def normalize_date(self, raw: str) -> str:
        """
        Normalize a date reference string.

        Args:
            raw: Raw date reference from text.

        Returns:
            YYYY-MM-DD string, or the original string if no pattern matches.
        """
        if not raw or not raw.strip():
            return raw

        text = " ".join(raw.split())

        for fn in (
            self._try_iso,
            self._try_relative_day,
            self._try_relative_weekday,
            self._try_numeric,
            self._try_month_day,
            self._try_day_month,
        ):
            result = fn(text)
            if result is not None:
                return result

        # Passthrough for unknown formats
        return raw

    def normalize_time(self, raw: str) -> str:
        """
        Normalize a clock time to 24-hour HH:MM.

        Args:
            raw: Raw time reference such as "2pm", "14:05" or "12:30 a.m.".

        Returns:
            HH:MM string, or the original string if it is not a valid time.
        """
        if not raw or not raw.strip():
            return raw

        text = raw.strip().lower()
        if text == "noon":
            return "12:00"
        if text == "midnight":
            return "00:00"

        m = re.fullmatch(
            r"(\d{1,2})(?::(\d{2}))?(?::\d{2})?\s*(?:([ap])\.?m\.?)?", text
        )
        if not m:
            return raw

        hour = int(m.group(1))
        minute = int(m.group(2)) if m.group(2) else 0
        meridiem = m.group(3)

        if meridiem is not None and not 1 <= hour <= 12:
            return raw
        if meridiem == "p" and hour != 12:
            hour += 12
        elif meridiem == "a" and hour == 12:
            hour = 0

        if hour > 23 or minute > 59:
            return raw
        return f"{hour:02d}:{minute:02d}"

    def _try_iso(self, text: str) -> str | None:
        """Match an already canonical '2024-03-15'."""
        m = re.fullmatch(r"(\d{4})-(\d{1,2})-(\d{1,2})", text)
        if not m:
            return None
        return self._format(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    def _try_relative_day(self, text: str) -> str | None:
        """Match 'today', 'tonight', 'tomorrow', 'yesterday'."""
        offset = _RELATIVE_DAYS.get(text.lower())
        if offset is None:
            return None
        return (self._ref + timedelta(days=offset)).isoformat()

    def _try_relative_weekday(self, text: str) -> str | None:
        """
        Match 'next Friday', 'this Monday', 'last Tuesday', 'Sunday'.

        'next', 'coming' and a bare weekday always move forward at least
        one day, so the same weekday as the reference resolves a week ahead.
        """
        m = re.fullmatch(r"(?i)(?:(next|this|coming|last)\s+)?([a-z]+)", text)
        if not m:
            return None
        target = _WEEKDAY_MAP.get(m.group(2).lower())
        if target is None:
            return None

        qualifier = (m.group(1) or "next").lower()
        current = self._ref.weekday()
        if qualifier == "this":
            offset = (target - current) % 7
        elif qualifier == "last":
            offset = -((current - target) % 7 or 7)
        else:
            offset = (target - current) % 7 or 7
        return (self._ref + timedelta(days=offset)).isoformat()

    def _try_numeric(self, text: str) -> str | None:
        """Match month-first numeric dates: '3/15/2024', '03-15-24', '3/15'."""
        m = re.fullmatch(r"(\d{1,2})[/\-.](\d{1,2})(?:[/\-.](\d{2}|\d{4}))?", text)
        if not m:
            return None
        year = self._expand_year(m.group(3))
        return self._format(year, int(m.group(1)), int(m.group(2)))

    def _try_month_day(self, text: str) -> str | None:
        """Match 'March 15, 2024', 'Mar. 15th', 'march 15'."""
        m = re.fullmatch(
            rf"(?i)([a-z]+)\.?\s+(\d{{1,2}}){_ORDINAL},?(?:\s*(\d{{4}}))?", text
        )
        if not m:
            return None
        month = _MONTH_MAP.get(m.group(1).lower())
        if month is None:
            return None
        year = int(m.group(3)) if m.group(3) else self._ref.year
        return self._format(year, month, int(m.group(2)))

    def _try_day_month(self, text: str) -> str | None:
        """Match '15th March', '15 of March 2024', 'Friday, 15 March'."""
        m = re.fullmatch(
            rf"(?i)(?:([a-z]+),?\s+)?(\d{{1,2}}){_ORDINAL}\s+(?:of\s+)?([a-z]+),?(?:\s*(\d{{4}}))?",
            text,
        )
        if not m:
            return None
        if m.group(1) and m.group(1).lower() not in _WEEKDAY_MAP:
            return None
        month = _MONTH_MAP.get(m.group(3).lower())
        if month is None:
            return None
        year = int(m.group(4)) if m.group(4) else self._ref.year
        return self._format(year, month, int(m.group(2)))

    def _expand_year(self, raw_year: str | None) -> int:
        if raw_year is None:
            return self._ref.year
        year = int(raw_year)
        if len(raw_year) == 2:
            year += 2000
        return year

    @staticmethod
    def _format(year: int, month: int, day: int) -> str | None:
        try:
            return date(year, month, day).isoformat()
        except ValueError:
            return None


def normalize_date(raw: str, reference: date | datetime | None = None) -> str:
    """Normalize a date reference against ``reference`` (default: today)."""
    return TemporalNormalizer(reference).normalize_date(raw)


def normalize_time(raw: str) -> str:
    """Normalize a clock time to 24-hour HH:MM."""
    return TemporalNormalizer().normalize_time(raw)
