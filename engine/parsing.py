"""Date and time parsing helpers for appointment records.

Appointment exports carry loosely formatted values: dates such as
``03/04/2024`` or ``13-01-2024`` whose day/month order has to be inferred, and
times such as ``9:05 AM`` that may be embedded in longer text. Filter inputs
coming from the dashboard are unambiguous (``YYYY-MM-DD`` and ``HH:MM``).

Every parser returns ``None`` when the value cannot be understood so callers
can fall back to exclusion instead of failing the whole evaluation.
"""
from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import List, Optional

DATE_SEPARATORS = re.compile(r"[/-]")
RECORD_TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)", re.IGNORECASE)
ISO_DATE_SEPARATOR = re.compile("-")
CLOCK_SEPARATOR = re.compile(":")

_EPOCH = datetime(1970, 1, 1)


def _split_integers(value: str, pattern: re.Pattern, expected: int) -> Optional[List[int]]:
    parts = pattern.split(value)
    if len(parts) != expected:
        return None
    try:
        return [int(part) for part in parts]
    except ValueError:
        return None


def _build_date(year: int, month: int, day: int) -> Optional[datetime]:
    """Build a calendar date, carrying overflowing months and days forward.

    ``02/30/2024`` becomes March 1st and month 13 is January of the next year,
    the way the browser front end normalizes dates. Years 0-99 are read as
    1900-1999.
    """

    if 0 <= year <= 99:
        year += 1900
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    try:
        return datetime(year, month, 1) + timedelta(days=day - 1)
    except (ValueError, OverflowError):
        return None


def parse_record_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ambiguous ``a/b/yyyy`` record date.

    The feed is month-first, but occasionally emits day-first values. When the
    first component exceeds 12 and the second does not, the value is read as
    day-first; otherwise month-first wins, so ``05/04/2024`` is always May 4th.
    """

    if not value:
        return None
    parts = _split_integers(str(value).strip(), DATE_SEPARATORS, 3)
    if parts is None:
        return None
    first, second, year = parts
    if first > 12 and second <= 12:
        day, month = first, second
    else:
        month, day = first, second
    return _build_date(year, month, day)


def parse_explicit_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a ``YYYY-MM-DD`` filter bound."""

    if not value:
        return None
    parts = _split_integers(value.strip(), ISO_DATE_SEPARATOR, 3)
    if parts is None:
        return None
    year, month, day = parts
    return _build_date(year, month, day)


def parse_record_time(value: Optional[str]) -> Optional[int]:
    """Return minutes since midnight for the first ``H:MM AM/PM`` in *value*."""

    if not value:
        return None
    match = RECORD_TIME_PATTERN.search(str(value))
    if match is None:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2))
    period = match.group(3).upper()
    if period == "PM" and hour != 12:
        hour += 12
    if period == "AM" and hour == 12:
        hour = 0
    return hour * 60 + minute


def parse_explicit_time(value: Optional[str]) -> Optional[int]:
    """Return minutes since midnight for a 24-hour ``HH:MM`` filter bound."""

    if not value:
        return None
    parts = _split_integers(value.strip(), CLOCK_SEPARATOR, 2)
    if parts is None:
        return None
    hour, minute = parts
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return hour * 60 + minute


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999000)


def is_same_calendar_day(left: datetime, right: datetime) -> bool:
    return (left.year, left.month, left.day) == (right.year, right.month, right.day)


def add_days(moment: datetime, days: int) -> datetime:
    return moment + timedelta(days=days)


def epoch_millis(moment: Optional[datetime]) -> int:
    """Milliseconds since the epoch, reading naive values as wall-clock time."""

    if moment is None:
        return 0
    if moment.tzinfo is not None:
        moment = moment.replace(tzinfo=None)
    return (moment - _EPOCH) // timedelta(milliseconds=1)


__all__ = [
    "add_days",
    "end_of_day",
    "epoch_millis",
    "is_same_calendar_day",
    "parse_explicit_date",
    "parse_explicit_time",
    "parse_record_date",
    "parse_record_time",
    "start_of_day",
]
