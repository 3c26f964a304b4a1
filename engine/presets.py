"""Named calendar windows offered as quick filters on the appointments page."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from .parsing import add_days, end_of_day, is_same_calendar_day, start_of_day


class Preset(str, Enum):
    ALL = "All"
    TODAY = "Today"
    TOMORROW = "Tomorrow"
    THIS_WEEK = "This Week"
    CURRENT_MONTH = "Current Month"
    LAST_MONTH = "Last Month"
    PAST_BOOKINGS = "Past Bookings"
    FUTURE_BOOKINGS = "Future Bookings"

    @classmethod
    def parse(cls, value: object) -> "Preset":
        """Resolve a dashboard label (``"This Week"``) or member name (``this_week``)."""

        if isinstance(value, Preset):
            return value
        if value is None or not str(value).strip():
            return cls.ALL
        normalized = _normalize_label(str(value))
        for member in cls:
            if normalized in {_normalize_label(member.value), _normalize_label(member.name)}:
                return member
        raise ValueError(f"Unknown appointment preset {value!r}")


def _normalize_label(value: str) -> str:
    return "".join(ch for ch in value.lower() if ch.isalnum())


@dataclass(frozen=True)
class PresetWindow:
    """Inclusive ``[start, end]`` range; either side may be open."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    start_inclusive: bool = True
    end_inclusive: bool = True

    def contains(self, moment: datetime) -> bool:
        if self.start is not None:
            if moment < self.start or (not self.start_inclusive and moment == self.start):
                return False
        if self.end is not None:
            if moment > self.end or (not self.end_inclusive and moment == self.end):
                return False
        return True


def _month_window(year: int, month: int) -> PresetWindow:
    first_day = datetime(year, month, 1)
    if month == 12:
        next_month = datetime(year + 1, 1, 1)
    else:
        next_month = datetime(year, month + 1, 1)
    last_day = next_month - timedelta(days=1)
    return PresetWindow(start=first_day, end=end_of_day(last_day))


def resolve_window(preset: Preset, now: datetime) -> Optional[PresetWindow]:
    """Return the calendar window for *preset* relative to *now*.

    ``All`` has no window. ``Today`` and ``Tomorrow`` are single calendar days.
    Weeks run Sunday through Saturday.
    """

    today = start_of_day(now)
    if preset is Preset.ALL:
        return None
    if preset is Preset.TODAY:
        return PresetWindow(start=today, end=end_of_day(today))
    if preset is Preset.TOMORROW:
        tomorrow = add_days(today, 1)
        return PresetWindow(start=tomorrow, end=end_of_day(tomorrow))
    if preset is Preset.THIS_WEEK:
        # datetime.weekday() is Monday=0; the dashboard counts from Sunday.
        days_since_sunday = (now.weekday() + 1) % 7
        week_start = add_days(today, -days_since_sunday)
        return PresetWindow(start=week_start, end=end_of_day(add_days(week_start, 6)))
    if preset is Preset.CURRENT_MONTH:
        return _month_window(now.year, now.month)
    if preset is Preset.LAST_MONTH:
        if now.month == 1:
            return _month_window(now.year - 1, 12)
        return _month_window(now.year, now.month - 1)
    if preset is Preset.PAST_BOOKINGS:
        return PresetWindow(end=today, end_inclusive=False)
    if preset is Preset.FUTURE_BOOKINGS:
        return PresetWindow(start=end_of_day(now), start_inclusive=False)
    raise ValueError(f"Unsupported preset {preset!r}")


def matches_preset(preset: Preset, record_date: Optional[datetime], now: datetime) -> bool:
    if preset is Preset.ALL:
        return True
    if record_date is None:
        return False
    if preset is Preset.TODAY:
        return is_same_calendar_day(record_date, now)
    if preset is Preset.TOMORROW:
        return is_same_calendar_day(record_date, add_days(now, 1))
    window = resolve_window(preset, now)
    return window is None or window.contains(record_date)


__all__ = ["Preset", "PresetWindow", "matches_preset", "resolve_window"]
