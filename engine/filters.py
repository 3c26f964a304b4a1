"""Filter state and the predicates built from it.

The dashboard owns a single :class:`FilterState` value and replaces it on every
interaction. Each active criterion becomes an independent predicate over a
:class:`ParsedAppointment`; a record is kept only when every predicate holds.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from .parsing import parse_explicit_date, parse_explicit_time
from .presets import Preset, matches_preset
from .records import ParsedAppointment

Predicate = Callable[[ParsedAppointment], bool]

SEARCHABLE_FIELDS = (
    "patient_name",
    "appointment_type",
    "appointment_status",
    "patient_phone",
)


def _clean(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class DateRange:
    """``YYYY-MM-DD`` bounds; malformed values behave as unset."""

    start: Optional[str] = None
    end: Optional[str] = None

    @property
    def start_date(self) -> Optional[datetime]:
        return parse_explicit_date(self.start)

    @property
    def end_date(self) -> Optional[datetime]:
        return parse_explicit_date(self.end)


@dataclass(frozen=True)
class TimeRange:
    """24-hour ``HH:MM`` bounds; malformed values behave as unset."""

    start: Optional[str] = None
    end: Optional[str] = None

    @property
    def start_minutes(self) -> Optional[int]:
        return parse_explicit_time(self.start)

    @property
    def end_minutes(self) -> Optional[int]:
        return parse_explicit_time(self.end)


@dataclass(frozen=True)
class FilterState:
    preset: Preset = Preset.ALL
    search_query: str = ""
    date_range: DateRange = field(default_factory=DateRange)
    time_range: TimeRange = field(default_factory=TimeRange)

    @classmethod
    def from_mapping(cls, args: Mapping[str, object]) -> "FilterState":
        """Build a filter state from query-string style arguments.

        Raises ``ValueError`` for an unknown preset label.
        """

        return cls(
            preset=Preset.parse(args.get("preset")),
            search_query=str(args.get("q") or ""),
            date_range=DateRange(_clean(args.get("date_start")), _clean(args.get("date_end"))),
            time_range=TimeRange(_clean(args.get("time_start")), _clean(args.get("time_end"))),
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "preset": self.preset.value,
            "search_query": self.search_query,
            "date_range": asdict(self.date_range),
            "time_range": asdict(self.time_range),
        }

    def with_preset(self, preset: object) -> "FilterState":
        return replace(self, preset=Preset.parse(preset))

    def with_search(self, query: str) -> "FilterState":
        return replace(self, search_query=query)

    def with_date_range(self, start: Optional[str] = None, end: Optional[str] = None) -> "FilterState":
        return replace(self, date_range=DateRange(start, end))

    def with_time_range(self, start: Optional[str] = None, end: Optional[str] = None) -> "FilterState":
        return replace(self, time_range=TimeRange(start, end))

    def cleared_date_range(self) -> "FilterState":
        return replace(self, date_range=DateRange())

    def cleared_time_range(self) -> "FilterState":
        return replace(self, time_range=TimeRange())


def search_predicate(query: str) -> Optional[Predicate]:
    """Case-insensitive substring match over name, type, status and phone."""

    needle = query.strip().lower()
    if not needle:
        return None

    def predicate(item: ParsedAppointment) -> bool:
        for name in SEARCHABLE_FIELDS:
            value = getattr(item.record, name)
            if value is None or value == "":
                continue
            if needle in str(value).lower():
                return True
        return False

    return predicate


def preset_predicate(preset: Preset, now: datetime) -> Optional[Predicate]:
    if preset is Preset.ALL:
        return None
    return lambda item: matches_preset(preset, item.date, now)


def date_range_predicate(date_range: DateRange) -> Optional[Predicate]:
    start = date_range.start_date
    end = date_range.end_date
    if start is None and end is None:
        return None

    def predicate(item: ParsedAppointment) -> bool:
        if item.date is None:
            return False
        if start is not None and item.date < start:
            return False
        if end is not None and item.date > end:
            return False
        return True

    return predicate


def time_range_predicate(time_range: TimeRange) -> Optional[Predicate]:
    start = time_range.start_minutes
    end = time_range.end_minutes
    if start is None and end is None:
        return None

    def predicate(item: ParsedAppointment) -> bool:
        if item.minutes is None:
            return False
        if start is not None and item.minutes < start:
            return False
        if end is not None and item.minutes > end:
            return False
        return True

    return predicate


def build_predicates(filters: FilterState, now: datetime) -> List[Predicate]:
    """Return the active predicates in evaluation order."""

    candidates = (
        search_predicate(filters.search_query),
        preset_predicate(filters.preset, now),
        date_range_predicate(filters.date_range),
        time_range_predicate(filters.time_range),
    )
    return [predicate for predicate in candidates if predicate is not None]


def matches_all(item: ParsedAppointment, predicates: Sequence[Predicate]) -> bool:
    return all(predicate(item) for predicate in predicates)


__all__ = [
    "DateRange",
    "FilterState",
    "Predicate",
    "TimeRange",
    "build_predicates",
    "date_range_predicate",
    "matches_all",
    "preset_predicate",
    "search_predicate",
    "time_range_predicate",
]
