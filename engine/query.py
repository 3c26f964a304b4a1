"""Appointment query engine.

``evaluate`` takes the immutable record collection, the current
:class:`~engine.filters.FilterState` and an explicit ``now`` and returns the
filtered rows (most recent first) together with summary statistics. It never
raises for malformed record data: unparseable values simply drop out of the
date and time based criteria.
"""
from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from .filters import FilterState, build_predicates, matches_all
from .parsing import epoch_millis
from .records import AppointmentRecord, ParsedAppointment, is_cancelled

logger = logging.getLogger(__name__)

MILLIS_PER_MINUTE = 60_000


@dataclass(frozen=True)
class AppointmentStats:
    total: int = 0
    cancelled_count: int = 0
    completion_rate: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "cancelled_count": self.cancelled_count,
            "completion_rate": self.completion_rate,
        }


@dataclass(frozen=True)
class QueryResult:
    rows: Tuple[AppointmentRecord, ...]
    stats: AppointmentStats

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows": [record.to_dict() for record in self.rows],
            "stats": self.stats.to_dict(),
        }


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def sort_key(item: ParsedAppointment) -> int:
    """Timestamp used for ordering; missing parts count as the epoch."""

    return epoch_millis(item.date) + (item.minutes or 0) * MILLIS_PER_MINUTE


def compute_stats(rows: Sequence[AppointmentRecord]) -> AppointmentStats:
    total = len(rows)
    cancelled_count = sum(1 for record in rows if is_cancelled(record.appointment_status))
    if not total:
        return AppointmentStats()
    completion_rate = round_half_up((total - cancelled_count) / total * 100)
    return AppointmentStats(total=total, cancelled_count=cancelled_count, completion_rate=completion_rate)


def _naive(moment: datetime) -> datetime:
    # Record dates carry no zone; compare in the caller's wall-clock time.
    return moment.replace(tzinfo=None) if moment.tzinfo is not None else moment


def evaluate(
    records: Iterable[AppointmentRecord],
    filters: FilterState,
    now: datetime,
) -> QueryResult:
    """Filter, sort and summarize *records* for the given filter state."""

    now = _naive(now)
    predicates = build_predicates(filters, now)
    parsed = [ParsedAppointment.from_record(record) for record in records]
    matched = [item for item in parsed if matches_all(item, predicates)]
    matched.sort(key=sort_key, reverse=True)
    rows = tuple(item.record for item in matched)
    stats = compute_stats(rows)
    logger.debug(
        "Evaluated %d appointments with %d active filters: %d matched",
        len(parsed),
        len(predicates),
        stats.total,
    )
    return QueryResult(rows=rows, stats=stats)


class QueryEngine:
    """Holds one record collection and memoizes the latest evaluation."""

    def __init__(self, records: Iterable[AppointmentRecord]) -> None:
        self._records: Tuple[AppointmentRecord, ...] = tuple(records)
        self._lock = threading.Lock()
        self._last: Optional[Tuple[Tuple[FilterState, datetime], QueryResult]] = None

    @property
    def records(self) -> Tuple[AppointmentRecord, ...]:
        return self._records

    def evaluate(self, filters: FilterState, now: datetime) -> QueryResult:
        key = (filters, now)
        with self._lock:
            last = self._last
        if last is not None and last[0] == key:
            return last[1]
        result = evaluate(self._records, filters, now)
        with self._lock:
            self._last = (key, result)
        return result


__all__ = [
    "AppointmentStats",
    "QueryEngine",
    "QueryResult",
    "compute_stats",
    "evaluate",
    "round_half_up",
    "sort_key",
]
