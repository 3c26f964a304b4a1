"""Series and widgets backing the analytics page."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .parsing import parse_record_date
from .presets import Preset, matches_preset
from .records import AppointmentRecord

UPCOMING_LIMITS = {
    Preset.TODAY: 5,
    Preset.TOMORROW: 5,
    Preset.THIS_WEEK: 8,
}
DEFAULT_UPCOMING_LIMIT = 5

STATUS_SERIES_ORDER = ("scheduled", "rescheduled", "cancelled")


def upcoming_appointments(
    records: Sequence[AppointmentRecord],
    preset: Preset,
    now: datetime,
) -> List[AppointmentRecord]:
    """Return the short appointment list shown beside the charts.

    Only ``Today``, ``Tomorrow`` and ``This Week`` narrow the list; any other
    preset shows the head of the collection. Source order is preserved.
    """

    limit = UPCOMING_LIMITS.get(preset)
    if limit is None:
        return list(records[:DEFAULT_UPCOMING_LIMIT])
    matches = (
        record
        for record in records
        if matches_preset(preset, parse_record_date(record.appointment_date), now)
    )
    selected: List[AppointmentRecord] = []
    for record in matches:
        selected.append(record)
        if len(selected) >= limit:
            break
    return selected


def _coerce_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


def status_breakdown(counts: Optional[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    counts = counts or {}
    return [{"type": status, "count": _coerce_count(counts.get(status))} for status in STATUS_SERIES_ORDER]


def cancellation_reasons(rows: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    series: List[Dict[str, Any]] = []
    for row in rows:
        name = row.get("reason_name")
        if not name:
            continue
        series.append({"name": str(name), "value": _coerce_count(row.get("count"))})
    return series


def dynamic_ticks(max_value: int, step: int = 6) -> List[int]:
    """Axis ticks ``0, step, 2*step, ...`` extending one step past *max_value*."""

    if step <= 0:
        raise ValueError("step must be positive")
    ticks = [0]
    current = step
    while current <= max_value + step:
        ticks.append(current)
        current += step
    return ticks


__all__ = [
    "cancellation_reasons",
    "dynamic_ticks",
    "status_breakdown",
    "upcoming_appointments",
]
