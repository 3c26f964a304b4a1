"""Appointment query engine for the clinic operations dashboard."""

from .filters import DateRange, FilterState, TimeRange
from .presets import Preset
from .query import AppointmentStats, QueryEngine, QueryResult, evaluate
from .records import AppointmentRecord, StatusCategory, classify_status

__all__ = [
    "AppointmentRecord",
    "AppointmentStats",
    "DateRange",
    "FilterState",
    "Preset",
    "QueryEngine",
    "QueryResult",
    "StatusCategory",
    "TimeRange",
    "classify_status",
    "evaluate",
]
