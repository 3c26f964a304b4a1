"""Appointment record model shared by the query engine and the dashboard."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from .parsing import parse_record_date, parse_record_time

CANCELLED_STATUSES = frozenset({"cancelled", "canceled"})
COMPLETED_STATUSES = frozenset({"completed"})


class StatusCategory(str, Enum):
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"
    COMPLETED = "completed"
    SCHEDULED = "scheduled"
    OTHER = "other"


def classify_status(status: Optional[str]) -> StatusCategory:
    normalized = (status or "").strip().lower()
    if normalized in CANCELLED_STATUSES:
        return StatusCategory.CANCELLED
    if normalized in COMPLETED_STATUSES:
        return StatusCategory.COMPLETED
    if normalized == "rescheduled":
        return StatusCategory.RESCHEDULED
    if normalized == "scheduled":
        return StatusCategory.SCHEDULED
    return StatusCategory.OTHER


def is_cancelled(status: Optional[str]) -> bool:
    return (status or "").lower() in CANCELLED_STATUSES


@dataclass(frozen=True)
class AppointmentRecord:
    """One row of the appointments export, kept exactly as supplied."""

    patient_name: Optional[str] = None
    appointment_date: Optional[str] = None
    appointment_time: Optional[str] = None
    appointment_type: Optional[str] = None
    appointment_status: Optional[str] = None
    patient_phone: Optional[str] = None
    patient_dob: Optional[str] = None
    duration: Optional[Union[int, float]] = None
    raw_payload: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False, repr=False)

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "AppointmentRecord":
        return cls(
            patient_name=cls._extract_text(row, ("patient_name", "patientName")),
            appointment_date=cls._extract_text(row, ("appointment_date", "appointmentDate")),
            appointment_time=cls._extract_text(row, ("appointment_time", "appointmentTime")),
            appointment_type=cls._extract_text(row, ("appointment_type", "appointmentType")),
            appointment_status=cls._extract_text(row, ("appointment_status", "appointmentStatus")),
            patient_phone=cls._extract_text(row, ("patient_phone", "patientPhone")),
            patient_dob=cls._extract_text(row, ("patient_dob", "patientDob")),
            duration=cls._extract_number(row, ("duration",)),
            raw_payload=dict(row),
        )

    @staticmethod
    def _extract_first(row: Mapping[str, Any], keys: Sequence[str]) -> Any:
        for key in keys:
            if key in row and row[key] is not None:
                return row[key]
        return None

    @classmethod
    def _extract_text(cls, row: Mapping[str, Any], keys: Sequence[str]) -> Optional[str]:
        value = cls._extract_first(row, keys)
        return None if value is None else str(value)

    @classmethod
    def _extract_number(cls, row: Mapping[str, Any], keys: Sequence[str]) -> Optional[Union[int, float]]:
        value = cls._extract_first(row, keys)
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return value
        if isinstance(value, str):
            try:
                number = float(value)
            except ValueError:
                return None
            return int(number) if number.is_integer() else number
        return None

    @property
    def status_category(self) -> StatusCategory:
        return classify_status(self.appointment_status)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "patient_name": self.patient_name,
            "appointment_date": self.appointment_date,
            "appointment_time": self.appointment_time,
            "appointment_type": self.appointment_type,
            "appointment_status": self.appointment_status,
            "patient_phone": self.patient_phone,
            "patient_dob": self.patient_dob,
            "duration": self.duration,
            "status_category": self.status_category.value,
        }


@dataclass(frozen=True)
class ParsedAppointment:
    """A record paired with its parsed date and minutes-of-day."""

    record: AppointmentRecord
    date: Optional[datetime]
    minutes: Optional[int]

    @classmethod
    def from_record(cls, record: AppointmentRecord) -> "ParsedAppointment":
        return cls(
            record=record,
            date=parse_record_date(record.appointment_date),
            minutes=parse_record_time(record.appointment_time),
        )


__all__ = [
    "AppointmentRecord",
    "CANCELLED_STATUSES",
    "ParsedAppointment",
    "StatusCategory",
    "classify_status",
    "is_cancelled",
]
