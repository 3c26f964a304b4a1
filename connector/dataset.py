"""Loader for the static dashboard document.

The dashboard is backed by one JSON document prepared outside this service.
It holds the appointment export, the call log, the signed-in user and a few
pre-aggregated analytics series. The document is read once per repository and
treated as read-only afterwards.
"""
from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Tuple

from engine import AppointmentRecord

__all__ = ["DatasetError", "ClinicDataRepository", "DEFAULT_DATA_PATH"]


logger = logging.getLogger(__name__)


DEFAULT_DATA_PATH = Path(
    os.getenv(
        "CLINIC_DASHBOARD_DATA",
        str(Path(__file__).resolve().parents[1] / "data" / "dashboard.json"),
    )
)


class DatasetError(RuntimeError):
    """Raised in strict mode when the dashboard document cannot be used."""


class ClinicDataRepository:
    """Repository responsible for loading dashboard data from disk."""

    def __init__(self, data_path: Path | str | None = None, *, strict: bool = False) -> None:
        self._data_path = Path(data_path) if data_path is not None else DEFAULT_DATA_PATH
        self._strict = strict
        self._lock = threading.Lock()
        self._document: Optional[Dict[str, Any]] = None
        self._appointments: Optional[Tuple[AppointmentRecord, ...]] = None

    @property
    def data_path(self) -> Path:
        return self._data_path

    def _fail(self, message: str, exc: Optional[BaseException] = None) -> Dict[str, Any]:
        if self._strict:
            raise DatasetError(message) from exc
        logger.warning("%s; serving an empty dashboard", message)
        return {}

    def _read_document(self) -> Dict[str, Any]:
        if not self._data_path.exists():
            if self._strict:
                raise DatasetError(f"Dashboard data file {self._data_path} does not exist")
            logger.warning("Dashboard data file %s not found", self._data_path)
            return {}
        try:
            with self._data_path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except json.JSONDecodeError as exc:
            return self._fail(f"Dashboard data in {self._data_path} is not valid JSON: {exc.msg}", exc)
        except OSError as exc:
            return self._fail(f"Unable to read dashboard data from {self._data_path}: {exc}", exc)
        if not isinstance(payload, MutableMapping):
            return self._fail("Dashboard data must be a JSON object")
        return dict(payload)

    def document(self) -> Dict[str, Any]:
        if self._document is None:
            with self._lock:
                if self._document is None:
                    self._document = self._read_document()
                    if self._document:
                        logger.info("Loaded dashboard data from %s", self._data_path)
        return self._document

    @staticmethod
    def _collection(value: Any) -> List[Mapping[str, Any]]:
        if isinstance(value, list):
            return [item for item in value if isinstance(item, Mapping)]
        return []

    def get_appointments(self) -> Tuple[AppointmentRecord, ...]:
        if self._appointments is None:
            rows = self._collection(self.document().get("appointments"))
            self._appointments = tuple(AppointmentRecord.from_mapping(row) for row in rows)
        return self._appointments

    def _logs_section(self) -> Mapping[str, Any]:
        logs = self.document().get("logs")
        return logs if isinstance(logs, Mapping) else {}

    def get_log_entries(self) -> List[Mapping[str, Any]]:
        return self._collection(self._logs_section().get("entries"))

    def get_log_stats(self) -> List[Mapping[str, Any]]:
        return self._collection(self._logs_section().get("stats"))

    def get_user(self) -> Mapping[str, Any]:
        user = self.document().get("user")
        return user if isinstance(user, Mapping) else {}

    def get_status_counts(self) -> Mapping[str, Any]:
        counts = self.document().get("api_cancellation_count")
        return counts if isinstance(counts, Mapping) else {}

    def get_cancellation_reasons(self) -> List[Mapping[str, Any]]:
        return self._collection(self.document().get("cancellation_reasons"))
