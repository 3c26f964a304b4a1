"""Dashboard web application for the clinic operations dashboard.

This module exposes a small Flask application that the browser front end
calls for its appointment list, call log and analytics widgets. Data comes
from the static dashboard document loaded by :mod:`connector`; a missing
document is tolerated so the application can run before it is populated.
"""
from __future__ import annotations

from datetime import datetime
import logging
import os
from typing import Iterable, List, Mapping, MutableMapping, Optional, Tuple

from flask import Flask, Response, jsonify, request

from connector import ClinicDataRepository, DatasetError
from engine import FilterState, Preset, QueryEngine
from engine.analytics import (
    cancellation_reasons,
    dynamic_ticks,
    status_breakdown,
    upcoming_appointments,
)

logger = logging.getLogger(__name__)

ALL_STATUSES = "All"
LOG_LEVEL = os.getenv("CLINIC_DASHBOARD_LOG_LEVEL", "INFO")
STRICT_LOADING = os.getenv("CLINIC_DASHBOARD_STRICT", "").strip().lower() in {"1", "true", "yes"}


def filter_log_entries(
    entries: Iterable[Mapping[str, object]],
    status: Optional[str],
) -> List[Mapping[str, object]]:
    if not status or status == ALL_STATUSES:
        return list(entries)
    return [entry for entry in entries if entry.get("status") == status]


class DashboardService:
    """Binds a repository to a query engine for the lifetime of the app."""

    def __init__(self, repo: ClinicDataRepository) -> None:
        self._repo = repo
        self._engine: Optional[QueryEngine] = None

    @property
    def repo(self) -> ClinicDataRepository:
        return self._repo

    @property
    def engine(self) -> QueryEngine:
        if self._engine is None:
            self._engine = QueryEngine(self._repo.get_appointments())
        return self._engine

    def appointments_payload(self, filters: FilterState, now: datetime) -> MutableMapping[str, object]:
        result = self.engine.evaluate(filters, now)
        payload: MutableMapping[str, object] = {"filters": filters.to_dict()}
        payload.update(result.to_dict())
        return payload

    def logs_payload(self, status: Optional[str]) -> MutableMapping[str, object]:
        return {
            "filter": status or ALL_STATUSES,
            "stats": self._repo.get_log_stats(),
            "entries": filter_log_entries(self._repo.get_log_entries(), status),
        }

    def analytics_payload(self, preset: Preset, now: datetime) -> MutableMapping[str, object]:
        breakdown = status_breakdown(self._repo.get_status_counts())
        peak = max((item["count"] for item in breakdown), default=0)
        upcoming = upcoming_appointments(self.engine.records, preset, now)
        return {
            "upcoming_filter": preset.value,
            "upcoming": [record.to_dict() for record in upcoming],
            "status_breakdown": breakdown,
            "ticks": dynamic_ticks(peak),
            "cancellation_reasons": cancellation_reasons(self._repo.get_cancellation_reasons()),
        }


app = Flask(__name__)
service = DashboardService(ClinicDataRepository(strict=STRICT_LOADING))


def _current_time() -> datetime:
    # Minute resolution so repeated requests reuse the cached evaluation.
    return datetime.now().replace(second=0, microsecond=0)


def _error(message: str, status: int) -> Tuple[Response, int]:
    return jsonify({"error": message}), status


@app.errorhandler(ValueError)
def handle_bad_filter(exc: ValueError) -> Tuple[Response, int]:
    logger.info("Rejected dashboard request: %s", exc)
    return _error(str(exc), 400)


@app.errorhandler(DatasetError)
def handle_dataset_error(exc: DatasetError) -> Tuple[Response, int]:
    logger.error("Dashboard data unavailable: %s", exc)
    return _error("Dashboard data is unavailable", 503)


@app.route("/appointments", methods=["GET"])
def appointments() -> Response:
    """Return filtered appointments and their summary statistics."""
    filters = FilterState.from_mapping(request.args)
    return jsonify(service.appointments_payload(filters, _current_time()))


@app.route("/logs", methods=["GET"])
def logs() -> Response:
    """Return call log entries, optionally narrowed to one status."""
    return jsonify(service.logs_payload(request.args.get("status")))


@app.route("/analytics", methods=["GET"])
def analytics() -> Response:
    preset = Preset.parse(request.args.get("upcoming") or Preset.TODAY.value)
    return jsonify(service.analytics_payload(preset, _current_time()))


@app.route("/user", methods=["GET"])
def user() -> Response:
    return jsonify(dict(service.repo.get_user()))


if __name__ == "__main__":
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run(
        host="0.0.0.0",
        port=int(os.environ.get("PORT", "5000")),
        debug=False,
    )
