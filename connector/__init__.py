"""Read-only data access for the clinic operations dashboard."""

from .dataset import DEFAULT_DATA_PATH, ClinicDataRepository, DatasetError

__all__ = ["ClinicDataRepository", "DatasetError", "DEFAULT_DATA_PATH"]
