"""Services package."""

from recordlink.services.storage import (
    ConnectionError,
    DatasetNotFoundError,
    GoogleSheetsClient,
    GoogleSheetsRecordSource,
    InMemoryRecordSource,
    NotFoundError,
    RecordSourceInterface,
    StorageError,
)

__all__ = [
    "ConnectionError",
    "DatasetNotFoundError",
    "GoogleSheetsClient",
    "GoogleSheetsRecordSource",
    "InMemoryRecordSource",
    "NotFoundError",
    "RecordSourceInterface",
    "StorageError",
]
