"""
Record Source Package

Provides the abstract record-fetch interface and its implementations.
The resolver only depends on RecordSourceInterface.
"""

from recordlink.services.storage.interface import (
    ConnectionError,
    DatasetNotFoundError,
    NotFoundError,
    RecordSourceInterface,
    StorageError,
)
from recordlink.services.storage.memory import InMemoryRecordSource
from recordlink.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsRecordSource,
)

__all__ = [
    # Interface
    "RecordSourceInterface",
    # Exceptions
    "ConnectionError",
    "DatasetNotFoundError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsRecordSource",
    "InMemoryRecordSource",
]
