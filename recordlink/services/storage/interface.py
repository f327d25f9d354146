"""
Abstract Record Source Interface

DESIGN DECISION: The resolver never talks to a database directly. It asks a
record source for all records of a dataset. This allows us to:
1. Back the resolver with Google Sheets, SQLite or an HTTP API
2. Use in-memory records for tests and for callers that already hold data
3. Keep matching logic decoupled from storage

The interface is intentionally tiny: one read operation.
"""

from abc import ABC, abstractmethod
from typing import Any


class RecordSourceInterface(ABC):
    """
    Abstract interface for fetching dataset records.

    Contract: every returned record contains at least an `id`; other
    fields are dataset-specific and opaque to the resolver.
    """

    @abstractmethod
    async def get_records(self, dataset: str) -> list[dict[str, Any]]:
        """
        Fetch all records of a dataset.

        Args:
            dataset: Dataset name (e.g. 'accounts', 'bloodwork')

        Returns:
            List of records as dicts

        Raises:
            DatasetNotFoundError: If the dataset doesn't exist
            StorageError: If the fetch fails
        """
        pass


class StorageError(Exception):
    """Base exception for record source operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DatasetNotFoundError(NotFoundError):
    """Requested dataset does not exist."""

    def __init__(self, dataset: str):
        self.dataset = dataset
        super().__init__(f"Dataset not found: {dataset}")


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
