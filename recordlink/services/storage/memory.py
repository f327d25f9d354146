"""In-memory record source."""

from copy import deepcopy
from typing import Any, Iterable, Optional

from recordlink.services.storage.interface import (
    DatasetNotFoundError,
    RecordSourceInterface,
)


class InMemoryRecordSource(RecordSourceInterface):
    """
    Record source backed by a dict of dataset name -> records.

    Returned records are deep copies, so callers cannot mutate the source.
    """

    def __init__(
        self,
        datasets: Optional[dict[str, Iterable[dict[str, Any]]]] = None,
        strict: bool = True,
    ):
        """
        Args:
            datasets: Initial records per dataset.
            strict: Raise DatasetNotFoundError for unknown datasets.
                   If False, unknown datasets are empty.
        """
        self._datasets: dict[str, list[dict[str, Any]]] = {
            name: list(records) for name, records in (datasets or {}).items()
        }
        self._strict = strict
        self.calls: list[str] = []

    def add_records(self, dataset: str, records: Iterable[dict[str, Any]]) -> None:
        self._datasets.setdefault(dataset, []).extend(records)

    async def get_records(self, dataset: str) -> list[dict[str, Any]]:
        self.calls.append(dataset)
        if dataset not in self._datasets:
            if self._strict:
                raise DatasetNotFoundError(dataset)
            return []
        return deepcopy(self._datasets[dataset])
