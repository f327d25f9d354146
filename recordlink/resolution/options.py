"""
Option Index Builder

DESIGN DECISION: Each relation field is fetched independently and
concurrently, then joined. A failed or slow dataset degrades to an empty
option list for its own field only:
1. One fetch failing never aborts its siblings or the caller
2. Every fetch is bounded by a timeout
3. No retries; callers re-run resolution if they need fresher data
"""

import asyncio
from typing import Optional, Sequence

from recordlink.audit import ResolutionAuditLogger
from recordlink.config import get_settings
from recordlink.models.relation import OptionIndex, OptionIndexEntry
from recordlink.models.schema import FieldDescriptor, relation_fields
from recordlink.resolution.labels import build_options
from recordlink.services.storage import RecordSourceInterface


class OptionIndexBuilder:
    """
    Builds an OptionIndex for the relation fields of a schema.

    Usage:
        builder = OptionIndexBuilder(source)
        index = await builder.build(fields)
    """

    def __init__(
        self,
        source: RecordSourceInterface,
        audit_logger: Optional[ResolutionAuditLogger] = None,
        timeout: Optional[float] = None,
        fallback_fields: Optional[Sequence[str]] = None,
    ):
        """
        Args:
            source: Record-fetch collaborator.
            audit_logger: Receives fetch events. A fresh one is created if omitted.
            timeout: Per-field fetch timeout in seconds. Defaults to settings;
                    0 disables it.
            fallback_fields: Candidate fields used for labels when a
                    descriptor has no usable display field.
        """
        settings = get_settings().resolver
        self._source = source
        self._audit_logger = audit_logger or ResolutionAuditLogger()
        self._timeout = settings.fetch_timeout if timeout is None else (timeout or None)
        self._fallback_fields = tuple(fallback_fields or settings.fallback_fields)

    async def _fetch_entry(self, field: FieldDescriptor) -> OptionIndexEntry:
        dataset = field.related_dataset
        try:
            if self._timeout is None:
                candidates = await self._source.get_records(dataset)
            else:
                candidates = await asyncio.wait_for(
                    self._source.get_records(dataset),
                    timeout=self._timeout,
                )
            options = build_options(candidates or [], field, self._fallback_fields)
        except asyncio.TimeoutError:
            self._audit_logger.log_options_fetch_timed_out(
                field_key=field.key,
                related_dataset=dataset,
                timeout=self._timeout,
            )
            return OptionIndexEntry(
                options=[],
                loading=False,
                error=f"Timed out after {self._timeout}s fetching {dataset}",
            )
        except Exception as e:
            self._audit_logger.log_options_fetch_failed(
                field_key=field.key,
                related_dataset=dataset,
                error_message=str(e),
            )
            return OptionIndexEntry(options=[], loading=False, error=str(e) or type(e).__name__)

        self._audit_logger.log_options_fetched(
            field_key=field.key,
            related_dataset=dataset,
            option_count=len(options),
        )
        return OptionIndexEntry(options=options, loading=False)

    async def build(self, fields: list[FieldDescriptor]) -> OptionIndex:
        """Fetch options for every resolvable relation field and join."""
        targets = relation_fields(fields)
        if not targets:
            return OptionIndex()

        entries = await asyncio.gather(*(self._fetch_entry(field) for field in targets))
        return OptionIndex(entries={
            field.key: entry for field, entry in zip(targets, entries)
        })


async def fetch_relation_options(
    fields: list[FieldDescriptor],
    source: RecordSourceInterface,
    *,
    timeout: Optional[float] = None,
    audit_logger: Optional[ResolutionAuditLogger] = None,
) -> OptionIndex:
    """
    Fetch relation options for a set of fields.

    Returns an OptionIndex with one completed entry per relation field
    that names a related dataset.
    """
    builder = OptionIndexBuilder(source, audit_logger=audit_logger, timeout=timeout)
    return await builder.build(fields)
