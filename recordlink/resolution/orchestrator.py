"""
Resolution Orchestrator

Walks a batch of records x relation fields and rewrites human-readable
relation values to target ids.

DESIGN DECISION: Partial success over whole-batch failure.
- Blank values are skipped silently
- Values that already are ids are left alone (no matcher runs)
- Values nothing matches keep their raw text and produce a diagnostic
- A dataset that failed to load only leaves its own field unresolved

The option index is fetched once per call; everything after that is
synchronous and in memory.
"""

from typing import Any, Optional

from recordlink.audit import ResolutionAuditLogger
from recordlink.config import ResolverSettings, get_settings
from recordlink.models.record import is_blank
from recordlink.models.relation import (
    OptionIndex,
    ResolutionDiagnostic,
    ResolutionResult,
    is_option_id,
)
from recordlink.models.schema import FieldDescriptor, relation_fields
from recordlink.resolution.matching import BATCH_PIPELINE, MatchPipeline
from recordlink.resolution.options import OptionIndexBuilder
from recordlink.services.storage import RecordSourceInterface


class RelationResolver:
    """
    Resolves relation references in imported records.

    Usage:
        resolver = RelationResolver(source)
        result = await resolver.resolve(records, fields)
        for diagnostic in result.diagnostics:
            ...
    """

    def __init__(
        self,
        source: RecordSourceInterface,
        audit_logger: Optional[ResolutionAuditLogger] = None,
        settings: Optional[ResolverSettings] = None,
        pipeline: MatchPipeline = BATCH_PIPELINE,
    ):
        self._source = source
        self._audit_logger = audit_logger or ResolutionAuditLogger()
        self._settings = settings or get_settings().resolver
        self._pipeline = pipeline

    @property
    def audit_logger(self) -> ResolutionAuditLogger:
        return self._audit_logger

    async def build_index(
        self,
        fields: list[FieldDescriptor],
        timeout: Optional[float] = None,
    ) -> OptionIndex:
        builder = OptionIndexBuilder(
            self._source,
            audit_logger=self._audit_logger,
            timeout=self._settings.fetch_timeout_seconds if timeout is None else timeout,
            fallback_fields=self._settings.fallback_fields,
        )
        return await builder.build(fields)

    def resolve_with_index(
        self,
        records: list[dict[str, Any]],
        fields: list[FieldDescriptor],
        option_index: OptionIndex,
        in_place: Optional[bool] = None,
    ) -> ResolutionResult:
        """
        Resolve records against an already built option index.

        Args:
            records: Records to resolve.
            fields: Field schema of the records' dataset.
            option_index: Options per relation field.
            in_place: Mutate the given dicts instead of copies.
                     Defaults to the `copy_records` setting.
        """
        if in_place is None:
            in_place = not self._settings.copy_records
        resolved_records = records if in_place else [dict(record) for record in records]

        targets = relation_fields(fields)
        diagnostics: list[ResolutionDiagnostic] = []
        resolved_count = 0

        for index, record in enumerate(resolved_records):
            for field in targets:
                value = record.get(field.key)

                if is_blank(value):
                    continue

                options = option_index.options_for(field.key)
                if is_option_id(value, options):
                    continue

                match = None
                if isinstance(value, str):
                    match = self._pipeline.match(value, options, field)

                if match is not None:
                    record[field.key] = match.option_id
                    resolved_count += 1
                    self._audit_logger.log_value_resolved(
                        field_key=field.key,
                        raw_value=value,
                        option_id=match.option_id,
                        option_label=match.option_label,
                        strategy=match.strategy.value,
                    )
                    continue

                diagnostics.append(ResolutionDiagnostic(
                    field_key=field.key,
                    raw_value=value,
                    record_index=index,
                    related_dataset=field.related_dataset,
                ))
                self._audit_logger.log_value_unresolved(
                    field_key=field.key,
                    raw_value=value,
                    related_dataset=field.related_dataset,
                    record_index=index,
                )

        self._audit_logger.log_resolution_completed(
            record_count=len(resolved_records),
            resolved_count=resolved_count,
            unresolved_count=len(diagnostics),
            failed_fields=sorted(option_index.failed_fields),
        )

        return ResolutionResult(
            records=resolved_records,
            diagnostics=diagnostics,
            resolved_count=resolved_count,
            option_index=option_index,
        )

    async def resolve(
        self,
        records: list[dict[str, Any]],
        fields: list[FieldDescriptor],
        in_place: Optional[bool] = None,
        timeout: Optional[float] = None,
    ) -> ResolutionResult:
        """Fetch options once, then resolve every record."""
        if not relation_fields(fields):
            if in_place is None:
                in_place = not self._settings.copy_records
            return ResolutionResult(
                records=records if in_place else [dict(record) for record in records],
            )

        option_index = await self.build_index(fields, timeout=timeout)
        return self.resolve_with_index(records, fields, option_index, in_place=in_place)


async def resolve_relation_references(
    records: list[dict[str, Any]],
    fields: list[FieldDescriptor],
    source: RecordSourceInterface,
    *,
    in_place: Optional[bool] = None,
    timeout: Optional[float] = None,
    audit_logger: Optional[ResolutionAuditLogger] = None,
) -> ResolutionResult:
    """
    Resolve display values to relation ids for a set of records.

    Returns the records (with resolvable relation fields replaced by ids)
    together with a diagnostic for every value left unresolved.
    """
    resolver = RelationResolver(source, audit_logger=audit_logger)
    return await resolver.resolve(records, fields, in_place=in_place, timeout=timeout)
