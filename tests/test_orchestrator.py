"""Tests for batch resolution of relation references."""

import pytest

from recordlink.audit import ResolutionAuditLogger
from recordlink.models import FieldDescriptor, MatchStrategy, ResolutionEventType
from recordlink.resolution.matching import BATCH_PIPELINE, MatchPipeline
from recordlink.resolution.orchestrator import RelationResolver, resolve_relation_references
from recordlink.services.storage import InMemoryRecordSource


class CountingPipeline(MatchPipeline):
    """Batch pipeline that records which values it was asked to match."""

    def __init__(self):
        super().__init__(BATCH_PIPELINE.strategies)
        self.seen = []

    def match(self, raw_value, options, field=None):
        self.seen.append(raw_value)
        return super().match(raw_value, options, field)


class TestAccountScenario:
    """The checking-account example end to end."""

    @pytest.mark.asyncio
    async def test_compound_label_resolves(self, schema, source):
        result = await resolve_relation_references(
            [{"account_id": "Checking (Bank of X)"}], schema, source
        )
        assert result.records[0]["account_id"] == "a1"
        assert result.diagnostics == []
        assert result.resolved_count == 1

    @pytest.mark.asyncio
    async def test_lowercase_name_resolves(self, schema, source):
        result = await resolve_relation_references([{"account_id": "checking"}], schema, source)
        assert result.records[0]["account_id"] == "a1"

    @pytest.mark.asyncio
    async def test_unknown_account_stays_with_one_diagnostic(self, schema, source):
        result = await resolve_relation_references([{"account_id": "Savings"}], schema, source)

        assert result.records[0]["account_id"] == "Savings"
        assert len(result.diagnostics) == 1
        diagnostic = result.diagnostics[0]
        assert diagnostic.field_key == "account_id"
        assert diagnostic.raw_value == "Savings"
        assert diagnostic.record_index == 0
        assert diagnostic.related_dataset == "accounts"


class TestResolutionRules:
    """Skips, idempotence and isolation."""

    @pytest.mark.asyncio
    async def test_existing_ids_are_left_alone(self, schema, source):
        """Test values that already are ids never reach the matcher."""
        pipeline = CountingPipeline()
        logger = ResolutionAuditLogger()
        resolver = RelationResolver(source, audit_logger=logger, pipeline=pipeline)

        result = await resolver.resolve([{"account_id": "a2", "blood_marker_id": "m3"}], schema)

        assert result.records[0] == {"account_id": "a2", "blood_marker_id": "m3"}
        assert pipeline.seen == []
        assert result.resolved_count == 0
        assert result.diagnostics == []
        assert not any(e.event_type == ResolutionEventType.VALUE_RESOLVED for e in logger.events)

    @pytest.mark.asyncio
    async def test_resolving_twice_is_a_no_op(self, schema, source):
        records = [{"account_id": "Brokerage (Fund Co)", "blood_test_id": "1/5/2024"}]
        first = await resolve_relation_references(records, schema, source)
        second = await resolve_relation_references(first.records, schema, source)

        assert second.records == first.records == [{"account_id": "a2", "blood_test_id": "b1"}]
        assert second.resolved_count == 0

    @pytest.mark.asyncio
    async def test_blank_values_are_skipped_without_diagnostics(self, schema, source):
        records = [
            {"account_id": "", "blood_test_id": None, "value": 5},
            {"account_id": "   "},
            {},
        ]
        result = await resolve_relation_references(records, schema, source)

        assert result.records == records
        assert result.diagnostics == []

    @pytest.mark.asyncio
    async def test_one_diagnostic_per_unresolved_value(self, schema, source):
        records = [
            {"account_id": "Savings", "blood_marker_id": "Glucose"},
            {"account_id": "Savings", "blood_marker_id": "Vitamin Q"},
        ]
        result = await resolve_relation_references(records, schema, source)

        assert [(d.field_key, d.raw_value, d.record_index) for d in result.diagnostics] == [
            ("account_id", "Savings", 0),
            ("account_id", "Savings", 1),
            ("blood_marker_id", "Vitamin Q", 1),
        ]
        assert result.records[0]["blood_marker_id"] == "m1"

    @pytest.mark.asyncio
    async def test_non_string_values_are_reported(self, schema, source):
        result = await resolve_relation_references([{"account_id": 12}], schema, source)
        assert result.records[0]["account_id"] == 12
        assert len(result.diagnostics) == 1

    @pytest.mark.asyncio
    async def test_non_string_ids_are_left_alone(self):
        """Test an int id from a typed source is already resolved."""
        source = InMemoryRecordSource({"people": [{"id": 12, "name": "Ann"}]})
        fields = [FieldDescriptor(key="person_id", is_relation=True, related_dataset="people")]
        pipeline = CountingPipeline()
        resolver = RelationResolver(source, pipeline=pipeline)

        result = await resolver.resolve([{"person_id": 12}, {"person_id": "Ann"}], fields)

        assert result.diagnostics == []
        assert [r["person_id"] for r in result.records] == [12, "12"]
        assert pipeline.seen == ["Ann"]

    @pytest.mark.asyncio
    async def test_date_equivalence(self, schema, source):
        """Test all spellings of a day resolve to the same blood test."""
        records = [
            {"blood_test_id": "1/5/2024"},
            {"blood_test_id": "1-5-2024"},
            {"blood_test_id": "2024-01-05"},
            {"blood_test_id": "March 10, 2024"},
        ]
        result = await resolve_relation_references(records, schema, source)
        assert [r["blood_test_id"] for r in result.records] == ["b1", "b1", "b1", "b2"]

    @pytest.mark.asyncio
    async def test_dashed_compound_label(self, schema, source):
        result = await resolve_relation_references(
            [{"blood_test_id": "2024-01-05 (City Lab)"}], schema, source
        )
        assert result.records[0]["blood_test_id"] == "b1"

    @pytest.mark.asyncio
    async def test_partial_fetch_failure_isolation(self, schema, datasets):
        """Test accounts still resolve when the bloodwork dataset fails."""
        del datasets["bloodwork"]
        source = InMemoryRecordSource(datasets)

        result = await resolve_relation_references(
            [{"account_id": "Checking (Bank of X)", "blood_test_id": "1/5/2024"}],
            schema,
            source,
        )

        assert result.records[0]["account_id"] == "a1"
        assert result.records[0]["blood_test_id"] == "1/5/2024"
        assert [d.field_key for d in result.diagnostics] == ["blood_test_id"]
        assert list(result.option_index.failed_fields) == ["blood_test_id"]


class TestRecordOwnership:
    """Copy versus in-place policies."""

    @pytest.mark.asyncio
    async def test_copies_by_default(self, schema, source):
        records = [{"account_id": "Checking"}]
        result = await resolve_relation_references(records, schema, source)

        assert records[0]["account_id"] == "Checking"
        assert result.records[0]["account_id"] == "a1"
        assert result.records[0] is not records[0]

    @pytest.mark.asyncio
    async def test_in_place(self, schema, source):
        records = [{"account_id": "Checking"}]
        result = await resolve_relation_references(records, schema, source, in_place=True)

        assert records[0]["account_id"] == "a1"
        assert result.records is records

    @pytest.mark.asyncio
    async def test_copy_policy_from_settings(self, monkeypatch, schema, source):
        monkeypatch.setenv("RECORDLINK_COPY_RECORDS", "false")
        records = [{"account_id": "Checking"}]
        await RelationResolver(source).resolve(records, schema)
        assert records[0]["account_id"] == "a1"

    @pytest.mark.asyncio
    async def test_no_relation_fields_skips_fetching(self, value_field, source):
        records = [{"value": 5}]
        result = await resolve_relation_references(records, [value_field], source)

        assert result.records == records
        assert result.records[0] is not records[0]
        assert source.calls == []


class TestAuditTrail:

    @pytest.mark.asyncio
    async def test_events_record_strategies(self, schema, source):
        logger = ResolutionAuditLogger()
        await resolve_relation_references(
            [{"account_id": "Checking (Bank of X)", "blood_marker_id": "glu"}],
            schema,
            source,
            audit_logger=logger,
        )

        resolved = [e for e in logger.events if e.event_type == ResolutionEventType.VALUE_RESOLVED]
        assert {e.details["strategy"] for e in resolved} == {
            MatchStrategy.COMPOUND_LABEL.value,
            MatchStrategy.PARTIAL.value,
        }
        completed = logger.events[-1]
        assert completed.event_type == ResolutionEventType.RESOLUTION_COMPLETED
        assert completed.details["resolved_count"] == 2
        assert all(e.correlation_id == logger.correlation_id for e in logger.events)
