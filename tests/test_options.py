"""Tests for option projection and the concurrent option index builder."""

import asyncio

import pytest

from recordlink.audit import ResolutionAuditLogger
from recordlink.models import FieldDescriptor, ResolutionEventType
from recordlink.models.schema import SecondaryLabelStyle
from recordlink.resolution.labels import build_option, format_label
from recordlink.resolution.options import OptionIndexBuilder, fetch_relation_options
from recordlink.services.storage import InMemoryRecordSource, RecordSourceInterface


class SlowRecordSource(RecordSourceInterface):
    """Delays one dataset, serves the rest from memory."""

    def __init__(self, inner: RecordSourceInterface, slow_dataset: str, delay: float):
        self._inner = inner
        self._slow_dataset = slow_dataset
        self._delay = delay

    async def get_records(self, dataset):
        if dataset == self._slow_dataset:
            await asyncio.sleep(self._delay)
        return await self._inner.get_records(dataset)


class BrokenRecordSource(RecordSourceInterface):
    """Returns a malformed record for every dataset."""

    async def get_records(self, dataset):
        return ["not a record"]


class TestLabels:
    """Tests for projecting candidates into options."""

    def test_display_and_secondary_field(self, account_field):
        option = build_option(
            {"id": "a1", "account_name": "Checking", "account_type": "Bank of X"},
            account_field,
        )
        assert option.id == "a1"
        assert option.display_value == "Checking"
        assert option.label == "Checking (Bank of X)"

    def test_blank_secondary_is_left_out(self, account_field):
        option = build_option(
            {"id": "a3", "account_name": "Cash", "account_type": ""},
            account_field,
        )
        assert option.label == "Cash"

    def test_dashed_secondary(self, bloodwork_field):
        option = build_option(
            {"id": "b1", "date": "2024-01-05", "lab_name": "City Lab"},
            bloodwork_field,
        )
        assert option.label == "2024-01-05 - City Lab"
        assert option.display_value == "2024-01-05"

    def test_fallback_label_chain(self, marker_field):
        """Test name, then title, then "ID: <id>"."""
        named = build_option({"id": "m1", "name": "Glucose", "title": "Ignored"}, marker_field)
        titled = build_option({"id": "m2", "name": "", "title": "Ferritin"}, marker_field)
        bare = build_option({"id": "m3"}, marker_field)

        assert (named.label, named.display_value) == ("Glucose", "Glucose")
        assert (titled.label, titled.display_value) == ("Ferritin", "Ferritin")
        assert (bare.label, bare.display_value) == ("ID: m3", "")

    def test_empty_display_field_falls_back(self, account_field):
        """Test a candidate without display field data uses the fallback chain."""
        option = build_option({"id": "a9", "account_name": "  ", "name": "Legacy"}, account_field)
        assert option.label == "Legacy"

    def test_custom_fallback_fields(self, marker_field):
        option = build_option(
            {"id": "m1", "name": "Glucose", "code": "GLU"},
            marker_field,
            fallback_fields=("code", "name"),
        )
        assert option.label == "GLU"

    def test_ids_are_strings(self, marker_field):
        assert build_option({"id": 7, "name": "Iron"}, marker_field).id == "7"

    def test_related_field_is_the_id(self):
        field = FieldDescriptor(
            key="person_id",
            is_relation=True,
            related_dataset="people",
            related_field="uuid",
            display_field="full_name",
        )
        option = build_option({"id": "row-1", "uuid": "p-42", "full_name": "Ada"}, field)
        assert option.id == "p-42"

    def test_date_objects_render_as_iso(self, bloodwork_field):
        from datetime import date
        option = build_option({"id": "b1", "date": date(2024, 1, 5)}, bloodwork_field)
        assert option.display_value == "2024-01-05"

    def test_format_label(self):
        assert format_label("A", None) == "A"
        assert format_label("A", "B") == "A (B)"
        assert format_label("A", "B", SecondaryLabelStyle.DASHED) == "A - B"


class TestOptionIndexBuilder:
    """Tests for fetching options concurrently."""

    @pytest.mark.asyncio
    async def test_one_entry_per_relation_field(self, schema, source):
        index = await fetch_relation_options(schema, source)

        assert sorted(index.keys()) == ["account_id", "blood_marker_id", "blood_test_id"]
        assert all(not index[key].loading for key in index.keys())
        assert [o.id for o in index.options_for("account_id")] == ["a1", "a2"]
        assert index.failed_fields == {}

    @pytest.mark.asyncio
    async def test_relation_without_dataset_is_skipped(self, source):
        fields = [FieldDescriptor(key="orphan_id", is_relation=True)]
        index = await fetch_relation_options(fields, source)
        assert len(index) == 0
        assert source.calls == []

    @pytest.mark.asyncio
    async def test_failed_fetch_degrades_to_empty_options(self, schema, datasets):
        """Test one missing dataset does not affect its siblings."""
        del datasets["bloodwork"]
        logger = ResolutionAuditLogger()
        index = await fetch_relation_options(
            schema,
            InMemoryRecordSource(datasets),
            audit_logger=logger,
        )

        assert index["blood_test_id"].options == []
        assert index["blood_test_id"].loading is False
        assert "bloodwork" in index["blood_test_id"].error
        assert len(index.options_for("account_id")) == 2

        failed = [e for e in logger.events if e.event_type == ResolutionEventType.OPTIONS_FETCH_FAILED]
        assert len(failed) == 1
        assert failed[0].field_key == "blood_test_id"

    @pytest.mark.asyncio
    async def test_slow_fetch_times_out(self, schema, source):
        """Test a slow dataset is cut off without blocking the others."""
        logger = ResolutionAuditLogger()
        slow = SlowRecordSource(source, "blood_markers", delay=5)

        index = await fetch_relation_options(schema, slow, timeout=0.05, audit_logger=logger)

        assert index["blood_marker_id"].options == []
        assert index["blood_marker_id"].error.startswith("Timed out")
        assert len(index.options_for("account_id")) == 2
        assert any(
            e.event_type == ResolutionEventType.OPTIONS_FETCH_TIMED_OUT for e in logger.events
        )

    @pytest.mark.asyncio
    async def test_malformed_records_degrade_the_field(self, account_field):
        index = await fetch_relation_options([account_field], BrokenRecordSource())
        assert index["account_id"].options == []
        assert index["account_id"].failed is True

    @pytest.mark.asyncio
    async def test_fallback_fields_from_settings(self, monkeypatch, marker_field):
        monkeypatch.setenv("RECORDLINK_FALLBACK_LABEL_FIELDS", "title,name")
        source = InMemoryRecordSource({
            "blood_markers": [{"id": "m1", "name": "Glucose", "title": "GLU"}],
        })
        index = await OptionIndexBuilder(source).build([marker_field])
        assert index.options_for("blood_marker_id")[0].label == "GLU"
