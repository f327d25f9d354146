"""Shared fixtures: a small tracker with accounts, blood tests and markers."""

import pytest

from recordlink.config import get_settings
from recordlink.models import FieldDescriptor, FieldType
from recordlink.models.schema import SecondaryLabelStyle
from recordlink.services.storage import InMemoryRecordSource


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Settings are cached; make every test start from the defaults."""
    for name in (
        "RECORDLINK_FETCH_TIMEOUT_SECONDS",
        "RECORDLINK_FALLBACK_LABEL_FIELDS",
        "RECORDLINK_COPY_RECORDS",
        "RECORDLINK_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def account_field():
    return FieldDescriptor(
        key="account_id",
        is_relation=True,
        related_dataset="accounts",
        display_field="account_name",
        secondary_display_field="account_type",
    )


@pytest.fixture
def bloodwork_field():
    return FieldDescriptor(
        key="blood_test_id",
        is_relation=True,
        related_dataset="bloodwork",
        display_field="date",
        display_field_type=FieldType.DATE,
        secondary_display_field="lab_name",
        secondary_label_style=SecondaryLabelStyle.DASHED,
    )


@pytest.fixture
def marker_field():
    return FieldDescriptor(
        key="blood_marker_id",
        is_relation=True,
        related_dataset="blood_markers",
    )


@pytest.fixture
def value_field():
    return FieldDescriptor(key="value", type=FieldType.NUMBER)


@pytest.fixture
def schema(account_field, bloodwork_field, marker_field, value_field):
    return [account_field, bloodwork_field, marker_field, value_field]


@pytest.fixture
def datasets():
    return {
        "accounts": [
            {"id": "a1", "account_name": "Checking", "account_type": "Bank of X"},
            {"id": "a2", "account_name": "Brokerage", "account_type": "Fund Co"},
        ],
        "bloodwork": [
            {"id": "b1", "date": "2024-01-05", "lab_name": "City Lab"},
            {"id": "b2", "date": "2024-03-10", "lab_name": ""},
        ],
        "blood_markers": [
            {"id": "m1", "name": "Glucose", "unit": "mg/dL"},
            {"id": "m2", "title": "Ferritin"},
            {"id": "m3"},
        ],
    }


@pytest.fixture
def source(datasets):
    return InMemoryRecordSource(datasets)
