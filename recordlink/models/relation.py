"""
Relation Resolution Models

These models carry data between the resolver's stages:
1. Option / OptionIndex - candidate target records, projected for matching
2. Match - which option a raw value resolved to, and how
3. ResolutionDiagnostic / ResolutionResult - the outcome of a batch run

DESIGN DECISION: Unresolved values are returned as data (diagnostics)
rather than only written to a log, so callers can show them to the user
and tests can assert on them.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, SkipValidation

from recordlink.models.record import render_value


class MatchStrategy(str, Enum):
    """Matching strategies, listed in pipeline priority order."""
    PASSTHROUGH = "passthrough"
    DATE_EXACT = "date_exact"
    COMPOUND_LABEL = "compound_label"
    EXACT = "exact"
    PARTIAL = "partial"


class Option(BaseModel):
    """
    A label-bearing projection of one candidate target record.

    `label` is the full human-facing string (possibly "primary (secondary)"),
    `display_value` is the primary display field only.
    """
    id: str = Field(..., description="Identifier of the target record")
    label: str = Field(..., description="Full human-readable label")
    display_value: str = Field(
        default="",
        description="Rendered primary display field"
    )


def is_option_id(value: Any, options: list[Option]) -> bool:
    """
    Whether a raw record value already is the id of one of the options.

    Option ids are rendered strings, so non-string values (e.g. an int id
    from a typed source) are rendered the same way before comparing.
    """
    key = value if isinstance(value, str) else render_value(value)
    return any(option.id == key for option in options)


class OptionIndexEntry(BaseModel):
    """Options for one relation field, plus the outcome of fetching them."""
    options: list[Option] = Field(default_factory=list)
    loading: bool = Field(
        default=True,
        description="False once the fetch has completed (success or failure)"
    )
    error: Optional[str] = Field(
        default=None,
        description="Why the fetch failed, if it did"
    )

    @property
    def failed(self) -> bool:
        return self.error is not None

    def has_id(self, value: Any) -> bool:
        """Whether `value` is already the id of one of the options."""
        return is_option_id(value, self.options)


class OptionIndex(BaseModel):
    """
    Mapping from relation field key to its options.

    Built fresh for every resolution call and consumed read-only.
    """
    entries: dict[str, OptionIndexEntry] = Field(default_factory=dict)

    def __contains__(self, field_key: object) -> bool:
        return field_key in self.entries

    def __getitem__(self, field_key: str) -> OptionIndexEntry:
        return self.entries[field_key]

    def keys(self) -> list[str]:
        return list(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, field_key: str) -> Optional[OptionIndexEntry]:
        return self.entries.get(field_key)

    def options_for(self, field_key: str) -> list[Option]:
        """Options for a field, empty when the field is unknown."""
        entry = self.entries.get(field_key)
        return entry.options if entry else []

    @property
    def failed_fields(self) -> dict[str, str]:
        """Field keys whose fetch failed, mapped to the failure reason."""
        return {
            key: entry.error
            for key, entry in self.entries.items()
            if entry.error is not None
        }


class Match(BaseModel):
    """A successful match of a raw value against an option."""
    option_id: str
    strategy: MatchStrategy
    option_label: str = ""


class ResolutionDiagnostic(BaseModel):
    """A raw value no strategy could resolve. Non-fatal."""
    field_key: str
    raw_value: Any
    record_index: Optional[int] = Field(
        default=None,
        description="Position of the record in the batch"
    )
    related_dataset: Optional[str] = None

    @property
    def message(self) -> str:
        return f'No relation match found for {self.field_key}: "{self.raw_value}"'


class ResolutionResult(BaseModel):
    """Outcome of resolving a batch of records."""
    # Same dict objects the resolver worked on, not validated copies.
    records: SkipValidation[list[dict[str, Any]]] = Field(default_factory=list)
    diagnostics: list[ResolutionDiagnostic] = Field(default_factory=list)
    resolved_count: int = Field(
        default=0,
        ge=0,
        description="Number of field values rewritten to an id"
    )
    option_index: OptionIndex = Field(default_factory=OptionIndex)

    @property
    def has_unresolved(self) -> bool:
        return bool(self.diagnostics)

    def diagnostics_for(self, field_key: str) -> list[ResolutionDiagnostic]:
        return [d for d in self.diagnostics if d.field_key == field_key]


class RelationStats(BaseModel):
    """How the values of one relation field relate to its options."""
    field_key: str
    related_dataset: Optional[str] = None
    total: int = 0
    resolved: int = 0
    unresolved: int = 0
    empty: int = 0
    distinct_values: int = 0

    @property
    def resolution_rate(self) -> float:
        """Share of non-empty values that are valid ids."""
        filled = self.resolved + self.unresolved
        if filled == 0:
            return 1.0
        return self.resolved / filled
