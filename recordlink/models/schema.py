"""
Field Schema Models

A dataset's declarative schema is a list of field descriptors. The resolver
only cares about the relation-related parts: which fields are foreign keys,
which dataset they point into, and which target fields make a readable label.

DESIGN DECISION: Descriptors accept both snake_case and the camelCase keys
used by the tracker's stored JSON schema (isRelation, relatedDataset, ...),
so a schema can be loaded with FieldDescriptor.model_validate(raw) as-is.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FieldType(str, Enum):
    """Value types a field (or a related display field) can have."""
    TEXT = "text"
    DATE = "date"
    BOOLEAN = "boolean"
    NUMBER = "number"
    PERCENTAGE = "percentage"
    SELECT_SINGLE = "select-single"
    SELECT_MULTIPLE = "select-multiple"


class SecondaryLabelStyle(str, Enum):
    """
    How a secondary display field is appended to an option label.

    PARENTHESIZED: "Checking (Bank of X)"
    DASHED:        "2024-01-05 - City Lab"
    """
    PARENTHESIZED = "parenthesized"
    DASHED = "dashed"


class FieldDescriptor(BaseModel):
    """
    Schema metadata for one field of a dataset.

    For relation fields, `key` on a record holds the identifier of a record
    in `related_dataset`. `display_field` (and optionally
    `secondary_display_field`) say how candidates are rendered for humans.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=False,
    )

    key: str = Field(
        ...,
        min_length=1,
        description="Field key on the record"
    )
    type: FieldType = Field(
        default=FieldType.TEXT,
        description="Value type of the field itself"
    )
    display_name: Optional[str] = Field(
        default=None,
        description="Human-readable field name"
    )

    # Relation metadata
    is_relation: bool = Field(
        default=False,
        description="Whether the field is a foreign key into another dataset"
    )
    related_dataset: Optional[str] = Field(
        default=None,
        description="Dataset the relation points into"
    )
    related_field: str = Field(
        default="id",
        description="Identifier field on the related records"
    )
    display_field: Optional[str] = Field(
        default=None,
        description="Related field used as the primary label"
    )
    display_field_type: Optional[FieldType] = Field(
        default=None,
        description="Type of the primary display field"
    )
    secondary_display_field: Optional[str] = Field(
        default=None,
        description="Related field appended to the label"
    )
    secondary_display_field_type: Optional[FieldType] = Field(
        default=None,
        description="Type of the secondary display field"
    )
    secondary_label_style: SecondaryLabelStyle = Field(
        default=SecondaryLabelStyle.PARENTHESIZED,
        description="How the secondary display value is rendered in labels"
    )

    @property
    def resolves_relation(self) -> bool:
        """True when the resolver can build options for this field."""
        return bool(self.is_relation and self.related_dataset)

    @property
    def is_date_display(self) -> bool:
        return self.display_field_type == FieldType.DATE


def relation_fields(fields: list[FieldDescriptor]) -> list[FieldDescriptor]:
    """Descriptors the resolver acts on (relation with a target dataset)."""
    return [field for field in fields if field.resolves_relation]


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class SchemaIssue(BaseModel):
    """A single problem found in a field schema."""

    field: str = Field(
        ...,
        description="Key of the field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing_dataset', 'duplicate_key')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class SchemaValidationResult(BaseModel):
    """Result of validating a field schema."""

    is_valid: bool = Field(
        ...,
        description="True when no error-level issues were found"
    )
    issues: list[SchemaIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]
