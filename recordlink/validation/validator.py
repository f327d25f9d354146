"""
Field Schema Validation

DESIGN DECISION: Schema mistakes are programming errors, not data errors.
They are caught here, before any resolution runs, instead of inside the
resolver (which only skips fields it cannot act on).

ERRORS (schema unusable):
- Relation field without a related dataset
- Duplicate field keys
- Secondary display field without a primary display field

WARNINGS (schema usable, probably not what was meant):
- Related dataset set on a field that is not marked as a relation
- Date display type without a display field

IMPORTANT: Validation never fixes a schema. It reports.
"""

from recordlink.models.schema import (
    FieldDescriptor,
    FieldType,
    SchemaIssue,
    SchemaValidationResult,
)


class SchemaValidationError(ValueError):
    """Raised when a field schema has error-level issues."""

    def __init__(self, result: SchemaValidationResult):
        self.result = result
        messages = "; ".join(
            issue.message for issue in result.issues if issue.severity == "error"
        )
        super().__init__(f"Invalid field schema: {messages}")


class FieldSchemaValidator:
    """Checks a list of field descriptors for relation misconfiguration."""

    def _validate_field(self, field: FieldDescriptor) -> list[SchemaIssue]:
        issues = []

        if field.is_relation and not field.related_dataset:
            issues.append(SchemaIssue(
                field=field.key,
                issue_type="missing_dataset",
                message=f"Relation field '{field.key}' has no related dataset",
                severity="error",
            ))

        if field.related_dataset and not field.is_relation:
            issues.append(SchemaIssue(
                field=field.key,
                issue_type="not_a_relation",
                message=(
                    f"Field '{field.key}' names related dataset "
                    f"'{field.related_dataset}' but is not marked as a relation"
                ),
                severity="warning",
            ))

        if field.secondary_display_field and not field.display_field:
            issues.append(SchemaIssue(
                field=field.key,
                issue_type="secondary_without_primary",
                message=(
                    f"Field '{field.key}' has a secondary display field "
                    "but no display field"
                ),
                severity="error",
            ))

        if field.display_field_type == FieldType.DATE and not field.display_field:
            issues.append(SchemaIssue(
                field=field.key,
                issue_type="date_type_without_field",
                message=f"Field '{field.key}' has a date display type but no display field",
                severity="warning",
            ))

        return issues

    def validate(self, fields: list[FieldDescriptor]) -> SchemaValidationResult:
        """Validate every descriptor and the schema as a whole."""
        issues = []
        seen: set[str] = set()

        for field in fields:
            if field.key in seen:
                issues.append(SchemaIssue(
                    field=field.key,
                    issue_type="duplicate_key",
                    message=f"Field key '{field.key}' is defined more than once",
                    severity="error",
                ))
            seen.add(field.key)
            issues.extend(self._validate_field(field))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return SchemaValidationResult(is_valid=is_valid, issues=issues)


def validate_field_schema(fields: list[FieldDescriptor]) -> SchemaValidationResult:
    return FieldSchemaValidator().validate(fields)


def ensure_valid_schema(fields: list[FieldDescriptor]) -> list[FieldDescriptor]:
    """Return the fields unchanged, or raise SchemaValidationError."""
    result = validate_field_schema(fields)
    if not result.is_valid:
        raise SchemaValidationError(result)
    return fields
