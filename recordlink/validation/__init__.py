"""Field schema validation package."""

from recordlink.validation.validator import (
    FieldSchemaValidator,
    SchemaValidationError,
    ensure_valid_schema,
    validate_field_schema,
)

__all__ = [
    "FieldSchemaValidator",
    "SchemaValidationError",
    "ensure_valid_schema",
    "validate_field_schema",
]
