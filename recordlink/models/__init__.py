"""
Data Models Package

Pydantic models for field schemas, relation options, resolution results
and resolution events.
"""

from recordlink.models.schema import (
    FieldDescriptor,
    FieldType,
    SchemaIssue,
    SchemaValidationResult,
    SecondaryLabelStyle,
    relation_fields,
)
from recordlink.models.relation import (
    Match,
    MatchStrategy,
    Option,
    OptionIndex,
    OptionIndexEntry,
    RelationStats,
    ResolutionDiagnostic,
    ResolutionResult,
    is_option_id,
)
from recordlink.models.record import (
    Record,
    first_non_empty,
    is_blank,
    render_value,
    text_value,
)
from recordlink.models.audit import (
    EventSeverity,
    ResolutionEvent,
    ResolutionEventBuilder,
    ResolutionEventType,
)

__all__ = [
    # Schema models
    "FieldDescriptor",
    "FieldType",
    "SchemaIssue",
    "SchemaValidationResult",
    "SecondaryLabelStyle",
    "relation_fields",
    # Relation models
    "Match",
    "MatchStrategy",
    "Option",
    "OptionIndex",
    "OptionIndexEntry",
    "RelationStats",
    "ResolutionDiagnostic",
    "ResolutionResult",
    "is_option_id",
    # Record helpers
    "Record",
    "first_non_empty",
    "is_blank",
    "render_value",
    "text_value",
    # Event models
    "EventSeverity",
    "ResolutionEvent",
    "ResolutionEventBuilder",
    "ResolutionEventType",
]
