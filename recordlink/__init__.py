"""
recordlink - Relation reference resolution for a personal record tracker

Turns human-typed or imported relation values ("Jan 5, 2024",
"Checking (Bank of X)") into the ids of the records they refer to.

DESIGN PRINCIPLES:
1. Deterministic, explainable matching (fixed strategy order)
2. Partial success over whole-batch failure
3. Unresolved values are kept verbatim and reported, never nulled
4. Storage is a collaborator, never owned
"""

from recordlink.models import (
    FieldDescriptor,
    FieldType,
    Option,
    OptionIndex,
    ResolutionDiagnostic,
    ResolutionResult,
)
from recordlink.queries import summarize_relations
from recordlink.resolution import (
    RelationResolver,
    create_relation_lookup,
    fetch_relation_options,
    resolve_relation_references,
)
from recordlink.validation import validate_field_schema

__version__ = "1.0.0"

__all__ = [
    "FieldDescriptor",
    "FieldType",
    "Option",
    "OptionIndex",
    "RelationResolver",
    "ResolutionDiagnostic",
    "ResolutionResult",
    "create_relation_lookup",
    "fetch_relation_options",
    "resolve_relation_references",
    "summarize_relations",
    "validate_field_schema",
]
