"""
Relation Statistics

Summarizes how well a dataset's relation fields are linked: how many
values are valid ids, how many are blank and how many point nowhere.
Useful after an import to see which columns still need attention.

Counting is DETERMINISTIC and read-only; nothing is resolved here.
"""

from typing import Any

from recordlink.models.record import is_blank
from recordlink.models.relation import OptionIndex, RelationStats, is_option_id
from recordlink.models.schema import FieldDescriptor, relation_fields


def field_stats(
    records: list[dict[str, Any]],
    field: FieldDescriptor,
    option_index: OptionIndex,
) -> RelationStats:
    """Count resolved, unresolved and empty values of one relation field."""
    options = option_index.options_for(field.key)
    stats = RelationStats(
        field_key=field.key,
        related_dataset=field.related_dataset,
        total=len(records),
    )
    values = set()

    for record in records:
        value = record.get(field.key)
        if is_blank(value):
            stats.empty += 1
            continue
        values.add(str(value))
        if is_option_id(value, options):
            stats.resolved += 1
        else:
            stats.unresolved += 1

    stats.distinct_values = len(values)
    return stats


def summarize_relations(
    records: list[dict[str, Any]],
    fields: list[FieldDescriptor],
    option_index: OptionIndex,
) -> dict[str, RelationStats]:
    """Relation statistics for every resolvable relation field."""
    return {
        field.key: field_stats(records, field, option_index)
        for field in relation_fields(fields)
    }
