"""
Lookup Factory

Exposes the match pipeline as a synchronous single-value lookup, e.g. to
validate a relation value while the user types. Passthrough is left out:
callers hand in typed text, not candidate ids.
"""

from typing import Callable, Optional

from recordlink.models.record import is_blank
from recordlink.models.relation import OptionIndex
from recordlink.models.schema import FieldDescriptor
from recordlink.resolution.matching import INTERACTIVE_PIPELINE, MatchPipeline

RelationLookup = Callable[[str, str, Optional[FieldDescriptor]], Optional[str]]


def create_relation_lookup(
    option_index: OptionIndex,
    pipeline: MatchPipeline = INTERACTIVE_PIPELINE,
) -> RelationLookup:
    """
    Create a function resolving display values to relation ids.

    The returned callable takes (field_key, display_value, field=None) and
    returns the matched option id, or None.
    """

    def lookup(
        field_key: str,
        display_value: str,
        field: Optional[FieldDescriptor] = None,
    ) -> Optional[str]:
        entry = option_index.get(field_key)
        if entry is None or not entry.options:
            return None
        if is_blank(display_value):
            return None

        match = pipeline.match(display_value, entry.options, field)
        return match.option_id if match else None

    return lookup
