"""
Option projection.

Turns a candidate target record into an Option using the relation
field's display settings, falling back to generic name-like fields.
"""

from typing import Any, Optional, Sequence

from recordlink.models.record import first_non_empty, render_value, text_value
from recordlink.models.relation import Option
from recordlink.models.schema import FieldDescriptor, SecondaryLabelStyle

DEFAULT_FALLBACK_FIELDS: tuple[str, ...] = ("name", "title")


def format_label(
    primary: str,
    secondary: Optional[str],
    style: SecondaryLabelStyle = SecondaryLabelStyle.PARENTHESIZED,
) -> str:
    """Join a primary and optional secondary display value into a label."""
    if not secondary:
        return primary
    if style == SecondaryLabelStyle.DASHED:
        return f"{primary} - {secondary}"
    return f"{primary} ({secondary})"


def candidate_id(candidate: dict[str, Any], field: FieldDescriptor) -> str:
    """Identifier of a candidate, read from the descriptor's related field."""
    value = candidate.get(field.related_field)
    if value is None:
        value = candidate.get("id")
    return render_value(value)


def build_option(
    candidate: dict[str, Any],
    field: FieldDescriptor,
    fallback_fields: Sequence[str] = DEFAULT_FALLBACK_FIELDS,
) -> Option:
    """
    Project one candidate record into an Option.

    With a usable display field the label is the display value, plus the
    secondary display value when present. Otherwise the first non-empty
    fallback field is used for both, and the label finally falls back to
    "ID: <id>".
    """
    option_id = candidate_id(candidate, field)

    display_value = text_value(candidate, field.display_field) if field.display_field else None
    if display_value is not None:
        secondary = None
        if field.secondary_display_field:
            secondary = text_value(candidate, field.secondary_display_field)
        label = format_label(display_value, secondary, field.secondary_label_style)
        return Option(id=option_id, label=label, display_value=display_value)

    fallback = first_non_empty(candidate, fallback_fields)
    if fallback is not None:
        return Option(id=option_id, label=fallback, display_value=fallback)
    return Option(id=option_id, label=f"ID: {option_id}", display_value="")


def build_options(
    candidates: list[dict[str, Any]],
    field: FieldDescriptor,
    fallback_fields: Sequence[str] = DEFAULT_FALLBACK_FIELDS,
) -> list[Option]:
    return [build_option(candidate, field, fallback_fields) for candidate in candidates]
