"""
Typed accessors for opaque records.

Records are plain string-keyed dicts supplied by the caller or a record
source. These helpers are the only place that decides what "blank" or
"rendered" means for a raw field value.
"""

from datetime import date, datetime
from typing import Any, Iterable, Optional

Record = dict[str, Any]


def is_blank(value: Any) -> bool:
    """None, empty strings and whitespace-only strings are blank."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def render_value(value: Any) -> str:
    """
    Render a candidate field value the way it is shown to users.

    Dates render as ISO (yyyy-mm-dd) so that date-typed display fields can be
    compared with canonical date forms.
    """
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def text_value(record: Record, key: str) -> Optional[str]:
    """Rendered value of `key`, or None when absent or blank."""
    value = record.get(key)
    if is_blank(value):
        return None
    return render_value(value)


def first_non_empty(record: Record, keys: Iterable[str]) -> Optional[str]:
    """Return the rendered value of the first key holding a non-blank value."""
    for key in keys:
        value = text_value(record, key)
        if value is not None:
            return value
    return None
