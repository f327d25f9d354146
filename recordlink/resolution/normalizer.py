"""
Value Normalizer

Canonicalizes raw text for comparison. Dates get several equally valid
canonical forms because imported data spells the same day many ways
("2024-01-05", "1/5/2024", "Jan 5, 2024").
"""

from datetime import datetime
from typing import Any, Optional

from dateutil import parser as date_parser

# Missing date parts are filled from a fixed default so parsing never
# depends on the day the import runs.
DEFAULT_DATE = datetime(1900, 1, 1)


def normalize(raw: Any) -> str:
    """Lowercase and trim a raw value. None becomes an empty string."""
    if raw is None:
        return ""
    return str(raw).strip().lower()


def parse_date(raw: Any) -> Optional[datetime]:
    """
    Parse a human-written date, month first ("1/5/2024" is January 5th).

    The calendar date is taken as written; timezone offsets are ignored.
    Returns None when the value is not a date.
    """
    text = normalize(raw)
    if not text:
        return None
    try:
        return date_parser.parse(text, default=DEFAULT_DATE, dayfirst=False)
    except (ValueError, OverflowError):
        return None


def date_candidates(raw: Any) -> list[str]:
    """
    Canonical forms of a date value, in matching priority order.

    ["yyyy-mm-dd", "m/d/yyyy", "m-d-yyyy", normalized raw], de-duplicated.
    Empty when `raw` does not parse as a date.
    """
    parsed = parse_date(raw)
    if parsed is None:
        return []

    forms = [
        parsed.strftime("%Y-%m-%d"),
        f"{parsed.month}/{parsed.day}/{parsed.year}",
        f"{parsed.month}-{parsed.day}-{parsed.year}",
        normalize(raw),
    ]
    return list(dict.fromkeys(form.lower() for form in forms))
