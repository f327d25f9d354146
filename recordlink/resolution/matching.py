"""
Match Pipeline

DESIGN DECISION: Strategies run in a fixed order and the first hit wins.
Structural matches (dates, "primary (secondary)" labels) run before the
generic substring match, so a partial overlap with some other option can
never shadow a precise match.

Order:
1. PASSTHROUGH     - value already is an option id
2. DATE_EXACT      - any canonical date form equals an option's display value
3. COMPOUND_LABEL  - "primary (secondary)" matches a compound label
4. EXACT           - equals display value or label
5. PARTIAL         - containment either way

All comparisons are case-insensitive and whitespace-trimmed.
"""

from typing import Callable, Optional, Sequence

from recordlink.models.relation import Match, MatchStrategy, Option
from recordlink.models.schema import FieldDescriptor
from recordlink.resolution.normalizer import date_candidates, normalize

StrategyFn = Callable[[str, list[Option], Optional[FieldDescriptor]], Optional[Option]]


def match_passthrough(
    raw_value: str,
    options: list[Option],
    field: Optional[FieldDescriptor] = None,
) -> Optional[Option]:
    for option in options:
        if option.id == raw_value:
            return option
    return None


def match_date(
    raw_value: str,
    options: list[Option],
    field: Optional[FieldDescriptor] = None,
) -> Optional[Option]:
    """
    Only for date-typed display fields. Canonical forms are tried in order;
    each form is compared against every option before the next form.
    """
    if field is None or not field.is_date_display:
        return None

    for form in date_candidates(raw_value):
        for option in options:
            if normalize(option.display_value) == form:
                return option
    return None


def split_compound(value: str) -> Optional[tuple[str, str]]:
    """
    Split "primary (secondary)" at the last "(".

    Returns None unless the "(" is not the first character and the value
    ends with ")".
    """
    text = normalize(value)
    open_paren = text.rfind("(")
    if open_paren <= 0 or not text.endswith(")"):
        return None
    primary = text[:open_paren].strip()
    secondary = text[open_paren + 1:-1].strip()
    return primary, secondary


def match_compound_label(
    raw_value: str,
    options: list[Option],
    field: Optional[FieldDescriptor] = None,
) -> Optional[Option]:
    parts = split_compound(raw_value)
    if parts is None:
        return None
    primary, secondary = parts

    for option in options:
        label = normalize(option.label)
        if (
            primary in label
            and secondary in label
            and (f"({secondary})" in label or f"- {secondary}" in label)
        ):
            return option
    return None


def match_exact(
    raw_value: str,
    options: list[Option],
    field: Optional[FieldDescriptor] = None,
) -> Optional[Option]:
    value = normalize(raw_value)
    for option in options:
        if normalize(option.display_value) == value or normalize(option.label) == value:
            return option
    return None


def _contains_either_way(value: str, candidate: str) -> bool:
    # An empty candidate would be contained in every value.
    if not candidate:
        return False
    return candidate in value or value in candidate


def match_partial(
    raw_value: str,
    options: list[Option],
    field: Optional[FieldDescriptor] = None,
) -> Optional[Option]:
    value = normalize(raw_value)
    if not value:
        return None
    for option in options:
        if (
            _contains_either_way(value, normalize(option.display_value))
            or _contains_either_way(value, normalize(option.label))
        ):
            return option
    return None


STRATEGIES: dict[MatchStrategy, StrategyFn] = {
    MatchStrategy.PASSTHROUGH: match_passthrough,
    MatchStrategy.DATE_EXACT: match_date,
    MatchStrategy.COMPOUND_LABEL: match_compound_label,
    MatchStrategy.EXACT: match_exact,
    MatchStrategy.PARTIAL: match_partial,
}


class MatchPipeline:
    """
    Ordered matching strategies; the first strategy to find an option wins.

    The batch resolver and the interactive lookup use pipelines built from
    the same strategy functions, so they agree on every input.
    """

    def __init__(self, strategies: Sequence[MatchStrategy]):
        unknown = [s for s in strategies if s not in STRATEGIES]
        if unknown:
            raise ValueError(f"Unknown match strategies: {unknown}")
        self._strategies = tuple(strategies)

    @property
    def strategies(self) -> tuple[MatchStrategy, ...]:
        return self._strategies

    def match(
        self,
        raw_value: str,
        options: list[Option],
        field: Optional[FieldDescriptor] = None,
    ) -> Optional[Match]:
        """Run the strategies in order; None when nothing matched."""
        if not options or not normalize(raw_value):
            return None

        for strategy in self._strategies:
            option = STRATEGIES[strategy](raw_value, options, field)
            if option is not None:
                return Match(
                    option_id=option.id,
                    strategy=strategy,
                    option_label=option.label,
                )
        return None


BATCH_PIPELINE = MatchPipeline([
    MatchStrategy.PASSTHROUGH,
    MatchStrategy.DATE_EXACT,
    MatchStrategy.COMPOUND_LABEL,
    MatchStrategy.EXACT,
    MatchStrategy.PARTIAL,
])

# Interactive callers pass typed text, never a candidate id.
INTERACTIVE_PIPELINE = MatchPipeline([
    MatchStrategy.DATE_EXACT,
    MatchStrategy.COMPOUND_LABEL,
    MatchStrategy.EXACT,
    MatchStrategy.PARTIAL,
])
