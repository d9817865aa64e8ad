"""Coercion of loosely-typed clause values into comparable shapes.

Extracted values and rule thresholds arrive as arbitrary JSON. Before any
MIN_VALUE / MAX_VALUE / ALLOWED_VALUES comparison they are coerced into one
of three shapes, so the evaluator never type-checks raw values itself.
"""

from dataclasses import dataclass
from typing import Any, FrozenSet, Mapping, Optional, Union

from compliance_engine.utils.number_parsing import parse_contract_number

# Object fields checked, in order, when a value is a mapping
NUMERIC_FIELDS = (
    "value",
    "amount",
    "paymentDays",
    "noticeDays",
    "payment_days",
    "notice_days",
)

STRING_FIELDS = ("value", "name", "jurisdiction", "law", "country", "text")


@dataclass(frozen=True)
class NumericComparable:
    """A value that compares as a number."""

    number: float


@dataclass(frozen=True)
class StringSetComparable:
    """A set of case-folded strings compared by membership."""

    values: FrozenSet[str]


@dataclass(frozen=True)
class Unparseable:
    """A value that could not be coerced; the caller reports UNCLEAR."""

    raw: Any
    reason: str


Comparable = Union[NumericComparable, StringSetComparable, Unparseable]


def coerce_number(value: Any) -> Comparable:
    """Coerce a value to a NumericComparable.

    Tries a direct number, then a numeric string (locale separators, currency
    and unit suffixes tolerated), then the common object fields listed in
    ``NUMERIC_FIELDS``. Booleans are never numbers.
    """
    number = _to_number(value)
    if number is not None:
        return NumericComparable(number)

    if isinstance(value, Mapping):
        for field_name in NUMERIC_FIELDS:
            if field_name in value:
                number = _to_number(value[field_name])
                if number is not None:
                    return NumericComparable(number)
        return Unparseable(value, "no numeric field")

    return Unparseable(value, "not a number")


def coerce_string(value: Any) -> Optional[str]:
    """Reduce a found value to one case-folded string, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        return text.casefold() if text else None
    if isinstance(value, float) and value.is_integer():
        # 30.0 matches an allowed "30"
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value).casefold()
    if isinstance(value, Mapping):
        for field_name in STRING_FIELDS:
            candidate = value.get(field_name)
            if isinstance(candidate, str) and candidate.strip():
                return candidate.strip().casefold()
    return None


def coerce_allowed_values(expected: Any) -> Comparable:
    """Coerce a rule's expected value into the set of allowed strings.

    A single string counts as a one-element set. An empty or absent set is a
    valid StringSetComparable with no members; callers treat it as "anything
    goes".
    """
    if expected is None:
        return StringSetComparable(frozenset())
    if isinstance(expected, str):
        expected = [expected]
    if not isinstance(expected, (list, tuple, set, frozenset)):
        return Unparseable(expected, "expected value is not a list")

    values = set()
    for item in expected:
        text = coerce_string(item)
        if text is not None:
            values.add(text)
    return StringSetComparable(frozenset(values))


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, (int, float, str)) and not isinstance(value, bool):
        return parse_contract_number(value)
    return None
