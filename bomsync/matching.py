"""
Predicates shared by the rule engines (ignore, replace and master rules).

Rules address a row field by name and compare it case-insensitively with a
pattern. Fields resolve through DatasetAccessor, so they work on any
classified dataset regardless of column layout.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .accessor import DatasetAccessor


class MatchType(str, Enum):
    """How a rule pattern is compared with a field value."""
    EQUALS = "equals"
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    WILDCARD = "wildcard"


def _coerce_match_type(match_type: Union[MatchType, str, None]) -> Optional[MatchType]:
    if isinstance(match_type, MatchType):
        return match_type
    if not isinstance(match_type, str):
        return None
    try:
        return MatchType(match_type.strip().lower())
    except ValueError:
        return None


def wildcard_match(target: str, pattern: str) -> bool:
    """Match ``target`` against a pattern where ``*`` stands for any run of characters.

    No other character is special.
    """
    regex = ".*".join(re.escape(part) for part in pattern.split("*"))
    return re.fullmatch(regex, target, flags=re.DOTALL) is not None


def value_matches(
    target: str,
    pattern: str,
    match_type: Union[MatchType, str, None] = None,
) -> bool:
    """
    Compare a field value with a rule pattern, ignoring case.

    Args:
        target: Field value from the row
        pattern: Rule pattern
        match_type: MatchType or its string value. Missing or unknown types
            fall back to wildcard when the pattern contains ``*``, else equals.

    Returns:
        True if the value matches
    """
    target_lower = target.lower()
    pattern_lower = pattern.lower()
    kind = _coerce_match_type(match_type)

    if kind is None:
        kind = MatchType.WILDCARD if "*" in pattern else MatchType.EQUALS

    if kind == MatchType.EQUALS:
        return target_lower == pattern_lower
    if kind == MatchType.CONTAINS:
        return pattern_lower in target_lower
    if kind == MatchType.STARTS_WITH:
        return target_lower.startswith(pattern_lower)
    if kind == MatchType.ENDS_WITH:
        return target_lower.endswith(pattern_lower)
    return wildcard_match(target_lower, pattern_lower)


@dataclass
class MatchCondition:
    """A single rule condition: ``field`` compared with ``value``."""
    field: str
    match_type: Union[MatchType, str, None]
    value: str


_REF_FIELDS = {"ref", "reference"}
_PART_NO_FIELDS = {"part_no", "partno", "partnumber", "部品型番"}


def field_value(accessor: DatasetAccessor, row_index: int, field_name: str) -> Optional[str]:
    """
    Resolve a rule field name to the row's value.

    Canonical field names go through the role map; anything else is looked
    up as a header name (case-insensitive).

    Returns:
        Trimmed value, or None when the field names no role and no column
    """
    name = field_name.strip().lower()
    if name in _REF_FIELDS:
        return accessor.ref(row_index)
    if name in _PART_NO_FIELDS:
        return accessor.part_no(row_index)
    if name == "manufacturer":
        return accessor.manufacturer(row_index)
    if name == "value":
        return accessor.value(row_index)

    column_index = accessor.find_column(name)
    if column_index is None:
        return None
    row = accessor.dataset.rows[row_index]
    return row[column_index].strip() if column_index < len(row) else ""


def condition_matches(accessor: DatasetAccessor, row_index: int, condition: MatchCondition) -> bool:
    """Evaluate one condition against a row; an unknown field never matches."""
    target = field_value(accessor, row_index, condition.field)
    if target is None:
        return False
    return value_matches(target, condition.value, condition.match_type)
