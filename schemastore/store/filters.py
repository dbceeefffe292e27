"""
Record filtering.

A filter maps field names to constraints:
- a literal value: the field must deep-equal it
- Contains(value): the field must be a list holding an element equal to value

Fields absent from the filter, or mapped to UNDEFINED, are unconstrained.
The mapping form {"CONTAINS": value} is accepted in place of Contains(value).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..schema.types import CONTAINS_KEY
from .equality import UNDEFINED, equal

Record = Dict[str, Any]
Filter = Mapping[str, Any]


@dataclass(frozen=True)
class Contains:
    """Array containment constraint."""

    value: Any


def as_constraint(value: Any) -> Any:
    """Normalize the {"CONTAINS": value} mapping form to Contains."""
    if isinstance(value, dict) and len(value) == 1 and CONTAINS_KEY in value:
        return Contains(value[CONTAINS_KEY])
    return value


def matches(record: Mapping[str, Any], where: Optional[Filter]) -> bool:
    """Check a record against a filter.

    Args:
        record: Record to check
        where: Filter constraints (None matches everything)

    Returns:
        True if every constraint holds
    """
    if not where:
        return True

    for key, constraint in where.items():
        if constraint is UNDEFINED:
            continue
        constraint = as_constraint(constraint)
        target = record.get(key, UNDEFINED)

        if isinstance(constraint, Contains):
            if not isinstance(target, (list, tuple)):
                return False
            if not any(equal(element, constraint.value) for element in target):
                return False
        elif not equal(target, constraint):
            return False

    return True


def filter_collection(records: Iterable[Record], where: Optional[Filter]) -> List[Record]:
    """Matching records, in their original order."""
    return [record for record in records if matches(record, where)]
