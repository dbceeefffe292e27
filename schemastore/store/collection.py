"""
Collection storage for schemastore.

One Collection holds every record of one store, of every kind, in
insertion order. All accessors of a store share the same Collection
instance by reference.

Invariants:
    - Insertion order is preserved
    - At most one record per composite identity (enforced by insert)
    - Records are mutated in place by update; removal keeps relative order
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from ..schema.types import ENTITY_TYPE_FIELD

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


def composite_key(row: Mapping[str, Any]) -> str:
    """Serialize the (schema, table, name, entityType) identity of a record.

    Null schema or table become empty segments.

    Example:
        >>> composite_key({"schema": None, "table": "user", "name": "id", "entityType": "column"})
        ':user:id:column'
    """
    schema = row.get("schema")
    table = row.get("table")
    return (
        f"{'' if schema is None else schema}:"
        f"{'' if table is None else table}:"
        f"{row.get('name')}:{row.get(ENTITY_TYPE_FIELD)}"
    )


class Collection:
    """Ordered list of mixed-kind records owned by one store.

    Example:
        >>> collection = Collection()
        >>> collection.append({"schema": None, "table": None, "name": "user", "entityType": "table"})
        >>> len(collection)
        1
    """

    def __init__(self) -> None:
        self._records: List[Record] = []

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def append(self, record: Record) -> None:
        """Append a record at the end of the collection."""
        self._records.append(record)

    def find_by_key(self, key: str) -> Optional[Record]:
        """First record whose composite identity equals key."""
        for record in self._records:
            if composite_key(record) == key:
                return record
        return None

    def remove_where(self, predicate: Callable[[Record], bool]) -> List[Record]:
        """Remove and return records satisfying predicate, keeping both orders."""
        kept: List[Record] = []
        removed: List[Record] = []
        for record in self._records:
            (removed if predicate(record) else kept).append(record)
        self._records[:] = kept
        return removed

    def clear(self) -> List[Record]:
        """Remove and return every record."""
        removed = self._records[:]
        self._records.clear()
        logger.debug(f"Cleared collection ({len(removed)} records)")
        return removed
