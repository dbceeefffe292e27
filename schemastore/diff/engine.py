"""
Snapshot diffing for schemastore.

This module compares the records of two independently populated stores
and reports which rows were created, dropped or altered. Rows are matched
by composite identity (schema, table, name, entityType); matched rows are
compared field by field with deep equality.

Two output forms are produced:
- statements (diff): {"$diffType": "create"|"drop"|"alter", "entityType",
  "schema", "table", "name", ...fields}; alter carries only changed fields,
  each as {"from": ..., "to": ...}
- row diffs (diff_rows): RowDiff(type="insert"|"delete"|"update", ...)
  with the full row for insert/delete and a changes map for update

Invariants:
    - Neither store is mutated
    - Output order is creates, then drops, then alters
    - Within each group, rows keep their list() order
    - Common fields (schema, table, name) and entityType are never "changed"

Example:
    >>> statements = diff(old_db, new_db, "column")
    >>> [s["$diffType"] for s in statements]
    ['create', 'alter']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from ..schema.registry import ENTITIES_KIND
from ..schema.types import COMMON_FIELDS, ENTITY_TYPE_FIELD
from ..store.collection import composite_key
from ..store.database import SchemaStore
from ..store.equality import UNDEFINED, equal

logger = logging.getLogger(__name__)

IGNORED_FIELDS = frozenset(COMMON_FIELDS) | {ENTITY_TYPE_FIELD}

Record = Dict[str, Any]


class DiffMode(Enum):
    """Which diff phases run."""

    ALL = "all"
    CREATE = "create"
    DROP = "drop"
    ALTER = "alter"
    CREATE_DROP = "createdrop"

    @property
    def creates(self) -> bool:
        return self in (DiffMode.ALL, DiffMode.CREATE, DiffMode.CREATE_DROP)

    @property
    def drops(self) -> bool:
        return self in (DiffMode.ALL, DiffMode.DROP, DiffMode.CREATE_DROP)

    @property
    def alters(self) -> bool:
        return self in (DiffMode.ALL, DiffMode.ALTER)


class DiffType(Enum):
    """Kind of row difference."""

    INSERT = "insert"
    DELETE = "delete"
    UPDATE = "update"

    @property
    def statement(self) -> str:
        """Statement-form name of this difference."""
        return {
            DiffType.INSERT: "create",
            DiffType.DELETE: "drop",
            DiffType.UPDATE: "alter",
        }[self]


@dataclass
class RowDiff:
    """A single row difference between two snapshots.

    Attributes:
        type: insert, delete or update
        entity_type: Kind of the row
        schema: Row schema (may be None)
        table: Row table (may be None)
        name: Row name
        row: Non-common fields of the row (insert and delete)
        changes: Field name to {"from", "to"} (update)
    """

    type: DiffType
    entity_type: str
    schema: Optional[str]
    table: Optional[str]
    name: str
    row: Optional[Record] = None
    changes: Optional[Dict[str, Dict[str, Any]]] = None

    @property
    def key(self) -> str:
        """Composite identity of the row."""
        return composite_key(self._header())

    def _header(self) -> Record:
        return {
            ENTITY_TYPE_FIELD: self.entity_type,
            "schema": self.schema,
            "table": self.table,
            "name": self.name,
        }

    def to_dict(self) -> Record:
        """Convert to the field-diff dictionary form."""
        result: Record = {"type": self.type.value, **self._header()}
        if self.row is not None:
            result["row"] = self.row
        if self.changes is not None:
            result["changes"] = self.changes
        return result

    def to_statement(self) -> Record:
        """Convert to the statement dictionary form."""
        result: Record = {"$diffType": self.type.statement, **self._header()}
        result.update(self.changes if self.type == DiffType.UPDATE else (self.row or {}))
        return result

    def __str__(self) -> str:
        return f"[{self.type.value.upper()}] {self.key}"


def sanitize_row(row: Record) -> Record:
    """Drop the common fields and entityType from a row."""
    return {k: v for k, v in row.items() if k not in IGNORED_FIELDS}


def _field_changes(old_row: Record, new_row: Record) -> Dict[str, Dict[str, Any]]:
    changes: Dict[str, Dict[str, Any]] = {}
    for field_name in dict.fromkeys([*old_row, *new_row]):
        if field_name in IGNORED_FIELDS:
            continue
        old_value = old_row.get(field_name, UNDEFINED)
        new_value = new_row.get(field_name, UNDEFINED)
        if not equal(old_value, new_value):
            changes[field_name] = {
                "from": None if old_value is UNDEFINED else old_value,
                "to": None if new_value is UNDEFINED else new_value,
            }
    return changes


def _row_diff(diff_type: DiffType, source: Record, **extra: Any) -> RowDiff:
    return RowDiff(
        type=diff_type,
        entity_type=source[ENTITY_TYPE_FIELD],
        schema=source.get("schema"),
        table=source.get("table"),
        name=source.get("name"),
        **extra,
    )


def _snapshot(db: SchemaStore, kind: Optional[str]) -> List[Record]:
    if kind is None or kind == ENTITIES_KIND:
        return db.entities.list()
    return db.entities.list({ENTITY_TYPE_FIELD: kind})


def _resolve_mode(mode: Union[DiffMode, str, None], db: SchemaStore) -> DiffMode:
    if mode is None:
        return DiffMode(db.settings.default_diff_mode)
    return mode if isinstance(mode, DiffMode) else DiffMode(mode)


def diff_rows(
    old_db: SchemaStore,
    new_db: SchemaStore,
    kind: Optional[str] = None,
    mode: Union[DiffMode, str, None] = None,
) -> List[RowDiff]:
    """Compute row differences between two stores.

    Args:
        old_db: Baseline snapshot
        new_db: Target snapshot
        kind: Entity kind to compare; None or "entities" compares every kind
        mode: Phases to run (defaults to the old store's default_diff_mode)

    Returns:
        Inserts, then deletes, then updates
    """
    mode = _resolve_mode(mode, old_db)
    if old_db.registry.fingerprint != new_db.registry.fingerprint:
        logger.warning(
            f"Diffing stores with different schemas: "
            f"{old_db.registry.fingerprint} vs {new_db.registry.fingerprint}"
        )

    left: Dict[str, Record] = {composite_key(row): row for row in _snapshot(old_db, kind)}
    right: Dict[str, Record] = {composite_key(row): row for row in _snapshot(new_db, kind)}

    inserted: List[RowDiff] = []
    deleted: List[RowDiff] = []
    updated: List[RowDiff] = []

    for key, old_row in left.items():
        new_row = right.pop(key, None)
        if new_row is None:
            if mode.drops:
                deleted.append(_row_diff(DiffType.DELETE, old_row, row=sanitize_row(old_row)))
        elif mode.alters:
            changes = _field_changes(old_row, new_row)
            if changes:
                updated.append(_row_diff(DiffType.UPDATE, new_row, changes=changes))

    if mode.creates:
        for new_row in right.values():
            inserted.append(_row_diff(DiffType.INSERT, new_row, row=sanitize_row(new_row)))

    logger.debug(
        f"Diff of {kind or ENTITIES_KIND} ({mode.value}): {len(inserted)} inserted, "
        f"{len(deleted)} deleted, {len(updated)} updated"
    )
    return [*inserted, *deleted, *updated]


def diff(
    old_db: SchemaStore,
    new_db: SchemaStore,
    kind: Optional[str] = None,
    mode: Union[DiffMode, str, None] = None,
) -> List[Record]:
    """Compute diff statements between two stores.

    Same arguments as diff_rows(); returns statement dictionaries.
    """
    return [row_diff.to_statement() for row_diff in diff_rows(old_db, new_db, kind, mode)]


def diff_all(old_db: SchemaStore, new_db: SchemaStore, kind: Optional[str] = None) -> List[Record]:
    """Creates, drops and alters."""
    return diff(old_db, new_db, kind, DiffMode.ALL)


def diff_creates(old_db: SchemaStore, new_db: SchemaStore, kind: Optional[str] = None) -> List[Record]:
    """Creates only."""
    return diff(old_db, new_db, kind, DiffMode.CREATE)


def diff_drops(old_db: SchemaStore, new_db: SchemaStore, kind: Optional[str] = None) -> List[Record]:
    """Drops only."""
    return diff(old_db, new_db, kind, DiffMode.DROP)


def diff_alters(old_db: SchemaStore, new_db: SchemaStore, kind: Optional[str] = None) -> List[Record]:
    """Alters only."""
    return diff(old_db, new_db, kind, DiffMode.ALTER)


def diff_create_drop(
    old_db: SchemaStore, new_db: SchemaStore, kind: Optional[str] = None
) -> List[Record]:
    """Creates and drops, without alters."""
    return diff(old_db, new_db, kind, DiffMode.CREATE_DROP)
