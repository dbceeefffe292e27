"""
Per-kind CRUD accessors.

Each declared entity kind gets one KindAccessor with insert, list, update
and delete bound to the store's shared Collection and restricted to records
of that kind. The EntitiesAccessor exposes the same operations over every
kind at once; its insert dispatches on the entityType of each input.

Update entries are UpdateOps:
- Set(value): overwrite the field
- Map(fn): apply fn to each element of a list value, or to a dict value
  as a whole; any other current value (including None) is left unchanged

Plain values in an update mapping mean Set, plain callables mean Map.

Invariants:
    - Insert never mutates the collection on conflict
    - list() never mutates
    - update() mutates records in place and returns them in collection order
    - update() never leaves two records with the same composite identity
    - delete() preserves the relative order of both kept and removed records
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from ..errors import SchemaStoreError, UnknownKindError
from ..schema.registry import SchemaRegistry
from ..schema.types import COMMON_FIELDS, ENTITY_TYPE_FIELD, KindDef
from ..validate import validate_or_raise
from .collection import Collection, composite_key
from .equality import UNDEFINED
from .filters import Filter, filter_collection, matches

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


@dataclass(frozen=True)
class Set:
    """Overwrite a field with a literal value."""

    value: Any


@dataclass(frozen=True)
class Map:
    """Transform a field's list elements, or its nested object as a whole."""

    fn: Callable[[Any], Any]


UpdateOp = Union[Set, Map]


def to_update_op(value: Any) -> UpdateOp:
    """Normalize an update mapping entry to an UpdateOp."""
    if isinstance(value, (Set, Map)):
        return value
    if callable(value):
        return Map(value)
    return Set(value)


def apply_update_op(current: Any, op: UpdateOp) -> Any:
    """Compute a field's new value from its current value."""
    if isinstance(op, Set):
        return copy.deepcopy(op.value)
    if isinstance(current, list):
        return [op.fn(element) for element in current]
    if isinstance(current, dict):
        return op.fn(current)
    return current


class InsertStatus(Enum):
    """Outcome of inserting one record."""

    OK = "OK"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class InsertResult:
    """Result of inserting one record.

    Attributes:
        status: OK if the record was appended, CONFLICT otherwise
        data: The inserted record, or the existing record holding the identity
    """

    status: InsertStatus
    data: Record

    @property
    def ok(self) -> bool:
        return self.status == InsertStatus.OK


class _ScopedAccessor:
    """list/update/delete over the records of one kind, or of all kinds."""

    def __init__(self, collection: Collection, scope: Optional[str]) -> None:
        self._collection = collection
        self._scope = scope

    def _scoped(self, where: Optional[Filter]) -> Optional[Dict[str, Any]]:
        if self._scope is None:
            return dict(where) if where else None
        return {**(where or {}), ENTITY_TYPE_FIELD: self._scope}

    def list(self, where: Optional[Filter] = None) -> List[Record]:
        """Records in scope matching where, in collection order."""
        return filter_collection(self._collection, self._scoped(where))

    def update(
        self,
        set: Optional[Mapping[str, Any]] = None,
        where: Optional[Filter] = None,
        *,
        value: Optional[Mapping[str, Any]] = None,
    ) -> List[Record]:
        """Apply an update mapping to every record in scope matching where.

        Args:
            set: Field name to new value, Set/Map op or transform callable
            where: Optional filter narrowing the targets
            value: Alias for set

        Returns:
            Updated records, post-mutation, in collection order

        Raises:
            SchemaStoreError: If both set and value are given, entityType is updated,
                or two records would end up with the same identity (nothing is changed)
        """
        if set is not None and value is not None:
            raise SchemaStoreError("Pass the update mapping as either 'set' or 'value', not both")
        mapping = set if set is not None else (value or {})
        if ENTITY_TYPE_FIELD in mapping:
            raise SchemaStoreError(f"'{ENTITY_TYPE_FIELD}' cannot be updated")

        ops = {field_name: to_update_op(v) for field_name, v in mapping.items()}
        targets = self.list(where)
        staged = [
            (record, {field_name: apply_update_op(record.get(field_name), op) for field_name, op in ops.items()})
            for record in targets
        ]
        if any(field_name in COMMON_FIELDS for field_name in ops):
            self._check_identities(staged)
        for record, changes in staged:
            record.update(changes)

        logger.debug(f"Updated {len(targets)} record(s) in scope {self._scope or '*'}")
        return targets

    def _check_identities(self, staged: List[Tuple[Record, Record]]) -> None:
        moved = {id(record) for record, _ in staged}
        taken = {composite_key(record) for record in self._collection if id(record) not in moved}
        for record, changes in staged:
            key = composite_key({**record, **changes})
            if key in taken:
                raise SchemaStoreError(
                    f"Update would give two records the identity {key}",
                    code="IDENTITY_CONFLICT",
                    details={"key": key},
                )
            taken.add(key)

    def delete(self, where: Optional[Filter] = None) -> List[Record]:
        """Remove and return records in scope matching where.

        Without where, removes every record in scope.
        """
        scoped = self._scoped(where)
        if scoped is None:
            return self._collection.clear()

        removed = self._collection.remove_where(lambda record: matches(record, scoped))
        logger.debug(f"Deleted {len(removed)} record(s) in scope {self._scope or '*'}")
        return removed


class KindAccessor(_ScopedAccessor):
    """CRUD operations for one entity kind.

    Example:
        >>> result = store.column.insert({"table": "user", "name": "id", "type": "serial"})
        >>> result.status
        <InsertStatus.OK: 'OK'>
        >>> [r["type"] for r in store.column.update(set={"type": "bigserial"}, where={"name": "id"})]
        ['bigserial']
    """

    def __init__(self, kind: KindDef, collection: Collection, validate: bool = False) -> None:
        super().__init__(collection, kind.name)
        self.kind = kind
        self._validate = validate
        self._nulls = kind.defaults()

    @property
    def name(self) -> str:
        return self.kind.name

    def insert(self, *inputs: Mapping[str, Any]) -> Union[InsertResult, List[InsertResult]]:
        """Insert one or more partial records.

        Omitted fields, and fields set to UNDEFINED, default to None.

        Returns:
            One InsertResult for a single input, a list for several

        Raises:
            RecordValidationError: If insert validation is enabled and a record is invalid
        """
        if not inputs:
            raise TypeError("insert() requires at least one record")
        results = [self.insert_one(record) for record in inputs]
        return results[0] if len(results) == 1 else results

    def insert_one(self, input: Mapping[str, Any]) -> InsertResult:
        """Insert a single partial record."""
        provided = {k: v for k, v in input.items() if v is not UNDEFINED}
        candidate: Record = {**self._nulls, **provided, ENTITY_TYPE_FIELD: self.kind.name}

        if self._validate:
            validate_or_raise(self.kind, candidate)

        key = composite_key(candidate)
        existing = self._collection.find_by_key(key)
        if existing is not None:
            logger.debug(f"Insert conflict on {key}")
            return InsertResult(status=InsertStatus.CONFLICT, data=existing)

        self._collection.append(candidate)
        logger.debug(f"Inserted {key}")
        return InsertResult(status=InsertStatus.OK, data=candidate)


class EntitiesAccessor(_ScopedAccessor):
    """Operations over every kind of a store.

    insert() requires each input to name its kind through entityType.
    """

    def __init__(
        self,
        registry: SchemaRegistry,
        collection: Collection,
        accessors: Mapping[str, KindAccessor],
    ) -> None:
        super().__init__(collection, None)
        self._registry = registry
        self._accessors = accessors

    def insert(self, *inputs: Mapping[str, Any]) -> Union[InsertResult, List[InsertResult]]:
        """Insert records of any kind, dispatching on their entityType.

        Raises:
            UnknownKindError: If an input has no entityType or names an undeclared kind
        """
        if not inputs:
            raise TypeError("insert() requires at least one record")
        targets = []
        for record in inputs:
            kind = record.get(ENTITY_TYPE_FIELD)
            accessor = self._accessors.get(kind) if isinstance(kind, str) else None
            if accessor is None:
                raise UnknownKindError(kind, self._registry.kind_names())
            targets.append((accessor, record))

        results = [accessor.insert_one(record) for accessor, record in targets]
        return results[0] if len(results) == 1 else results
