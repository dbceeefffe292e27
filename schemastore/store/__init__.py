"""
Store module for schemastore.

This module holds the record store:
- Deep equality over nested values
- Filter matching (literal equality, array containment)
- The shared Collection and composite identity
- Per-kind CRUD accessors and the all-kinds entities accessor

Invariants:
    - One store owns one Collection
    - At most one record per (schema, table, name, entityType)
"""

from .collection import Collection, composite_key
from .database import SchemaStore, create, create_from_file
from .equality import UNDEFINED, equal
from .filters import Contains, filter_collection, matches
from .operations import (
    EntitiesAccessor,
    InsertResult,
    InsertStatus,
    KindAccessor,
    Map,
    Set,
    UpdateOp,
)

__all__ = [
    "Collection",
    "composite_key",
    "SchemaStore",
    "create",
    "create_from_file",
    "UNDEFINED",
    "equal",
    "Contains",
    "matches",
    "filter_collection",
    "EntitiesAccessor",
    "KindAccessor",
    "InsertResult",
    "InsertStatus",
    "Map",
    "Set",
    "UpdateOp",
]
