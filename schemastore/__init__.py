"""
schemastore - schema-described in-memory record store with snapshot diffing.

A store holds records of many entity kinds (tables, columns, indexes,
foreign keys, ...) in one ordered collection. Each kind gets insert, list,
update and delete accessors generated from a schema description. Two
stores built from the same description can be diffed to find the rows a
migration has to create, drop or alter.

Architecture:
    schema description ──▶ SchemaRegistry ──▶ KindAccessor per kind
                                                   │
                                                   ▼
                                              Collection (one per store)
                                                   │
                   old store ─┐                    │
                              ├──▶ diff() ◀── entities.list()
                   new store ─┘

Invariants:
    - At most one record per (schema, table, name, entityType) in a store
    - Insert conflicts are results, not exceptions
    - Diffing is pure

Example:
    >>> import schemastore
    >>> old = schemastore.create({"column": {"type": "string"}})
    >>> new = schemastore.create({"column": {"type": "string"}})
    >>> _ = new.column.insert({"table": "user", "name": "id", "type": "serial"})
    >>> schemastore.diff(old, new, "column")
    [{'$diffType': 'create', 'entityType': 'column', 'schema': None, 'table': 'user', 'name': 'id', 'type': 'serial'}]
"""

from ._version import __version__
from .config import Settings, get_settings
from .diff import (
    DiffMode,
    DiffType,
    RowDiff,
    diff,
    diff_all,
    diff_alters,
    diff_create_drop,
    diff_creates,
    diff_drops,
    diff_rows,
)
from .errors import (
    ForbiddenFieldError,
    InvalidFieldTypeError,
    InvalidRequiredFieldError,
    RecordValidationError,
    ReservedKindError,
    SchemaDefinitionError,
    SchemaStoreError,
    UnknownFieldError,
    UnknownKindError,
)
from .logging_setup import setup_logging
from .store import (
    UNDEFINED,
    Contains,
    InsertResult,
    InsertStatus,
    Map,
    SchemaStore,
    Set,
    create,
    create_from_file,
    equal,
    matches,
)

__all__ = [
    "__version__",
    # Construction
    "create",
    "create_from_file",
    "SchemaStore",
    "Settings",
    "get_settings",
    "setup_logging",
    # Values and operators
    "UNDEFINED",
    "Contains",
    "Set",
    "Map",
    "InsertResult",
    "InsertStatus",
    "equal",
    "matches",
    # Diff
    "diff",
    "diff_rows",
    "diff_all",
    "diff_creates",
    "diff_drops",
    "diff_alters",
    "diff_create_drop",
    "DiffMode",
    "DiffType",
    "RowDiff",
    # Errors
    "SchemaStoreError",
    "SchemaDefinitionError",
    "ReservedKindError",
    "ForbiddenFieldError",
    "InvalidRequiredFieldError",
    "InvalidFieldTypeError",
    "UnknownKindError",
    "RecordValidationError",
    "UnknownFieldError",
]
