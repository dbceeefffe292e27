"""
Schema module for schemastore.

This module provides the type system for entity kinds, including:
- Type definitions (FieldDef, KindDef, FieldKind)
- Schema registry merging declared fields with the common fields
- Loading schema descriptions from YAML and JSON

Invariants:
    - Every kind has the common fields schema, table and name
    - Kind names "entities" and "_" are reserved
    - Common fields are only redeclared with the "required" tag
"""

from .format import dump_yaml, load_definition, parse_json, parse_yaml
from .registry import ENTITIES_KIND, RegistryFrozenError, SchemaRegistry
from .types import (
    COMMON_CONFIG,
    COMMON_FIELDS,
    ENTITY_TYPE_FIELD,
    FieldDef,
    FieldKind,
    KindDef,
)

__all__ = [
    # Types
    "FieldDef",
    "FieldKind",
    "KindDef",
    "COMMON_CONFIG",
    "COMMON_FIELDS",
    "ENTITY_TYPE_FIELD",
    # Registry
    "SchemaRegistry",
    "RegistryFrozenError",
    "ENTITIES_KIND",
    # Format
    "parse_yaml",
    "parse_json",
    "load_definition",
    "dump_yaml",
]
