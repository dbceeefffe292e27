"""
Core type definitions for the schemastore schema system.

This module turns the type tags of a schema description into field
definitions:
- FieldKind: The data type of a field
- FieldDef: A single, possibly nested, field of an entity kind
- KindDef: The finalized field set of one entity kind

Type tags:
    "string" | "number" | "boolean" | "string[]"   scalar, "?" suffix = nullable
    "required"                                     common fields only
    {"col": "string", ...}                         nested object (nullable)
    [{"col": "string", ...}]                       array of nested objects
    ["asc", "desc"]                                string enum

Invariants:
    - Every kind carries the common fields schema, table and name
    - Parsed definitions are immutable
    - to_tag() returns a tag that parses back to an equal FieldDef

Example:
    >>> column = KindDef.from_config("column", {
    ...     "schema": "string?", "table": "string?", "name": "string",
    ...     "type": "string", "primaryKey": "boolean?",
    ... })
    >>> column.get_field("primaryKey").nullable
    True
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field as dataclass_field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from ..errors import InvalidFieldTypeError

COMMON_CONFIG: Dict[str, str] = {
    "schema": "string?",
    "table": "string?",
    "name": "string",
}

COMMON_FIELDS = tuple(COMMON_CONFIG)

ENTITY_TYPE_FIELD = "entityType"

CONTAINS_KEY = "CONTAINS"

REQUIRED_TAG = "required"


class FieldKind(Enum):
    """Supported field types in a schema description."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING_ARRAY = "string[]"
    ENUM = "enum"
    OBJECT = "object"
    OBJECT_ARRAY = "object[]"

    @classmethod
    def from_str(cls, value: str) -> FieldKind:
        """Convert a scalar tag (without "?") to FieldKind.

        Raises:
            ValueError: If value is not a scalar field kind
        """
        for kind in (cls.STRING, cls.NUMBER, cls.BOOLEAN, cls.STRING_ARRAY):
            if kind.value == value:
                return kind
        raise ValueError(f"Invalid field kind '{value}'")

    @property
    def is_array(self) -> bool:
        """Whether values of this kind are lists."""
        return self in (FieldKind.STRING_ARRAY, FieldKind.OBJECT_ARRAY)


@dataclass(frozen=True)
class FieldDef:
    """Definition of a single field within an entity kind.

    Attributes:
        name: Field name
        kind: The data type of the field
        nullable: Whether None is a legal value
        fields: Member fields, for OBJECT and OBJECT_ARRAY kinds
        enum_values: Legal values, for ENUM kind
    """

    name: str
    kind: FieldKind
    nullable: bool = False
    fields: tuple[FieldDef, ...] = dataclass_field(default_factory=tuple)
    enum_values: Optional[tuple[str, ...]] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Field name cannot be empty")
        if self.kind == FieldKind.ENUM and not self.enum_values:
            raise ValueError(f"enum_values required for ENUM field '{self.name}'")

    @classmethod
    def parse(cls, name: str, tag: Any, kind_name: str = "") -> FieldDef:
        """Parse a type tag into a field definition.

        Args:
            name: Field name
            tag: Type tag from the schema description
            kind_name: Owning entity kind, for error messages

        Returns:
            FieldDef instance

        Raises:
            InvalidFieldTypeError: If tag is not a supported form
        """
        if isinstance(tag, str):
            base, nullable = (tag[:-1], True) if tag.endswith("?") else (tag, False)
            try:
                kind = FieldKind.from_str(base)
            except ValueError:
                raise InvalidFieldTypeError(kind_name, name, tag) from None
            return cls(name=name, kind=kind, nullable=nullable)

        if isinstance(tag, Mapping):
            if not tag:
                raise InvalidFieldTypeError(kind_name, name, tag)
            members = tuple(
                cls.parse(member, member_tag, kind_name) for member, member_tag in tag.items()
            )
            return cls(name=name, kind=FieldKind.OBJECT, nullable=True, fields=members)

        if isinstance(tag, (list, tuple)) and tag:
            if len(tag) == 1 and isinstance(tag[0], Mapping):
                nested = cls.parse(name, tag[0], kind_name)
                return cls(name=name, kind=FieldKind.OBJECT_ARRAY, fields=nested.fields)
            if all(isinstance(v, str) for v in tag):
                return cls(name=name, kind=FieldKind.ENUM, enum_values=tuple(tag))

        raise InvalidFieldTypeError(kind_name, name, tag)

    def get_field(self, name: str) -> Optional[FieldDef]:
        """Get a member field of a nested object by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def to_tag(self) -> Any:
        """Convert back to the schema-description tag."""
        if self.kind == FieldKind.ENUM:
            return list(self.enum_values or ())
        if self.kind == FieldKind.OBJECT:
            return {f.name: f.to_tag() for f in self.fields}
        if self.kind == FieldKind.OBJECT_ARRAY:
            return [{f.name: f.to_tag() for f in self.fields}]
        return f"{self.kind.value}?" if self.nullable else self.kind.value


@dataclass(frozen=True)
class KindDef:
    """Finalized field set of one entity kind.

    Attributes:
        name: Entity kind name (the entityType tag of its records)
        fields: Field definitions, common fields first

    Invariants:
        - Field names are unique
        - schema, table and name are always present
    """

    name: str
    fields: tuple[FieldDef, ...] = dataclass_field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Entity kind name cannot be empty")
        names = [f.name for f in self.fields]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate field name in entity kind '{self.name}'")

    @classmethod
    def from_config(cls, name: str, config: Mapping[str, Any]) -> KindDef:
        """Build a kind from a finalized field-name to tag mapping."""
        return cls(
            name=name,
            fields=tuple(FieldDef.parse(f, tag, name) for f, tag in config.items()),
        )

    def get_field(self, name: str) -> Optional[FieldDef]:
        """Get a field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def get_field_names(self) -> list[str]:
        """Get list of all field names."""
        return [f.name for f in self.fields]

    def defaults(self) -> Dict[str, Any]:
        """All-None record for this kind."""
        return {f.name: None for f in self.fields}

    def to_config(self) -> Dict[str, Any]:
        """Convert to a field-name to tag mapping."""
        return {f.name: f.to_tag() for f in self.fields}
