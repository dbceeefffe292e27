"""
Schema Registry for schemastore.

The SchemaRegistry turns a schema description into finalized per-kind
field configurations. It provides:
- Validation of kind names and field declarations
- Merging of user fields with the common fields (schema, table, name)
- Lookup of kinds by name
- Schema fingerprinting for comparing two stores

Invariants:
    - Registry is mutable while kinds are registered, frozen before use
    - Once frozen, no new kinds can be registered
    - Kind names "entities" and "_" are never registered
    - Common fields can only be redeclared with the "required" tag

Example:
    >>> registry = SchemaRegistry.from_definition({
    ...     "column": {"type": "string", "primaryKey": "boolean?"},
    ... })
    >>> registry.get_kind("column").get_field_names()
    ['schema', 'table', 'name', 'type', 'primaryKey']
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Dict, Iterator, Mapping, Optional

from ..errors import (
    ForbiddenFieldError,
    InvalidRequiredFieldError,
    ReservedKindError,
    SchemaDefinitionError,
)
from .types import (
    COMMON_CONFIG,
    CONTAINS_KEY,
    ENTITY_TYPE_FIELD,
    REQUIRED_TAG,
    KindDef,
)

logger = logging.getLogger(__name__)

ENTITIES_KIND = "entities"

RESERVED_KINDS = frozenset({ENTITIES_KIND, "_"})

RESERVED_FIELDS = frozenset(
    {ENTITY_TYPE_FIELD, CONTAINS_KEY} | {f"{name}?" for name in COMMON_CONFIG}
)


class RegistryFrozenError(SchemaDefinitionError):
    """Raised when attempting to modify a frozen registry."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class SchemaRegistry:
    """Registry of all entity kinds of one store.

    Attributes:
        frozen: Whether the registry is frozen (immutable)
        fingerprint: SHA-256 hash of the finalized schema (computed on freeze)

    Example:
        >>> registry = SchemaRegistry()
        >>> registry.register_kind("table", {"comment": "string?"})
        >>> registry.freeze()
        'sha256:...'
    """

    def __init__(self) -> None:
        """Initialize an empty, mutable registry."""
        self._kinds: Dict[str, KindDef] = {}
        self._frozen = False
        self._fingerprint: Optional[str] = None

    @property
    def frozen(self) -> bool:
        """Whether the registry is frozen."""
        return self._frozen

    @property
    def fingerprint(self) -> Optional[str]:
        """Schema fingerprint (available after freeze)."""
        return self._fingerprint

    def register_kind(self, name: str, description: Mapping[str, Any]) -> KindDef:
        """Validate a kind's field declarations and register the finalized kind.

        Args:
            name: Entity kind name
            description: Field name to type tag mapping

        Returns:
            The registered KindDef

        Raises:
            RegistryFrozenError: If registry is frozen
            ReservedKindError: If name is a reserved kind name
            ForbiddenFieldError: If a common or reserved field is redeclared
            InvalidRequiredFieldError: If "required" is used on a non-common field
            InvalidFieldTypeError: If a type tag is malformed
        """
        if self._frozen:
            raise RegistryFrozenError(f"Cannot register entity type '{name}': registry is frozen")
        if name in RESERVED_KINDS:
            raise ReservedKindError(name)
        if not isinstance(name, str) or not name:
            raise SchemaDefinitionError(f"Entity type name must be a non-empty string, got {name!r}")
        if name in self._kinds:
            raise SchemaDefinitionError(f"Entity type '{name}' already registered", kind=name)
        if not isinstance(description, Mapping):
            raise SchemaDefinitionError(
                f"Entity type '{name}' must map field names to types, "
                f"got {type(description).__name__}",
                kind=name,
            )

        declared: Dict[str, Any] = {}
        for field_name, tag in description.items():
            if tag == REQUIRED_TAG:
                if field_name not in COMMON_CONFIG:
                    raise InvalidRequiredFieldError(name, field_name, list(COMMON_CONFIG))
                declared[field_name] = COMMON_CONFIG[field_name]
            elif field_name in COMMON_CONFIG or field_name in RESERVED_FIELDS:
                raise ForbiddenFieldError(name, field_name)
            else:
                declared[field_name] = tag

        kind = KindDef.from_config(name, {**COMMON_CONFIG, **declared})
        self._kinds[name] = kind
        logger.debug(f"Registered entity type: {name} ({len(kind.fields)} fields)")
        return kind

    def get_kind(self, name: str) -> Optional[KindDef]:
        """Get a kind by name."""
        return self._kinds.get(name)

    def kinds(self) -> Iterator[KindDef]:
        """Iterate over all registered kinds, in declaration order."""
        yield from self._kinds.values()

    def kind_names(self) -> list[str]:
        """Names of all registered kinds, in declaration order."""
        return list(self._kinds)

    def __contains__(self, name: object) -> bool:
        return name in self._kinds

    def __len__(self) -> int:
        return len(self._kinds)

    def freeze(self) -> str:
        """Freeze the registry and compute fingerprint.

        Returns:
            Schema fingerprint string

        Raises:
            RegistryFrozenError: If already frozen
        """
        if self._frozen:
            raise RegistryFrozenError("Registry is already frozen")

        self._fingerprint = self._compute_fingerprint()
        self._frozen = True
        logger.debug(
            f"Schema registry frozen with {len(self._kinds)} entity types, "
            f"fingerprint={self._fingerprint}"
        )
        return self._fingerprint

    def _compute_fingerprint(self) -> str:
        """Compute SHA-256 fingerprint of the canonical JSON schema."""
        canonical = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
        hash_bytes = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
        return f"sha256:{hash_bytes}"

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Convert registry to a kind name to finalized field config mapping."""
        return {name: kind.to_config() for name, kind in self._kinds.items()}

    @classmethod
    def from_definition(cls, definition: Mapping[str, Mapping[str, Any]]) -> SchemaRegistry:
        """Create a frozen registry from a schema description.

        Args:
            definition: Kind name to field declarations mapping

        Returns:
            Frozen SchemaRegistry

        Raises:
            SchemaDefinitionError: If any kind or field declaration is invalid
        """
        if not isinstance(definition, Mapping):
            raise SchemaDefinitionError(
                f"Schema description must be a mapping, got {type(definition).__name__}"
            )
        registry = cls()
        for name, description in definition.items():
            registry.register_kind(name, description)
        registry.freeze()
        return registry
