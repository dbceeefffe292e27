"""
SchemaStore: a schema-described, in-memory multi-kind record store.

A store is built from a schema description in one step: the registry
validates the description, then one accessor per kind is generated over
a single private Collection. No store object exists if the description
is invalid.

Invariants:
    - One store owns exactly one Collection; stores never share records
    - Accessors are generated once, at construction
    - "entities" is always the all-kinds accessor

Example:
    >>> db = create({"column": {"type": "string", "primaryKey": "boolean?"}})
    >>> db.column.insert({"table": "user", "name": "id", "type": "serial"}).status
    <InsertStatus.OK: 'OK'>
    >>> db.entities.list()
    [{'schema': None, 'table': 'user', 'name': 'id', 'type': 'serial', 'primaryKey': None, 'entityType': 'column'}]
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from ..config import Settings, get_settings
from ..errors import UnknownKindError
from ..schema.format import load_definition
from ..schema.registry import ENTITIES_KIND, SchemaRegistry
from ..validate import kind_errors
from .collection import Collection
from .operations import EntitiesAccessor, KindAccessor

logger = logging.getLogger(__name__)


class SchemaStore:
    """In-memory store holding records of every declared kind.

    Kinds are reachable as attributes (``db.column``) or by key
    (``db["column"]``); the key form also works for kind names that
    shadow a SchemaStore attribute.

    Attributes:
        registry: Frozen schema registry
        entities: Accessor over every kind
        settings: Settings the store was built with
    """

    def __init__(
        self,
        definition: Mapping[str, Mapping[str, Any]],
        settings: Optional[Settings] = None,
    ) -> None:
        """Build a store from a schema description.

        Raises:
            SchemaDefinitionError: If the description is invalid
        """
        self.settings = settings or get_settings()
        self.registry = SchemaRegistry.from_definition(definition)
        self._collection = Collection()
        self._accessors: Dict[str, KindAccessor] = {
            kind.name: KindAccessor(kind, self._collection, validate=self.settings.validate_inserts)
            for kind in self.registry.kinds()
        }
        self.entities = EntitiesAccessor(self.registry, self._collection, self._accessors)
        shadowed = [name for name in self._accessors if hasattr(type(self), name) or name in self.__dict__]
        if shadowed:
            logger.warning(
                f"Entity types {shadowed} are shadowed by SchemaStore attributes; "
                f"use db[name] or db.kind(name) to reach them"
            )
        logger.debug(
            f"Created store with entity types {self.registry.kind_names()} "
            f"(fingerprint={self.registry.fingerprint})"
        )

    @property
    def kinds(self) -> List[str]:
        """Declared kind names, in declaration order."""
        return self.registry.kind_names()

    def kind(self, name: str) -> Union[KindAccessor, EntitiesAccessor]:
        """Get the accessor for a kind, or the all-kinds accessor for "entities".

        Raises:
            UnknownKindError: If name is not a declared kind
        """
        if name == ENTITIES_KIND:
            return self.entities
        accessor = self._accessors.get(name)
        if accessor is None:
            raise UnknownKindError(name, self.kinds)
        return accessor

    def __getitem__(self, name: str) -> Union[KindAccessor, EntitiesAccessor]:
        return self.kind(name)

    def __getattr__(self, name: str) -> KindAccessor:
        accessors = self.__dict__.get("_accessors")
        if accessors is not None and name in accessors:
            return accessors[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __contains__(self, name: object) -> bool:
        return name in self._accessors

    def __len__(self) -> int:
        return len(self._collection)

    def validate_all(self) -> Dict[str, List[str]]:
        """Validate every stored record against its kind.

        Returns:
            Mapping of kind name to error messages, empty if every record is valid
        """
        kinds = {kind.name: kind for kind in self.registry.kinds()}
        problems: Dict[str, List[str]] = {}
        for record in self._collection:
            errors = kind_errors(kinds, record)
            for kind_name, messages in (errors or {}).items():
                problems.setdefault(kind_name, []).extend(messages)
        return problems


def create(
    definition: Mapping[str, Mapping[str, Any]],
    settings: Optional[Settings] = None,
) -> SchemaStore:
    """Create a store from a schema description.

    Args:
        definition: Kind name to field-name/type-tag mapping
        settings: Optional settings (loaded from env if not provided)

    Returns:
        A new, empty SchemaStore

    Raises:
        SchemaDefinitionError: If the description is invalid
    """
    return SchemaStore(definition, settings=settings)


def create_from_file(path: Union[str, Path], settings: Optional[Settings] = None) -> SchemaStore:
    """Create a store from a YAML or JSON schema description file."""
    return create(load_definition(path), settings=settings)
