"""
Error types for schemastore.

This module defines all exception types raised by the store:
- SchemaStoreError: Base exception
- SchemaDefinitionError: Invalid schema description (construction time)
- UnknownKindError: Entity kind not declared in the schema
- RecordValidationError: Record does not fit its kind's field config
- UnknownFieldError: Unknown field in a record

Invariants:
    - All errors inherit from SchemaStoreError
    - Errors include context for debugging
    - Insert conflicts are results, never exceptions
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class SchemaStoreError(Exception):
    """Base exception for all schemastore errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "SCHEMASTORE_ERROR"
        self.details = details or {}


class SchemaDefinitionError(SchemaStoreError):
    """Schema description is invalid.

    Raised while building a store, before any accessor exists.
    """

    def __init__(
        self,
        message: str,
        kind: Optional[str] = None,
        field_name: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            code="SCHEMA_ERROR",
            details={"kind": kind, "field_name": field_name},
        )
        self.kind = kind
        self.field_name = field_name


class ReservedKindError(SchemaDefinitionError):
    """Kind name collides with a reserved accessor name."""

    def __init__(self, kind: str) -> None:
        super().__init__(f'Illegal entity type name: "{kind}"', kind=kind)


class ForbiddenFieldError(SchemaDefinitionError):
    """A common or reserved field name was redeclared."""

    def __init__(self, kind: str, field_name: str) -> None:
        super().__init__(
            f'Used forbidden key "{field_name}" in entity "{kind}"',
            kind=kind,
            field_name=field_name,
        )


class InvalidRequiredFieldError(SchemaDefinitionError):
    """Type value "required" used on a field that is not a common field."""

    def __init__(self, kind: str, field_name: str, common: List[str]) -> None:
        keys = ", ".join(f'"{c}"' for c in common)
        super().__init__(
            f'Type value "required" is only applicable to common keys [ {keys} ], '
            f'used on: "{field_name}"',
            kind=kind,
            field_name=field_name,
        )


class InvalidFieldTypeError(SchemaDefinitionError):
    """Type tag is not one of the supported forms."""

    def __init__(self, kind: str, field_name: str, tag: Any) -> None:
        super().__init__(
            f'Invalid type {tag!r} for field "{field_name}" in entity "{kind}"',
            kind=kind,
            field_name=field_name,
        )
        self.tag = tag


class UnknownKindError(SchemaStoreError):
    """Entity kind is not declared in the schema."""

    def __init__(self, kind: Any, known: Optional[List[str]] = None) -> None:
        known = known or []
        super().__init__(
            f"Unknown entity type {kind!r}. Known types: {known}",
            code="UNKNOWN_KIND",
            details={"kind": kind, "known": known},
        )
        self.kind = kind
        self.known = known


class RecordValidationError(SchemaStoreError):
    """Record validation failed.

    Raised when:
    - Field value has wrong type
    - Non-nullable field is null
    - Enum value is invalid
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        errors: Optional[List[str]] = None,
    ) -> None:
        super().__init__(
            message,
            code="VALIDATION_ERROR",
            details={"field": field_name, "errors": errors or []},
        )
        self.field_name = field_name
        self.errors = errors or []


class UnknownFieldError(SchemaStoreError):
    """Unknown field in record.

    Includes suggestions for similar field names.

    Attributes:
        field_name: The unknown field
        kind: The entity kind being checked
        suggestions: Similar field names
    """

    def __init__(
        self,
        field_name: str,
        kind: str,
        suggestions: Optional[List[str]] = None,
    ) -> None:
        suggestions = suggestions or []
        msg = f"Unknown field '{field_name}' in entity '{kind}'"
        if suggestions:
            msg += f". Did you mean: {', '.join(suggestions)}?"

        super().__init__(
            msg,
            code="UNKNOWN_FIELD",
            details={
                "field_name": field_name,
                "kind": kind,
                "suggestions": suggestions,
            },
        )
        self.field_name = field_name
        self.kind = kind
        self.suggestions = suggestions
