"""
Record validation for schemastore.

This module checks a candidate record against its kind's field config:
- Field-level type checks, recursing into nested objects and arrays
- Nullability
- Unknown fields, with suggestions

Invariants:
    - Validation errors are deterministic
    - Error messages include the dotted path of the offending value
    - Unknown fields suggest similar valid fields
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import RecordValidationError, UnknownFieldError
from .schema.types import ENTITY_TYPE_FIELD, FieldDef, FieldKind, KindDef


def validate_record(
    kind: KindDef,
    record: Mapping[str, Any],
) -> Tuple[bool, List[str]]:
    """Validate a record against an entity kind.

    Args:
        kind: Kind to validate against
        record: Record to validate; absent fields count as None

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors: List[str] = []

    known_fields = set(kind.get_field_names())
    for field_name in record:
        if field_name == ENTITY_TYPE_FIELD or field_name in known_fields:
            continue
        suggestions = get_close_matches(field_name, sorted(known_fields), n=3)
        if suggestions:
            errors.append(f"Unknown field '{field_name}'. Did you mean: {suggestions}?")
        else:
            errors.append(f"Unknown field '{field_name}'")

    entity_type = record.get(ENTITY_TYPE_FIELD)
    if entity_type is not None and entity_type != kind.name:
        errors.append(f"Field '{ENTITY_TYPE_FIELD}' must be '{kind.name}', got '{entity_type}'")

    for field_def in kind.fields:
        errors.extend(_validate_value(field_def, record.get(field_def.name), field_def.name))

    return len(errors) == 0, errors


def _validate_value(field_def: FieldDef, value: Any, path: str) -> List[str]:
    """Validate a single, possibly nested, value."""
    if value is None:
        if field_def.nullable:
            return []
        return [f"Field '{path}' is required"]

    kind = field_def.kind

    if kind == FieldKind.STRING:
        if not isinstance(value, str):
            return [f"Field '{path}' must be a string, got {type(value).__name__}"]

    elif kind == FieldKind.NUMBER:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            return [f"Field '{path}' must be a number, got {type(value).__name__}"]

    elif kind == FieldKind.BOOLEAN:
        if not isinstance(value, bool):
            return [f"Field '{path}' must be a boolean, got {type(value).__name__}"]

    elif kind == FieldKind.ENUM:
        if not isinstance(value, str):
            return [f"Field '{path}' must be a string, got {type(value).__name__}"]
        if field_def.enum_values and value not in field_def.enum_values:
            return [f"Field '{path}' must be one of {field_def.enum_values}, got '{value}'"]

    elif kind == FieldKind.STRING_ARRAY:
        if not isinstance(value, list):
            return [f"Field '{path}' must be a list, got {type(value).__name__}"]
        for i, item in enumerate(value):
            if not isinstance(item, str):
                return [f"Field '{path}[{i}]' must be a string"]

    elif kind == FieldKind.OBJECT:
        return _validate_object(field_def, value, path)

    elif kind == FieldKind.OBJECT_ARRAY:
        if not isinstance(value, list):
            return [f"Field '{path}' must be a list, got {type(value).__name__}"]
        errors: List[str] = []
        for i, item in enumerate(value):
            errors.extend(_validate_object(field_def, item, f"{path}[{i}]"))
        return errors

    return []


def _validate_object(field_def: FieldDef, value: Any, path: str) -> List[str]:
    if not isinstance(value, dict):
        return [f"Field '{path}' must be an object, got {type(value).__name__}"]

    errors: List[str] = []
    member_names = {f.name for f in field_def.fields}
    for key in value:
        if key not in member_names:
            errors.append(f"Unknown field '{path}.{key}'")
    for member in field_def.fields:
        errors.extend(_validate_value(member, value.get(member.name), f"{path}.{member.name}"))
    return errors


def validate_or_raise(
    kind: KindDef,
    record: Mapping[str, Any],
) -> None:
    """Validate a record and raise if invalid.

    Raises:
        UnknownFieldError: If an unknown top-level field is provided
        RecordValidationError: If validation fails
    """
    known_fields = kind.get_field_names()
    unknown = [k for k in record if k != ENTITY_TYPE_FIELD and k not in known_fields]

    if unknown:
        field_name = unknown[0]
        suggestions = get_close_matches(field_name, known_fields, n=3)
        raise UnknownFieldError(field_name, kind.name, suggestions)

    is_valid, errors = validate_record(kind, record)
    if not is_valid:
        raise RecordValidationError(
            f"Validation failed for {kind.name}: {'; '.join(errors)}",
            errors=errors,
        )


def suggest_fields(
    partial: str,
    kind: KindDef,
    limit: int = 5,
) -> List[str]:
    """Suggest field names based on partial input."""
    known = kind.get_field_names()
    matches = get_close_matches(partial, known, n=limit)
    prefix_matches = [n for n in known if n.lower().startswith(partial.lower())]
    return list(dict.fromkeys(matches + prefix_matches))[:limit]


def kind_errors(kinds: Mapping[str, KindDef], record: Mapping[str, Any]) -> Optional[Dict[str, List[str]]]:
    """Validate a record against the kind its entityType names.

    Returns:
        None if the record is valid, else {kind_name: errors}
    """
    kind_name = record.get(ENTITY_TYPE_FIELD)
    kind = kinds.get(kind_name) if isinstance(kind_name, str) else None
    if kind is None:
        return {str(kind_name): [f"Unknown entity type '{kind_name}'"]}
    is_valid, errors = validate_record(kind, record)
    return None if is_valid else {kind.name: errors}
