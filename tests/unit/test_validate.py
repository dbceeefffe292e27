"""
Unit tests for record validation.

Tests cover:
- Field type validation, including nested objects and arrays
- Nullability
- Unknown field detection with suggestions
- Enum validation
"""

import pytest

from schemastore.errors import RecordValidationError, UnknownFieldError
from schemastore.schema.registry import SchemaRegistry
from schemastore.validate import suggest_fields, validate_or_raise, validate_record


@pytest.fixture
def index_kind():
    """Index kind for testing."""
    registry = SchemaRegistry.from_definition(
        {
            "index": {
                "schema": "required",
                "columns": [{"expression": "string", "isExpression": "boolean", "asc": "boolean?"}],
                "isUnique": "boolean",
                "concurrently": "boolean?",
                "method": ["btree", "hash", "gin"],
                "with": {"fillfactor": "number", "comment": "string?"},
                "where": "string?",
                "includes": "string[]?",
            }
        }
    )
    return registry.get_kind("index")


def valid_index(**overrides):
    record = {
        "schema": "public",
        "table": "user",
        "name": "user_email_idx",
        "columns": [{"expression": "email", "isExpression": False, "asc": True}],
        "isUnique": True,
        "concurrently": None,
        "method": "btree",
        "with": {"fillfactor": 90, "comment": None},
        "where": None,
        "includes": ["id"],
        "entityType": "index",
    }
    record.update(overrides)
    return record


class TestValidateRecord:
    """Tests for validate_record."""

    def test_valid_record(self, index_kind):
        is_valid, errors = validate_record(index_kind, valid_index())

        assert is_valid
        assert errors == []

    def test_nullable_fields(self, index_kind):
        """Nullable fields and nested objects accept None."""
        is_valid, _ = validate_record(
            index_kind, valid_index(schema=None, table=None, includes=None, **{"with": None})
        )

        assert is_valid

    def test_missing_required(self, index_kind):
        record = valid_index()
        del record["name"]

        is_valid, errors = validate_record(index_kind, record)

        assert not is_valid
        assert "Field 'name' is required" in errors

    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"isUnique": 1}, "Field 'isUnique' must be a boolean"),
            ({"method": "brin"}, "Field 'method' must be one of"),
            ({"method": 3}, "Field 'method' must be a string"),
            ({"includes": "id"}, "Field 'includes' must be a list"),
            ({"includes": ["id", 2]}, "Field 'includes[1]' must be a string"),
            ({"columns": None}, "Field 'columns' is required"),
            ({"columns": [{"expression": "email"}]}, "Field 'columns[0].isExpression' is required"),
            ({"columns": ["email"]}, "Field 'columns[0]' must be an object"),
            ({"with": {"fillfactor": "90"}}, "Field 'with.fillfactor' must be a number"),
            ({"with": {"fillfactor": 90, "extra": 1}}, "Unknown field 'with.extra'"),
            ({"with": [90]}, "Field 'with' must be an object"),
            ({"entityType": "column"}, "Field 'entityType' must be 'index'"),
        ],
    )
    def test_invalid_values(self, index_kind, overrides, message):
        is_valid, errors = validate_record(index_kind, valid_index(**overrides))

        assert not is_valid
        assert any(message in e for e in errors), errors

    def test_unknown_field_suggestion(self, index_kind):
        is_valid, errors = validate_record(index_kind, valid_index(isUniqe=True))

        assert not is_valid
        assert "Did you mean" in errors[0]
        assert "isUnique" in errors[0]


class TestValidateOrRaise:
    """Tests for validate_or_raise."""

    def test_valid(self, index_kind):
        validate_or_raise(index_kind, valid_index())

    def test_unknown_field(self, index_kind):
        with pytest.raises(UnknownFieldError) as exc_info:
            validate_or_raise(index_kind, valid_index(colums=[]))

        assert exc_info.value.field_name == "colums"
        assert "columns" in exc_info.value.suggestions
        assert exc_info.value.code == "UNKNOWN_FIELD"

    def test_invalid(self, index_kind):
        with pytest.raises(RecordValidationError, match="Validation failed for index") as exc_info:
            validate_or_raise(index_kind, valid_index(isUnique="yes"))

        assert exc_info.value.errors
        assert exc_info.value.code == "VALIDATION_ERROR"


def test_suggest_fields(index_kind):
    assert "isUnique" in suggest_fields("is", index_kind)
    assert suggest_fields("colum", index_kind)[0] == "columns"
