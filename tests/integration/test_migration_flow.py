"""
Integration tests for a migration-generation flow.

Two stores are built from the same YAML schema description, populated
with two versions of a database schema, and diffed.
"""

import pytest

import schemastore
from schemastore import Contains, DiffType, Settings, create_from_file

SCHEMA_YAML = """
entities:
  schemas: {}
  tables:
    schema: required
    isRlsEnabled: boolean?
  columns:
    table: required
    type: string
    primaryKey: boolean
    notNull: boolean
    default:
      value: string
      expression: boolean
  indexes:
    table: required
    columns:
      - value: string
        isExpression: boolean
    isUnique: boolean
    method: [btree, hash, gin]
  fks:
    table: required
    columns: string[]
    tableTo: string
    columnsTo: string[]
    onDelete: string?
"""


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "schema.yaml"
    path.write_text(SCHEMA_YAML)
    return path


@pytest.fixture
def settings():
    return Settings(validate_inserts=True)


def populate_v1(db):
    db.schemas.insert({"name": "public"})
    db.tables.insert({"schema": "public", "name": "user"}, {"schema": "public", "name": "post"})
    db.columns.insert(
        {"schema": "public", "table": "user", "name": "id", "type": "serial", "primaryKey": True, "notNull": True},
        {"schema": "public", "table": "user", "name": "email", "type": "varchar", "primaryKey": False, "notNull": True},
        {"schema": "public", "table": "post", "name": "id", "type": "serial", "primaryKey": True, "notNull": True},
        {"schema": "public", "table": "post", "name": "author_id", "type": "integer", "primaryKey": False, "notNull": False},
    )
    db.indexes.insert(
        {
            "schema": "public",
            "table": "user",
            "name": "user_email_idx",
            "columns": [{"value": "email", "isExpression": False}],
            "isUnique": True,
            "method": "btree",
        }
    )
    db.fks.insert(
        {
            "schema": "public",
            "table": "post",
            "name": "post_author_fk",
            "columns": ["author_id"],
            "tableTo": "user",
            "columnsTo": ["id"],
            "onDelete": None,
        }
    )


class TestMigrationFlow:
    """End-to-end diffing of two schema versions."""

    def test_identical_versions(self, schema_file, settings):
        old = create_from_file(schema_file, settings=settings)
        new = create_from_file(schema_file, settings=settings)
        populate_v1(old)
        populate_v1(new)

        assert old.registry.fingerprint == new.registry.fingerprint
        assert schemastore.diff(old, new) == []

    def test_column_type_change(self):
        """Changing one column type yields exactly one alter."""
        definition = {"column": {"type": "string", "pk": "boolean?"}}
        old = schemastore.create(definition, settings=Settings())
        new = schemastore.create(definition, settings=Settings())
        old.column.insert(
            {"name": "id", "type": "serial", "pk": True, "table": "user"},
            {"name": "name", "type": "varchar", "pk": False, "table": "user"},
        )
        new.column.insert(
            {"name": "id", "type": "serial", "pk": True, "table": "user"},
            {"name": "name", "type": "text", "pk": False, "table": "user"},
        )

        rows = schemastore.diff_rows(old, new, "column")

        assert [r.to_dict() for r in rows] == [
            {
                "type": "update",
                "entityType": "column",
                "schema": None,
                "table": "user",
                "name": "name",
                "changes": {"type": {"from": "varchar", "to": "text"}},
            }
        ]

    def test_evolve_schema(self, schema_file, settings):
        old = create_from_file(schema_file, settings=settings)
        new = create_from_file(schema_file, settings=settings)
        populate_v1(old)
        populate_v1(new)

        # v2: drop the post table, add a user column, make the index a hash
        new.entities.delete({"schema": "public", "table": "post"})
        new.tables.delete({"name": "post"})
        new.columns.insert(
            {
                "schema": "public",
                "table": "user",
                "name": "created_at",
                "type": "timestamp",
                "primaryKey": False,
                "notNull": True,
                "default": {"value": "now()", "expression": True},
            }
        )
        new.indexes.update(set={"method": "hash"}, where={"columns": Contains({"value": "email", "isExpression": False})})
        new.columns.update(
            set={"type": lambda t: t},
            where={"name": "email"},
        )

        statements = schemastore.diff(old, new)

        assert [(s["$diffType"], s["entityType"], s["table"], s["name"]) for s in statements] == [
            ("create", "columns", "user", "created_at"),
            ("drop", "tables", None, "post"),
            ("drop", "columns", "post", "id"),
            ("drop", "columns", "post", "author_id"),
            ("drop", "fks", "post", "post_author_fk"),
            ("alter", "indexes", "user", "user_email_idx"),
        ]
        assert statements[0]["default"] == {"value": "now()", "expression": True}
        assert statements[-1]["method"] == {"from": "btree", "to": "hash"}
        assert "isUnique" not in statements[-1]

    def test_per_kind_diff(self, schema_file, settings):
        old = create_from_file(schema_file, settings=settings)
        new = create_from_file(schema_file, settings=settings)
        populate_v1(old)
        populate_v1(new)
        new.fks.update(set={"onDelete": "cascade"})

        assert schemastore.diff(old, new, "columns") == []
        fk_rows = schemastore.diff_rows(old, new, "fks")
        assert [r.type for r in fk_rows] == [DiffType.UPDATE]
        assert fk_rows[0].changes == {"onDelete": {"from": None, "to": "cascade"}}

    def test_rename_via_entities_accessor(self, schema_file, settings):
        """Renaming a table across every kind is a drop plus create per row."""
        old = create_from_file(schema_file, settings=settings)
        new = create_from_file(schema_file, settings=settings)
        populate_v1(old)
        populate_v1(new)

        renamed = new.entities.update(set={"table": "account"}, where={"table": "user"})

        assert {r["entityType"] for r in renamed} == {"columns", "indexes"}
        created = schemastore.diff_creates(old, new)
        dropped = schemastore.diff_drops(old, new)
        assert len(created) == len(dropped) == len(renamed)
        assert all(s["table"] == "account" for s in created)
        assert schemastore.diff_alters(old, new) == []

    def test_validation_on_insert(self, schema_file, settings):
        db = create_from_file(schema_file, settings=settings)

        with pytest.raises(schemastore.RecordValidationError, match="must be one of"):
            db.indexes.insert(
                {
                    "table": "user",
                    "name": "bad",
                    "columns": [],
                    "isUnique": False,
                    "method": "brin",
                }
            )
        assert len(db) == 0
