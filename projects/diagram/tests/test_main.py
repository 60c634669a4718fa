"""Tests for the main diagram generation functionality."""

import pytest
from erdparse import (
    ColumnDefinition,
    ForeignKeyDefinition,
    TableDefinition,
    parse_schema,
)

from diagram import describe_column, grid_position, tables_to_diagram
from diagram.schema_types import LayoutConfig

SCHEMA = """
CREATE TYPE status AS ENUM ('active', 'inactive');

CREATE TABLE users (
    id INT PRIMARY KEY,
    email VARCHAR(255) NOT NULL,
    state status
);

CREATE TABLE posts (
    id INT PK,
    user_id INT NN,
    FOREIGN KEY (user_id) REFERENCES users(id)
);
"""


@pytest.fixture(name="tables")
def sample_tables() -> list[TableDefinition]:
    """Parse a small two-table schema."""
    return parse_schema(SCHEMA)


@pytest.fixture(name="layout")
def small_layout() -> LayoutConfig:
    """Layout with two tables per row."""
    return {"margin": 10, "x_spacing": 100, "y_spacing": 50, "max_per_row": 2}


def test_entities(tables: list[TableDefinition]) -> None:
    """Test entity ids, names and attribute strings."""
    diagram = tables_to_diagram(tables, SCHEMA)

    users, posts = diagram["entities"]
    assert users["id"] == "entity-users"
    assert users["name"] == "users"
    assert users["attributes"] == [
        "PK: id (INT)",
        "email (VARCHAR(255)) NOT NULL",
        "state (status)",
    ]
    # Referencing column carries the reference suffix
    assert posts["attributes"] == [
        "PK: id (INT)",
        "user_id (INT) NOT NULL [ref: > users.id]",
    ]
    assert diagram["source"] == SCHEMA


def test_default_grid_positions(tables: list[TableDefinition]) -> None:
    """Test that the bundled layout places tables left to right."""
    diagram = tables_to_diagram(tables)
    positions = [entity["position"] for entity in diagram["entities"]]
    assert positions == [{"x": 50, "y": 50}, {"x": 350, "y": 50}]


def test_grid_wraps_rows(layout: LayoutConfig) -> None:
    """Test that positions wrap after max_per_row tables."""
    assert [grid_position(i, layout) for i in range(3)] == [
        {"x": 10, "y": 10},
        {"x": 110, "y": 10},
        {"x": 10, "y": 60},
    ]


def test_relationships(tables: list[TableDefinition]) -> None:
    """Test that a foreign key becomes a relationship between attributes."""
    diagram = tables_to_diagram(tables)
    assert diagram["relationships"] == [
        {
            "id": "relationship-posts-0",
            "from": {"entity_id": "entity-posts", "attribute_index": 1},
            "to": {"entity_id": "entity-users", "attribute_index": 0},
            "type": "one-to-many",
        },
    ]


def test_relation_type_is_carried() -> None:
    """Test that an explicit relation type reaches the relationship."""
    tables = parse_schema(
        """
        Table users {
          id int [pk]
        }
        Table profiles {
          user_id int [pk]
        }
        Ref: users.id - profiles.user_id
        """,
        "dbml",
    )
    (relationship,) = tables_to_diagram(tables)["relationships"]
    assert relationship["type"] == "one-to-one"


def _column(name: str) -> ColumnDefinition:
    return {"name": name, "type": "int", "is_primary_key": False, "is_nullable": True}


def _key(column: str, table: str, reference: str) -> ForeignKeyDefinition:
    return {"column": column, "reference_table": table, "reference_column": reference}


def test_unresolvable_keys_are_skipped() -> None:
    """Test that keys naming unknown columns produce no relationship."""
    tables: list[TableDefinition] = [
        {"name": "users", "columns": [_column("id")], "foreign_keys": []},
        {
            "name": "posts",
            "columns": [_column("user_id")],
            "foreign_keys": [
                _key("missing", "users", "id"),
                _key("user_id", "users", "x"),
                _key("user_id", "ghosts", "id"),
                _key("user_id", "users", "id"),
            ],
        },
    ]
    diagram = tables_to_diagram(tables)
    assert [rel["id"] for rel in diagram["relationships"]] == ["relationship-posts-3"]
    assert diagram["entities"][1]["attributes"] == ["user_id (int) [ref: > users.id]"]


def test_enum_data(tables: list[TableDefinition]) -> None:
    """Test that enum values are collected by type name."""
    assert tables_to_diagram(tables)["enum_data"] == {"status": ["active", "inactive"]}


def test_empty_schema() -> None:
    """Test that no tables give an empty document."""
    assert tables_to_diagram([]) == {
        "entities": [],
        "relationships": [],
        "enum_data": {},
        "source": "",
    }


def test_describe_column() -> None:
    """Test the attribute string of a primary key column."""
    column = _column("id")
    column["is_primary_key"] = True
    column["is_nullable"] = False
    assert describe_column(column) == "PK: id (int) NOT NULL"
