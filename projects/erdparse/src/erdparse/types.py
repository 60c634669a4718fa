"""TypedDict schemas for parsed table definitions."""

from __future__ import annotations

from typing import Literal, NotRequired, TypeAlias, TypedDict

Dialect: TypeAlias = Literal["sql", "dbml", "simplified"]

RelationType: TypeAlias = Literal["one-to-one", "one-to-many", "many-to-many"]

EnumRegistry: TypeAlias = dict[str, list[str]]

DEFAULT_RELATION_TYPE: RelationType = "one-to-many"


class ColumnDefinition(TypedDict):
    """Schema for a parsed column."""

    name: str
    type: str  # Raw type token, e.g. varchar(255)
    is_primary_key: bool
    is_nullable: bool
    is_enum: NotRequired[bool]
    enum_values: NotRequired[list[str]]
    note: NotRequired[str]


class ForeignKeyDefinition(TypedDict):
    """Schema for a foreign key owned by a table."""

    column: str  # Column in the owning table
    reference_table: str
    reference_column: str
    relation_type: NotRequired[RelationType]


class TableDefinition(TypedDict):
    """Schema for a parsed table."""

    name: str
    columns: list[ColumnDefinition]
    foreign_keys: list[ForeignKeyDefinition]


class StrictAttribute(TypedDict):
    """Attribute produced by the grammar-based parser."""

    name: str
    type: str
    note: NotRequired[str]
    is_primary_key: bool
    is_nullable: bool
    foreign_key: NotRequired[str]  # Dotted Table.column path
    foreign_key_name: NotRequired[str]
    enum_values: NotRequired[list[str]]


class StrictTable(TypedDict):
    """Table produced by the grammar-based parser."""

    name: str
    alias: NotRequired[str]
    note: NotRequired[str]
    attributes: list[StrictAttribute]


def relation_type(foreign_key: ForeignKeyDefinition) -> RelationType:
    """Return the relation type of a foreign key, defaulting to one-to-many."""
    return foreign_key.get("relation_type", DEFAULT_RELATION_TYPE)
