"""Main module for diagram document generation."""

from collections.abc import Sequence

from erdparse import ColumnDefinition, TableDefinition, relation_type

from diagram.layout import load_layout
from diagram.schema_types import (
    DiagramSchema,
    EntitySchema,
    LayoutConfig,
    Position,
    RelationshipSchema,
)


def entity_id(table_name: str) -> str:
    """Entity id used for a table."""
    return f"entity-{table_name}"


def describe_column(column: ColumnDefinition) -> str:
    """Render a column as an entity attribute string, e.g. PK: id (int) NOT NULL."""
    description = column["name"]
    if column["is_primary_key"]:
        description = f"PK: {description}"
    description += f" ({column['type']})"
    if not column["is_nullable"]:
        description += " NOT NULL"
    return description


def grid_position(index: int, layout: LayoutConfig) -> Position:
    """Position of the index-th table on the layout grid."""
    row, col = divmod(index, layout["max_per_row"])
    return {
        "x": layout["margin"] + col * layout["x_spacing"],
        "y": layout["margin"] + row * layout["y_spacing"],
    }


def _build_entity(
    index: int,
    table: TableDefinition,
    layout: LayoutConfig,
) -> EntitySchema:
    return {
        "id": entity_id(table["name"]),
        "name": table["name"],
        "attributes": [describe_column(column) for column in table["columns"]],
        "position": grid_position(index, layout),
    }


def _column_index(table: TableDefinition, column_name: str) -> int:
    return next(
        (i for i, col in enumerate(table["columns"]) if col["name"] == column_name),
        -1,
    )


def _build_relationships(
    tables: Sequence[TableDefinition],
    entities: Sequence[EntitySchema],
) -> list[RelationshipSchema]:
    """Turn resolvable foreign keys into relationships.

    The source attribute of each relationship gets a [ref: > Table.column]
    suffix. Keys whose columns cannot be found are skipped.
    """
    relationships: list[RelationshipSchema] = []
    for table, entity in zip(tables, entities, strict=True):
        for index, key in enumerate(table["foreign_keys"]):
            target = next(
                (t for t in tables if t["name"] == key["reference_table"]),
                None,
            )
            if target is None:
                continue
            source_index = _column_index(table, key["column"])
            target_index = _column_index(target, key["reference_column"])
            if source_index == -1 or target_index == -1:
                continue

            entity["attributes"][source_index] += (
                f" [ref: > {key['reference_table']}.{key['reference_column']}]"
            )
            relationships.append(
                {
                    "id": f"relationship-{table['name']}-{index}",
                    "from": {
                        "entity_id": entity["id"],
                        "attribute_index": source_index,
                    },
                    "to": {
                        "entity_id": entity_id(target["name"]),
                        "attribute_index": target_index,
                    },
                    "type": relation_type(key),
                },
            )
    return relationships


def _collect_enums(tables: Sequence[TableDefinition]) -> dict[str, list[str]]:
    return {
        column["type"]: list(column["enum_values"])
        for table in tables
        for column in table["columns"]
        if column.get("is_enum") and "enum_values" in column
    }


def tables_to_diagram(
    tables: Sequence[TableDefinition],
    source: str = "",
    layout: LayoutConfig | None = None,
) -> DiagramSchema:
    """Generate a diagram document from parsed tables."""
    layout = layout or load_layout()
    entities = [_build_entity(i, table, layout) for i, table in enumerate(tables)]

    return {
        "entities": entities,
        "relationships": _build_relationships(tables, entities),
        "enum_data": _collect_enums(tables),
        "source": source,
    }
