"""TypedDict schemas for the diagram document JSON structure."""

from typing import TypedDict

from erdparse import RelationType


class Position(TypedDict):
    """Canvas position of an entity."""

    x: float
    y: float


class EntitySchema(TypedDict):
    """Schema for a diagram entity (one per table)."""

    id: str
    name: str
    attributes: list[str]  # Display strings, one per column
    position: Position


class Endpoint(TypedDict):
    """One end of a relationship."""

    entity_id: str
    attribute_index: int  # Index into the entity's attributes


# "from" is a keyword, so this one uses the functional syntax
RelationshipSchema = TypedDict(
    "RelationshipSchema",
    {
        "id": str,
        "from": Endpoint,
        "to": Endpoint,
        "type": RelationType,
    },
)


class DiagramSchema(TypedDict):
    """Root schema for a diagram document."""

    entities: list[EntitySchema]
    relationships: list[RelationshipSchema]
    enum_data: dict[str, list[str]]
    source: str  # Schema text the diagram was generated from


class LayoutConfig(TypedDict):
    """Grid layout settings."""

    margin: int
    x_spacing: int
    y_spacing: int
    max_per_row: int
