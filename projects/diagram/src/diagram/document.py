"""JSON import and export of diagram documents."""

from __future__ import annotations

from json import JSONDecodeError, dumps, loads
from logging import getLogger
from typing import Any

from diagram.schema_types import DiagramSchema, EntitySchema, RelationshipSchema

logger = getLogger(__name__)


class DiagramFormatError(ValueError):
    """Raised when an imported diagram document is malformed."""


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _validate_entity(entity: Any) -> EntitySchema:  # noqa: ANN401
    position = entity.get("position") if isinstance(entity, dict) else None
    if (
        not isinstance(entity, dict)
        or not entity.get("id")
        or not entity.get("name")
        or not isinstance(entity.get("attributes"), list)
        or not isinstance(position, dict)
        or not _is_number(position.get("x"))
        or not _is_number(position.get("y"))
    ):
        msg = "Invalid entity format in imported data"
        raise DiagramFormatError(msg)
    validated: EntitySchema = entity
    return validated


def _validate_relationship(relationship: Any) -> RelationshipSchema:  # noqa: ANN401
    if not isinstance(relationship, dict) or not all(
        relationship.get(key) for key in ("id", "from", "to", "type")
    ):
        msg = "Invalid relationship format in imported data"
        raise DiagramFormatError(msg)
    validated: RelationshipSchema = relationship
    return validated


def load_diagram(text: str) -> DiagramSchema:
    """Parse and validate a diagram document from JSON text."""
    try:
        data = loads(text)
    except JSONDecodeError as err:
        msg = f"Invalid JSON: {err}"
        raise DiagramFormatError(msg) from err

    if not isinstance(data, dict):
        msg = "Invalid diagram format: expected a JSON object"
        raise DiagramFormatError(msg)

    entities = data.get("entities")
    relationships = data.get("relationships")
    if not isinstance(entities, list) or not isinstance(relationships, list):
        msg = "Invalid diagram format: entities and relationships must be lists"
        raise DiagramFormatError(msg)

    enum_data = data.get("enum_data")
    if not isinstance(enum_data, dict):
        enum_data = {}
    source = data.get("source")
    if not isinstance(source, str):
        source = ""

    logger.debug(
        "Loaded diagram with %d entities and %d relationships",
        len(entities),
        len(relationships),
    )
    return {
        "entities": [_validate_entity(entity) for entity in entities],
        "relationships": [_validate_relationship(rel) for rel in relationships],
        "enum_data": enum_data,
        "source": source,
    }


def dump_diagram(diagram: DiagramSchema) -> str:
    """Serialize a diagram document to indented JSON."""
    return dumps(diagram, indent=2)
