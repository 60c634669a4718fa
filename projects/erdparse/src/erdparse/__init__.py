"""Schema description parsing for ER diagrams."""

from erdparse.detection import detect_dialect
from erdparse.grammar import GrammarError, parse_strict
from erdparse.main import parse_schema
from erdparse.types import (
    DEFAULT_RELATION_TYPE,
    ColumnDefinition,
    Dialect,
    ForeignKeyDefinition,
    RelationType,
    StrictAttribute,
    StrictTable,
    TableDefinition,
    relation_type,
)

__all__ = [
    "DEFAULT_RELATION_TYPE",
    "ColumnDefinition",
    "Dialect",
    "ForeignKeyDefinition",
    "GrammarError",
    "RelationType",
    "StrictAttribute",
    "StrictTable",
    "TableDefinition",
    "detect_dialect",
    "parse_schema",
    "parse_strict",
    "relation_type",
]
