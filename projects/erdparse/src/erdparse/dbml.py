"""DBML-like dialect: Enum and Table blocks plus standalone ref: declarations."""

import re
from logging import getLogger

from erdparse.constraints import (
    DOTTED,
    NAME,
    OPTIONS,
    WHITESPACE,
    is_not_null,
    is_primary_key,
)
from erdparse.enums import propagate_enums, scan_line_enums
from erdparse.references import (
    attach_foreign_key,
    drop_dangling_references,
    foreign_key,
)
from erdparse.types import ColumnDefinition, RelationType, TableDefinition

logger = getLogger(__name__)

TABLE_PATTERN = re.compile(r"Table\s+(\w+)\s*\{([^}]*)\}", re.IGNORECASE)
COLUMN_PATTERN = re.compile(
    NAME + r"\s+(\w+(?:\(\d+(?:,\d+)?\))?)" + WHITESPACE + OPTIONS,
)
REF_PATTERN = re.compile(
    r"ref:" + WHITESPACE.join(("", DOTTED, r"([<\->])", DOTTED)),
    re.IGNORECASE,
)


def _parse_column(line: str) -> ColumnDefinition | None:
    if not (match := COLUMN_PATTERN.search(line)):
        return None
    options = match[3] or ""
    return {
        "name": match[1],
        "type": match[2],
        "is_primary_key": is_primary_key(options),
        "is_nullable": not is_not_null(options),
    }


def _parse_table(name: str, body: str) -> TableDefinition:
    stripped = (line.strip() for line in body.split("\n"))
    return {
        "name": name,
        "columns": [
            column for line in stripped if line and (column := _parse_column(line))
        ],
        "foreign_keys": [],
    }


def _resolve_references(text: str, tables: list[TableDefinition]) -> None:
    """Attach ref: A.a <|>|- B.b declarations to the right-hand table B.

    The foreign key always points from B.b back to A.a; only the
    relation type depends on the arrow.
    """
    for match in REF_PATTERN.finditer(text):
        source_table, source_column, arrow, target_table, target_column = (
            match.groups()
        )
        relation: RelationType = "one-to-one" if arrow == "-" else "one-to-many"
        key = foreign_key(target_column, source_table, source_column, relation)
        attach_foreign_key(tables, target_table, key)


def parse_dbml(text: str) -> list[TableDefinition]:
    """Parse DBML-like Enum, Table and ref: declarations."""
    enums = scan_line_enums(text)
    tables = [
        _parse_table(match[1], match[2]) for match in TABLE_PATTERN.finditer(text)
    ]
    logger.debug("Parsed %d table(s) from DBML", len(tables))
    _resolve_references(text, tables)
    drop_dangling_references(tables)
    propagate_enums(tables, enums)
    return tables
