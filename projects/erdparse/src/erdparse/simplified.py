"""Simplified shorthand dialect: Table Name { col type [options] } blocks."""

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
from erdparse.enums import propagate_enums, scan_comma_enums
from erdparse.references import (
    attach_foreign_key,
    drop_dangling_references,
    find_table,
    foreign_key,
)
from erdparse.types import ColumnDefinition, ForeignKeyDefinition, TableDefinition

logger = getLogger(__name__)

TABLE_PATTERN = re.compile(r"Table\s+(\w+)\s*\{([^}]*)\}")
COLUMN_PATTERN = re.compile(NAME + r"\s+(\w+(?:\(\d+\))?)" + WHITESPACE + OPTIONS)
ARROW = r"([<>])"
INLINE_REF_PATTERN = re.compile(
    r"(?:ref:|fk:)?" + WHITESPACE.join(("", NAME, ARROW, DOTTED)),
    re.IGNORECASE,
)
# col type [ref: > Table.column] binds the reference to the column itself
OPTION_REF_PATTERN = re.compile(
    r"(?:ref|fk)\s*:" + WHITESPACE.join(("", ARROW, DOTTED)),
    re.IGNORECASE,
)
GLOBAL_REF_PATTERN = re.compile(
    r"(?:ref:|fk:)?" + WHITESPACE.join(("", DOTTED, ARROW, DOTTED)),
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


def _parse_inline_reference(
    line: str,
    column: ColumnDefinition | None,
) -> ForeignKeyDefinition | None:
    """Read an inline reference; only ">" registers a foreign key."""
    if match := INLINE_REF_PATTERN.search(line):
        local_column, direction, table, target = match.groups()
    elif column and (match := OPTION_REF_PATTERN.search(line)):
        local_column = column["name"]
        direction, table, target = match.groups()
    else:
        return None
    if direction != ">":
        return None
    return foreign_key(local_column, table, target, "one-to-many")


def _parse_table(name: str, body: str) -> TableDefinition:
    table: TableDefinition = {"name": name, "columns": [], "foreign_keys": []}

    for line in (raw.strip() for raw in body.split("\n")):
        if not line:
            continue
        # Column and reference checks are independent, a line can yield both
        column = _parse_column(line)
        if column:
            table["columns"].append(column)
        if key := _parse_inline_reference(line, column):
            table["foreign_keys"].append(key)

    return table


def _resolve_global_references(text: str, tables: list[TableDefinition]) -> None:
    """Bind Table.column <|> Table.column declarations found anywhere in the text."""
    for match in GLOBAL_REF_PATTERN.finditer(text):
        left_table, left_column, direction, right_table, right_column = match.groups()
        if not (find_table(tables, left_table) and find_table(tables, right_table)):
            logger.debug("Dropped reference %s: unknown table", match[0].strip())
            continue
        if direction == ">":
            attach_foreign_key(
                tables,
                left_table,
                foreign_key(left_column, right_table, right_column, "one-to-many"),
            )
        else:
            attach_foreign_key(
                tables,
                right_table,
                foreign_key(right_column, left_table, left_column, "one-to-many"),
            )


def parse_simplified(text: str) -> list[TableDefinition]:
    """Parse the simplified Table Name { ... } notation."""
    enums = scan_comma_enums(text)
    tables = [
        _parse_table(match[1], match[2]) for match in TABLE_PATTERN.finditer(text)
    ]
    logger.debug("Parsed %d table(s) from shorthand", len(tables))
    _resolve_global_references(text, tables)
    drop_dangling_references(tables)
    propagate_enums(tables, enums)
    return tables
