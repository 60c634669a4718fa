"""Traditional SQL dialect: CREATE TYPE ... AS ENUM and CREATE TABLE statements.

Known limitations of the block scanner:
- the table body ends at the first ")" followed by ";" with no ")" in between,
  so nested parentheses beyond simple type precision can end a block early
- the body is split on every comma, so decimal(10,2) becomes two fragments
  and the second one ("2) NOT NULL") is read as a column named NOT of type NULL
"""

import re
from logging import getLogger

from erdparse.constraints import QUOTED_NAME, WHITESPACE, is_not_null, is_primary_key
from erdparse.enums import propagate_enums, scan_sql_enums
from erdparse.references import drop_dangling_references, foreign_key
from erdparse.types import ColumnDefinition, TableDefinition

logger = getLogger(__name__)

CREATE_TABLE_PATTERN = re.compile(
    r"CREATE\s+TABLE\s+" + QUOTED_NAME + r"\s*\(([\s\S]*?)(?:\)[^)]*?;)",
    re.IGNORECASE,
)

FOREIGN_KEY_PATTERN = re.compile(
    WHITESPACE.join(
        (
            r"(?:FOREIGN\s+KEY|FK)",
            r"\(",
            QUOTED_NAME,
            r"\)",
            r"REFERENCES\s+" + QUOTED_NAME,
            r"\(",
            QUOTED_NAME,
            r"\)",
        ),
    ),
    re.IGNORECASE,
)

COLUMN_PATTERN = re.compile(
    QUOTED_NAME
    + r"\s+(\w+(?:\(\d+(?:,\d+)?\))?)"  # Type with optional precision
    + r"\s*((?:NOT NULL|NN)?)?"
    + r"\s*((?:PRIMARY KEY|PK)?)?",
    re.IGNORECASE,
)


def _parse_column(fragment: str) -> ColumnDefinition | None:
    """Interpret a column fragment, or None when it is not a column."""
    if not (match := COLUMN_PATTERN.search(fragment)):
        return None
    name, column_type = match[1], match[2]
    return {
        "name": name,
        "type": column_type,
        "is_primary_key": is_primary_key(match[4] or "")
        or name.lower().startswith("pk_"),
        "is_nullable": not is_not_null(match[3] or ""),
    }


def _parse_table(name: str, body: str) -> TableDefinition:
    """Build a table from the body of a CREATE TABLE statement."""
    table: TableDefinition = {"name": name, "columns": [], "foreign_keys": []}

    for fragment in (part.strip() for part in body.split(",")):
        if fk_match := FOREIGN_KEY_PATTERN.search(fragment):
            table["foreign_keys"].append(
                foreign_key(fk_match[1], fk_match[2], fk_match[3]),
            )
            continue
        if column := _parse_column(fragment):
            table["columns"].append(column)

    return table


def parse_traditional_sql(text: str) -> list[TableDefinition]:
    """Parse CREATE TABLE statements into table definitions."""
    enums = scan_sql_enums(text)
    tables = [
        _parse_table(match[1], match[2])
        for match in CREATE_TABLE_PATTERN.finditer(text)
    ]
    logger.debug("Parsed %d table(s) from SQL", len(tables))
    drop_dangling_references(tables)
    propagate_enums(tables, enums)
    return tables
