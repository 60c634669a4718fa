"""Enum declaration scanning and propagation onto columns."""

import re
from collections.abc import Iterable
from logging import getLogger

from erdparse.types import EnumRegistry, TableDefinition

logger = getLogger(__name__)

QUOTES = re.compile(r"['\"]")

SQL_ENUM_PATTERN = re.compile(
    r"CREATE\s+TYPE\s+(\w+)\s+AS\s+ENUM\s*\(\s*((?:'[^']*'(?:\s*,\s*'[^']*')*)\s*)\)",
    re.IGNORECASE,
)
BRACE_ENUM_PATTERN = re.compile(r"enum\s+(\w+)\s*\{\s*([^}]*)\s*\}", re.IGNORECASE)
BLOCK_ENUM_PATTERN = re.compile(r"Enum\s+(\w+)\s*\{([^}]*)\}", re.IGNORECASE)


def scan_sql_enums(text: str) -> EnumRegistry:
    """Collect CREATE TYPE ... AS ENUM declarations."""
    enums: EnumRegistry = {}
    for match in SQL_ENUM_PATTERN.finditer(text):
        values = (
            value.strip().removeprefix("'").removesuffix("'")
            for value in match[2].split(",")
        )
        enums[match[1]] = [value for value in values if value]
    return enums


def scan_comma_enums(text: str) -> EnumRegistry:
    """Collect enum Name { a, b } blocks with comma separated members."""
    enums: EnumRegistry = {}
    for match in BRACE_ENUM_PATTERN.finditer(text):
        values = (QUOTES.sub("", value.strip()) for value in match[2].split(","))
        enums[match[1]] = [value for value in values if value]
    return enums


def scan_line_enums(text: str) -> EnumRegistry:
    """Collect Enum Name { ... } blocks with one member per line."""
    enums: EnumRegistry = {}
    for match in BLOCK_ENUM_PATTERN.finditer(text):
        values = (
            re.sub(r",$", "", QUOTES.sub("", line.strip())).strip()
            for line in match[2].split("\n")
        )
        enums[match[1]] = [value for value in values if value]
    return enums


def propagate_enums(tables: Iterable[TableDefinition], enums: EnumRegistry) -> None:
    """Flag every column whose type names a known enum and attach its values."""
    for table in tables:
        for column in table["columns"]:
            column["is_enum"] = column["type"] in enums
            if column["is_enum"]:
                column["enum_values"] = list(enums[column["type"]])
    if enums:
        logger.debug("Propagated %d enum(s): %s", len(enums), ", ".join(enums))
