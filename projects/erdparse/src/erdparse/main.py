"""Main module for schema description parsing."""

from collections.abc import Callable

from erdparse.dbml import parse_dbml
from erdparse.detection import detect_dialect
from erdparse.simplified import parse_simplified
from erdparse.traditional import parse_traditional_sql
from erdparse.types import Dialect, TableDefinition

DIALECT_PARSERS: dict[Dialect, Callable[[str], list[TableDefinition]]] = {
    "sql": parse_traditional_sql,
    "dbml": parse_dbml,
    "simplified": parse_simplified,
}


def parse_schema(text: str, dialect: Dialect | None = None) -> list[TableDefinition]:
    """Parse a schema description into table definitions.

    The dialect is detected from the text unless given. Never raises on
    malformed input; unmatched blocks and dangling references are skipped.
    """
    try:
        parser = DIALECT_PARSERS[dialect or detect_dialect(text)]
    except KeyError as err:
        msg = f"Unknown dialect: {dialect}"
        raise ValueError(msg) from err
    return parser(text)
