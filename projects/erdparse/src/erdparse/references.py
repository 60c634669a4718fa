"""Binding of relationship declarations to parsed tables."""

from collections.abc import Iterable
from logging import getLogger

from erdparse.types import ForeignKeyDefinition, RelationType, TableDefinition

logger = getLogger(__name__)


def find_table(tables: Iterable[TableDefinition], name: str) -> TableDefinition | None:
    """Return the first table with the given name."""
    return next((table for table in tables if table["name"] == name), None)


def foreign_key(
    column: str,
    reference_table: str,
    reference_column: str,
    relation_type: RelationType | None = None,
) -> ForeignKeyDefinition:
    """Build a foreign key record, leaving the relation type out when unspecified."""
    key: ForeignKeyDefinition = {
        "column": column,
        "reference_table": reference_table,
        "reference_column": reference_column,
    }
    if relation_type is not None:
        key["relation_type"] = relation_type
    return key


def attach_foreign_key(
    tables: Iterable[TableDefinition],
    owner: str,
    key: ForeignKeyDefinition,
) -> bool:
    """Append a foreign key to the owning table if it was parsed.

    References to unknown tables are dropped without raising.
    """
    if table := find_table(tables, owner):
        table["foreign_keys"].append(key)
        return True
    _log_dropped(owner, key, "unknown table")
    return False


def drop_dangling_references(tables: list[TableDefinition]) -> None:
    """Remove foreign keys whose referenced table or column was never parsed.

    Runs once every table is known, so forward and backward references are
    treated alike.
    """
    columns: dict[str, set[str]] = {}
    for table in tables:
        columns.setdefault(
            table["name"],
            {column["name"] for column in table["columns"]},
        )

    for table in tables:
        kept: list[ForeignKeyDefinition] = []
        for key in table["foreign_keys"]:
            if (known := columns.get(key["reference_table"])) is None:
                _log_dropped(table["name"], key, "unknown table")
            elif key["reference_column"] not in known:
                _log_dropped(table["name"], key, "unknown column")
            else:
                kept.append(key)
        table["foreign_keys"] = kept


def _log_dropped(owner: str, key: ForeignKeyDefinition, reason: str) -> None:
    logger.debug(
        "Dropped reference %s.%s -> %s.%s: %s",
        owner,
        key["column"],
        key["reference_table"],
        key["reference_column"],
        reason,
    )
