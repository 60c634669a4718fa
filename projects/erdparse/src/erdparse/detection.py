"""Dialect detection for schema descriptions."""

from logging import getLogger

from erdparse.types import Dialect

logger = getLogger(__name__)


def detect_dialect(text: str) -> Dialect:
    """Pick the dialect for a schema description.

    Precedence:
    - any case-insensitive "create table" selects traditional SQL
    - otherwise "Enum" or "enum" selects the DBML-like dialect
    - everything else is simplified shorthand
    """
    if "create table" in text.lower():
        dialect: Dialect = "sql"
    elif "Enum" in text or "enum" in text:
        dialect = "dbml"
    else:
        dialect = "simplified"
    logger.debug("Detected %s dialect", dialect)
    return dialect
