"""Constraint token checks shared by the regex dialects."""

# Reusable regex components
NAME = r"(\w+)"
QUOTED_NAME = r"[`\"]?(\w+)[`\"]?"  # Identifier inside optional back-ticks or quotes
DOTTED = r"(\w+)\.(\w+)"  # Table.column
WHITESPACE = r"\s*"
OPTIONS = r"(?:\[(.*)\])?"  # Optional bracketed column options

PRIMARY_KEY_MARKERS = ("primary key", "pk", "[pk]")
NOT_NULL_MARKERS = ("not null", "nn", "[nn]")


def _has_marker(text: str, markers: tuple[str, ...]) -> bool:
    lower_text = text.lower()
    return any(marker in lower_text for marker in markers)


def is_primary_key(text: str) -> bool:
    """Check constraint text for a primary key marker.

    Plain substring test, so any option text containing "pk" matches.
    """
    return _has_marker(text, PRIMARY_KEY_MARKERS)


def is_not_null(text: str) -> bool:
    """Check constraint text for a not-null marker."""
    return _has_marker(text, NOT_NULL_MARKERS)
