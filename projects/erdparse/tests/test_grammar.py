"""Tests for the grammar-based parser."""

import pytest

from erdparse.grammar import GrammarError, Token, parse_strict, tokenize

SCHEMA = """
// users and their posts
Enum state { active, "on hold" }

Table users as U {
  Note: "Registered accounts"
  id int [pk, nn]
  email varchar(255) [nn, note: "login address"]
  status state
}

Table posts {
  id int [pk]
  author_id int [ref: > users.id]
  editor_id int
  price decimal(10,2)
}

Ref editor: posts.editor_id < users.id
"""


def test_full_schema() -> None:
    """Test aliases, notes, enums and both reference forms."""
    tables = parse_strict(SCHEMA)
    assert tables is not None
    users, posts = tables

    assert users == {
        "name": "users",
        "alias": "U",
        "note": "Registered accounts",
        "attributes": [
            {
                "name": "id",
                "type": "int",
                "is_primary_key": True,
                "is_nullable": False,
                "foreign_key": "posts.author_id",
            },
            {
                "name": "email",
                "type": "varchar(255)",
                "is_primary_key": False,
                "is_nullable": False,
                "note": "login address",
            },
            {
                "name": "status",
                "type": "state",
                "is_primary_key": False,
                "is_nullable": True,
                "enum_values": ["active", "on hold"],
            },
        ],
    }

    attributes = {attribute["name"]: attribute for attribute in posts["attributes"]}
    assert "foreign_key" not in attributes["author_id"]
    assert attributes["editor_id"]["foreign_key"] == "users.id"
    assert attributes["editor_id"]["foreign_key_name"] == "editor"
    assert attributes["price"]["type"] == "decimal(10,2)"


def test_reference_before_tables() -> None:
    """Test that a Ref may precede the tables it names."""
    text = """
    Ref: posts.user_id < users.id
    Table posts {
      user_id int
    }
    Table users {
      id int [pk]
    }
    """
    tables = parse_strict(text)
    assert tables is not None
    assert tables[0]["attributes"][0]["foreign_key"] == "users.id"
    assert "foreign_key_name" not in tables[0]["attributes"][0]


def test_reference_to_unknown_attribute_is_dropped() -> None:
    """Test that a reference whose source is missing is silently skipped."""
    text = """
    Table users {
      id int [pk]
    }
    Ref: ghosts.id < users.id
    Ref: users.missing < users.id
    """
    tables = parse_strict(text)
    assert tables is not None
    assert "foreign_key" not in tables[0]["attributes"][0]


def test_state_does_not_leak_between_calls() -> None:
    """Test that enums and references belong to a single parse."""
    first = """
    Enum state { active }
    Table users {
      id int
      status state
    }
    Ref: users.id < users.status
    """
    second = """
    Table users {
      id int
      status state
    }
    """
    assert parse_strict(first) is not None
    tables = parse_strict(second)
    assert tables is not None
    for attribute in tables[0]["attributes"]:
        assert "enum_values" not in attribute
        assert "foreign_key" not in attribute


def test_empty_document() -> None:
    """Test that a document without declarations yields no tables."""
    assert parse_strict("") == []
    assert parse_strict("// nothing here\n") == []


@pytest.mark.parametrize(
    "text",
    [
        pytest.param("Table users {\n  id\n}", id="missing-type"),
        pytest.param("CREATE TABLE users (id INT);", id="sql"),
        pytest.param("Table users {\n  id int @\n}", id="bad-character"),
        pytest.param("Table users {\n  id int [unique]\n}", id="unknown-property"),
        pytest.param("Table users {\n  price decimal(a)\n}", id="bad-size"),
        pytest.param("Table users {\n  id int\n", id="unterminated"),
        pytest.param(
            'Table users {\n  Note: "a"\n  Note: "b"\n}',
            id="second-note",
        ),
        pytest.param("Ref: users.id - posts.id", id="dash-arrow"),
    ],
)
def test_invalid_documents_return_none(text: str) -> None:
    """Test that any grammar mismatch makes the whole parse fail."""
    assert parse_strict(text) is None


def test_tokenize_skips_comments() -> None:
    """Test that whitespace and line comments produce no tokens."""
    assert list(tokenize('Note: "x" // trailing\n}')) == [
        Token("word", "Note", 0),
        Token("punct", ":", 4),
        Token("string", '"x"', 6),
        Token("punct", "}", 22),
    ]


def test_tokenize_reports_position() -> None:
    """Test that unexpected characters raise with their offset."""
    with pytest.raises(GrammarError) as excinfo:
        list(tokenize("id int @"))
    assert excinfo.value.position == 7
