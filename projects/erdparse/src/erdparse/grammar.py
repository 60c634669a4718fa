"""Grammar-based schema parser with deferred reference resolution.

Grammar::

    schema     := (table | enum | relation)*
    table      := "Table" NAME ("as" NAME)? "{" (note | attribute)* "}"
    note       := "Note" ":" STRING
    enum       := "Enum" NAME "{" ((NAME | STRING) ","?)* "}"
    relation   := "Ref" NAME? ":" PATH ("<" | ">") PATH
    attribute  := NAME type ("[" property ("," property)* "]")?
    property   := "pk" | "nn" | "note" ":" STRING | "ref" ":" ("<" | ">") PATH
    type       := NAME ("(" NUMBER ("," NUMBER)? ")")?
    PATH       := NAME "." NAME

A table holds at most one note. ``//`` starts a comment running to the end of
the line. References are collected while parsing and bound only once every
table is known, so declaration order does not matter.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, NamedTuple

from erdparse.types import EnumRegistry, StrictAttribute, StrictTable

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = getLogger(__name__)

TOKEN_PATTERN = re.compile(
    r"""
    (?P<skip>\s+|//[^\n]*)
    |(?P<string>"[^"\n]*"|'[^'\n]*')
    |(?P<word>\w+)
    |(?P<punct>[{}\[\](),:.<>])
    """,
    re.VERBOSE,
)

ARROWS = ("<", ">")


class GrammarError(ValueError):
    """Raised when the input does not match the schema grammar."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} at offset {position}")
        self.position = position


class Token(NamedTuple):
    """A lexical token with its offset in the source text."""

    kind: str
    text: str
    position: int


class PendingReference(NamedTuple):
    """Reference collected during parsing and bound after it."""

    name: str
    source: str  # Table.column receiving the foreign key
    target: str


@dataclass
class ParseContext:
    """Scratch state owned by a single parse call."""

    references: list[PendingReference] = field(default_factory=list)
    enums: EnumRegistry = field(default_factory=dict)
    last_table: str = ""


def tokenize(text: str) -> Iterator[Token]:
    """Split text into tokens, dropping whitespace and comments."""
    position = 0
    while position < len(text):
        match = TOKEN_PATTERN.match(text, position)
        if not match:
            msg = f"Unexpected character {text[position]!r}"
            raise GrammarError(msg, position)
        kind = match.lastgroup or ""
        if kind != "skip":
            yield Token(kind, match[0], position)
        position = match.end()


class _Parser:
    """Recursive-descent parser over the token stream."""

    def __init__(self, text: str, context: ParseContext) -> None:
        self.tokens = list(tokenize(text))
        self.index = 0
        self.end = len(text)
        self.context = context

    def peek(self, offset: int = 0) -> Token | None:
        index = self.index + offset
        return self.tokens[index] if index < len(self.tokens) else None

    def at(self, text: str, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token is not None and token.kind != "string" and token.text == text

    def advance(self) -> Token:
        token = self.peek()
        if token is None:
            msg = "Unexpected end of input"
            raise GrammarError(msg, self.end)
        self.index += 1
        return token

    def expect(self, text: str) -> Token:
        token = self.advance()
        if token.kind == "string" or token.text != text:
            msg = f"Expected {text!r}, found {token.text!r}"
            raise GrammarError(msg, token.position)
        return token

    def expect_kind(self, kind: str) -> Token:
        token = self.advance()
        if token.kind != kind:
            msg = f"Expected {kind}, found {token.text!r}"
            raise GrammarError(msg, token.position)
        return token

    def expect_arrow(self) -> str:
        token = self.advance()
        if token.text not in ARROWS:
            msg = f"Expected '<' or '>', found {token.text!r}"
            raise GrammarError(msg, token.position)
        return token.text

    def path(self) -> str:
        table = self.expect_kind("word").text
        self.expect(".")
        column = self.expect_kind("word").text
        return f"{table}.{column}"

    def schema(self) -> list[StrictTable]:
        tables: list[StrictTable] = []
        while token := self.peek():
            if self.at("Table"):
                tables.append(self.table())
            elif self.at("Enum"):
                self.enum()
            elif self.at("Ref"):
                self.relation()
            else:
                msg = f"Expected Table, Enum or Ref, found {token.text!r}"
                raise GrammarError(msg, token.position)
        return tables

    def table(self) -> StrictTable:
        self.expect("Table")
        name = self.expect_kind("word").text
        self.context.last_table = name
        table: StrictTable = {"name": name, "attributes": []}
        if self.at("as"):
            self.advance()
            table["alias"] = self.expect_kind("word").text
        self.expect("{")
        while not self.at("}"):
            if self.at("Note") and self.at(":", 1):
                position = self.advance().position
                if "note" in table:
                    msg = "Table note declared twice"
                    raise GrammarError(msg, position)
                self.expect(":")
                table["note"] = _unquote(self.expect_kind("string").text)
            else:
                table["attributes"].append(self.attribute())
        self.expect("}")
        return table

    def enum(self) -> None:
        self.expect("Enum")
        name = self.expect_kind("word").text
        self.expect("{")
        values: list[str] = []
        while not self.at("}"):
            token = self.advance()
            if token.kind == "word":
                values.append(token.text)
            elif token.kind == "string":
                values.append(_unquote(token.text))
            else:
                msg = f"Expected enum value, found {token.text!r}"
                raise GrammarError(msg, token.position)
            if self.at(","):
                self.advance()
        self.expect("}")
        self.context.enums[name] = values

    def relation(self) -> None:
        self.expect("Ref")
        name = "" if self.at(":") else self.expect_kind("word").text
        self.expect(":")
        left = self.path()
        arrow = self.expect_arrow()
        right = self.path()
        if arrow == "<":
            self.context.references.append(PendingReference(name, left, right))
        else:
            self.context.references.append(PendingReference(name, right, left))

    def column_type(self) -> str:
        column_type = self.expect_kind("word").text
        if not self.at("("):
            return column_type
        self.advance()
        sizes = [self.expect_kind("word").text]
        if self.at(","):
            self.advance()
            sizes.append(self.expect_kind("word").text)
        self.expect(")")
        for size in sizes:
            if not size.isdigit():
                msg = f"Expected number in type {column_type!r}, found {size!r}"
                raise GrammarError(msg, self.tokens[self.index - 1].position)
        return f"{column_type}({','.join(sizes)})"

    def attribute(self) -> StrictAttribute:
        name = self.expect_kind("word").text
        attribute: StrictAttribute = {
            "name": name,
            "type": self.column_type(),
            "is_primary_key": False,
            "is_nullable": True,
        }
        if not self.at("["):
            return attribute
        self.advance()
        self.property(attribute)
        while self.at(","):
            self.advance()
            self.property(attribute)
        self.expect("]")
        return attribute

    def property(self, attribute: StrictAttribute) -> None:
        token = self.advance()
        keyword = token.text if token.kind == "word" else ""
        match keyword:
            case "pk":
                attribute["is_primary_key"] = True
            case "nn":
                attribute["is_nullable"] = False
            case "note":
                self.expect(":")
                attribute["note"] = _unquote(self.expect_kind("string").text)
            case "ref":
                self.expect(":")
                arrow = self.expect_arrow()
                target = self.path()
                local = f"{self.context.last_table}.{attribute['name']}"
                if arrow == "<":
                    self.context.references.append(PendingReference("", local, target))
                else:
                    self.context.references.append(PendingReference("", target, local))
            case _:
                msg = f"Unknown attribute property {token.text!r}"
                raise GrammarError(msg, token.position)


def _unquote(text: str) -> str:
    return text[1:-1]


def _find_attribute(tables: list[StrictTable], path: str) -> StrictAttribute | None:
    table_name, _, attribute_name = path.partition(".")
    table = next((t for t in tables if t["name"] == table_name), None)
    if table is None:
        return None
    return next((a for a in table["attributes"] if a["name"] == attribute_name), None)


def resolve_references(tables: list[StrictTable], context: ParseContext) -> None:
    """Write each collected reference onto its source attribute."""
    for name, source, target in context.references:
        if (attribute := _find_attribute(tables, source)) is None:
            logger.debug(
                "Dropped reference %s -> %s: no such attribute",
                source,
                target,
            )
            continue
        attribute["foreign_key"] = target
        if name:
            attribute["foreign_key_name"] = name


def propagate_enum_values(tables: list[StrictTable], context: ParseContext) -> None:
    """Attach enum values to attributes typed with a declared enum."""
    for table in tables:
        for attribute in table["attributes"]:
            if attribute["type"] in context.enums:
                attribute["enum_values"] = list(context.enums[attribute["type"]])


def parse_strict(text: str) -> list[StrictTable] | None:
    """Parse a whole document with the schema grammar.

    Returns None when the document does not match the grammar.
    """
    context = ParseContext()
    try:
        tables = _Parser(text, context).schema()
    except GrammarError as err:
        logger.debug("Schema grammar did not match: %s", err)
        return None
    resolve_references(tables, context)
    propagate_enum_values(tables, context)
    return tables
