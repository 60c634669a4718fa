"""Command line interface for ERD Toolkit."""

import logging
import sys
from json import dumps
from pathlib import Path
from typing import Literal, TypeAlias

from cyclopts import App
from diagram import (
    DiagramFormatError,
    DiagramSchema,
    dump_diagram,
    load_diagram,
    load_layout,
    tables_to_diagram,
)
from erdparse import (
    StrictTable,
    TableDefinition,
    detect_dialect,
    parse_schema,
    parse_strict,
    relation_type,
)
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

app = App(help="ERD Toolkit CLI tool")

Format: TypeAlias = Literal["table", "json"]

DialectOption: TypeAlias = Literal["auto", "sql", "dbml", "simplified"]

console = Console()
err_console = Console(stderr=True)

STDIN = Path("-")


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[bold red]Error:[/] {escape(message)}")


def print_success(message: str) -> None:
    """Print success message to stderr."""
    err_console.print(f"[bold green]✓[/] {escape(message)}")


def print_info(message: str) -> None:
    """Print info message to stderr."""
    err_console.print(f"[bold blue]i[/] {escape(message)}")


def configure_logging(*, verbose: bool) -> None:
    """Send debug logging to stderr when verbose output is requested."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


def read_text(location: Path) -> str:
    """Read a file, or stdin when the location is '-'."""
    if location == STDIN:
        return sys.stdin.read()
    if not location.is_file():
        print_error(f"File does not exist: {location}")
        sys.exit(1)
    try:
        return location.read_text(encoding="utf-8")
    except (PermissionError, OSError, UnicodeDecodeError) as e:
        print_error(f"Cannot read {location} ({e})")
        sys.exit(1)


def write_output(text: str, output: Path | None) -> None:
    """Write text to a file, or to stdout when no file is given."""
    if output is None:
        sys.stdout.write(text)
        return
    try:
        output.write_text(text, encoding="utf-8")
    except (PermissionError, OSError) as e:
        print_error(f"Failed to write output file: {output} ({e})")
        sys.exit(1)
    print_success(f"Written to {output}")


def format_tables(tables: list[TableDefinition]) -> None:
    """Format parsed tables as rich tables."""
    if not tables:
        console.print("No tables found.")
        return

    for table in tables:
        view = Table(title=table["name"])
        view.add_column("Column", style="bold cyan")
        view.add_column("Type")
        view.add_column("PK")
        view.add_column("Nullable")
        view.add_column("Enum values")
        for column in table["columns"]:
            view.add_row(
                column["name"],
                column["type"],
                "✓" if column["is_primary_key"] else "",
                "✓" if column["is_nullable"] else "",
                ", ".join(column.get("enum_values", [])),
            )
        console.print(view)

        if table["foreign_keys"]:
            keys = Table(title=f"{table['name']} foreign keys")
            keys.add_column("Column", style="bold cyan")
            keys.add_column("References")
            keys.add_column("Relation", style="bold yellow")
            for key in table["foreign_keys"]:
                keys.add_row(
                    key["column"],
                    f"{key['reference_table']}.{key['reference_column']}",
                    relation_type(key),
                )
            console.print(keys)


def format_strict_tables(tables: list[StrictTable]) -> None:
    """Format grammar-parsed tables as rich tables."""
    for table in tables:
        title = table["name"]
        if alias := table.get("alias"):
            title += f" (as {alias})"
        view = Table(title=title, caption=table.get("note"))
        view.add_column("Attribute", style="bold cyan")
        view.add_column("Type")
        view.add_column("PK")
        view.add_column("Nullable")
        view.add_column("Foreign key")
        view.add_column("Note")
        for attribute in table["attributes"]:
            view.add_row(
                attribute["name"],
                attribute["type"],
                "✓" if attribute["is_primary_key"] else "",
                "✓" if attribute["is_nullable"] else "",
                attribute.get("foreign_key", ""),
                attribute.get("note", ""),
            )
        console.print(view)


def format_diagram_summary(diagram: DiagramSchema) -> None:
    """Format a diagram document summary as a rich table."""
    table = Table(title="Diagram Summary")
    table.add_column("Entity", style="bold cyan")
    table.add_column("Attributes", style="bold yellow")
    table.add_column("Position")
    for entity in diagram["entities"]:
        position = entity["position"]
        table.add_row(
            entity["name"],
            str(len(entity["attributes"])),
            f"({position['x']}, {position['y']})",
        )
    console.print(table)
    console.print(f"Relationships: {len(diagram['relationships'])}")
    console.print(f"Enums: {', '.join(diagram['enum_data']) or 'none'}")


@app.command
def parse(
    schema: Path,
    fmt: Format = "table",
    *,
    dialect: DialectOption = "auto",
    strict: bool = False,
    verbose: bool = False,
) -> None:
    """Parse a schema description into table definitions.

    --strict uses the single grammar and cannot be combined with --dialect.
    """
    configure_logging(verbose=verbose)
    if strict and dialect != "auto":
        print_error("--strict cannot be combined with --dialect")
        sys.exit(1)
    text = read_text(schema)

    if strict:
        strict_tables = parse_strict(text)
        if strict_tables is None:
            print_error("Schema does not match the strict grammar")
            sys.exit(1)
        if fmt == "json":
            sys.stdout.write(dumps(strict_tables))
        elif fmt == "table":
            format_strict_tables(strict_tables)
        return

    tables = parse_schema(text, None if dialect == "auto" else dialect)
    if fmt == "json":
        sys.stdout.write(dumps(tables))
    elif fmt == "table":
        format_tables(tables)


@app.command(name="dialect")
def show_dialect(schema: Path, *, verbose: bool = False) -> None:
    """Show which dialect a schema description is parsed with."""
    configure_logging(verbose=verbose)
    sys.stdout.write(f"{detect_dialect(read_text(schema))}\n")


@app.command
def diagram(
    schema: Path,
    *,
    layout: Path | None = None,
    output: Path | None = None,
    verbose: bool = False,
) -> None:
    """Generate a diagram document from a schema description."""
    configure_logging(verbose=verbose)
    text = read_text(schema)

    try:
        layout_config = load_layout(layout)
    except (ValueError, OSError) as e:
        print_error(f"Invalid layout configuration: {e}")
        sys.exit(1)

    tables = parse_schema(text)
    if not tables:
        print_info("No tables found in schema")
    print_info(f"Tables: {len(tables)}")

    write_output(dump_diagram(tables_to_diagram(tables, text, layout_config)), output)


@app.command
def inspect(document: Path, *, verbose: bool = False) -> None:
    """Validate a diagram document and summarize it."""
    configure_logging(verbose=verbose)
    try:
        diagram_data = load_diagram(read_text(document))
    except DiagramFormatError as e:
        print_error(str(e))
        sys.exit(1)

    format_diagram_summary(diagram_data)
    print_success("Diagram document is valid")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
