"""ER diagram document generation package."""

from diagram.document import DiagramFormatError, dump_diagram, load_diagram
from diagram.layout import load_layout
from diagram.main import describe_column, grid_position, tables_to_diagram
from diagram.schema_types import DiagramSchema, LayoutConfig

__all__ = [
    "DiagramFormatError",
    "DiagramSchema",
    "LayoutConfig",
    "describe_column",
    "dump_diagram",
    "grid_position",
    "load_diagram",
    "load_layout",
    "tables_to_diagram",
]
