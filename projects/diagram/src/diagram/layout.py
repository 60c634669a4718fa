"""Loading of grid layout settings."""

from pathlib import Path
from tomllib import load

from diagram.schema_types import LayoutConfig

LAYOUT_FILE = Path(__file__).parent / "layout.toml"


def _read_layout(path: Path) -> dict[str, object]:
    with path.open("rb") as f:
        layout = load(f).get("layout", {})
    if not isinstance(layout, dict):
        msg = f"Layout section must be a table, got {layout!r}"
        raise ValueError(msg)
    return layout


def _validated(key: str, value: object) -> int:
    """Return a layout value, rejecting non-integers and out of range values."""
    minimum = 0 if key == "margin" else 1
    if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
        msg = f"Layout setting {key} must be an integer >= {minimum}, got {value!r}"
        raise ValueError(msg)
    return value


def load_layout(path: Path | None = None) -> LayoutConfig:
    """Load the default layout, overlaid with the [layout] table of a TOML file."""
    settings = _read_layout(LAYOUT_FILE)
    if path is not None:
        overrides = _read_layout(path)
        if unknown := overrides.keys() - settings.keys():
            msg = f"Unknown layout setting(s): {', '.join(sorted(unknown))}"
            raise ValueError(msg)
        settings |= overrides

    values = {key: _validated(key, value) for key, value in settings.items()}
    return {
        "margin": values["margin"],
        "x_spacing": values["x_spacing"],
        "y_spacing": values["y_spacing"],
        "max_per_row": values["max_per_row"],
    }
