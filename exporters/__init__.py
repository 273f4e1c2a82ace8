"""Exporters for converting run results to output formats."""

from .tailwind_exporter import to_theme, to_tailwind_config
from .css_exporter import to_css
from .ascii_exporter import to_ascii
from .json_exporter import to_json

__all__ = ["to_theme", "to_tailwind_config", "to_css", "to_ascii", "to_json"]
