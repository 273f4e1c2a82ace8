"""Scanner module for file discovery, reading and import extraction."""

from .discovery import iter_files, scan_roots
from .reader import read_sources
from .parser import scan_statements, extract_imports
from .resolver import resolve_import
from .builder import build_graph

__all__ = [
    "iter_files",
    "scan_roots",
    "read_sources",
    "scan_statements",
    "extract_imports",
    "resolve_import",
    "build_graph",
]
