"""Import graph model and resolution ordering."""

from .model import FileStatus, ImportEdge, ImportGraph, ImportType, SourceFile
from .order import Cycle, Resolution, resolve_order

__all__ = [
    "FileStatus",
    "ImportEdge",
    "ImportGraph",
    "ImportType",
    "SourceFile",
    "Cycle",
    "Resolution",
    "resolve_order",
]
