"""Storage backends for scanned files, imports, declarations and exports."""

from pathlib import Path
from typing import Optional

from .base import StoreStats, StyleStore
from .memory import MemoryStore
from .sqlite import SqliteStore


def open_store(database_path: Optional[Path] = None) -> StyleStore:
    """Open the SQLite store at `database_path`, or an in-memory store when unset."""
    if database_path is None:
        return MemoryStore()
    return SqliteStore(database_path)


__all__ = ["StoreStats", "StyleStore", "MemoryStore", "SqliteStore", "open_store"]
