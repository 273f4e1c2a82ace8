"""
SQLite-backed StyleStore.

Schema:
- less_files: path, relative path, checksum, size, status, error
- less_imports: importing file, resolved file path (NULL when unresolved),
  raw token, import type, line number
- less_variables: declarations per file, variables and mixins side by side
- tailwind_exports: exported theme configuration (JSON) and stylesheet
"""

import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from graph.model import FileStatus, ImportType, SourceFile
from pipeline.errors import StorageError
from pipeline.log import get_logger
from style.model import Mixin, Variable
from .base import StoreStats


logger = get_logger("storage")

SCHEMA = """
CREATE TABLE IF NOT EXISTS less_files (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    file_name TEXT NOT NULL,
    file_path TEXT NOT NULL UNIQUE,
    relative_path TEXT NOT NULL,
    file_size INTEGER,
    checksum TEXT,
    status TEXT NOT NULL DEFAULT 'pending',
    error_message TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS less_imports (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    parent_file_id INTEGER NOT NULL REFERENCES less_files(id) ON DELETE CASCADE,
    child_file_path TEXT,
    import_path TEXT NOT NULL,
    import_type TEXT NOT NULL DEFAULT 'standard',
    import_line_number INTEGER,
    is_resolved INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS less_variables (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    less_file_id INTEGER NOT NULL REFERENCES less_files(id) ON DELETE CASCADE,
    variable_name TEXT NOT NULL,
    variable_value TEXT,
    is_mixin INTEGER NOT NULL DEFAULT 0,
    mixin_params TEXT,
    line_number INTEGER
);

CREATE TABLE IF NOT EXISTS tailwind_exports (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    export_name TEXT NOT NULL,
    tailwind_config TEXT,
    css_output TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_less_files_status ON less_files(status);
CREATE INDEX IF NOT EXISTS idx_less_imports_parent ON less_imports(parent_file_id);
CREATE INDEX IF NOT EXISTS idx_less_variables_file ON less_variables(less_file_id);
CREATE INDEX IF NOT EXISTS idx_less_variables_name ON less_variables(variable_name);
"""


class SqliteStore:
    """
    StyleStore on a single SQLite connection.

    Use ":memory:" for a throwaway database.
    """

    def __init__(self, db_path: Union[str, Path] = ":memory:"):
        self._db_path = str(db_path)
        try:
            self._conn = sqlite3.connect(self._db_path)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            self._conn.executescript(SCHEMA)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open database '{self._db_path}': {e}") from e
        logger.debug("Opened database %s", self._db_path)

    def store_file(self, source_file: SourceFile) -> int:
        with self._write():
            self._conn.execute(
                """
                INSERT INTO less_files (file_name, file_path, relative_path, file_size, checksum, status)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(file_path) DO UPDATE SET
                    relative_path = excluded.relative_path,
                    file_size = excluded.file_size,
                    checksum = excluded.checksum,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (
                    source_file.name,
                    str(source_file.path),
                    source_file.relative_path,
                    source_file.size,
                    source_file.checksum,
                    source_file.status.value,
                ),
            )
        row = self._conn.execute(
            "SELECT id FROM less_files WHERE file_path = ?", (str(source_file.path),)
        ).fetchone()
        return row["id"]

    def store_variables(self, file_id: int, variables: List[Variable], mixins: List[Mixin]) -> None:
        rows = [(file_id, v.name, v.value, 0, None, v.line) for v in variables]
        rows.extend((file_id, m.name, m.body, 1, m.params, m.line) for m in mixins)
        with self._write():
            self._conn.execute("DELETE FROM less_variables WHERE less_file_id = ?", (file_id,))
            self._conn.executemany(
                """
                INSERT INTO less_variables
                    (less_file_id, variable_name, variable_value, is_mixin, mixin_params, line_number)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                rows,
            )

    def store_import_edge(
        self,
        file_id: int,
        resolved: Optional[Path],
        token: str,
        import_type: ImportType = ImportType.STANDARD,
        line: int = 0,
    ) -> None:
        with self._write():
            self._conn.execute(
                """
                INSERT INTO less_imports
                    (parent_file_id, child_file_path, import_path, import_type, import_line_number, is_resolved)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    file_id,
                    str(resolved) if resolved is not None else None,
                    token,
                    import_type.value,
                    line,
                    int(resolved is not None),
                ),
            )

    def update_file_status(self, file_id: int, status: FileStatus, error: Optional[str] = None) -> None:
        with self._write():
            self._conn.execute(
                """
                UPDATE less_files
                SET status = ?, error_message = ?, updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (status.value, error, file_id),
            )

    def get_stats(self) -> StoreStats:
        row = self._conn.execute(
            """
            SELECT
                COUNT(*) AS total,
                COALESCE(SUM(status = 'processed'), 0) AS processed,
                COALESCE(SUM(status = 'error'), 0) AS errored
            FROM less_files
            """
        ).fetchone()
        return StoreStats(total=row["total"], processed=row["processed"], errored=row["errored"])

    def store_export(self, name: str, config: Dict[str, Any], css: str) -> int:
        with self._write():
            cursor = self._conn.execute(
                "INSERT INTO tailwind_exports (export_name, tailwind_config, css_output) VALUES (?, ?, ?)",
                (name, json.dumps(config, sort_keys=True), css),
            )
        return cursor.lastrowid

    def close(self) -> None:
        self._conn.close()

    @contextmanager
    def _write(self) -> Iterator[sqlite3.Connection]:
        """Commit on success; roll back and raise StorageError on a database error."""
        try:
            yield self._conn
            self._conn.commit()
        except sqlite3.Error as e:
            self._conn.rollback()
            raise StorageError(f"Database write failed: {e}") from e
