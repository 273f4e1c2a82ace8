"""In-memory StyleStore, the default when no database is configured."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from graph.model import FileStatus, ImportType, SourceFile
from style.model import Mixin, Variable
from .base import StoreStats


@dataclass
class StoredFile:
    id: int
    path: Path
    relative_path: str
    checksum: Optional[str]
    size: int
    status: FileStatus = FileStatus.PENDING
    error: Optional[str] = None


@dataclass
class StoredEdge:
    file_id: int
    resolved: Optional[Path]
    token: str
    import_type: ImportType
    line: int


@dataclass
class StoredExport:
    id: int
    name: str
    config: Dict[str, Any]
    css: str


@dataclass
class MemoryStore:
    """Keeps everything in plain lists and dicts for the life of the process."""

    files: Dict[int, StoredFile] = field(default_factory=dict)
    edges: List[StoredEdge] = field(default_factory=list)
    variables: Dict[int, List[Variable]] = field(default_factory=dict)
    mixins: Dict[int, List[Mixin]] = field(default_factory=dict)
    exports: List[StoredExport] = field(default_factory=list)

    def store_file(self, source_file: SourceFile) -> int:
        for stored in self.files.values():
            if stored.path == source_file.path:
                stored.checksum = source_file.checksum
                stored.size = source_file.size
                return stored.id
        file_id = len(self.files) + 1
        self.files[file_id] = StoredFile(
            id=file_id,
            path=source_file.path,
            relative_path=source_file.relative_path,
            checksum=source_file.checksum,
            size=source_file.size,
            status=source_file.status,
        )
        return file_id

    def store_variables(self, file_id: int, variables: List[Variable], mixins: List[Mixin]) -> None:
        self.variables[file_id] = list(variables)
        self.mixins[file_id] = list(mixins)

    def store_import_edge(
        self,
        file_id: int,
        resolved: Optional[Path],
        token: str,
        import_type: ImportType = ImportType.STANDARD,
        line: int = 0,
    ) -> None:
        self.edges.append(StoredEdge(file_id, resolved, token, import_type, line))

    def update_file_status(self, file_id: int, status: FileStatus, error: Optional[str] = None) -> None:
        stored = self.files[file_id]
        stored.status = status
        stored.error = error

    def get_stats(self) -> StoreStats:
        statuses = [f.status for f in self.files.values()]
        return StoreStats(
            total=len(statuses),
            processed=statuses.count(FileStatus.PROCESSED),
            errored=statuses.count(FileStatus.ERROR),
        )

    def store_export(self, name: str, config: Dict[str, Any], css: str) -> int:
        export_id = len(self.exports) + 1
        self.exports.append(StoredExport(export_id, name, config, css))
        return export_id

    def close(self) -> None:
        pass
