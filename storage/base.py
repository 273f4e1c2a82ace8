"""Storage interface the pipeline reports into."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from graph.model import FileStatus, ImportType, SourceFile
from style.model import Mixin, Variable


@dataclass(frozen=True)
class StoreStats:
    """File counts by outcome."""

    total: int = 0
    processed: int = 0
    errored: int = 0

    @property
    def pending(self) -> int:
        return self.total - self.processed - self.errored


class StyleStore(Protocol):
    """
    Persistence for files, import edges, declarations and exports.

    The pipeline calls each method once per file, edge or declaration set;
    it does not depend on how a backend represents the data.
    """

    def store_file(self, source_file: SourceFile) -> int:
        """Insert or update a file by path and return its id."""
        ...

    def store_variables(self, file_id: int, variables: List[Variable], mixins: List[Mixin]) -> None:
        ...

    def store_import_edge(
        self,
        file_id: int,
        resolved: Optional[Path],
        token: str,
        import_type: ImportType = ImportType.STANDARD,
        line: int = 0,
    ) -> None:
        ...

    def update_file_status(self, file_id: int, status: FileStatus, error: Optional[str] = None) -> None:
        ...

    def get_stats(self) -> StoreStats:
        ...

    def store_export(self, name: str, config: Dict[str, Any], css: str) -> int:
        ...

    def close(self) -> None:
        ...
