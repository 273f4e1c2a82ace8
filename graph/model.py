"""Graph data model for source files and their import relationships."""

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set, Tuple


class FileStatus(str, Enum):
    """Processing status of a source file within a run."""

    PENDING = "pending"
    PROCESSED = "processed"
    ERROR = "error"


class ImportType(str, Enum):
    """Import flavour declared through the directive's option list."""

    STANDARD = "standard"
    OPTIONAL = "optional"
    REFERENCE = "reference"
    CSS = "css"


@dataclass(eq=False)
class SourceFile:
    """
    A dialect file discovered by the scanner.

    Identity is the canonical absolute path; two SourceFile values with the
    same path are the same file.
    """

    path: Path
    relative_path: str
    content: Optional[str] = None
    status: FileStatus = FileStatus.PENDING
    size: int = 0
    checksum: Optional[str] = None
    error: Optional[str] = None

    @property
    def name(self) -> str:
        return self.path.name

    def set_content(self, content: str) -> None:
        """Attach raw text and derive size and checksum from it."""
        self.content = content
        encoded = content.encode("utf-8")
        self.size = len(encoded)
        self.checksum = hashlib.sha256(encoded).hexdigest()

    def __hash__(self) -> int:
        return hash(self.path)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SourceFile):
            return NotImplemented
        return self.path == other.path


@dataclass(frozen=True)
class ImportEdge:
    """
    One import directive: `source` textually imports `resolved`.

    `resolved` is None when the raw token did not match a known file.
    """

    source: Path
    token: str
    resolved: Optional[Path]
    import_type: ImportType = ImportType.STANDARD
    line: int = 0

    @property
    def is_resolved(self) -> bool:
        return self.resolved is not None


class ImportGraph:
    """
    A directed graph over source files.

    Nodes are indices into the file list (scan order), and an edge
    `i -> j` means file i imports file j. Unresolved and remote import
    tokens are tracked separately and never take part in ordering.
    """

    def __init__(self, files: Optional[List[SourceFile]] = None):
        self._files: List[SourceFile] = []
        self._index: Dict[Path, int] = {}
        self._edges: List[Set[int]] = []
        self._missing: Dict[int, Set[str]] = {}  # source -> unresolved tokens
        self._remote: Dict[int, Set[str]] = {}  # source -> remote urls
        for source_file in files or []:
            self.add_node(source_file)

    @property
    def files(self) -> List[SourceFile]:
        """Return the files in scan order."""
        return list(self._files)

    @property
    def edges(self) -> Dict[int, Set[int]]:
        """Return adjacency list representation of edges (by index)."""
        return {i: set(targets) for i, targets in enumerate(self._edges) if targets}

    @property
    def missing(self) -> Dict[Path, Set[str]]:
        """Return unresolved import tokens keyed by importing file."""
        return {self._files[i].path: set(v) for i, v in self._missing.items()}

    @property
    def remote(self) -> Dict[Path, Set[str]]:
        """Return remote import urls keyed by importing file."""
        return {self._files[i].path: set(v) for i, v in self._remote.items()}

    def add_node(self, source_file: SourceFile) -> int:
        """Add a file to the graph and return its index."""
        existing = self._index.get(source_file.path)
        if existing is not None:
            return existing
        index = len(self._files)
        self._files.append(source_file)
        self._index[source_file.path] = index
        self._edges.append(set())
        return index

    def index_of(self, path: Path) -> Optional[int]:
        """Return the index of a file path, or None if it is not a node."""
        return self._index.get(path)

    def file_at(self, index: int) -> SourceFile:
        return self._files[index]

    def add_edge(self, source: Path, target: Path) -> None:
        """
        Add a directed edge `source imports target`.

        Both files must already be nodes. Duplicate edges collapse.
        """
        self._edges[self._index[source]].add(self._index[target])

    def add_missing(self, source: Path, token: str) -> None:
        """Record an import token that resolved to no known file."""
        self._missing.setdefault(self._index[source], set()).add(token)

    def add_remote(self, source: Path, url: str) -> None:
        """Record a remote (url) import."""
        self._remote.setdefault(self._index[source], set()).add(url)

    def get_missing(self, source: Path) -> Set[str]:
        return set(self._missing.get(self._index[source], set()))

    def get_remote(self, source: Path) -> Set[str]:
        return set(self._remote.get(self._index[source], set()))

    def has_missing(self) -> bool:
        return bool(self._missing)

    def successors(self, index: int) -> List[int]:
        """Indices imported by the file at `index`, in scan order."""
        return sorted(self._edges[index])

    def get_targets(self, source: Path) -> Set[Path]:
        """Get all files that the source file imports."""
        return {self._files[j].path for j in self._edges[self._index[source]]}

    def get_sources(self, target: Path) -> Set[Path]:
        """Get all files that import the target file."""
        target_index = self._index[target]
        return {
            self._files[i].path
            for i, targets in enumerate(self._edges)
            if target_index in targets
        }

    def get_roots(self) -> Set[Path]:
        """
        Get files that no other file imports.

        These are entry stylesheets: they may import others but are never
        themselves imported.
        """
        imported: Set[int] = set()
        for targets in self._edges:
            imported.update(targets)
        return {f.path for i, f in enumerate(self._files) if i not in imported}

    def iter_edges(self) -> Iterator[Tuple[Path, Path]]:
        """Iterate over all edges as (importer, imported) tuples in scan order."""
        for i, targets in enumerate(self._edges):
            for j in sorted(targets):
                yield self._files[i].path, self._files[j].path

    def iter_missing(self) -> Iterator[Tuple[Path, str]]:
        """Iterate over all unresolved imports as (source, token) tuples."""
        for i in sorted(self._missing):
            for token in sorted(self._missing[i]):
                yield self._files[i].path, token

    def iter_remote(self) -> Iterator[Tuple[Path, str]]:
        """Iterate over all remote imports as (source, url) tuples."""
        for i in sorted(self._remote):
            for url in sorted(self._remote[i]):
                yield self._files[i].path, url

    def __len__(self) -> int:
        """Return the number of files in the graph."""
        return len(self._files)

    def __contains__(self, path: Path) -> bool:
        return path in self._index

    def __repr__(self) -> str:
        edge_count = sum(len(t) for t in self._edges)
        missing_count = sum(len(m) for m in self._missing.values())
        remote_count = sum(len(r) for r in self._remote.values())
        return f"ImportGraph(nodes={len(self._files)}, edges={edge_count}, missing={missing_count}, remote={remote_count})"
