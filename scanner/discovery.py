"""File discovery utilities for scanning stylesheet trees."""

from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Set

from graph.model import SourceFile
from pipeline.log import get_logger


logger = get_logger("scanner")

DEFAULT_EXTENSIONS = {".less"}
DEFAULT_EXCLUDE_DIRS = {
    "node_modules", "__pycache__",
    "venv", "env",
    "build", "dist", "*.egg-info",
}


def iter_files(
    root: Path,
    include_ext: Optional[Set[str]] = None,
    exclude_dirs: Optional[Set[str]] = None,
    max_depth: Optional[int] = None,
) -> Iterator[Path]:
    """
    Iterate over stylesheet files in a directory tree.

    Hidden directories (names starting with a dot) are always skipped.

    Args:
        root: Root directory to scan.
        include_ext: Set of file extensions to include, compared
                    case-insensitively. If None, uses DEFAULT_EXTENSIONS.
        exclude_dirs: Set of directory names to skip.
                     If None, uses DEFAULT_EXCLUDE_DIRS.
        max_depth: Maximum depth to descend. None means unlimited.

    Yields:
        Canonical Path objects for matching files, in sorted order.
    """
    if include_ext is None:
        include_ext = DEFAULT_EXTENSIONS
    if exclude_dirs is None:
        exclude_dirs = DEFAULT_EXCLUDE_DIRS

    root = root.resolve()

    def _walk(current: Path, depth: int) -> Iterator[Path]:
        if max_depth is not None and depth > max_depth:
            return

        try:
            entries = sorted(current.iterdir())
        except PermissionError:
            logger.warning("Permission denied while scanning %s", current)
            return

        for entry in entries:
            if entry.is_dir():
                if entry.name.startswith(".") or entry.name in exclude_dirs:
                    continue
                # Check for glob patterns in exclude_dirs
                if any(entry.name.endswith(pat.lstrip("*")) for pat in exclude_dirs if pat.startswith("*")):
                    continue
                yield from _walk(entry, depth + 1)
            elif entry.is_file():
                if entry.suffix.lower() in include_ext:
                    yield entry.resolve()

    yield from _walk(root, 0)


def scan_roots(
    roots: Iterable[Path],
    base: Optional[Path] = None,
    include_ext: Optional[Set[str]] = None,
    exclude_dirs: Optional[Set[str]] = None,
    max_depth: Optional[int] = None,
) -> List[SourceFile]:
    """
    Scan several root directories and return the files found, in scan order.

    A root that does not exist is logged and skipped. A file reachable from
    more than one root is returned once. Scan order is lexicographic by
    relative path, which gives a stable tie-break for later phases.

    Args:
        roots: Directories to scan.
        base: Directory that relative paths are computed against
              (default: the current working directory).
        include_ext: File extensions to include.
        exclude_dirs: Directory names to skip.
        max_depth: Maximum directory depth to scan.

    Returns:
        SourceFile values with status pending and no content.
    """
    base = (base or Path.cwd()).resolve()
    found: Dict[Path, SourceFile] = {}

    for root in roots:
        root = Path(root)
        if not root.is_dir():
            logger.warning("Scan root %s is not a directory, skipping", root)
            continue
        for path in iter_files(root, include_ext, exclude_dirs, max_depth):
            if path in found:
                continue
            relative = get_relative_path(path, base, root)
            found[path] = SourceFile(path=path, relative_path=relative)
            logger.debug("Scanned stylesheet: %s", relative)

    return sorted(found.values(), key=lambda f: (f.relative_path, str(f.path)))


def get_relative_path(file_path: Path, base: Path, root: Optional[Path] = None) -> str:
    """
    Get a display path for a file, handling edge cases.

    Relative to `base` when the file lies under it, otherwise relative to
    the parent of its scan root, and as a last resort the absolute path.
    """
    for anchor in (base, root.resolve().parent if root is not None else None):
        if anchor is None:
            continue
        try:
            return file_path.resolve().relative_to(anchor.resolve()).as_posix()
        except ValueError:
            continue
    return file_path.as_posix()
