"""Import resolution: map raw import tokens onto known source files."""

import os
from pathlib import Path
from typing import AbstractSet, Iterable, List, Optional


CANONICAL_EXTENSION = ".less"
RECOGNIZED_EXTENSIONS = {".less", ".css"}


def candidate_paths(
    source_file: Path,
    token: str,
    include_paths: Iterable[Path] = (),
) -> List[Path]:
    """
    List the paths an import token may refer to, in lookup order.

    The token is read relative to the importing file's directory first,
    then relative to each include path. Tokens without a recognized
    extension get the canonical `.less` extension appended.

    Args:
        source_file: The file containing the import directive.
        token: The raw import token.
        include_paths: Fallback directories, usually the scan roots.

    Returns:
        Normalized absolute candidate paths (no filesystem access).
    """
    if not token:
        return []

    # Normalize separators and drop a leading "./"
    normalized = token.strip().replace("\\", "/")
    if normalized.startswith("./"):
        normalized = normalized[2:]
    if Path(normalized).suffix.lower() not in RECOGNIZED_EXTENSIONS:
        normalized += CANONICAL_EXTENSION

    bases = [source_file.parent]
    bases.extend(Path(p) for p in include_paths)

    candidates: List[Path] = []
    for base in bases:
        candidate = Path(os.path.normpath(os.path.join(str(base), normalized)))
        if candidate not in candidates:
            candidates.append(candidate)
    return candidates


def resolve_import(
    source_file: Path,
    token: str,
    known_files: AbstractSet[Path],
    include_paths: Iterable[Path] = (),
) -> Optional[Path]:
    """
    Resolve an import token to one of the known source files.

    Args:
        source_file: The file containing the import directive.
        token: The raw import token.
        known_files: Canonical paths of every scanned file.
        include_paths: Fallback directories tried after the importer's own.

    Returns:
        The matching known path, or None if the token is unresolved.
    """
    for candidate in candidate_paths(source_file, token, include_paths):
        if candidate in known_files:
            return candidate
    return None

