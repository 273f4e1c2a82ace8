"""Import graph construction from loaded source files."""

from pathlib import Path
from typing import Iterable, List, Tuple

from graph.model import ImportEdge, ImportGraph, SourceFile
from pipeline.log import get_logger
from .parser import extract_imports, is_remote
from .resolver import resolve_import


logger = get_logger("builder")


def build_graph(
    files: List[SourceFile],
    include_paths: Iterable[Path] = (),
) -> Tuple[ImportGraph, List[ImportEdge]]:
    """
    Build the import graph over a set of loaded files.

    Every import directive yields one ImportEdge, resolved or not. Only
    resolved edges enter the graph; duplicates collapse there. A file that
    imports itself gets a self-loop, which ordering reports as a cycle.
    Remote (url) imports are tracked on the graph but never resolved.
    Files without content (unreadable) are nodes with no edges.

    Args:
        files: Files in scan order.
        include_paths: Fallback directories for import resolution.

    Returns:
        (graph, edges) with edges in scan order, then file order.
    """
    graph = ImportGraph(files)
    known = {f.path for f in files}
    include_paths = list(include_paths)
    edges: List[ImportEdge] = []

    for source_file in files:
        if source_file.content is None:
            continue

        for directive in extract_imports(source_file.content):
            if is_remote(directive.token):
                graph.add_remote(source_file.path, directive.token)
                continue

            resolved = resolve_import(source_file.path, directive.token, known, include_paths)
            edges.append(ImportEdge(
                source=source_file.path,
                token=directive.token,
                resolved=resolved,
                import_type=directive.import_type,
                line=directive.line,
            ))

            if resolved is None:
                graph.add_missing(source_file.path, directive.token)
            else:
                graph.add_edge(source_file.path, resolved)

    logger.debug("Built %r", graph)
    return graph, edges
