"""ASCII tree-style exporter for import hierarchies."""

from pathlib import Path
from typing import List, Set, Tuple

from graph.model import ImportGraph


# Unicode tree characters
UNICODE_BRANCH = "├── "
UNICODE_LAST = "└── "
UNICODE_VERTICAL = "│   "
UNICODE_SPACE = "    "

# ASCII fallback characters
ASCII_BRANCH = "|-- "
ASCII_LAST = "\\-- "
ASCII_VERTICAL = "|   "
ASCII_SPACE = "    "


def to_ascii(
    graph: ImportGraph,
    style: str = "tree",
    include_missing: bool = True,
    include_remote: bool = True,
) -> str:
    """
    Render the import hierarchy as a tree, entry stylesheets at the top.

    Each file lists the files it imports. A file that reappears on its own
    branch is marked `[CYCLE]` and not expanded again.

    Args:
        graph: The import graph to export.
        style: Output style - "tree" (Unicode) or "ascii" (pure ASCII).
        include_missing: If True, show unresolved imports as `[MISSING]`.
        include_remote: If True, show url imports as `[REMOTE]`.

    Returns:
        Tree string, empty for an empty graph.
    """
    if style == "ascii":
        chars = (ASCII_BRANCH, ASCII_LAST, ASCII_VERTICAL, ASCII_SPACE)
    else:
        chars = (UNICODE_BRANCH, UNICODE_LAST, UNICODE_VERTICAL, UNICODE_SPACE)

    roots = [f.path for f in graph.files if f.path in graph.get_roots()]
    # Files only reachable through cycles still need an entry point
    covered: Set[Path] = set()
    for root in roots:
        covered |= _reachable(graph, root)
    for source_file in graph.files:
        if source_file.path not in covered:
            roots.append(source_file.path)
            covered |= _reachable(graph, source_file.path)

    lines: List[str] = []
    for i, root in enumerate(roots):
        _render_node(graph, root, "", True, chars, set(), lines, True, include_missing, include_remote)
        if i < len(roots) - 1:
            lines.append("")
    return "\n".join(lines)


def _reachable(graph: ImportGraph, start: Path) -> Set[Path]:
    seen: Set[Path] = set()
    stack = [start]
    while stack:
        node = stack.pop()
        if node in seen:
            continue
        seen.add(node)
        stack.extend(graph.get_targets(node))
    return seen


def _render_node(
    graph: ImportGraph,
    node: Path,
    prefix: str,
    is_last: bool,
    chars: Tuple[str, str, str, str],
    visited: Set[Path],
    lines: List[str],
    is_root: bool,
    include_missing: bool,
    include_remote: bool,
) -> None:
    """Recursively render a node and what it imports."""
    branch, last, vertical, space = chars

    display_path = _display(graph, node)
    is_cycle = node in visited
    marker = " [CYCLE]" if is_cycle else ""

    if is_root:
        lines.append(f"{display_path}{marker}")
    else:
        connector = last if is_last else branch
        lines.append(f"{prefix}{connector}{display_path}{marker}")

    if is_cycle:
        return

    visited.add(node)

    children = sorted(graph.get_targets(node), key=lambda p: _display(graph, p))
    leaves: List[str] = []
    if include_missing:
        leaves.extend(f"{token} [MISSING]" for token in sorted(graph.get_missing(node)))
    if include_remote:
        leaves.extend(f"{url} [REMOTE]" for url in sorted(graph.get_remote(node)))

    total_items = len(children) + len(leaves)
    child_prefix = "" if is_root else prefix + (space if is_last else vertical)

    for index, child in enumerate(children, start=1):
        _render_node(
            graph, child, child_prefix, index == total_items, chars, visited, lines,
            False, include_missing, include_remote,
        )

    for index, leaf in enumerate(leaves, start=len(children) + 1):
        connector = last if index == total_items else branch
        lines.append(f"{child_prefix}{connector}{leaf}")

    # Allow the same file under other branches; only repeats on this branch are cycles
    visited.discard(node)


def _display(graph: ImportGraph, path: Path) -> str:
    index = graph.index_of(path)
    if index is None:
        return path.as_posix()
    return graph.file_at(index).relative_path
