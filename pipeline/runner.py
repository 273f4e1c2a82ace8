"""Run orchestration: scan, read, graph, order, extract, merge, convert."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from graph.model import FileStatus, ImportEdge, ImportGraph, SourceFile
from graph.order import Cycle, Resolution, resolve_order
from scanner.builder import build_graph
from scanner.discovery import DEFAULT_EXCLUDE_DIRS, scan_roots
from scanner.reader import read_sources
from storage.base import StoreStats, StyleStore
from storage.memory import MemoryStore
from style.extractor import extract
from style.merger import merge
from style.model import StyleFragment, StyleModel
from style.tokens import TokenGroup, convert
from .config import Settings
from .errors import Err, FileResult, Issue, IssueKind, NoInputFilesError, Ok
from .log import get_logger


logger = get_logger("pipeline")


@dataclass
class RunReport:
    """Everything one run produced, for exporters and the summary."""

    files: List[SourceFile]
    graph: ImportGraph
    edges: List[ImportEdge]
    resolution: Resolution
    model: StyleModel
    groups: List[TokenGroup]
    stats: StoreStats
    issues: List[Issue] = field(default_factory=list)

    @property
    def order(self) -> List[SourceFile]:
        return self.resolution.order

    @property
    def cycles(self) -> List[Cycle]:
        return self.resolution.cycles

    def issues_of(self, kind: IssueKind) -> List[Issue]:
        return [issue for issue in self.issues if issue.kind is kind]

    def summary(self) -> str:
        return (
            f"{self.stats.total} files: {self.stats.processed} processed, "
            f"{self.stats.errored} errored, {len(self.issues)} issues"
        )


def extract_file(source_file: SourceFile) -> FileResult:
    """
    Extract one file's declarations as a result value.

    Unreadable files and files with malformed top-level statements come
    back as Err; the latter keep what could be extracted.
    """
    if source_file.content is None:
        return Err(
            path=source_file.path,
            kind=IssueKind.READ_FAILURE,
            detail=source_file.error or "file could not be read",
        )

    fragment = extract(source_file)
    if fragment.malformed:
        first = fragment.malformed[0]
        return Err(
            path=source_file.path,
            kind=IssueKind.EXTRACTION_FAILURE,
            detail=f"line {first.line}: {first.detail}",
            fragment=fragment,
        )
    return Ok(path=source_file.path, fragment=fragment)


def record_result(
    result: FileResult,
    source_file: SourceFile,
    file_id: int,
    store: StyleStore,
    issues: List[Issue],
) -> StyleFragment:
    """
    Apply one file's result: persist declarations, set status, report issues.

    Returns:
        The fragment the file contributes to the merge (possibly partial).
    """
    store.store_variables(file_id, result.fragment.variables, result.fragment.mixins)

    if isinstance(result, Ok):
        source_file.status = FileStatus.PROCESSED
        store.update_file_status(file_id, FileStatus.PROCESSED)
        return result.fragment

    source_file.status = FileStatus.ERROR
    source_file.error = result.detail
    store.update_file_status(file_id, FileStatus.ERROR, result.detail)

    if result.kind is IssueKind.READ_FAILURE:
        _report(issues, Issue(IssueKind.READ_FAILURE, source_file.relative_path, result.detail))
    for malformed in result.fragment.malformed:
        _report(issues, Issue(
            kind=IssueKind.EXTRACTION_FAILURE,
            file=source_file.relative_path,
            detail=malformed.detail,
            token=malformed.text,
            line=malformed.line,
        ))
    return result.fragment


def run_pipeline(
    settings: Settings,
    store: Optional[StyleStore] = None,
    base: Optional[Path] = None,
) -> RunReport:
    """
    Run the whole pipeline over the configured scan roots.

    Per-file problems are recorded as issues and never stop the run.

    Args:
        settings: Run settings.
        store: Storage backend (default: a fresh MemoryStore).
        base: Directory relative paths are reported against (default: cwd).

    Returns:
        RunReport for exporters.

    Raises:
        NoInputFilesError: if no stylesheet is found under the scan roots.
        StorageError: if the store fails.
    """
    store = store if store is not None else MemoryStore()
    issues: List[Issue] = []

    roots = [Path(p) for p in settings.scan_paths]
    logger.info("Scanning paths: %s", ", ".join(str(r) for r in roots))
    exclude_dirs = set(settings.exclude_dirs) | DEFAULT_EXCLUDE_DIRS if settings.exclude_dirs else None
    files = scan_roots(roots, base=base, exclude_dirs=exclude_dirs, max_depth=settings.max_depth)
    if not files:
        raise NoInputFilesError(
            f"No stylesheet files found under: {', '.join(str(r) for r in roots) or '(no scan paths)'}"
        )
    logger.info("Found %d LESS files", len(files))

    failures = read_sources(files, workers=settings.read_workers)
    for source_file in files:
        if source_file.path in failures:
            source_file.error = failures[source_file.path]

    file_ids: Dict[Path, int] = {f.path: store.store_file(f) for f in files}
    by_path = {f.path: f for f in files}

    logger.info("Resolving import hierarchy...")
    include_paths = [r.resolve() for r in roots if r.is_dir()]
    graph, edges = build_graph(files, include_paths=include_paths)
    for edge in edges:
        store.store_import_edge(file_ids[edge.source], edge.resolved, edge.token, edge.import_type, edge.line)
        if edge.resolved is None:
            _report(issues, Issue(
                kind=IssueKind.UNRESOLVED_IMPORT,
                file=by_path[edge.source].relative_path,
                detail=f"cannot resolve import '{edge.token}'",
                token=edge.token,
                line=edge.line,
            ))

    resolution = resolve_order(graph)

    logger.info("Extracting variables and mixins...")
    fragments: Dict[Path, StyleFragment] = {}
    for source_file in files:
        result = extract_file(source_file)
        fragments[source_file.path] = record_result(
            result, source_file, file_ids[source_file.path], store, issues
        )

    # Order-dependent: must stay sequential
    model = merge(resolution.order, fragments, resolution.cycles)
    for cycle in resolution.cycles:
        _report(issues, Issue(
            kind=IssueKind.CYCLIC_IMPORT,
            file=cycle.members[0].relative_path,
            detail=_cycle_detail(cycle, model, by_path),
        ))
    groups = convert(model)
    logger.info(
        "Merged %d variables and %d mixins into %d token groups",
        len(model), len(model.mixins), sum(1 for g in groups if len(g)),
    )

    report = RunReport(
        files=files,
        graph=graph,
        edges=edges,
        resolution=resolution,
        model=model,
        groups=groups,
        stats=store.get_stats(),
        issues=issues,
    )
    logger.info("Processing complete: %s", report.summary())
    return report


def _report(issues: List[Issue], issue: Issue) -> None:
    logger.warning("%s", issue)
    issues.append(issue)


def _cycle_detail(cycle: Cycle, model: StyleModel, by_path: Dict[Path, SourceFile]) -> str:
    """Describe a cycle, naming each declaration held back between its members."""
    detail = f"import cycle between {', '.join(cycle.paths)}"
    members = {f.path for f in cycle.members}
    for conflict in model.conflicts:
        if conflict.ignored_file not in members:
            continue
        label = f".{conflict.name}" if conflict.is_mixin else f"@{conflict.name}"
        detail += (
            f"; {label} from {by_path[conflict.ignored_file].relative_path} not applied"
            f" over {by_path[conflict.kept_file].relative_path}"
        )
    return detail
