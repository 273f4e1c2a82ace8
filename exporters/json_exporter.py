"""JSON exporter for run reports (machine-friendly format)."""

import json
from pathlib import Path
from typing import Any, Dict, List

from pipeline.runner import RunReport
from .tailwind_exporter import to_theme


def to_json(report: RunReport, indent: int = 2) -> str:
    """
    Convert a run report to JSON.

    Paths are the files' relative paths. Key order is fixed, so an
    unchanged input set produces identical output.

    Args:
        report: The run report to export.
        indent: JSON indentation level.

    Returns:
        JSON string representation of the report.
    """
    display: Dict[Path, str] = {f.path: f.relative_path for f in report.files}

    files: List[Dict[str, Any]] = []
    for source_file in report.files:
        entry: Dict[str, Any] = {
            "path": source_file.relative_path,
            "status": source_file.status.value,
            "checksum": source_file.checksum,
            "size": source_file.size,
        }
        if source_file.error:
            entry["error"] = source_file.error
        files.append(entry)

    edges: List[Dict[str, Any]] = []
    for edge in report.edges:
        item: Dict[str, Any] = {
            "source": display[edge.source],
            "token": edge.token,
            "target": display[edge.resolved] if edge.resolved is not None else None,
            "type": edge.import_type.value,
            "line": edge.line,
        }
        if edge.resolved is None:
            item["missing"] = True
        edges.append(item)
    for source, url in report.graph.iter_remote():
        edges.append({"source": display[source], "token": url, "target": url, "remote": True})

    variables: Dict[str, Any] = {}
    for entry in report.model.iter_variables():
        variables[entry.name] = {
            "value": entry.value,
            "file": display.get(entry.file, str(entry.file)),
            "shadowed_by": [
                {"file": display.get(path, str(path)), "value": value}
                for path, value in entry.shadowed_by
            ],
        }

    mixins: Dict[str, Any] = {}
    for name, mixin_entry in report.model.mixins.items():
        mixins[name] = {
            "signature": mixin_entry.mixin.signature,
            "file": display.get(mixin_entry.mixin.file, str(mixin_entry.mixin.file)),
        }

    data: Dict[str, Any] = {
        "files": files,
        "edges": edges,
        "order": [f.relative_path for f in report.order],
        "cycles": [cycle.paths for cycle in report.cycles],
        "issues": [
            {
                "kind": issue.kind.value,
                "file": issue.file,
                "line": issue.line,
                "token": issue.token,
                "detail": issue.detail,
            }
            for issue in report.issues
        ],
        "variables": variables,
        "mixins": mixins,
        "tokens": {
            group.category.value: [
                {"name": t.name, "key": t.key, "value": t.value} for t in group.tokens
            ]
            for group in report.groups
        },
        "config": to_theme(report.groups),
        "stats": {
            "total": report.stats.total,
            "processed": report.stats.processed,
            "errored": report.stats.errored,
        },
    }

    return json.dumps(data, indent=indent)
