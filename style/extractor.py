"""Per-file extraction of top-level variables and mixins."""

from pathlib import Path

from graph.model import SourceFile
from scanner.parser import StatementKind, scan_statements
from .model import MalformedDeclaration, Mixin, StyleFragment, Variable


def extract_fragment(path: Path, content: str) -> StyleFragment:
    """
    Extract the global declarations of one stylesheet.

    Only top-level statements count; anything inside a rule block is
    ignored. Values are kept as written (trimmed), without evaluation.
    Statements that cannot be read are collected in `malformed`, and
    extraction carries on past them.

    Args:
        path: Identity of the file, recorded on every declaration.
        content: Raw file text.

    Returns:
        StyleFragment with variables and mixins in file order.
    """
    fragment = StyleFragment()
    order = 0

    for statement in scan_statements(content):
        if statement.kind is StatementKind.VARIABLE:
            fragment.variables.append(Variable(
                file=path,
                name=statement.name,
                value=statement.value,
                order=order,
                line=statement.line,
            ))
            order += 1
        elif statement.kind is StatementKind.MIXIN:
            fragment.mixins.append(Mixin(
                file=path,
                name=statement.name,
                params=statement.params,
                body=statement.body,
                guard=statement.guard,
                order=order,
                line=statement.line,
            ))
            order += 1
        elif statement.kind is StatementKind.MALFORMED:
            fragment.malformed.append(MalformedDeclaration(
                line=statement.line,
                text=statement.text,
                detail=statement.detail or "unreadable statement",
            ))

    return fragment


def extract(source_file: SourceFile) -> StyleFragment:
    """Extract declarations from a loaded SourceFile."""
    if source_file.content is None:
        raise ValueError(f"{source_file.relative_path} has no content loaded")
    return extract_fragment(source_file.path, source_file.content)
