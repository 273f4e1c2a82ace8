"""Top-level statement scanner for LESS stylesheets.

The scanner only understands what sits at brace depth zero: import
directives, `@name: value;` variable bindings, mixin definitions and
everything else as opaque rules. Nested blocks are skipped whole.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from graph.model import ImportType


# At-rules that are statements or blocks in their own right, not variables
KNOWN_AT_RULES = {
    "charset", "namespace", "plugin", "font-face", "media", "supports",
    "keyframes", "-webkit-keyframes", "-moz-keyframes", "page", "layer",
    "container", "document", "viewport", "counter-style", "property",
    "font-feature-values",
}

IMPORT_OPTIONS = {
    "reference": ImportType.REFERENCE,
    "optional": ImportType.OPTIONAL,
    "css": ImportType.CSS,
}

_IMPORT_RE = re.compile(r"^@import(?![\w-])\s*(?:\(([^)]*)\))?\s*(.*)$", re.IGNORECASE | re.DOTALL)
_IMPORT_TOKEN_RE = re.compile(
    r"""url\(\s*(?:"([^"]*)"|'([^']*)'|([^)\s]*))\s*\)|"([^"]*)"|'([^']*)'""",
    re.IGNORECASE,
)
_VARIABLE_RE = re.compile(r"^@([\w-]+)\s*:\s*(.*)$", re.DOTALL)
_AT_RULE_RE = re.compile(r"^@([\w-]+)")
_MIXIN_NAME_RE = re.compile(r"^\.([\w-]+)\s*\(")
_REMOTE_RE = re.compile(r"^(?:[a-z][a-z0-9+.-]*:)?//", re.IGNORECASE)


class StatementKind(str, Enum):
    """Tag for one top-level statement."""

    IMPORT = "import"
    VARIABLE = "variable"
    MIXIN = "mixin"
    RULE = "rule"
    AT_RULE = "at-rule"
    OTHER = "other"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class Statement:
    """
    One top-level statement with the fields its kind defines.

    IMPORT: `tokens`, `import_type`. VARIABLE: `name`, `value`.
    MIXIN: `name`, `params`, `guard`, `body` (full block text).
    MALFORMED: `detail` explains what could not be read.
    """

    kind: StatementKind
    line: int
    text: str
    name: Optional[str] = None
    value: Optional[str] = None
    params: Optional[str] = None
    guard: Optional[str] = None
    body: Optional[str] = None
    tokens: Tuple[str, ...] = ()
    import_type: ImportType = ImportType.STANDARD
    detail: Optional[str] = None


@dataclass(frozen=True)
class ImportDirective:
    """A single import token with its options and source line."""

    token: str
    import_type: ImportType
    line: int


def scan_statements(content: str) -> List[Statement]:
    """
    Split stylesheet text into top-level statements, in file order.

    Comments are dropped, quoted strings are kept intact, and nested blocks
    are consumed without being interpreted. Structural problems (a stray
    closing brace, an unclosed block, a trailing statement with no
    terminator) come back as MALFORMED statements rather than exceptions.

    Args:
        content: Raw file text.

    Returns:
        List of statements.
    """
    content = content[1:] if content.startswith("\ufeff") else content
    statements: List[Statement] = []
    buf: List[str] = []
    stmt_start: Optional[int] = None
    stmt_line = 1
    line = 1
    depth = 0
    parens = 0
    block_prelude = ""
    block_start = 0
    block_line = 1
    i = 0
    n = len(content)

    while i < n:
        ch = content[i]
        nxt = content[i + 1] if i + 1 < n else ""

        # Comments
        if ch == "/" and nxt == "*":
            end = content.find("*/", i + 2)
            end = n if end == -1 else end + 2
            line += content.count("\n", i, end)
            if depth == 0 and stmt_start is not None:
                buf.append(" ")
            i = end
            continue
        if ch == "/" and nxt == "/" and parens == 0:
            end = content.find("\n", i)
            i = n if end == -1 else end
            continue

        # Quoted strings
        if ch in "\"'":
            end = _string_end(content, i)
            if depth == 0:
                if stmt_start is None:
                    stmt_start, stmt_line = i, line
                buf.append(content[i:end])
            line += content.count("\n", i, end)
            i = end
            continue

        if ch == "\n":
            line += 1

        # Variable interpolation, e.g. .@{name}-suffix
        if ch == "@" and nxt == "{":
            end = content.find("}", i)
            end = n if end == -1 else end + 1
            if depth == 0:
                if stmt_start is None:
                    stmt_start, stmt_line = i, line
                buf.append(content[i:end])
            i = end
            continue

        if ch == "(":
            parens += 1
        elif ch == ")" and parens > 0:
            parens -= 1

        if depth > 0:
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    parens = 0
                    statements.append(
                        _classify_block(block_prelude, content[block_start:i + 1], block_line)
                    )
            i += 1
            continue

        if ch == "{":
            block_prelude = "".join(buf).strip()
            block_start = stmt_start if stmt_start is not None else i
            block_line = stmt_line if stmt_start is not None else line
            depth = 1
            parens = 0
            buf, stmt_start = [], None
        elif ch == "}":
            statements.append(Statement(
                kind=StatementKind.MALFORMED,
                line=line,
                text="}",
                detail="unexpected '}' at top level",
            ))
        elif ch == ";" and parens == 0:
            text = "".join(buf).strip()
            if text:
                statements.append(_classify_statement(text, stmt_line))
            buf, stmt_start = [], None
        else:
            if stmt_start is None and not ch.isspace():
                stmt_start, stmt_line = i, line
            if stmt_start is not None:
                buf.append(ch)
        i += 1

    if depth > 0:
        statements.append(Statement(
            kind=StatementKind.MALFORMED,
            line=block_line,
            text=block_prelude,
            detail="block is never closed",
        ))
    else:
        trailing = "".join(buf).strip()
        if trailing:
            statements.append(Statement(
                kind=StatementKind.MALFORMED,
                line=stmt_line,
                text=trailing,
                detail="statement is missing its ';' terminator",
            ))

    return statements


def _string_end(content: str, start: int) -> int:
    """Return the index just past the string literal opening at `start`."""
    quote = content[start]
    i = start + 1
    while i < len(content):
        if content[i] == "\\":
            i += 2
            continue
        if content[i] == quote or content[i] == "\n":
            return i + 1
        i += 1
    return len(content)


def _classify_statement(text: str, line: int) -> Statement:
    """Tag a `;`-terminated top-level statement."""
    match = _IMPORT_RE.match(text)
    if match:
        return _classify_import(text, match.group(1), match.group(2), line)

    match = _VARIABLE_RE.match(text)
    if match:
        name, value = match.group(1), match.group(2).strip()
        if not value:
            return Statement(
                kind=StatementKind.MALFORMED,
                line=line,
                text=text,
                name=name,
                detail=f"variable @{name} has no value",
            )
        return Statement(kind=StatementKind.VARIABLE, line=line, text=text, name=name, value=value)

    match = _AT_RULE_RE.match(text)
    if match:
        if match.group(1).lower() in KNOWN_AT_RULES:
            return Statement(kind=StatementKind.AT_RULE, line=line, text=text, name=match.group(1))
        return Statement(
            kind=StatementKind.MALFORMED,
            line=line,
            text=text,
            detail=f"cannot read declaration '{text}'",
        )

    if text.startswith("@"):
        return Statement(
            kind=StatementKind.MALFORMED,
            line=line,
            text=text,
            detail=f"cannot read declaration '{text}'",
        )

    # Mixin calls and other statements that carry no global declaration
    return Statement(kind=StatementKind.OTHER, line=line, text=text)


def _classify_import(text: str, options: Optional[str], rest: str, line: int) -> Statement:
    tokens: List[str] = []
    for m in _IMPORT_TOKEN_RE.finditer(rest):
        token = next((g for g in m.groups() if g is not None), "")
        if token:
            tokens.append(token)

    if not tokens:
        return Statement(
            kind=StatementKind.MALFORMED,
            line=line,
            text=text,
            detail="import directive names no path",
        )

    import_type = ImportType.STANDARD
    if options:
        for option in options.split(","):
            option = option.strip().lower()
            if option in IMPORT_OPTIONS:
                import_type = IMPORT_OPTIONS[option]
                break

    return Statement(
        kind=StatementKind.IMPORT,
        line=line,
        text=text,
        tokens=tuple(tokens),
        import_type=import_type,
    )


def _classify_block(prelude: str, block_text: str, line: int) -> Statement:
    """Tag a top-level `prelude { ... }` block."""
    mixin = _split_mixin_prelude(prelude)
    if mixin is not None:
        name, params, guard = mixin
        return Statement(
            kind=StatementKind.MIXIN,
            line=line,
            text=prelude,
            name=name,
            params=params,
            guard=guard,
            body=block_text,
        )
    if prelude.startswith("@"):
        return Statement(kind=StatementKind.AT_RULE, line=line, text=prelude)
    return Statement(kind=StatementKind.RULE, line=line, text=prelude)


def _split_mixin_prelude(prelude: str) -> Optional[Tuple[str, str, Optional[str]]]:
    """
    Split `.name(params) [when guard]` into its parts.

    Returns:
        (name, params, guard) or None if the prelude is not a mixin signature.
    """
    match = _MIXIN_NAME_RE.match(prelude)
    if not match:
        return None

    open_at = match.end() - 1
    level = 0
    close_at = -1
    for pos in range(open_at, len(prelude)):
        if prelude[pos] == "(":
            level += 1
        elif prelude[pos] == ")":
            level -= 1
            if level == 0:
                close_at = pos
                break
    if close_at == -1:
        return None

    params = prelude[open_at + 1:close_at].strip()
    rest = prelude[close_at + 1:].strip()
    if not rest:
        return match.group(1), params, None
    if re.match(r"^when\b", rest):
        return match.group(1), params, rest[len("when"):].strip()
    return None


def extract_imports(content: str) -> List[ImportDirective]:
    """
    Extract every import token from stylesheet text, in file order.

    Args:
        content: Raw file text.

    Returns:
        One ImportDirective per token (a directive may name several).
    """
    directives: List[ImportDirective] = []
    for statement in scan_statements(content):
        if statement.kind is StatementKind.IMPORT:
            for token in statement.tokens:
                directives.append(ImportDirective(token, statement.import_type, statement.line))
    return directives


def is_remote(token: str) -> bool:
    """Check if an import token points at a url rather than a local file."""
    return bool(_REMOTE_RE.match(token.strip()))
