"""Tailwind theme exporter for token groups."""

import json
from typing import Dict, List, Optional, Sequence

from style.tokens import TokenCategory, TokenGroup


DEFAULT_CONTENT_GLOBS = ("./src/**/*.{js,jsx,ts,tsx}",)


def to_theme(groups: Sequence[TokenGroup]) -> Dict[str, Dict[str, Dict[str, Dict[str, str]]]]:
    """
    Build the theme-extension structure for the framework configuration.

    Empty groups are left out, as is the `other` group, which has no theme
    key of its own.

    Returns:
        `{"theme": {"extend": {category: {key: value}}}}`
    """
    extend: Dict[str, Dict[str, str]] = {}
    for group in groups:
        if group.category is TokenCategory.OTHER or not len(group):
            continue
        extend[group.category.value] = group.as_dict()
    return {"theme": {"extend": extend}}


def to_tailwind_config(
    groups: Sequence[TokenGroup],
    content: Optional[Sequence[str]] = None,
    indent: int = 2,
) -> str:
    """
    Render a `tailwind.config.js` module extending the theme with the tokens.

    Args:
        groups: Token groups from the converter.
        content: Content globs for the config (default: ./src sources).
        indent: Indentation width.

    Returns:
        JavaScript module text.
    """
    pad = " " * indent
    globs = list(content) if content is not None else list(DEFAULT_CONTENT_GLOBS)
    extend = to_theme(groups)["theme"]["extend"]

    lines: List[str] = [
        "/** @type {import('tailwindcss').Config} */",
        "module.exports = {",
        f"{pad}content: [",
    ]
    for glob in globs:
        lines.append(f"{pad * 2}{json.dumps(glob)},")
    lines.append(f"{pad}],")
    lines.append(f"{pad}theme: {{")
    lines.append(f"{pad * 2}extend: {{")
    for category, tokens in extend.items():
        lines.append(f"{pad * 3}{category}: {{")
        for key, value in tokens.items():
            lines.append(f"{pad * 4}{json.dumps(key)}: {json.dumps(value)},")
        lines.append(f"{pad * 3}}},")
    lines.append(f"{pad * 2}}},")
    lines.append(f"{pad}}},")
    lines.append(f"{pad}plugins: [],")
    lines.append("};")
    return "\n".join(lines) + "\n"
