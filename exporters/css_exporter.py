"""Stylesheet exporter: token groups as CSS custom properties."""

from typing import List, Sequence

from style.tokens import TokenGroup


HEADER = "/* Generated from LESS variables */"


def to_css(groups: Sequence[TokenGroup]) -> str:
    """
    Render every token as a `--key: value;` property on `:root`.

    One comment line introduces each non-empty category. Returns just the
    header when there are no tokens.
    """
    lines: List[str] = [HEADER, ""]
    body: List[str] = []
    for group in groups:
        tokens = group.as_dict()
        if not tokens:
            continue
        body.append(f"  /* {group.category.value} */")
        for key, value in tokens.items():
            body.append(f"  --{key}: {value};")

    if body:
        lines.append(":root {")
        lines.extend(body)
        lines.append("}")
        lines.append("")
    return "\n".join(lines)
