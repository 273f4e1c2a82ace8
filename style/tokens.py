"""Classification of merged variables into design-token groups."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple

from pipeline.log import get_logger
from .model import StyleModel


logger = get_logger("tokens")


class TokenCategory(str, Enum):
    """Token groups, valued by their key in the framework theme."""

    BORDER_RADIUS = "borderRadius"
    COLORS = "colors"
    SPACING = "spacing"
    FONT_SIZE = "fontSize"
    FONT_FAMILY = "fontFamily"
    OTHER = "other"


# Evaluated top to bottom; the first rule with a matching fragment wins
CATEGORY_RULES: Tuple[Tuple[TokenCategory, Tuple[str, ...]], ...] = (
    (TokenCategory.BORDER_RADIUS, ("radius",)),
    (TokenCategory.COLORS, ("color", "colour", "bg", "text", "background", "border")),
    (TokenCategory.SPACING, ("space", "spacing", "gap", "margin", "padding")),
    (TokenCategory.FONT_SIZE, ("font-size", "size")),
    (TokenCategory.FONT_FAMILY, ("font",)),
)

_CAMEL_RE = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATOR_RE = re.compile(r"[\s_.]+")
_DASHES_RE = re.compile(r"-{2,}")


@dataclass(frozen=True)
class Token:
    """One exported design value."""

    name: str  # variable name as declared
    key: str  # framework key
    value: str


@dataclass
class TokenGroup:
    """Tokens of one category, in model order."""

    category: TokenCategory
    tokens: List[Token] = field(default_factory=list)

    def as_dict(self) -> Dict[str, str]:
        """
        Key to value mapping for this group.

        When two names normalize to the same key, the one later in model
        order wins and the collision is logged.
        """
        result: Dict[str, str] = {}
        owners: Dict[str, str] = {}
        for token in self.tokens:
            if token.key in result:
                logger.warning(
                    "Token key '%s' from @%s replaces the one from @%s",
                    token.key, token.name, owners[token.key],
                )
            result[token.key] = token.value
            owners[token.key] = token.name
        return result

    def __len__(self) -> int:
        return len(self.tokens)


def to_token_key(name: str) -> str:
    """
    Normalize a variable name to the framework's kebab-case key convention.

    `primaryColor`, `primary_color` and `primary-color` all become
    `primary-color`.
    """
    key = _CAMEL_RE.sub(r"\1-\2", name.lstrip("@"))
    key = _SEPARATOR_RE.sub("-", key).lower()
    key = _DASHES_RE.sub("-", key).strip("-")
    return key or name


def classify(name: str) -> TokenCategory:
    """Return the category of a variable name; OTHER when no rule matches."""
    key = to_token_key(name)
    for category, fragments in CATEGORY_RULES:
        if any(fragment in key for fragment in fragments):
            return category
    return TokenCategory.OTHER


def convert(model: StyleModel) -> List[TokenGroup]:
    """
    Convert a merged style model into token groups.

    Every variable lands in exactly one group. Values pass through
    unchanged. Groups come back in fixed category order, empty ones
    included.

    Args:
        model: The merged StyleModel; it is only read.

    Returns:
        One TokenGroup per TokenCategory.
    """
    groups = {category: TokenGroup(category=category) for category in TokenCategory}
    for entry in model.iter_variables():
        category = classify(entry.name)
        groups[category].tokens.append(Token(
            name=entry.name,
            key=to_token_key(entry.name),
            value=entry.value,
        ))
    return [groups[category] for category in TokenCategory]
