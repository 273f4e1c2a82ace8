"""Style extraction, merging and token conversion."""

from .extractor import extract, extract_fragment
from .merger import merge
from .model import Mixin, StyleFragment, StyleModel, Variable
from .tokens import TokenCategory, TokenGroup, classify, convert, to_token_key

__all__ = [
    "extract",
    "extract_fragment",
    "merge",
    "Mixin",
    "StyleFragment",
    "StyleModel",
    "Variable",
    "TokenCategory",
    "TokenGroup",
    "classify",
    "convert",
    "to_token_key",
]
