"""Input layer: glyph normalization and canonical-grammar parsing."""

from .normalizer import ExpressionNormalizer, normalize
from .parser import ExpressionParser, parse_expression

__all__ = ["ExpressionNormalizer", "ExpressionParser", "normalize", "parse_expression"]
