"""
Glyph normalization for user input.

Rewrites the symbols typed on the on-screen math keyboard into the
canonical ASCII grammar the parser and the Taylor service expect.
"""

import re

from ..models import NormalizedExpression


class ExpressionNormalizer:
    """
    Rewrite Unicode math glyphs into canonical grammar.

    Rules are applied in order; each works on the previous one's output:
    explicit root calls, implicit single-character roots, pi, then the
    multiplication and division signs.

    Usage:
        normalizer = ExpressionNormalizer()
        normalizer.normalize("√(x)+π×2÷3")  # 'sqrt(x)+pi*2/3'
    """

    GLYPH_RULES = [
        # √(...) -> sqrt(...)
        (re.compile(r"√\s*\("), "sqrt("),
        # √x -> sqrt(x); only one character is taken, so √xy -> sqrt(x)y
        (re.compile(r"√\s*([0-9a-zA-Zπ])"), r"sqrt(\1)"),
        (re.compile(r"π"), "pi"),
        (re.compile(r"×"), "*"),
        (re.compile(r"÷"), "/"),
    ]

    def normalize(self, raw: str) -> NormalizedExpression:
        """
        Normalize ``raw``. Never fails; unknown characters pass through.

        A '√' with nothing usable after it is left as-is. The rules are
        repeated until nothing changes (a rewritten root can expose the
        one before it, as in '√√x'), so a second call is a no-op.
        """
        result = raw
        while True:
            previous = result
            for pattern, replacement in self.GLYPH_RULES:
                result = pattern.sub(replacement, result)
            if result == previous:
                return NormalizedExpression(result)


_default_normalizer = ExpressionNormalizer()


def normalize(raw: str) -> NormalizedExpression:
    """Convenience function: normalize with the default rules."""
    return _default_normalizer.normalize(raw)
