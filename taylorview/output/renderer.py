"""
Markup rendering for expressions.

Turns canonical-grammar strings into LaTeX-style markup by parsing them
into a tree and printing the tree, and renders markup to PNG through
matplotlib's mathtext.
"""

import io
import logging
import re

from ..input.nodes import BinaryOp, Call, Group, Identifier, Node, Number, UnaryOp, precedence
from ..input.parser import ExpressionParser
from ..utils.constants import CONSTANT_MARKUP, FUNCTION_MARKUP
from ..utils.errors import MalformedExpressionError

logger = logging.getLogger(__name__)

# A trailing control word such as \pi would swallow a following letter
_TRAILING_COMMAND_RE = re.compile(r"\\[A-Za-z]+$")


class MarkupRenderer:
    """
    Render canonical expressions as LaTeX-style markup.

    Printing rules:
    - ``a**b`` -> ``a^{b}``; source parentheses in the exponent are kept
    - sin, cos, tan, sqrt, exp -> ``\\sin`` ...; log -> ``\\ln``; pi -> ``\\pi``
    - ``factorial(n)`` -> ``n!`` (postfix)
    - ``a/b`` -> ``\\frac{a}{b}``; parentheses written around either side stay
    - multiplication is juxtaposition, except that a digit after another
      factor gets ``\\cdot`` (``x*2`` -> ``x \\cdot 2``), since ``x2`` or
      ``23`` would misread
    - whitespace around ``+``/``-`` follows the source

    Usage:
        renderer = MarkupRenderer()
        renderer.render("-x**3/6")  # '-\\frac{x^{3}}{6}'
    """

    def __init__(self, parser: ExpressionParser = None):
        self._parser = parser or ExpressionParser()

    def render(self, expr: str) -> str:
        """
        Render ``expr`` to markup. Empty input gives empty output.

        Raises:
            MalformedExpressionError: If ``expr`` is not in canonical grammar.
        """
        if not expr or not expr.strip():
            return ""
        return self.render_tree(self._parser.parse(expr))

    def render_or_raw(self, expr: str) -> str:
        """Render ``expr``, falling back to the raw text if it does not parse."""
        try:
            return self.render(expr)
        except MalformedExpressionError as e:
            logger.debug("Showing %r unrendered: %s", expr, e)
            return expr

    def render_tree(self, node: Node) -> str:
        """Render an already parsed tree."""
        return " ".join(self._print(node).split())

    def _print(self, node: Node) -> str:
        if isinstance(node, Number):
            return node.text

        if isinstance(node, Identifier):
            return CONSTANT_MARKUP.get(node.name, node.name)

        if isinstance(node, Group):
            return f"({self._print(node.body)})"

        if isinstance(node, Call):
            return self._print_call(node)

        if isinstance(node, UnaryOp):
            operand = self._print(node.operand)
            if precedence(node.operand) < precedence(node):
                operand = f"({operand})"
            return f"{node.op}{operand}"

        if isinstance(node, BinaryOp):
            return self._print_binary(node)

        raise TypeError(f"Cannot render node of type {type(node).__name__}")

    def _print_call(self, node: Call) -> str:
        argument = self._print(node.argument)
        if node.name == "factorial":
            if not _is_atomic(node.argument):
                argument = f"({argument})"
            return f"{argument}!"
        name = FUNCTION_MARKUP.get(node.name, node.name)
        return f"{name}({argument})"

    def _print_binary(self, node: BinaryOp) -> str:
        op = node.op

        if op == "/":
            return rf"\frac{{{self._print(node.left)}}}{{{self._print(node.right)}}}"

        if op == "**":
            base = self._print(node.left)
            if not _is_atomic(node.left):
                base = f"({base})"
            return f"{base}^{{{self._print(node.right)}}}"

        left = self._print_operand(node.left, precedence(node), right_side=False, op=op)
        right = self._print_operand(node.right, precedence(node), right_side=True, op=op)

        if op == "*":
            if right[:1].isdigit() or right[:1] == ".":
                return rf"{left} \cdot {right}"
            if node.spaced or (_TRAILING_COMMAND_RE.search(left) and right[:1].isalpha()):
                return f"{left} {right}"
            return f"{left}{right}"

        if op == "%":
            return rf"{left} \bmod {right}"

        if node.spaced:
            return f"{left} {op} {right}"
        return f"{left}{op}{right}"

    def _print_operand(self, node: Node, parent: int, right_side: bool, op: str) -> str:
        text = self._print(node)
        inner = precedence(node)
        needs_parens = inner < parent
        if right_side and inner == parent and op in ("-", "%"):
            # a - (b + c) and a % (b * c) change meaning without parentheses
            needs_parens = True
        if op == "*" and isinstance(node, UnaryOp) and right_side:
            needs_parens = True
        return f"({text})" if needs_parens else text

    def render_png(self, markup: str, fontsize: int = 14) -> bytes:
        """
        Render markup to PNG bytes using matplotlib's mathtext.

        Args:
            markup: Markup string without surrounding '$'
            fontsize: Font size in points

        Returns:
            PNG image data
        """
        import matplotlib

        matplotlib.use("Agg")  # Non-GUI backend
        import matplotlib.pyplot as plt

        fig = plt.figure(figsize=(8, 1))
        fig.patch.set_facecolor("white")
        fig.text(0.5, 0.5, f"${markup}$", fontsize=fontsize, ha="center", va="center")

        buf = io.BytesIO()
        try:
            fig.savefig(
                buf,
                format="png",
                dpi=150,
                bbox_inches="tight",
                pad_inches=0.1,
                facecolor="white",
            )
        finally:
            plt.close(fig)
        return buf.getvalue()


def _is_atomic(node: Node) -> bool:
    return isinstance(node, (Number, Identifier, Group, Call))


_default_renderer = MarkupRenderer()


def render(expr: str) -> str:
    """Convenience function: render a canonical expression to markup."""
    return _default_renderer.render(expr)


def render_or_raw(expr: str) -> str:
    """Convenience function: render, or return ``expr`` when it does not parse."""
    return _default_renderer.render_or_raw(expr)
