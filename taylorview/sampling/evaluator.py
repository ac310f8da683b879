"""
Numeric evaluation of canonical expressions.

Expression trees are converted to SymPy without automatic simplification,
so that ``x/x`` still fails at 0 the way a pointwise evaluator would, and
then compiled with ``lambdify`` against the ``math`` module.
"""

import cmath
import logging
import math
from typing import Callable, Union

import sympy as sp

from ..input.nodes import BinaryOp, Call, Group, Identifier, Node, Number, UnaryOp
from ..input.parser import ExpressionParser
from ..utils.constants import VARIABLE_NAME
from ..utils.errors import EvaluationDomainError, MalformedExpressionError

logger = logging.getLogger(__name__)

X = sp.Symbol(VARIABLE_NAME)

SYMPY_FUNCTIONS = {
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "sqrt": sp.sqrt,
    "exp": sp.exp,
    "log": sp.log,
    "factorial": sp.factorial,
}

SYMPY_CONSTANTS = {
    "pi": sp.pi,
    "e": sp.E,
    "E": sp.E,
}

# Errors a single evaluation may raise for an out-of-domain point
EVALUATION_ERRORS = (ValueError, ArithmeticError, TypeError)


def _factorial(value):
    """Factorial extended to reals through the gamma function."""
    return math.gamma(value + 1)


LAMBDIFY_MODULES = [{"factorial": _factorial}, "math"]


class ExpressionEvaluator:
    """
    Compile canonical expressions in ``x`` to numeric functions.

    Usage:
        evaluator = ExpressionEvaluator()
        f = evaluator.compile("sin(x)/x")
        f(1.0)   # 0.8414...
        f(0.0)   # raises EvaluationDomainError
    """

    def __init__(self, parser: ExpressionParser = None):
        self._parser = parser or ExpressionParser()

    def to_sympy(self, node: Node, source: str = "") -> sp.Expr:
        """
        Convert an expression tree to an unevaluated SymPy expression.

        Raises:
            MalformedExpressionError: For unknown functions or identifiers.
        """
        if isinstance(node, Number):
            if any(c in node.text for c in ".eE"):
                return sp.Float(node.text)
            return sp.Integer(node.text)

        if isinstance(node, Identifier):
            if node.name == VARIABLE_NAME:
                return X
            if node.name in SYMPY_CONSTANTS:
                return SYMPY_CONSTANTS[node.name]
            raise MalformedExpressionError(
                f"Unknown identifier {node.name!r}",
                expression=source,
                fragment=node.name,
                position=_find(source, node.name),
                suggestion=f"Only '{VARIABLE_NAME}', 'pi' and 'e' (or 'E') can be evaluated",
            )

        if isinstance(node, Group):
            return self.to_sympy(node.body, source)

        if isinstance(node, Call):
            func = SYMPY_FUNCTIONS.get(node.name)
            if func is None:
                raise MalformedExpressionError(
                    f"Unknown function {node.name!r}",
                    expression=source,
                    fragment=node.name,
                    position=_find(source, node.name),
                )
            return func(self.to_sympy(node.argument, source), evaluate=False)

        if isinstance(node, UnaryOp):
            operand = self.to_sympy(node.operand, source)
            if node.op == "-":
                return sp.Mul(sp.Integer(-1), operand, evaluate=False)
            return operand

        if isinstance(node, BinaryOp):
            left = self.to_sympy(node.left, source)
            right = self.to_sympy(node.right, source)
            if node.op == "+":
                return sp.Add(left, right, evaluate=False)
            if node.op == "-":
                negated = sp.Mul(sp.Integer(-1), right, evaluate=False)
                return sp.Add(left, negated, evaluate=False)
            if node.op == "*":
                return sp.Mul(left, right, evaluate=False)
            if node.op == "/":
                return sp.Mul(left, sp.Pow(right, -1, evaluate=False), evaluate=False)
            if node.op == "%":
                return sp.Mod(left, right, evaluate=False)
            if node.op == "**":
                return sp.Pow(left, right, evaluate=False)

        raise MalformedExpressionError(
            f"Cannot evaluate node {type(node).__name__}", expression=source
        )

    def compile(self, expr: Union[str, Node]) -> Callable[[float], float]:
        """
        Compile ``expr`` into a function of x.

        The returned function raises EvaluationDomainError when the value
        at a point is undefined, complex or not finite.

        Raises:
            MalformedExpressionError: If ``expr`` cannot be parsed or
                refers to unknown names.
        """
        if isinstance(expr, Node):
            source, tree = "", expr
        else:
            source, tree = expr, self._parser.parse(expr)

        sym_expr = self.to_sympy(tree, source)
        func = sp.lambdify(X, sym_expr, modules=LAMBDIFY_MODULES)
        logger.debug("Compiled %r as %s", source, sym_expr)

        def evaluate(x: float) -> float:
            try:
                value = func(x)
            except EVALUATION_ERRORS as e:
                raise EvaluationDomainError(x, source, str(e) or type(e).__name__)
            return _to_real(value, x, source)

        return evaluate

    def evaluate_constant(self, expr: str) -> float:
        """
        Evaluate an expression without free variables, e.g. '1/2' or 'pi/4'.

        Raises:
            MalformedExpressionError: If ``expr`` does not parse or uses x.
            EvaluationDomainError: If the value is undefined.
        """
        tree = self._parser.parse(expr)
        if any(isinstance(n, Identifier) and n.name == VARIABLE_NAME for n in tree.walk()):
            raise MalformedExpressionError(
                f"Expected a number, got an expression in {VARIABLE_NAME!r}",
                expression=expr,
            )
        sym_expr = self.to_sympy(tree, expr)
        try:
            value = sp.lambdify((), sym_expr, modules=LAMBDIFY_MODULES)()
        except EVALUATION_ERRORS as e:
            raise EvaluationDomainError(math.nan, expr, str(e) or type(e).__name__)
        return _to_real(value, math.nan, expr)


def _to_real(value, x: float, source: str) -> float:
    if isinstance(value, complex):
        if value.imag != 0 and not cmath.isnan(value):
            raise EvaluationDomainError(x, source, "complex result")
        value = value.real
    try:
        result = float(value)
    except EVALUATION_ERRORS as e:
        raise EvaluationDomainError(x, source, str(e) or type(e).__name__)
    if not math.isfinite(result):
        raise EvaluationDomainError(x, source, "result is not finite")
    return result


def _find(source: str, name: str):
    index = source.find(name) if source else -1
    return index if index >= 0 else None


_default_evaluator = ExpressionEvaluator()


def compile_expression(expr: Union[str, Node]) -> Callable[[float], float]:
    """Convenience function: compile with the default evaluator."""
    return _default_evaluator.compile(expr)
