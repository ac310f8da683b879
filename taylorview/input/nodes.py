"""
Expression tree for the canonical grammar.

Nodes are immutable. ``Group`` records parentheses written in the source
so that printers can reproduce the grouping the author chose.
"""

from dataclasses import dataclass
from typing import Tuple


class Node:
    """Base class for expression tree nodes."""

    def children(self) -> Tuple["Node", ...]:
        return ()

    def walk(self):
        """Yield this node and all descendants, depth first."""
        yield self
        for child in self.children():
            yield from child.walk()


@dataclass(frozen=True)
class Number(Node):
    """Numeric literal, kept as its source text."""

    text: str


@dataclass(frozen=True)
class Identifier(Node):
    """Variable or named constant (x, pi, e, ...)."""

    name: str


@dataclass(frozen=True)
class Group(Node):
    """Parenthesized sub-expression."""

    body: Node

    def children(self):
        return (self.body,)


@dataclass(frozen=True)
class Call(Node):
    """Named function applied to one argument, e.g. sin(x)."""

    name: str
    argument: Node

    def children(self):
        return (self.argument,)


@dataclass(frozen=True)
class UnaryOp(Node):
    """Prefix sign: '-' or '+'."""

    op: str
    operand: Node

    def children(self):
        return (self.operand,)


@dataclass(frozen=True)
class BinaryOp(Node):
    """
    Infix operation: + - * / % or ** (power).

    ``spaced`` is True when the source had whitespace around the operator.
    """

    op: str
    left: Node
    right: Node
    spaced: bool = False

    def children(self):
        return (self.left, self.right)


# Binding strength of each operator; higher binds tighter.
PRECEDENCE = {
    "+": 10,
    "-": 10,
    "neg": 15,
    "*": 20,
    "/": 20,
    "%": 20,
    "**": 30,
}


def precedence(node: Node) -> int:
    """Binding strength of ``node``; atoms bind tightest."""
    if isinstance(node, BinaryOp):
        return PRECEDENCE[node.op]
    if isinstance(node, UnaryOp):
        return PRECEDENCE["neg"]
    return 100
