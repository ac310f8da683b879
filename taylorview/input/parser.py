"""
Canonical-grammar parser.

Converts expression strings (as typed after normalization, or as echoed by
the Taylor service) into expression trees. Grammar, loosest first:

    sum      := signed (('+' | '-') signed)*
    signed   := ('-' | '+') signed | product
    product  := factor (('*' | '/' | '%') factor)*
    factor   := ('-' | '+') factor | power
    power    := atom (('**' | '^') factor)?
    atom     := NUMBER | NAME '(' sum ')' | NAME | '(' sum ')'

A leading sign binds looser than '*', '/' and '**', so '-x**3/6' reads as
-((x**3)/6).
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .nodes import BinaryOp, Call, Group, Identifier, Node, Number, UnaryOp
from ..utils.errors import MalformedExpressionError


@dataclass(frozen=True)
class Token:
    kind: str  # NUMBER, NAME, OP, LPAREN, RPAREN, END
    text: str
    position: int
    space_before: bool = False


class Tokenizer:
    """Split an expression string into tokens."""

    TOKEN_RE = re.compile(
        r"""
        (?P<NUMBER>(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)
        |(?P<NAME>[A-Za-z_]\w*)
        |(?P<OP>\*\*|[-+*/%^])
        |(?P<LPAREN>\()
        |(?P<RPAREN>\))
        """,
        re.VERBOSE,
    )

    def tokenize(self, text: str) -> List[Token]:
        tokens = []
        pos = 0
        space = False
        while pos < len(text):
            if text[pos].isspace():
                space = True
                pos += 1
                continue

            match = self.TOKEN_RE.match(text, pos)
            if match is None:
                raise MalformedExpressionError(
                    f"Unexpected character {text[pos]!r} at position {pos}",
                    expression=text,
                    fragment=text[pos],
                    position=pos,
                )

            kind = match.lastgroup
            value = match.group()
            if kind == "OP" and value == "^":
                value = "**"
            tokens.append(Token(kind, value, pos, space))
            space = False
            pos = match.end()

        tokens.append(Token("END", "", len(text), space))
        return tokens


class _TokenStream:
    """Cursor over a token list for one parse."""

    def __init__(self, text: str, tokens: List[Token]):
        self.text = text
        self.tokens = tokens
        self.index = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def peek(self, offset: int = 1) -> Token:
        return self.tokens[min(self.index + offset, len(self.tokens) - 1)]

    def advance(self) -> Token:
        token = self.tokens[self.index]
        if token.kind != "END":
            self.index += 1
        return token

    def at_op(self, *ops: str) -> bool:
        return self.current.kind == "OP" and self.current.text in ops

    def error(self, message: str, token: Optional[Token] = None, **kwargs):
        token = token or self.current
        return MalformedExpressionError(
            message,
            expression=self.text,
            fragment=token.text,
            position=token.position,
            **kwargs,
        )


class ExpressionParser:
    """
    Parse canonical-grammar strings into expression trees.

    Usage:
        parser = ExpressionParser()
        tree = parser.parse("-x**3/6")
    """

    def __init__(self):
        """Initialize the parser."""
        self._tokenizer = Tokenizer()

    def parse(self, text: str) -> Node:
        """
        Parse ``text`` into an expression tree.

        Raises:
            MalformedExpressionError: naming the offending fragment and its
                position when ``text`` is not in the canonical grammar.
        """
        if not text or not text.strip():
            raise MalformedExpressionError("Empty expression", expression=text or "")

        stream = _TokenStream(text, self._tokenizer.tokenize(text))
        node = self._parse_sum(stream)

        token = stream.current
        if token.kind == "RPAREN":
            raise stream.error(
                f"Unexpected ')' at position {token.position}",
                suggestion="Remove the extra closing parenthesis",
            )
        if token.kind != "END":
            raise self._missing_operator(stream)
        return node

    def try_parse(self, text: str) -> Tuple[Optional[Node], Optional[str]]:
        """
        Attempt to parse, returning None on failure instead of raising.

        Returns:
            Tuple of (tree or None, error message or None)
        """
        try:
            return self.parse(text), None
        except MalformedExpressionError as e:
            return None, str(e)

    def _parse_sum(self, stream: _TokenStream) -> Node:
        node = self._parse_signed(stream)
        while stream.at_op("+", "-"):
            op = stream.advance()
            spaced = op.space_before or stream.current.space_before
            right = self._parse_signed(stream)
            node = BinaryOp(op.text, node, right, spaced)
        return node

    def _parse_signed(self, stream: _TokenStream) -> Node:
        if stream.at_op("+", "-"):
            op = stream.advance()
            return UnaryOp(op.text, self._parse_signed(stream))
        return self._parse_product(stream)

    def _parse_product(self, stream: _TokenStream) -> Node:
        node = self._parse_factor(stream)
        while stream.at_op("*", "/", "%"):
            op = stream.advance()
            spaced = op.space_before or stream.current.space_before
            right = self._parse_factor(stream)
            node = BinaryOp(op.text, node, right, spaced)
        return node

    def _parse_factor(self, stream: _TokenStream) -> Node:
        if stream.at_op("+", "-"):
            op = stream.advance()
            return UnaryOp(op.text, self._parse_factor(stream))
        return self._parse_power(stream)

    def _parse_power(self, stream: _TokenStream) -> Node:
        base = self._parse_atom(stream)
        if stream.at_op("**"):
            op = stream.advance()
            spaced = op.space_before or stream.current.space_before
            # Right-associative: 2**x**2 == 2**(x**2)
            exponent = self._parse_factor(stream)
            return BinaryOp("**", base, exponent, spaced)
        return base

    def _parse_atom(self, stream: _TokenStream) -> Node:
        token = stream.current

        if token.kind == "NUMBER":
            stream.advance()
            return Number(token.text)

        if token.kind == "NAME":
            stream.advance()
            if stream.current.kind == "LPAREN":
                argument = self._parse_parenthesized(stream)
                return Call(token.text, argument)
            return Identifier(token.text)

        if token.kind == "LPAREN":
            return Group(self._parse_parenthesized(stream))

        if token.kind == "END":
            raise stream.error(
                "Unexpected end of expression",
                suggestion="The expression ends with an operator",
            )

        raise stream.error(f"Unexpected {token.text!r} at position {token.position}")

    def _parse_parenthesized(self, stream: _TokenStream) -> Node:
        opening = stream.advance()
        if stream.current.kind == "RPAREN":
            raise stream.error(f"Empty parentheses at position {opening.position}")

        body = self._parse_sum(stream)

        if stream.current.kind != "RPAREN":
            if stream.current.kind == "END":
                raise stream.error(
                    f"Missing ')' for '(' at position {opening.position}",
                    token=opening,
                    suggestion="Add the missing closing parenthesis",
                )
            raise self._missing_operator(stream)
        stream.advance()
        return body

    def _missing_operator(self, stream: _TokenStream) -> MalformedExpressionError:
        token = stream.current
        return stream.error(
            f"Missing operator before {token.text!r} at position {token.position}",
            suggestion=f"Insert '*' before {token.text!r}",
        )


_default_parser = ExpressionParser()


def parse_expression(text: str) -> Node:
    """
    Convenience function: parse text directly to a tree.

    Raises MalformedExpressionError on failure.
    """
    return _default_parser.parse(text)
