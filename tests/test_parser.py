"""
Tests for the canonical-grammar parser.
"""

import pytest


class TestParseTrees:
    """Tests for the trees the parser builds."""

    def test_identifier(self):
        """Test a bare variable."""
        from taylorview.input.parser import parse_expression
        from taylorview.input.nodes import Identifier

        assert parse_expression("x") == Identifier("x")

    def test_leading_minus_binds_loosely(self):
        """Test -x**3/6 parses as -((x**3)/6)."""
        from taylorview.input.parser import parse_expression
        from taylorview.input.nodes import BinaryOp, Identifier, Number, UnaryOp

        tree = parse_expression("-x**3/6")

        assert tree == UnaryOp(
            "-",
            BinaryOp("/", BinaryOp("**", Identifier("x"), Number("3")), Number("6")),
        )

    def test_power_is_right_associative(self):
        """Test 2**x**2 parses as 2**(x**2)."""
        from taylorview.input.parser import parse_expression
        from taylorview.input.nodes import BinaryOp, Identifier, Number

        tree = parse_expression("2**x**2")

        assert tree == BinaryOp(
            "**", Number("2"), BinaryOp("**", Identifier("x"), Number("2"))
        )

    def test_caret_is_power(self):
        """Test '^' is accepted as '**' and spacing is recorded."""
        from taylorview.input.parser import parse_expression
        from taylorview.input.nodes import BinaryOp, Identifier, Number

        tree = parse_expression("x ^ 2")

        assert tree == BinaryOp("**", Identifier("x"), Number("2"), spaced=True)

    def test_subtraction_is_left_associative(self):
        """Test a-b-c parses as (a-b)-c."""
        from taylorview.input.parser import parse_expression
        from taylorview.input.nodes import BinaryOp, Identifier

        tree = parse_expression("a-b-c")

        assert tree == BinaryOp(
            "-", BinaryOp("-", Identifier("a"), Identifier("b")), Identifier("c")
        )

    def test_call_and_group(self):
        """Test function calls and parenthesized groups."""
        from taylorview.input.parser import parse_expression
        from taylorview.input.nodes import BinaryOp, Call, Group, Identifier, Number

        assert parse_expression("sin(x)") == Call("sin", Identifier("x"))
        assert parse_expression("(x+1)") == Group(
            BinaryOp("+", Identifier("x"), Number("1"))
        )

    def test_negative_exponent(self):
        """Test a sign directly after '**'."""
        from taylorview.input.parser import parse_expression
        from taylorview.input.nodes import BinaryOp, Identifier, Number, UnaryOp

        tree = parse_expression("x**-1")

        assert tree == BinaryOp("**", Identifier("x"), UnaryOp("-", Number("1")))

    def test_service_float_literals(self):
        """Test decimal and exponent literals as produced by the service."""
        from taylorview.input.parser import parse_expression
        from taylorview.input.nodes import BinaryOp, Identifier, Number

        tree = parse_expression("0.166666666666667*x")
        assert tree == BinaryOp("*", Number("0.166666666666667"), Identifier("x"))

        assert parse_expression("1.5e-3") == Number("1.5e-3")

    def test_walk_visits_every_node(self):
        """Test walking a tree yields all nodes."""
        from taylorview.input.parser import parse_expression
        from taylorview.input.nodes import Identifier

        tree = parse_expression("sin(x) + x**2")
        names = [n.name for n in tree.walk() if isinstance(n, Identifier)]

        assert names == ["x", "x"]


class TestParseErrors:
    """Tests for malformed input."""

    @pytest.mark.parametrize(
        "text, fragment, position",
        [
            ("2x", "x", 1),
            ("(x+1", "(", 0),
            ("x+1)", ")", 3),
            ("x $ 1", "$", 2),
            ("sin(x", "(", 3),
        ],
    )
    def test_reports_offending_fragment(self, text, fragment, position):
        """Test errors name the offending substring and position."""
        from taylorview.input.parser import parse_expression
        from taylorview.utils.errors import MalformedExpressionError

        with pytest.raises(MalformedExpressionError) as exc_info:
            parse_expression(text)

        exc = exc_info.value
        assert exc.expression == text
        assert exc.fragment == fragment
        assert exc.position == position

    def test_empty_expression(self):
        """Test empty input is rejected by the parser."""
        from taylorview.input.parser import parse_expression
        from taylorview.utils.errors import MalformedExpressionError

        with pytest.raises(MalformedExpressionError):
            parse_expression("   ")

    def test_trailing_operator(self):
        """Test an expression ending in an operator."""
        from taylorview.input.parser import parse_expression
        from taylorview.utils.errors import MalformedExpressionError

        with pytest.raises(MalformedExpressionError, match="end of expression"):
            parse_expression("x+")

    def test_empty_call(self):
        """Test a call with no argument."""
        from taylorview.input.parser import parse_expression
        from taylorview.utils.errors import MalformedExpressionError

        with pytest.raises(MalformedExpressionError, match="Empty parentheses"):
            parse_expression("sin()")

    def test_unicode_glyph_needs_normalizing(self):
        """Test glyphs are rejected until normalized."""
        from taylorview.input.parser import parse_expression
        from taylorview.input.normalizer import normalize
        from taylorview.utils.errors import MalformedExpressionError

        with pytest.raises(MalformedExpressionError) as exc_info:
            parse_expression("2×π")
        assert exc_info.value.fragment == "×"

        assert parse_expression(normalize("2×π")) is not None

    def test_try_parse(self):
        """Test try_parse returns an error message instead of raising."""
        from taylorview.input.parser import ExpressionParser

        parser = ExpressionParser()

        tree, error = parser.try_parse("x**")
        assert tree is None
        assert error

        tree, error = parser.try_parse("x**2")
        assert tree is not None
        assert error is None
