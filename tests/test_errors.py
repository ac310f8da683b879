"""
Tests for error handling module.

Tests the centralized error handling with rich context and suggestions.
"""

import json

import pytest


class TestErrorContext:
    """Test ErrorContext creation and conversion."""

    def test_from_malformed_expression_error(self):
        """Test ErrorContext from MalformedExpressionError."""
        from taylorview.utils.errors import ErrorContext, MalformedExpressionError

        exc = MalformedExpressionError(
            "Missing ')' for '('",
            expression="x**(n+1",
            fragment="(",
            position=3,
            suggestion="Close the parenthesis",
        )

        ctx = ErrorContext.from_exception(exc)

        assert ctx.title == "Malformed Expression"
        assert "Missing ')'" in ctx.message
        assert ctx.suggestions[0] == "Close the parenthesis"
        assert ctx.recoverable is True

    def test_from_evaluation_domain_error(self):
        """Test a domain error is a warning."""
        from taylorview.utils.errors import ErrorContext, ErrorSeverity, EvaluationDomainError

        exc = EvaluationDomainError(0.0, "1/x", "division by zero")
        ctx = ErrorContext.from_exception(exc)

        assert ctx.title == "Evaluation Error"
        assert "x = 0.0" in ctx.message
        assert ctx.severity == ErrorSeverity.WARNING
        assert "1/x" in ctx.technical_details

    def test_from_data_integrity_error(self):
        from taylorview.utils.errors import DataIntegrityError, ErrorContext

        exc = DataIntegrityError.missing(3, "terms", 3)
        ctx = ErrorContext.from_exception(exc)

        assert ctx.title == "Incomplete Result"
        assert "order 3" in ctx.message
        assert "terms" in ctx.technical_details

    def test_from_json_error(self):
        """Test a JSON decoding error is reported as invalid input."""
        from taylorview.utils.errors import ErrorContext

        try:
            json.loads("{not json")
        except ValueError as e:
            ctx = ErrorContext.from_exception(e)

        assert ctx.title == "Invalid Input"
        assert any("JSON" in s for s in ctx.suggestions)

    def test_from_os_error(self):
        from taylorview.utils.errors import ErrorContext

        exc = FileNotFoundError(2, "No such file or directory", "result.json")
        ctx = ErrorContext.from_exception(exc, context="reading result")

        assert ctx.title == "File Error"
        assert "reading result" in ctx.technical_details

    def test_from_import_error(self):
        from taylorview.utils.errors import ErrorContext, ErrorSeverity

        ctx = ErrorContext.from_exception(ImportError("No module named 'sympy'"))

        assert ctx.title == "Missing Dependency"
        assert ctx.severity == ErrorSeverity.CRITICAL
        assert ctx.recoverable is False

    def test_from_generic_exception(self):
        """Test ErrorContext from generic exception."""
        from taylorview.utils.errors import ErrorContext

        exc = RuntimeError("Something went wrong")
        ctx = ErrorContext.from_exception(exc, context="during sampling")

        assert ctx.title == "Error"
        assert "Something went wrong" in ctx.message
        assert "sampling" in ctx.technical_details


class TestTaylorViewError:
    """Test base TaylorViewError class."""

    def test_custom_suggestions(self):
        from taylorview.utils.errors import TaylorViewError

        exc = TaylorViewError("Failed", suggestions=["Do this", "Or that"])

        assert exc.suggestions == ["Do this", "Or that"]
        assert str(exc) == "Failed"

    def test_default_suggestions_not_shared(self):
        """Test instances do not mutate the class defaults."""
        from taylorview.utils.errors import MalformedExpressionError

        first = MalformedExpressionError("a", suggestion="first only")
        second = MalformedExpressionError("b")

        assert "first only" in first.suggestions
        assert "first only" not in second.suggestions
        assert "first only" not in MalformedExpressionError.default_suggestions

    def test_critical_is_not_recoverable(self):
        from taylorview.utils.errors import ErrorSeverity, TaylorViewError

        exc = TaylorViewError("Broken", severity=ErrorSeverity.CRITICAL)

        assert exc.to_context().recoverable is False

    @pytest.mark.parametrize(
        "name",
        [
            "MalformedExpressionError",
            "EvaluationDomainError",
            "DataIntegrityError",
            "NumberParseError",
            "InvalidRequestError",
            "ServiceError",
        ],
    )
    def test_hierarchy(self, name):
        from taylorview.utils import errors

        assert issubclass(getattr(errors, name), errors.TaylorViewError)


class TestMalformedExpressionError:
    """Test parse error fields."""

    def test_caret_under_position(self):
        from taylorview.utils.errors import MalformedExpressionError

        exc = MalformedExpressionError("Bad", expression="2x", fragment="x", position=1)

        lines = exc.technical_details.splitlines()
        assert lines[0] == "Expression: 2x"
        # Caret lines up with the offending character
        assert lines[1].index("^") == len("Expression: ") + 1

    def test_fields(self):
        from taylorview.utils.errors import MalformedExpressionError

        exc = MalformedExpressionError("Bad", expression="x $ 1", fragment="$", position=2)

        assert exc.expression == "x $ 1"
        assert exc.fragment == "$"
        assert exc.position == 2

    def test_no_expression_no_details(self):
        from taylorview.utils.errors import MalformedExpressionError

        assert MalformedExpressionError("Bad").technical_details is None


class TestNumberParseError:
    def test_fields_and_message(self):
        from taylorview.utils.errors import NumberParseError

        exc = NumberParseError(2, "abc")

        assert exc.index == 2
        assert exc.raw == "abc"
        assert exc.field == "evaluated_derivatives"
        assert "evaluated_derivatives[2]" in str(exc)


class TestFormatting:
    """Test user-facing formatting helpers."""

    def test_format_error_for_user(self):
        from taylorview.utils.errors import ServiceError, format_error_for_user

        text = format_error_for_user(ServiceError("Unsupported function"))

        assert text.startswith("Unsupported function")
        assert "Try: Check the function for typos" in text

    def test_format_error_details(self):
        from taylorview.utils.errors import DataIntegrityError, format_error_details

        text = format_error_details(DataIntegrityError.missing(4, "terms", 4))

        assert text.startswith("Incomplete Result:")
        assert "Suggestions:" in text
        assert "  1. " in text
        assert "Technical details:" in text
        assert "Field: terms, index: 4" in text

    def test_format_without_details(self):
        from taylorview.utils.errors import InvalidRequestError, format_error_details

        text = format_error_details(InvalidRequestError("The function must not be empty"))

        assert "Technical details:" not in text
