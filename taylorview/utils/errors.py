"""
Centralized error handling for TaylorView.

Provides a hierarchy of custom exceptions with user-friendly messages,
suggestions for fixes, and the structured fields (index, field, offending
fragment) callers need to report exactly what went wrong.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, List


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    INFO = auto()  # Informational, operation may have partially succeeded
    WARNING = auto()  # Non-fatal, can continue with degraded output
    ERROR = auto()  # Operation failed for this input
    CRITICAL = auto()  # Unrecoverable error


@dataclass
class ErrorContext:
    """
    Rich context for error reporting.

    Provides user-friendly information beyond the raw exception.
    """

    title: str  # Short title for a status line or dialog
    message: str  # User-friendly message
    technical_details: Optional[str]  # Debug info
    suggestions: List[str]  # Actionable suggestions
    severity: ErrorSeverity
    recoverable: bool = True

    @classmethod
    def from_exception(cls, exc: Exception, context: str = "") -> "ErrorContext":
        """Create ErrorContext from any exception using smart detection."""
        exc_type = type(exc).__name__
        exc_msg = str(exc)

        if isinstance(exc, TaylorViewError):
            return exc.to_context()

        # JSON / file input problems
        if isinstance(exc, (ValueError, KeyError)) and (
            "json" in exc_type.lower() or "json" in exc_msg.lower()
        ):
            return cls(
                title="Invalid Input",
                message="The result data could not be read.",
                technical_details=f"{exc_type}: {exc_msg}",
                suggestions=[
                    "Check that the file contains the service response as JSON",
                    "Pass '-' to read the response from stdin",
                ],
                severity=ErrorSeverity.ERROR,
            )

        if isinstance(exc, OSError):
            return cls(
                title="File Error",
                message=f"Could not access a file: {exc_msg}",
                technical_details=f"{exc_type}: {exc_msg}\nContext: {context}",
                suggestions=["Check the path and its permissions"],
                severity=ErrorSeverity.ERROR,
            )

        if isinstance(exc, ImportError):
            return cls(
                title="Missing Dependency",
                message="A required component is not installed.",
                technical_details=f"{exc_type}: {exc_msg}",
                suggestions=[
                    "Check that all dependencies are installed",
                    "Run: pip install -e .[dev]",
                ],
                severity=ErrorSeverity.CRITICAL,
                recoverable=False,
            )

        # Generic fallback
        return cls(
            title="Error",
            message=f"An unexpected error occurred: {exc_msg}",
            technical_details=f"{exc_type}: {exc_msg}\nContext: {context}",
            suggestions=["Try again"],
            severity=ErrorSeverity.ERROR,
        )


class TaylorViewError(Exception):
    """
    Base exception for all TaylorView errors.

    Subclasses provide rich error context for user-friendly reporting.
    """

    default_title = "Error"
    default_suggestions: List[str] = []
    default_severity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        *,
        suggestions: Optional[List[str]] = None,
        technical_details: Optional[str] = None,
        severity: Optional[ErrorSeverity] = None,
    ):
        super().__init__(message)
        self.user_message = message
        self.suggestions = suggestions or self.default_suggestions.copy()
        self.technical_details = technical_details
        self.severity = severity or self.default_severity

    def to_context(self) -> ErrorContext:
        """Convert to ErrorContext for display."""
        return ErrorContext(
            title=self.default_title,
            message=self.user_message,
            technical_details=self.technical_details,
            suggestions=self.suggestions,
            severity=self.severity,
            recoverable=self.severity != ErrorSeverity.CRITICAL,
        )


# === Expression Errors ===


class MalformedExpressionError(TaylorViewError):
    """Raised when text cannot be parsed as an expression in canonical grammar."""

    default_title = "Malformed Expression"
    default_suggestions = [
        "Check for unbalanced parentheses ( )",
        "Use '*' for multiplication (e.g. '2*x', not '2x')",
        "Supported functions: sin, cos, tan, sqrt, exp, log, factorial",
    ]

    def __init__(
        self,
        message: str,
        *,
        expression: str = "",
        fragment: str = "",
        position: Optional[int] = None,
        suggestion: Optional[str] = None,
        **kwargs,
    ):
        suggestions = kwargs.pop("suggestions", None) or self.default_suggestions.copy()
        if suggestion:
            suggestions.insert(0, suggestion)

        details = kwargs.pop("technical_details", None)
        if details is None and expression:
            details = f"Expression: {expression}"
            if position is not None:
                # Caret under the offending character
                details += f"\n            {' ' * position}^"

        super().__init__(
            message, suggestions=suggestions, technical_details=details, **kwargs
        )
        self.expression = expression
        self.fragment = fragment
        self.position = position


class EvaluationDomainError(TaylorViewError):
    """
    Raised when an expression cannot be evaluated at a single point.

    The sampler recovers from this locally by recording NaN at that point.
    """

    default_title = "Evaluation Error"
    default_severity = ErrorSeverity.WARNING
    default_suggestions = [
        "The point may lie outside the function's domain",
        "Try a narrower x-range",
    ]

    def __init__(self, x: float, expression: str = "", reason: str = ""):
        msg = f"Cannot evaluate at x = {x!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(
            msg,
            technical_details=f"Expression: {expression}" if expression else None,
        )
        self.x = x
        self.expression = expression
        self.reason = reason


# === Result Errors ===


class DataIntegrityError(TaylorViewError):
    """Raised when a result declares more orders than its sequences hold."""

    default_title = "Incomplete Result"
    default_suggestions = [
        "The service response is missing entries for the requested order",
        "Request the series again with the same order",
    ]

    def __init__(self, message: str, *, index: Optional[int] = None, field: str = ""):
        super().__init__(
            message,
            technical_details=f"Field: {field}, index: {index}" if field else None,
        )
        self.index = index
        self.field = field

    @classmethod
    def missing(cls, index: int, field: str, available: int) -> "DataIntegrityError":
        """Create the error for a sequence that ends before ``index``."""
        return cls(
            f"Missing '{field}' entry for order {index} "
            f"(only {available} provided)",
            index=index,
            field=field,
        )


class NumberParseError(TaylorViewError):
    """Raised when an evaluated derivative is not a number."""

    default_title = "Invalid Number"
    default_suggestions = [
        "The service returned a derivative value that is not numeric",
    ]

    def __init__(self, index: int, raw: str, field: str = "evaluated_derivatives"):
        super().__init__(
            f"Cannot parse {field}[{index}] as a number: {raw!r}",
            technical_details=f"Field: {field}, index: {index}, raw: {raw!r}",
        )
        self.index = index
        self.raw = raw
        self.field = field


# === Input Errors ===


class InvalidRequestError(TaylorViewError):
    """Raised when the request parameters are unusable."""

    default_title = "Invalid Input"
    default_suggestions = [
        "Enter a function such as 'sin(x)'",
        "For a Maclaurin series, set the expansion point to 0",
    ]


class ServiceError(TaylorViewError):
    """Raised when the Taylor service reports a failed computation."""

    default_title = "Service Error"
    default_suggestions = [
        "Check the function for typos",
        "Try a lower order",
    ]


# === Utility functions ===


def format_error_for_user(exc: Exception, context: str = "") -> str:
    """
    Format an exception into a user-friendly string.

    Returns a single string suitable for a status line or the terminal.
    """
    ctx = ErrorContext.from_exception(exc, context)

    result = ctx.message
    if ctx.suggestions:
        result += f" Try: {ctx.suggestions[0]}"

    return result


def format_error_details(exc: Exception, context: str = "") -> str:
    """
    Format an exception into a multi-line report.

    Includes the title, message, numbered suggestions and technical details.
    """
    ctx = ErrorContext.from_exception(exc, context)

    parts = [f"{ctx.title}: {ctx.message}"]
    if ctx.suggestions:
        parts.append("Suggestions:")
        for i, sugg in enumerate(ctx.suggestions, 1):
            parts.append(f"  {i}. {sugg}")
    if ctx.technical_details:
        parts.append("")
        parts.append("Technical details:")
        parts.append(ctx.technical_details)

    return "\n".join(parts)
