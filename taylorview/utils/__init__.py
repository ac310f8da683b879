"""Utilities: error types and display/sampling defaults."""

from .constants import DEFAULT_NUM_POINTS, DEFAULT_X_RANGE, DISPLAY_DECIMALS
from .errors import TaylorViewError, format_error_for_user

__all__ = [
    "DEFAULT_NUM_POINTS",
    "DEFAULT_X_RANGE",
    "DISPLAY_DECIMALS",
    "TaylorViewError",
    "format_error_for_user",
]
