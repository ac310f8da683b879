"""
Shared fixtures: a Maclaurin sine result with and without error analysis.
"""

import copy
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


SIN_ERRORS = [
    {
        "f_exact": 0.8414709848078965,
        "taylor_approx": 0.0,
        "absolute_error": 0.8414709848078965,
        "relative_error": 1.0,
    },
    {
        "f_exact": 0.8414709848078965,
        "taylor_approx": 1.0,
        "absolute_error": 0.1585290151921035,
        "relative_error": 0.1883951057781212,
    },
    {
        "f_exact": 0.8414709848078965,
        "taylor_approx": 1.0,
        "absolute_error": 0.1585290151921035,
        "relative_error": 0.1883951057781212,
    },
    {
        "f_exact": 0.8414709848078965,
        "taylor_approx": 0.8333333333333334,
        "absolute_error": 0.0081376514745631,
        "relative_error": 0.0096707616604085,
    },
]

SIN_DATA = {
    "base_function": "sin(x)",
    "expansion_point": 0,
    "order_n": 3,
    "evaluation_point": 1,
    "result": {
        "taylor_series": "x - x**3/6",
        "terms": ["x", "0", "-x**3/6", "0"],
        "symbolic_derivatives": ["sin(x)", "cos(x)", "-sin(x)", "-cos(x)"],
        "evaluated_derivatives": ["0", "1", "0", "-1"],
        "f_exact": 0.8414709848078965,
        "final_taylor_approx": 0.8333333333333334,
        "final_absolute_error": 0.0081376514745631,
        "final_relative_error": 0.0096707616604085,
        "errors_per_term": SIN_ERRORS,
    },
}


@pytest.fixture
def sin_data():
    """Bare response data for sin(x) at a = 0, order 3, evaluated at 1."""
    return copy.deepcopy(SIN_DATA)


@pytest.fixture
def sin_response(sin_data):
    """The same data wrapped in the service envelope."""
    return {"success": True, "message": "OK", "data": sin_data}


@pytest.fixture
def sin_basic_data(sin_data):
    """sin(x) data without any error analysis."""
    result = sin_data["result"]
    for key in (
        "errors_per_term",
        "f_exact",
        "final_taylor_approx",
        "final_absolute_error",
        "final_relative_error",
    ):
        result.pop(key)
    return sin_data
