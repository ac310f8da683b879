"""Sampling layer: numeric evaluation and curve sampling."""

from .evaluator import ExpressionEvaluator, compile_expression
from .sampler import CurveSampler, linear_grid, sample, taylor_polynomial

__all__ = [
    "ExpressionEvaluator",
    "CurveSampler",
    "compile_expression",
    "linear_grid",
    "sample",
    "taylor_polynomial",
]
