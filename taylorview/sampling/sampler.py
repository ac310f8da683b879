"""
Curve sampling for the original function and its Taylor polynomial.

Each grid point is evaluated on its own: a failure at one x is recorded
as NaN there and sampling continues with the next point.
"""

import logging
import math
from typing import Callable, List, Optional, Sequence, Union

from .evaluator import ExpressionEvaluator
from ..models import CurveSeries, SamplePoint, SamplingOptions, TaylorRequest, TaylorResult
from ..utils.constants import MIN_NUM_POINTS
from ..utils.errors import DataIntegrityError, EvaluationDomainError

logger = logging.getLogger(__name__)

Function = Union[str, Callable[[float], float]]


def linear_grid(x_min: float, x_max: float, num_points: int) -> List[float]:
    """
    Evenly spaced values from ``x_min`` to ``x_max`` inclusive.

    Raises:
        ValueError: If fewer than two points are requested.
    """
    if num_points < MIN_NUM_POINTS:
        raise ValueError(f"num_points must be at least {MIN_NUM_POINTS}, got {num_points}")
    step = (x_max - x_min) / (num_points - 1)
    grid = [x_min + step * i for i in range(num_points)]
    grid[-1] = x_max
    return grid


def taylor_polynomial(terms: Sequence[str], order_n: int) -> str:
    """
    Join the first ``order_n + 1`` terms into the order-n polynomial.

    Raises:
        DataIntegrityError: If fewer than ``order_n + 1`` terms exist.
    """
    if order_n < 0:
        raise DataIntegrityError(f"Order must not be negative, got {order_n}", field="terms")
    if len(terms) < order_n + 1:
        raise DataIntegrityError.missing(len(terms), "terms", len(terms))
    return " + ".join(terms[: order_n + 1])


class CurveSampler:
    """
    Evaluate two functions over a shared x-grid.

    Functions may be canonical expression strings or Python callables.

    Usage:
        sampler = CurveSampler()
        curve = sampler.sample("sin(x)", "x - x**3/6", -math.pi, math.pi, 300)
    """

    def __init__(self, evaluator: ExpressionEvaluator = None):
        self._evaluator = evaluator or ExpressionEvaluator()

    def sample(
        self,
        original_fn: Function,
        taylor_poly: Function,
        x_min: float,
        x_max: float,
        num_points: int,
        order_n: Optional[int] = None,
    ) -> CurveSeries:
        """
        Sample both functions on ``num_points`` evenly spaced x-values.

        Both series always have ``num_points`` entries; failed points are NaN.

        Raises:
            ValueError: If ``num_points`` is below 2.
            MalformedExpressionError: If an expression string does not parse.
        """
        grid = linear_grid(x_min, x_max, num_points)
        original = self._prepare(original_fn)
        approx = self._prepare(taylor_poly)

        points = [
            SamplePoint(x=x, y_original=_safe_eval(original, x), y_approx=_safe_eval(approx, x))
            for x in grid
        ]
        curve = CurveSeries(
            points=points,
            order_n=order_n,
            original=original_fn if isinstance(original_fn, str) else "",
            polynomial=taylor_poly if isinstance(taylor_poly, str) else "",
        )

        if curve.nan_count:
            logger.debug("%d of %d sample points are NaN", curve.nan_count, len(curve))
        if all(math.isnan(y) for y in curve.y_original):
            logger.warning("Original function could not be evaluated anywhere in [%g, %g]", x_min, x_max)
        return curve

    def sample_result(
        self,
        result: TaylorResult,
        request: TaylorRequest,
        options: SamplingOptions = None,
        order_n: Optional[int] = None,
    ) -> CurveSeries:
        """
        Sample the request's function against its Taylor polynomial.

        ``order_n`` defaults to the request's order.
        """
        options = options or SamplingOptions()
        order = request.order_n if order_n is None else order_n
        polynomial = taylor_polynomial(result.terms, order)
        return self.sample(
            request.base_function,
            polynomial,
            options.x_min,
            options.x_max,
            options.num_points,
            order_n=order,
        )

    def _prepare(self, fn: Function) -> Callable[[float], float]:
        if isinstance(fn, str):
            return self._evaluator.compile(fn)
        return fn


def _safe_eval(func: Callable[[float], float], x: float) -> float:
    try:
        value = float(func(x))
    except EvaluationDomainError:
        return math.nan
    except Exception as e:
        # Callables supplied directly raise arbitrary errors; one bad
        # point must not end the batch
        logger.debug("Evaluation failed at x=%r: %s", x, e)
        return math.nan
    return value if math.isfinite(value) else math.nan


_default_sampler = CurveSampler()


def sample(
    original_fn: Function,
    taylor_poly: Function,
    x_min: float,
    x_max: float,
    num_points: int,
) -> CurveSeries:
    """Convenience function: sample with the default sampler."""
    return _default_sampler.sample(original_fn, taylor_poly, x_min, x_max, num_points)
