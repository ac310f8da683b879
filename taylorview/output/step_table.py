"""
Step table generation.

Builds one row per polynomial order from a Taylor result: the symbolic
derivative, its value at the expansion point, the generated term and,
when the service ran an error analysis, the error at that order.
"""

from typing import List, Optional

from ..models import StepRow, TaylorResult, format_number
from ..sampling.evaluator import ExpressionEvaluator
from ..utils.errors import (
    DataIntegrityError,
    EvaluationDomainError,
    MalformedExpressionError,
    NumberParseError,
)

REQUIRED_FIELDS = ("symbolic_derivatives", "evaluated_derivatives", "terms")


class StepTableBuilder:
    """
    Build the per-order step table for a Taylor result.

    Usage:
        builder = StepTableBuilder()
        rows = builder.build(result, order_n=3, expansion_point=0.0)
    """

    def __init__(self, evaluator: ExpressionEvaluator = None):
        self._evaluator = evaluator or ExpressionEvaluator()

    def build(
        self,
        result: TaylorResult,
        order_n: int,
        expansion_point: float,
        evaluation_point: Optional[float] = None,
    ) -> List[StepRow]:
        """
        Build ``order_n + 1`` rows, one per order.

        Raises:
            DataIntegrityError: If a required sequence has fewer than
                ``order_n + 1`` entries; names the first missing index.
            NumberParseError: If an evaluated derivative is not numeric.
        """
        if order_n < 0:
            raise DataIntegrityError(f"Order must not be negative, got {order_n}")

        for name in REQUIRED_FIELDS:
            available = len(getattr(result, name))
            if available < order_n + 1:
                raise DataIntegrityError.missing(available, name, available)

        return [
            self.create_row(result, i, expansion_point, evaluation_point)
            for i in range(order_n + 1)
        ]

    def create_row(
        self,
        result: TaylorResult,
        index: int,
        expansion_point: float,
        evaluation_point: Optional[float] = None,
    ) -> StepRow:
        """Create the row for one order."""
        errors = result.term_error(index)

        return StepRow(
            n=index,
            derivative_form=result.symbolic_derivatives[index],
            derivative_eval=self.parse_number(result.evaluated_derivatives[index], index),
            term_form=result.terms[index],
            expansion_point=expansion_point,
            evaluation_point=evaluation_point,
            f_exact=errors.f_exact if errors else None,
            taylor_approx=errors.taylor_approx if errors else None,
            absolute_error=errors.absolute_error if errors else None,
            relative_error=errors.relative_error if errors else None,
        )

    def parse_number(self, raw: str, index: int) -> float:
        """
        Parse a derivative value as sent by the service.

        Accepts decimal and exponent notation, inf/nan, and exact numerals
        such as '1/2' or 'sqrt(2)/2'.
        """
        text = str(raw).strip()
        try:
            return float(text)
        except ValueError:
            pass

        try:
            return self._evaluator.evaluate_constant(text)
        except (MalformedExpressionError, EvaluationDomainError):
            raise NumberParseError(index, str(raw))

    def format_row_text(self, row: StepRow) -> str:
        """
        Format a row for plain text display.
        """
        lines = [
            f"Order {row.n}:",
            f"    f^({row.n})(x) = {row.derivative_form}",
            f"    f^({row.n})({row.expansion_point:g}) = {format_number(row.derivative_eval)}",
            f"    term = {row.term_form}",
        ]
        if row.has_errors:
            lines.append(f"    exact = {row.display('f_exact')}")
            lines.append(f"    approx = {row.display('taylor_approx')}")
            lines.append(f"    absolute error = {row.display('absolute_error')}")
            lines.append(f"    relative error = {row.display('relative_error')}")
        return "\n".join(lines)

    def rows_to_text(self, rows: List[StepRow]) -> str:
        """
        Convert all rows to plain text.
        """
        return "\n\n".join(self.format_row_text(r) for r in rows)


_default_builder = StepTableBuilder()


def build_steps(
    result: TaylorResult,
    order_n: int,
    expansion_point: float,
    evaluation_point: Optional[float] = None,
) -> List[StepRow]:
    """Convenience function: build the step table with the default builder."""
    return _default_builder.build(result, order_n, expansion_point, evaluation_point)
