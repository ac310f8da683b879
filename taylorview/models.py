"""
Core data structures for TaylorView.

These dataclasses define the contract between the service response, the
pipeline stages and the presentation layer.
"""

import math
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

from .utils.constants import (
    DEFAULT_NUM_POINTS,
    DEFAULT_X_RANGE,
    DISPLAY_DECIMALS,
    WIDE_X_RANGE,
)
from .utils.errors import DataIntegrityError, InvalidRequestError, ServiceError


class NormalizedExpression(str):
    """
    An expression string in canonical grammar.

    Only produced by ``normalize``; holds no Unicode math glyphs.
    """

    __slots__ = ()


def format_number(value: Optional[float], decimals: int = DISPLAY_DECIMALS) -> str:
    """Format a value for display; absent values render as 'n/a'."""
    if value is None:
        return "n/a"
    return f"{value:.{decimals}f}"


@dataclass(frozen=True)
class TermError:
    """
    Error analysis for the partial sum up to one order.

    A field is None when the service sent null for it, e.g. the relative
    error where the exact value is 0.
    """

    f_exact: Optional[float]
    taylor_approx: Optional[float]
    absolute_error: Optional[float]
    relative_error: Optional[float]

    FIELDS = ("f_exact", "taylor_approx", "absolute_error", "relative_error")

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "TermError":
        """
        Read one ``errors_per_term`` entry.

        Raises:
            DataIntegrityError: If a key is missing or a value is not numeric.
        """
        if not isinstance(data, dict):
            raise DataIntegrityError(
                f"errors_per_term[{index}] is not an object: {data!r}",
                index=index,
                field="errors_per_term",
            )

        values = {}
        for name in cls.FIELDS:
            if name not in data:
                raise DataIntegrityError(
                    f"errors_per_term[{index}] has no '{name}' value",
                    index=index,
                    field=f"errors_per_term.{name}",
                )
            try:
                values[name] = _optional_float(data[name])
            except (TypeError, ValueError):
                raise DataIntegrityError(
                    f"errors_per_term[{index}].{name} is not a number: {data[name]!r}",
                    index=index,
                    field=f"errors_per_term.{name}",
                )
        return cls(**values)

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {
            "f_exact": self.f_exact,
            "taylor_approx": self.taylor_approx,
            "absolute_error": self.absolute_error,
            "relative_error": self.relative_error,
        }


@dataclass
class TaylorResult:
    """
    A Taylor-series computation result without error analysis.

    Every sequence is indexed by order: entry i describes the i-th
    derivative and term. Sequences are never reordered.
    """

    taylor_series: str
    terms: List[str] = field(default_factory=list)
    symbolic_derivatives: List[str] = field(default_factory=list)
    evaluated_derivatives: List[str] = field(default_factory=list)

    @property
    def has_error_analysis(self) -> bool:
        return False

    def term_error(self, index: int) -> Optional[TermError]:
        """Error analysis for ``index``, or None when not available."""
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaylorResult":
        """
        Build the right result variant from a service response ``result``.

        Results carrying ``errors_per_term`` become TaylorResultWithErrors.
        """
        common = dict(
            taylor_series=str(data.get("taylor_series", "")),
            terms=[str(t) for t in data.get("terms", [])],
            symbolic_derivatives=[str(d) for d in data.get("symbolic_derivatives", [])],
            evaluated_derivatives=[str(v) for v in data.get("evaluated_derivatives", [])],
        )

        errors = data.get("errors_per_term")
        if errors is None:
            return TaylorResult(**common)

        return TaylorResultWithErrors(
            **common,
            errors_per_term=[TermError.from_dict(e, i) for i, e in enumerate(errors)],
            f_exact=_optional_float(data.get("f_exact")),
            final_taylor_approx=_optional_float(data.get("final_taylor_approx")),
            final_absolute_error=_optional_float(data.get("final_absolute_error")),
            final_relative_error=_optional_float(data.get("final_relative_error")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "taylor_series": self.taylor_series,
            "terms": list(self.terms),
            "symbolic_derivatives": list(self.symbolic_derivatives),
            "evaluated_derivatives": list(self.evaluated_derivatives),
        }


@dataclass
class TaylorResultWithErrors(TaylorResult):
    """
    A Taylor-series result that also carries per-order error analysis.

    The ``final_*`` fields summarize the highest order and may be absent.
    """

    errors_per_term: List[TermError] = field(default_factory=list)
    f_exact: Optional[float] = None
    final_taylor_approx: Optional[float] = None
    final_absolute_error: Optional[float] = None
    final_relative_error: Optional[float] = None

    @property
    def has_error_analysis(self) -> bool:
        return True

    def term_error(self, index: int) -> Optional[TermError]:
        if 0 <= index < len(self.errors_per_term):
            return self.errors_per_term[index]
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["errors_per_term"] = [e.to_dict() for e in self.errors_per_term]
        for name in (
            "f_exact",
            "final_taylor_approx",
            "final_absolute_error",
            "final_relative_error",
        ):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data


@dataclass
class TaylorRequest:
    """
    Parameters of one Taylor-series computation.

    Echoed back by the service alongside the result.
    """

    base_function: str
    expansion_point: float = 0.0
    order_n: int = 1
    evaluation_point: Optional[float] = None

    def validate(self) -> "TaylorRequest":
        """Raise InvalidRequestError when the request cannot be computed."""
        if not self.base_function or not self.base_function.strip():
            raise InvalidRequestError("The function must not be empty")
        if not math.isfinite(self.expansion_point):
            raise InvalidRequestError("The expansion point must be a finite number")
        if isinstance(self.order_n, bool) or not isinstance(self.order_n, int):
            raise InvalidRequestError(f"The order must be an integer, got {self.order_n!r}")
        if self.order_n < 0:
            raise InvalidRequestError(f"The order must not be negative, got {self.order_n}")
        if self.evaluation_point is not None and not math.isfinite(self.evaluation_point):
            raise InvalidRequestError("The evaluation point must be a finite number")
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaylorRequest":
        try:
            order = data.get("order_n", 1)
            if isinstance(order, float) and order.is_integer():
                order = int(order)
            return cls(
                base_function=str(data.get("base_function", "")),
                expansion_point=float(data.get("expansion_point", 0.0)),
                order_n=order,
                evaluation_point=_optional_float(data.get("evaluation_point")),
            )
        except (TypeError, ValueError) as e:
            raise InvalidRequestError(f"Invalid request parameters: {e}")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "base_function": self.base_function,
            "expansion_point": self.expansion_point,
            "order_n": self.order_n,
        }
        if self.evaluation_point is not None:
            data["evaluation_point"] = self.evaluation_point
        return data


@dataclass
class ServiceResponse:
    """The service envelope: request echo plus result."""

    request: TaylorRequest
    result: TaylorResult
    success: bool = True
    message: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ServiceResponse":
        """
        Read either the full envelope ``{success, message, data}`` or the
        bare ``data`` object.

        Raises:
            ServiceError: If the service reported a failure.
            InvalidRequestError: If the payload has no result.
        """
        if "success" in payload or "data" in payload:
            if not payload.get("success", False):
                raise ServiceError(
                    payload.get("message") or "The service reported a failure"
                )
            data = payload.get("data") or {}
            message = payload.get("message")
        else:
            data = payload
            message = None

        if not isinstance(data.get("result"), dict):
            raise InvalidRequestError("The response does not contain a result")

        return cls(
            request=TaylorRequest.from_dict(data),
            result=TaylorResult.from_dict(data["result"]),
            success=True,
            message=message,
        )


@dataclass(frozen=True)
class StepRow:
    """
    One order of the step table.

    The error fields are None when no error analysis exists for this
    order, which is distinct from a computed zero.
    """

    n: int
    derivative_form: str
    derivative_eval: float
    term_form: str
    expansion_point: float
    evaluation_point: Optional[float] = None
    f_exact: Optional[float] = None
    taylor_approx: Optional[float] = None
    absolute_error: Optional[float] = None
    relative_error: Optional[float] = None

    @property
    def has_errors(self) -> bool:
        return any(
            value is not None
            for value in (
                self.f_exact,
                self.taylor_approx,
                self.absolute_error,
                self.relative_error,
            )
        )

    @property
    def derivative_label(self) -> str:
        """Markup label for the n-th derivative, e.g. f^{(2)}(x)."""
        return f"f^{{({self.n})}}(x)"

    def display(self, name: str) -> str:
        """Display text of a numeric field, fixed to six decimals."""
        return format_number(getattr(self, name))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n": self.n,
            "derivative_form": self.derivative_form,
            "derivative_eval": self.derivative_eval,
            "term_form": self.term_form,
            "expansion_point": self.expansion_point,
            "evaluation_point": self.evaluation_point,
            "f_exact": self.f_exact,
            "taylor_approx": self.taylor_approx,
            "absolute_error": self.absolute_error,
            "relative_error": self.relative_error,
        }


@dataclass(frozen=True)
class SamplePoint:
    """One grid point; NaN marks an evaluation failure."""

    x: float
    y_original: float
    y_approx: float


@dataclass
class CurveSeries:
    """Sampled original function and Taylor polynomial over one x-grid."""

    points: List[SamplePoint]
    order_n: Optional[int] = None
    original: str = ""
    polynomial: str = ""

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    @property
    def x(self) -> List[float]:
        return [p.x for p in self.points]

    @property
    def y_original(self) -> List[float]:
        return [p.y_original for p in self.points]

    @property
    def y_approx(self) -> List[float]:
        return [p.y_approx for p in self.points]

    @property
    def nan_count(self) -> int:
        return sum(
            1 for p in self.points if math.isnan(p.y_original) or math.isnan(p.y_approx)
        )

    def to_dict(self) -> Dict[str, Any]:
        # NaN is not valid JSON; exported as null
        return {
            "order_n": self.order_n,
            "original": self.original,
            "polynomial": self.polynomial,
            "x": self.x,
            "y_original": [_nan_to_none(v) for v in self.y_original],
            "y_approx": [_nan_to_none(v) for v in self.y_approx],
        }


@dataclass
class SamplingOptions:
    """Grid settings for curve sampling."""

    x_min: float = DEFAULT_X_RANGE[0]
    x_max: float = DEFAULT_X_RANGE[1]
    num_points: int = DEFAULT_NUM_POINTS

    @classmethod
    def wide(cls, num_points: int = DEFAULT_NUM_POINTS) -> "SamplingOptions":
        """Options for the wider [-1.5π, 1.5π] view."""
        return cls(x_min=WIDE_X_RANGE[0], x_max=WIDE_X_RANGE[1], num_points=num_points)


@dataclass
class TaylorReport:
    """
    Everything the presentation layer needs for one result.

    Built once by ``taylorview.pipeline.analyze``.
    """

    request: TaylorRequest
    result: TaylorResult
    rendered_function: str
    rendered_series: str
    step_rows: List[StepRow] = field(default_factory=list)
    curve: Optional[CurveSeries] = None

    @property
    def has_error_analysis(self) -> bool:
        return any(row.has_errors for row in self.step_rows)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "request": self.request.to_dict(),
            "rendered_function": self.rendered_function,
            "rendered_series": self.rendered_series,
            "steps": [row.to_dict() for row in self.step_rows],
            "curve": self.curve.to_dict() if self.curve is not None else None,
        }


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def _nan_to_none(value: float) -> Optional[float]:
    return None if math.isnan(value) else value
