"""
Result analysis pipeline.

One pure function turns a Taylor result into everything the presentation
layer shows: rendered markup, the step table and the sampled curves.
"""

import logging
from typing import Any, Dict, Optional

from .input.normalizer import normalize
from .models import SamplingOptions, ServiceResponse, TaylorReport, TaylorRequest, TaylorResult
from .output.renderer import MarkupRenderer
from .output.step_table import StepTableBuilder
from .sampling.sampler import CurveSampler

logger = logging.getLogger(__name__)


class TaylorAnalyzer:
    """
    Build a TaylorReport from a result and the request that produced it.

    Usage:
        analyzer = TaylorAnalyzer()
        report = analyzer.analyze(result, request)
        report.rendered_series  # 'x - \\frac{x^{3}}{6}'
    """

    def __init__(
        self,
        renderer: MarkupRenderer = None,
        step_builder: StepTableBuilder = None,
        sampler: CurveSampler = None,
    ):
        self.renderer = renderer or MarkupRenderer()
        self.step_builder = step_builder or StepTableBuilder()
        self.sampler = sampler or CurveSampler()

    def analyze(
        self,
        result: TaylorResult,
        request: TaylorRequest,
        options: Optional[SamplingOptions] = None,
        include_curve: bool = True,
    ) -> TaylorReport:
        """
        Render, tabulate and sample ``result``.

        Raises:
            InvalidRequestError: If ``request`` fails validation.
            MalformedExpressionError: If the function or series cannot be parsed.
            DataIntegrityError: If the result holds fewer orders than requested.
            NumberParseError: If a derivative value is not numeric.
        """
        request.validate()
        function = normalize(request.base_function)

        rows = self.step_builder.build(
            result,
            request.order_n,
            request.expansion_point,
            request.evaluation_point,
        )

        curve = None
        if include_curve:
            curve = self.sampler.sample_result(
                result,
                TaylorRequest(
                    base_function=function,
                    expansion_point=request.expansion_point,
                    order_n=request.order_n,
                    evaluation_point=request.evaluation_point,
                ),
                options,
            )

        logger.debug(
            "Analyzed %s at a=%g, order %d (error analysis: %s)",
            function,
            request.expansion_point,
            request.order_n,
            result.has_error_analysis,
        )

        return TaylorReport(
            request=request,
            result=result,
            rendered_function=self.renderer.render(function),
            rendered_series=self.renderer.render(result.taylor_series),
            step_rows=rows,
            curve=curve,
        )


_default_analyzer = TaylorAnalyzer()


def analyze(
    result: TaylorResult,
    request: TaylorRequest,
    options: Optional[SamplingOptions] = None,
    include_curve: bool = True,
) -> TaylorReport:
    """Convenience function: analyze with the default components."""
    return _default_analyzer.analyze(result, request, options, include_curve)


def analyze_response(
    payload: Dict[str, Any],
    options: Optional[SamplingOptions] = None,
    include_curve: bool = True,
) -> TaylorReport:
    """
    Analyze a decoded service response (envelope or bare data object).

    Raises:
        ServiceError: If the service reported a failure.
    """
    response = ServiceResponse.from_dict(payload)
    return analyze(response.result, response.request, options, include_curve)
