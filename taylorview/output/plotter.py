"""
Chart rendering for sampled curves.

Draws the original function and its Taylor polynomial with matplotlib's
Agg backend, so no display is needed.
"""

import io
from pathlib import Path
from typing import List, Optional, Union

from ..models import CurveSeries
from ..utils.constants import AXIS_LABEL_DECIMALS


def axis_labels(curve: CurveSeries, decimals: int = AXIS_LABEL_DECIMALS) -> List[str]:
    """x-axis labels for a curve, one per grid point."""
    return [f"{x:.{decimals}f}" for x in curve.x]


def chart_title(function: str, order_n: Optional[int], expansion_point: float) -> str:
    order = "n" if order_n is None else str(order_n)
    return f"{function} and its {order}-order Taylor approximation at a = {expansion_point:g}"


class CurvePlotter:
    """
    Plot a CurveSeries as two lines: f(x) solid, P_n(x) dashed.

    Usage:
        plotter = CurvePlotter()
        png = plotter.render_png(curve, function="sin(x)", expansion_point=0)
    """

    ORIGINAL_COLOR = "orange"
    APPROX_COLOR = "orangered"

    def __init__(self, figsize=(8, 4.5), dpi: int = 150):
        self.figsize = figsize
        self.dpi = dpi

    def render_png(
        self,
        curve: CurveSeries,
        function: str = "f(x)",
        expansion_point: float = 0.0,
    ) -> bytes:
        """
        Render the chart to PNG bytes.

        NaN points appear as gaps in the lines.
        """
        import matplotlib

        matplotlib.use("Agg")  # Non-GUI backend
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots(figsize=self.figsize)
        try:
            order = "n" if curve.order_n is None else curve.order_n
            ax.plot(
                curve.x,
                curve.y_original,
                color=self.ORIGINAL_COLOR,
                linewidth=2,
                label=f"{function} (original)",
            )
            ax.plot(
                curve.x,
                curve.y_approx,
                color=self.APPROX_COLOR,
                linewidth=2,
                dashes=(8, 5),
                label=f"Taylor P{order}(x)",
            )
            ax.set_title(
                chart_title(function, curve.order_n, expansion_point),
                fontsize=12,
                fontweight="bold",
            )
            ax.set_xlabel("x", fontweight="bold")
            ax.set_ylabel("y", fontweight="bold")
            ax.grid(True, color=(0.78, 0.78, 0.78), alpha=0.4)
            ax.legend(loc="upper right", fontsize=9)

            buf = io.BytesIO()
            fig.savefig(buf, format="png", dpi=self.dpi, bbox_inches="tight", facecolor="white")
        finally:
            plt.close(fig)
        return buf.getvalue()

    def save(
        self,
        curve: CurveSeries,
        path: Union[str, Path],
        function: str = "f(x)",
        expansion_point: float = 0.0,
    ) -> Path:
        """Write the chart as a PNG file and return its path."""
        path = Path(path)
        path.write_bytes(self.render_png(curve, function, expansion_point))
        return path
