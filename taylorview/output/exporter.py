"""
Report export.

Writes a TaylorReport as plain text, a LaTeX document fragment, JSON, or a
standalone HTML page rendered by MathJax.
"""

import html
import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from .renderer import MarkupRenderer
from .step_table import StepTableBuilder
from ..models import StepRow, TaylorReport, format_number
from ..utils.errors import TaylorViewError


@dataclass
class ExportOptions:
    """Which report sections to include."""

    include_steps: bool = True
    include_errors: bool = True
    include_curve: bool = True


class ReportExporter:
    """
    Export a TaylorReport in several formats.

    Usage:
        exporter = ReportExporter(report)
        print(exporter.to_latex())
        exporter.save("report.html")
    """

    SUFFIXES = {
        ".txt": "text",
        ".tex": "latex",
        ".json": "json",
        ".html": "html",
        ".htm": "html",
    }

    def __init__(self, report: TaylorReport, options: ExportOptions = None):
        self.report = report
        self.options = options or ExportOptions()
        self._renderer = MarkupRenderer()

    @property
    def _error_rows(self) -> List[StepRow]:
        if not self.options.include_errors:
            return []
        return [row for row in self.report.step_rows if row.has_errors]

    def to_text(self) -> str:
        request = self.report.request
        lines = [
            f"Function: {request.base_function}",
            f"Expansion point (a): {request.expansion_point:g}",
        ]
        if request.evaluation_point is not None:
            lines.append(f"Evaluation point: {request.evaluation_point:g}")
        lines.append(f"Order (N): {request.order_n}")
        lines.append("")

        if self.options.include_steps and self.report.step_rows:
            lines.append("Steps:")
            lines.append(StepTableBuilder().rows_to_text(self.report.step_rows))
            lines.append("")

        error_rows = self._error_rows
        if error_rows:
            lines.append("Error analysis:")
            header = f"{'n':>3}  {'exact':>14}  {'approx':>14}  {'abs error':>14}  {'rel error':>14}"
            lines.append(header)
            for row in error_rows:
                lines.append(
                    f"{row.n:>3}  {row.display('f_exact'):>14}  {row.display('taylor_approx'):>14}"
                    f"  {row.display('absolute_error'):>14}  {row.display('relative_error'):>14}"
                )
            lines.append("")

        lines.append(f"Taylor series: {self.report.result.taylor_series}")
        return "\n".join(lines)

    def to_latex(self) -> str:
        request = self.report.request
        parts = [
            "% Taylor series report",
            r"\begin{align*}",
            rf"f(x) &= {self.report.rendered_function} \\",
            rf"a &= {request.expansion_point:g}, \quad N = {request.order_n}",
            r"\end{align*}",
        ]

        if self.options.include_steps:
            for row in self.report.step_rows:
                derivative = self._renderer.render_or_raw(row.derivative_form)
                term = self._renderer.render_or_raw(row.term_form)
                parts.append(r"\begin{align*}")
                parts.append(rf"{row.derivative_label} &= {derivative} \\")
                parts.append(
                    rf"f^{{({row.n})}}({row.expansion_point:g}) &= "
                    rf"{format_number(row.derivative_eval)} \\"
                )
                parts.append(rf"T_{{{row.n}}} &= {term}")
                parts.append(r"\end{align*}")

        error_rows = self._error_rows
        if error_rows:
            parts.append(r"\begin{tabular}{rrrrr}")
            parts.append(r"$n$ & exact & approx & abs.\ error & rel.\ error \\ \hline")
            for row in error_rows:
                parts.append(
                    f"{row.n} & {row.display('f_exact')} & {row.display('taylor_approx')} & "
                    f"{row.display('absolute_error')} & {row.display('relative_error')} \\\\"
                )
            parts.append(r"\end{tabular}")

        parts.append(r"\[")
        parts.append(rf"P_{{{request.order_n}}}(x) = {self.report.rendered_series}")
        parts.append(r"\]")
        return "\n".join(parts)

    def to_json(self, indent: int = 2) -> str:
        data = self.report.to_dict()
        if not self.options.include_steps:
            data.pop("steps")
        if not self.options.include_curve:
            data.pop("curve")
        return json.dumps(data, indent=indent)

    def to_html(self, title: str = "Taylor Series") -> str:
        """
        Generate a standalone HTML page with MathJax.

        Returns:
            Complete HTML document with the steps, error table and series
        """
        request = self.report.request

        steps_html = ""
        if self.options.include_steps:
            for row in self.report.step_rows:
                derivative = self._renderer.render_or_raw(row.derivative_form)
                term = self._renderer.render_or_raw(row.term_form)
                steps_html += f"""
            <div class="step">
                <div class="step-header">Order {row.n}</div>
                <div>\\({row.derivative_label} = {html.escape(derivative)}\\)</div>
                <div>\\(f^{{({row.n})}}({row.expansion_point:g})\\) = {format_number(row.derivative_eval)}</div>
                <div>Term: \\({html.escape(term)}\\)</div>
            </div>
            """

        table_html = ""
        error_rows = self._error_rows
        if error_rows:
            body = "".join(
                f"<tr><td>{row.n}</td><td>{row.display('f_exact')}</td>"
                f"<td>{row.display('taylor_approx')}</td>"
                f"<td class=\"err\">{row.display('absolute_error')}</td>"
                f"<td class=\"err\">{row.display('relative_error')}</td></tr>"
                for row in error_rows
            )
            table_html = f"""
    <h3>Error analysis</h3>
    <table>
        <thead><tr><th>n</th><th>Exact</th><th>Approx</th><th>Abs. error</th><th>Rel. error</th></tr></thead>
        <tbody>{body}</tbody>
    </table>
"""

        evaluation = ""
        if request.evaluation_point is not None:
            evaluation = f"<p>Evaluation point: {request.evaluation_point:g}</p>"

        return f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{html.escape(title)}</title>
    <script id="MathJax-script" async
            src="https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js">
    </script>
    <style>
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            font-size: 14px;
            padding: 15px;
            margin: 0;
            background: #fafafa;
            color: #333;
        }}
        h2 {{
            color: #4338ca;
            border-bottom: 2px solid #6366f1;
            padding-bottom: 10px;
        }}
        .step {{
            background: white;
            border-radius: 8px;
            padding: 15px;
            margin: 10px 0;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }}
        .step-header {{
            font-weight: bold;
            color: #4f46e5;
            margin-bottom: 10px;
        }}
        table {{ border-collapse: collapse; }}
        td, th {{ padding: 4px 12px; text-align: right; border-top: 1px solid #e5e7eb; }}
        td.err {{ color: #dc2626; }}
    </style>
</head>
<body>
    <h2>{html.escape(title)}</h2>
    <p>Function: \\({html.escape(self.report.rendered_function)}\\)</p>
    <p>Expansion point (a): {request.expansion_point:g}</p>
    {evaluation}
    <p>Order (N): {request.order_n}</p>
    {steps_html}
    {table_html}
    <h3>Result</h3>
    <div>\\[{html.escape(self.report.rendered_series)}\\]</div>
</body>
</html>
"""

    def export(self, fmt: str) -> str:
        """Export in the named format: text, latex, json or html."""
        exporters = {
            "text": self.to_text,
            "latex": self.to_latex,
            "json": self.to_json,
            "html": self.to_html,
        }
        if fmt not in exporters:
            raise TaylorViewError(
                f"Unknown export format {fmt!r}",
                suggestions=[f"Use one of: {', '.join(exporters)}"],
            )
        return exporters[fmt]()

    def save(self, path: Union[str, Path]) -> Path:
        """Write the report, choosing the format from the file suffix."""
        path = Path(path)
        fmt = self.SUFFIXES.get(path.suffix.lower(), "text")
        path.write_text(self.export(fmt), encoding="utf-8")
        return path
