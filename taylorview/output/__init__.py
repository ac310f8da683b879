"""Output layer: markup rendering, step tables, charts and export."""

from .renderer import MarkupRenderer, render
from .step_table import StepTableBuilder, build_steps
from .plotter import CurvePlotter
from .exporter import ExportOptions, ReportExporter

__all__ = [
    "MarkupRenderer",
    "StepTableBuilder",
    "CurvePlotter",
    "ExportOptions",
    "ReportExporter",
    "build_steps",
    "render",
]
