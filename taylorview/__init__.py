"""
TaylorView - rendering, step tables and curve sampling for Taylor series.

Turns the result of a Taylor-series computation into LaTeX markup, a
per-order error table and a sampled curve pair for plotting.
"""

__version__ = "0.1.0"

from .input.normalizer import normalize
from .output.renderer import render
from .output.step_table import build_steps
from .sampling.sampler import sample, taylor_polynomial
from .pipeline import analyze, analyze_response

__all__ = [
    "normalize",
    "render",
    "build_steps",
    "sample",
    "taylor_polynomial",
    "analyze",
    "analyze_response",
]
