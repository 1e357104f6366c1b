"""
Public API for the hstats package.
"""

from .errors import (
    HistogramError,
    IncompatibleHistograms,
    InvalidBinCount,
    InvalidQuantile,
    InvalidRange,
)
from .stats.accumulator import StatsAccumulator
from .stats.histogram import Histogram
from .stats.quantiles import CENTILES, DECILES, MYRIATILES, QUARTILES
from .render import RenderOptions, format_histogram, histogram_frame, plot_histogram
from .parallel import histogram_from_chunks, merge_all, tree_merge
from .api import summarize

__all__ = [
    # Core
    "Histogram",
    "StatsAccumulator",
    # Errors
    "HistogramError",
    "IncompatibleHistograms",
    "InvalidBinCount",
    "InvalidQuantile",
    "InvalidRange",
    # Fraction sets
    "QUARTILES",
    "DECILES",
    "CENTILES",
    "MYRIATILES",
    # Rendering
    "RenderOptions",
    "format_histogram",
    "histogram_frame",
    "plot_histogram",
    # Parallel reduction
    "histogram_from_chunks",
    "merge_all",
    "tree_merge",
    # Convenience
    "summarize",
]
