"""
Exception types raised by the histogram and statistics core.
"""

from __future__ import annotations


class HistogramError(ValueError):
    """Base class for all invalid-argument errors raised by ``hstats``."""


class InvalidRange(HistogramError):
    """Raised when a histogram is constructed with ``end <= start``."""


class InvalidBinCount(HistogramError):
    """Raised when a histogram is constructed with fewer than one bin."""


class IncompatibleHistograms(HistogramError):
    """Raised when merging histograms whose bounds or bin counts differ."""


class InvalidQuantile(HistogramError):
    """Raised when a requested fraction lies outside ``[0, 1]``."""
