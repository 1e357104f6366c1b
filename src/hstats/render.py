"""
Rendering helpers for histograms.

Provides a plain-text rendering suitable for terminals and logs, a tabular
export as a pandas DataFrame, and a matplotlib bar chart. None of these
hold state; they read a :class:`~hstats.Histogram` through its public
accessors.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from .stats.histogram import Histogram

DEFAULT_BAR_CHAR = "░"
DEFAULT_PRECISION = 2


@dataclass(frozen=True)
class RenderOptions:
    """
    Display options for :func:`format_histogram`.

    Parameters
    ----------
    precision : int, default=2
        Digits after the decimal point for bounds and statistics.
    bar_char : str, default="░"
        Character repeated to draw each bar.
    max_bar_width : int, default=60
        Length of the bar drawn for the fullest counter.
    """

    precision: int = DEFAULT_PRECISION
    bar_char: str = DEFAULT_BAR_CHAR
    max_bar_width: int = 60

    def __post_init__(self) -> None:
        if self.precision < 0:
            raise ValueError(f"precision cannot be negative, got {self.precision}")
        if not self.bar_char:
            raise ValueError("bar_char cannot be empty")
        if self.max_bar_width <= 0:
            raise ValueError(f"max_bar_width must be positive, got {self.max_bar_width}")


def format_histogram(histogram: Histogram, options: RenderOptions | None = None) -> str:
    """
    Render a histogram as a text table with bars.

    One row is printed per counter (underflow, each bin, overflow) showing
    its bounds, a bar proportional to its count, the count itself and its
    share of the total. A summary line with the running statistics closes
    the table.

    Parameters
    ----------
    histogram : Histogram
        Histogram to render.
    options : RenderOptions, optional
        Display options. Defaults to ``RenderOptions()``.

    Returns
    -------
    str
        The rendered table, terminated by a newline.

    Examples
    --------
    >>> hist = Histogram(0.0, 2.0, 2)
    >>> hist.add_many([0.5, 1.5, 1.6])
    >>> print(format_histogram(hist, RenderOptions(bar_char="#", max_bar_width=4)))
    Start | End
    -----|-----
    -inf | 0.00 |  0 (0.00%)
    0.00 | 1.00 | ## 1 (33.33%)
    1.00 | 2.00 | #### 2 (66.67%)
    2.00 |  inf |  0 (0.00%)
    <BLANKLINE>
    Total Count: 3 Min: 0.50 Max: 1.60 Mean: 1.20 Std Dev: 0.50
    <BLANKLINE>
    """

    if options is None:
        options = RenderOptions()
    p = options.precision

    ranges = histogram.bin_ranges()
    total = histogram.count
    max_count = max(count for _, _, count in ranges)

    col1 = max(len(f"{lower:.{p}f}") for lower, _, _ in ranges)
    col2 = max(len(f"{upper:.{p}f}") for _, upper, _ in ranges)

    lines = [
        f"{'Start':^{col1}} | {'End':^{col2}}".rstrip(),
        f"{'':-^{col1}}-|-{'':-^{col2}}-",
    ]
    for lower, upper, count in ranges:
        bar_length = int(count / max_count * options.max_bar_width) if max_count else 0
        percent = count / total * 100.0 if total else 0.0
        bar = options.bar_char * bar_length
        lines.append(
            f"{lower:>{col1}.{p}f} | {upper:>{col2}.{p}f} | {bar} {count} ({percent:.2f}%)"
        )

    lines.append("")
    lines.append(
        f"Total Count: {total}"
        f" Min: {histogram.min:.{p}f}"
        f" Max: {histogram.max:.{p}f}"
        f" Mean: {histogram.mean:.{p}f}"
        f" Std Dev: {histogram.std_dev:.{p}f}"
    )
    return "\n".join(lines) + "\n"


def histogram_frame(histogram: Histogram) -> pd.DataFrame:
    """
    Export the counters of a histogram as a DataFrame.

    Parameters
    ----------
    histogram : Histogram
        Histogram to export.

    Returns
    -------
    pandas.DataFrame
        One row per counter (underflow, bins, overflow) with columns:
        - lower: Lower bound (``-inf`` for the underflow row)
        - upper: Upper bound (``inf`` for the overflow row)
        - count: Number of values counted
        - fraction: Share of the total count (0 when empty)
        - cumulative: Running total in row order
    """

    ranges = histogram.bin_ranges()
    df = pd.DataFrame(ranges, columns=["lower", "upper", "count"])
    df["count"] = df["count"].astype(np.int64)

    total = histogram.count
    df["fraction"] = df["count"] / total if total else 0.0
    df["cumulative"] = df["count"].cumsum()
    return df


def plot_histogram(
    histogram: Histogram,
    ax=None,
    title: str = "Histogram",
) -> tuple:
    """
    Draw the interior bins of a histogram as a bar chart.

    Parameters
    ----------
    histogram : Histogram
        Histogram to plot.
    ax : matplotlib.axes.Axes, optional
        Axes to draw on. A new figure is created if omitted.
    title : str, default="Histogram"
        Plot title.

    Returns
    -------
    tuple
        (fig, ax) matplotlib figure and axes objects.

    Notes
    -----
    Requires matplotlib to be installed.
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError(
            "matplotlib is required for plotting. Install with: pip install matplotlib"
        )

    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 6))
    else:
        fig = ax.figure

    edges = histogram.bin_edges()
    centers = 0.5 * (edges[:-1] + edges[1:])

    ax.bar(
        centers,
        histogram.bins,
        width=histogram.bin_width * 0.9,
        color="steelblue",
        edgecolor="white",
        alpha=0.8,
    )
    if histogram.count:
        ax.axvline(
            histogram.mean,
            color="red",
            linestyle="--",
            linewidth=2,
            label=f"Mean = {histogram.mean:.3f}",
        )
        ax.legend(fontsize=11)

    ax.set_xlabel("Value", fontsize=12)
    ax.set_ylabel("Count", fontsize=12)
    ax.set_title(
        f"{title}\n(underflow={histogram.underflow}, overflow={histogram.overflow}, "
        f"n={histogram.count:,})",
        fontsize=13,
    )
    ax.grid(axis="y", alpha=0.3)

    return fig, ax
