from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from .parallel import histogram_from_chunks
from .stats.histogram import Histogram


def summarize(
    values: ArrayLike,
    *,
    start: float,
    end: float,
    bin_count: int,
    n_chunks: int | None = None,
    max_workers: int | None = None,
) -> dict[str, object]:
    """Compute running statistics and a fixed-bin histogram for ``values``.

    The function builds the histogram (in parallel when ``n_chunks`` is
    given), then returns summary statistics, bin counts and quartile bins.

    Parameters
    ----------
    values : array_like
        Observations. NaN values are skipped.
    start : float
        Lower bound of the binned range.
    end : float
        Upper bound of the binned range.
    bin_count : int
        Number of histogram bins.
    n_chunks : int, optional
        Split the data into this many chunks and ingest them on a thread
        pool. If omitted the values are ingested in a single pass.
    max_workers : int, optional
        Thread pool size when ``n_chunks`` is given.

    Returns
    -------
    dict
        Dictionary with keys ``"count"``, ``"min"``, ``"max"``, ``"mean"``,
        ``"std"``, ``"underflow"``, ``"overflow"``, ``"hist_bin_edges"``,
        ``"hist_counts"`` and ``"quartiles"``.
    """

    if n_chunks is None:
        histogram = Histogram(start, end, bin_count)
        histogram.add_many(values)
    else:
        histogram = histogram_from_chunks(
            values,
            start,
            end,
            bin_count,
            n_chunks=n_chunks,
            max_workers=max_workers,
        )

    return {
        "count": histogram.count,
        "min": float(histogram.min),
        "max": float(histogram.max),
        "mean": float(histogram.mean),
        "std": float(histogram.std_dev),
        "underflow": histogram.underflow,
        "overflow": histogram.overflow,
        "hist_bin_edges": histogram.bin_edges(),
        "hist_counts": histogram.bins.astype(np.int64),
        "quartiles": histogram.bins_at_quartiles(),
    }
