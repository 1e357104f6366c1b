"""
Parallel ingestion and merge reductions for histograms.

Each worker owns one histogram for the lifetime of its chunk; partial
results are only read for merging after their worker has been joined.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from functools import reduce
from typing import Iterable

import numpy as np
from numpy.typing import ArrayLike

from .stats.histogram import Histogram

logger = logging.getLogger(__name__)


def merge_all(histograms: Iterable[Histogram]) -> Histogram:
    """Merge histograms with a left fold.

    Raises
    ------
    ValueError
        If ``histograms`` is empty.
    IncompatibleHistograms
        If any two histograms differ in shape.
    """

    items = list(histograms)
    if not items:
        raise ValueError("at least one histogram is required")
    if len(items) == 1:
        return items[0].copy()
    return reduce(Histogram.merge, items)


def tree_merge(histograms: Iterable[Histogram]) -> Histogram:
    """Merge histograms pairwise, level by level.

    Gives the same counts as :func:`merge_all` and the same statistics up to
    floating-point rounding; pairing partial results of similar size keeps
    the combined mean and variance better conditioned.

    Raises
    ------
    ValueError
        If ``histograms`` is empty.
    IncompatibleHistograms
        If any two histograms differ in shape.
    """

    level = list(histograms)
    if not level:
        raise ValueError("at least one histogram is required")
    if len(level) == 1:
        return level[0].copy()

    while len(level) > 1:
        paired = [level[i].merge(level[i + 1]) for i in range(0, len(level) - 1, 2)]
        if len(level) % 2:
            paired.append(level[-1])
        level = paired
    return level[0]


def _build_chunk(chunk: np.ndarray, start: float, end: float, bin_count: int) -> Histogram:
    histogram = Histogram(start, end, bin_count)
    histogram.add_many(chunk)
    return histogram


def histogram_from_chunks(
    values: ArrayLike,
    start: float,
    end: float,
    bin_count: int,
    n_chunks: int | None = None,
    max_workers: int | None = None,
) -> Histogram:
    """Build a histogram by ingesting chunks of ``values`` in parallel.

    The data is split into ``n_chunks`` contiguous chunks, each chunk is
    counted into its own histogram by a thread pool, and the partial
    histograms are tree-merged once every worker has finished.

    Parameters
    ----------
    values : array_like
        Observations; flattened before splitting.
    start, end : float
        Histogram bounds, see :class:`Histogram`.
    bin_count : int
        Number of bins, see :class:`Histogram`.
    n_chunks : int, optional
        Number of chunks. Defaults to twice the worker count.
    max_workers : int, optional
        Thread pool size. Defaults to ``os.cpu_count()``.

    Returns
    -------
    Histogram
        Histogram over all of ``values``.
    """

    # validate the shape before spawning any work
    empty = Histogram(start, end, bin_count)

    arr = np.asarray(values, dtype=np.float64).ravel()
    if max_workers is None:
        max_workers = os.cpu_count() or 1
    if max_workers <= 0:
        raise ValueError("max_workers must be positive.")
    if n_chunks is None:
        n_chunks = 2 * max_workers
    if n_chunks <= 0:
        raise ValueError("n_chunks must be positive.")

    if arr.size == 0:
        return empty

    chunks = [c for c in np.array_split(arr, min(n_chunks, arr.size)) if c.size]
    logger.debug(
        "Building %d partial histograms from %d values with %d workers",
        len(chunks),
        arr.size,
        max_workers,
    )

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        partials = list(pool.map(lambda c: _build_chunk(c, start, end, bin_count), chunks))

    merged = tree_merge(partials)
    logger.debug("Merged %d partial histograms, count=%d", len(partials), merged.count)
    return merged
