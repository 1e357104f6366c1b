from __future__ import annotations

import logging
import math
import operator
from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..errors import IncompatibleHistograms, InvalidBinCount, InvalidRange
from .accumulator import StatsAccumulator
from .quantiles import CENTILES, DECILES, MYRIATILES, QUARTILES, search_cumulative

logger = logging.getLogger(__name__)


def _same_bound(a: float, b: float) -> bool:
    # bit-for-bit: 0.0 and -0.0 compare equal but are different bounds
    return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)


BinRange = tuple[float, float, int]


class Histogram:
    """Fixed-width histogram with underflow/overflow counters and running statistics.

    Values in ``[start, end)`` are counted in ``bin_count`` equal-width bins,
    values below ``start`` in the underflow counter and values at or above
    ``end`` in the overflow counter. Every counted value, binned or not, also
    feeds an owned :class:`StatsAccumulator`, so ``min``, ``max``, ``mean``
    and ``std_dev`` describe the whole stream.

    Histograms built independently over the same bounds can be merged; the
    merge is pure, associative and commutative, so partial results from any
    number of workers may be reduced in any order.

    Parameters
    ----------
    start : float
        Lower bound of the binned range (inclusive).
    end : float
        Upper bound of the binned range (exclusive). Must exceed ``start``.
    bin_count : int
        Number of bins, at least one.

    Raises
    ------
    InvalidRange
        If ``start`` or ``end`` is not finite, or ``end <= start``.
    InvalidBinCount
        If ``bin_count`` is not a positive integer.

    Notes
    -----
    NaN values are never counted: they are excluded from the statistics and
    from binning and tallied in :attr:`nan_count`. Infinite values are
    counted, ``+inf`` as overflow and ``-inf`` as underflow, and enter the
    statistics with IEEE-754 semantics.

    Examples
    --------
    >>> hist = Histogram(0.0, 100.0, 10)
    >>> hist.add_many([15.0, 25.0, 35.5, 50.0, 72.0, 91.0])
    >>> hist.count, hist.min, hist.max
    (6, 15.0, 91.0)
    >>> hist.bin_index(91.0)
    9
    """

    def __init__(self, start: float, end: float, bin_count: int) -> None:
        start = float(start)
        end = float(end)
        if not (math.isfinite(start) and math.isfinite(end)):
            raise InvalidRange(f"start ({start}) and end ({end}) must be finite")
        if end <= start:
            raise InvalidRange(f"start ({start}) must be less than end ({end})")

        if isinstance(bin_count, bool):
            raise InvalidBinCount(f"bin_count must be an integer, got {bin_count!r}")
        try:
            n_bins = operator.index(bin_count)
        except TypeError as exc:
            raise InvalidBinCount(f"bin_count must be an integer, got {bin_count!r}") from exc
        if n_bins <= 0:
            raise InvalidBinCount(f"bin_count ({n_bins}) must be greater than 0")

        self._start = start
        self._end = end
        self._bin_count = n_bins
        self._bin_width = (end - start) / n_bins
        self._bins: NDArray[np.int64] = np.zeros(n_bins, dtype=np.int64)
        self._underflow = 0
        self._overflow = 0
        self._nan_count = 0
        self._stats = StatsAccumulator()

    # Shape -----------------------------------------------------------------

    @property
    def start(self) -> float:  # pragma: no cover - trivial accessor
        return self._start

    @property
    def end(self) -> float:  # pragma: no cover - trivial accessor
        return self._end

    @property
    def bin_count(self) -> int:  # pragma: no cover - trivial accessor
        return self._bin_count

    @property
    def bin_width(self) -> float:  # pragma: no cover - trivial accessor
        return self._bin_width

    def bin_edges(self) -> NDArray[np.float64]:
        """Return the ``bin_count + 1`` bin boundaries.

        Edge ``i`` is ``start + i * bin_width``; the last edge is ``end``
        exactly.
        """

        edges = self._start + np.arange(self._bin_count + 1, dtype=np.float64) * self._bin_width
        edges[-1] = self._end
        return edges

    # Counters --------------------------------------------------------------

    @property
    def bins(self) -> NDArray[np.int64]:
        """Copy of the interior bin counters."""
        return self._bins.copy()

    @property
    def underflow(self) -> int:  # pragma: no cover - trivial accessor
        return self._underflow

    @property
    def overflow(self) -> int:  # pragma: no cover - trivial accessor
        return self._overflow

    @property
    def nan_count(self) -> int:  # pragma: no cover - trivial accessor
        return self._nan_count

    @property
    def stats(self) -> StatsAccumulator:
        """Copy of the running statistics."""
        return self._stats.copy()

    # Statistics ------------------------------------------------------------

    @property
    def count(self) -> int:
        return self._stats.count

    @property
    def min(self) -> float:
        return self._stats.min

    @property
    def max(self) -> float:
        return self._stats.max

    @property
    def mean(self) -> float:
        return self._stats.mean

    @property
    def std_dev(self) -> float:
        return self._stats.std_dev

    # Ingestion -------------------------------------------------------------

    def bin_index(self, value: float) -> int | None:
        """Return the bin a value falls in, or ``None`` if it is not binned.

        Values below ``start``, at or above ``end``, and NaN return ``None``.
        """

        value = float(value)
        if not (self._start <= value < self._end):
            return None
        index = math.floor((value - self._start) / self._bin_width)
        # rounding can push values just below ``end`` to bin_count
        return min(max(index, 0), self._bin_count - 1)

    def add(self, value: float) -> None:
        """Add a single value.

        Parameters
        ----------
        value : float
            Observed value. NaN is skipped and tallied in :attr:`nan_count`.
        """

        value = float(value)
        if math.isnan(value):
            self._nan_count += 1
            return

        self._stats.observe(value)
        if value < self._start:
            self._underflow += 1
        elif value >= self._end:
            self._overflow += 1
        else:
            self._bins[self.bin_index(value)] += 1

    def add_many(self, values: ArrayLike) -> None:
        """Add a batch of values.

        Bin, underflow, overflow and NaN counts are identical to calling
        :meth:`add` for each value; the statistics agree up to rounding.

        Parameters
        ----------
        values : array_like
            Scalar or array of observations; flattened before use.
        """

        arr = np.asarray(values, dtype=np.float64).ravel()
        if arr.size == 0:
            return

        nan_mask = np.isnan(arr)
        n_nan = int(nan_mask.sum())
        if n_nan:
            logger.debug("Skipping %d NaN values out of %d", n_nan, arr.size)
            self._nan_count += n_nan
            arr = arr[~nan_mask]

        under = arr < self._start
        over = arr >= self._end
        inside = arr[~(under | over)]

        idx = np.floor((inside - self._start) / self._bin_width).astype(np.int64)
        idx = np.clip(idx, 0, self._bin_count - 1)

        self._bins += np.bincount(idx, minlength=self._bin_count)
        self._underflow += int(under.sum())
        self._overflow += int(over.sum())
        self._stats.observe_many(arr)

    # Combination -----------------------------------------------------------

    def is_compatible(self, other: Histogram) -> bool:
        """True if ``other`` has exactly the same start, end and bin count."""
        return (
            _same_bound(self._start, other._start)
            and _same_bound(self._end, other._end)
            and self._bin_count == other._bin_count
        )

    def merge(self, other: Histogram) -> Histogram:
        """Return a new histogram equivalent to having seen both inputs.

        Parameters
        ----------
        other : Histogram
            Histogram built over the same ``start``, ``end`` and
            ``bin_count``.

        Returns
        -------
        Histogram
            Bins, underflow, overflow and NaN tallies summed, statistics
            combined. Neither input is modified.

        Raises
        ------
        IncompatibleHistograms
            If the shapes differ in any way.
        """

        if not isinstance(other, Histogram):
            raise TypeError(f"cannot merge Histogram with {type(other).__name__}")
        if not _same_bound(self._start, other._start):
            raise IncompatibleHistograms(
                f"starts must be equal, got {self._start} and {other._start}"
            )
        if not _same_bound(self._end, other._end):
            raise IncompatibleHistograms(f"ends must be equal, got {self._end} and {other._end}")
        if self._bin_count != other._bin_count:
            raise IncompatibleHistograms(
                f"bin counts must be equal, got {self._bin_count} and {other._bin_count}"
            )

        merged = Histogram(self._start, self._end, self._bin_count)
        merged._bins = self._bins + other._bins
        merged._underflow = self._underflow + other._underflow
        merged._overflow = self._overflow + other._overflow
        merged._nan_count = self._nan_count + other._nan_count
        merged._stats = self._stats.combine(other._stats)
        return merged

    def __add__(self, other: Histogram) -> Histogram:
        if not isinstance(other, Histogram):
            return NotImplemented
        return self.merge(other)

    def __radd__(self, other: object) -> Histogram:
        # lets ``sum(histograms)`` start from the implicit 0
        if isinstance(other, int) and other == 0:
            return self.copy()
        return NotImplemented

    def copy(self) -> Histogram:
        result = Histogram(self._start, self._end, self._bin_count)
        result._bins = self._bins.copy()
        result._underflow = self._underflow
        result._overflow = self._overflow
        result._nan_count = self._nan_count
        result._stats = self._stats.copy()
        return result

    __copy__ = copy

    # Queries ---------------------------------------------------------------

    def bin_ranges(self) -> list[BinRange]:
        """Return ``(lower, upper, count)`` for every counter.

        The first entry is the underflow ``(-inf, start, underflow)``, then
        one entry per bin, then the overflow ``(end, +inf, overflow)``.
        """

        edges = self.bin_edges()
        ranges: list[BinRange] = [(-math.inf, self._start, self._underflow)]
        for i, count in enumerate(self._bins):
            ranges.append((float(edges[i]), float(edges[i + 1]), int(count)))
        ranges.append((self._end, math.inf, self._overflow))
        return ranges

    def bins_at_quantiles(self, fractions: Sequence[float]) -> list[BinRange]:
        """Return the bin holding each requested quantile.

        For each fraction ``q`` the counters are scanned in order (underflow,
        bins, overflow) and the first entry whose running total reaches
        ``q * count`` is reported, together with that running total. The
        requirement is never below one observation, so ``q = 0`` reports
        the first non-empty entry and ``q = 1`` reports the entry that
        completes the total.

        Parameters
        ----------
        fractions : sequence of float
            Fractions in ``[0, 1]``.

        Returns
        -------
        list of tuple
            ``(lower, upper, cumulative_count)`` per fraction, in the order
            requested. On an empty histogram every fraction reports the
            underflow entry with a cumulative count of zero.

        Raises
        ------
        InvalidQuantile
            If any fraction is NaN or outside ``[0, 1]``.
        """

        counts = np.concatenate(([self._underflow], self._bins, [self._overflow])).astype(np.int64)
        cumulative = np.cumsum(counts)

        edges = self.bin_edges()
        lowers = np.concatenate(([-math.inf], edges))
        uppers = np.concatenate((edges, [math.inf]))

        return [
            (float(lowers[i]), float(uppers[i]), running)
            for i, running in search_cumulative(cumulative, fractions)
        ]

    def bins_at_quartiles(self) -> list[BinRange]:
        return self.bins_at_quantiles(QUARTILES)

    def bins_at_deciles(self) -> list[BinRange]:
        return self.bins_at_quantiles(DECILES)

    def bins_at_centiles(self) -> list[BinRange]:
        return self.bins_at_quantiles(CENTILES)

    def bins_at_myriatiles(self) -> list[BinRange]:
        return self.bins_at_quantiles(MYRIATILES)

    def __repr__(self) -> str:
        return (
            f"Histogram(start={self._start}, end={self._end}, bin_count={self._bin_count}, "
            f"count={self.count}, underflow={self._underflow}, overflow={self._overflow})"
        )
