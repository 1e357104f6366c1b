from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike


class StatsAccumulator:
    """Single-pass count, extrema, mean and variance (Welford's algorithm).

    Two accumulators built over disjoint parts of a stream can be combined
    into one that matches an accumulator fed the whole stream, up to
    floating-point rounding.

    Notes
    -----
    ``std_dev`` is the population form ``sqrt(M2 / n)``; ``sample_std_dev``
    gives the ``n - 1`` form. On an empty accumulator ``min``, ``max`` and
    ``mean`` are NaN and both standard deviations are ``0.0``.
    """

    __slots__ = ("_count", "_min", "_max", "_mean", "_m2")

    def __init__(self) -> None:
        self._count: int = 0
        self._min: float = math.inf
        self._max: float = -math.inf
        self._mean: float = 0.0
        self._m2: float = 0.0

    @property
    def count(self) -> int:  # pragma: no cover - trivial accessor
        return self._count

    @property
    def min(self) -> float:
        return self._min if self._count else math.nan

    @property
    def max(self) -> float:
        return self._max if self._count else math.nan

    @property
    def mean(self) -> float:
        return self._mean if self._count else math.nan

    @property
    def m2(self) -> float:  # pragma: no cover - trivial accessor
        return self._m2

    def observe(self, value: float) -> None:
        """Add a single observation.

        Parameters
        ----------
        value : float
            Observed value. NaN is not filtered here; callers that need a
            NaN policy (see :meth:`hstats.Histogram.add`) apply it first.
        """

        value = float(value)
        self._count += 1
        if value < self._min:
            self._min = value
        if value > self._max:
            self._max = value

        # delta uses the old mean, delta2 the updated one
        delta = value - self._mean
        self._mean += delta / self._count
        delta2 = value - self._mean
        self._m2 += delta * delta2

    def observe_many(self, values: ArrayLike) -> None:
        """Add a batch of observations.

        The batch moments are computed with NumPy and folded in with the
        same formula as :meth:`combine`.

        Parameters
        ----------
        values : array_like
            Scalar or 1D array of observations.
        """

        arr = np.asarray(values, dtype=np.float64).ravel()
        if arr.size == 0:
            return

        batch = StatsAccumulator()
        batch._count = int(arr.size)
        batch._min = float(arr.min())
        batch._max = float(arr.max())
        # infinite inputs propagate as inf/nan moments, matching observe()
        with np.errstate(invalid="ignore", over="ignore"):
            batch._mean = float(arr.mean())
            batch._m2 = float(np.sum((arr - batch._mean) ** 2))

        merged = self.combine(batch)
        self._count = merged._count
        self._min = merged._min
        self._max = merged._max
        self._mean = merged._mean
        self._m2 = merged._m2

    def combine(self, other: StatsAccumulator) -> StatsAccumulator:
        """Return a new accumulator equivalent to observing both inputs.

        Uses the pairwise update of Chan, Golub and LeVeque. Neither input
        is modified.

        Parameters
        ----------
        other : StatsAccumulator
            Accumulator built over observations disjoint from ``self``.

        Returns
        -------
        StatsAccumulator
            The combined accumulator.
        """

        if other._count == 0:
            return self.copy()
        if self._count == 0:
            return other.copy()

        n_a = self._count
        n_b = other._count
        n = n_a + n_b
        delta = other._mean - self._mean

        result = StatsAccumulator()
        result._count = n
        result._min = min(self._min, other._min)
        result._max = max(self._max, other._max)
        result._mean = self._mean + delta * n_b / n
        result._m2 = self._m2 + other._m2 + delta * delta * n_a * n_b / n
        return result

    def variance(self, ddof: int = 0) -> float:
        """Return the variance with ``ddof`` delta degrees of freedom.

        Returns ``0.0`` when ``count <= ddof``. Rounding can leave ``M2``
        marginally negative; the result is clamped at zero.
        """

        if self._count <= ddof:
            return 0.0
        var = self._m2 / (self._count - ddof)
        # NaN (from infinite inputs) passes through unclamped
        return 0.0 if var < 0.0 else var

    @property
    def std_dev(self) -> float:
        """Population standard deviation."""
        return math.sqrt(self.variance(ddof=0))

    @property
    def sample_std_dev(self) -> float:
        """Sample (Bessel-corrected) standard deviation."""
        return math.sqrt(self.variance(ddof=1))

    def copy(self) -> StatsAccumulator:
        result = StatsAccumulator()
        result._count = self._count
        result._min = self._min
        result._max = self._max
        result._mean = self._mean
        result._m2 = self._m2
        return result

    __copy__ = copy

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StatsAccumulator):
            return NotImplemented
        return (
            self._count == other._count
            and self._min == other._min
            and self._max == other._max
            and self._mean == other._mean
            and self._m2 == other._m2
        )

    def __repr__(self) -> str:
        return (
            f"StatsAccumulator(count={self._count}, min={self.min}, max={self.max}, "
            f"mean={self.mean}, std_dev={self.std_dev})"
        )
