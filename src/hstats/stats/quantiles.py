"""
Fixed fraction sets and the cumulative-count search behind quantile bin queries.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from ..errors import InvalidQuantile

QUARTILES: tuple[float, ...] = (0.25, 0.50, 0.75)
DECILES: tuple[float, ...] = tuple(i / 10 for i in range(1, 10))
CENTILES: tuple[float, ...] = tuple(i / 100 for i in range(1, 100))
MYRIATILES: tuple[float, ...] = tuple(i / 10_000 for i in range(1, 10_000))

# Absolute slack subtracted from q * total so that decimal fractions such as
# 0.07 (stored as 0.07000000000000000666...) do not push the target one
# count past an exact integer.
_TARGET_ATOL = 1e-9


def validate_fractions(fractions: Sequence[float]) -> NDArray[np.float64]:
    """Return ``fractions`` as a float array, rejecting values outside ``[0, 1]``.

    Raises
    ------
    InvalidQuantile
        If any fraction is NaN or lies outside ``[0, 1]``.
    """

    arr = np.asarray(fractions, dtype=np.float64).ravel()
    bad = ~((arr >= 0.0) & (arr <= 1.0))
    if np.any(bad):
        raise InvalidQuantile(
            f"quantile fractions must lie in [0, 1], got {arr[bad].tolist()}"
        )
    return arr


def required_counts(fractions: NDArray[np.float64], total: int) -> NDArray[np.int64]:
    """Cumulative count each fraction must reach.

    For ``total > 0`` this is ``max(1, ceil(q * total))`` evaluated with a
    small absolute tolerance, so ``q = 0`` selects the first non-empty bin
    and ``q = 1`` selects the bin that completes the total. For
    ``total == 0`` every requirement is zero.
    """

    if total == 0:
        return np.zeros(fractions.shape, dtype=np.int64)

    targets = np.ceil(fractions * total - _TARGET_ATOL).astype(np.int64)
    return np.clip(targets, 1, total)


def search_cumulative(
    cumulative: NDArray[np.int64], fractions: Sequence[float]
) -> list[tuple[int, int]]:
    """Locate the entry answering each fraction.

    Parameters
    ----------
    cumulative : numpy.ndarray
        Non-decreasing running totals; the last element is the total count.
    fractions : sequence of float
        Requested fractions in ``[0, 1]``.

    Returns
    -------
    list of tuple
        ``(entry_index, cumulative_count)`` for each fraction, in the order
        requested.
    """

    arr = validate_fractions(fractions)
    total = int(cumulative[-1])
    needed = required_counts(arr, total)
    # side="left": first index whose running total is >= the requirement
    indices = np.searchsorted(cumulative, needed, side="left")
    return [(int(i), int(cumulative[i])) for i in indices]

