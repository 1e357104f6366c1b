"""
Tests for histogram construction, ingestion and accessors.
"""

import math

import numpy as np
import pytest

from hstats import Histogram, HistogramError, InvalidBinCount, InvalidRange


def _check_counts_add_up(hist):
    assert int(hist.bins.sum()) + hist.underflow + hist.overflow == hist.count


class TestConstruction:
    """Test Histogram construction and validation."""

    def test_new(self):
        hist = Histogram(0.0, 10.0, 10)

        assert hist.start == 0.0
        assert hist.end == 10.0
        assert hist.bin_count == 10
        assert hist.bin_width == 1.0
        assert hist.bins.shape == (10,)
        assert hist.count == 0
        assert hist.underflow == 0
        assert hist.overflow == 0

    def test_start_equal_end(self):
        """Equal bounds are rejected."""
        with pytest.raises(InvalidRange, match="must be less than end"):
            Histogram(0.0, 0.0, 10)

    def test_start_greater_than_end(self):
        with pytest.raises(InvalidRange):
            Histogram(5.0, 1.0, 10)

    @pytest.mark.parametrize("start,end", [(math.nan, 1.0), (0.0, math.inf), (-math.inf, 0.0)])
    def test_non_finite_bounds(self, start, end):
        with pytest.raises(InvalidRange, match="must be finite"):
            Histogram(start, end, 4)

    def test_bin_count_zero(self):
        """Zero bins are rejected."""
        with pytest.raises(InvalidBinCount, match="must be greater than 0"):
            Histogram(0.0, 10.0, 0)

    @pytest.mark.parametrize("bin_count", [-3, 2.5, True, "10"])
    def test_invalid_bin_count(self, bin_count):
        with pytest.raises(InvalidBinCount):
            Histogram(0.0, 10.0, bin_count)

    def test_errors_are_value_errors(self):
        """Construction errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            Histogram(1.0, 1.0, 1)
        assert issubclass(InvalidRange, HistogramError)
        assert issubclass(InvalidBinCount, ValueError)

    def test_numpy_integer_bin_count(self):
        hist = Histogram(0.0, 1.0, np.int64(4))
        assert hist.bin_count == 4


class TestAdd:
    """Test value classification."""

    def test_add(self):
        hist = Histogram(0.0, 10.0, 10)
        hist.add(5.0)

        assert hist.bins[5] == 1
        assert hist.count == 1

    def test_add_underflow(self):
        """Values below start underflow; start itself lands in bin 0."""
        hist = Histogram(0.0, 10.0, 10)
        hist.add(-1.0)
        hist.add(0.0)

        assert hist.underflow == 1
        assert hist.bins[0] == 1
        assert hist.count == 2

    def test_add_overflow(self):
        """Values at or above end overflow."""
        hist = Histogram(0.0, 10.0, 10)
        hist.add(11.0)
        hist.add(10.0)

        assert hist.overflow == 2
        assert hist.bins[-1] == 0
        assert hist.count == 2

    def test_concrete_scenario(self):
        hist = Histogram(0.0, 100.0, 10)
        for value in [15.0, 25.0, 35.5, 50.0, 72.0, 91.0]:
            hist.add(value)

        assert hist.count == 6
        assert hist.min == 15.0
        assert hist.max == 91.0
        assert hist.mean == pytest.approx(48.083333333333336)
        assert hist.bin_index(15.0) == 1
        assert hist.bin_index(91.0) == 9
        assert hist.bins[1] == 1
        assert hist.bins[9] == 1
        assert hist.underflow == 0
        assert hist.overflow == 0

    def test_single_bin_scenario(self):
        hist = Histogram(0.0, 10.0, 1)

        hist.add(-5.0)
        assert hist.underflow == 1
        hist.add(10.0)
        assert hist.overflow == 1
        hist.add(5.0)
        assert hist.bins[0] == 1

        merged = hist.merge(Histogram(0.0, 10.0, 1))
        assert merged.underflow == 1
        assert merged.overflow == 1
        assert merged.bins.tolist() == [1]
        assert merged.count == 3

    def test_value_just_below_end(self):
        """Rounding at the upper edge never produces an out-of-range index."""
        hist = Histogram(0.0, 1.0, 3)
        value = np.nextafter(1.0, 0.0)

        assert hist.bin_index(value) == 2
        hist.add(value)
        hist.add_many([value])
        assert hist.bins[2] == 2

    def test_bin_index_outside_range(self):
        hist = Histogram(0.0, 1.0, 3)

        assert hist.bin_index(-0.1) is None
        assert hist.bin_index(1.0) is None
        assert hist.bin_index(math.nan) is None

    def test_nan_is_skipped(self):
        hist = Histogram(0.0, 10.0, 10)
        hist.add(math.nan)
        hist.add_many([1.0, math.nan, 2.0])

        assert hist.count == 2
        assert hist.nan_count == 2
        assert hist.mean == 1.5
        _check_counts_add_up(hist)

    def test_infinities_are_counted(self):
        hist = Histogram(0.0, 10.0, 10)
        hist.add(math.inf)
        hist.add(-math.inf)

        assert hist.overflow == 1
        assert hist.underflow == 1
        assert hist.count == 2
        assert hist.min == -math.inf
        assert hist.max == math.inf
        assert math.isnan(hist.std_dev)
        _check_counts_add_up(hist)

    def test_infinity_in_batch_gives_nan_std_dev(self):
        hist = Histogram(0.0, 10.0, 10)
        hist.add_many([1.0, 2.0, math.inf])

        assert hist.overflow == 1
        assert hist.count == 3
        assert math.isnan(hist.std_dev)

    def test_counts_add_up_after_every_add(self):
        rng = np.random.default_rng(1)
        hist = Histogram(-1.0, 1.0, 8)
        for n, value in enumerate(rng.normal(0.0, 1.5, size=200), start=1):
            hist.add(value)
            assert hist.count == n
            _check_counts_add_up(hist)

    def test_add_many_matches_add(self):
        rng = np.random.default_rng(5)
        data = rng.normal(0.0, 4.0, size=5000)
        data[::97] = np.nan

        looped = Histogram(-5.0, 5.0, 25)
        for value in data:
            looped.add(value)
        batched = Histogram(-5.0, 5.0, 25)
        batched.add_many(data)

        assert np.array_equal(batched.bins, looped.bins)
        assert batched.underflow == looped.underflow
        assert batched.overflow == looped.overflow
        assert batched.nan_count == looped.nan_count
        assert batched.count == looped.count
        assert np.isclose(batched.mean, looped.mean, rtol=1e-9)
        assert np.isclose(batched.std_dev, looped.std_dev, rtol=1e-9)

    def test_stats_for_large_random_data(self):
        """Statistics cover the whole stream, including out-of-range values."""
        rng = np.random.default_rng(42)
        data = rng.normal(2.0, 3.0, size=10_000)

        hist = Histogram(-10.0, 10.0, 100)
        hist.add_many(data)

        assert hist.count == data.size
        assert np.isclose(hist.std_dev, np.std(data), rtol=1e-9)
        assert np.isclose(hist.mean, np.mean(data), rtol=1e-9)
        assert abs(hist.mean - 2.0) < 0.15
        assert abs(hist.std_dev - 3.0) < 0.15
        assert hist.min == data.min()
        assert hist.max == data.max()
        _check_counts_add_up(hist)


class TestAccessors:
    """Test read-only views of the histogram."""

    def test_empty_statistics(self):
        hist = Histogram(0.0, 1.0, 4)

        assert hist.count == 0
        assert hist.bins.tolist() == [0, 0, 0, 0]
        assert hist.std_dev == 0.0
        assert math.isnan(hist.mean)

    def test_bins_is_a_copy(self):
        hist = Histogram(0.0, 1.0, 2)
        hist.add(0.25)

        view = hist.bins
        view[0] = 100

        assert hist.bins[0] == 1

    def test_stats_is_a_copy(self):
        hist = Histogram(0.0, 1.0, 2)
        hist.stats.observe(0.5)

        assert hist.count == 0

    def test_bin_edges(self):
        hist = Histogram(-1.0, 1.0, 4)

        assert np.allclose(hist.bin_edges(), [-1.0, -0.5, 0.0, 0.5, 1.0])
        assert hist.bin_edges()[-1] == 1.0

    def test_bin_ranges(self):
        hist = Histogram(0.0, 10.0, 10)
        hist.add_many([-1.0, 0.5, 9.5, 12.0, 13.0])

        ranges = hist.bin_ranges()

        assert len(ranges) == 12
        assert ranges[0] == (-math.inf, 0.0, 1)
        assert ranges[1] == (0.0, 1.0, 1)
        assert ranges[10] == (9.0, 10.0, 1)
        assert ranges[-1] == (10.0, math.inf, 2)
        assert sum(count for _, _, count in ranges) == hist.count

    def test_copy_is_independent(self):
        hist = Histogram(0.0, 1.0, 2)
        hist.add(0.25)

        clone = hist.copy()
        clone.add(0.75)

        assert hist.count == 1
        assert clone.count == 2
        assert hist.bins.tolist() == [1, 0]
