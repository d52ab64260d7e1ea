"""Tests for the moving-average smoothing filter."""

import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st
from numpy.testing import assert_allclose, assert_array_equal

from headmotion.samples import SampleTable
from headmotion.series import Series, build_series
from headmotion.smoothing import moving_average, smooth, smooth_series_set


def _naive_smooth(values: np.ndarray, half_width: int) -> np.ndarray:
    n = len(values)
    return np.array(
        [
            values[max(0, i - half_width) : min(n - 1, i + half_width) + 1].mean()
            for i in range(n)
        ]
    )


values_lists = st.lists(
    st.floats(-1e3, 1e3, allow_nan=False, allow_infinity=False),
    min_size=1,
    max_size=60,
)


class TestSmooth:
    """Tests for smooth()."""

    def test_half_width_zero_is_identity(self):
        series = Series(times=[0.0, 0.1, 0.2], values=[3.0, -1.0, 7.5])
        smoothed = smooth(series, 0)
        assert_array_equal(smoothed.values, series.values)
        assert_array_equal(smoothed.times, series.times)

    def test_truncated_window_at_boundaries(self):
        """Windows shrink at the ends; no padding, no wraparound."""
        series = Series(times=np.arange(5.0), values=[0.0, 0.0, 10.0, 0.0, 30.0])
        smoothed = smooth(series, 1)
        # i=0: mean(0, 0); i=4: mean(0, 30)
        assert_allclose(smoothed.values, [0.0, 10 / 3, 10 / 3, 40 / 3, 15.0])

    def test_window_larger_than_series(self):
        """A window covering everything averages the whole series."""
        series = Series(times=np.arange(4.0), values=[1.0, 2.0, 3.0, 6.0])
        smoothed = smooth(series, 10)
        assert_allclose(smoothed.values, np.full(4, 3.0))

    def test_single_point(self):
        series = Series(times=[2.0], values=[4.0])
        assert_allclose(smooth(series, 5).values, [4.0])

    def test_empty_series(self):
        assert smooth(Series.empty(), 3).is_empty

    def test_uses_input_values_not_smoothed(self):
        """Each output is a mean of the original input, not a running result."""
        values = np.array([9.0, 0.0, 0.0, 0.0])
        series = Series(times=np.arange(4.0), values=values)
        smoothed = smooth(series, 1)
        assert_allclose(smoothed.values, [4.5, 3.0, 0.0, 0.0])

    def test_source_not_modified(self):
        series = Series(times=np.arange(3.0), values=[1.0, 5.0, 1.0])
        smooth(series, 1)
        assert_array_equal(series.values, [1.0, 5.0, 1.0])

    @pytest.mark.parametrize("half_width", [-1, 1.5, "2", True])
    def test_invalid_half_width(self, half_width):
        series = Series(times=[0.0], values=[1.0])
        with pytest.raises(ValueError, match="non-negative integer"):
            smooth(series, half_width)

    def test_numpy_integer_half_width(self):
        series = Series(times=np.arange(3.0), values=[0.0, 3.0, 0.0])
        assert_allclose(smooth(series, np.int64(1)).values, [1.5, 1.0, 1.5])


class TestSmoothProperties:
    """Property-based tests for smooth()."""

    @given(values=values_lists, half_width=st.integers(0, 12))
    def test_matches_naive_window_mean(self, values, half_width):
        values = np.asarray(values)
        assert_allclose(
            moving_average(values, half_width),
            _naive_smooth(values, half_width),
            rtol=1e-9,
            atol=1e-6,
        )

    @given(values=values_lists, half_width=st.integers(0, 12))
    def test_preserves_length_and_times(self, values, half_width):
        series = Series(times=np.arange(len(values)) * 0.1, values=values)
        smoothed = smooth(series, half_width)
        assert len(smoothed) == len(series)
        assert_array_equal(smoothed.times, series.times)

    @given(values=values_lists, half_width=st.integers(0, 12))
    def test_stays_within_input_range(self, values, half_width):
        smoothed = moving_average(np.asarray(values), half_width)
        assert np.all(smoothed >= min(values) - 1e-6)
        assert np.all(smoothed <= max(values) + 1e-6)


class TestSmoothSeriesSet:
    """Tests for smooth_series_set()."""

    def test_smooths_every_series_once(self, two_genre_samples: SampleTable):
        series_set = build_series(two_genre_samples, "x")
        smoothed = smooth_series_set(series_set, 1)
        assert smoothed.axis == "x"
        assert smoothed.categories == ("A", "B")
        assert_allclose(smoothed.by_category["A"].values, [2.0, 2.0])
        assert_allclose(smoothed.by_category["B"].values, [6.0, 6.0])
        assert_allclose(smoothed.overall.values, [4.0, 4.0])

    def test_original_set_unchanged(self, two_genre_samples: SampleTable):
        series_set = build_series(two_genre_samples, "x")
        smooth_series_set(series_set, 1)
        assert_allclose(series_set.overall.values, [3.0, 5.0])
