"""Tests for series construction (build_series, Series, SeriesSet)."""

import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st
from numpy.testing import assert_allclose, assert_array_equal

from headmotion.samples import SampleTable
from headmotion.series import Series, SeriesSet, build_all_series, build_series


@st.composite
def sample_tables(draw, min_size: int = 1, max_size: int = 40) -> SampleTable:
    """Random tables on a 0.1 s bin grid with a few categories."""
    n = draw(st.integers(min_value=min_size, max_value=max_size))
    bins = draw(st.lists(st.integers(0, 15), min_size=n, max_size=n))
    categories = draw(st.lists(st.sampled_from(["A", "B", "C"]), min_size=n, max_size=n))
    values = draw(
        st.lists(
            st.floats(-100, 100, allow_nan=False, allow_infinity=False),
            min_size=n,
            max_size=n,
        )
    )
    return SampleTable.from_records(
        {"time_bin": b / 10, "x": v, "y": -v, "z": 2 * v, "category": c}
        for b, v, c in zip(bins, values, categories, strict=True)
    )


class TestSeries:
    """Tests for the Series container."""

    def test_basic(self):
        series = Series(times=[0.0, 0.1, 0.2], values=[1.0, 2.0, 3.0])
        assert len(series) == 3
        assert series.max_time == 0.2
        assert list(series) == [(0.0, 1.0), (0.1, 2.0), (0.2, 3.0)]
        assert not series.is_empty

    def test_empty(self):
        series = Series.empty()
        assert len(series) == 0
        assert series.is_empty
        assert np.isnan(series.max_time)

    def test_rejects_unsorted_times(self):
        """Non-increasing times are rejected with the first violation."""
        with pytest.raises(ValueError, match="not strictly increasing") as exc_info:
            Series(times=[0.0, 0.2, 0.1], values=[0.0, 0.0, 0.0])
        assert "index 2" in str(exc_info.value)

    def test_rejects_duplicate_times(self):
        with pytest.raises(ValueError, match="not strictly increasing"):
            Series(times=[0.0, 0.0], values=[1.0, 2.0])

    def test_rejects_length_mismatch(self):
        with pytest.raises(ValueError, match="equal length"):
            Series(times=[0.0, 1.0], values=[1.0])

    def test_arrays_are_read_only(self):
        series = Series(times=[0.0, 1.0], values=[1.0, 2.0])
        with pytest.raises(ValueError):
            series.values[0] = 5.0

    def test_source_array_not_aliased(self):
        """Mutating the source array does not change the published series."""
        values = np.array([1.0, 2.0])
        series = Series(times=np.array([0.0, 1.0]), values=values)
        values[0] = 99.0
        assert series.values[0] == 1.0


class TestSeriesSetResolve:
    """Tests for SeriesSet.resolve()."""

    def test_resolve(self, two_genre_samples: SampleTable):
        series_set = build_series(two_genre_samples, "x")
        assert series_set.resolve("A") is series_set.by_category["A"]
        assert series_set.resolve(None) is series_set.overall

    def test_resolve_unknown_falls_back_to_overall(self, two_genre_samples: SampleTable):
        series_set = build_series(two_genre_samples, "x")
        assert series_set.resolve("polka") is series_set.overall

    def test_default_is_empty(self):
        series_set = SeriesSet(axis="x")
        assert series_set.categories == ()
        assert series_set.overall.is_empty


class TestBuildSeries:
    """Tests for build_series()."""

    def test_overall_is_mean_of_raw_samples(self, two_genre_samples: SampleTable):
        """Two genres over two bins average to (0, 3) and (1, 5)."""
        series_set = build_series(two_genre_samples, "x")
        assert_array_equal(series_set.overall.times, [0.0, 1.0])
        assert_allclose(series_set.overall.values, [3.0, 5.0])

    def test_per_category_series(self, two_genre_samples: SampleTable):
        series_set = build_series(two_genre_samples, "y")
        assert series_set.categories == ("A", "B")
        assert_array_equal(series_set.by_category["A"].values, [10.0, 20.0])
        assert_array_equal(series_set.by_category["B"].values, [30.0, 40.0])
        assert series_set.axis == "y"

    def test_per_category_sorted(self, genre_samples: SampleTable):
        """Shuffled input rows come out time-sorted."""
        series_set = build_series(genre_samples, "x")
        rock = series_set.by_category["rock"]
        assert np.all(np.diff(rock.times) > 0)
        assert_allclose(rock.values, rock.times)
        assert len(series_set.by_category["jazz"]) == 10

    def test_overall_weights_by_sample_count(self):
        """Overall averages raw samples, not per-category means."""
        table = SampleTable.from_records(
            [
                {"time_bin": 0, "x": 0.0, "y": 0, "z": 0, "category": "A"},
                {"time_bin": 0, "x": 0.0, "y": 0, "z": 0, "category": "A"},
                {"time_bin": 0, "x": 9.0, "y": 0, "z": 0, "category": "B"},
            ]
        )
        series_set = build_series(table, "x")
        # mean of raw samples is 3; mean of category means would be 4.5
        assert_allclose(series_set.overall.values, [3.0])

    def test_duplicate_bins_within_category_are_averaged(self):
        table = SampleTable.from_records(
            [
                {"time_bin": 0.1, "x": 2.0, "y": 0, "z": 0, "category": "A"},
                {"time_bin": 0.1, "x": 4.0, "y": 0, "z": 0, "category": "A"},
                {"time_bin": 0.0, "x": 1.0, "y": 0, "z": 0, "category": "A"},
            ]
        )
        series = build_series(table, "x").by_category["A"]
        assert_array_equal(series.times, [0.0, 0.1])
        assert_allclose(series.values, [1.0, 3.0])

    def test_empty_input(self):
        """Empty input yields an empty overall series and no categories."""
        series_set = build_series(SampleTable.empty(), "x")
        assert series_set.overall.is_empty
        assert series_set.by_category == {}

    def test_non_finite_rows_skipped_with_warning(self):
        table = SampleTable.from_records(
            [
                {"time_bin": 0.0, "x": 1.0, "y": 0, "z": 0, "category": "A"},
                {"time_bin": 0.1, "x": float("nan"), "y": 0, "z": 0, "category": "A"},
                {"time_bin": float("nan"), "x": 5.0, "y": 0, "z": 0, "category": "A"},
                {"time_bin": 0.1, "x": 3.0, "y": 0, "z": 0, "category": "B"},
            ]
        )
        with pytest.warns(UserWarning, match="Skipped 2 of 4"):
            series_set = build_series(table, "x")
        assert_array_equal(series_set.by_category["A"].values, [1.0])
        assert_allclose(series_set.overall.values, [1.0, 3.0])

    def test_category_with_only_bad_rows_is_omitted(self):
        table = SampleTable.from_records(
            [
                {"time_bin": 0.0, "x": 1.0, "y": 0, "z": 0, "category": "A"},
                {"time_bin": 0.0, "x": float("nan"), "y": 0, "z": 0, "category": "B"},
            ]
        )
        with pytest.warns(UserWarning):
            series_set = build_series(table, "x")
        assert series_set.categories == ("A",)

    def test_nan_on_other_axis_does_not_affect_axis(self):
        """Only the requested axis is checked for finiteness."""
        table = SampleTable.from_records(
            [{"time_bin": 0.0, "x": 1.0, "y": float("nan"), "z": 0, "category": "A"}]
        )
        series_set = build_series(table, "x")
        assert len(series_set.overall) == 1

    def test_build_all_series(self, two_genre_samples: SampleTable):
        all_series = build_all_series(two_genre_samples)
        assert set(all_series) == {"x", "y", "z"}
        assert_allclose(all_series["z"].overall.values, [-2.0, -3.0])


class TestBuildSeriesProperties:
    """Property-based tests for build_series()."""

    @given(table=sample_tables())
    def test_overall_length_equals_distinct_bins(self, table: SampleTable):
        series_set = build_series(table, "x")
        assert len(series_set.overall) == len(np.unique(table.time_bin))

    @given(table=sample_tables())
    def test_category_series_strictly_sorted(self, table: SampleTable):
        series_set = build_series(table, "z")
        for series in series_set.by_category.values():
            assert len(series) >= 1
            assert np.all(np.diff(series.times) > 0)

    @given(table=sample_tables())
    def test_every_category_present(self, table: SampleTable):
        series_set = build_series(table, "y")
        assert series_set.categories == table.categories

    @given(table=sample_tables())
    def test_overall_uses_every_sample_once(self, table: SampleTable):
        """Sum over bins of (mean * count) equals the sum of all samples."""
        series_set = build_series(table, "x")
        _, counts = np.unique(table.time_bin, return_counts=True)
        assert_allclose(
            np.sum(series_set.overall.values * counts), np.sum(table.x), atol=1e-6
        )
