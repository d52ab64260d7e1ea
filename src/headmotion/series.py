"""Time series construction from binned motion samples.

For one motion axis, :func:`build_series` produces

- one :class:`Series` per category: the category's samples ordered by
  time bin, and
- one ``overall`` series: the mean of *all* raw samples in each time bin.

The overall series is the mean over raw samples, not the mean of the
per-category series, so categories with more samples in a bin weigh more.

Examples
--------
>>> from headmotion.samples import SampleTable
>>> table = SampleTable.from_records(
...     [
...         {"time_bin": 0, "x": 1, "y": 0, "z": 0, "category": "A"},
...         {"time_bin": 1, "x": 3, "y": 0, "z": 0, "category": "A"},
...         {"time_bin": 0, "x": 5, "y": 0, "z": 0, "category": "B"},
...         {"time_bin": 1, "x": 7, "y": 0, "z": 0, "category": "B"},
...     ]
... )
>>> series_set = build_series(table, "x")
>>> series_set.overall.values.tolist()
[3.0, 5.0]
>>> series_set.categories
('A', 'B')
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from headmotion._timing import timed
from headmotion.samples import AXES, Axis, SampleTable

__all__ = [
    "Series",
    "SeriesSet",
    "build_all_series",
    "build_series",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Series:
    """Time-ordered sequence of ``(time, value)`` points.

    Parameters
    ----------
    times : NDArray[np.float64], shape (n_points,)
        Strictly increasing sample times, in seconds.
    values : NDArray[np.float64], shape (n_points,)
        Value at each time.

    Raises
    ------
    ValueError
        If the arrays differ in length or ``times`` is not strictly
        increasing.

    Notes
    -----
    Both arrays are made read-only on construction. A published series is
    shared between the playback clock and the renderer and is never mutated.
    """

    times: NDArray[np.float64]
    values: NDArray[np.float64]

    def __post_init__(self) -> None:
        times = np.array(self.times, dtype=np.float64)
        values = np.array(self.values, dtype=np.float64)
        if times.ndim != 1 or times.shape != values.shape:
            raise ValueError(
                f"times and values must be 1D arrays of equal length, got "
                f"shapes {times.shape} and {values.shape}."
            )
        if times.size > 1 and not np.all(np.diff(times) > 0):
            first_bad_idx = int(np.where(np.diff(times) <= 0)[0][0]) + 1
            raise ValueError(
                f"WHAT: Series times are not strictly increasing.\n"
                f"  First violation at index {first_bad_idx}: "
                f"times[{first_bad_idx - 1}]={times[first_bad_idx - 1]:.6f}, "
                f"times[{first_bad_idx}]={times[first_bad_idx]:.6f}\n\n"
                f"WHY: Playback locates the bracketing points by binary search, "
                f"which requires sorted, unique times.\n\n"
                f"HOW: Build series with build_series(), which sorts and "
                f"averages duplicate time bins."
            )
        times.flags.writeable = False
        values.flags.writeable = False
        object.__setattr__(self, "times", times)
        object.__setattr__(self, "values", values)

    def __len__(self) -> int:
        return int(self.times.shape[0])

    def __iter__(self) -> Iterator[tuple[float, float]]:
        for t, v in zip(self.times.tolist(), self.values.tolist(), strict=True):
            yield t, v

    @property
    def is_empty(self) -> bool:
        """Whether the series has no points."""
        return self.times.size == 0

    @property
    def max_time(self) -> float:
        """Last (largest) time in the series; NaN for an empty series."""
        return float(self.times[-1]) if self.times.size else float("nan")

    @classmethod
    def empty(cls) -> Series:
        """Create a series with no points."""
        return cls(times=np.empty(0), values=np.empty(0))

    def with_values(self, values: NDArray[np.float64]) -> Series:
        """Return a series with the same times and new values."""
        return Series(times=self.times, values=values)


@dataclass(frozen=True)
class SeriesSet:
    """All series built for one motion axis.

    Attributes
    ----------
    axis : {"x", "y", "z"}
        Motion axis the values come from.
    by_category : dict[str, Series]
        One series per category, in first-seen category order.
    overall : Series
        Mean over all samples per time bin.
    """

    axis: Axis
    by_category: dict[str, Series] = field(default_factory=dict)
    overall: Series = field(default_factory=Series.empty)

    @property
    def categories(self) -> tuple[str, ...]:
        """Categories with a series, in first-seen order."""
        return tuple(self.by_category)

    def resolve(self, selection: str | None) -> Series:
        """Return the series governing playback for ``selection``.

        ``None`` and categories without a series resolve to ``overall``.
        """
        if selection is None:
            return self.overall
        return self.by_category.get(selection, self.overall)


def _mean_by_time(
    times: NDArray[np.float64], values: NDArray[np.float64]
) -> Series:
    """Average values sharing a time and return them sorted by time."""
    if times.size == 0:
        return Series.empty()
    unique_times, inverse = np.unique(times, return_inverse=True)
    sums = np.bincount(inverse, weights=values, minlength=unique_times.size)
    counts = np.bincount(inverse, minlength=unique_times.size)
    return Series(times=unique_times, values=sums / counts)


@timed
def build_series(samples: SampleTable, axis: Axis) -> SeriesSet:
    """Build per-category and overall series for one axis.

    Parameters
    ----------
    samples : SampleTable
        Raw time-binned samples.
    axis : {"x", "y", "z"}
        Axis whose values populate the series.

    Returns
    -------
    SeriesSet
        Per-category series (first-seen order) and the overall series.
        Empty input yields an empty overall series and no categories.

    Warns
    -----
    UserWarning
        If rows with a non-finite time bin or axis value were skipped.

    Notes
    -----
    Within a category, samples sharing a time bin are averaged so that
    every series has strictly increasing times. For pre-binned exports
    (one row per category and bin) this leaves the values untouched.
    """
    times = samples.time_bin
    values = samples.column(axis)
    categories = samples.category

    valid = np.isfinite(times) & np.isfinite(values)
    n_skipped = int(np.count_nonzero(~valid))
    if n_skipped:
        warnings.warn(
            f"Skipped {n_skipped} of {len(samples)} samples with a non-finite "
            f"time bin or {axis!r} value.",
            UserWarning,
            stacklevel=2,
        )
        times, values, categories = times[valid], values[valid], categories[valid]

    by_category: dict[str, Series] = {}
    for category in dict.fromkeys(categories.tolist()):
        mask = categories == category
        by_category[category] = _mean_by_time(times[mask], values[mask])

    overall = _mean_by_time(times, values)
    logger.debug(
        "Built %r series: %d categories, %d overall bins",
        axis,
        len(by_category),
        len(overall),
    )
    return SeriesSet(axis=axis, by_category=by_category, overall=overall)


def build_all_series(
    samples: SampleTable, axes: Sequence[Axis] = AXES
) -> dict[Axis, SeriesSet]:
    """Build a :class:`SeriesSet` for each axis in ``axes``."""
    return {axis: build_series(samples, axis) for axis in axes}
