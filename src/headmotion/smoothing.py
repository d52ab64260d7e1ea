"""Centered moving-average smoothing of motion series.

The filter replaces each value with the mean of the input values within
``half_width`` points on either side. At the ends the window is truncated
to the points that exist; there is no padding and no wraparound:

    window(i) = [max(0, i - half_width), min(n - 1, i + half_width)]

Examples
--------
>>> import numpy as np
>>> from headmotion.series import Series
>>> series = Series(times=np.arange(5.0), values=np.array([0.0, 0, 10, 0, 0]))
>>> np.round(smooth(series, half_width=1).values, 3).tolist()
[0.0, 3.333, 3.333, 3.333, 0.0]
"""

from __future__ import annotations

import numbers

import numpy as np
from numpy.typing import NDArray
from scipy.ndimage import uniform_filter1d

from headmotion.series import Series, SeriesSet

__all__ = [
    "moving_average",
    "smooth",
    "smooth_series_set",
]


def _validate_half_width(half_width: int) -> int:
    if (
        isinstance(half_width, bool)
        or not isinstance(half_width, numbers.Integral)
        or half_width < 0
    ):
        raise ValueError(
            f"WHAT: half_width must be a non-negative integer, got {half_width!r}.\n\n"
            f"WHY: The smoothing window spans half_width points on each side "
            f"of every sample.\n\n"
            f"HOW: Pass an int >= 0; 0 leaves the series unchanged."
        )
    return int(half_width)


def moving_average(values: NDArray[np.float64], half_width: int) -> NDArray[np.float64]:
    """Truncated-window centered moving average of a 1D array.

    Parameters
    ----------
    values : NDArray[np.float64], shape (n,)
        Input values.
    half_width : int
        Number of neighbours on each side included in the window.

    Returns
    -------
    NDArray[np.float64], shape (n,)
        Mean of ``values`` over each truncated window.

    Notes
    -----
    Zero padding (``mode="constant"``) makes the filtered sum at the
    boundaries equal the sum over the truncated window; dividing by the
    filtered ones array turns it into the mean over the points that exist.
    """
    half_width = _validate_half_width(half_width)
    values = np.asarray(values, dtype=np.float64)
    if half_width == 0 or values.size == 0:
        return values.copy()

    size = 2 * half_width + 1
    window_sum = uniform_filter1d(values, size=size, mode="constant", cval=0.0)
    window_count = uniform_filter1d(
        np.ones_like(values), size=size, mode="constant", cval=0.0
    )
    return window_sum / window_count


def smooth(series: Series, half_width: int) -> Series:
    """Smooth a series with a centered moving average.

    Parameters
    ----------
    series : Series
        Source series. Its values are read, never modified.
    half_width : int
        Window half width in points (>= 0). ``0`` is the identity.

    Returns
    -------
    Series
        Series with the same times and length; each value is the mean of
        the *input* values in its window.

    Raises
    ------
    ValueError
        If ``half_width`` is negative or not an integer.
    """
    return series.with_values(moving_average(series.values, half_width))


def smooth_series_set(series_set: SeriesSet, half_width: int) -> SeriesSet:
    """Smooth every per-category series and the overall series once."""
    return SeriesSet(
        axis=series_set.axis,
        by_category={
            category: smooth(series, half_width)
            for category, series in series_set.by_category.items()
        },
        overall=smooth(series_set.overall, half_width),
    )
