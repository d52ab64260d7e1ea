"""Linear interpolation of a series at arbitrary query times.

The bracketing points are found by left bisection on the series times:

- ``i`` is the smallest index with ``times[i] >= t``.
- ``cur`` is point ``i``, or the last point when ``t`` is past the end.
- ``prev`` is point ``i - 1``, or ``cur`` itself when ``i == 0``.

A zero span (``prev is cur``) is replaced by a span of 1. This avoids the
division by zero but is not a precision-correct interpolation: with
``prev is cur`` the slope is zero, so queries before the first time hold
the first value.

The fraction is never clamped. Queries after the last time extrapolate
along the slope of the last two points.

Examples
--------
>>> import numpy as np
>>> from headmotion.series import Series
>>> series = Series(times=np.array([0.0, 10.0]), values=np.array([0.0, 10.0]))
>>> value_at(series, 5.0)
5.0
>>> value_at(series, 15.0)
15.0
>>> value_at(series, -5.0)
0.0
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from headmotion.series import Series

__all__ = [
    "EmptySeriesError",
    "value_at",
    "values_at",
]


class EmptySeriesError(ValueError):
    """Raised when interpolating or playing back a series with no points."""

    def __init__(self, what: str = "series") -> None:
        super().__init__(
            f"WHAT: Cannot interpolate an empty {what}.\n\n"
            f"WHY: There is no data to animate; the series has no points.\n\n"
            f"HOW: Check that the dataset loaded rows with finite time bins "
            f"and axis values."
        )


def _brackets(
    times: NDArray[np.float64], t: NDArray[np.float64]
) -> tuple[NDArray[np.intp], NDArray[np.intp]]:
    n = times.size
    idx = np.searchsorted(times, t, side="left")
    cur = np.minimum(idx, n - 1)
    # past the end, prev is the point before the last one so the last
    # segment's slope carries on
    prev = np.where(idx >= n, max(n - 2, 0), np.maximum(idx - 1, 0))
    return prev, cur


def values_at(series: Series, t: ArrayLike) -> NDArray[np.float64]:
    """Interpolate ``series`` at each query time in ``t``.

    Parameters
    ----------
    series : Series
        Non-empty series with strictly increasing times.
    t : array_like
        Query times, any shape.

    Returns
    -------
    NDArray[np.float64]
        Interpolated values, same shape as ``t``.

    Raises
    ------
    EmptySeriesError
        If ``series`` has no points.
    """
    if series.is_empty:
        raise EmptySeriesError()

    t = np.asarray(t, dtype=np.float64)
    prev, cur = _brackets(series.times, t)

    t_prev, t_cur = series.times[prev], series.times[cur]
    v_prev, v_cur = series.values[prev], series.values[cur]

    span = t_cur - t_prev
    span = np.where(span == 0, 1.0, span)
    frac = (t - t_prev) / span
    result = v_prev + (v_cur - v_prev) * frac
    # frac == 1 lands exactly on cur; the sum above can be off by an ulp
    return np.where(frac == 1.0, v_cur, result)


def value_at(series: Series, t: float) -> float:
    """Interpolate ``series`` at a single query time.

    Parameters
    ----------
    series : Series
        Non-empty series with strictly increasing times.
    t : float
        Query time, in the series' time units.

    Returns
    -------
    float
        Linearly interpolated (or extrapolated) value.

    Raises
    ------
    EmptySeriesError
        If ``series`` has no points.
    """
    return float(values_at(series, t))
