"""Motion samples and the CSV loader.

A sample is one time-binned motion measurement ``(time_bin, x, y, z,
category)``. Samples are stored column-wise in an immutable
:class:`SampleTable` so that series construction can work on whole numpy
arrays at once.

Examples
--------
>>> table = SampleTable.from_records(
...     [
...         {"time_bin": 0.0, "x": 1.0, "y": 0.0, "z": 0.0, "category": "A"},
...         {"time_bin": 0.1, "x": 3.0, "y": 0.0, "z": 0.0, "category": "A"},
...     ]
... )
>>> len(table)
2
>>> table.categories
('A',)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

import numpy as np
import pandas as pd
from numpy.typing import NDArray

if TYPE_CHECKING:
    from os import PathLike

__all__ = [
    "AXES",
    "DEFAULT_AXIS_COLUMNS",
    "Axis",
    "Sample",
    "SampleTable",
    "load_samples",
]

logger = logging.getLogger(__name__)

Axis = Literal["x", "y", "z"]

AXES: tuple[Axis, ...] = ("x", "y", "z")
"""Motion axes carried by every sample."""

DEFAULT_AXIS_COLUMNS: dict[Axis, str] = {
    "x": "x_centered",
    "y": "y_centered",
    "z": "z_centered",
}
"""CSV column holding each axis in the binned motion export."""


@dataclass(frozen=True)
class Sample:
    """A single time-binned motion measurement.

    Attributes
    ----------
    time_bin : float
        Start of the time bin, in seconds.
    x, y, z : float
        Centered coordinates. NaN marks a value that failed to parse.
    category : str
        Genre label of the recording the sample came from.
    """

    time_bin: float
    x: float
    y: float
    z: float
    category: str


@dataclass(frozen=True)
class SampleTable:
    """Immutable column-wise collection of samples.

    Parameters
    ----------
    time_bin : NDArray[np.float64], shape (n_samples,)
        Time bin of each sample, in seconds.
    x, y, z : NDArray[np.float64], shape (n_samples,)
        Centered coordinates of each sample.
    category : NDArray[np.object_], shape (n_samples,)
        Category label of each sample.

    Raises
    ------
    ValueError
        If the columns do not all have the same length.
    """

    time_bin: NDArray[np.float64]
    x: NDArray[np.float64]
    y: NDArray[np.float64]
    z: NDArray[np.float64]
    category: NDArray[np.object_]

    def __post_init__(self) -> None:
        columns = {
            "time_bin": np.asarray(self.time_bin, dtype=np.float64),
            "x": np.asarray(self.x, dtype=np.float64),
            "y": np.asarray(self.y, dtype=np.float64),
            "z": np.asarray(self.z, dtype=np.float64),
            "category": np.asarray(self.category, dtype=object),
        }
        lengths = {name: col.shape for name, col in columns.items()}
        if len(set(lengths.values())) != 1 or columns["time_bin"].ndim != 1:
            raise ValueError(
                f"WHAT: Sample columns have mismatched shapes: {lengths}.\n\n"
                f"WHY: Each sample needs exactly one time bin, one value per "
                f"axis and one category.\n\n"
                f"HOW: Pass 1D arrays of equal length for every column."
            )
        for name, col in columns.items():
            col.flags.writeable = False
            object.__setattr__(self, name, col)

    def __len__(self) -> int:
        return int(self.time_bin.shape[0])

    @property
    def categories(self) -> tuple[str, ...]:
        """Distinct categories in first-seen order."""
        return tuple(dict.fromkeys(self.category.tolist()))

    def column(self, axis: Axis) -> NDArray[np.float64]:
        """Return the values of one motion axis.

        Parameters
        ----------
        axis : {"x", "y", "z"}
            Axis to return.

        Returns
        -------
        NDArray[np.float64], shape (n_samples,)

        Raises
        ------
        ValueError
            If ``axis`` is not one of ``AXES``.
        """
        if axis not in AXES:
            raise ValueError(f"Unknown axis {axis!r}; expected one of {AXES}.")
        return getattr(self, axis)

    @classmethod
    def empty(cls) -> SampleTable:
        """Create a table with no samples."""
        return cls(
            time_bin=np.empty(0),
            x=np.empty(0),
            y=np.empty(0),
            z=np.empty(0),
            category=np.empty(0, dtype=object),
        )

    @classmethod
    def from_records(
        cls, records: Iterable[Sample | Mapping[str, Any]]
    ) -> SampleTable:
        """Create a table from ``Sample`` objects or mappings.

        Mappings need the keys ``time_bin``, ``x``, ``y``, ``z`` and
        ``category``.
        """
        rows = [
            (r.time_bin, r.x, r.y, r.z, r.category)
            if isinstance(r, Sample)
            else (r["time_bin"], r["x"], r["y"], r["z"], r["category"])
            for r in records
        ]
        if not rows:
            return cls.empty()
        time_bin, x, y, z, category = zip(*rows, strict=True)
        return cls(
            time_bin=np.asarray(time_bin, dtype=np.float64),
            x=np.asarray(x, dtype=np.float64),
            y=np.asarray(y, dtype=np.float64),
            z=np.asarray(z, dtype=np.float64),
            category=np.asarray(category, dtype=object),
        )

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        *,
        time_column: str = "time_bin",
        category_column: str = "genre",
        axis_columns: Mapping[Axis, str] | None = None,
    ) -> SampleTable:
        """Create a table from a DataFrame.

        Numeric columns are coerced with ``errors="coerce"`` so malformed
        entries become NaN instead of raising.

        Parameters
        ----------
        df : pd.DataFrame
            Source table.
        time_column : str, default="time_bin"
            Column holding the time bin.
        category_column : str, default="genre"
            Column holding the category label.
        axis_columns : Mapping[str, str], optional
            Column holding each axis. Defaults to ``DEFAULT_AXIS_COLUMNS``.

        Returns
        -------
        SampleTable

        Raises
        ------
        ValueError
            If any required column is missing.
        """
        axis_columns = dict(axis_columns or DEFAULT_AXIS_COLUMNS)
        required = [time_column, *axis_columns.values(), category_column]
        missing = [col for col in required if col not in df.columns]
        if missing:
            raise ValueError(
                f"WHAT: Missing required columns {missing}.\n"
                f"  Available columns: {list(df.columns)}\n\n"
                f"WHY: Every sample needs a time bin, one value per axis and a "
                f"category label.\n\n"
                f"HOW: Rename the columns or pass time_column=, "
                f"category_column= and axis_columns= to match your file."
            )

        def numeric(col: str) -> NDArray[np.float64]:
            return pd.to_numeric(df[col], errors="coerce").to_numpy(dtype=np.float64)

        return cls(
            time_bin=numeric(time_column),
            x=numeric(axis_columns["x"]),
            y=numeric(axis_columns["y"]),
            z=numeric(axis_columns["z"]),
            category=df[category_column].astype(str).to_numpy(dtype=object),
        )


def load_samples(
    path: str | PathLike[str],
    *,
    time_column: str = "time_bin",
    category_column: str = "genre",
    axis_columns: Mapping[Axis, str] | None = None,
) -> SampleTable:
    """Load binned motion samples from a CSV file.

    Parameters
    ----------
    path : str or PathLike
        CSV file with one row per (time bin, category).
    time_column, category_column, axis_columns
        Column names, see :meth:`SampleTable.from_dataframe`.

    Returns
    -------
    SampleTable
        Loaded samples. Unparseable numeric fields are NaN.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    ValueError
        If a required column is missing.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Sample file not found: {path}")

    df = pd.read_csv(path, dtype={category_column: str})
    table = SampleTable.from_dataframe(
        df,
        time_column=time_column,
        category_column=category_column,
        axis_columns=axis_columns,
    )
    logger.debug(
        "Loaded %d samples in %d categories from %s",
        len(table),
        len(table.categories),
        path,
    )
    return table
