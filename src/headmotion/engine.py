"""Top-level orchestrator of the playback pipeline.

:class:`HeadMotionEngine` runs the whole pipeline once at construction::

    SampleTable -> build_series -> smooth -> PlaybackScheduler
                                              ^
                               SelectionState-+

and then exposes the two host-facing entry points: ``tick()`` for the
host's timer and ``on_select()`` for its picker.

Examples
--------
>>> from headmotion.samples import SampleTable
>>> samples = SampleTable.from_records(
...     [
...         {"time_bin": 0.0, "x": 0.0, "y": 0.0, "z": 0.0, "category": "A"},
...         {"time_bin": 1.0, "x": 1.0, "y": 0.0, "z": 0.0, "category": "A"},
...     ]
... )
>>> engine = HeadMotionEngine(samples)
>>> engine.categories
('A',)
>>> engine.get_selection() is None
True
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from headmotion._timing import timed
from headmotion.config import PlaybackConfig
from headmotion.interpolation import EmptySeriesError
from headmotion.playback import FrameCallback, PlaybackFrame, PlaybackScheduler
from headmotion.samples import Axis, SampleTable, load_samples
from headmotion.selection import SelectionState
from headmotion.series import SeriesSet, build_series
from headmotion.smoothing import smooth_series_set

if TYPE_CHECKING:
    from os import PathLike

__all__ = ["HeadMotionEngine", "build_smoothed_series"]

logger = logging.getLogger(__name__)


@timed
def build_smoothed_series(
    samples: SampleTable, config: PlaybackConfig
) -> dict[Axis, SeriesSet]:
    """Build and smooth the series set of every tracked axis.

    Parameters
    ----------
    samples : SampleTable
        Raw samples.
    config : PlaybackConfig
        Tracked axes and per-axis half widths.

    Returns
    -------
    dict[str, SeriesSet]
        Smoothed series set per tracked axis.
    """
    return {
        axis: smooth_series_set(build_series(samples, axis), config.half_width(axis))
        for axis in config.axes
    }


class HeadMotionEngine:
    """Owns the smoothed series, the playback scheduler and the selection.

    Parameters
    ----------
    samples : SampleTable
        Raw samples, consumed once.
    config : PlaybackConfig, optional
        Playback configuration. Defaults to ``PlaybackConfig()``.
    clock : Callable[[], float], default=time.perf_counter
        Reference time source handed to the scheduler.
    autostart : bool, default=True
        Start playing the overall series immediately.

    Attributes
    ----------
    config : PlaybackConfig
        Playback configuration.
    series : dict[str, SeriesSet]
        Smoothed series set per tracked axis (read-only once built).
    scheduler : PlaybackScheduler
        The single playback scheduler.
    selection : SelectionState
        Picker state bound to ``scheduler``.

    Notes
    -----
    An empty dataset is not an error here: the engine logs that there is
    no data to animate and stays idle, so ``tick()`` returns None.
    """

    def __init__(
        self,
        samples: SampleTable,
        config: PlaybackConfig | None = None,
        clock: Callable[[], float] = time.perf_counter,
        autostart: bool = True,
    ) -> None:
        self.config = config if config is not None else PlaybackConfig()
        self.series = build_smoothed_series(samples, self.config)
        self.scheduler = PlaybackScheduler(self.series, self.config, clock=clock)
        self.selection = SelectionState(self.scheduler, self.scheduler.categories)
        if autostart:
            self.start()

    @classmethod
    def from_csv(
        cls,
        path: str | PathLike[str],
        config: PlaybackConfig | None = None,
        **load_kwargs,
    ) -> HeadMotionEngine:
        """Load samples from a CSV file and build an engine.

        Extra keyword arguments are passed to :func:`load_samples`.
        """
        return cls(load_samples(path, **load_kwargs), config=config)

    @property
    def categories(self) -> tuple[str, ...]:
        """Categories with data on every tracked axis, in first-seen order."""
        return self.selection.categories

    @property
    def has_data(self) -> bool:
        """Whether the overall series has any points."""
        return not self.series[self.config.governing_axis].overall.is_empty

    def start(self) -> bool:
        """(Re)start playback for the current selection.

        Returns
        -------
        bool
            True if playback is running, False if there is no data.
        """
        try:
            self.selection.restart()
        except EmptySeriesError:
            logger.warning("No data to animate; playback stays idle.")
            return False
        return True

    def stop(self) -> None:
        """Stop playback."""
        self.scheduler.stop()

    def on_select(self, category: str | None) -> str | None:
        """Picker entry point: toggle ``category`` and restart playback.

        Returns
        -------
        str | None
            The new selection.
        """
        try:
            return self.selection.on_select(category)
        except EmptySeriesError:
            logger.warning("No data to animate; playback stays idle.")
            return self.selection.get_selection()

    def get_selection(self) -> str | None:
        """Active category, or None for the overall series."""
        return self.selection.get_selection()

    def tick(self, now: float | None = None) -> PlaybackFrame | None:
        """Timer entry point; see :meth:`PlaybackScheduler.tick`."""
        return self.scheduler.tick(now)

    def register_callback(self, callback: FrameCallback) -> None:
        """Register a frame listener on the scheduler."""
        self.scheduler.register_callback(callback)
