"""Looping playback of smoothed motion series.

:class:`PlaybackScheduler` owns at most one :class:`PlaybackClock`. Each
call to :meth:`PlaybackScheduler.tick` (made by the host's timer, typically
once per display refresh) maps elapsed wall time into the data's time
domain, interpolates every tracked axis and emits a :class:`PlaybackFrame`.

State machine::

    Idle --start(sel)--> Running(sel, clock)
    Running --start(sel')--> Running(sel', new clock)   # old clock stopped first
    Running --stop()--> Idle
    Idle --stop()--> Idle

Examples
--------
>>> import numpy as np
>>> from headmotion.config import PlaybackConfig
>>> from headmotion.series import Series, SeriesSet
>>> series = Series(times=np.array([0.0, 2.0]), values=np.array([0.0, 4.0]))
>>> sets = {"x": SeriesSet(axis="x", overall=series)}
>>> now = [100.0]
>>> scheduler = PlaybackScheduler(
...     sets, PlaybackConfig(axes=("x",), variant="rotate"), clock=lambda: now[0]
... )
>>> _ = scheduler.start(None)
>>> now[0] = 101.0
>>> scheduler.tick().values
{'x': 2.0}
"""

from __future__ import annotations

import logging
import math
import time
import warnings
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from headmotion._timing import timing
from headmotion.config import OVERALL_LABEL, PlaybackConfig
from headmotion.interpolation import EmptySeriesError, value_at
from headmotion.samples import Axis
from headmotion.series import Series, SeriesSet
from headmotion.transforms import Transform, build_transform

__all__ = [
    "FrameCallback",
    "PlaybackClock",
    "PlaybackFrame",
    "PlaybackScheduler",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaybackClock:
    """One playback session over a fixed selection.

    Attributes
    ----------
    selection : str | None
        Category being played, or None for the overall series.
    start_time : float
        Reference time (from the scheduler's clock) when playback began.
    series : Mapping[str, Series]
        Smoothed series read for each tracked axis.
    max_t : float
        Loop period: last time of the governing axis' series.
    """

    selection: str | None
    start_time: float
    series: Mapping[Axis, Series]
    max_t: float

    def data_time(self, elapsed: float) -> float:
        """Map elapsed (scaled) seconds onto the looping data time.

        A degenerate period (``max_t <= 0``, e.g. a single sample at time 0)
        holds at ``t = 0``.
        """
        if not self.max_t > 0:
            return 0.0
        return math.fmod(elapsed, self.max_t) if elapsed >= 0 else 0.0


@dataclass(frozen=True)
class PlaybackFrame:
    """Output of one scheduler tick.

    Attributes
    ----------
    selection : str | None
        Selection the frame was computed for.
    elapsed : float
        Seconds since the clock started, scaled by ``PlaybackConfig.speed``.
    t : float
        Data time queried, ``elapsed mod max_t``.
    values : dict[str, float]
        Interpolated value per tracked axis.
    transform : HeadTransform or HeadRotation
        Update for the renderer.
    """

    selection: str | None
    elapsed: float
    t: float
    values: dict[Axis, float]
    transform: Transform


FrameCallback = Callable[[PlaybackFrame], None]


class PlaybackScheduler:
    """Explicit start/stop lifecycle around a single looping clock.

    Parameters
    ----------
    series : Mapping[str, SeriesSet]
        Smoothed series set per axis. Must contain every tracked axis.
    config : PlaybackConfig
        Tracked axes, variant and speed.
    clock : Callable[[], float], default=time.perf_counter
        Reference time source in seconds. Injectable for tests and for
        hosts with their own frame clock.

    Attributes
    ----------
    config : PlaybackConfig
        Playback configuration.
    is_running : bool
        Whether a clock is active.
    selection : str | None
        Selection of the active clock (None when idle or playing overall).
    clock : PlaybackClock | None
        The active clock, or None when idle.
    frames_emitted : int
        Total frames emitted since creation.

    Notes
    -----
    Everything runs on the host's single thread: ``start``, ``stop`` and
    ``tick`` are called from its event and timer callbacks, so at most one
    clock can ever be active. Series are only referenced, never mutated.

    See Also
    --------
    headmotion.selection.SelectionState : Toggle semantics driving ``start``.
    """

    def __init__(
        self,
        series: Mapping[Axis, SeriesSet],
        config: PlaybackConfig,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        missing = [axis for axis in config.axes if axis not in series]
        if missing:
            raise ValueError(
                f"No series provided for tracked axes {missing}; "
                f"got series for {list(series)}."
            )
        self.config = config
        self._series = series
        self._time_source = clock

        self._clock: PlaybackClock | None = None
        self._callbacks: list[FrameCallback] = []
        self._frames_emitted: int = 0

    @property
    def is_running(self) -> bool:
        """Whether a clock is active."""
        return self._clock is not None

    @property
    def selection(self) -> str | None:
        """Selection of the active clock."""
        return self._clock.selection if self._clock is not None else None

    @property
    def clock(self) -> PlaybackClock | None:
        """The active clock, or None when idle."""
        return self._clock

    @property
    def frames_emitted(self) -> int:
        """Total number of frames emitted since creation."""
        return self._frames_emitted

    @property
    def categories(self) -> tuple[str, ...]:
        """Categories with a series on every tracked axis.

        Ordered as on the governing axis.
        """
        governing = self._series[self.config.governing_axis].categories
        return tuple(
            category
            for category in governing
            if all(category in self._series[axis].by_category for axis in self.config.axes)
        )

    def resolve(self, selection: str | None) -> dict[Axis, Series]:
        """Smoothed series per tracked axis for ``selection``.

        None resolves to the overall series. A category missing on any
        tracked axis also resolves to the overall series, on every axis.
        """
        if selection is not None and selection not in self.categories:
            selection = None
        return {axis: self._series[axis].resolve(selection) for axis in self.config.axes}

    def start(self, selection: str | None) -> PlaybackClock:
        """Stop any active clock and start a new one for ``selection``.

        Parameters
        ----------
        selection : str | None
            Category to play, or None for the overall series. A category
            without a series on every tracked axis plays the overall series
            with a warning.

        Returns
        -------
        PlaybackClock
            The newly started clock.

        Raises
        ------
        EmptySeriesError
            If any tracked series for ``selection`` has no points. The
            scheduler is left idle.
        """
        self.stop()

        if selection is not None and selection not in self.categories:
            missing = [
                axis
                for axis in self.config.axes
                if selection not in self._series[axis].by_category
            ]
            warnings.warn(
                f"Category {selection!r} has no series on axes {missing}; "
                f"playing {OVERALL_LABEL!r} on every axis instead.",
                UserWarning,
                stacklevel=2,
            )
            selection = None

        series = self.resolve(selection)
        for axis, axis_series in series.items():
            if axis_series.is_empty:
                label = OVERALL_LABEL if selection is None else selection
                raise EmptySeriesError(f"{axis!r} series for {label!r}")
        governing = series[self.config.governing_axis]

        self._clock = PlaybackClock(
            selection=selection,
            start_time=self._time_source(),
            series=series,
            max_t=governing.max_time,
        )
        logger.debug(
            "Started playback of %r (max_t=%.3f)", selection, self._clock.max_t
        )
        return self._clock

    def stop(self) -> None:
        """Stop playback. Does nothing when already idle."""
        if self._clock is None:
            return
        logger.debug("Stopped playback of %r", self._clock.selection)
        self._clock = None

    def tick(self, now: float | None = None) -> PlaybackFrame | None:
        """Advance playback to ``now`` and emit a frame.

        Parameters
        ----------
        now : float, optional
            Reference time; defaults to the scheduler's clock.

        Returns
        -------
        PlaybackFrame | None
            The emitted frame, or None when idle.
        """
        clock = self._clock
        if clock is None:
            return None

        with timing("playback_tick"):
            if now is None:
                now = self._time_source()
            elapsed = (now - clock.start_time) * self.config.speed
            t = clock.data_time(elapsed)
            values = {axis: value_at(s, t) for axis, s in clock.series.items()}
            frame = PlaybackFrame(
                selection=clock.selection,
                elapsed=elapsed,
                t=t,
                values=values,
                transform=build_transform(values, self.config),
            )

            self._frames_emitted += 1
            for callback in self._callbacks:
                callback(frame)
        return frame

    def register_callback(self, callback: FrameCallback) -> None:
        """Register a callback notified with every emitted frame.

        Parameters
        ----------
        callback : Callable[[PlaybackFrame], None]
            Called once per tick while running.

        Examples
        --------
        >>> def on_frame(frame):
        ...     print(frame.transform)
        >>> scheduler.register_callback(on_frame)  # doctest: +SKIP
        """
        self._callbacks.append(callback)
