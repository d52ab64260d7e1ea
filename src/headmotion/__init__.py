"""headmotion: genre-driven head motion playback.

Motion samples (x/y/z centered coordinates binned by time and labeled by
genre) are turned into smoothed time series and played back in a loop to
drive an animated head.

Pipeline
--------
samples -> build_series -> smooth -> PlaybackScheduler -> PlaybackFrame

Quick start::

    >>> from headmotion import HeadMotionEngine
    >>> engine = HeadMotionEngine.from_csv("data_binned_0.1.csv")  # doctest: +SKIP
    >>> engine.on_select("rock")  # doctest: +SKIP
    'rock'
    >>> frame = engine.tick()  # doctest: +SKIP
    >>> frame.transform  # doctest: +SKIP
    HeadTransform(dx=..., dy=..., scale=...)

To watch it, use the matplotlib host::

    >>> from headmotion.backends.matplotlib_backend import animate_head
    >>> playback = animate_head(engine)  # doctest: +SKIP
"""

import logging

from headmotion.config import OVERALL_LABEL, PlaybackConfig
from headmotion.engine import HeadMotionEngine, build_smoothed_series
from headmotion.interpolation import EmptySeriesError, value_at, values_at
from headmotion.playback import PlaybackClock, PlaybackFrame, PlaybackScheduler
from headmotion.samples import AXES, Sample, SampleTable, load_samples
from headmotion.selection import SelectionState
from headmotion.series import Series, SeriesSet, build_all_series, build_series
from headmotion.smoothing import smooth, smooth_series_set
from headmotion.transforms import HeadRotation, HeadTransform, build_transform

# Add NullHandler to prevent "No handler found" warnings if user doesn't configure logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AXES",
    "OVERALL_LABEL",
    "EmptySeriesError",
    "HeadMotionEngine",
    "HeadRotation",
    "HeadTransform",
    "PlaybackClock",
    "PlaybackConfig",
    "PlaybackFrame",
    "PlaybackScheduler",
    "Sample",
    "SampleTable",
    "SelectionState",
    "Series",
    "SeriesSet",
    "build_all_series",
    "build_series",
    "build_smoothed_series",
    "build_transform",
    "load_samples",
    "smooth",
    "smooth_series_set",
    "value_at",
    "values_at",
]
