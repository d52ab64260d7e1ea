"""Opt-in wall-clock instrumentation for series building and playback ticks.

Set ``HEADMOTION_TIMING`` to a truthy value (``1``, ``true``, ``yes``, ``on``)
before importing :mod:`headmotion`::

    HEADMOTION_TIMING=1 python examples/01_genre_head_animation.py

Durations are logged at DEBUG level on the ``headmotion.timing`` logger.
When the flag is off, :func:`timed` hands back the undecorated function and
:func:`timing` only yields, so instrumented hot paths such as
``PlaybackScheduler.tick`` cost nothing.
"""

from __future__ import annotations

import contextlib
import functools
import logging
import os
import time
from collections.abc import Callable, Iterator
from typing import ParamSpec, TypeVar

__all__ = ["TIMING_ENV_VAR", "is_timing_enabled", "timed", "timing"]

TIMING_ENV_VAR: str = "HEADMOTION_TIMING"
"""Environment variable switching instrumentation on."""

_TRUTHY = frozenset({"1", "true", "yes", "on"})

logger = logging.getLogger("headmotion.timing")

P = ParamSpec("P")
T = TypeVar("T")


def _flag_from_env() -> bool:
    return os.environ.get(TIMING_ENV_VAR, "").strip().lower() in _TRUTHY


# Read once at import; reload the module to pick up a changed environment.
_ENABLED = _flag_from_env()


def is_timing_enabled() -> bool:
    """Whether ``HEADMOTION_TIMING`` was truthy when the module was imported."""
    return _ENABLED


@contextlib.contextmanager
def timing(label: str) -> Iterator[None]:
    """Log how long the ``with`` body takes, under ``label``.

    Examples
    --------
    >>> with timing("smooth x"):
    ...     pass
    """
    if not _ENABLED:
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        logger.debug("[TIMING] %s took %.3f ms", label, 1e3 * (time.perf_counter() - start))


def timed(func: Callable[P, T]) -> Callable[P, T]:
    """Decorate ``func`` so every call is wrapped in :func:`timing`.

    The label is the function's qualified name. With timing disabled the
    function is returned as is.
    """
    if not _ENABLED:
        return func

    label = func.__qualname__

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        with timing(label):
            return func(*args, **kwargs)

    return wrapper
