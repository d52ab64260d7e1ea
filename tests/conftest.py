"""Shared test fixtures for the headmotion test suite.

Fixture Naming Convention
=========================

- ``*_samples``: ``SampleTable`` inputs (e.g. ``two_genre_samples``)
- ``*_series``: ``Series`` inputs (e.g. ``ramp_series``)
- ``fake_clock``: manually advanced reference clock for playback tests
"""

import os

import numpy as np
import pytest
from hypothesis import Phase, Verbosity, settings

from headmotion.samples import SampleTable
from headmotion.series import Series

# =============================================================================
# Hypothesis Configuration for Performance
# =============================================================================
# - "ci": Fast profile for CI pipelines (fewer examples, no deadline)
# - "dev": Standard development profile (moderate examples)
# - "thorough": Full property testing (many examples, for pre-release)

settings.register_profile(
    "ci",
    max_examples=10,
    deadline=None,
    suppress_health_check=[],
    phases=[Phase.explicit, Phase.reuse, Phase.generate],
    verbosity=Verbosity.quiet,
)

settings.register_profile(
    "dev",
    max_examples=25,
    deadline=5000,
    verbosity=Verbosity.normal,
)

settings.register_profile(
    "thorough",
    max_examples=100,
    deadline=None,
    verbosity=Verbosity.verbose,
)

# Set HYPOTHESIS_PROFILE=ci in CI environments for faster tests
_profile = os.environ.get("HYPOTHESIS_PROFILE", "dev")
settings.load_profile(_profile)


class FakeClock:
    """Reference clock advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    """Clock starting at t=1000 s that only moves on ``advance()``."""
    return FakeClock()


@pytest.fixture
def two_genre_samples() -> SampleTable:
    """Two genres over two time bins; overall x means are 3 and 5."""
    return SampleTable.from_records(
        [
            {"time_bin": 0.0, "x": 1.0, "y": 10.0, "z": -1.0, "category": "A"},
            {"time_bin": 1.0, "x": 3.0, "y": 20.0, "z": -2.0, "category": "A"},
            {"time_bin": 0.0, "x": 5.0, "y": 30.0, "z": -3.0, "category": "B"},
            {"time_bin": 1.0, "x": 7.0, "y": 40.0, "z": -4.0, "category": "B"},
        ]
    )


@pytest.fixture
def genre_samples() -> SampleTable:
    """Three genres of unequal length, rows shuffled, 0.1 s bins.

    - "rock": 20 bins, x = t
    - "jazz": 10 bins, x = -t
    - "folk": 30 bins, x = 1
    """
    rng = np.random.default_rng(0)
    records = []
    for category, n_bins, fx in [
        ("rock", 20, lambda t: t),
        ("jazz", 10, lambda t: -t),
        ("folk", 30, lambda t: 1.0),
    ]:
        for i in range(n_bins):
            t = round(i * 0.1, 10)
            records.append(
                {"time_bin": t, "x": fx(t), "y": 0.5 * t, "z": 2.0 * t, "category": category}
            )
    order = rng.permutation(len(records))
    return SampleTable.from_records([records[i] for i in order])


@pytest.fixture
def ramp_series() -> Series:
    """Two-point series from (0, 0) to (10, 10)."""
    return Series(times=np.array([0.0, 10.0]), values=np.array([0.0, 10.0]))
