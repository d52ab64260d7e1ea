"""Playback configuration.

One :class:`PlaybackConfig` describes every visualization variant: which
axes are tracked, how much each is smoothed, and how interpolated values
map onto the head transform.

Examples
--------
>>> config = PlaybackConfig()
>>> config.axes
('x', 'y', 'z')
>>> config.half_width("y")
10

Single-axis rotation variant:

>>> config = PlaybackConfig(axes=("x",), variant="rotate", half_widths={"x": 3})
>>> config.governing_axis
'x'
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal

from headmotion.samples import AXES, Axis

__all__ = [
    "DEFAULT_HALF_WIDTHS",
    "OVERALL_LABEL",
    "PlaybackConfig",
    "Variant",
]

# Variant of the head transform emitted per tick
# - "translate_scale": x moves horizontally, z vertically, y scales the head
# - "rotate": a single tracked axis spins the head
Variant = Literal["translate_scale", "rotate"]

OVERALL_LABEL: str = "Overall"
"""Display label for the aggregate series used when nothing is selected."""

DEFAULT_HALF_WIDTHS: Mapping[Axis, int] = MappingProxyType({"x": 2, "y": 10, "z": 2})
"""Smoothing half widths in bins. Y is noisier and gets a wider window."""


@dataclass(frozen=True)
class PlaybackConfig:
    """Configuration for series smoothing and playback.

    Attributes
    ----------
    axes : tuple of {"x", "y", "z"}
        Tracked axes. The first one governs the loop period.
    half_widths : Mapping[str, int]
        Smoothing half width per axis; axes missing here use 0.
    variant : {"translate_scale", "rotate"}
        Shape of the per-tick transform.
    x_gain : float
        Pixels of horizontal translation per unit of x.
    z_gain : float
        Pixels of vertical translation per unit of z.
    y_gain : float
        Scale change per unit of y (``scale = 1 + y * y_gain``).
    rotation_gain : float
        Degrees of rotation per unit of the tracked axis ("rotate" only).
    speed : float
        Data seconds played per wall-clock second.
    fps : float
        Tick rate requested from the host timer.

    Raises
    ------
    ValueError
        If an axis is unknown, the variant does not match the number of
        tracked axes, a half width is invalid, or speed/fps are not positive.
    """

    axes: tuple[Axis, ...] = AXES
    half_widths: Mapping[Axis, int] = field(default_factory=lambda: DEFAULT_HALF_WIDTHS)
    variant: Variant = "translate_scale"
    x_gain: float = 20.0
    z_gain: float = 30.0
    y_gain: float = 0.05
    rotation_gain: float = 1.0
    speed: float = 1.0
    fps: float = 60.0

    def __post_init__(self) -> None:
        axes = tuple(self.axes)
        object.__setattr__(self, "axes", axes)
        object.__setattr__(self, "half_widths", MappingProxyType(dict(self.half_widths)))

        if not axes:
            raise ValueError("axes must name at least one tracked axis.")
        unknown = [a for a in (*axes, *self.half_widths) if a not in AXES]
        if unknown:
            raise ValueError(f"Unknown axes {unknown}; expected values from {AXES}.")
        if len(set(axes)) != len(axes):
            raise ValueError(f"axes must not repeat, got {axes}.")

        if self.variant == "translate_scale" and set(axes) != set(AXES):
            raise ValueError(
                f"WHAT: variant='translate_scale' needs all of {AXES}, got {axes}.\n\n"
                f"WHY: x drives horizontal translation, z vertical translation "
                f"and y the scale.\n\n"
                f"HOW: Track all three axes, or use variant='rotate' with a "
                f"single axis."
            )
        if self.variant == "rotate" and len(axes) != 1:
            raise ValueError(
                f"WHAT: variant='rotate' needs exactly one tracked axis, got {axes}.\n\n"
                f"WHY: The rotation angle is driven by a single series.\n\n"
                f"HOW: Pass axes=('x',) (or another single axis)."
            )
        if self.variant not in ("translate_scale", "rotate"):
            raise ValueError(
                f"Unknown variant {self.variant!r}; expected 'translate_scale' "
                f"or 'rotate'."
            )

        for axis, width in self.half_widths.items():
            if isinstance(width, bool) or not isinstance(width, int) or width < 0:
                raise ValueError(
                    f"half_widths[{axis!r}] must be a non-negative int, got {width!r}."
                )
        if not self.speed > 0:
            raise ValueError(f"speed must be positive, got {self.speed}.")
        if not self.fps > 0:
            raise ValueError(f"fps must be positive, got {self.fps}.")

    @property
    def governing_axis(self) -> Axis:
        """Axis whose series sets the loop period."""
        return self.axes[0]

    @property
    def interval_ms(self) -> float:
        """Host timer interval in milliseconds."""
        return 1000.0 / self.fps

    def half_width(self, axis: Axis) -> int:
        """Smoothing half width for ``axis`` (0 when not configured)."""
        return int(self.half_widths.get(axis, 0))
