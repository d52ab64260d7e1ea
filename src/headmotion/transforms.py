"""Mapping from interpolated axis values to head transforms.

The playback engine emits one small transform per tick; the renderer
applies it to the already-drawn head.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from headmotion.config import PlaybackConfig
from headmotion.samples import Axis

__all__ = [
    "HeadRotation",
    "HeadTransform",
    "Transform",
    "build_transform",
]


@dataclass(frozen=True)
class HeadTransform:
    """Translate-then-scale update for the head group.

    Equivalent to the SVG transform ``translate(dx, dy) scale(scale)``.
    """

    dx: float
    dy: float
    scale: float

    def as_svg(self) -> str:
        """SVG ``transform`` attribute value."""
        return f"translate({self.dx},{self.dy}) scale({self.scale})"


@dataclass(frozen=True)
class HeadRotation:
    """Rotation update for the head group, in degrees."""

    rotation_degrees: float


Transform = HeadTransform | HeadRotation


def build_transform(values: Mapping[Axis, float], config: PlaybackConfig) -> Transform:
    """Build the variant transform from interpolated axis values.

    Parameters
    ----------
    values : Mapping[str, float]
        Interpolated value per tracked axis.
    config : PlaybackConfig
        Supplies the variant and gains.

    Returns
    -------
    HeadTransform or HeadRotation

    Examples
    --------
    >>> config = PlaybackConfig()
    >>> build_transform({"x": 1.0, "y": 2.0, "z": -1.0}, config)
    HeadTransform(dx=20.0, dy=-30.0, scale=1.1)
    """
    if config.variant == "rotate":
        return HeadRotation(
            rotation_degrees=values[config.governing_axis] * config.rotation_gain
        )
    return HeadTransform(
        dx=values["x"] * config.x_gain,
        dy=values["z"] * config.z_gain,
        scale=1.0 + values["y"] * config.y_gain,
    )
