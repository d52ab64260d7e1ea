"""Head geometry: projection interface and default orthographic projection.

Playback never touches geometry. Renderers consume any object satisfying
:class:`ProjectionProtocol`; :class:`OrthographicProjection` is the default
used by the matplotlib backend. Screen coordinates follow the SVG
convention: origin at the top-left, y increasing downward.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import numpy as np
from numpy.typing import ArrayLike, NDArray

__all__ = [
    "EYE_POINTS",
    "OrthographicProjection",
    "ProjectionProtocol",
    "graticule_lines",
    "sphere_outline",
]

EYE_POINTS: tuple[tuple[float, float], ...] = ((-25.0, 10.0), (25.0, 10.0))
"""(lon, lat) of the two eyes, in degrees."""


@runtime_checkable
class ProjectionProtocol(Protocol):
    """Geometry service mapping (lon, lat) in degrees to screen (x, y)."""

    scale: float
    translate: tuple[float, float]

    def project(
        self, lon: ArrayLike, lat: ArrayLike
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Project points; hidden points are NaN."""
        ...

    def rotate(self, angles: tuple[float, float, float]) -> None:
        """Set the (lambda, phi, gamma) rotation in degrees."""
        ...


@dataclass
class OrthographicProjection:
    """Orthographic projection of a sphere, clipped to the visible hemisphere.

    Parameters
    ----------
    scale : float, default=110.0
        Sphere radius in pixels.
    translate : tuple[float, float], default=(200.0, 200.0)
        Screen position of the sphere center.
    rotation : tuple[float, float, float], default=(0, 0, 0)
        (lambda, phi, gamma) rotation in degrees.

    Examples
    --------
    >>> projection = OrthographicProjection()
    >>> x, y = projection.project(0.0, 0.0)
    >>> float(x), float(y)
    (200.0, 200.0)
    """

    scale: float = 110.0
    translate: tuple[float, float] = (200.0, 200.0)
    rotation: tuple[float, float, float] = field(default=(0.0, 0.0, 0.0))

    def rotate(self, angles: tuple[float, float, float]) -> None:
        """Set the (lambda, phi, gamma) rotation in degrees."""
        self.rotation = tuple(float(a) for a in angles)  # type: ignore[assignment]

    def _rotated(
        self, lam: NDArray[np.float64], phi: NDArray[np.float64]
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        d_lam, d_phi, d_gamma = np.radians(self.rotation)
        lam = lam + d_lam
        if d_phi == 0 and d_gamma == 0:
            return lam, phi

        cos_phi = np.cos(phi)
        x = np.cos(lam) * cos_phi
        y = np.sin(lam) * cos_phi
        z = np.sin(phi)
        k = z * np.cos(d_phi) + x * np.sin(d_phi)
        lam = np.arctan2(
            y * np.cos(d_gamma) - k * np.sin(d_gamma),
            x * np.cos(d_phi) - z * np.sin(d_phi),
        )
        phi = np.arcsin(np.clip(k * np.cos(d_gamma) + y * np.sin(d_gamma), -1.0, 1.0))
        return lam, phi

    def project(
        self, lon: ArrayLike, lat: ArrayLike
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Project (lon, lat) degrees to screen coordinates.

        Points on the far hemisphere are clipped to NaN.
        """
        lam, phi = self._rotated(
            np.radians(np.asarray(lon, dtype=np.float64)),
            np.radians(np.asarray(lat, dtype=np.float64)),
        )
        visible = np.cos(phi) * np.cos(lam) >= 0
        x = self.translate[0] + self.scale * np.cos(phi) * np.sin(lam)
        y = self.translate[1] - self.scale * np.sin(phi)
        return np.where(visible, x, np.nan), np.where(visible, y, np.nan)


def sphere_outline(
    projection: ProjectionProtocol, n_points: int = 181
) -> NDArray[np.float64]:
    """Closed outline of the sphere's visible disc, shape (n_points, 2)."""
    theta = np.linspace(0.0, 2.0 * np.pi, n_points)
    cx, cy = projection.translate
    return np.column_stack(
        [cx + projection.scale * np.cos(theta), cy + projection.scale * np.sin(theta)]
    )


def graticule_lines(
    projection: ProjectionProtocol,
    step: float = 10.0,
    extent: float = 80.0,
    resolution: float = 2.5,
) -> list[NDArray[np.float64]]:
    """Projected meridians and parallels every ``step`` degrees.

    Each line is an array of shape (n, 2); hidden stretches are NaN so
    matplotlib leaves gaps there.
    """
    lats = np.arange(-extent, extent + resolution, resolution)
    lons = np.arange(-180.0, 180.0 + resolution, resolution)
    lines = []
    for lon in np.arange(-180.0, 180.0, step):
        x, y = projection.project(np.full_like(lats, lon), lats)
        lines.append(np.column_stack([x, y]))
    for lat in np.arange(-extent, extent + step, step):
        x, y = projection.project(lons, np.full_like(lons, lat))
        lines.append(np.column_stack([x, y]))
    return lines
