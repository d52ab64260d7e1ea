"""Matplotlib host for head playback.

The head (sphere, graticule and eyes) is drawn once. Each timer tick of a
``FuncAnimation`` calls :meth:`HeadMotionEngine.tick` and the resulting
transform is applied to the head artists through an ``Affine2D``, so the
geometry is never recomputed during playback.

The axes use SVG-like coordinates (origin top-left, y down) so that
``HeadTransform`` values carry the same meaning as an SVG
``translate(dx, dy) scale(s)``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.animation import FuncAnimation
from matplotlib.collections import LineCollection, PolyCollection
from matplotlib.colors import LinearSegmentedColormap
from matplotlib.patches import Circle, Polygon
from matplotlib.transforms import Affine2D
from matplotlib.widgets import Button

from headmotion.geometry import (
    EYE_POINTS,
    OrthographicProjection,
    ProjectionProtocol,
    graticule_lines,
    sphere_outline,
)
from headmotion.transforms import HeadRotation, HeadTransform

if TYPE_CHECKING:
    from matplotlib.artist import Artist
    from matplotlib.axes import Axes
    from matplotlib.figure import Figure

    from headmotion.engine import HeadMotionEngine
    from headmotion.playback import PlaybackFrame
    from headmotion.transforms import Transform

__all__ = [
    "CategoryPicker",
    "HeadAnimation",
    "MatplotlibHeadRenderer",
    "animate_head",
]

logger = logging.getLogger(__name__)

# Rendering constants
CANVAS_SIZE: tuple[float, float] = (400.0, 400.0)
"""Width and height of the head canvas in pixels."""

SPHERE_SHADE = LinearSegmentedColormap.from_list(
    "headmotion_shade",
    [(0.0, "#FFF176"), (0.2, "#FFF176"), (0.8, "#FDD835"), (1.0, "#FDD835")],
)
"""Radial shading of the sphere, indexed by distance from the center (0 to 1)."""

SHADE_RINGS: int = 24
SPHERE_EDGE_COLOR: str = "#666666"
GRATICULE_LINEWIDTH: float = 0.5
EYE_RADIUS: float = 15.0
EYE_COLOR: str = "#333333"

PLAY_ICON: str = "▶"
PAUSE_ICON: str = "||"
SELECTED_COLOR: str = "#d0e4ff"
UNSELECTED_COLOR: str = "0.95"


class MatplotlibHeadRenderer:
    """Draws the head once and applies per-tick transforms.

    Parameters
    ----------
    ax : Axes
        Axes to draw into. Its limits are set to the canvas with y inverted.
    projection : ProjectionProtocol, optional
        Geometry service; defaults to ``OrthographicProjection`` centered
        on the canvas.

    Attributes
    ----------
    artists : list[Artist]
        Shaded sphere, rim, graticule and eye artists forming the head group.
    """

    def __init__(self, ax: Axes, projection: ProjectionProtocol | None = None) -> None:
        width, height = CANVAS_SIZE
        self.ax = ax
        self.projection = projection or OrthographicProjection(
            translate=(width / 2, height / 2)
        )

        ax.set_xlim(0, width)
        ax.set_ylim(height, 0)
        ax.set_aspect("equal")
        ax.set_axis_off()

        cx, cy = self.projection.translate
        outline = sphere_outline(self.projection)
        center = np.array([cx, cy])
        # Outermost ring first so inner, lighter discs paint over it
        fractions = np.linspace(1.0, 0.0, SHADE_RINGS, endpoint=False)
        shading = PolyCollection(
            [center + f * (outline - center) for f in fractions],
            facecolors=SPHERE_SHADE(fractions),
            edgecolors="none",
        )
        rim = Polygon(outline, closed=True, fill=False, edgecolor=SPHERE_EDGE_COLOR)
        graticule = LineCollection(
            graticule_lines(self.projection),
            colors=SPHERE_EDGE_COLOR,
            linewidths=GRATICULE_LINEWIDTH,
        )
        eye_lon, eye_lat = np.asarray(EYE_POINTS).T
        eye_x, eye_y = self.projection.project(eye_lon, eye_lat)
        eyes = [
            Circle((x, y), EYE_RADIUS, facecolor=EYE_COLOR)
            for x, y in zip(eye_x, eye_y, strict=True)
            if np.isfinite(x) and np.isfinite(y)
        ]

        ax.add_collection(shading)
        ax.add_patch(rim)
        ax.add_collection(graticule)
        for eye in eyes:
            ax.add_patch(eye)
        self.artists: list[Artist] = [shading, rim, graticule, *eyes]

    def head_affine(self, transform: Transform) -> Affine2D:
        """Affine transform (in canvas coordinates) for ``transform``."""
        if isinstance(transform, HeadRotation):
            cx, cy = self.projection.translate
            return Affine2D().rotate_deg_around(cx, cy, transform.rotation_degrees)
        if isinstance(transform, HeadTransform):
            return Affine2D().scale(transform.scale).translate(transform.dx, transform.dy)
        raise TypeError(f"Unsupported transform type: {type(transform).__name__}")

    def apply(self, transform: Transform) -> list[Artist]:
        """Apply ``transform`` to every head artist."""
        full = self.head_affine(transform) + self.ax.transData
        for artist in self.artists:
            artist.set_transform(full)
        return self.artists

    def update(self, frame: PlaybackFrame) -> list[Artist]:
        """Frame callback: apply the frame's transform."""
        return self.apply(frame.transform)


class CategoryPicker:
    """Column of toggle buttons, one per category.

    Clicking a button forwards the category to ``engine.on_select`` and
    refreshes the icons: the active category shows a pause icon, the
    others a play icon.

    Parameters
    ----------
    fig : Figure
        Figure to add the button axes to.
    engine : HeadMotionEngine
        Engine receiving selection events.
    left, width : float
        Horizontal placement of the column in figure coordinates.
    """

    def __init__(
        self,
        fig: Figure,
        engine: HeadMotionEngine,
        left: float = 0.72,
        width: float = 0.25,
    ) -> None:
        self.engine = engine
        self.buttons: dict[str, Button] = {}

        n = max(len(engine.categories), 1)
        height = min(0.08, 0.9 / n)
        for i, category in enumerate(engine.categories):
            bottom = 0.95 - (i + 1) * height
            button_ax = fig.add_axes((left, bottom, width, height * 0.9))
            button = Button(button_ax, category, color=UNSELECTED_COLOR)
            button.on_clicked(self._make_handler(category))
            self.buttons[category] = button
        self.refresh()

    def _make_handler(self, category: str):
        def on_clicked(event: Any) -> None:
            self.engine.on_select(category)
            self.refresh()

        return on_clicked

    def label(self, category: str) -> str:
        """Button text for ``category`` given the current selection."""
        icon = PAUSE_ICON if category == self.engine.get_selection() else PLAY_ICON
        return f"{icon}  {category}"

    def refresh(self) -> None:
        """Update labels and colors from the engine's selection."""
        selected = self.engine.get_selection()
        for category, button in self.buttons.items():
            color = SELECTED_COLOR if category == selected else UNSELECTED_COLOR
            button.label.set_text(self.label(category))
            button.color = color
            button.ax.set_facecolor(color)


@dataclass(frozen=True)
class HeadAnimation:
    """Everything :func:`animate_head` creates.

    Keep this object referenced for as long as the figure is shown;
    matplotlib does not keep the animation or the picker buttons alive on
    its own.

    Attributes
    ----------
    fig : Figure
        The figure.
    anim : FuncAnimation
        Animation ticking the engine once per frame.
    renderer : MatplotlibHeadRenderer
        Head artists and transform application.
    picker : CategoryPicker | None
        Category buttons, or None when the picker is hidden.
    """

    fig: Figure
    anim: FuncAnimation
    renderer: MatplotlibHeadRenderer
    picker: CategoryPicker | None


def animate_head(
    engine: HeadMotionEngine,
    projection: ProjectionProtocol | None = None,
    figsize: tuple[float, float] = (8.0, 5.5),
    show_picker: bool = True,
) -> HeadAnimation:
    """Create a figure that plays ``engine`` in a loop.

    Parameters
    ----------
    engine : HeadMotionEngine
        Engine to drive; its scheduler is ticked once per animation frame.
    projection : ProjectionProtocol, optional
        Geometry service for the head.
    figsize : tuple[float, float], default=(8.0, 5.5)
        Figure size in inches.
    show_picker : bool, default=True
        Add the category picker column.

    Returns
    -------
    HeadAnimation
        Figure, running animation, renderer and picker.

    Examples
    --------
    >>> engine = HeadMotionEngine.from_csv("data_binned_0.1.csv")  # doctest: +SKIP
    >>> playback = animate_head(engine)  # doctest: +SKIP
    >>> plt.show()  # doctest: +SKIP
    """
    fig = plt.figure(figsize=figsize)
    head_ax = fig.add_axes((0.02, 0.05, 0.65, 0.9))
    renderer = MatplotlibHeadRenderer(head_ax, projection=projection)
    picker = CategoryPicker(fig, engine) if show_picker else None

    def on_timer(_frame_idx: int) -> list[Artist]:
        frame = engine.tick()
        if frame is None:
            return []
        return renderer.update(frame)

    anim = FuncAnimation(
        fig,
        on_timer,
        interval=engine.config.interval_ms,
        blit=False,
        cache_frame_data=False,
    )
    logger.debug(
        "Created head animation with %d categories at %.1f fps",
        len(engine.categories),
        engine.config.fps,
    )
    return HeadAnimation(fig=fig, anim=anim, renderer=renderer, picker=picker)
