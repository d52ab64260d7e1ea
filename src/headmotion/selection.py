"""Category selection with toggle semantics.

Selecting the active category again deselects it (back to the overall
series); selecting another category switches directly. Every change
restarts playback synchronously.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Sequence

from headmotion.config import OVERALL_LABEL
from headmotion.playback import PlaybackClock, PlaybackScheduler

__all__ = ["SelectionState"]

logger = logging.getLogger(__name__)


class SelectionState:
    """Tracks the active category and restarts playback on change.

    Parameters
    ----------
    scheduler : PlaybackScheduler
        Scheduler restarted on every selection change.
    categories : Sequence[str]
        Selectable categories, in display order.

    Examples
    --------
    >>> state = SelectionState(scheduler, ["A", "B"])  # doctest: +SKIP
    >>> state.on_select("A")  # doctest: +SKIP
    'A'
    >>> state.on_select("A")  # doctest: +SKIP
    >>> state.get_selection() is None  # doctest: +SKIP
    True
    """

    def __init__(self, scheduler: PlaybackScheduler, categories: Sequence[str]) -> None:
        self._scheduler = scheduler
        self._categories = tuple(categories)
        self._current: str | None = None

    @property
    def categories(self) -> tuple[str, ...]:
        """Selectable categories in display order."""
        return self._categories

    def get_selection(self) -> str | None:
        """Active category, or None for the overall series."""
        return self._current

    def next_selection(self, category: str | None) -> str | None:
        """Selection that ``on_select(category)`` would switch to.

        Warns
        -----
        UserWarning
            If ``category`` is not selectable; the result falls back to None.
        """
        if category is None:
            return None
        if category not in self._categories:
            warnings.warn(
                f"Unknown category {category!r}; falling back to the overall "
                f"series. Available: {list(self._categories)}",
                UserWarning,
                stacklevel=3,
            )
            return None
        return None if category == self._current else category

    def on_select(self, category: str | None) -> str | None:
        """Handle a picker event and restart playback.

        Parameters
        ----------
        category : str | None
            Category clicked in the picker, or None to clear.

        Returns
        -------
        str | None
            The new selection.
        """
        self._current = self.next_selection(category)
        logger.info(
            "Selection changed to %s",
            self._current if self._current is not None else OVERALL_LABEL,
        )
        self.restart()
        return self._current

    def restart(self) -> PlaybackClock:
        """Restart playback for the current selection."""
        return self._scheduler.start(self._current)
