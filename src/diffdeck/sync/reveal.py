"""Scroll target for bringing the active match into view."""

from __future__ import annotations

from typing import Optional

DEFAULT_LINE_HEIGHT = 24


def reveal_scroll_top(
    line_number: int,
    *,
    scroll_top: float,
    viewport_height: float,
    line_height: float = DEFAULT_LINE_HEIGHT,
) -> Optional[float]:
    """Return a new ``scroll_top`` when ``line_number`` is out of view.

    A line counts as visible when it sits between the current top and two
    lines above the bottom edge. Out-of-view lines are placed a third of the
    way down the viewport. ``None`` means no scroll is needed.
    """

    target = (max(line_number, 1) - 1) * line_height
    bottom_limit = scroll_top + viewport_height - line_height * 2
    if scroll_top <= target <= bottom_limit:
        return None
    return max(target - viewport_height / 3, 0.0)


__all__ = ["DEFAULT_LINE_HEIGHT", "reveal_scroll_top"]
