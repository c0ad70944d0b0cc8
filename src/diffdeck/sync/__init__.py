"""Viewport coordination: lockstep scrolling and match reveal."""

from .reveal import DEFAULT_LINE_HEIGHT, reveal_scroll_top
from .scroll import DEFAULT_INDICATOR_MS, ScrollSyncCoordinator, Viewport

__all__ = [
    "DEFAULT_INDICATOR_MS",
    "DEFAULT_LINE_HEIGHT",
    "ScrollSyncCoordinator",
    "Viewport",
    "reveal_scroll_top",
]
