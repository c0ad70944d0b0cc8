"""Textual host integration. ``app`` is imported on demand."""

from .controller import FindView, PanelView, TextualCompareAdapter, TextualUIHooks

__all__ = ["FindView", "PanelView", "TextualCompareAdapter", "TextualUIHooks"]
