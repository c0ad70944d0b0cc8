"""Syntax-highlight collaborator backed by rich's pygments integration."""

from __future__ import annotations

from typing import Dict

from rich.syntax import Syntax
from rich.text import Text

DEFAULT_THEME = "monokai"

# Language ids produced by ``language_for_title`` mapped to pygments lexers.
_LEXERS: Dict[str, str] = {
    "tsx": "tsx",
    "typescript": "typescript",
    "jsx": "jsx",
    "javascript": "javascript",
    "css": "css",
    "markup": "html",
    "json": "json",
}


def lexer_for(language_id: str) -> str:
    return _LEXERS.get(language_id, language_id)


def highlight_text(line_text: str, language_id: str, *, theme: str = DEFAULT_THEME) -> Text:
    content = line_text if line_text else " "
    syntax = Syntax(content, lexer_for(language_id), theme=theme)
    text = syntax.highlight(content)
    if text.plain.endswith("\n"):
        text.right_crop(1)
    return text


def highlight(line_text: str, language_id: str, *, theme: str = DEFAULT_THEME) -> str:
    """Return console markup for one line; hosts treat it as opaque."""

    return highlight_text(line_text, language_id, theme=theme).markup


__all__ = ["DEFAULT_THEME", "highlight", "highlight_text", "lexer_for"]
