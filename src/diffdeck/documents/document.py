"""Immutable document values held by a comparison workspace."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import List


def new_document_id() -> str:
    return uuid.uuid4().hex


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` only; an empty text is a single empty line."""

    return text.split("\n")


@dataclass(frozen=True, slots=True)
class Document:
    """One open text panel.

    ``id`` stays stable across edits; ``with_text`` and ``with_title`` return
    new values and hand back ``self`` when nothing changes so callers can use
    identity to detect untouched documents.
    """

    text: str = ""
    title: str = ""
    id: str = field(default_factory=new_document_id)

    def with_text(self, text: str) -> "Document":
        if text == self.text:
            return self
        return replace(self, text=text)

    def with_title(self, title: str) -> "Document":
        if title == self.title:
            return self
        return replace(self, title=title)

    def lines(self) -> List[str]:
        return split_lines(self.text)

    @property
    def line_count(self) -> int:
        return self.text.count("\n") + 1


__all__ = ["Document", "new_document_id", "split_lines"]
