"""Language identifiers derived from a document title's file suffix."""

from __future__ import annotations

from typing import Tuple

DEFAULT_LANGUAGE = "javascript"

# Checked in order: ``.tsx`` must win over ``.ts``.
_SUFFIXES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    ((".tsx",), "tsx"),
    ((".ts",), "typescript"),
    ((".jsx",), "jsx"),
    ((".js", ".mjs"), "javascript"),
    ((".css",), "css"),
    ((".html", ".xml", ".svg"), "markup"),
    ((".json",), "json"),
)


def language_for_title(title: str, *, default: str = DEFAULT_LANGUAGE) -> str:
    lowered = title.strip().lower()
    for suffixes, language in _SUFFIXES:
        if lowered.endswith(suffixes):
            return language
    return default


__all__ = ["DEFAULT_LANGUAGE", "language_for_title"]
