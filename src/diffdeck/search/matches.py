"""Cross-document match index and active-match navigation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from diffdeck.documents import Document
from diffdeck.errors import InvalidPatternError
from diffdeck.runtime import telemetry

from .options import FindOptions, compile_pattern


@dataclass(frozen=True, slots=True)
class Match:
    """Half-open ``[start, end)`` character range inside one document.

    ``start == end`` is allowed for zero-width regex matches.
    """

    document_id: str
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid match range [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        return self.end - self.start


def compute_matches(
    documents: Iterable[Document], query: str, options: FindOptions
) -> List[Match]:
    """Every non-overlapping match of ``query`` across ``documents``.

    Results are ordered by document position, then by offset. An empty query
    and an uncompilable regex both produce an empty list.
    """

    if not query:
        return []

    try:
        pattern = compile_pattern(query, options)
    except InvalidPatternError as exc:
        telemetry.record_event(
            "search.invalid_pattern",
            level="debug",
            data={"query": query, "reason": exc.reason},
        )
        return []

    with telemetry.span(
        "search::compute_matches",
        component="search",
        metadata={"regex": options.use_regex, "case": options.case_sensitive},
    ) as handle:
        matches: List[Match] = []
        for document in documents:
            matches.extend(
                Match(document.id, found.start(), found.end())
                for found in pattern.finditer(document.text)
            )
        handle.add_metadata("matches", len(matches))
        return matches


def next_index(active: Optional[int], count: int) -> Optional[int]:
    if count <= 0:
        return None
    if active is None:
        return 0
    return (active + 1) % count


def prev_index(active: Optional[int], count: int) -> Optional[int]:
    if count <= 0:
        return None
    if active is None:
        return count - 1
    return (active - 1 + count) % count


def group_by_document(
    documents: Iterable[Document], matches: Iterable[Match]
) -> Dict[str, List[Match]]:
    grouped: Dict[str, List[Match]] = {doc.id: [] for doc in documents}
    for match in matches:
        bucket = grouped.get(match.document_id)
        if bucket is not None:
            bucket.append(match)
    return grouped


def line_of_offset(text: str, offset: int) -> int:
    """1-based line number containing ``offset``."""

    return text.count("\n", 0, max(offset, 0)) + 1


__all__ = [
    "Match",
    "compute_matches",
    "next_index",
    "prev_index",
    "group_by_document",
    "line_of_offset",
]
