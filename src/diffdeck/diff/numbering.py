"""Per-line numbering and summary counts derived from an edit script."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from diffdeck.documents.document import split_lines

from .engine import DiffKind, DiffLine


@dataclass(frozen=True, slots=True)
class NumberedLine:
    """A diff line annotated with its 1-based position in base and variant.

    The column a line does not belong to is ``None``: added lines have no base
    number, removed lines have no variant number.
    """

    kind: DiffKind
    text: str
    base_number: Optional[int]
    variant_number: Optional[int]


def number_lines(diff: Iterable[DiffLine]) -> List[NumberedLine]:
    base_counter = 0
    variant_counter = 0
    numbered: List[NumberedLine] = []
    for line in diff:
        base_number: Optional[int] = None
        variant_number: Optional[int] = None
        if line.kind is not DiffKind.ADDED:
            base_counter += 1
            base_number = base_counter
        if line.kind is not DiffKind.REMOVED:
            variant_counter += 1
            variant_number = variant_counter
        numbered.append(NumberedLine(line.kind, line.text, base_number, variant_number))
    return numbered


def number_plain(text: str) -> List[NumberedLine]:
    """Number a document shown without a diff (the base panel)."""

    return [
        NumberedLine(DiffKind.UNCHANGED, line, index, None)
        for index, line in enumerate(split_lines(text), start=1)
    ]


@dataclass(frozen=True, slots=True)
class DiffStats:
    added: int = 0
    removed: int = 0
    unchanged: int = 0

    @property
    def is_identical(self) -> bool:
        return self.added == 0 and self.removed == 0

    @property
    def changed(self) -> int:
        return self.added + self.removed


def diff_stats(diff: Iterable[DiffLine]) -> DiffStats:
    counts = {kind: 0 for kind in DiffKind}
    for line in diff:
        counts[line.kind] += 1
    return DiffStats(
        added=counts[DiffKind.ADDED],
        removed=counts[DiffKind.REMOVED],
        unchanged=counts[DiffKind.UNCHANGED],
    )


__all__ = ["NumberedLine", "number_lines", "number_plain", "DiffStats", "diff_stats"]
