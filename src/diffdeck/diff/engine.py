"""Line-level LCS diff of a variant document against the base document."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

from diffdeck.documents.document import split_lines
from diffdeck.runtime import telemetry


class DiffKind(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


_SYMBOLS = {DiffKind.ADDED: "+", DiffKind.REMOVED: "-", DiffKind.UNCHANGED: " "}


@dataclass(frozen=True, slots=True)
class DiffLine:
    kind: DiffKind
    text: str


def _lcs_table(base: Sequence[str], variant: Sequence[str]) -> List[List[int]]:
    """``table[i][j]`` is the LCS length of ``base[i:]`` and ``variant[j:]``."""

    n, m = len(base), len(variant)
    table = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(n - 1, -1, -1):
        row, below = table[i], table[i + 1]
        line = base[i]
        for j in range(m - 1, -1, -1):
            if line == variant[j]:
                row[j] = below[j + 1] + 1
            else:
                row[j] = below[j] if below[j] >= row[j + 1] else row[j + 1]
    return table


def compute_diff(base: Sequence[str], variant: Sequence[str]) -> List[DiffLine]:
    """Return the edit script turning ``base`` into ``variant``.

    Lines match only when exactly equal. When dropping a base line and taking
    a variant line are equally good, the base line is dropped first, so inside
    every changed block all ``REMOVED`` lines precede all ``ADDED`` lines.
    Empty inputs are treated as a single empty line.
    """

    base = list(base) or [""]
    variant = list(variant) or [""]

    with telemetry.span(
        "diff::compute",
        component="diff",
        metadata={"base_lines": len(base), "variant_lines": len(variant)},
    ) as handle:
        result: List[DiffLine] = []

        prefix = 0
        limit = min(len(base), len(variant))
        while prefix < limit and base[prefix] == variant[prefix]:
            result.append(DiffLine(DiffKind.UNCHANGED, base[prefix]))
            prefix += 1

        rest_base = base[prefix:]
        rest_variant = variant[prefix:]
        table = _lcs_table(rest_base, rest_variant)

        i = j = 0
        n, m = len(rest_base), len(rest_variant)
        while i < n and j < m:
            if rest_base[i] == rest_variant[j]:
                result.append(DiffLine(DiffKind.UNCHANGED, rest_base[i]))
                i += 1
                j += 1
            elif table[i + 1][j] >= table[i][j + 1]:
                result.append(DiffLine(DiffKind.REMOVED, rest_base[i]))
                i += 1
            else:
                result.append(DiffLine(DiffKind.ADDED, rest_variant[j]))
                j += 1
        result.extend(DiffLine(DiffKind.REMOVED, line) for line in rest_base[i:])
        result.extend(DiffLine(DiffKind.ADDED, line) for line in rest_variant[j:])

        handle.add_metadata("emitted", len(result))
        return result


def diff_texts(base_text: str, variant_text: str) -> List[DiffLine]:
    return compute_diff(split_lines(base_text), split_lines(variant_text))


__all__ = ["DiffKind", "DiffLine", "compute_diff", "diff_texts"]
