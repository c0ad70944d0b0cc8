"""Split a document's text into plain and highlighted runs for overlays."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from .matches import Match


class SegmentKind(str, Enum):
    PLAIN = "plain"
    MATCH = "match"
    ACTIVE = "active"


@dataclass(frozen=True, slots=True)
class Segment:
    kind: SegmentKind
    text: str
    start: int


def highlight_segments(
    text: str, matches: Iterable[Match], active: Optional[Match] = None
) -> List[Segment]:
    ordered = sorted(matches, key=lambda match: (match.start, match.end))
    segments: List[Segment] = []
    cursor = 0
    for match in ordered:
        if match.start < cursor or match.end > len(text):
            continue
        if match.start > cursor:
            segments.append(
                Segment(SegmentKind.PLAIN, text[cursor : match.start], cursor)
            )
        is_active = (
            active is not None
            and active.document_id == match.document_id
            and active.start == match.start
            and active.end == match.end
        )
        kind = SegmentKind.ACTIVE if is_active else SegmentKind.MATCH
        segments.append(Segment(kind, text[match.start : match.end], match.start))
        cursor = match.end
    if cursor < len(text):
        segments.append(Segment(SegmentKind.PLAIN, text[cursor:], cursor))
    return segments


def line_segments(
    line_text: str,
    line_start: int,
    matches: Iterable[Match],
    active: Optional[Match] = None,
) -> List[Segment]:
    """Segments for one line of a document whose text begins at ``line_start``.

    Matches are clipped to the line, so a match spanning a newline is
    highlighted on every line it touches. Segment offsets are line-relative.
    """

    line_end = line_start + len(line_text)
    clipped: List[Match] = []
    clipped_active: Optional[Match] = None
    for match in matches:
        start = max(match.start, line_start)
        end = min(match.end, line_end)
        if end <= start:
            continue
        local = Match(match.document_id, start - line_start, end - line_start)
        clipped.append(local)
        if match == active:
            clipped_active = local
    return highlight_segments(line_text, clipped, clipped_active)


__all__ = ["Segment", "SegmentKind", "highlight_segments", "line_segments"]
