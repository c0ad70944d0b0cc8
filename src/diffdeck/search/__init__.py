"""Cross-document find, navigation and replace."""

from .matches import (
    Match,
    compute_matches,
    group_by_document,
    line_of_offset,
    next_index,
    prev_index,
)
from .options import FindOptions, compile_pattern
from .replace import replace_all, replace_one
from .segments import Segment, SegmentKind, highlight_segments, line_segments

__all__ = [
    "FindOptions",
    "Match",
    "Segment",
    "SegmentKind",
    "compile_pattern",
    "compute_matches",
    "group_by_document",
    "highlight_segments",
    "line_of_offset",
    "line_segments",
    "next_index",
    "prev_index",
    "replace_all",
    "replace_one",
]
