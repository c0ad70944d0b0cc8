"""Line diff engine and the helpers hosts use to render its output."""

from .engine import DiffKind, DiffLine, compute_diff, diff_texts
from .numbering import DiffStats, NumberedLine, diff_stats, number_lines, number_plain

__all__ = [
    "DiffKind",
    "DiffLine",
    "compute_diff",
    "diff_texts",
    "DiffStats",
    "NumberedLine",
    "diff_stats",
    "number_lines",
    "number_plain",
]
