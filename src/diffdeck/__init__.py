"""UI-agnostic multi-document comparison engine."""

__all__ = [
    "adapters",
    "diff",
    "documents",
    "errors",
    "highlight",
    "runtime",
    "search",
    "summary",
    "sync",
    "workspace",
]

__version__ = "0.1.0"
