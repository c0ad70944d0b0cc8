"""Exception types raised by the comparison engine."""

from __future__ import annotations

from typing import Optional


class DiffDeckError(RuntimeError):
    """Base class for engine errors."""


class DocumentLimitError(DiffDeckError):
    """Raised when a document set would grow or shrink past its bounds."""

    def __init__(self, message: str, *, count: int, limit: int) -> None:
        super().__init__(message)
        self.count = count
        self.limit = limit


class UnknownDocumentError(DiffDeckError, KeyError):
    """Raised when an operation references a document id that is not open."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document '{document_id}' is not open")
        self.document_id = document_id

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidPatternError(ValueError):
    """Raised by ``compile_pattern`` when a regex query does not compile."""

    def __init__(self, query: str, reason: Optional[str] = None) -> None:
        message = f"Invalid pattern {query!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.query = query
        self.reason = reason


class ReplacementTemplateError(ValueError):
    """Raised when a regex replacement template cannot be expanded."""

    def __init__(self, replacement: str, reason: str) -> None:
        super().__init__(f"Invalid replacement {replacement!r}: {reason}")
        self.replacement = replacement
        self.reason = reason


class MatchOwnershipError(ValueError):
    """Raised when a match is applied to a document it was not found in."""

    def __init__(self, message: str, *, document_id: str, match_document_id: str) -> None:
        super().__init__(message)
        self.document_id = document_id
        self.match_document_id = match_document_id


__all__ = [
    "DiffDeckError",
    "DocumentLimitError",
    "UnknownDocumentError",
    "InvalidPatternError",
    "MatchOwnershipError",
    "ReplacementTemplateError",
]
