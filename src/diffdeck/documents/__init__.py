"""Document values and the bounded collection they live in."""

from .collection import MAX_DOCUMENTS, MIN_DOCUMENTS, DocumentSet
from .document import Document, new_document_id, split_lines
from .language import DEFAULT_LANGUAGE, language_for_title

__all__ = [
    "Document",
    "DocumentSet",
    "MIN_DOCUMENTS",
    "MAX_DOCUMENTS",
    "DEFAULT_LANGUAGE",
    "language_for_title",
    "new_document_id",
    "split_lines",
]
