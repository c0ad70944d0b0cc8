"""Ordered, bounded set of documents with a fixed base at index 0."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Optional, Tuple

from diffdeck.errors import DocumentLimitError, UnknownDocumentError

from .document import Document

MIN_DOCUMENTS = 2
MAX_DOCUMENTS = 4


@dataclass(frozen=True, slots=True)
class DocumentSet:
    """Value-type collection; every update returns a new set.

    Updates that change nothing return ``self`` and untouched documents keep
    their identity, which is what lets consumers skip re-rendering them.
    """

    documents: Tuple[Document, ...]
    min_size: int = MIN_DOCUMENTS
    max_size: int = MAX_DOCUMENTS

    def __post_init__(self) -> None:
        object.__setattr__(self, "documents", tuple(self.documents))
        count = len(self.documents)
        if count < self.min_size:
            raise DocumentLimitError(
                f"A comparison needs at least {self.min_size} documents",
                count=count,
                limit=self.min_size,
            )
        if count > self.max_size:
            raise DocumentLimitError(
                f"At most {self.max_size} documents can be compared",
                count=count,
                limit=self.max_size,
            )
        ids = [doc.id for doc in self.documents]
        if len(set(ids)) != len(ids):
            raise ValueError("Document ids must be unique")

    @classmethod
    def of(
        cls,
        documents: Iterable[Document],
        *,
        min_size: int = MIN_DOCUMENTS,
        max_size: int = MAX_DOCUMENTS,
    ) -> "DocumentSet":
        return cls(tuple(documents), min_size=min_size, max_size=max_size)

    @classmethod
    def from_texts(cls, *texts: str, **limits: int) -> "DocumentSet":
        docs = [
            Document(text=text, title="Base" if index == 0 else f"Comparison {index}")
            for index, text in enumerate(texts)
        ]
        return cls.of(docs, **limits)

    def __len__(self) -> int:
        return len(self.documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents)

    def __getitem__(self, index: int) -> Document:
        return self.documents[index]

    @property
    def base(self) -> Document:
        return self.documents[0]

    @property
    def ids(self) -> Tuple[str, ...]:
        return tuple(doc.id for doc in self.documents)

    @property
    def can_append(self) -> bool:
        return len(self.documents) < self.max_size

    @property
    def can_remove(self) -> bool:
        return len(self.documents) > self.min_size

    def index_of(self, document_id: str) -> int:
        for index, doc in enumerate(self.documents):
            if doc.id == document_id:
                return index
        raise UnknownDocumentError(document_id)

    def find(self, document_id: str) -> Optional[Document]:
        for doc in self.documents:
            if doc.id == document_id:
                return doc
        return None

    def get(self, document_id: str) -> Document:
        return self.documents[self.index_of(document_id)]

    def append(self, document: Optional[Document] = None) -> "DocumentSet":
        """Add a document at the tail, defaulting to an empty comparison panel."""

        if not self.can_append:
            raise DocumentLimitError(
                f"At most {self.max_size} documents can be compared",
                count=len(self.documents),
                limit=self.max_size,
            )
        if document is None:
            document = Document(text="", title=f"Comparison {len(self.documents)}")
        return self._with(self.documents + (document,))

    def remove_last(self) -> "DocumentSet":
        """Drop the tail document; the base is never removed."""

        if not self.can_remove:
            raise DocumentLimitError(
                f"A comparison needs at least {self.min_size} documents",
                count=len(self.documents),
                limit=self.min_size,
            )
        return self._with(self.documents[:-1])

    def replace_text(self, document_id: str, text: str) -> "DocumentSet":
        index = self.index_of(document_id)
        return self._swap(index, self.documents[index].with_text(text))

    def replace_title(self, document_id: str, title: str) -> "DocumentSet":
        index = self.index_of(document_id)
        return self._swap(index, self.documents[index].with_title(title))

    def replace_documents(self, updates: Mapping[str, Document]) -> "DocumentSet":
        """Swap in updated documents by id, keeping every other entry as-is."""

        if not updates:
            return self
        for document_id in updates:
            self.index_of(document_id)
        changed = False
        result = []
        for doc in self.documents:
            updated = updates.get(doc.id, doc)
            if updated is not doc:
                if updated.id != doc.id:
                    raise ValueError("Replacement documents must keep their id")
                changed = True
            result.append(updated)
        if not changed:
            return self
        return self._with(tuple(result))

    def _swap(self, index: int, document: Document) -> "DocumentSet":
        if document is self.documents[index]:
            return self
        docs = list(self.documents)
        docs[index] = document
        return self._with(tuple(docs))

    def _with(self, documents: Tuple[Document, ...]) -> "DocumentSet":
        return DocumentSet(documents, min_size=self.min_size, max_size=self.max_size)


__all__ = ["DocumentSet", "MIN_DOCUMENTS", "MAX_DOCUMENTS"]
