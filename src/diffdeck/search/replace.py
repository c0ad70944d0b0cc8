"""Single and global replacement over documents."""

from __future__ import annotations

import re
from typing import Dict, Optional

from diffdeck.documents import Document, DocumentSet
from diffdeck.errors import (
    InvalidPatternError,
    MatchOwnershipError,
    ReplacementTemplateError,
)
from diffdeck.runtime import telemetry

from .matches import Match
from .options import FindOptions, compile_pattern


def replace_one(document: Document, match: Match, replacement: str) -> Document:
    """Splice ``replacement`` over ``match``; offsets after it shift.

    Callers must recompute matches before using any other offset from the
    same match list.
    """

    if match.document_id != document.id:
        raise MatchOwnershipError(
            f"Match belongs to document '{match.document_id}', not '{document.id}'",
            document_id=document.id,
            match_document_id=match.document_id,
        )
    if match.end > len(document.text):
        raise MatchOwnershipError(
            f"Match [{match.start}, {match.end}) is outside the document text",
            document_id=document.id,
            match_document_id=match.document_id,
        )
    text = document.text
    return document.with_text(text[: match.start] + replacement + text[match.end :])


def replace_all(
    documents: DocumentSet,
    query: str,
    options: FindOptions,
    replacement: str,
    *,
    strict: bool = False,
) -> DocumentSet:
    """Substitute every match in every document.

    Documents whose text does not change are kept as the same instance; when
    nothing changes at all the input set itself is returned. Literal queries
    insert ``replacement`` verbatim, regex queries expand group references
    such as ``\\1`` and ``\\g<name>``.

    A replacement template that cannot be expanded leaves every document
    untouched; with ``strict`` it raises ``ReplacementTemplateError`` instead.
    """

    if not query:
        return documents
    try:
        pattern = compile_pattern(query, options)
    except InvalidPatternError:
        return documents

    failure: Optional[Exception] = None
    with telemetry.span(
        "replace::all",
        component="replace",
        metadata={"regex": options.use_regex, "documents": len(documents)},
    ) as handle:
        updates: Dict[str, Document] = {}
        total = 0
        for document in documents:
            try:
                if options.use_regex:
                    new_text, count = pattern.subn(replacement, document.text)
                else:
                    new_text, count = pattern.subn(
                        lambda _found: replacement, document.text
                    )
            except (re.error, IndexError) as exc:
                handle.add_metadata("template_error", exc)
                failure = exc
                break
            total += count
            if new_text != document.text:
                updates[document.id] = document.with_text(new_text)
        handle.add_metadata("replacements", total)
        handle.add_metadata("changed_documents", len(updates))

    if failure is not None:
        if strict:
            raise ReplacementTemplateError(replacement, str(failure)) from failure
        return documents
    return documents.replace_documents(updates)


__all__ = ["replace_one", "replace_all"]
