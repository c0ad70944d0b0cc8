"""Comparison workspace: owns documents, diffs, matches and summary state.

Every mutating method recomputes whatever depends on the changed input
(diffs on document changes, matches on document/query/option changes)
before it returns, so offsets handed out by ``matches`` are never stale.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Tuple

from diffdeck.diff import DiffLine, NumberedLine, compute_diff, number_lines, number_plain
from diffdeck.documents import Document, DocumentSet, language_for_title
from diffdeck.errors import ReplacementTemplateError
from diffdeck.runtime import telemetry
from diffdeck.runtime.config import EngineConfig
from diffdeck.search import (
    FindOptions,
    Match,
    compute_matches,
    group_by_document,
    line_of_offset,
    next_index,
    prev_index,
    replace_all,
    replace_one,
)
from diffdeck.summary import Summarizer, SummaryState, SummaryStatus

Listener = Callable[[object], None]

DOCUMENTS_CHANGED = "documents.changed"
DIFFS_CHANGED = "diffs.changed"
MATCHES_CHANGED = "matches.changed"
ACTIVE_CHANGED = "active.changed"
FIND_CHANGED = "find.changed"
SUMMARY_CHANGED = "summary.changed"
REPLACE_FAILED = "replace.failed"


class WorkspaceBus:
    """Minimal publish/subscribe channel for workspace state changes."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Listener]] = {}

    def subscribe(self, event: str, callback: Listener) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Listener) -> None:
        callbacks = self._subscribers.get(event)
        if callbacks and callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)


SAMPLE_BASE = (
    'const Greeter = (name) => {\n  console.log("Hello, " + name);\n};\n\n'
    'Greeter("World");'
)
SAMPLE_VARIANT = (
    "function Greeter(name) {\n  // A friendly greeting\n"
    "  console.log(`Hello, ${name}!`);\n}\n\nGreeter(\"Universe\");\n"
)


def sample_documents(config: Optional[EngineConfig] = None) -> DocumentSet:
    config = config or EngineConfig()
    return DocumentSet.of(
        [
            Document(text=SAMPLE_BASE, title="Original JavaScript"),
            Document(text=SAMPLE_VARIANT, title="Refactored TypeScript"),
        ],
        min_size=config.min_documents,
        max_size=config.max_documents,
    )


class ComparisonWorkspace:
    """Single owner of the comparison state."""

    def __init__(
        self,
        documents: Optional[DocumentSet] = None,
        *,
        config: Optional[EngineConfig] = None,
        bus: Optional[WorkspaceBus] = None,
        logger_name: Optional[str] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.bus = bus or WorkspaceBus()
        self._logger_name = logger_name or "diffdeck.workspace"
        self.logger = telemetry.get_logger(self._logger_name)
        if documents is None:
            documents = sample_documents(self.config)
        self._documents = documents
        self._diffs: Tuple[Optional[List[DiffLine]], ...] = ()
        self._query = ""
        self._replacement = ""
        self._options = FindOptions()
        self._find_visible = False
        self._matches: Tuple[Match, ...] = ()
        self._active: Optional[int] = None
        self._summary = SummaryState()
        self._summary_generation = 0
        self._recompute_diffs()

    # -- read-only state -------------------------------------------------

    @property
    def documents(self) -> DocumentSet:
        return self._documents

    @property
    def base(self) -> Document:
        return self._documents.base

    @property
    def diffs(self) -> Tuple[Optional[List[DiffLine]], ...]:
        return self._diffs

    @property
    def query(self) -> str:
        return self._query

    @property
    def replacement(self) -> str:
        return self._replacement

    @property
    def options(self) -> FindOptions:
        return self._options

    @property
    def find_visible(self) -> bool:
        return self._find_visible

    @property
    def matches(self) -> Tuple[Match, ...]:
        return self._matches

    @property
    def active_index(self) -> Optional[int]:
        return self._active

    @property
    def active_match(self) -> Optional[Match]:
        if self._active is None:
            return None
        return self._matches[self._active]

    @property
    def summary(self) -> SummaryState:
        return self._summary

    def diff_for(self, document_id: str) -> Optional[List[DiffLine]]:
        return self._diffs[self._documents.index_of(document_id)]

    def numbered_lines(self, document_id: str) -> List[NumberedLine]:
        diff = self.diff_for(document_id)
        if diff is None:
            return number_plain(self._documents.get(document_id).text)
        return number_lines(diff)

    def matches_for(self, document_id: str) -> List[Match]:
        self._documents.index_of(document_id)
        return group_by_document(self._documents, self._matches)[document_id]

    def active_match_for(self, document_id: str) -> Optional[Match]:
        match = self.active_match
        if match is None or match.document_id != document_id:
            return None
        return match

    def language_for(self, document_id: str) -> str:
        title = self._documents.get(document_id).title
        return language_for_title(title, default=self.config.default_language)

    def active_reveal_line(self) -> Optional[Tuple[str, int]]:
        """``(document_id, 1-based line)`` of the active match, if any."""

        match = self.active_match
        if match is None:
            return None
        text = self._documents.get(match.document_id).text
        return match.document_id, line_of_offset(text, match.start)

    # -- document mutations ----------------------------------------------

    def update_text(self, document_id: str, text: str) -> bool:
        return self._set_documents(self._documents.replace_text(document_id, text))

    def update_title(self, document_id: str, title: str) -> bool:
        updated = self._documents.replace_title(document_id, title)
        if updated is self._documents:
            return False
        # Titles feed neither diffs nor matches.
        self._documents = updated
        self.bus.emit(DOCUMENTS_CHANGED, self._documents)
        return True

    def add_document(self) -> bool:
        if not self._documents.can_append:
            return False
        return self._set_documents(self._documents.append())

    def remove_document(self) -> bool:
        if not self._documents.can_remove:
            return False
        return self._set_documents(self._documents.remove_last())

    # -- find state ------------------------------------------------------

    def set_query(self, query: str) -> None:
        if query == self._query:
            return
        self._query = query
        self._find_changed()

    def set_replacement(self, replacement: str) -> None:
        if replacement == self._replacement:
            return
        self._replacement = replacement
        self.bus.emit(FIND_CHANGED, self._find_payload())

    def set_options(self, options: FindOptions) -> None:
        if options == self._options:
            return
        self._options = options
        self._find_changed()

    def toggle_option(self, name: str) -> None:
        self.set_options(self._options.toggled(name))

    def set_find_visible(self, visible: bool) -> None:
        if visible == self._find_visible:
            return
        self._find_visible = visible
        self._find_changed()

    def toggle_find(self) -> bool:
        self.set_find_visible(not self._find_visible)
        return self._find_visible

    def find_next(self) -> Optional[int]:
        self._set_active(next_index(self._active, len(self._matches)))
        return self._active

    def find_prev(self) -> Optional[int]:
        self._set_active(prev_index(self._active, len(self._matches)))
        return self._active

    # -- replace ---------------------------------------------------------

    def replace_active(self) -> bool:
        """Replace the active match, then rebuild the match list."""

        match = self.active_match
        if match is None:
            return False
        document = self._documents.get(match.document_id)
        updated = replace_one(document, match, self._replacement)
        telemetry.record_event(
            "workspace.replace_one",
            data={"document": match.document_id, "start": match.start, "end": match.end},
            logger_name=self._logger_name,
        )
        return self._set_documents(self._documents.replace_documents({document.id: updated}))

    def replace_all(self) -> bool:
        """Replace every match; a bad template emits ``replace.failed``."""

        if not self._query or not self._matches:
            return False
        try:
            updated = replace_all(
                self._documents,
                self._query,
                self._options,
                self._replacement,
                strict=True,
            )
        except ReplacementTemplateError as exc:
            telemetry.record_event(
                "workspace.replace_failed",
                level="warning",
                data={"replacement": exc.replacement, "reason": exc.reason},
                logger_name=self._logger_name,
            )
            self.bus.emit(REPLACE_FAILED, exc)
            return False
        return self._set_documents(updated)

    # -- summary ---------------------------------------------------------

    async def summarize(self, summarizer: Summarizer) -> SummaryState:
        """Ask the collaborator for a summary; only the newest request lands."""

        self._summary_generation += 1
        generation = self._summary_generation
        self._set_summary(SummaryState(status=SummaryStatus.RUNNING))
        snapshot: Sequence[Document] = tuple(self._documents)
        try:
            text = await summarizer.summarize(snapshot)
        except Exception as exc:
            if generation == self._summary_generation:
                telemetry.record_event(
                    "workspace.summary_failed",
                    level="warning",
                    data={"error": exc},
                    logger_name=self._logger_name,
                )
                self._set_summary(SummaryState(status=SummaryStatus.FAILED, error=str(exc)))
            return self._summary
        if generation == self._summary_generation:
            self._set_summary(SummaryState(status=SummaryStatus.READY, text=text))
        return self._summary

    # -- internals -------------------------------------------------------

    def _set_documents(self, documents: DocumentSet) -> bool:
        if documents is self._documents:
            return False
        self._documents = documents
        self._recompute_diffs()
        self._recompute_matches(reset_active=False)
        self.bus.emit(DOCUMENTS_CHANGED, self._documents)
        return True

    def _find_changed(self) -> None:
        self._recompute_matches(reset_active=True)
        self.bus.emit(FIND_CHANGED, self._find_payload())

    def _find_payload(self) -> Dict[str, object]:
        return {
            "query": self._query,
            "replacement": self._replacement,
            "options": self._options,
            "visible": self._find_visible,
        }

    def _recompute_diffs(self) -> None:
        documents = self._documents
        with telemetry.span(
            "workspace::diffs",
            logger_name=self._logger_name,
            component="workspace",
            metadata={"documents": len(documents)},
        ):
            if len(documents) < 2:
                diffs: Tuple[Optional[List[DiffLine]], ...] = tuple(None for _ in documents)
            else:
                base_lines = documents.base.lines()
                diffs = (None,) + tuple(
                    compute_diff(base_lines, document.lines())
                    for document in documents.documents[1:]
                )
        self._diffs = diffs
        self.bus.emit(DIFFS_CHANGED, self._diffs)

    def _recompute_matches(self, *, reset_active: bool) -> None:
        if self._find_visible and self._query:
            matches = tuple(compute_matches(self._documents, self._query, self._options))
        else:
            matches = ()
        self._matches = matches
        self.bus.emit(MATCHES_CHANGED, self._matches)

        if not matches:
            active: Optional[int] = None
        elif reset_active or self._active is None:
            active = 0
        else:
            active = min(self._active, len(matches) - 1)
        self._set_active(active, force=True)

    def _set_active(self, index: Optional[int], *, force: bool = False) -> None:
        if index == self._active and not force:
            return
        self._active = index
        self.bus.emit(ACTIVE_CHANGED, self._active)

    def _set_summary(self, state: SummaryState) -> None:
        self._summary = state
        self.bus.emit(SUMMARY_CHANGED, self._summary)


__all__ = [
    "ACTIVE_CHANGED",
    "ComparisonWorkspace",
    "DIFFS_CHANGED",
    "DOCUMENTS_CHANGED",
    "FIND_CHANGED",
    "MATCHES_CHANGED",
    "REPLACE_FAILED",
    "SUMMARY_CHANGED",
    "WorkspaceBus",
    "sample_documents",
]
