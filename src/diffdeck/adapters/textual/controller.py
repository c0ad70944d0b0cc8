"""Adapter that turns workspace events into Textual-friendly callbacks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Optional, Sequence, Tuple

from diffdeck.diff import NumberedLine
from diffdeck.search import Match
from diffdeck.summary import Summarizer, SummaryState
from diffdeck.sync import ScrollSyncCoordinator, Viewport, reveal_scroll_top
from diffdeck.workspace import (
    ACTIVE_CHANGED,
    DOCUMENTS_CHANGED,
    FIND_CHANGED,
    MATCHES_CHANGED,
    REPLACE_FAILED,
    SUMMARY_CHANGED,
    ComparisonWorkspace,
)


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class PanelView:
    """Everything a host needs to draw one document panel."""

    document_id: str
    title: str
    language: str
    text: str
    lines: List[NumberedLine]
    is_base: bool
    matches: List[Match] = field(default_factory=list)
    active: Optional[Match] = None


@dataclass(slots=True)
class FindView:
    query: str
    replacement: str
    case_sensitive: bool
    use_regex: bool
    visible: bool
    count: int
    active_index: Optional[int]

    @property
    def label(self) -> str:
        if not self.query:
            return ""
        if self.count == 0 or self.active_index is None:
            return "No results"
        return f"{self.active_index + 1} of {self.count}"


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_panels: Callable[[Sequence[PanelView]], None]
    update_status: Callable[[str], None] = _noop
    update_find: Callable[[FindView], None] = _noop
    update_synced: Callable[[FrozenSet[str]], None] = _noop
    update_summary: Callable[[SummaryState], None] = _noop
    log: Callable[[str], None] = _noop


class TextualCompareAdapter:
    """Bridges a ``ComparisonWorkspace`` and its scroll coordinator to a host."""

    def __init__(
        self,
        workspace: ComparisonWorkspace,
        coordinator: ScrollSyncCoordinator,
        hooks: TextualUIHooks,
    ) -> None:
        self.workspace = workspace
        self.coordinator = coordinator
        self.hooks = hooks
        self._subscribe_events()
        self.coordinator.add_listener(self._on_synced)
        self.refresh()

    def panel_views(self) -> List[PanelView]:
        workspace = self.workspace
        views: List[PanelView] = []
        for index, document in enumerate(workspace.documents):
            views.append(
                PanelView(
                    document_id=document.id,
                    title=document.title,
                    language=workspace.language_for(document.id),
                    text=document.text,
                    lines=workspace.numbered_lines(document.id),
                    is_base=index == 0,
                    matches=workspace.matches_for(document.id),
                    active=workspace.active_match_for(document.id),
                )
            )
        return views

    def find_view(self) -> FindView:
        workspace = self.workspace
        return FindView(
            query=workspace.query,
            replacement=workspace.replacement,
            case_sensitive=workspace.options.case_sensitive,
            use_regex=workspace.options.use_regex,
            visible=workspace.find_visible,
            count=len(workspace.matches),
            active_index=workspace.active_index,
        )

    def refresh(self) -> None:
        self.hooks.update_panels(self.panel_views())
        self.hooks.update_find(self.find_view())

    def register_viewport(self, viewport: Viewport) -> None:
        self.coordinator.register(viewport)

    def handle_scroll(self, document_id: str, top: float, left: float) -> bool:
        accepted = self.coordinator.on_scroll(document_id, top, left)
        if accepted:
            self._log("scroll ->", source=document_id, top=top, left=left)
        return accepted

    def reveal_target(
        self, scroll_top: float, viewport_height: float
    ) -> Optional[Tuple[str, float]]:
        """Where to scroll so the active match is visible, if anywhere."""

        located = self.workspace.active_reveal_line()
        if located is None:
            return None
        document_id, line = located
        target = reveal_scroll_top(
            line,
            scroll_top=scroll_top,
            viewport_height=viewport_height,
            line_height=self.workspace.config.line_height,
        )
        if target is None:
            return None
        return document_id, target

    async def summarize(self, summarizer: Summarizer) -> SummaryState:
        self.hooks.update_status("Analyzing changes...")
        state = await self.workspace.summarize(summarizer)
        self.hooks.update_status(f"summary:{state.status.value}")
        return state

    def close(self) -> None:
        """Detach from the workspace bus; the adapter stops updating hooks."""

        bus = self.workspace.bus
        for event, callback in self._subscriptions():
            bus.unsubscribe(event, callback)

    def _subscriptions(self) -> List[Tuple[str, Callable[[object], None]]]:
        return [
            (DOCUMENTS_CHANGED, self._on_documents),
            (MATCHES_CHANGED, self._on_find_state),
            (ACTIVE_CHANGED, self._on_active),
            (FIND_CHANGED, self._on_find_state),
            (SUMMARY_CHANGED, self._on_summary),
            (REPLACE_FAILED, self._on_replace_failed),
        ]

    def _subscribe_events(self) -> None:
        bus = self.workspace.bus
        for event, callback in self._subscriptions():
            bus.subscribe(event, callback)

    def _on_find_state(self, payload: object | None) -> None:
        self._refresh_find()

    def _on_replace_failed(self, payload: object | None) -> None:
        reason = getattr(payload, "reason", payload)
        self._log("replace failed ->", reason=reason)
        self.hooks.update_status(f"Replace failed: {reason}")

    def _on_documents(self, payload: object | None) -> None:
        open_ids = set(self.workspace.documents.ids)
        for viewport_id in self.coordinator.viewport_ids:
            if viewport_id not in open_ids:
                self.coordinator.unregister(viewport_id)
        self._log("documents ->", count=len(open_ids))
        self.hooks.update_panels(self.panel_views())

    def _on_active(self, payload: object | None) -> None:
        self._log("active ->", index=payload)
        self.hooks.update_panels(self.panel_views())
        self._refresh_find()

    def _on_summary(self, payload: object | None) -> None:
        if isinstance(payload, SummaryState):
            self.hooks.update_summary(payload)

    def _on_synced(self, synced: FrozenSet[str]) -> None:
        self.hooks.update_synced(synced)

    def _refresh_find(self) -> None:
        view = self.find_view()
        self.hooks.update_find(view)
        if view.label:
            self.hooks.update_status(view.label)

    def _log(self, prefix: str, **fields: object) -> None:
        parts = [prefix]
        parts.extend(f"{key}={value!r}" for key, value in fields.items())
        self.hooks.log(" ".join(parts))


__all__ = ["FindView", "PanelView", "TextualCompareAdapter", "TextualUIHooks"]
