"""Executable Textual app that hosts the comparison engine."""

from __future__ import annotations

import argparse
import os
from dataclasses import replace
from pathlib import Path
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from rich.text import Text
    from textual.app import App, ComposeResult
    from textual.containers import Horizontal, Vertical, VerticalScroll
    from textual.widgets import Footer, Header, Input, Label, Static, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use diffdeck.adapters.textual.app"
    ) from exc

from diffdeck.diff import DiffKind
from diffdeck.documents import Document, DocumentSet
from diffdeck.highlight import highlight_text
from diffdeck.runtime import telemetry
from diffdeck.runtime.config import EngineConfig, load_config
from diffdeck.runtime.scheduler import AsyncioScheduler
from diffdeck.search import SegmentKind, line_segments
from diffdeck.summary import DiffStatSummarizer, SummaryState
from diffdeck.sync import ScrollSyncCoordinator
from diffdeck.workspace import ComparisonWorkspace

from .controller import FindView, PanelView, TextualCompareAdapter, TextualUIHooks

ScrollCallback = Callable[[str, float, float], None]

_ROW_STYLES = {
    DiffKind.ADDED: "on #1e3a24",
    DiffKind.REMOVED: "on #4a1f24",
}
_SEGMENT_STYLES = {
    SegmentKind.MATCH: "on #5c4b00",
    SegmentKind.ACTIVE: "black on #f0c000",
}


def _line_starts(text: str) -> List[int]:
    starts = [0]
    for index, char in enumerate(text):
        if char == "\n":
            starts.append(index + 1)
    return starts


def render_panel(view: PanelView) -> Text:
    """Render numbered, highlighted lines with match overlays."""

    starts = _line_starts(view.text)
    rendered = Text(no_wrap=True)
    for row_index, line in enumerate(view.lines):
        if row_index:
            rendered.append("\n")
        base_col = "" if line.base_number is None else str(line.base_number)
        variant_col = "" if line.variant_number is None else str(line.variant_number)
        if view.is_base:
            gutter = f"{base_col:>4}        "
        else:
            gutter = f"{base_col:>4} {variant_col:>4} {line.kind.symbol} "
        row = Text(gutter, style="dim")
        body = highlight_text(line.text, view.language)

        own_number = line.base_number if view.is_base else line.variant_number
        if own_number is not None and own_number <= len(starts):
            segments = line_segments(
                line.text, starts[own_number - 1], view.matches, view.active
            )
            for segment in segments:
                style = _SEGMENT_STYLES.get(segment.kind)
                if style:
                    body.stylize(style, segment.start, segment.start + len(segment.text))

        row.append_text(body)
        row_style = _ROW_STYLES.get(line.kind)
        if row_style and not view.is_base:
            row.stylize(row_style, 0, len(row))
        rendered.append_text(row)
    return rendered


class PanelViewport:
    """Coordinator-facing handle over a panel's scroll container."""

    def __init__(self, viewport_id: str, scroller: VerticalScroll) -> None:
        self.viewport_id = viewport_id
        self.scroller = scroller

    def set_scroll(self, top: float, left: float) -> None:
        self.scroller.scroll_to(x=left, y=top, animate=False)


class DocumentPanel(Vertical):
    """Title, rendered diff and an editor that is shown on demand."""

    def __init__(self, view: PanelView, on_scroll: ScrollCallback) -> None:
        super().__init__(id=f"panel-{view.document_id}", classes="panel")
        self.view = view
        self._on_scroll = on_scroll
        self.title_label = Label(view.title, classes="panel-title")
        self.content = Static(render_panel(view), classes="panel-content")
        self.scroller = VerticalScroll(self.content, classes="panel-body")
        self.editor = TextArea(view.text, classes="panel-editor")
        self.editor.display = False

    @property
    def document_id(self) -> str:
        return self.view.document_id

    @property
    def editing(self) -> bool:
        return bool(self.editor.display)

    def compose(self) -> ComposeResult:
        yield self.title_label
        yield self.scroller
        yield self.editor

    def on_mount(self) -> None:
        self.watch(self.scroller, "scroll_y", self._report_scroll, init=False)
        self.watch(self.scroller, "scroll_x", self._report_scroll, init=False)

    def show(self, view: PanelView) -> None:
        self.view = view
        self.title_label.update(view.title)
        self.content.update(render_panel(view))
        if not self.editing:
            self.editor.load_text(view.text)

    def begin_edit(self) -> None:
        self.editor.load_text(self.view.text)
        self.scroller.display = False
        self.editor.display = True
        self.editor.focus()

    def end_edit(self) -> str:
        self.editor.display = False
        self.scroller.display = True
        self.scroller.focus()
        return self.editor.text

    def _report_scroll(self) -> None:
        self._on_scroll(self.document_id, self.scroller.scroll_y, self.scroller.scroll_x)


class DiffDeckApp(App[None]):
    """Side-by-side comparison of two to four documents."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#find-bar {
		height: 3;
		display: none;
	}

	#find-bar.visible {
		display: block;
	}

	#find-bar Input {
		width: 1fr;
	}

	#find-count {
		width: 14;
		padding: 1 1;
	}

	#panels {
		height: 1fr;
	}

	.panel {
		width: 1fr;
		border: round $primary;
	}

	.panel.synced {
		border: round $accent;
	}

	.panel-title {
		height: 1;
		padding: 0 1;
		background: $surface-darken-1;
		width: 100%;
	}

	.panel-body {
		height: 1fr;
		overflow: auto auto;
	}

	.panel-editor {
		height: 1fr;
	}

	#summary {
		height: auto;
		max-height: 8;
		border: round $accent;
		padding: 0 1;
		display: none;
	}

	#summary.visible {
		display: block;
	}

	#status-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+f", "toggle_find", "Find"),
        ("f3", "find_next", "Next"),
        ("shift+f3", "find_prev", "Prev"),
        ("f4", "replace", "Replace"),
        ("shift+f4", "replace_all", "Replace all"),
        ("f7", "toggle_case", "Case"),
        ("f8", "toggle_regex", "Regex"),
        ("f2", "edit_panel", "Edit"),
        ("f5", "add_panel", "Add panel"),
        ("f6", "remove_panel", "Remove panel"),
        ("f9", "summarize", "Summarize"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        documents: Optional[DocumentSet] = None,
        *,
        config: Optional[EngineConfig] = None,
    ) -> None:
        super().__init__()
        # Textual scrolls in cells, so one line is one unit.
        self.config = replace(config or load_config(), line_height=1)
        self.workspace = ComparisonWorkspace(documents, config=self.config)
        self.coordinator = ScrollSyncCoordinator(
            AsyncioScheduler(), indicator_ms=self.config.sync_indicator_ms
        )
        self.adapter: TextualCompareAdapter | None = None
        self._panels: Dict[str, DocumentPanel] = {}
        self._panel_row: Horizontal | None = None
        self._status: Static | None = None
        self._summary: Static | None = None
        self._find_count: Label | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal(id="find-bar"):
            yield Input(placeholder="Find", id="find-query")
            yield Input(placeholder="Replace", id="replace-query")
            self._find_count = Label("", id="find-count")
            yield self._find_count
        self._panel_row = Horizontal(id="panels")
        yield self._panel_row
        self._summary = Static("", id="summary")
        yield self._summary
        self._status = Static("", id="status-line")
        yield self._status
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_panels=self._update_panels,
            update_status=self._update_status,
            update_find=self._update_find,
            update_synced=self._update_synced,
            update_summary=self._update_summary,
            log=self._log_line,
        )
        self.adapter = TextualCompareAdapter(self.workspace, self.coordinator, hooks)

    def on_unmount(self) -> None:
        if self.adapter is not None:
            self.adapter.close()
        self.coordinator.close()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "find-query":
            self.workspace.set_query(event.value)
        elif event.input.id == "replace-query":
            self.workspace.set_replacement(event.value)

    def action_toggle_find(self) -> None:
        visible = self.workspace.toggle_find()
        self.query_one("#find-bar").set_class(visible, "visible")
        if visible:
            self.query_one("#find-query", Input).focus()

    def action_find_next(self) -> None:
        self.workspace.find_next()
        self._reveal_active()

    def action_find_prev(self) -> None:
        self.workspace.find_prev()
        self._reveal_active()

    def action_replace(self) -> None:
        self.workspace.replace_active()

    def action_replace_all(self) -> None:
        self.workspace.replace_all()

    def action_toggle_case(self) -> None:
        self.workspace.toggle_option("case_sensitive")

    def action_toggle_regex(self) -> None:
        self.workspace.toggle_option("use_regex")

    def action_add_panel(self) -> None:
        if not self.workspace.add_document():
            self._update_status(f"At most {self.config.max_documents} panels")

    def action_remove_panel(self) -> None:
        if not self.workspace.remove_document():
            self._update_status(f"At least {self.config.min_documents} panels")

    def action_edit_panel(self) -> None:
        panel = self._focused_panel()
        if panel is None:
            self._update_status("Focus a panel to edit it")
            return
        if panel.editing:
            self.workspace.update_text(panel.document_id, panel.end_edit())
        else:
            panel.begin_edit()

    def action_summarize(self) -> None:
        if self.adapter is None:
            return
        self.run_worker(self.adapter.summarize(DiffStatSummarizer()), exclusive=True)

    def _focused_panel(self) -> Optional[DocumentPanel]:
        node = self.focused
        while node is not None:
            if isinstance(node, DocumentPanel):
                return node
            node = node.parent  # type: ignore[assignment]
        return None

    def _reveal_active(self) -> None:
        match = self.workspace.active_match
        if match is None or self.adapter is None:
            return
        panel = self._panels.get(match.document_id)
        if panel is None:
            return
        located = self.adapter.reveal_target(
            panel.scroller.scroll_y, panel.scroller.size.height
        )
        if located is not None:
            panel.scroller.scroll_to(y=located[1], animate=False)

    def _handle_scroll(self, document_id: str, top: float, left: float) -> None:
        if self.adapter is not None:
            self.adapter.handle_scroll(document_id, top, left)

    def _update_panels(self, views: Sequence[PanelView]) -> None:
        if self._panel_row is None:
            return
        wanted = {view.document_id for view in views}
        for document_id in list(self._panels):
            if document_id not in wanted:
                self._panels.pop(document_id).remove()
        for view in views:
            panel = self._panels.get(view.document_id)
            if panel is None:
                panel = DocumentPanel(view, self._handle_scroll)
                self._panels[view.document_id] = panel
                self._panel_row.mount(panel)
                self.coordinator.register(
                    PanelViewport(view.document_id, panel.scroller)
                )
            else:
                panel.show(view)

    def _update_find(self, view: FindView) -> None:
        if self._find_count is not None:
            flags = ("Aa " if view.case_sensitive else "") + (".* " if view.use_regex else "")
            self._find_count.update(f"{flags}{view.label}")

    def _update_synced(self, synced: FrozenSet[str]) -> None:
        for document_id, panel in self._panels.items():
            panel.set_class(document_id in synced, "synced")

    def _update_summary(self, state: SummaryState) -> None:
        if self._summary is None:
            return
        self._summary.set_class(state.visible, "visible")
        if state.is_running:
            self._summary.update("Analyzing changes...")
        else:
            self._summary.update(state.text)

    def _update_status(self, status: str) -> None:
        if self._status is not None:
            self._status.update(status)

    def _log_line(self, line: str) -> None:
        telemetry.get_logger("diffdeck.textual").debug(line)


def load_documents(paths: Sequence[str], config: EngineConfig) -> Optional[DocumentSet]:
    if not paths:
        return None
    documents = [
        Document(text=Path(path).read_text(encoding="utf-8"), title=Path(path).name)
        for path in paths
    ]
    return DocumentSet.of(
        documents, min_size=config.min_documents, max_size=config.max_documents
    )


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compare two to four documents side by side."
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="Files to open; the first one is the base (default: built-in sample)",
    )
    parser.add_argument(
        "--log-preset",
        default=os.environ.get("DIFFDECK_LOG_PRESET", "production"),
        help="Telemetry preset: development, production or performance",
    )
    args = parser.parse_args(argv)
    config = load_config()
    if args.files and not (
        config.min_documents <= len(args.files) <= config.max_documents
    ):
        parser.error(
            f"expected {config.min_documents} to {config.max_documents} files, "
            f"got {len(args.files)}"
        )
    return args


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    # The TUI owns the terminal, so console logging must stay off.
    telemetry.configure(preset=args.log_preset)
    config = load_config()
    app = DiffDeckApp(load_documents(args.files, config), config=config)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
