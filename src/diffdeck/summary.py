"""Summarization collaborator contract and the state the workspace keeps."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Sequence

from diffdeck.diff import diff_stats, diff_texts
from diffdeck.documents import Document


class Summarizer(Protocol):
    """Turns the open documents into a prose description of their differences."""

    async def summarize(self, documents: Sequence[Document]) -> str: ...


class SummaryStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SummaryState:
    status: SummaryStatus = SummaryStatus.IDLE
    text: str = ""
    error: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self.status is SummaryStatus.RUNNING

    @property
    def visible(self) -> bool:
        return self.is_running or bool(self.text)


class DiffStatSummarizer:
    """Offline summarizer that reports line counts against the base."""

    async def summarize(self, documents: Sequence[Document]) -> str:
        if len(documents) < 2:
            return "Add another document to compare against the base."
        base = documents[0]
        lines = [f"Compared against '{base.title or 'base'}':"]
        for document in documents[1:]:
            stats = diff_stats(diff_texts(base.text, document.text))
            name = document.title or document.id
            if stats.is_identical:
                lines.append(f"- '{name}' is identical to the base.")
            else:
                lines.append(
                    f"- '{name}': {stats.added} line(s) added, "
                    f"{stats.removed} line(s) removed, {stats.unchanged} unchanged."
                )
        return "\n".join(lines)


__all__ = ["DiffStatSummarizer", "Summarizer", "SummaryState", "SummaryStatus"]
