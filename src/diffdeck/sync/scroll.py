"""Lockstep scrolling across comparison viewports."""

from __future__ import annotations

from typing import Callable, Dict, FrozenSet, List, Optional, Protocol, Set, Tuple

from diffdeck.runtime import telemetry
from diffdeck.runtime.scheduler import Scheduler, TimerHandle

Offset = Tuple[float, float]  # (top, left)
SyncedListener = Callable[[FrozenSet[str]], None]

DEFAULT_INDICATOR_MS = 400


class Viewport(Protocol):
    """Anything with a scroll position the coordinator may write to."""

    viewport_id: str

    def set_scroll(self, top: float, left: float) -> None: ...


class ScrollSyncCoordinator:
    """Fans one viewport's scroll offset out to every sibling viewport.

    Writing a sibling's offset can make the host report a scroll event for
    that sibling. The guard drops such events while a fan-out is in flight,
    and it is released on the scheduler's next turn rather than immediately
    so that notifications raised by the writes themselves are still dropped.

    Siblings written by the coordinator are marked as synced until
    ``indicator_ms`` passes without another fan-out.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        indicator_ms: int = DEFAULT_INDICATOR_MS,
        logger_name: Optional[str] = None,
    ) -> None:
        self.scheduler = scheduler
        self.indicator_ms = indicator_ms
        self.logger = telemetry.get_logger(logger_name or "diffdeck.sync")
        self._viewports: Dict[str, Viewport] = {}
        self._offsets: Dict[str, Offset] = {}
        self._propagating = False
        self._synced: Set[str] = set()
        self._indicator_timer: Optional[TimerHandle] = None
        self._listeners: List[SyncedListener] = []

    @property
    def is_propagating(self) -> bool:
        return self._propagating

    @property
    def synced_ids(self) -> FrozenSet[str]:
        return frozenset(self._synced)

    @property
    def viewport_ids(self) -> Tuple[str, ...]:
        return tuple(self._viewports)

    def is_synced(self, viewport_id: str) -> bool:
        return viewport_id in self._synced

    def register(self, viewport: Viewport) -> None:
        if viewport.viewport_id in self._viewports:
            raise ValueError(f"Viewport '{viewport.viewport_id}' already registered")
        self._viewports[viewport.viewport_id] = viewport

    def unregister(self, viewport_id: str) -> None:
        self._viewports.pop(viewport_id, None)
        self._offsets.pop(viewport_id, None)
        if viewport_id in self._synced:
            self._synced.discard(viewport_id)
            self._notify()

    def add_listener(self, listener: SyncedListener) -> None:
        self._listeners.append(listener)

    def on_scroll(self, source_id: str, top: float, left: float) -> bool:
        """Handle a scroll event; return ``False`` when it was ignored."""

        if self._propagating:
            return False
        self._propagating = True
        try:
            if source_id not in self._viewports:
                self.logger.debug(f"scroll from unknown viewport {source_id!r}")
                return False
            self._fan_out(source_id, (top, left))
            self._restart_indicator()
            return True
        finally:
            self.scheduler.call_soon(self._release_guard)

    def close(self) -> None:
        """Cancel pending indicator work; the guard release is idempotent."""

        if self._indicator_timer is not None:
            self._indicator_timer.cancel()
            self._indicator_timer = None
        if self._synced:
            self._synced.clear()
            self._notify()

    def _fan_out(self, source_id: str, offset: Offset) -> None:
        self._offsets[source_id] = offset
        written = 0
        for viewport_id, viewport in self._viewports.items():
            if viewport_id == source_id:
                continue
            if self._offsets.get(viewport_id) != offset:
                viewport.set_scroll(*offset)
                self._offsets[viewport_id] = offset
                written += 1
            self._synced.add(viewport_id)
        self._notify()
        telemetry.record_event(
            "sync.scroll",
            level="debug",
            data={"source": source_id, "top": offset[0], "left": offset[1], "writes": written},
            logger_name="diffdeck.sync",
        )

    def _restart_indicator(self) -> None:
        if self._indicator_timer is not None:
            self._indicator_timer.cancel()
        self._indicator_timer = self.scheduler.call_later(
            self.indicator_ms, self._clear_indicator
        )

    def _clear_indicator(self) -> None:
        self._indicator_timer = None
        if self._synced:
            self._synced.clear()
            self._notify()

    def _release_guard(self) -> None:
        self._propagating = False

    def _notify(self) -> None:
        snapshot = self.synced_ids
        for listener in list(self._listeners):
            listener(snapshot)


__all__ = [
    "DEFAULT_INDICATOR_MS",
    "Offset",
    "ScrollSyncCoordinator",
    "SyncedListener",
    "Viewport",
]
