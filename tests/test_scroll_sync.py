from __future__ import annotations

import asyncio
from typing import Callable, List, Optional, Tuple

import pytest

from diffdeck.runtime.scheduler import AsyncioScheduler, ManualScheduler
from diffdeck.sync import ScrollSyncCoordinator, reveal_scroll_top


class FakeViewport:
    """Records writes; can echo them back like a toolkit scroll signal."""

    def __init__(self, viewport_id: str) -> None:
        self.viewport_id = viewport_id
        self.writes: List[Tuple[float, float]] = []
        self.echo: Optional[Callable[[str, float, float], object]] = None

    def set_scroll(self, top: float, left: float) -> None:
        self.writes.append((top, left))
        if self.echo is not None:
            self.echo(self.viewport_id, top, left)


def make_coordinator(
    *ids: str, indicator_ms: int = 400
) -> tuple[ScrollSyncCoordinator, ManualScheduler, dict[str, FakeViewport]]:
    scheduler = ManualScheduler()
    coordinator = ScrollSyncCoordinator(scheduler, indicator_ms=indicator_ms)
    viewports = {}
    for viewport_id in ids or ("a", "b", "c"):
        viewport = FakeViewport(viewport_id)
        coordinator.register(viewport)
        viewports[viewport_id] = viewport
    return coordinator, scheduler, viewports


def test_scroll_fans_out_to_siblings_only() -> None:
    coordinator, _scheduler, viewports = make_coordinator()

    assert coordinator.on_scroll("a", 120, 4) is True

    assert viewports["a"].writes == []
    assert viewports["b"].writes == [(120, 4)]
    assert viewports["c"].writes == [(120, 4)]
    assert coordinator.synced_ids == frozenset({"b", "c"})


def test_guard_drops_echoed_events_until_next_turn() -> None:
    coordinator, scheduler, viewports = make_coordinator()
    echoed: List[bool] = []
    for viewport in viewports.values():
        viewport.echo = lambda vid, top, left: echoed.append(
            coordinator.on_scroll(vid, top, left)
        )

    coordinator.on_scroll("a", 50, 0)

    assert echoed == [False, False]
    assert coordinator.is_propagating
    assert coordinator.on_scroll("b", 10, 0) is False

    scheduler.run_soon()

    assert not coordinator.is_propagating
    assert coordinator.on_scroll("b", 10, 0) is True
    assert viewports["a"].writes == [(10, 0)]


def test_identical_events_write_each_sibling_once() -> None:
    coordinator, scheduler, viewports = make_coordinator()

    coordinator.on_scroll("a", 30, 2)
    scheduler.run_soon()
    coordinator.on_scroll("a", 30, 2)
    scheduler.run_soon()

    assert viewports["b"].writes == [(30, 2)]
    assert viewports["c"].writes == [(30, 2)]
    assert not coordinator.is_propagating


def test_indicator_clears_after_delay_and_restarts_on_new_scroll() -> None:
    coordinator, scheduler, _viewports = make_coordinator(indicator_ms=400)
    changes: List[frozenset] = []
    coordinator.add_listener(changes.append)

    coordinator.on_scroll("a", 10, 0)
    scheduler.advance(300)
    coordinator.on_scroll("b", 20, 0)
    scheduler.advance(300)

    assert coordinator.synced_ids == frozenset({"a", "b", "c"})

    scheduler.advance(100)

    assert coordinator.synced_ids == frozenset()
    assert changes[-1] == frozenset()
    assert scheduler.pending == 0


def test_unknown_source_writes_nothing_and_releases_guard() -> None:
    coordinator, scheduler, viewports = make_coordinator()

    assert coordinator.on_scroll("ghost", 5, 5) is False
    scheduler.run_soon()

    assert all(not viewport.writes for viewport in viewports.values())
    assert not coordinator.is_propagating


def test_each_coordinator_owns_its_guard() -> None:
    first, _first_scheduler, _ = make_coordinator("a", "b")
    second, _second_scheduler, second_views = make_coordinator("a", "b")

    first.on_scroll("a", 1, 0)

    assert first.is_propagating
    assert second.on_scroll("a", 1, 0) is True
    assert second_views["b"].writes == [(1, 0)]


def test_unregister_and_close() -> None:
    coordinator, scheduler, viewports = make_coordinator()
    coordinator.on_scroll("a", 10, 0)

    coordinator.unregister("c")
    coordinator.close()
    scheduler.advance(1000)

    assert coordinator.viewport_ids == ("a", "b")
    assert coordinator.synced_ids == frozenset()
    assert not coordinator.is_propagating
    with pytest.raises(ValueError):
        coordinator.register(viewports["a"])


def test_reveal_scroll_top() -> None:
    assert reveal_scroll_top(1, scroll_top=0, viewport_height=240, line_height=24) is None
    assert reveal_scroll_top(21, scroll_top=0, viewport_height=240, line_height=24) == 400
    assert reveal_scroll_top(2, scroll_top=480, viewport_height=240, line_height=24) == 0.0


def test_manual_scheduler_runs_timers_in_deadline_order() -> None:
    scheduler = ManualScheduler()
    fired: List[str] = []

    scheduler.call_later(20, lambda: fired.append("late"))
    scheduler.call_later(10, lambda: fired.append("early"))
    cancelled = scheduler.call_later(5, lambda: fired.append("cancelled"))
    cancelled.cancel()
    scheduler.call_soon(lambda: fired.append("soon"))

    scheduler.advance(25)

    assert fired == ["soon", "early", "late"]
    assert scheduler.now_ms == 25


def test_asyncio_scheduler_releases_guard_on_next_loop_turn() -> None:
    async def scenario() -> None:
        coordinator = ScrollSyncCoordinator(AsyncioScheduler(), indicator_ms=20)
        coordinator.register(FakeViewport("a"))
        coordinator.register(FakeViewport("b"))

        assert coordinator.on_scroll("a", 12, 0) is True
        assert coordinator.is_propagating
        assert coordinator.synced_ids == frozenset({"b"})

        await asyncio.sleep(0)
        assert not coordinator.is_propagating
        assert coordinator.synced_ids == frozenset({"b"})

        await asyncio.sleep(0.1)
        assert coordinator.synced_ids == frozenset()
        coordinator.close()

    asyncio.run(scenario())
