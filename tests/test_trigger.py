"""Tests for the per-tick trigger loop."""

import random

import pytest

from random_items.catalog.source import FileCatalogSource, InMemoryCatalogSource
from random_items.catalog.values import TextValue
from random_items.config import FilterConfig, TriggerConfig
from random_items.core.dispatcher import LogDispatcher
from random_items.core.picker import ItemPicker
from random_items.core.trigger import TriggerLoop


def _make_picker(n: int = 5) -> ItemPicker:
    entries = {
        f"k{i}": [("ID_", TextValue(f"id-{i}")), ("Title", TextValue(f"Item {i}"))]
        for i in range(n)
    }
    return ItemPicker(InMemoryCatalogSource(entries), FilterConfig())


def _make_loop(
    interval: float = 2.0,
    picker: ItemPicker | None = None,
    dispatcher: LogDispatcher | None = None,
) -> TriggerLoop:
    return TriggerLoop(
        picker or _make_picker(),
        dispatcher or LogDispatcher(),
        TriggerConfig(interval_seconds=interval),
        rng=random.Random(42),
    )


def test_fires_once_after_interval():
    loop = _make_loop(interval=2.0)
    loop.start()
    fired = [loop.tick(dt) for dt in (0.5, 0.5, 0.5, 0.6)]
    assert fired == [False, False, False, True]
    assert loop.draws == 1
    assert len(loop.dispatcher.dispatched) == 1
    assert loop.state.elapsed == 0.0


def test_idle_ignores_ticks():
    loop = _make_loop()
    for _ in range(50):
        assert loop.tick(1.0) is False
    assert loop.state.elapsed == 0.0
    assert loop.draws == 0
    assert loop.dispatcher.dispatched == []


def test_start_rebuilds_eagerly():
    picker = _make_picker()
    loop = _make_loop(picker=picker)
    assert picker.pool.size() == 0
    loop.start()
    assert loop.running is True
    assert picker.pool.size() == 5
    assert picker.rebuilds == 1


def test_stop_keeps_accumulator():
    loop = _make_loop(interval=2.0)
    loop.start()
    loop.tick(1.5)
    loop.stop()
    loop.tick(5.0)
    assert loop.state.elapsed == pytest.approx(1.5)
    loop.start()
    assert loop.tick(0.5) is True


def test_toggle():
    loop = _make_loop()
    loop.toggle()
    assert loop.running is True
    loop.toggle()
    assert loop.running is False


def test_interval_change_applies_on_next_tick():
    loop = _make_loop(interval=10.0)
    loop.start()
    loop.tick(1.0)
    loop.settings.interval_seconds = 1.5
    assert loop.tick(0.5) is True


def test_spawn_mode_forwarded():
    loop = _make_loop(interval=1.0)
    loop.settings.spawn_in_world = False
    loop.start()
    loop.tick(1.0)
    title, identifier, spawn_in_world = loop.dispatcher.dispatched[0]
    assert spawn_in_world is False
    assert identifier == title.replace("Item ", "id-")


def test_dispatch_failure_is_logged_not_raised(caplog):
    dispatcher = LogDispatcher(has_subject=lambda: False)
    loop = _make_loop(interval=1.0, dispatcher=dispatcher)
    loop.start()
    assert loop.tick(1.0) is True
    assert loop.draws == 0
    assert loop.failures == 1
    assert loop.state.elapsed == 0.0
    assert "No active subject" in caplog.text


def test_empty_pool_skips_draw():
    config = FilterConfig(include_titleless=False)
    picker = ItemPicker(InMemoryCatalogSource({"k": [("Title", TextValue(""))]}), config)
    loop = _make_loop(interval=1.0, picker=picker)
    loop.start()
    assert loop.tick(1.0) is True
    assert loop.failures == 1
    assert loop.dispatcher.dispatched == []
    # start rebuild + implicit rebuild at draw time
    assert picker.rebuilds == 2


def test_unexpected_dispatcher_error_is_contained(caplog):
    class Broken:
        def dispatch(self, title, identifier, spawn_in_world):
            raise RuntimeError("boom")

    loop = TriggerLoop(_make_picker(), Broken(), TriggerConfig(interval_seconds=1.0))
    loop.start()
    assert loop.tick(1.0) is True
    assert loop.failures == 1
    assert "boom" in caplog.text


def test_unreadable_catalog_skips_draw(tmp_path):
    picker = ItemPicker(FileCatalogSource(tmp_path), FilterConfig())
    loop = _make_loop(interval=1.0, picker=picker)
    loop.start()
    assert loop.tick(1.0) is True
    assert loop.failures == 1
    assert loop.dispatcher.dispatched == []
