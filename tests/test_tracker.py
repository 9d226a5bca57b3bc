from __future__ import annotations

import pytest

from colordetect import nodes
from colordetect.models import Color, DetectConfig, Region
from colordetect.nodes.pager import PagerResult
from colordetect.tracker import ColorTracking, Tracker
from tests.synthetic import paint_box, solid


def _recorder(log: list, name: str):
    def fn(color, buffer, cfg):
        log.append(name)
        return name

    return fn


def test_track_runs_in_insertion_order():
    log: list[str] = []
    tracker = Tracker()
    for name in ("b", "a", "c"):
        tracker.add_tracking(ColorTracking(Color.RED, _recorder(log, name)), name)

    results = tracker.track(solid(2, 2, Color.BLACK))

    assert log == ["b", "a", "c"]
    assert list(results) == ["b", "a", "c"]


def test_replacing_an_id_keeps_its_position():
    log: list[str] = []
    tracker = Tracker()
    tracker.add_tracking(ColorTracking(Color.RED, _recorder(log, "first")), "x")
    tracker.add_tracking(ColorTracking(Color.RED, _recorder(log, "y")), "y")
    tracker.add_tracking(ColorTracking(Color.RED, _recorder(log, "second")), "x")

    assert tracker.track(solid(1, 1, Color.BLACK)) == {"x": "second", "y": "y"}
    assert log == ["second", "y"]


def test_remove_tracking():
    tracker = Tracker()
    tracking = ColorTracking(Color.RED, _recorder([], "r"))
    tracker.add_tracking(tracking, "r")
    assert tracker.remove_tracking("r") is tracking
    assert tracker.remove_tracking("r") is None
    assert tracker.track(solid(1, 1, Color.BLACK)) == {}


def test_callback_and_config_are_forwarded():
    seen = []
    received = []

    def fn(color, buffer, cfg):
        received.append((color, cfg))
        return cfg["answer"]

    tracking = ColorTracking(Color.BLUE, fn, callback=seen.append, config={"answer": 42})
    assert tracking.run(solid(1, 1, Color.BLACK)) == 42
    assert seen == [42]
    assert received == [(Color.BLUE, {"answer": 42})]


def test_track_requires_a_buffer():
    with pytest.raises(ValueError):
        Tracker().track(None)


def test_built_in_tracking_functions():
    buffer = solid(100, 100, Color.BLUE)
    paint_box(buffer, (0, 0, 99, 10), Color.RED)
    paint_box(buffer, (40, 40, 58, 58), Color.GREEN)

    options = DetectConfig().tracking_options(mark=False)
    tracker = Tracker()
    tracker.add_tracking(ColorTracking(Color.RED, nodes.simple_pager, config=options), "pager")
    tracker.add_tracking(ColorTracking(Color.GREEN, nodes.search_and_mark, config=options), "scan")
    tracker.add_tracking(
        ColorTracking(Color.GREEN, nodes.count_similars, config={"max_count": 300}), "count"
    )
    before = buffer.pixels.copy()

    results = tracker.track(buffer)

    assert results["pager"] == PagerResult(top=True)
    assert isinstance(results["scan"], Region)
    assert 40 <= results["scan"].left and results["scan"].right <= 58
    assert results["count"] is True
    assert (buffer.pixels == before).all()


def test_search_and_mark_outlines_by_default():
    buffer = solid(100, 100, Color.BLACK)
    paint_box(buffer, (40, 40, 58, 58), Color.GREEN)
    region = nodes.search_and_mark(Color.GREEN, buffer)
    assert region is not None
    assert buffer.get_color(region.left, region.top) == Color.MAGENTA


def test_detect_config_defaults():
    cfg = DetectConfig()
    options = cfg.tracking_options()
    assert options["radius"] == 3
    assert options["border"] == 10
    assert options["threshold"] == 30
    assert options["mark"] is True
    assert DetectConfig(radius=5).tracking_options()["radius"] == 5
