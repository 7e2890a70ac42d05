from __future__ import annotations

from typing import Any, Mapping

import pytest

import sketchbook.sketches  # noqa: F401
from sketchbook.core.canvas import Canvas
from sketchbook.core.clock import FrameTime
from sketchbook.core.sketch_registry import (
    Sketch,
    SketchRegistry,
    canvas_for,
    sketch,
    sketch_registry,
)


class _Dummy:
    name = "dummy"
    fps = 10.0
    resizable = False
    canvas_size = (320, 240)

    def __init__(self, options: Mapping[str, Any]) -> None:
        self.options = dict(options)

    def setup(self, canvas: Canvas, now: FrameTime) -> None:
        pass

    def draw(self, canvas: Canvas, now: FrameTime) -> None:
        pass

    def window_resized(self, canvas: Canvas, width: int, height: int) -> None:
        pass


def test_builtin_sketches_are_registered() -> None:
    for name in ("countdown", "growth", "notebook", "balance"):
        assert name in sketch_registry
    created = sketch_registry.create("notebook", {"fps": 12})
    assert isinstance(created, Sketch)
    assert created.fps == 12.0


def test_unknown_sketch_raises_key_error() -> None:
    with pytest.raises(KeyError):
        sketch_registry.get("no-such-sketch")


def test_register_respects_overwrite_flag() -> None:
    registry = SketchRegistry()
    registry._register("dummy", _Dummy)
    with pytest.raises(ValueError):
        registry._register("dummy", _Dummy, overwrite=False)
    assert registry.names() == ("dummy",)
    assert registry.create("dummy", {"a": 1}).options == {"a": 1}


def test_sketch_decorator_defaults_to_function_name() -> None:
    @sketch()
    def dummy_sketch_for_test(options: Mapping[str, Any]) -> _Dummy:
        return _Dummy(options)

    try:
        assert "dummy_sketch_for_test" in sketch_registry
        assert sketch_registry["dummy_sketch_for_test"] is dummy_sketch_for_test
    finally:
        sketch_registry._items.pop("dummy_sketch_for_test", None)


def test_canvas_for_caps_only_resizable_sketches() -> None:
    fixed = canvas_for(_Dummy({}))
    assert fixed.size == (320, 240)
    assert fixed.max_size is None

    clock_sketch = sketch_registry.create("countdown", {"max_canvas": 500})
    canvas = canvas_for(clock_sketch)
    assert canvas.size == (500, 500)
    assert canvas.max_size == (500, 500)
