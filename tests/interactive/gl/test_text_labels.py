from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from sketchbook.core.canvas import TextCommand
from sketchbook.core.color import Color
from sketchbook.interactive.gl import text_labels
from sketchbook.interactive.gl.text_labels import LabelCache, label_params


def _cmd(text: str = "hi", *, y: float = 10.0, font: str = "Georgia") -> TextCommand:
    return TextCommand(
        text=text,
        x=5.0,
        y=y,
        size=18.0,
        font=font,
        color=Color.rgb(10, 20, 30),
        align_x="center",
        align_y="baseline",
    )


def test_label_params_flip_y_and_use_pixel_dpi() -> None:
    params = label_params(_cmd(y=10.0), window_height=600)
    assert params["y"] == 590.0
    assert params["x"] == 5.0
    assert params["dpi"] == 72
    assert params["color"] == (10, 20, 30, 255)
    assert params["anchor_x"] == "center"
    assert params["anchor_y"] == "baseline"
    assert params["font_name"] == "Georgia"


def test_label_params_leave_generic_font_to_pyglet() -> None:
    assert label_params(_cmd(font="sans-serif"), window_height=100)["font_name"] is None


class _FakeLabel:
    created: list["_FakeLabel"] = []

    def __init__(self, **params: Any) -> None:
        self.params = params
        self.position = (params["x"], params["y"], 0.0)
        self.draw_count = 0
        self.deleted = False
        _FakeLabel.created.append(self)

    def draw(self) -> None:
        self.draw_count += 1

    def delete(self) -> None:
        self.deleted = True


@pytest.fixture
def fake_pyglet(monkeypatch: pytest.MonkeyPatch) -> None:
    _FakeLabel.created = []
    monkeypatch.setattr(text_labels, "pyglet", SimpleNamespace(text=SimpleNamespace(Label=_FakeLabel)))


def test_label_cache_reuses_label_and_moves_it(fake_pyglet: None) -> None:
    cache = LabelCache(max_items=4)
    cache.draw(_cmd(y=10.0), window_height=100)
    cache.draw(_cmd(y=30.0), window_height=100)

    assert len(_FakeLabel.created) == 1
    label = _FakeLabel.created[0]
    assert label.draw_count == 2
    assert label.position == (5.0, 70.0, 0.0)


def test_label_cache_evicts_least_recently_used(fake_pyglet: None) -> None:
    cache = LabelCache(max_items=2)
    cache.draw(_cmd("a"), window_height=100)
    cache.draw(_cmd("b"), window_height=100)
    cache.draw(_cmd("a"), window_height=100)
    cache.draw(_cmd("c"), window_height=100)

    a, b, c = _FakeLabel.created
    assert len(cache) == 2
    assert b.deleted is True
    assert a.deleted is False and c.deleted is False

    cache.clear()
    assert len(cache) == 0
    assert a.deleted and c.deleted


def test_label_cache_rejects_non_positive_size() -> None:
    with pytest.raises(ValueError):
        LabelCache(max_items=0)
