# どこで: `src/sketchbook/interactive/gl/text_labels.py`。
# 何を: TextCommand を pyglet Label で描画し、生成済み Label を LRU で使い回す。
# なぜ: 毎フレーム同じ文字列を描くスケッチで Label の再レイアウトを避けるため。

from __future__ import annotations

from collections import OrderedDict
from typing import Any

import pyglet

from sketchbook.core.canvas import TextCommand

# CSS 風の総称フォント名は pyglet の既定フォントへ委ねる
_GENERIC_FONTS = frozenset({"sans-serif", "serif", "monospace"})


def label_params(cmd: TextCommand, *, window_height: float) -> dict[str, Any]:
    """TextCommand を pyglet.text.Label の引数へ変換する。

    Notes
    -----
    キャンバスは左上原点・y 下向き、pyglet は左下原点・y 上向きなので y を反転する。
    `dpi=72` でフォントサイズの単位を px と一致させる。
    """

    font_name = None if cmd.font in _GENERIC_FONTS else cmd.font
    return {
        "text": cmd.text,
        "font_name": font_name,
        "font_size": float(cmd.size),
        "x": float(cmd.x),
        "y": float(window_height) - float(cmd.y),
        "color": cmd.color.to_rgba255(),
        "anchor_x": cmd.align_x,
        "anchor_y": cmd.align_y,
        "dpi": 72,
    }


def _label_key(params: dict[str, Any]) -> tuple[Any, ...]:
    # 位置は毎回差し替えるのでキーに含めない
    return (
        params["text"],
        params["font_name"],
        params["font_size"],
        params["color"],
        params["anchor_x"],
        params["anchor_y"],
    )


class LabelCache:
    """pyglet Label の LRU キャッシュ。"""

    def __init__(self, max_items: int = 256) -> None:
        if int(max_items) <= 0:
            raise ValueError("max_items は正の値である必要がある")
        self._max_items = int(max_items)
        self._labels: OrderedDict[tuple[Any, ...], Any] = OrderedDict()

    def __len__(self) -> int:
        return len(self._labels)

    def draw(self, cmd: TextCommand, *, window_height: float) -> None:
        params = label_params(cmd, window_height=window_height)
        key = _label_key(params)
        label = self._labels.get(key)
        if label is None:
            label = pyglet.text.Label(**params)
            self._labels[key] = label
            while len(self._labels) > self._max_items:
                _, evicted = self._labels.popitem(last=False)
                evicted.delete()
        else:
            self._labels.move_to_end(key)
            label.position = (params["x"], params["y"], 0.0)
        label.draw()

    def clear(self) -> None:
        for label in self._labels.values():
            label.delete()
        self._labels.clear()
