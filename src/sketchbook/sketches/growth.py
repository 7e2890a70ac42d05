"""
どこで: `src/sketchbook/sketches/growth.py`。
何を: 「木が育つ時計」スケッチ。時 → 幹の高さ、分 → 葉の枚数、秒 → 葉の揺れ。
なぜ: 木の状態を TreeState に閉じ込め、時刻を入力とする純粋な更新関数で進めるため。
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

import numpy as np

from sketchbook.core.canvas import Canvas
from sketchbook.core.clock import FrameTime
from sketchbook.core.color import Color
from sketchbook.core.sketch_registry import sketch

GROUND_HEIGHT = 20
TRUNK_WIDTH = 20
LEAF_SPREAD_X = 30.0
LEAF_BAND = (10.0, 30.0)
CAPTION = "Knowledge grows with every moment."


@dataclass(frozen=True, slots=True)
class GrowthOptions:
    max_leaves: int = 100
    base_height: float = 100.0
    leaf_size: float = 10.0
    growth_rate: float = 0.5
    leaf_growth_rate: float = 1.0
    reset_leaves_on_rollover: bool = False
    max_canvas: int = 800
    fps: float = 60.0
    seed: int | None = None

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> GrowthOptions:
        base = cls()
        seed = options.get("seed", base.seed)
        return cls(
            max_leaves=int(options.get("max_leaves", base.max_leaves)),
            base_height=float(options.get("base_height", base.base_height)),
            leaf_size=float(options.get("leaf_size", base.leaf_size)),
            growth_rate=float(options.get("growth_rate", base.growth_rate)),
            leaf_growth_rate=float(options.get("leaf_growth_rate", base.leaf_growth_rate)),
            reset_leaves_on_rollover=bool(
                options.get("reset_leaves_on_rollover", base.reset_leaves_on_rollover)
            ),
            max_canvas=int(options.get("max_canvas", base.max_canvas)),
            fps=float(options.get("fps", base.fps)),
            seed=None if seed is None else int(seed),
        )


@dataclass(frozen=True, slots=True)
class Leaf:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class TreeState:
    """木の状態。leaves は追加順を保つ。"""

    trunk_height: float
    leaves: tuple[Leaf, ...] = ()
    last_minute: int | None = None


def trunk_height(hour: int, options: GrowthOptions) -> float:
    """幹の高さ（1 時間ごとに growth_rate × 10 px 伸びる）。"""

    return options.base_height + hour * options.growth_rate * 10.0


def leaf_target(minute: int, options: GrowthOptions) -> int:
    """分に応じた葉の目標枚数。端数のある成長率では切り上げる。"""

    return min(math.ceil(int(minute) * options.leaf_growth_rate), options.max_leaves)


def initial_tree(options: GrowthOptions) -> TreeState:
    return TreeState(trunk_height=options.base_height)


def grow_leaves(
    state: TreeState,
    minute: int,
    rng: np.random.Generator,
    width: int,
    height: int,
    options: GrowthOptions,
) -> TreeState:
    """目標枚数に達するまで幹の上の帯に葉を追加する。既存の葉は動かさない。"""

    missing = leaf_target(minute, options) - len(state.leaves)
    if missing <= 0:
        return state
    xs = rng.uniform(width / 2.0 - LEAF_SPREAD_X, width / 2.0 + LEAF_SPREAD_X, size=missing)
    ys = height - state.trunk_height - rng.uniform(LEAF_BAND[0], LEAF_BAND[1], size=missing)
    added = tuple(Leaf(float(x), float(y)) for x, y in zip(xs, ys))
    return replace(state, leaves=state.leaves + added)


def jitter_leaves(state: TreeState, second: int, rng: np.random.Generator) -> TreeState:
    """偶数秒のとき、各葉の y を ±1 px の範囲で揺らす。"""

    if second % 2 != 0 or not state.leaves:
        return state
    dy = rng.uniform(-1.0, 1.0, size=len(state.leaves))
    leaves = tuple(Leaf(leaf.x, leaf.y + float(d)) for leaf, d in zip(state.leaves, dy))
    return replace(state, leaves=leaves)


def update_tree(
    state: TreeState,
    now: FrameTime,
    rng: np.random.Generator,
    width: int,
    height: int,
    options: GrowthOptions,
) -> TreeState:
    """1 フレーム分の木の更新（幹 → 分の巻き戻り検出 → 葉の追加）。"""

    next_state = replace(state, trunk_height=trunk_height(now.hour, options))
    rolled_over = state.last_minute is not None and now.minute < state.last_minute
    if rolled_over and options.reset_leaves_on_rollover:
        next_state = replace(next_state, leaves=())
    next_state = grow_leaves(next_state, now.minute, rng, width, height, options)
    return replace(next_state, last_minute=now.minute)


class GrowthClock:
    """木が育つ時計のスケッチ。"""

    name = "growth"
    resizable = True

    def __init__(
        self,
        options: GrowthOptions | None = None,
        *,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.options = options or GrowthOptions()
        self.fps = float(self.options.fps)
        self.canvas_size = (self.options.max_canvas, self.options.max_canvas)
        self.rng = rng if rng is not None else np.random.default_rng(self.options.seed)
        self.state = initial_tree(self.options)

    def setup(self, canvas: Canvas, now: FrameTime) -> None:
        canvas.text_font("Georgia")

    def draw(self, canvas: Canvas, now: FrameTime) -> None:
        w, h = canvas.width, canvas.height
        canvas.background(Color.hsb(200, 80, 90))

        self.state = update_tree(self.state, now, self.rng, w, h, self.options)

        # p5 既定の黒 1px 輪郭のまま描く
        ground_y = h - GROUND_HEIGHT
        canvas.fill(Color.hsb(30, 60, 40))
        canvas.rect(
            w / 2.0 - TRUNK_WIDTH / 2.0,
            ground_y - self.state.trunk_height,
            TRUNK_WIDTH,
            self.state.trunk_height,
        )

        canvas.fill(Color.hsb(120, 80, 50))
        size = self.options.leaf_size
        for leaf in self.state.leaves:
            canvas.ellipse(leaf.x, leaf.y, size, size)

        canvas.fill(Color.hsb(120, 60, 40))
        canvas.rect(0, ground_y, w, GROUND_HEIGHT)

        canvas.push()
        canvas.text_align("left")
        canvas.text_size(16)
        canvas.fill(Color.hsb(30, 20, 20))
        canvas.text(CAPTION, 20, h - 40)
        canvas.pop()

        canvas.push()
        canvas.text_align("right")
        canvas.text_size(14)
        canvas.fill(Color.hsb(30, 20, 20))
        canvas.text(now.hms_text(), w - 20, h - 40)
        canvas.pop()

        self.state = jitter_leaves(self.state, now.second, self.rng)

    def window_resized(self, canvas: Canvas, width: int, height: int) -> None:
        canvas.resize(width, height)


@sketch("growth")
def growth(options: Mapping[str, Any]) -> GrowthClock:
    return GrowthClock(GrowthOptions.from_mapping(options))


__all__ = [
    "GrowthClock",
    "GrowthOptions",
    "Leaf",
    "TreeState",
    "grow_leaves",
    "initial_tree",
    "jitter_leaves",
    "leaf_target",
    "trunk_height",
    "update_tree",
]
