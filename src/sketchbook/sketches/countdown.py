"""
どこで: `src/sketchbook/sketches/countdown.py`。
何を: 集中タイマー（カウントダウン）をリングで表すスケッチ。
    残り時間比に応じて色相を赤→緑で補間した進捗弧と、MM:SS・状態メッセージを描く。
なぜ: 経過時間 → 見た目の写像を純粋関数として切り出し、単体でテストできるようにするため。
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from sketchbook.core.canvas import Canvas
from sketchbook.core.clock import FrameTime
from sketchbook.core.color import Color, lerp
from sketchbook.core.sketch_registry import sketch

HALF_PI = math.pi / 2.0
TWO_PI = 2.0 * math.pi


class TimerStatus(Enum):
    RUNNING = "running"
    WARNING = "warning"
    FINISHED = "finished"


STATUS_MESSAGES: dict[TimerStatus, str] = {
    TimerStatus.FINISHED: "You did it!",
    TimerStatus.WARNING: "Hang on, you're almost there",
    TimerStatus.RUNNING: "Stay in the zone ✨",
}


@dataclass(frozen=True, slots=True)
class TimerState:
    """カウントダウンの状態。

    Notes
    -----
    一時停止中は `paused_elapsed_ms` が経過時間として凍結される。
    再開時は `start_ms` を再開時刻に付け替え、凍結分を足し込む。
    """

    total_duration_ms: float
    start_ms: float
    paused_elapsed_ms: float = 0.0
    is_paused: bool = False


def start_timer(total_minutes: float, now_ms: float) -> TimerState:
    """now_ms から total_minutes 分のカウントダウンを開始する。"""

    total_ms = float(total_minutes) * 60.0 * 1000.0
    if total_ms <= 0:
        raise ValueError(f"total_minutes は正の値である必要がある: got={total_minutes!r}")
    return TimerState(total_duration_ms=total_ms, start_ms=float(now_ms))


def elapsed_ms(state: TimerState, now_ms: float) -> float:
    if state.is_paused:
        return state.paused_elapsed_ms
    return (float(now_ms) - state.start_ms) + state.paused_elapsed_ms


def remaining_ms(state: TimerState, now_ms: float) -> float:
    """残りミリ秒を [0, total] にクランプして返す。"""

    rem = state.total_duration_ms - elapsed_ms(state, now_ms)
    return min(max(rem, 0.0), state.total_duration_ms)


def remaining_ratio(state: TimerState, now_ms: float) -> float:
    """残り時間比（1: 開始直後、0: 終了）を返す。"""

    return remaining_ms(state, now_ms) / state.total_duration_ms


def pause_timer(state: TimerState, now_ms: float) -> TimerState:
    if state.is_paused:
        return state
    return replace(state, is_paused=True, paused_elapsed_ms=elapsed_ms(state, now_ms))


def resume_timer(state: TimerState, now_ms: float) -> TimerState:
    if not state.is_paused:
        return state
    return replace(state, is_paused=False, start_ms=float(now_ms))


def format_mmss(rem_ms: float) -> str:
    """残りミリ秒を `MM:SS`（秒は切り捨て）に整形する。"""

    total_seconds = int(math.floor(max(float(rem_ms), 0.0) / 1000.0))
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"


def timer_status(rem_ms: float, warning_ms: float) -> TimerStatus:
    if rem_ms <= 0:
        return TimerStatus.FINISHED
    if rem_ms <= warning_ms:
        return TimerStatus.WARNING
    return TimerStatus.RUNNING


def ring_hue(ratio: float) -> float:
    """残り時間比から色相を返す（0 → 赤 0°, 1 → 緑 120°）。"""

    return lerp(0.0, 120.0, ratio)


@dataclass(frozen=True, slots=True)
class RingLayout:
    cx: float
    cy: float
    outer_radius: float
    ring_thickness: float
    inner_radius: float


def ring_layout(width: int, height: int) -> RingLayout:
    outer = min(width, height) * 0.38
    thickness = max(10.0, outer * 0.14)
    return RingLayout(
        cx=width / 2.0,
        cy=height / 2.0,
        outer_radius=outer,
        ring_thickness=thickness,
        inner_radius=outer - thickness * 0.6,
    )


@dataclass(frozen=True, slots=True)
class CountdownOptions:
    total_minutes: float = 25.0
    warning_minutes: float = 5.0
    max_canvas: int = 800
    fps: float = 60.0

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> CountdownOptions:
        base = cls()
        return cls(
            total_minutes=float(options.get("total_minutes", base.total_minutes)),
            warning_minutes=float(options.get("warning_minutes", base.warning_minutes)),
            max_canvas=int(options.get("max_canvas", base.max_canvas)),
            fps=float(options.get("fps", base.fps)),
        )


class CountdownRing:
    """カウントダウンリングのスケッチ。"""

    name = "countdown"
    resizable = True

    def __init__(self, options: CountdownOptions | None = None) -> None:
        self.options = options or CountdownOptions()
        self.fps = float(self.options.fps)
        self.canvas_size = (self.options.max_canvas, self.options.max_canvas)
        self.state: TimerState | None = None

    def setup(self, canvas: Canvas, now: FrameTime) -> None:
        canvas.text_font("Helvetica")
        canvas.text_align("center", "center")
        self.state = start_timer(self.options.total_minutes, now.elapsed_ms)

    def key_pressed(self, key: str, now: FrameTime) -> None:
        """SPACE で一時停止/再開を切り替える。"""

        if key != "space" or self.state is None:
            return
        if self.state.is_paused:
            self.state = resume_timer(self.state, now.elapsed_ms)
        else:
            self.state = pause_timer(self.state, now.elapsed_ms)

    def draw(self, canvas: Canvas, now: FrameTime) -> None:
        state = self.state
        if state is None:
            raise RuntimeError("setup() より前に draw() が呼ばれた")

        rem = remaining_ms(state, now.elapsed_ms)
        ratio = rem / state.total_duration_ms
        warning_ms = self.options.warning_minutes * 60.0 * 1000.0

        canvas.background(Color.hsb(0, 0, 98))
        layout = ring_layout(canvas.width, canvas.height)
        diameter = layout.outer_radius * 2.0

        # 背景のトラック
        canvas.no_fill()
        canvas.stroke(Color.hsb(220, 8, 95, 80))
        canvas.stroke_weight(layout.ring_thickness)
        canvas.stroke_cap("square")
        canvas.arc(layout.cx, layout.cy, diameter, diameter, 0.0, TWO_PI)

        # 残り時間の弧（真上から時計回り）
        start_angle = -HALF_PI
        canvas.stroke(Color.hsb(ring_hue(ratio), 80, 75, 220))
        canvas.stroke_cap("round")
        canvas.arc(layout.cx, layout.cy, diameter, diameter, start_angle, start_angle + TWO_PI * ratio)

        canvas.no_stroke()
        canvas.fill(Color.hsb(0, 0, 100))
        canvas.ellipse(layout.cx, layout.cy, layout.inner_radius * 2.0, layout.inner_radius * 2.0)

        canvas.fill(Color.hsb(0, 0, 10))
        time_size = max(20.0, layout.inner_radius * 0.5)
        canvas.text_size(time_size)
        canvas.text(format_mmss(rem), layout.cx, layout.cy)

        canvas.text_size(max(12.0, time_size * 0.28))
        canvas.fill(Color.hsb(0, 0, 30))
        message = STATUS_MESSAGES[timer_status(rem, warning_ms)]
        canvas.text(message, layout.cx, layout.cy + layout.inner_radius * 0.6)

    def window_resized(self, canvas: Canvas, width: int, height: int) -> None:
        canvas.resize(width, height)


@sketch("countdown")
def countdown(options: Mapping[str, Any]) -> CountdownRing:
    return CountdownRing(CountdownOptions.from_mapping(options))


__all__ = [
    "STATUS_MESSAGES",
    "CountdownOptions",
    "CountdownRing",
    "RingLayout",
    "TimerState",
    "TimerStatus",
    "elapsed_ms",
    "format_mmss",
    "pause_timer",
    "remaining_ms",
    "remaining_ratio",
    "resume_timer",
    "ring_hue",
    "ring_layout",
    "start_timer",
    "timer_status",
]
