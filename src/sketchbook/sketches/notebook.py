"""
どこで: `src/sketchbook/sketches/notebook.py`。
何を: タイプライター風ノートの時計スケッチ。分が変わるたびに 1 行増え、
    秒ごとに 1 文字ずつフレーズがタイプされる。
なぜ: 分境界の検出（エッジトリガ）を明示的な状態遷移関数にし、単独でテストできるようにするため。
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from sketchbook.core.canvas import Canvas
from sketchbook.core.clock import FrameTime
from sketchbook.core.color import Color
from sketchbook.core.sketch_registry import sketch

LINE_HEIGHT = 40
MARGIN = 50
TITLE = "Notebook of Time"
CURSOR = "|"
PHRASES: tuple[str, ...] = (
    "Focus builds progress.",
    "Keep going.",
    "Learning in motion.",
    "Write your time.",
    "One thought at a time.",
)


@dataclass(frozen=True, slots=True)
class NotebookState:
    lines: tuple[str, ...] = ()
    current_line_index: int = 0
    last_minute: int = -1
    cursor_visible: bool = True


def phrase_for_line(index: int) -> str:
    return PHRASES[index % len(PHRASES)]


def observe_minute(state: NotebookState, minute: int) -> NotebookState:
    """観測した分が前回と異なれば空行を 1 行追加し、その行を現在行にする。"""

    if minute == state.last_minute:
        return state
    lines = state.lines + ("",)
    return replace(
        state,
        lines=lines,
        current_line_index=len(lines) - 1,
        last_minute=int(minute),
    )


def type_current_line(state: NotebookState, second: int) -> NotebookState:
    """現在行を、割り当てフレーズの先頭 min(second, 長さ) 文字にする。"""

    if not state.lines:
        return state
    idx = state.current_line_index
    phrase = phrase_for_line(idx)
    typed = phrase[: min(max(int(second), 0), len(phrase))]
    if state.lines[idx] == typed:
        return state
    lines = state.lines[:idx] + (typed,) + state.lines[idx + 1 :]
    return replace(state, lines=lines)


def step_notebook(state: NotebookState, now: FrameTime) -> NotebookState:
    return type_current_line(observe_minute(state, now.minute), now.second)


def toggle_cursor(state: NotebookState, frame_count: int, interval: int) -> NotebookState:
    """frame_count が interval の倍数のときカーソル表示を反転する。"""

    if interval <= 0:
        raise ValueError(f"interval は正の値である必要がある: got={interval!r}")
    if frame_count % interval != 0:
        return state
    return replace(state, cursor_visible=not state.cursor_visible)


def displayed_lines(state: NotebookState) -> list[str]:
    """描画する各行の文字列（現在行にはカーソル付き）を返す。"""

    out: list[str] = []
    for i, text in enumerate(state.lines):
        if (
            i == state.current_line_index
            and state.cursor_visible
            and len(text) < len(phrase_for_line(i))
        ):
            text += CURSOR
        out.append(text)
    return out


@dataclass(frozen=True, slots=True)
class NotebookOptions:
    max_canvas: int = 800
    fps: float = 30.0
    blink_interval_frames: int = 30

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> NotebookOptions:
        base = cls()
        return cls(
            max_canvas=int(options.get("max_canvas", base.max_canvas)),
            fps=float(options.get("fps", base.fps)),
            blink_interval_frames=int(
                options.get("blink_interval_frames", base.blink_interval_frames)
            ),
        )


class TypewriterNotebook:
    """タイプライターノートのスケッチ。"""

    name = "notebook"
    resizable = True

    def __init__(self, options: NotebookOptions | None = None) -> None:
        self.options = options or NotebookOptions()
        self.fps = float(self.options.fps)
        self.canvas_size = (self.options.max_canvas, self.options.max_canvas)
        self.state = NotebookState()

    def setup(self, canvas: Canvas, now: FrameTime) -> None:
        canvas.text_font("Georgia")
        canvas.text_size(18)

    def draw(self, canvas: Canvas, now: FrameTime) -> None:
        w, h = canvas.width, canvas.height
        canvas.background(Color.rgb(240, 230, 220))

        canvas.stroke(Color.gray(200))
        for y in range(MARGIN, h, LINE_HEIGHT):
            canvas.line(MARGIN, y, w - MARGIN, y)

        canvas.fill(Color.gray(0))
        canvas.text_align("center")
        canvas.text_size(28)
        canvas.text(TITLE, w / 2.0, MARGIN - 20)
        canvas.text_size(18)

        self.state = step_notebook(self.state, now)

        canvas.fill(Color.gray(0))
        canvas.text_align("left")
        for i, text in enumerate(displayed_lines(self.state)):
            canvas.text(text, MARGIN, MARGIN + (i + 1) * LINE_HEIGHT)

        canvas.push()
        canvas.text_align("right")
        canvas.text_size(14)
        canvas.fill(Color.gray(0))
        canvas.text(now.hms_text(), w - MARGIN, h - MARGIN)
        canvas.pop()

        self.state = toggle_cursor(
            self.state, now.frame_count, self.options.blink_interval_frames
        )

    def window_resized(self, canvas: Canvas, width: int, height: int) -> None:
        canvas.resize(width, height)


@sketch("notebook")
def notebook(options: Mapping[str, Any]) -> TypewriterNotebook:
    return TypewriterNotebook(NotebookOptions.from_mapping(options))


__all__ = [
    "PHRASES",
    "NotebookOptions",
    "NotebookState",
    "TypewriterNotebook",
    "displayed_lines",
    "observe_minute",
    "phrase_for_line",
    "step_notebook",
    "toggle_cursor",
    "type_current_line",
]
