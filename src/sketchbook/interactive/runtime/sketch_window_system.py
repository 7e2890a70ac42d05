# どこで: `src/sketchbook/interactive/runtime/sketch_window_system.py`。
# 何を: 1 つのスケッチを 1 つのウィンドウへ描画するサブシステムを提供する。
# なぜ: `src/sketchbook/api/runner.py` の `run()` を「配線」に寄せ、描画責務を独立させるため。

from __future__ import annotations

import logging
import time
from pathlib import Path

from pyglet.window import key

from sketchbook.core.canvas import DrawCommand
from sketchbook.core.clock import RealTimeClock
from sketchbook.core.sketch_registry import Sketch, canvas_for
from sketchbook.export.image import (
    default_png_output_path,
    default_svg_output_path,
    frame_background,
    png_output_size,
    rasterize_svg_to_png,
)
from sketchbook.export.svg import export_svg
from sketchbook.interactive.draw_window import create_sketch_window
from sketchbook.interactive.gl.sketch_renderer import SketchRenderer

_logger = logging.getLogger(__name__)

# pyglet のキーシンボル → スケッチへ渡すキー名
_FORWARDED_KEYS = {key.SPACE: "space"}


class SketchWindowSystem:
    """スケッチ 1 つ分のウィンドウ・キャンバス・時計を束ねる。"""

    def __init__(self, target: Sketch, *, position: tuple[int, int] | None = None) -> None:
        """ウィンドウと renderer を初期化し、スケッチの setup を呼ぶ。"""

        self._sketch = target
        self.canvas = canvas_for(target)

        # 描画用の pyglet window を作成し、その window の OpenGL コンテキストに紐づく renderer を作る。
        self.window = create_sketch_window(
            caption=target.name,
            canvas_size=self.canvas.size,
            resizable=bool(target.resizable),
        )
        if position is not None:
            self.window.set_location(int(position[0]), int(position[1]))
        self._renderer = SketchRenderer(self.window)

        self._svg_output_path = default_svg_output_path(target.name)
        self._png_output_path = default_png_output_path(target.name)
        self._last_commands: tuple[DrawCommand, ...] = ()
        self._pending_png_save = False
        self.window.push_handlers(
            on_key_press=self._on_key_press,
            on_resize=self._on_resize,
        )

        # elapsed_ms の基準時刻。
        self._clock = RealTimeClock(start_time=time.perf_counter())
        target.setup(self.canvas, self._clock.now())

    @property
    def sketch(self) -> Sketch:
        return self._sketch

    @property
    def fps(self) -> float:
        return float(self._sketch.fps)

    def _on_key_press(self, symbol: int, _modifiers: int) -> None:
        if symbol == key.S:
            path = self.save_svg()
            print(f"Saved SVG: {path}")
            return
        if symbol == key.P:
            self._pending_png_save = True
            return
        name = _FORWARDED_KEYS.get(symbol)
        if name is None:
            return
        handler = getattr(self._sketch, "key_pressed", None)
        if callable(handler):
            handler(name, self._clock.now())

    def _on_resize(self, width: int, height: int) -> None:
        # pyglet 既定の on_resize も走らせるため EVENT_HANDLED は返さない。
        self._sketch.window_resized(self.canvas, int(width), int(height))

    def save_svg(self) -> Path:
        """最後に描画したフレームを SVG として保存し、保存先パスを返す。"""
        return export_svg(
            self._last_commands,
            self._svg_output_path,
            canvas_size=self.canvas.size,
        )

    def save_png(self) -> Path:
        """最後に描画したフレームを SVG 経由で PNG として保存する。"""
        svg_path = self.save_svg()
        return rasterize_svg_to_png(
            svg_path,
            self._png_output_path,
            output_size=png_output_size(self.canvas.size),
            background_color=frame_background(self._last_commands),
        )

    def _framebuffer_size(self) -> tuple[int, int]:
        getter = getattr(self.window, "get_framebuffer_size", None)
        if callable(getter):
            w, h = getter()
            return int(w), int(h)
        return int(self.window.width), int(self.window.height)

    def draw_frame(self) -> None:
        """1 フレーム分の描画を行う（`flip()` は呼ばない）。"""

        # 注: 呼び出し側（pyglet.window.Window.draw）が事前に self.window.switch_to() 済みである前提。
        self._renderer.ctx.screen.use()

        canvas = self.canvas
        canvas.begin_frame()
        now = self._clock.now()
        self._sketch.draw(canvas, now)
        self._last_commands = canvas.commands

        self._renderer.render(
            self._last_commands,
            canvas_size=canvas.size,
            window_size=(int(self.window.width), int(self.window.height)),
            framebuffer_size=self._framebuffer_size(),
        )
        self._clock.tick()

        if self._pending_png_save:
            self._pending_png_save = False
            try:
                png_path = self.save_png()
                print(f"Saved PNG: {png_path}")
            except Exception as e:
                _logger.exception("Failed to save PNG")
                print(f"Failed to save PNG: {e}")

    def close(self) -> None:
        """GPU / window 資源を解放する。"""

        # renderer が保持している GPU リソースを破棄してから window を閉じる。
        self._renderer.release()
        self.window.close()
