# どこで: `src/sketchbook/interactive/draw_window.py`。
# 何を: スケッチ 1 つ分の pyglet ウィンドウ生成を行う。
# なぜ: interactive 依存をこの層に閉じ込め、core/export をヘッドレスに保つため。

from __future__ import annotations

import pyglet
from pyglet.gl import Config
from pyglet.window import Window


def create_sketch_window(
    *,
    caption: str,
    canvas_size: tuple[int, int],
    resizable: bool,
) -> Window:
    """キャンバス寸法のウィンドウを生成する。"""
    # 弧や楕円の縁を滑らかにするために MSAA を有効化
    config = Config(double_buffer=True, sample_buffers=1, samples=4)  # type: ignore[abstract]
    canvas_w, canvas_h = canvas_size
    window = pyglet.window.Window(  # type: ignore[abstract]
        width=int(canvas_w),
        height=int(canvas_h),
        resizable=bool(resizable),
        caption=str(caption),
        config=config,
    )
    return window
