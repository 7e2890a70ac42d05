from __future__ import annotations

# どこで: `src/sketchbook/interactive/gl/utils.py`。
# 何を: 描画で使う小さなユーティリティ（投影行列生成・scissor 矩形）を提供する。
# なぜ: renderer 初期化等で共有し、座標系の定義を一箇所に集約するため。

import numpy as np


def build_projection(view_width: float, view_height: float) -> "np.ndarray":
    """左上原点・y 下向きの px 座標を clip 空間へ写す正射影行列（ModernGL 用の転置済み）を返す。"""
    proj = np.array(
        [
            [2 / view_width, 0, 0, -1],
            [0, -2 / view_height, 0, 1],
            [0, 0, -1, 0],
            [0, 0, 0, 1],
        ],
        dtype="f4",
    ).T
    return proj


def canvas_scissor(
    *,
    canvas_size: tuple[int, int],
    window_size: tuple[int, int],
    framebuffer_size: tuple[int, int],
) -> tuple[int, int, int, int]:
    """ウィンドウ左上に置いたキャンバス領域を framebuffer px の (x, y, w, h) で返す。"""

    canvas_w, canvas_h = canvas_size
    win_w, win_h = window_size
    fb_w, fb_h = framebuffer_size
    sx = fb_w / max(int(win_w), 1)
    sy = fb_h / max(int(win_h), 1)
    w = int(round(min(canvas_w, win_w) * sx))
    h = int(round(min(canvas_h, win_h) * sy))
    return (0, int(fb_h) - h, w, h)
