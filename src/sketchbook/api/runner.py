"""
どこで: `src/sketchbook/api/runner.py`。公開 API のランナー実装。
何を: pyglet + ModernGL を使い、1 つ以上のスケッチをそれぞれのウィンドウへリアルタイム描画する。
なぜ: `sketch/*.py` を実行して実際にスケッチを動かせる経路を用意するため。
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Callable

import pyglet

from sketchbook.core.runtime_config import runtime_config, set_config_path
from sketchbook.interactive.runtime.sketch_window_system import SketchWindowSystem
from sketchbook.interactive.runtime.window_loop import (
    MultiWindowLoop,
    WindowTask,
    cascade_position,
)

from ._sketch_resolution import SketchLike, resolve_sketches


def run(
    sketch: SketchLike | Sequence[SketchLike],
    *,
    config_path: str | Path | None = None,
    fps: float | None = None,
) -> None:
    """スケッチごとに pyglet ウィンドウを生成し、1 つのループで描画する。

    Parameters
    ----------
    sketch : str or Sketch or Sequence
        スケッチ名、インスタンス、またはそれらの列（列なら全て同時に開く）。
    config_path : str | Path | None
        設定ファイル（config.yaml）のパス。指定した場合は探索より優先する。
    fps : float | None
        指定時は全ウィンドウの目標フレームレートをこの値で置き換える。
        `<=0` の場合は可能な限り速く回す。

    Returns
    -------
    None
        どれかのウィンドウを閉じると制御を返す。
    """

    set_config_path(config_path)
    cfg = runtime_config()
    sketches = resolve_sketches(sketch)

    # pyglet の Window 作成前にオプションを設定する。
    # （vsync はウィンドウ作成時に参照される想定のため、ここで固定しておく）
    pyglet.options["vsync"] = False

    # `closers` は teardown 用（close 順もここで管理する）。
    closers: list[Callable[[], None]] = []
    # `tasks` はループ駆動用（イベント処理→描画→flip の対象）。
    tasks: list[WindowTask] = []
    try:
        for i, target in enumerate(sketches):
            system = SketchWindowSystem(
                target,
                position=cascade_position(i, origin=cfg.window_pos, step=cfg.window_step),
            )
            closers.append(system.close)
            tasks.append(
                WindowTask(window=system.window, draw_frame=system.draw_frame, fps=system.fps)
            )

        # --- ループの実行 ---
        # ここで複数ウィンドウを 1 つの pyglet.app.run() で回す。
        loop = MultiWindowLoop(tasks, fps_override=fps)
        loop.run()
    finally:
        # 例外でも確実に後始末する。
        # 作成順の逆で閉じることで、後に作ったウィンドウから先に破棄できる。
        for close in reversed(closers):
            close()
