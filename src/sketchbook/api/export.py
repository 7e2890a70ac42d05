"""
どこで: `src/sketchbook/api/export.py`。
何を: ヘッドレス export の公開導線 `Export` を提供する。
なぜ: 対話ウィンドウを立ち上げずに、指定時刻のスケッチ 1 フレームを保存できるようにするため。
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from sketchbook.core.canvas import Canvas, DrawCommand
from sketchbook.core.clock import FixedClock
from sketchbook.core.runtime_config import set_config_path
from sketchbook.core.sketch_registry import Sketch, canvas_for
from sketchbook.export.image import export_image, frame_background

from ._sketch_resolution import SketchLike, resolve_sketch


class Export:
    """スケッチを固定時刻で `frames` フレーム描き、最後のフレームをファイルへ書き出す。

    Notes
    -----
    時計は `FixedClock`（`at` から 1/fps 秒ずつ進む）なので、同じ引数なら同じ出力になる。
    乱数を使うスケッチはインスタンスを渡すか、設定の `seed` で固定する。
    """

    def __init__(
        self,
        sketch: SketchLike,
        path: str | Path,
        *,
        at: datetime,
        elapsed_ms: float = 0.0,
        frames: int = 1,
        canvas_size: tuple[int, int] | None = None,
        config_path: str | Path | None = None,
    ) -> None:
        """export を実行する。

        Parameters
        ----------
        sketch : str or Sketch
            スケッチ名（レジストリ登録名）またはインスタンス。
        path : str or Path
            出力先パス。拡張子 `.svg` / `.png` で形式を決める。
        at : datetime
            1 フレーム目の壁時計時刻。
        elapsed_ms : float
            1 フレーム目の経過ミリ秒。
        frames : int
            描画するフレーム数（>=1）。状態を積み上げるスケッチ向け。
        canvas_size : tuple[int, int] | None
            指定時は setup 後に `window_resized` でこの寸法へ合わせる。
        config_path : str or Path or None
            設定ファイル（config.yaml）のパス。
        """
        if int(frames) < 1:
            raise ValueError("frames は 1 以上である必要がある")

        if config_path is not None:
            set_config_path(config_path)

        self.path = Path(path)
        self.sketch: Sketch = resolve_sketch(sketch)
        self.canvas: Canvas = canvas_for(self.sketch)

        clock = FixedClock(start=at, fps=float(self.sketch.fps), elapsed_ms=float(elapsed_ms))
        self.sketch.setup(self.canvas, clock.now())
        if canvas_size is not None:
            self.sketch.window_resized(self.canvas, int(canvas_size[0]), int(canvas_size[1]))

        self.commands: tuple[DrawCommand, ...] = ()
        for _ in range(int(frames)):
            self.canvas.begin_frame()
            self.sketch.draw(self.canvas, clock.now())
            self.commands = self.canvas.commands
            clock.tick()

        self.output_path = export_image(
            self.commands,
            self.path,
            canvas_size=self.canvas.size,
            background_color=frame_background(self.commands),
        )
