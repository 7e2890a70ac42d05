# どこで: `src/sketchbook/interactive/runtime/window_loop.py`。
# 何を: pyglet の複数ウィンドウを 1 つの app loop（`pyglet.app.run()`）で、ウィンドウごとの fps で回す。
# なぜ: スケッチごとに目標フレームレートが違っても、イベント配送は pyglet に一本化するため。

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import pyglet


@dataclass(frozen=True, slots=True)
class WindowTask:
    """1つの pyglet window と「flip しない描画関数」を束ねる。"""

    # 注: pyglet の Window 型は環境/バージョン差があるため Any に寄せる。
    window: Any

    # 1フレーム分の描画処理（back buffer へ描くだけ）。
    # `switch_to()` / `flip()` は pyglet（`Window.draw()`）が担当する前提。
    draw_frame: Callable[[], None]

    # 目標フレームレート。`<=0` はスロットリング無し。
    fps: float = 60.0


def frame_interval(fps: float) -> float | None:
    """fps からスケジュール間隔（秒）を返す。`fps<=0` は None（毎ループ）。"""

    fps = float(fps)
    if fps <= 0:
        return None
    return 1.0 / fps


def cascade_position(
    index: int,
    *,
    origin: tuple[int, int],
    step: tuple[int, int],
) -> tuple[int, int]:
    """i 番目のウィンドウ位置（origin から step ずつずらす）を返す。"""

    return (
        int(origin[0]) + int(index) * int(step[0]),
        int(origin[1]) + int(index) * int(step[1]),
    )


class MultiWindowLoop:
    """複数ウィンドウを同一ループで回す。

    `draw_frame()` は各ウィンドウの back buffer へ描画するだけにし、`flip()` は pyglet が行う。
    """

    def __init__(
        self,
        tasks: list[WindowTask],
        *,
        fps_override: float | None = None,
    ) -> None:
        """ループを初期化する。

        Parameters
        ----------
        tasks : list[WindowTask]
            描画したいウィンドウと描画処理。各タスクの fps で個別にスケジュールする。
        fps_override : float | None
            指定時は全タスクの fps をこの値で置き換える。
        """

        self._tasks = list(tasks)
        self._fps_override = None if fps_override is None else float(fps_override)

    def _fps_for(self, task: WindowTask) -> float:
        if self._fps_override is not None:
            return self._fps_override
        return float(task.fps)

    def run(self) -> None:
        """ウィンドウが閉じられるまでループを実行する。"""

        tasks = list(self._tasks)

        def request_exit(*_: object) -> None:
            # pyglet の on_close から呼ばれるコールバックは引数が来る場合があるため *args を受ける。
            pyglet.app.exit()

        # どれかのウィンドウを閉じたら、ループ全体を止める。
        for task in tasks:
            task.window.push_handlers(on_close=request_exit)
            task.window.push_handlers(on_draw=task.draw_frame)

        def make_drawer(task: WindowTask) -> Callable[[float], None]:
            def draw_one(dt: float) -> None:
                # 閉じられたウィンドウへ draw すると例外になり得るため、開いているものだけ描く。
                if task.window not in pyglet.app.windows:
                    return
                task.window.draw(dt)

            return draw_one

        scheduled: list[Callable[[float], None]] = []
        for task in tasks:
            drawer = make_drawer(task)
            interval = frame_interval(self._fps_for(task))
            if interval is None:
                pyglet.clock.schedule(drawer)
            else:
                pyglet.clock.schedule_interval(drawer, interval)
            scheduled.append(drawer)

        try:
            pyglet.app.run(interval=None)
        finally:
            for drawer in scheduled:
                pyglet.clock.unschedule(drawer)
