"""
どこで: tests/manual/test_sketch_windows.py。
何を: 同梱スケッチ 4 つを実ウィンドウで数フレーム描くスモークテスト。
なぜ: GL コンテキスト・pyglet テキスト・リサイズ経路を実機で短時間確認するため。
"""

from __future__ import annotations

import os
from types import ModuleType

import pytest


def _import_pyglet() -> ModuleType:
    try:
        import pyglet
    except Exception as exc:  # pragma: no cover - スキップ経路のみ
        pytest.skip(f"pyglet を import できない: {exc}")
    return pyglet


def _require_display(pyglet_mod: ModuleType) -> None:
    """最小ウィンドウが作れない環境では早期にスキップする。"""

    try:
        probe = pyglet_mod.window.Window(width=1, height=1, visible=False, caption="display probe")
    except Exception as exc:  # pragma: no cover - スキップ経路のみ
        pytest.skip(f"ディスプレイが取得できないためスキップ: {exc}")
    else:
        probe.close()


@pytest.mark.skipif(
    os.environ.get("RUN_GUI_TEST") != "1",
    reason="手動 GUI スモークは RUN_GUI_TEST=1 を指定したときだけ実行する。",
)
@pytest.mark.parametrize("name", ["countdown", "growth", "notebook", "balance"])
def test_sketch_window_draws_frames_and_resizes(name: str) -> None:
    pyglet_mod = _import_pyglet()
    _require_display(pyglet_mod)

    from sketchbook.api._sketch_resolution import resolve_sketch
    from sketchbook.interactive.runtime.sketch_window_system import SketchWindowSystem

    system = SketchWindowSystem(resolve_sketch(name))
    try:
        for _ in range(5):
            system.window.switch_to()
            system.window.dispatch_events()
            system.draw_frame()
            system.window.flip()
        assert system.canvas.commands

        if system.sketch.resizable:
            system.window.set_size(400, 300)
            system.window.dispatch_event("on_resize", 400, 300)
            system.draw_frame()
            assert system.canvas.size == (400, 300)
    finally:
        system.close()
