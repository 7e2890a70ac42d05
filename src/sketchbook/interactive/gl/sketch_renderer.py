# どこで: `src/sketchbook/interactive/gl/sketch_renderer.py`。
# 何を: DrawCommand 列をライブウィンドウへ描画する ModernGL レンダラー。
# なぜ: コンテキスト生成・三角形転送・テキスト描画を window system から分離するため。

from __future__ import annotations

from typing import Sequence

import moderngl
from pyglet.window import Window

from sketchbook.core.canvas import DrawCommand, TextCommand
from sketchbook.core.tessellate import iter_runs, tessellate
from sketchbook.interactive.gl import utils as render_utils
from sketchbook.interactive.gl.shader import Shader
from sketchbook.interactive.gl.text_labels import LabelCache
from sketchbook.interactive.gl.triangle_mesh import TriangleMesh


class SketchRenderer:
    """図形は三角形として GL で、テキストは pyglet Label で描く。"""

    def __init__(self, window: Window) -> None:
        window.switch_to()
        self.ctx = moderngl.create_context(require=410)
        self.program = Shader.create_shader(self.ctx)
        # 毎フレーム中身が変わるので 1 つだけ使い回す。
        self._mesh = TriangleMesh(self.ctx, self.program)
        self._labels = LabelCache()

    def _enable_blend(self) -> None:
        # pyglet のテキスト描画は終了時に BLEND を無効化するので図形の前に毎回戻す
        self.ctx.enable(moderngl.BLEND)
        self.ctx.blend_func = moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA

    def render(
        self,
        commands: Sequence[DrawCommand],
        *,
        canvas_size: tuple[int, int],
        window_size: tuple[int, int],
        framebuffer_size: tuple[int, int],
    ) -> None:
        """1 フレーム分のコマンドを重なり順どおりに描く。"""
        win_w, win_h = window_size
        fb_w, fb_h = framebuffer_size
        self.ctx.scissor = None
        self.ctx.viewport = (0, 0, int(fb_w), int(fb_h))
        self.ctx.clear(0.0, 0.0, 0.0, 1.0)

        # 射影はウィンドウの論理 px に合わせ、キャンバスを左上に置く。
        projection = render_utils.build_projection(float(max(win_w, 1)), float(max(win_h, 1)))
        self.program["projection"].write(projection.tobytes())
        scissor = render_utils.canvas_scissor(
            canvas_size=canvas_size,
            window_size=window_size,
            framebuffer_size=framebuffer_size,
        )

        for kind, run in iter_runs(commands):
            if kind == "text":
                for cmd in run:
                    assert isinstance(cmd, TextCommand)
                    self._labels.draw(cmd, window_height=float(win_h))
                continue
            batch = tessellate(run, canvas_size)
            if batch.vertex_count == 0:
                continue
            self._enable_blend()
            self.ctx.scissor = scissor
            self._mesh.upload(batch)
            self._mesh.vao.render(moderngl.TRIANGLES, vertices=self._mesh.vertex_count)
            self.ctx.scissor = None

    def release(self) -> None:
        """GPU リソースを解放する。"""
        self._labels.clear()
        self._mesh.release()
        self.program.release()
