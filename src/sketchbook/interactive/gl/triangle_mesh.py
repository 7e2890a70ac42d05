"""
どこで: `src/sketchbook/interactive/gl/triangle_mesh.py`。
何を: VBO/VAO の確保・更新・解放を担当し、描画可能な TriangleMesh を管理。
なぜ: GPU 転送の詳細を Renderer から切り離し、再確保や VAO の張り直しを一元化するため。
"""

from __future__ import annotations

from typing import Any

import numpy as np

from sketchbook.core.tessellate import TriangleBatch

# 1 頂点 = x, y, r, g, b, a（float32）
_VERTEX_FORMAT = "2f 4f"
_VERTEX_ATTRS = ("in_vert", "in_color")


class TriangleMesh:
    """
    GPU に三角形の頂点データを送り込む作業を管理
    """

    def __init__(
        self,
        ctx: Any,
        program: Any,
        # 初期 GPU メモリ確保量（既定: 1MB）。必要に応じて自動拡張。
        initial_reserve: int = 1024 * 1024,
    ):
        self.ctx = ctx
        self.program = program
        self.initial_reserve = initial_reserve

        self.vbo = ctx.buffer(reserve=initial_reserve, dynamic=True)
        self.vao = self._build_vao()
        self.vertex_count: int = 0

    def _build_vao(self) -> Any:
        return self.ctx.vertex_array(
            self.program, [(self.vbo, _VERTEX_FORMAT, *_VERTEX_ATTRS)]
        )

    def _ensure_capacity(self, vbo_size: int) -> None:
        """データが大きくなったら GPU のバッファを再確保"""
        if vbo_size <= self.vbo.size:
            return
        self.vbo.release()
        self.vbo = self.ctx.buffer(reserve=max(vbo_size, self.initial_reserve), dynamic=True)
        # VAO は VBO が差し替わるときだけ張り直す。
        self.vao.release()
        self.vao = self._build_vao()

    def upload(self, batch: TriangleBatch) -> None:
        """三角形列を GPU へ送り込む"""
        data = np.ascontiguousarray(batch.interleaved(), dtype=np.float32)
        self._ensure_capacity(data.nbytes)
        self.vbo.orphan()
        self.vbo.write(data)
        self.vertex_count = int(batch.vertex_count)

    def release(self) -> None:
        """GPU のメモリを解放する（終了時に使う）"""
        self.vbo.release()
        self.vao.release()
