# どこで: `src/sketchbook/interactive/gl/shader.py`。
# 何を: 頂点色付き三角形を描くシェーダプログラムを生成する。
# なぜ: シェーダソースを renderer から分離し、差し替えやすくするため。

from __future__ import annotations

from typing import Any

VERTEX_SHADER = """
#version 410
uniform mat4 projection;
in vec2 in_vert;
in vec4 in_color;
out vec4 v_color;
void main() {
    v_color = in_color;
    gl_Position = projection * vec4(in_vert, 0.0, 1.0);
}
"""

FRAGMENT_SHADER = """
#version 410
in vec4 v_color;
out vec4 frag_color;
void main() {
    frag_color = v_color;
}
"""


class Shader:
    @staticmethod
    def create_shader(ctx: Any) -> Any:
        """ModernGL の Program を生成して返す。"""
        return ctx.program(vertex_shader=VERTEX_SHADER, fragment_shader=FRAGMENT_SHADER)
