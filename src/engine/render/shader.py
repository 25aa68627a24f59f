"""
どこで: `engine.render` のシェーダ定義。
何を: 同次座標の頂点を model_view/projection で変換し、単色で線を塗る GLSL プログラムを生成。
なぜ: 行列は CPU 側（glmath）で組み立て、GPU 側は掛けるだけにするため。
"""

from __future__ import annotations

from typing import Any


class Shader:
    VERTEX_SHADER = """
        #version 330 core
        in vec4 in_position;
        uniform mat4 model_view;
        uniform mat4 projection;
        void main() {
            gl_Position = projection * model_view * in_position;
        }
    """

    FRAGMENT_SHADER = """
        #version 330 core
        uniform vec4 color;
        out vec4 frag_color;
        void main() {
            frag_color = color;
        }
    """

    @classmethod
    def create_shader(cls, ctx: Any) -> Any:
        """ModernGL コンテキスト上でプログラムをコンパイル/リンクして返す。"""
        return ctx.program(vertex_shader=cls.VERTEX_SHADER, fragment_shader=cls.FRAGMENT_SHADER)


__all__ = ["Shader"]
