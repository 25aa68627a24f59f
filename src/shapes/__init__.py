"""
どこで: `shapes` パッケージ。
何を: 細分化四面体（球近似）の生成関数を公開する。
なぜ: 幾何生成を描画（engine.render）から切り離し、純関数としてテスト可能にするため。
"""

from .tetrahedron import (
    SEED_VERTICES,
    divide_triangle,
    subdivide_faces,
    tetrahedron,
    tetrahedron_array,
    triangle_count,
)

__all__ = [
    "SEED_VERTICES",
    "divide_triangle",
    "tetrahedron",
    "subdivide_faces",
    "tetrahedron_array",
    "triangle_count",
]
