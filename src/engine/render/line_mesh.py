"""
どこで: `engine.render` の低レベルメッシュ層。
何を: VBO（必要なら IBO）/VAO の確保・更新・解放と、三角形ごとの LINE_LOOP 描画を担当。
なぜ: GPU 転送の詳細を Renderer から切り離し、再確保や VAO の張り直しを一元化するため。
"""

from __future__ import annotations

from typing import Any

import numpy as np

# 頂点は (x, y, z, w) の float32
COMPONENTS = 4


class LineLoopMesh:
    """
    三角形列の頂点を GPU に置き、三角形ごとの線ループとして描く。
    """

    def __init__(
        self,
        ctx: Any,
        program: Any,
        # 深さ 5 の四面体（12288 頂点 ≒ 192KB）が収まる程度。必要に応じて自動拡張。
        initial_reserve: int = 256 * 1024,
        primitive_restart_index: int = 0xFFFFFFFF,
    ):
        """
        ctx: moderngl コンテキスト
        program: `in_position` 属性を持つシェーダープログラム
        initial_reserve: VBO/IBO の初期確保バイト数
        primitive_restart_index: 一括描画時に線ループを区切るインデックス値
        """
        self.ctx = ctx
        self.program = program
        self.initial_reserve = initial_reserve
        self.primitive_restart_index = primitive_restart_index

        self.vbo = ctx.buffer(reserve=initial_reserve)
        self.ibo: Any | None = None
        self.vao = self._make_vao()
        self.indexed_vao: Any | None = None

        self.vertex_count: int = 0
        self.index_count: int = 0

    def _make_vao(self, index_buffer: Any | None = None) -> Any:
        return self.ctx.vertex_array(
            self.program,
            [(self.vbo, f"{COMPONENTS}f", "in_position")],
            index_buffer=index_buffer,
        )

    # ---------- バッファ操作 ----------
    def upload(self, vertices: np.ndarray) -> None:
        """平坦化済みの頂点（float32, 4 成分ずつ）を VBO へ送る。"""
        data = np.ascontiguousarray(vertices, dtype=np.float32)
        if data.size % COMPONENTS != 0:
            raise ValueError(f"頂点配列の長さが {COMPONENTS} の倍数ではありません: {data.size}")
        if data.nbytes > self.vbo.size:
            self.vbo.release()
            self.vbo = self.ctx.buffer(reserve=max(data.nbytes, self.initial_reserve))
            # VAO は VBO が差し替わるたびに張り直す
            self.vao.release()
            self.vao = self._make_vao()
            if self.indexed_vao is not None:
                self.indexed_vao.release()
                self.indexed_vao = self._make_vao(self.ibo)
        self.vbo.orphan()
        if data.nbytes:
            self.vbo.write(data.tobytes())
        self.vertex_count = data.size // COMPONENTS

    def upload_indices(self, indices: np.ndarray) -> None:
        """一括描画用のインデックス（uint32, primitive restart 区切り）を IBO へ送る。"""
        data = np.ascontiguousarray(indices, dtype=np.uint32)
        if self.ibo is None or data.nbytes > self.ibo.size:
            if self.ibo is not None:
                self.ibo.release()
            self.ibo = self.ctx.buffer(reserve=max(data.nbytes, self.initial_reserve))
            if self.indexed_vao is not None:
                self.indexed_vao.release()
            self.indexed_vao = self._make_vao(self.ibo)
            self.ctx.primitive_restart = True  # type: ignore[attr-defined]
            self.ctx.primitive_restart_index = self.primitive_restart_index  # type: ignore[attr-defined]
        self.ibo.orphan()
        if data.nbytes:
            self.ibo.write(data.tobytes())
        self.index_count = int(data.size)

    # ---------- 描画 ----------
    def render_per_triangle(self, mode: int) -> int:
        """三角形ごとに 3 頂点の描画命令を発行する。発行回数を返す。"""
        calls = 0
        for first in range(0, self.vertex_count - self.vertex_count % 3, 3):
            self.vao.render(mode, vertices=3, first=first)
            calls += 1
        return calls

    def render_batched(self, mode: int) -> int:
        """IBO を使い 1 回の描画命令で全三角形を描く。"""
        if self.indexed_vao is None or self.index_count == 0:
            return 0
        self.indexed_vao.render(mode, vertices=self.index_count)
        return 1

    def release(self) -> None:
        """GPU のメモリを解放する（終了時に使う）"""
        self.vao.release()
        self.vbo.release()
        if self.indexed_vao is not None:
            self.indexed_vao.release()
        if self.ibo is not None:
            self.ibo.release()
