"""
どこで: `engine.render` の高レベル描画。
何を: ViewerState の三角形バッファを平坦化して GPU に転送し、毎フレーム model_view/projection を
      書き込んで三角形ごとの線ループ（ワイヤーフレーム）を描画。
なぜ: 毎フレームの uniform 更新/描画と、深さ変更時だけの再アップロードを一箇所に集約するため。
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import moderngl as mgl
import numpy as np

from glmath import flatten

from ..core.app_state import ViewerState
from ..core.tickable import Tickable
from .line_mesh import LineLoopMesh
from .shader import Shader

PRIMITIVE_RESTART_INDEX = 0xFFFFFFFF


class WireframeRenderer(Tickable):
    """
    ViewerState のバッファ版数を監視し、変化したときだけ頂点を GPU に送り直す。
    描画は読み取りのみで、状態を書き換えない。
    """

    def __init__(
        self,
        mgl_context: Any,
        state: ViewerState,
        line_color: tuple[float, float, float, float] = (0.0, 1.0, 0.0, 1.0),
        batched: bool | None = None,
    ):
        self.ctx = mgl_context
        self.state = state
        self._logger = logging.getLogger(__name__)

        from common.settings import get as _get_settings

        settings = _get_settings()
        self._batched = bool(settings.BATCHED_DRAW) if batched is None else bool(batched)
        self._upload_debug = bool(settings.UPLOAD_DEBUG)

        self.line_program = Shader.create_shader(mgl_context)
        self.line_program["color"].value = tuple(float(c) for c in line_color)
        self.gpu = LineLoopMesh(
            ctx=mgl_context,
            program=self.line_program,
            primitive_restart_index=PRIMITIVE_RESTART_INDEX,
        )
        self._uploaded_version: int = -1
        self._last_vertex_count: int = 0
        self._last_triangle_count: int = 0
        self._uploads: int = 0
        self._last_draw_calls: int = 0

        # 最初のフレームを待たずに現在のバッファを送っておく
        self.tick(0.0)

    # --------------------------------------------------------------------- #
    # Tickable                                                               #
    # --------------------------------------------------------------------- #
    def tick(self, dt: float) -> None:
        """バッファが作り直されていれば GPU へ再転送する。"""
        if self.state.buffer.version != self._uploaded_version:
            self._upload_buffer()

    # --------------------------------------------------------------------- #
    # Public drawing API                                                    #
    # --------------------------------------------------------------------- #
    def draw(self) -> None:
        """行列 uniform を更新し、三角形ごとに LINE_LOOP で描画する。"""
        self._write_matrices()
        if self.gpu.vertex_count == 0:
            self._last_draw_calls = 0
            return
        if self._batched:
            self._last_draw_calls = self.gpu.render_batched(mgl.LINE_LOOP)
        else:
            self._last_draw_calls = self.gpu.render_per_triangle(mgl.LINE_LOOP)

    def release(self) -> None:
        """GPU リソースを解放。"""
        self.gpu.release()

    def set_line_color(self, rgba: Sequence[float]) -> None:
        """線色（RGBA 0–1）を即時更新する。"""
        r, g, b, a = (float(c) for c in rgba)
        self.line_program["color"].value = (r, g, b, a)

    # 終了時ログ用: 直近アップロードの頂点/三角形数
    def get_last_counts(self) -> tuple[int, int]:
        return int(self._last_vertex_count), int(self._last_triangle_count)

    def get_upload_stats(self) -> dict[str, int]:
        return {
            "uploads": int(self._uploads),
            "version": int(self._uploaded_version),
            "draw_calls": int(self._last_draw_calls),
        }

    # --------------------------------------------------------------------- #
    # Internal helpers                                                      #
    # --------------------------------------------------------------------- #
    def _write_matrices(self) -> None:
        view = flatten(self.state.view_matrix())
        projection = flatten(self.state.projection_matrix())
        self.line_program["model_view"].write(view.tobytes())
        self.line_program["projection"].write(projection.tobytes())

    def _upload_buffer(self) -> None:
        buffer = self.state.buffer
        verts = buffer.flatten()
        self.gpu.upload(verts)
        if self._batched:
            self.gpu.upload_indices(
                _triangle_loop_indices(len(buffer), self.gpu.primitive_restart_index)
            )
        if self._upload_debug or self._logger.isEnabledFor(logging.DEBUG):
            self._logger.log(
                logging.INFO if self._upload_debug else logging.DEBUG,
                "Uploading triangles: depth=%d verts=%d (%.1f KB)",
                self.state.depth,
                buffer.vertex_count,
                verts.nbytes / 1024.0,
            )
        self._uploaded_version = buffer.version
        self._uploads += 1
        self._last_vertex_count = buffer.vertex_count
        self._last_triangle_count = len(buffer)


# ---------- utility -------------------------------------------------------- #
def _triangle_loop_indices(num_triangles: int, primitive_restart_index: int) -> np.ndarray:
    """
    三角形 t の頂点 3t, 3t+1, 3t+2 の後ろに区切りを挟んだ IBO 用インデックス。
    例: T=2 -> [0, 1, 2, R, 3, 4, 5, R]
    """
    n = max(0, int(num_triangles))
    indices = np.empty((n, 4), dtype=np.uint32)
    indices[:, :3] = np.arange(3 * n, dtype=np.uint32).reshape(n, 3)
    indices[:, 3] = np.uint32(primitive_restart_index)
    return indices.reshape(-1)


__all__ = ["WireframeRenderer", "PRIMITIVE_RESTART_INDEX"]
