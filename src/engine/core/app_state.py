"""
どこで: `engine.core` のアプリケーション状態。
何を: 細分化深さ・出力三角形バッファ・カメラ（軌道角/投影箱）をひとまとめに保持し、
      深さ変更コマンドと自動回転タイマを処理する `ViewerState` を提供。
なぜ: グローバル変数に頼らず、描画ステップと深さ変更ハンドラへ同じ状態を明示的に渡すため。

書き込み元:
- 深さ/バッファ: `increase_depth()` / `decrease_depth()` / `handle_command()` のみ。
- theta: 回転タイマ `tick()` のみ。
描画ステップは読み取りだけを行う（同一スレッドのイベントループ上で直列化される）。
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from glmath import Mat4, Vector, look_at, orbit_eye, ortho, vec3
from shapes.tetrahedron import SEED_VERTICES, tetrahedron, tetrahedron_array

from .geometry import TriangleBuffer

if TYPE_CHECKING:
    from common.config import ViewerConfig

logger = logging.getLogger(__name__)

INCREASE_SUBDIVISION = "increase-subdivision"
DECREASE_SUBDIVISION = "decrease-subdivision"


@dataclass
class CameraState:
    """軌道カメラと正射影箱。角度はラジアン。"""

    radius: float = 2.0
    theta: float = 25.0
    phi: float = 30.0
    auto_rotate: bool = True
    rotation_step: float = 0.006283185307179587
    at: tuple[float, float, float] = (0.0, 0.0, 0.0)
    up: tuple[float, float, float] = (0.0, 1.0, 0.0)
    left: float = -2.0
    right: float = 2.0
    bottom: float = -2.0
    top: float = 2.0
    near: float = -20.0
    far: float = 20.0

    def eye(self) -> Vector:
        return orbit_eye(self.radius, self.theta, self.phi)

    def view_matrix(self) -> Mat4:
        return look_at(self.eye(), vec3(*self.at), vec3(*self.up))

    def projection_matrix(self) -> Mat4:
        return ortho(self.left, self.right, self.bottom, self.top, self.near, self.far)


class ViewerState:
    """細分化四面体ビューアの状態。

    - 深さは `[min_depth, max_depth]` にクランプされる。
    - 深さが変わるたびにバッファを空にして四面体全体を作り直す（差分更新はしない）。
    - `tick(dt)` は自動回転タイマ用。呼ばれるたびに theta から `rotation_step` を引く。
    """

    def __init__(
        self,
        *,
        depth: int = 5,
        min_depth: int = 0,
        max_depth: int = 8,
        camera: CameraState | None = None,
        seed: tuple[Vector, Vector, Vector, Vector] = SEED_VERTICES,
        vectorized: bool | None = None,
    ) -> None:
        if min_depth < 0 or min_depth > max_depth:
            raise ValueError(f"invalid depth range: [{min_depth}, {max_depth}]")
        self.min_depth = int(min_depth)
        self.max_depth = int(max_depth)
        self.camera = camera if camera is not None else CameraState()
        self.seed = seed
        if vectorized is None:
            from common.settings import get as _get_settings

            vectorized = bool(_get_settings().VECTORIZED_SUBDIVISION)
        self.vectorized = vectorized
        self.buffer = TriangleBuffer()
        self._depth = self._clamp(int(depth))
        if self._depth != int(depth):
            logger.debug("initial depth %d clamped to %d", depth, self._depth)
        self.rebuild()

    @classmethod
    def from_config(cls, cfg: "ViewerConfig", *, vectorized: bool | None = None) -> "ViewerState":
        camera = CameraState(
            radius=cfg.radius,
            theta=cfg.theta,
            phi=cfg.phi,
            auto_rotate=cfg.auto_rotate,
            rotation_step=cfg.rotation_step,
            at=cfg.at,
            up=cfg.up,
            left=cfg.left,
            right=cfg.right,
            bottom=cfg.bottom,
            top=cfg.top,
            near=cfg.near,
            far=cfg.far,
        )
        return cls(
            depth=cfg.depth,
            min_depth=cfg.min_depth,
            max_depth=cfg.max_depth,
            camera=camera,
            vectorized=vectorized,
        )

    # ---- 深さ -------------------------------------------------------------
    @property
    def depth(self) -> int:
        return self._depth

    def _clamp(self, depth: int) -> int:
        return max(self.min_depth, min(self.max_depth, depth))

    def set_depth(self, depth: int) -> bool:
        """深さを設定して再構築する。クランプ後に変化がなければ何もせず False。"""
        new_depth = self._clamp(int(depth))
        if new_depth == self._depth:
            logger.debug("depth request %d ignored (depth=%d)", depth, self._depth)
            return False
        logger.info("subdivision depth %d -> %d", self._depth, new_depth)
        self._depth = new_depth
        self.rebuild()
        return True

    def increase_depth(self) -> bool:
        return self.set_depth(self._depth + 1)

    def decrease_depth(self) -> bool:
        return self.set_depth(self._depth - 1)

    def handle_command(self, command: str) -> bool:
        """`"increase-subdivision"` / `"decrease-subdivision"` を処理する。

        未知のコマンドは無視して False を返す。
        """
        if command == INCREASE_SUBDIVISION:
            return self.increase_depth()
        if command == DECREASE_SUBDIVISION:
            return self.decrease_depth()
        logger.debug("unknown command ignored: %r", command)
        return False

    def rebuild(self) -> None:
        """バッファを空にし、現在の深さで四面体を作り直す。"""
        t0 = time.perf_counter()
        a, b, c, d = self.seed
        self.buffer.clear()
        if self.vectorized:
            self.buffer.extend(tetrahedron_array(a, b, c, d, self._depth))
        else:
            tetrahedron(a, b, c, d, self._depth, self.buffer)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "rebuilt tetrahedron: depth=%d triangles=%d (%.1f ms)",
                self._depth,
                len(self.buffer),
                (time.perf_counter() - t0) * 1000.0,
            )

    # ---- 回転タイマ（Tickable） -------------------------------------------
    def tick(self, dt: float) -> None:
        if self.camera.auto_rotate:
            self.camera.theta -= self.camera.rotation_step

    def toggle_auto_rotate(self) -> bool:
        self.camera.auto_rotate = not self.camera.auto_rotate
        return self.camera.auto_rotate

    # ---- 描画ステップ用 -----------------------------------------------------
    def view_matrix(self) -> Mat4:
        return self.camera.view_matrix()

    def projection_matrix(self) -> Mat4:
        return self.camera.projection_matrix()


__all__ = [
    "INCREASE_SUBDIVISION",
    "DECREASE_SUBDIVISION",
    "CameraState",
    "ViewerState",
]
