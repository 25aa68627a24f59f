"""
三角形バッファ（細分化結果の受け皿）

本モジュールは、細分化エンジンが出力する三角形列 `TriangleBuffer` を提供する。
描画側はこのバッファを平坦化した float32 配列だけを受け取り、読み取り専用で扱う。

データモデル（不変条件）:
- 三角形は 3 頂点、各頂点は同次座標の 4 成分（w=1 の点）。
- 内部では `(k, 3, 4) float64` のブロック列として保持し、`as_array()` で `(T, 3, 4)` に連結する。
- 追記のみ（append/extend）。深さ変更時は `clear()` してから全体を作り直す。
- 変更のたびに `version` が増える。Renderer はこの値で再アップロードの要否を判定する。

直感図:

    # T=2 の例（頂点は a,b,c の順）
    #   tri0 = (a0, b0, c0)
    #   tri1 = (a1, b1, c1)
    # flatten() -> [a0.x a0.y a0.z a0.w b0.x ... c1.w]  (float32, 24 要素)
    # 頂点 i は flatten()[4*i : 4*i+4]、三角形 t は頂点 3t, 3t+1, 3t+2
"""

from __future__ import annotations

from typing import Iterator, NamedTuple

import numpy as np

from glmath import Vector, flatten


class Triangle(NamedTuple):
    a: Vector
    b: Vector
    c: Vector


def _as_block(arr: np.ndarray) -> np.ndarray:
    block = np.asarray(arr, dtype=np.float64)
    if block.ndim == 2:
        block = block[np.newaxis]
    if block.ndim != 3 or block.shape[1:] != (3, 4):
        raise ValueError(f"三角形ブロックは形状 (k, 3, 4) である必要があります: got {block.shape}")
    return block


class TriangleBuffer:
    """追記専用の三角形列。"""

    __slots__ = ("_blocks", "_count", "_cache", "_version")

    def __init__(self) -> None:
        self._blocks: list[np.ndarray] = []
        self._count = 0
        self._cache: np.ndarray | None = None
        self._version = 0

    # ── 変更 ─────────────────────────
    def append(self, triangle: Triangle | tuple[Vector, Vector, Vector]) -> None:
        """三角形 1 枚を末尾に追加する。"""
        a, b, c = triangle
        self._push(_as_block(np.stack((a, b, c))))

    def extend(self, triangles: np.ndarray) -> None:
        """`(k, 3, 4)` 配列の三角形をまとめて末尾に追加する。"""
        block = _as_block(triangles)
        if block.shape[0] == 0:
            return
        self._push(block)

    def clear(self) -> None:
        self._blocks.clear()
        self._count = 0
        self._cache = None
        self._version += 1

    def _push(self, block: np.ndarray) -> None:
        self._blocks.append(block)
        self._count += int(block.shape[0])
        self._cache = None
        self._version += 1

    # ── 参照 ─────────────────────────
    @property
    def version(self) -> int:
        return self._version

    @property
    def vertex_count(self) -> int:
        return 3 * self._count

    @property
    def is_empty(self) -> bool:
        return self._count == 0

    def as_array(self) -> np.ndarray:
        """全三角形を `(T, 3, 4)` の float64 配列として返す（読み取り専用）。"""
        if self._cache is None:
            if self._blocks:
                arr = np.concatenate(self._blocks, axis=0)
                # 連結結果 1 ブロックに畳み、次回以降の連結を省く
                self._blocks = [arr]
            else:
                arr = np.zeros((0, 3, 4), dtype=np.float64)
            arr.setflags(write=False)
            self._cache = arr
        return self._cache

    def flatten(self) -> np.ndarray:
        """頂点属性としてそのまま GPU に渡せる float32 の 1 次元配列。"""
        return flatten(self.as_array())

    def __len__(self) -> int:
        return self._count

    def __getitem__(self, index: int) -> Triangle:
        t = self.as_array()[index]
        return Triangle(t[0], t[1], t[2])

    def __iter__(self) -> Iterator[Triangle]:
        for t in self.as_array():
            yield Triangle(t[0], t[1], t[2])

    def __repr__(self) -> str:
        return f"TriangleBuffer(triangles={self._count}, version={self._version})"


__all__ = ["Triangle", "TriangleBuffer"]
