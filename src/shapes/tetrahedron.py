r"""
どこで: `shapes.tetrahedron`（再帰細分化エンジン）。
何を: 正四面体の各面を中点分割し、中点を単位球へ射影しながら再帰的に三角形を生成する。
なぜ: 深さ n の球近似ワイヤーフレームを、終端条件つきの純粋な再帰として得るため。

分割規則（1 段）:

          a
         / \
       ab---ac          子三角形（この順で再帰）:
       / \ / \            (a, ab, ac), (ab, b, bc), (bc, c, ac), (ab, bc, ac)
      b---bc--c

- 中点は `normalize(mix(p, q, 0.5), exclude_last=True)`。w 成分は正規化せず線形補間のまま残る。
- `count == 0` で三角形 (a, b, c) を出力先へ追記する。
- 面の巻き順は (a,b,c), (d,c,b), (a,d,b), (a,c,d)。
- 出力枚数は 4 * 4**n。
"""

from __future__ import annotations

from typing import Protocol

import numpy as np

from engine.core.geometry import Triangle, TriangleBuffer
from glmath import DegenerateVector, Vector, mix, normalize, vec4

# 単位球に（有効桁 6 桁で）内接する正四面体
VA = vec4(0.0, 0.0, -1.0, 1.0)
VB = vec4(0.0, 0.942809, 0.333333, 1.0)
VC = vec4(-0.816497, -0.471405, 0.333333, 1.0)
VD = vec4(0.816497, -0.471405, 0.333333, 1.0)
SEED_VERTICES: tuple[Vector, Vector, Vector, Vector] = (VA, VB, VC, VD)


class TriangleSink(Protocol):
    def append(self, triangle: Triangle) -> None: ...


def _as_depth(n: int) -> int:
    depth = int(n)
    if depth != n:
        raise ValueError(f"subdivision depth must be an integer, got {n!r}")
    if depth < 0:
        raise ValueError(f"subdivision depth must be >= 0, got {n}")
    return depth


def triangle_count(n: int) -> int:
    """深さ n の四面体細分化が出力する三角形数。"""
    return 4 * 4 ** int(n)


def divide_triangle(a: Vector, b: Vector, c: Vector, count: int, out: TriangleSink) -> None:
    """三角形 (a, b, c) を `count` 段分割し、葉の三角形を `out` に追記する。"""
    if count > 0:
        ab = normalize(mix(a, b, 0.5), exclude_last=True)
        ac = normalize(mix(a, c, 0.5), exclude_last=True)
        bc = normalize(mix(b, c, 0.5), exclude_last=True)

        divide_triangle(a, ab, ac, count - 1, out)
        divide_triangle(ab, b, bc, count - 1, out)
        divide_triangle(bc, c, ac, count - 1, out)
        divide_triangle(ab, bc, ac, count - 1, out)
    else:
        out.append(Triangle(a, b, c))


def tetrahedron(
    a: Vector,
    b: Vector,
    c: Vector,
    d: Vector,
    n: int,
    out: TriangleSink | None = None,
) -> TriangleSink:
    """四面体 (a, b, c, d) の 4 面を深さ `n` で細分化して `out` に追記する。

    Parameters
    ----------
    a, b, c, d : Vector
        4 成分（w=1）の頂点。単位長であれば出力頂点はすべて単位球上にある。
    n : int
        細分化の深さ（0 以上）。
    out : TriangleSink | None
        追記先。None なら新しい `TriangleBuffer` を作る。既存の内容は消さない。

    Returns
    -------
    TriangleSink
        追記先（`out` または新規バッファ）。
    """
    n = _as_depth(n)
    sink: TriangleSink = TriangleBuffer() if out is None else out
    divide_triangle(a, b, c, n, sink)
    divide_triangle(d, c, b, n, sink)
    divide_triangle(a, d, b, n, sink)
    divide_triangle(a, c, d, n, sink)
    return sink


# ---------- numpy 一括版 --------------------------------------------------- #
def _midpoints_on_sphere(p: np.ndarray, q: np.ndarray) -> np.ndarray:
    m = 0.5 * p + 0.5 * q
    xyz = m[:, :3]
    n = np.sqrt(np.sum(xyz * xyz, axis=1, keepdims=True))
    if np.any(n == 0.0) or not np.all(np.isfinite(n)):
        raise DegenerateVector("normalize(): a subdivision midpoint has zero length")
    return np.concatenate((xyz / n, m[:, 3:]), axis=1)


def subdivide_faces(faces: np.ndarray, count: int) -> np.ndarray:
    """`(F, 3, 4)` の面を段ごとに一括分割し `(F * 4**count, 3, 4)` を返す。

    各三角形の子 4 枚を連続して並べるため、結果の順序は `divide_triangle` の
    深さ優先の出力順と一致する。
    """
    tri = np.asarray(faces, dtype=np.float64)
    if tri.ndim != 3 or tri.shape[1:] != (3, 4):
        raise ValueError(f"faces は形状 (F, 3, 4) である必要があります: got {tri.shape}")
    for _ in range(_as_depth(count)):
        a, b, c = tri[:, 0], tri[:, 1], tri[:, 2]
        ab = _midpoints_on_sphere(a, b)
        ac = _midpoints_on_sphere(a, c)
        bc = _midpoints_on_sphere(b, c)
        children = np.stack(
            (
                np.stack((a, ab, ac), axis=1),
                np.stack((ab, b, bc), axis=1),
                np.stack((bc, c, ac), axis=1),
                np.stack((ab, bc, ac), axis=1),
            ),
            axis=1,
        )
        tri = children.reshape(-1, 3, 4)
    return tri


def tetrahedron_array(a: Vector, b: Vector, c: Vector, d: Vector, n: int) -> np.ndarray:
    """`tetrahedron` と同じ三角形列を `(4 * 4**n, 3, 4)` 配列で返す。"""
    faces = np.array(
        [
            [a, b, c],
            [d, c, b],
            [a, d, b],
            [a, c, d],
        ],
        dtype=np.float64,
    )
    return subdivide_faces(faces, n)


__all__ = [
    "VA",
    "VB",
    "VC",
    "VD",
    "SEED_VERTICES",
    "TriangleSink",
    "triangle_count",
    "divide_triangle",
    "tetrahedron",
    "subdivide_faces",
    "tetrahedron_array",
]
