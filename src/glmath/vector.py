"""
どこで: `glmath.vector`
何を: 3/4 成分ベクトルの生成と基本演算（dot/length/normalize/mix/cross）。
なぜ: 細分化エンジンとカメラ行列構築が必要とする最小限の線形代数を純関数で提供するため。

表現:
- ベクトルは 1 次元 `float64` ndarray（長さ 3 または 4）。
- すべて純関数で、入力を書き換えず新しい配列を返す。
- 同次座標 w は 4 成分目。点は w=1。
"""

from __future__ import annotations

import math
import numbers
from typing import Iterable, Sequence

import numpy as np

from .errors import DegenerateVector, DimensionMismatch, InvalidArgument

Vector = np.ndarray
VectorLike = Vector | Sequence[float]


def _as_vector(u: VectorLike) -> Vector:
    arr = np.asarray(u, dtype=np.float64)
    if arr.ndim != 1:
        raise DimensionMismatch(f"expected a 1-D vector, got shape {arr.shape}")
    return arr


def _pad(values: Iterable[float | VectorLike], size: int, *, homogeneous: bool) -> Vector:
    """成分列（数値とベクトルの混在可）を平坦化し、`size` 個に切り詰め/補完する。

    補完値は 0.0。`homogeneous` のときは 4 成分目（w）だけ 1.0 で埋める。
    """
    parts = [np.asarray(v, dtype=np.float64).reshape(-1) for v in values]
    flat = np.concatenate(parts) if parts else np.zeros(0, dtype=np.float64)
    out = flat[:size].tolist()
    while len(out) < size:
        out.append(1.0 if homogeneous and len(out) == 3 else 0.0)
    return np.array(out, dtype=np.float64)


# ── 生成 ──────────────────────────────
def vec3(*values: float | VectorLike) -> Vector:
    """数値またはベクトルを並べて 3 成分ベクトルを作る（不足は 0.0、超過は切り捨て）。

    例: `vec3()` -> (0, 0, 0)、`vec3(1, 2, 3, 4)` -> (1, 2, 3)、`vec3(vec4(...))` -> xyz。
    """
    return _pad(values, 3, homogeneous=False)


def vec4(*values: float | VectorLike) -> Vector:
    """同次座標の 4 成分ベクトル。欠けた w は点を表す 1.0 で補う。

    例: `vec4()` -> (0, 0, 0, 1)、`vec4(vec3(...))` -> (x, y, z, 1)、`vec4(right, -d)`。
    """
    return _pad(values, 4, homogeneous=True)


def as_vec3(values: Iterable[float | VectorLike]) -> Vector:
    """成分列（ネスト可）から 3 成分ベクトルを作る。`vec3(*values)` と同じ。"""
    return _pad(values, 3, homogeneous=False)


def as_vec4(values: Iterable[float | VectorLike]) -> Vector:
    """成分列（ネスト可）から 4 成分ベクトルを作る。`vec4(*values)` と同じ。

    例: `as_vec4(vec3(...))` は w=1 の点、`as_vec4([vec3(...), w])` は w を明示した点。
    """
    return _pad(values, 4, homogeneous=True)


def radians(degrees: float) -> float:
    return float(degrees) * (math.pi / 180.0)


# ── 演算 ──────────────────────────────
def dot(u: VectorLike, v: VectorLike) -> float:
    a = _as_vector(u)
    b = _as_vector(v)
    if a.shape != b.shape:
        raise DimensionMismatch(f"dot(): vectors are not the same dimension: {a.size} != {b.size}")
    return float(np.dot(a, b))


def length(u: VectorLike) -> float:
    return math.sqrt(dot(u, u))


def normalize(u: VectorLike, exclude_last: bool = False) -> Vector:
    """単位長へ正規化した新しいベクトルを返す。

    Parameters
    ----------
    u : VectorLike
        入力ベクトル（変更しない）。
    exclude_last : bool, default False
        True のとき最終成分（同次座標 w）を長さ計算とスケーリングから除外し、
        元の値のまま付け直す。

    Raises
    ------
    DegenerateVector
        長さが 0 または有限でない場合。
    """
    arr = _as_vector(u)
    head = arr[:-1] if exclude_last else arr
    n = length(head)
    if n == 0.0 or not math.isfinite(n):
        raise DegenerateVector(f"normalize(): the vector {arr.tolist()} has zero length")
    scaled = head / n
    if exclude_last:
        return np.concatenate((scaled, arr[-1:]))
    return scaled


def mix(u: VectorLike, v: VectorLike, s: float) -> Vector:
    """`(1 - s) * u + s * v` の線形補間。"""
    if isinstance(s, (bool, np.bool_)) or not isinstance(s, numbers.Real):
        raise InvalidArgument(f"mix(): the last parameter {s!r} must be a number")
    a = _as_vector(u)
    b = _as_vector(v)
    if a.shape != b.shape:
        raise DimensionMismatch(f"mix(): vector dimension mismatch: {a.size} != {b.size}")
    t = float(s)
    return (1.0 - t) * a + t * b


def cross(u: VectorLike, v: VectorLike) -> Vector:
    """先頭 3 成分どうしの外積（3 成分ベクトル）。"""
    a = _as_vector(u)
    b = _as_vector(v)
    if a.size < 3 or b.size < 3:
        raise InvalidArgument("cross(): arguments are not 3D vectors")
    return np.array(
        [
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ],
        dtype=np.float64,
    )


__all__ = [
    "Vector",
    "VectorLike",
    "vec3",
    "vec4",
    "as_vec3",
    "as_vec4",
    "radians",
    "dot",
    "length",
    "normalize",
    "mix",
    "cross",
]
