"""
どこで: `glmath.matrix`
何を: 4x4 行列型 `Mat4` と行列/ベクトル両対応の演算（subtract/negate/equal/flatten）。
なぜ: 行列とベクトルを型で区別し、演算の分岐を実行時フラグではなく型で決めるため。

規約:
- `Mat4.m` は行優先 `[row][col]` の (4, 4) float64 配列（読み取り専用）。
- `mult(u, v)[i][j] = Σ_k u[i][k] * v[k][j]`。
- `flatten(Mat4)` は転置してから平坦化する。OpenGL の uniformMatrix4fv（transpose=False）が
  期待する列優先レイアウトになる。
"""

from __future__ import annotations

from typing import Iterator, Sequence

import numpy as np

from .errors import DimensionMismatch, InvalidArgument, NotAMatrixError
from .vector import Vector, VectorLike


class Mat4:
    """不変な 4x4 行列。"""

    __slots__ = ("m",)

    m: np.ndarray

    def __init__(self, data: np.ndarray | Sequence[Sequence[float]] | None = None) -> None:
        if data is None:
            arr = np.zeros((4, 4), dtype=np.float64)
        else:
            arr = np.array(data, dtype=np.float64)
        if arr.shape != (4, 4):
            raise DimensionMismatch(f"Mat4 requires shape (4, 4), got {arr.shape}")
        arr.setflags(write=False)
        self.m = arr

    # ── ファクトリ ───────────────────
    @classmethod
    def identity(cls) -> "Mat4":
        return cls.scalar(1.0)

    @classmethod
    def scalar(cls, value: float) -> "Mat4":
        """対角成分がすべて `value`、他が 0 の行列。"""
        return cls(np.eye(4, dtype=np.float64) * float(value))

    @classmethod
    def from_rows(cls, *rows: VectorLike) -> "Mat4":
        """4 本の行ベクトル（各 4 成分）から組み立てる。"""
        if len(rows) != 4:
            raise InvalidArgument(f"Mat4.from_rows() needs 4 rows, got {len(rows)}")
        rows_arr = [np.asarray(r, dtype=np.float64) for r in rows]
        if any(r.shape != (4,) for r in rows_arr):
            raise InvalidArgument("Mat4.from_rows(): every row must have 4 components")
        return cls(np.vstack(rows_arr))

    @classmethod
    def from_values(cls, *values: float) -> "Mat4":
        """行優先に並んだ 16 個の数値から組み立てる。"""
        if len(values) != 16:
            raise InvalidArgument(f"Mat4.from_values() needs 16 numbers, got {len(values)}")
        return cls(np.asarray(values, dtype=np.float64).reshape(4, 4))

    # ── アクセス ─────────────────────
    @property
    def rows(self) -> tuple[Vector, ...]:
        return tuple(self.m[i].copy() for i in range(4))

    @property
    def T(self) -> "Mat4":
        return transpose(self)

    def __getitem__(self, index: int) -> Vector:
        return self.m[index]

    def __iter__(self) -> Iterator[Vector]:
        return iter(self.rows)

    def __len__(self) -> int:
        return 4

    # ── 演算子 ───────────────────────
    def __matmul__(self, other: object) -> "Mat4":
        if not isinstance(other, Mat4):
            return NotImplemented
        return mult(self, other)

    def __sub__(self, other: object) -> "Mat4":
        if not isinstance(other, Mat4):
            return NotImplemented
        return subtract(self, other)

    def __neg__(self) -> "Mat4":
        return Mat4(-self.m)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mat4):
            return NotImplemented
        return equal(self, other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = ", ".join("[" + ", ".join(f"{x:.4g}" for x in row) + "]" for row in self.m)
        return f"Mat4({body})"


def mat4(diagonal: float = 1.0) -> Mat4:
    """スカラー行列を返す。引数なしなら単位行列。"""
    return Mat4.scalar(diagonal)


# ── 行列演算 ──────────────────────────
def transpose(m: Mat4) -> Mat4:
    if not isinstance(m, Mat4):
        raise NotAMatrixError(f"transpose(): trying to transpose a non matrix: {type(m).__name__}")
    return Mat4(m.m.T)


def mult(u: Mat4, v: Mat4) -> Mat4:
    """行 × 列の行列積。両方とも `Mat4` でなければ `NotAMatrixError`。"""
    if not isinstance(u, Mat4) or not isinstance(v, Mat4):
        raise NotAMatrixError(
            f"mult(): input dimensions are not compatible: "
            f"{type(u).__name__} x {type(v).__name__}"
        )
    if u.m.shape[1] != v.m.shape[0]:
        raise DimensionMismatch("mult(): matrices must have the same dimensions")
    return Mat4(u.m @ v.m)


# ── 行列/ベクトル共通 ─────────────────
def subtract(u: Mat4 | VectorLike, v: Mat4 | VectorLike) -> Mat4 | Vector:
    """成分ごとの差。行列どうしなら `Mat4`、ベクトルどうしなら ndarray を返す。"""
    u_is_mat = isinstance(u, Mat4)
    v_is_mat = isinstance(v, Mat4)
    if u_is_mat and v_is_mat:
        return Mat4(u.m - v.m)  # type: ignore[union-attr]
    if u_is_mat or v_is_mat:
        raise DimensionMismatch("subtract(): attempting to subtract a matrix and a vector")
    a = np.asarray(u, dtype=np.float64)
    b = np.asarray(v, dtype=np.float64)
    if a.shape != b.shape:
        raise DimensionMismatch(f"subtract(): vectors are not the same length: {a.shape} != {b.shape}")
    return a - b


def negate(u: Mat4 | VectorLike) -> Mat4 | Vector:
    if isinstance(u, Mat4):
        return -u
    return -np.asarray(u, dtype=np.float64)


def equal(u: Mat4 | VectorLike, v: Mat4 | VectorLike) -> bool:
    """厳密な成分比較（許容誤差なし）。形状が異なれば False。"""
    if isinstance(u, Mat4) != isinstance(v, Mat4):
        return False
    a = u.m if isinstance(u, Mat4) else np.asarray(u, dtype=np.float64)
    b = v.m if isinstance(v, Mat4) else np.asarray(v, dtype=np.float64)
    if a.shape != b.shape:
        return False
    return bool(np.array_equal(a, b))


def flatten(v: Mat4 | VectorLike | Sequence[Sequence[VectorLike]]) -> np.ndarray:
    """連続した float32 の 1 次元配列へ平坦化する。

    `Mat4` は転置してから平坦化するため、結果は列優先になる。
    ベクトルや三角形列（ネストした配列）は順序を保ってそのまま並べる。
    """
    if isinstance(v, Mat4):
        return np.ascontiguousarray(transpose(v).m, dtype=np.float32).reshape(-1)
    return np.ascontiguousarray(np.asarray(v, dtype=np.float32).reshape(-1))


__all__ = [
    "Mat4",
    "mat4",
    "transpose",
    "mult",
    "subtract",
    "negate",
    "equal",
    "flatten",
]
