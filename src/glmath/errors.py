"""
どこで: `glmath.errors`
何を: ベクトル/行列カーネルが送出する例外階層。
なぜ: 形状不一致・ゼロ長・引数不正・非行列演算を呼び出し側で区別できるようにするため。

いずれも呼び出し地点で即座に送出され、カーネル内部では捕捉しない。
"""

from __future__ import annotations


class KernelError(Exception):
    """glmath カーネル例外の基底。"""


class DimensionMismatch(KernelError, ValueError):
    """オペランドの次元（長さ/行列形状）が一致しない。"""


class DegenerateVector(KernelError, ValueError):
    """長さが 0 または有限でないベクトルを正規化しようとした。"""


class InvalidArgument(KernelError, ValueError):
    """補間係数が数値でない、外積の成分数が足りない等の引数不正。"""


class NotAMatrixError(KernelError, TypeError):
    """行列専用の演算に `Mat4` 以外が渡された。"""


__all__ = [
    "KernelError",
    "DimensionMismatch",
    "DegenerateVector",
    "InvalidArgument",
    "NotAMatrixError",
]
