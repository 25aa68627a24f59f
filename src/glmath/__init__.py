"""
どこで: `glmath` パッケージ。
何を: ベクトル/行列カーネルとカメラ行列ビルダの公開面。
なぜ: 細分化（shapes）と描画（engine）が同じ数値規約を共有するため。
"""

from .camera import look_at, orbit_eye, ortho, rotate
from .errors import (
    DegenerateVector,
    DimensionMismatch,
    InvalidArgument,
    KernelError,
    NotAMatrixError,
)
from .matrix import Mat4, equal, flatten, mat4, mult, negate, subtract, transpose
from .vector import (
    Vector,
    as_vec3,
    as_vec4,
    cross,
    dot,
    length,
    mix,
    normalize,
    radians,
    vec3,
    vec4,
)

__all__ = [
    "KernelError",
    "DimensionMismatch",
    "DegenerateVector",
    "InvalidArgument",
    "NotAMatrixError",
    "Vector",
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
    "Mat4",
    "mat4",
    "mult",
    "transpose",
    "subtract",
    "negate",
    "equal",
    "flatten",
    "look_at",
    "ortho",
    "rotate",
    "orbit_eye",
]
