"""
どこで: `glmath.camera`
何を: ビュー行列 `look_at`・正射影行列 `ortho`・軸回転 `rotate`・軌道カメラ位置 `orbit_eye`。
なぜ: 毎フレームの描画でカメラ状態から uniform 用の行列を組み立てるため。

行列はすべて `Mat4`（行優先）。GPU へ渡すときは `glmath.matrix.flatten` で列優先にする。
"""

from __future__ import annotations

import math

from .matrix import Mat4, negate, subtract
from .vector import Vector, VectorLike, cross, dot, normalize, radians, vec3, vec4


def look_at(eye: VectorLike, at: VectorLike, up: VectorLike) -> Mat4:
    """視点 `eye` から注視点 `at` を見るビュー行列。

    行は `[right, -right·eye]`, `[up', -up'·eye]`, `[-forward, forward·eye]`, `[0, 0, 0, 1]`。

    Raises
    ------
    DegenerateVector
        `eye == at`（視線方向が 0）または `up` が視線と平行な場合。
    """
    view_direction = normalize(subtract(at, eye))
    right = normalize(cross(up, view_direction))
    new_up = cross(view_direction, right)
    return Mat4.from_rows(
        vec4(right, -dot(right, eye)),
        vec4(new_up, -dot(new_up, eye)),
        vec4(negate(view_direction), dot(view_direction, eye)),
        vec4(),
    )


def ortho(left: float, right: float, bottom: float, top: float, near: float, far: float) -> Mat4:
    """箱 `[left,right]×[bottom,top]×[near,far]` を正規化クリップ立方体へ写す正射影行列。

    平行移動成分は 4 行目 `[-(l+r)/w, -(t+b)/h, -(n+f)/d, 1]` に置く。
    """
    w = right - left
    h = top - bottom
    d = far - near
    return Mat4.from_rows(
        vec4(2.0 / w, 0.0, 0.0, 0.0),
        vec4(0.0, 2.0 / h, 0.0, 0.0),
        vec4(0.0, 0.0, -2.0 / d, 0.0),
        vec4(-(left + right) / w, -(top + bottom) / h, -(near + far) / d, 1.0),
    )


def rotate(angle: float, axis: VectorLike) -> Mat4:
    """`axis` まわりに `angle` 度回転する行列（軸は正規化してから使う）。"""
    v = normalize(axis)
    c = math.cos(radians(angle))
    omc = 1.0 - c
    s = math.sin(radians(angle))
    return Mat4.from_rows(
        vec4(v[0] * v[0] * omc + c, v[0] * v[1] * omc + v[2] * s, v[0] * v[2] * omc - v[1] * s, 0.0),
        vec4(v[0] * v[1] * omc - v[2] * s, v[1] * v[1] * omc + c, v[1] * v[2] * omc + v[0] * s, 0.0),
        vec4(v[0] * v[2] * omc + v[1] * s, v[1] * v[2] * omc - v[0] * s, v[2] * v[2] * omc + c, 0.0),
        vec4(),
    )


def orbit_eye(radius: float, theta: float, phi: float) -> Vector:
    """球面座標（ラジアン）から視点位置を求める。"""
    return vec3(
        radius * math.sin(theta) * math.cos(phi),
        radius * math.sin(theta) * math.sin(phi),
        radius * math.cos(theta),
    )


__all__ = ["look_at", "ortho", "rotate", "orbit_eye"]
