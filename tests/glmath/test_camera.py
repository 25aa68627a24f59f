from __future__ import annotations

import math

import numpy as np
import pytest

from glmath import (
    DegenerateVector,
    Mat4,
    flatten,
    look_at,
    mat4,
    orbit_eye,
    ortho,
    rotate,
    vec3,
)


def _apply(m: Mat4, p) -> np.ndarray:
    # 行優先の行列 × 列ベクトル
    return m.m @ np.asarray(p, dtype=np.float64)


def test_look_at_known_matrix() -> None:
    m = look_at(vec3(0, 0, 1), vec3(0, 0, 0), vec3(0, 1, 0))
    expected = np.array(
        [
            [-1.0, 0.0, 0.0, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [0.0, 0.0, 1.0, -1.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )
    np.testing.assert_allclose(m.m, expected, atol=1e-15)


def test_look_at_maps_eye_to_origin_and_target_ahead() -> None:
    eye = vec3(1.0, 2.0, 3.0)
    at = vec3(-1.0, 0.5, 0.0)
    m = look_at(eye, at, vec3(0, 1, 0))
    np.testing.assert_allclose(_apply(m, [*eye, 1.0]), [0.0, 0.0, 0.0, 1.0], atol=1e-12)
    dist = float(np.linalg.norm(at - eye))
    np.testing.assert_allclose(_apply(m, [*at, 1.0]), [0.0, 0.0, -dist, 1.0], atol=1e-12)


def test_look_at_rotation_part_is_orthonormal() -> None:
    m = look_at(orbit_eye(2.0, 25.0, 30.0), vec3(), vec3(0, 1, 0))
    r = m.m[:3, :3]
    np.testing.assert_allclose(r @ r.T, np.eye(3), atol=1e-12)
    assert m[3].tolist() == [0.0, 0.0, 0.0, 1.0]


def test_look_at_eye_equals_at_raises() -> None:
    eye = vec3(1.0, 1.0, 1.0)
    with pytest.raises(DegenerateVector):
        look_at(eye, eye.copy(), vec3(0, 1, 0))


def test_look_at_up_parallel_to_view_raises() -> None:
    with pytest.raises(DegenerateVector):
        look_at(vec3(0, 2, 0), vec3(), vec3(0, 1, 0))


def test_ortho_default_box() -> None:
    m = ortho(-2.0, 2.0, -2.0, 2.0, -20.0, 20.0)
    np.testing.assert_allclose(np.diag(m.m), [0.5, 0.5, -0.05, 1.0])
    assert m[3].tolist() == [0.0, 0.0, 0.0, 1.0]


def test_ortho_translation_is_in_last_row() -> None:
    m = ortho(0.0, 4.0, 0.0, 2.0, 1.0, 3.0)
    assert m[3].tolist() == [-1.0, -1.0, -2.0, 1.0]
    assert m[0].tolist() == [0.5, 0.0, 0.0, 0.0]
    assert m[1].tolist() == [0.0, 1.0, 0.0, 0.0]
    assert m[2].tolist() == [0.0, 0.0, -1.0, 0.0]
    # 列優先: 4 行目の成分は各列の末尾に並ぶ
    assert flatten(m)[3] == -1.0


def test_rotate_zero_angle_is_identity() -> None:
    np.testing.assert_allclose(rotate(0.0, vec3(1, 2, 3)).m, mat4().m, atol=1e-15)


def test_rotate_quarter_turn_about_z() -> None:
    m = rotate(90.0, vec3(0, 0, 1))
    expected = np.array(
        [
            [0.0, 1.0, 0.0, 0.0],
            [-1.0, 0.0, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )
    np.testing.assert_allclose(m.m, expected, atol=1e-15)


def test_rotate_normalizes_axis() -> None:
    np.testing.assert_allclose(
        rotate(37.0, vec3(0, 0, 5)).m, rotate(37.0, vec3(0, 0, 1)).m, atol=1e-15
    )
    with pytest.raises(DegenerateVector):
        rotate(10.0, vec3())


def test_orbit_eye() -> None:
    np.testing.assert_allclose(orbit_eye(2.0, 0.0, 0.0), [0.0, 0.0, 2.0], atol=1e-15)
    np.testing.assert_allclose(
        orbit_eye(1.0, math.pi / 2, math.pi / 2), [0.0, 1.0, 0.0], atol=1e-15
    )
    eye = orbit_eye(2.0, 25.0, 30.0)
    assert math.isclose(float(np.linalg.norm(eye)), 2.0, rel_tol=1e-12)


def test_view_and_projection_flatten_to_16_floats() -> None:
    view = flatten(look_at(orbit_eye(2.0, 25.0, 30.0), vec3(), vec3(0, 1, 0)))
    proj = flatten(ortho(-2, 2, -2, 2, -20, 20))
    assert view.shape == (16,) and proj.shape == (16,)
    assert view.dtype == np.float32
    assert proj[15] == 1.0
    assert proj[3] == 0.0 and proj[7] == 0.0
