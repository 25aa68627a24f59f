from __future__ import annotations

import logging
import math

import numpy as np
import pytest

from common.config import ViewerConfig
from engine.core.app_state import (
    DECREASE_SUBDIVISION,
    INCREASE_SUBDIVISION,
    CameraState,
    ViewerState,
)
from glmath import look_at, orbit_eye, ortho, vec3
from shapes.tetrahedron import triangle_count


def test_initial_build_matches_depth() -> None:
    state = ViewerState(depth=2, vectorized=False)
    assert state.depth == 2
    assert len(state.buffer) == triangle_count(2)


def test_initial_depth_is_clamped() -> None:
    state = ViewerState(depth=12, max_depth=3, vectorized=True)
    assert state.depth == 3
    state = ViewerState(depth=-4, vectorized=True)
    assert state.depth == 0
    assert len(state.buffer) == 4


def test_invalid_depth_range_raises() -> None:
    with pytest.raises(ValueError):
        ViewerState(min_depth=3, max_depth=2)
    with pytest.raises(ValueError):
        ViewerState(min_depth=-1)


def test_increase_rebuilds_from_scratch() -> None:
    state = ViewerState(depth=1, vectorized=False)
    v0 = state.buffer.version
    assert state.increase_depth() is True
    assert state.depth == 2
    assert len(state.buffer) == triangle_count(2)
    assert state.buffer.version > v0


def test_decrease_at_min_is_noop() -> None:
    state = ViewerState(depth=0, vectorized=False)
    v0 = state.buffer.version
    assert state.decrease_depth() is False
    assert state.depth == 0
    assert state.buffer.version == v0
    assert len(state.buffer) == 4


def test_increase_at_max_is_noop() -> None:
    state = ViewerState(depth=8, vectorized=True)
    assert len(state.buffer) == triangle_count(8)
    v0 = state.buffer.version
    assert state.increase_depth() is False
    assert state.depth == 8
    assert state.buffer.version == v0


def test_handle_command() -> None:
    state = ViewerState(depth=1, max_depth=2, vectorized=True)
    assert state.handle_command(INCREASE_SUBDIVISION) is True
    assert state.handle_command(INCREASE_SUBDIVISION) is False
    assert state.depth == 2
    assert state.handle_command(DECREASE_SUBDIVISION) is True
    assert state.depth == 1
    assert state.handle_command("explode") is False
    assert state.depth == 1


def test_depth_change_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    state = ViewerState(depth=0, vectorized=True)
    with caplog.at_level(logging.INFO, logger="engine.core.app_state"):
        state.increase_depth()
    assert "subdivision depth 0 -> 1" in caplog.text


def test_vectorized_and_recursive_states_agree() -> None:
    a = ViewerState(depth=3, vectorized=True)
    b = ViewerState(depth=3, vectorized=False)
    np.testing.assert_allclose(a.buffer.as_array(), b.buffer.as_array(), rtol=0, atol=1e-12)


def test_tick_rotates_theta_by_fixed_step() -> None:
    cam = CameraState(theta=1.0, rotation_step=math.pi / 500)
    state = ViewerState(depth=0, camera=cam, vectorized=True)
    state.tick(0.01)
    state.tick(0.5)  # 経過時間に依らず 1 回あたり一定量
    assert math.isclose(state.camera.theta, 1.0 - 2 * math.pi / 500)


def test_toggle_auto_rotate_stops_rotation() -> None:
    state = ViewerState(depth=0, vectorized=True)
    theta0 = state.camera.theta
    assert state.toggle_auto_rotate() is False
    state.tick(0.01)
    assert state.camera.theta == theta0
    assert state.toggle_auto_rotate() is True


def test_matrices_follow_camera() -> None:
    state = ViewerState(depth=0, vectorized=True)
    cam = state.camera
    expected = look_at(orbit_eye(cam.radius, cam.theta, cam.phi), vec3(), vec3(0, 1, 0))
    assert state.view_matrix() == expected
    assert state.projection_matrix() == ortho(-2, 2, -2, 2, -20, 20)
    state.tick(0.01)
    assert state.view_matrix() != expected


def test_from_config() -> None:
    cfg = ViewerConfig(depth=2, max_depth=4, theta=0.5, phi=0.25, auto_rotate=False, radius=3.0)
    state = ViewerState.from_config(cfg, vectorized=True)
    assert state.depth == 2
    assert state.max_depth == 4
    assert state.camera.theta == 0.5
    assert state.camera.auto_rotate is False
    assert math.isclose(float(np.linalg.norm(state.camera.eye())), 3.0)


def test_vectorized_default_follows_settings(monkeypatch: pytest.MonkeyPatch, clean_env) -> None:
    from common import settings as settings_mod

    monkeypatch.setenv("TSP_VECTORIZED_SUBDIVISION", "0")
    settings_mod.reload_from_env()
    assert ViewerState(depth=0).vectorized is False
