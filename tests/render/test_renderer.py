from __future__ import annotations

import numpy as np
import pytest

import engine.render.renderer as rmod
from engine.core.app_state import ViewerState
from engine.render.renderer import PRIMITIVE_RESTART_INDEX, WireframeRenderer, _triangle_loop_indices
from glmath import flatten


class _Uniform:
    def __init__(self) -> None:
        self.value = None
        self.written: bytes | None = None

    def write(self, data: bytes) -> None:
        self.written = data


class DummyProgram(dict):
    def __init__(self) -> None:
        super().__init__()
        for name in ("color", "model_view", "projection"):
            self[name] = _Uniform()


class DummyShader:
    @staticmethod
    def create_shader(_ctx):  # noqa: ANN001
        return DummyProgram()


class DummyMesh:
    def __init__(self, ctx, program, primitive_restart_index) -> None:  # noqa: ANN001
        self.ctx = ctx
        self.program = program
        self.primitive_restart_index = primitive_restart_index
        self.vertex_count = 0
        self.uploads: list[np.ndarray] = []
        self.index_uploads: list[np.ndarray] = []
        self.per_triangle_calls = 0
        self.batched_calls = 0
        self.released = False

    def upload(self, vertices: np.ndarray) -> None:
        self.uploads.append(vertices)
        self.vertex_count = vertices.size // 4

    def upload_indices(self, indices: np.ndarray) -> None:
        self.index_uploads.append(indices)

    def render_per_triangle(self, mode: int) -> int:
        self.per_triangle_calls += 1
        return self.vertex_count // 3

    def render_batched(self, mode: int) -> int:
        self.batched_calls += 1
        return 1

    def release(self) -> None:
        self.released = True


@pytest.fixture()
def make_renderer(monkeypatch: pytest.MonkeyPatch, clean_env):
    # 実 GL を使わないよう LineLoopMesh/Shader を差し替える
    monkeypatch.setattr(rmod, "LineLoopMesh", DummyMesh)
    monkeypatch.setattr(rmod, "Shader", DummyShader)

    def _make(depth: int = 1, **kwargs) -> WireframeRenderer:
        state = ViewerState(depth=depth, vectorized=True)
        return WireframeRenderer(object(), state, **kwargs)

    return _make


def test_triangle_loop_indices() -> None:
    r = PRIMITIVE_RESTART_INDEX
    assert _triangle_loop_indices(2, r).tolist() == [0, 1, 2, r, 3, 4, 5, r]
    assert _triangle_loop_indices(0, r).size == 0
    assert _triangle_loop_indices(1, 7).dtype == np.uint32


def test_initial_upload_on_construction(make_renderer) -> None:
    renderer = make_renderer(depth=1)
    mesh = renderer.gpu
    assert len(mesh.uploads) == 1
    assert mesh.uploads[0].dtype == np.float32
    assert mesh.vertex_count == 3 * 16
    assert renderer.get_last_counts() == (48, 16)
    assert renderer.line_program["color"].value == (0.0, 1.0, 0.0, 1.0)


def test_tick_reuploads_only_when_buffer_changes(make_renderer) -> None:
    renderer = make_renderer(depth=1)
    renderer.tick(0.016)
    renderer.tick(0.016)
    assert renderer.get_upload_stats()["uploads"] == 1
    renderer.state.increase_depth()
    renderer.tick(0.016)
    assert renderer.get_upload_stats()["uploads"] == 2
    assert renderer.get_last_counts() == (3 * 64, 64)
    # 上限での増加要求は再構築しないので再アップロードもない
    renderer.state.max_depth = 2
    renderer.state.increase_depth()
    renderer.tick(0.016)
    assert renderer.get_upload_stats()["uploads"] == 2


def test_draw_writes_column_major_matrices(make_renderer) -> None:
    renderer = make_renderer(depth=0)
    renderer.draw()
    prog = renderer.line_program
    assert prog["model_view"].written == flatten(renderer.state.view_matrix()).tobytes()
    assert prog["projection"].written == flatten(renderer.state.projection_matrix()).tobytes()
    assert len(prog["projection"].written) == 16 * 4


def test_draw_per_triangle_by_default(make_renderer) -> None:
    renderer = make_renderer(depth=1)
    renderer.draw()
    assert renderer.gpu.per_triangle_calls == 1
    assert renderer.gpu.batched_calls == 0
    assert renderer.get_upload_stats()["draw_calls"] == 16


def test_batched_uploads_indices_and_draws_once(make_renderer) -> None:
    renderer = make_renderer(depth=0, batched=True)
    (indices,) = renderer.gpu.index_uploads
    assert indices.tolist()[:4] == [0, 1, 2, PRIMITIVE_RESTART_INDEX]
    assert indices.size == 4 * 4
    renderer.draw()
    assert renderer.gpu.batched_calls == 1
    assert renderer.get_upload_stats()["draw_calls"] == 1


def test_batched_follows_env(make_renderer, monkeypatch: pytest.MonkeyPatch) -> None:
    from common import settings as settings_mod

    monkeypatch.setenv("TSP_BATCHED_DRAW", "1")
    settings_mod.reload_from_env()
    renderer = make_renderer(depth=0)
    assert len(renderer.gpu.index_uploads) == 1


def test_draw_skips_empty_mesh(make_renderer) -> None:
    renderer = make_renderer(depth=0)
    renderer.gpu.vertex_count = 0
    renderer.draw()
    assert renderer.gpu.per_triangle_calls == 0
    # 行列は空でも書き込む
    assert renderer.line_program["model_view"].written is not None


def test_set_line_color_and_release(make_renderer) -> None:
    renderer = make_renderer(depth=0)
    renderer.set_line_color((0.2, 0.4, 0.6, 1.0))
    assert renderer.line_program["color"].value == (0.2, 0.4, 0.6, 1.0)
    renderer.release()
    assert renderer.gpu.released
