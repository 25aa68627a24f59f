"""共通フィクスチャ。

- 乱数シード固定
- 種の四面体頂点
- TSP_* 環境変数の隔離
"""

from __future__ import annotations

from typing import Iterator

import numpy as np
import pytest

from common import settings as settings_mod
from shapes.tetrahedron import SEED_VERTICES


@pytest.fixture(scope="session", autouse=True)
def np_seed() -> None:
    """NumPy の乱数を固定。"""
    np.random.seed(12345)


@pytest.fixture()
def seed_vertices():
    return tuple(v.copy() for v in SEED_VERTICES)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        "TSP_BATCHED_DRAW",
        "TSP_UPLOAD_DEBUG",
        "TSP_VECTORIZED_SUBDIVISION",
        "TSP_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    settings_mod.reload_from_env()
    yield
    monkeypatch.undo()
    settings_mod.reload_from_env()
