"""
どこで: `common.settings`
何を: `TSP_*` 環境変数を型付きで一元管理し、起動時に読み込む。
なぜ: 描画経路や細分化実装の切り替えを、設定ファイルを書き換えずに試せるようにするため。
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import env_bool


@dataclass
class _Settings:
    # Renderer
    BATCHED_DRAW: bool = False
    UPLOAD_DEBUG: bool = False

    # Subdivision
    VECTORIZED_SUBDIVISION: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。"""
    _settings.BATCHED_DRAW = env_bool("TSP_BATCHED_DRAW", False)
    _settings.UPLOAD_DEBUG = env_bool("TSP_UPLOAD_DEBUG", False)
    _settings.VECTORIZED_SUBDIVISION = env_bool("TSP_VECTORIZED_SUBDIVISION", True)
    _settings.LOG_LEVEL = (os.getenv("TSP_LOG_LEVEL") or "INFO").strip().upper()


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
