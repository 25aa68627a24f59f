"""
ロギング初期化ヘルパ。

要点:
- 各モジュールは `logging.getLogger(__name__)` でロガーを取得するだけで、ハンドラは設定しない。
- CLI/ランナーが起動時に `setup_default_logging()` を 1 度呼ぶ。
- レベル未指定時は `TSP_LOG_LEVEL`（common.settings）を使う。
"""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        from .settings import get as _get_settings

        level = _get_settings().LOG_LEVEL
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return int(level)


def setup_default_logging(level: int | str | None = None) -> None:
    """最小限のロギング設定を 1 度だけ適用する。

    ルートロガーにハンドラが既にあれば何もしない（no-op）。
    """
    root = logging.getLogger()
    if root.handlers:
        # Assume the app has configured logging
        return
    logging.basicConfig(level=_resolve_level(level), format=_FORMAT)


__all__ = ["setup_default_logging"]
