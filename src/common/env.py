"""
どこで: `common.env`
何を: 環境変数を bool へ読み替える小さなヘルパ。
なぜ: 設定（common.settings）側で `os.getenv` と例外処理を繰り返さないため。

不正値は例外にせず既定値へ戻す（DEBUG ログのみ）。
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "t", "yes", "y", "on"}
_FALSE = {"0", "false", "f", "no", "n", "off"}


def env_bool(name: str, default: bool = False) -> bool:
    """真偽環境変数を取得（0/1, true/false, yes/no, on/off を許容）。"""
    raw = os.getenv(name)
    if raw is None:
        return bool(default)
    s = raw.strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    logger.debug("ignoring invalid bool for %s: %r", name, raw)
    return bool(default)


__all__ = ["env_bool"]
