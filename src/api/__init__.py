"""
どこで: `api` 入口（高レベル公開 API）。
何を: ビューアの起動関数とコマンドライン入口を再輸出。

Usage:
    from api import run_viewer

    run_viewer(depth=4)
"""

from .viewer import main, run_viewer

__all__ = ["run_viewer", "main"]
