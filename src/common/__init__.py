"""
どこで: `common` パッケージ。
何を: 設定（YAML/環境変数）とロギング初期化の共通基盤。
なぜ: glmath/shapes/engine/api のどこからも同じ設定源を参照できるようにするため。
"""

from .config import ViewerConfig, load_config
from .logging import setup_default_logging

__all__ = [
    "ViewerConfig",
    "load_config",
    "setup_default_logging",
]
