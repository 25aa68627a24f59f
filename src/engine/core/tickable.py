"""
どこで: `engine.core`
何を: 周期呼び出しされるオブジェクトの共通形 `Tickable`。
なぜ: 描画インターバル（FrameClock→Renderer）と回転タイマ（ViewerState）を同じ呼び出し規約にそろえるため。
"""

from typing import Protocol


class Tickable(Protocol):
    def tick(self, dt: float) -> None:
        """前回呼び出しから `dt` 秒経過したものとして状態を更新する。"""
