"""
どこで: `engine.core` のフレーム駆動。
何を: 描画用インターバルから呼ばれ、登録順に `tick(dt)` を配る `FrameClock`。
      呼び出し回数と累積時間を記録し、実効フレームレートを出せるようにする。
なぜ: 再アップロード判定（Renderer）を描画インターバルへ一様に載せ、終了時に実測値をログへ残すため。
"""

from __future__ import annotations

import time
from typing import Iterable

from .tickable import Tickable


class FrameClock:
    def __init__(self, tickables: Iterable[Tickable]):
        self._targets: tuple[Tickable, ...] = tuple(tickables)
        self._prev = time.perf_counter()
        self.ticks = 0
        self.elapsed = 0.0

    def tick(self, dt: float | None = None) -> None:
        """1 フレーム進める。`dt` 省略時は前回呼び出しからの実時間。"""
        now = time.perf_counter()
        step = now - self._prev if dt is None else float(dt)
        self._prev = now
        self.ticks += 1
        self.elapsed += step
        for target in self._targets:
            target.tick(step)

    def average_fps(self) -> float:
        """これまでの平均フレームレート（まだ進んでいなければ 0.0）。"""
        if self.ticks == 0 or self.elapsed <= 0.0:
            return 0.0
        return self.ticks / self.elapsed
