"""
どこで: `engine.core` の描画ウィンドウ薄ラッパ。
何を: Pyglet Window（深度バッファ/MSAA/背景クリア）と描画コールバック・キー割り当ての登録を提供。
なぜ: レンダラ/状態層から GUI 依存を切り離し、最小インターフェイスで統一するため。

使用例:
    win = RenderWindow(800, 800, bg_color=(0, 0, 0, 1))
    win.add_draw_callback(renderer.draw)
    win.bind_key(key.UP, state.increase_depth)
    pyglet.app.run()
"""

from typing import Callable

import pyglet
from pyglet.gl import Config, glClearColor


class RenderWindow(pyglet.window.Window):
    def __init__(
        self,
        width: int,
        height: int,
        *,
        bg_color: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0),
        caption: str = "tetrasphere",
    ):
        """ウィンドウを生成する。

        引数:
            width: ウィンドウ幅（ピクセル）。
            height: ウィンドウ高さ（ピクセル）。
            bg_color: 背景色 RGBA（0.0〜1.0）。
            caption: タイトルバー文字列。
        """
        # 線描画を滑らかにするために MSAA、前後関係のために深度バッファを有効化
        config = Config(
            double_buffer=True, depth_size=24, sample_buffers=1, samples=4, vsync=True
        )
        super().__init__(width=width, height=height, caption=caption, config=config)
        self._bg_color = bg_color
        self._draw_callbacks: list[Callable[[], None]] = []
        self._key_handlers: dict[int, Callable[[], object]] = {}

    def add_draw_callback(self, func: Callable[[], None]) -> None:
        """
        `on_draw` 中に呼び出す描画関数を登録する。

        - 関数は引数を取らず、副作用で描画を行うこと。
        - 登録順に呼び出される。
        """
        self._draw_callbacks.append(func)

    def bind_key(self, symbol: int, func: Callable[[], object]) -> None:
        """キー押下で `func()` を呼ぶ。同じキーへの再登録は上書き。"""
        self._key_handlers[symbol] = func

    def on_draw(self):  # Pyglet 既定のイベント名
        """ウィンドウ描画イベントハンドラ。カラー/深度をクリアしてコールバックを呼ぶ。"""
        r, g, b, a = self._bg_color
        glClearColor(r, g, b, a)
        self.clear()
        for cb in self._draw_callbacks:
            cb()

    def on_key_press(self, symbol, modifiers):  # Pyglet 既定のイベント名
        handler = self._key_handlers.get(symbol)
        if handler is not None:
            handler()
            return pyglet.event.EVENT_HANDLED
        # ESC で閉じる既定動作は親クラスに任せる
        return super().on_key_press(symbol, modifiers)
