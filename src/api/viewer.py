"""
どこで: `api.viewer`（実行ランナー）。
何を: 設定を解決して ViewerState を作り、pyglet ウィンドウ + ModernGL で細分化四面体を回転表示する。
なぜ: 数値カーネル/細分化/描画をつなぐ配線を一箇所にまとめ、コマンドラインから起動できるようにするため。

実行フロー（概要）:
1) 設定解決: `configs/default.yaml`（+ ルート `config.yaml`）→ 引数で上書き → `validate()`。
2) 状態: `ViewerState.from_config()` が初期深さで四面体を構築する。
3) init_only: ここで状態を返して終了（pyglet/ModernGL は import しない）。
4) ウィンドウ/GL: `RenderWindow` と ModernGL コンテキスト（深度テスト有効）を作成。
5) 描画: `WireframeRenderer.draw` を描画コールバックに登録。
6) 駆動: `FrameClock([renderer])` を `1/fps` 間隔、回転タイマ（`ViewerState.tick`）を
   `rotation_interval` 間隔で `pyglet.clock` に登録。どちらも同じイベントループ上で直列に動く。
7) キー: Up/+ で深さ増、Down/- で深さ減、Space で自動回転切替、Esc で終了。

例:
    from api.viewer import run_viewer
    run_viewer(depth=3, fps=60)
"""

from __future__ import annotations

import argparse
import logging
from typing import TYPE_CHECKING, Sequence

from common.config import ViewerConfig, load_config, parse_color
from engine.core.app_state import DECREASE_SUBDIVISION, INCREASE_SUBDIVISION, ViewerState

if TYPE_CHECKING:
    from engine.core.frame_clock import FrameClock
    from engine.render.renderer import WireframeRenderer

logger = logging.getLogger(__name__)


def resolve_config(
    config: ViewerConfig | None = None,
    *,
    depth: int | None = None,
    fps: int | None = None,
    width: int | None = None,
    height: int | None = None,
    auto_rotate: bool | None = None,
    background: str | Sequence[float] | None = None,
    line_color: str | Sequence[float] | None = None,
) -> ViewerConfig:
    """設定ファイルと明示引数から検証済みの `ViewerConfig` を作る（引数が優先）。"""
    base = config if config is not None else ViewerConfig.from_mapping(load_config())
    resolved = base.with_overrides(
        depth=depth,
        fps=fps,
        width=width,
        height=height,
        auto_rotate=auto_rotate,
        background_color=parse_color(background) if background is not None else None,
        line_color=parse_color(line_color) if line_color is not None else None,
    )
    resolved.validate()
    return resolved


def run_viewer(
    *,
    depth: int | None = None,
    fps: int | None = None,
    width: int | None = None,
    height: int | None = None,
    auto_rotate: bool | None = None,
    background: str | Sequence[float] | None = None,
    line_color: str | Sequence[float] | None = None,
    batched: bool | None = None,
    config: ViewerConfig | None = None,
    init_only: bool = False,
) -> ViewerState:
    """ビューアを起動し、ウィンドウが閉じられたら最終状態を返す。

    Parameters
    ----------
    depth : int | None
        初期の細分化深さ（`[min_depth, max_depth]` にクランプ）。None で設定値。
    fps : int | None
        描画更新レート。None で設定値。
    width, height : int | None
        ウィンドウサイズ（ピクセル）。
    auto_rotate : bool | None
        起動時に自動回転するか。
    background, line_color : str | Sequence[float] | None
        RGBA 0–1 または `#RRGGBB(AA)`。
    batched : bool | None
        True で primitive restart を使った 1 回描画。None で `TSP_BATCHED_DRAW`。
    config : ViewerConfig | None
        設定ファイルの代わりに使う設定。
    init_only : bool, default False
        True で状態構築まで行い、ウィンドウを開かずに返す。
    """
    cfg = resolve_config(
        config,
        depth=depth,
        fps=fps,
        width=width,
        height=height,
        auto_rotate=auto_rotate,
        background=background,
        line_color=line_color,
    )
    state = ViewerState.from_config(cfg)
    logger.info(
        "tetrasphere: depth=%d (%d triangles), fps=%d, window=%dx%d",
        state.depth,
        len(state.buffer),
        cfg.fps,
        cfg.width,
        cfg.height,
    )
    if init_only:
        return state

    # 遅延インポート（ヘッドレス環境でのウィンドウ生成を避ける）
    import moderngl
    import pyglet
    from pyglet.window import key

    from engine.core.frame_clock import FrameClock
    from engine.core.render_window import RenderWindow
    from engine.render.renderer import WireframeRenderer

    window = RenderWindow(cfg.width, cfg.height, bg_color=cfg.background_color)
    mgl_ctx = moderngl.create_context()
    mgl_ctx.enable(moderngl.DEPTH_TEST)

    renderer = WireframeRenderer(mgl_ctx, state, line_color=cfg.line_color, batched=batched)
    window.add_draw_callback(renderer.draw)

    def _increase() -> None:
        state.handle_command(INCREASE_SUBDIVISION)

    def _decrease() -> None:
        state.handle_command(DECREASE_SUBDIVISION)

    def _toggle_rotation() -> None:
        enabled = state.toggle_auto_rotate()
        logger.info("auto-rotate %s", "on" if enabled else "off")

    for symbol in (key.UP, key.PLUS, key.EQUAL, key.NUM_ADD):
        window.bind_key(symbol, _increase)
    for symbol in (key.DOWN, key.MINUS, key.NUM_SUBTRACT):
        window.bind_key(symbol, _decrease)
    window.bind_key(key.SPACE, _toggle_rotation)

    frame_clock = FrameClock([renderer])
    pyglet.clock.schedule_interval(frame_clock.tick, 1 / cfg.fps)
    pyglet.clock.schedule_interval(state.tick, cfg.rotation_interval)

    @window.event
    def on_close():  # type: ignore[no-untyped-def]
        pyglet.clock.unschedule(frame_clock.tick)
        pyglet.clock.unschedule(state.tick)
        _log_session_summary(renderer, frame_clock)
        renderer.release()

    pyglet.app.run()
    return state


def _log_session_summary(renderer: WireframeRenderer, frame_clock: FrameClock) -> None:
    """終了時にフレーム数・実効 fps・直近アップロードの規模を 1 行で残す。"""
    vertices, triangles = renderer.get_last_counts()
    stats = renderer.get_upload_stats()
    logger.info(
        "tetrasphere closed after %d frames (%.1f fps): triangles=%d vertices=%d uploads=%d",
        frame_clock.ticks,
        frame_clock.average_fps(),
        triangles,
        vertices,
        stats["uploads"],
    )


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tetrasphere",
        description="Rotating wireframe of a recursively subdivided tetrahedron.",
    )
    p.add_argument("--depth", type=int, default=None, help="initial subdivision depth")
    p.add_argument("--fps", type=int, default=None, help="render rate")
    p.add_argument("--width", type=int, default=None)
    p.add_argument("--height", type=int, default=None)
    p.add_argument(
        "--no-auto-rotate",
        dest="auto_rotate",
        action="store_const",
        const=False,
        default=None,
        help="start with auto-rotation disabled",
    )
    p.add_argument(
        "--batched",
        action="store_const",
        const=True,
        default=None,
        help="draw all triangles with one indexed call",
    )
    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    p.add_argument(
        "--init-only",
        action="store_true",
        help="build the geometry and exit without opening a window",
    )
    return p


def main(argv: Sequence[str] | None = None) -> int:
    from common.logging import setup_default_logging

    args = build_arg_parser().parse_args(argv)
    setup_default_logging(args.log_level)
    run_viewer(
        depth=args.depth,
        fps=args.fps,
        width=args.width,
        height=args.height,
        auto_rotate=args.auto_rotate,
        batched=args.batched,
        init_only=args.init_only,
    )
    return 0


__all__ = ["resolve_config", "run_viewer", "build_arg_parser", "main"]
