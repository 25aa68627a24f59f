"""
どこで: `engine.core` サブパッケージ。
何を: 三角形バッファ・ビューア状態・フレーム駆動（Tickable/FrameClock）・描画ウィンドウを提供。
なぜ: 計算と描画の基盤を構成し、上位層（api/render）から再利用可能にするため。
"""
