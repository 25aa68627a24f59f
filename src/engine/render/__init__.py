"""
どこで: `engine.render` サブパッケージ。
何を: 三角形バッファ → GPU 転送・線ループ描画の入口。WireframeRenderer/LineLoopMesh/Shader を提供。
なぜ: 計算（glmath/shapes）と描画の責務を分離し、GPU リソース管理を局所化するため。
"""
