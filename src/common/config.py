"""
どこで: `common.config`
何を: YAML 設定（`configs/default.yaml` + ルート `config.yaml`）の読み込みと `ViewerConfig` への変換。
なぜ: 初期深さ・カメラ・投影箱・色などの既定値をコードから外に出し、起動引数で上書きできるようにするため。

読み込み規則（フェイルソフト）:
1) `configs/default.yaml`（ベース）
2) ルート `config.yaml`（トップレベルのみ上書き、ディープマージなし）
- 存在しない/壊れたファイルは空辞書として扱う。
- 個々の値が不正な場合は既定値のまま（DEBUG ログ）。
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

logger = logging.getLogger(__name__)

RGBA = tuple[float, float, float, float]
Vec3 = tuple[float, float, float]


def _safe_load_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError):
        logger.debug("failed to read config: %s", path, exc_info=True)
        return {}
    return data if isinstance(data, dict) else {}


def _find_project_root(start: Path) -> Path:
    """`pyproject.toml` か `configs/` を持つ最も近い上位ディレクトリを返す。

    見つからない場合は `<repo>/src/common/config.py` を想定して 2 つ上を返す。
    """
    cur = start.resolve()
    for parent in [cur] + list(cur.parents):
        if (parent / "pyproject.toml").exists() or (parent / "configs").exists():
            return parent
    return cur.parent.parent


def load_config(root: Path | None = None) -> dict[str, Any]:
    """設定を読み込んで辞書で返す。"""
    project_root = root if root is not None else _find_project_root(Path(__file__).parent)
    base: dict[str, Any] = {}

    default_path = project_root / "configs" / "default.yaml"
    if default_path.exists():
        base.update(_safe_load_yaml(default_path))

    root_config_path = project_root / "config.yaml"
    if root_config_path.exists():
        base.update(_safe_load_yaml(root_config_path))

    return base


def parse_color(value: Any) -> RGBA:
    """`#RRGGBB` / `#RRGGBBAA` / RGB(A) 0–1 のタプルを RGBA に正規化する。"""
    if isinstance(value, str):
        s = value.strip().lstrip("#")
        if len(s) not in (6, 8):
            raise ValueError(f"invalid color string: {value!r}")
        comps = [int(s[i : i + 2], 16) / 255.0 for i in range(0, len(s), 2)]
    else:
        comps = [float(c) for c in value]
    if len(comps) == 3:
        comps.append(1.0)
    if len(comps) != 4 or any(not 0.0 <= c <= 1.0 for c in comps):
        raise ValueError(f"invalid color: {value!r}")
    return (comps[0], comps[1], comps[2], comps[3])


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "yes", "on", "1"}:
        return True
    if isinstance(value, str) and value.strip().lower() in {"false", "no", "off", "0"}:
        return False
    if isinstance(value, int):
        return value != 0
    raise ValueError(f"invalid bool: {value!r}")


def _parse_vec3(value: Any) -> Vec3:
    x, y, z = (float(c) for c in value)
    return (x, y, z)


@dataclass(frozen=True)
class ViewerConfig:
    """ビューア起動時の設定値。"""

    # viewer
    width: int = 800
    height: int = 800
    fps: int = 60
    background_color: RGBA = (0.0, 0.0, 0.0, 1.0)
    line_color: RGBA = (0.0, 1.0, 0.0, 1.0)

    # subdivision
    depth: int = 5
    min_depth: int = 0
    max_depth: int = 8

    # camera（theta/phi はラジアン）
    radius: float = 2.0
    theta: float = 25.0
    phi: float = 30.0
    auto_rotate: bool = True
    rotation_step: float = math.pi / 500
    rotation_interval: float = 0.01
    at: Vec3 = (0.0, 0.0, 0.0)
    up: Vec3 = (0.0, 1.0, 0.0)

    # orthographic box
    left: float = -2.0
    right: float = 2.0
    bottom: float = -2.0
    top: float = 2.0
    near: float = -20.0
    far: float = 20.0

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any] | None) -> "ViewerConfig":
        """`load_config()` の辞書から組み立てる（不正値は既定値のまま）。"""
        cfg = cfg if isinstance(cfg, Mapping) else {}
        viewer = cfg.get("viewer") or {}
        sub = cfg.get("subdivision") or {}
        camera = cfg.get("camera") or {}
        box = camera.get("ortho") if isinstance(camera, Mapping) else None
        box = box or {}

        parsers: dict[str, Any] = {
            "width": int,
            "height": int,
            "fps": int,
            "background_color": parse_color,
            "line_color": parse_color,
            "depth": int,
            "min_depth": int,
            "max_depth": int,
            "radius": float,
            "theta": float,
            "phi": float,
            "auto_rotate": _parse_bool,
            "rotation_step": float,
            "rotation_interval": float,
            "at": _parse_vec3,
            "up": _parse_vec3,
            "left": float,
            "right": float,
            "bottom": float,
            "top": float,
            "near": float,
            "far": float,
        }
        sections: list[Mapping[str, Any]] = [
            s for s in (viewer, sub, camera, box) if isinstance(s, Mapping)
        ]
        values: dict[str, Any] = {}
        for name, parse in parsers.items():
            for section in sections:
                if name not in section or isinstance(section[name], Mapping):
                    continue
                try:
                    values[name] = parse(section[name])
                except (TypeError, ValueError):
                    logger.debug("ignoring invalid config value %s=%r", name, section[name])
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "ViewerConfig":
        """None 以外の値だけを上書きした新しい設定を返す。"""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"unknown config keys: {sorted(unknown)}")
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def validate(self) -> None:
        """起動前の整合性チェック。問題があれば `ValueError`。"""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"window size must be positive, got {(self.width, self.height)}")
        if self.fps <= 0:
            raise ValueError(f"fps must be > 0, got {self.fps}")
        if self.min_depth < 0 or self.min_depth > self.max_depth:
            raise ValueError(f"invalid depth range: [{self.min_depth}, {self.max_depth}]")
        if self.rotation_interval <= 0:
            raise ValueError(f"rotation_interval must be > 0, got {self.rotation_interval}")
        if self.right == self.left or self.top == self.bottom or self.far == self.near:
            raise ValueError("orthographic box must have non-zero extent on every axis")


__all__ = ["load_config", "parse_color", "ViewerConfig"]
