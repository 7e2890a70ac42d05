"""
どこで: `src/sketchbook/core/color.py`。
何を: RGBA 色モデルと、RGB255 / HSB からの変換・補間ユーティリティを提供する。
なぜ: スケッチ側は p5 風の色指定（RGB 0..255 / HSB 360,100,100）で書き、
描画・エクスポート側は 0..1 float に統一して扱うため。
"""

from __future__ import annotations

import colorsys
from dataclasses import dataclass


def _clamp01(v: float) -> float:
    fv = float(v)
    return 0.0 if fv < 0.0 else 1.0 if fv > 1.0 else fv


def lerp(start: float, stop: float, amount: float) -> float:
    """start..stop を amount で線形補間した値を返す（amount はクランプしない）。"""

    return float(start) + (float(stop) - float(start)) * float(amount)


def map_range(
    value: float,
    start1: float,
    stop1: float,
    start2: float,
    stop2: float,
) -> float:
    """value を [start1, stop1] から [start2, stop2] へ線形写像する。

    Notes
    -----
    p5 の `map()` と同じく範囲外はクランプしない。
    入力範囲の幅が 0 の場合は ValueError。
    """

    span = float(stop1) - float(start1)
    if span == 0.0:
        raise ValueError("map_range の入力範囲の幅が 0")
    return float(start2) + (float(value) - float(start1)) / span * (
        float(stop2) - float(start2)
    )


@dataclass(frozen=True, slots=True)
class Color:
    """0..1 float の RGBA 色。"""

    r: float
    g: float
    b: float
    a: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "r", _clamp01(self.r))
        object.__setattr__(self, "g", _clamp01(self.g))
        object.__setattr__(self, "b", _clamp01(self.b))
        object.__setattr__(self, "a", _clamp01(self.a))

    @classmethod
    def rgb(cls, r: float, g: float, b: float, a: float = 255.0) -> Color:
        """0..255 の RGB(A) から色を作る。"""

        return cls(float(r) / 255.0, float(g) / 255.0, float(b) / 255.0, float(a) / 255.0)

    @classmethod
    def gray(cls, v: float, a: float = 255.0) -> Color:
        """0..255 のグレー値から色を作る。"""

        return cls.rgb(v, v, v, a)

    @classmethod
    def hsb(cls, h: float, s: float, b: float, a: float = 255.0) -> Color:
        """HSB（h: 0..360, s/b: 0..100, a: 0..255）から色を作る。"""

        hue = (float(h) % 360.0) / 360.0
        r, g, bb = colorsys.hsv_to_rgb(hue, _clamp01(float(s) / 100.0), _clamp01(float(b) / 100.0))
        return cls(r, g, bb, float(a) / 255.0)

    def with_alpha(self, a: float) -> Color:
        """alpha（0..255）だけ差し替えた色を返す。"""

        return Color(self.r, self.g, self.b, float(a) / 255.0)

    def to_rgba01(self) -> tuple[float, float, float, float]:
        return (self.r, self.g, self.b, self.a)

    def to_rgb255(self) -> tuple[int, int, int]:
        """0..255 int の RGB を返す。"""

        return (
            int(round(self.r * 255.0)),
            int(round(self.g * 255.0)),
            int(round(self.b * 255.0)),
        )

    def to_rgba255(self) -> tuple[int, int, int, int]:
        r, g, b = self.to_rgb255()
        return (r, g, b, int(round(self.a * 255.0)))

    def to_hex(self) -> str:
        """#RRGGBB 形式の文字列を返す（alpha は含めない）。"""

        r, g, b = self.to_rgb255()
        return f"#{r:02X}{g:02X}{b:02X}"


def lerp_color(c1: Color, c2: Color, amount: float) -> Color:
    """2 色を RGBA 空間で線形補間する（amount は 0..1 にクランプ）。"""

    t = _clamp01(amount)
    return Color(
        lerp(c1.r, c2.r, t),
        lerp(c1.g, c2.g, t),
        lerp(c1.b, c2.b, t),
        lerp(c1.a, c2.a, t),
    )


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)

__all__ = ["BLACK", "WHITE", "Color", "lerp", "lerp_color", "map_range"]
