"""
どこで: `src/sketchbook/core/canvas.py`。
何を: p5 風の描画 API を持つ Canvas と、1 フレーム分の描画コマンド（不変レコード）を定義する。
なぜ: スケッチの描画を「コマンド列」という値に落とし、GL 描画・SVG 出力・テストで共通に扱うため。
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, TypeAlias

from sketchbook.core.color import BLACK, WHITE, Color

ArcMode = Literal["open", "pie"]
StrokeCap = Literal["round", "square"]
AlignX = Literal["left", "center", "right"]
AlignY = Literal["top", "center", "baseline", "bottom"]


@dataclass(frozen=True, slots=True)
class BackgroundCommand:
    """キャンバス全面の塗り。"""

    color: Color


@dataclass(frozen=True, slots=True)
class GradientCommand:
    """キャンバス全面の縦グラデーション（上端 top → 下端 bottom）。"""

    top: Color
    bottom: Color


@dataclass(frozen=True, slots=True)
class RectCommand:
    x: float
    y: float
    w: float
    h: float
    fill: Color | None
    stroke: Color | None
    stroke_weight: float
    radius: float = 0.0


@dataclass(frozen=True, slots=True)
class EllipseCommand:
    """中心 (cx, cy)、直径 (w, h) の楕円。"""

    cx: float
    cy: float
    w: float
    h: float
    fill: Color | None
    stroke: Color | None
    stroke_weight: float


@dataclass(frozen=True, slots=True)
class ArcCommand:
    """楕円弧。角度は rad、y 下向き座標系で時計回り。"""

    cx: float
    cy: float
    w: float
    h: float
    start: float
    stop: float
    mode: ArcMode
    fill: Color | None
    stroke: Color | None
    stroke_weight: float
    cap: StrokeCap


@dataclass(frozen=True, slots=True)
class LineCommand:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: Color
    stroke_weight: float
    cap: StrokeCap


@dataclass(frozen=True, slots=True)
class TextCommand:
    """1 行のテキスト。(x, y) は align_x/align_y で決まるアンカー位置。"""

    text: str
    x: float
    y: float
    size: float
    font: str
    color: Color
    align_x: AlignX
    align_y: AlignY


DrawCommand: TypeAlias = (
    BackgroundCommand
    | GradientCommand
    | RectCommand
    | EllipseCommand
    | ArcCommand
    | LineCommand
    | TextCommand
)


@dataclass(frozen=True, slots=True)
class _Style:
    fill: Color | None = WHITE
    stroke: Color | None = BLACK
    stroke_weight: float = 1.0
    stroke_cap: StrokeCap = "round"
    text_size: float = 12.0
    text_font: str = "sans-serif"
    align_x: AlignX = "left"
    align_y: AlignY = "baseline"
    text_leading: float | None = None


@dataclass(frozen=True, slots=True)
class _Transform:
    tx: float = 0.0
    ty: float = 0.0
    scale: float = 1.0

    def apply(self, x: float, y: float) -> tuple[float, float]:
        return (self.tx + float(x) * self.scale, self.ty + float(y) * self.scale)


def capped_size(
    width: int,
    height: int,
    max_size: tuple[int, int] | None,
) -> tuple[int, int]:
    """(width, height) を max_size で上限クランプした寸法を返す。"""

    w = int(width)
    h = int(height)
    if w <= 0 or h <= 0:
        raise ValueError(f"canvas size は正の値である必要がある: got={(width, height)!r}")
    if max_size is None:
        return (w, h)
    max_w, max_h = max_size
    return (min(w, int(max_w)), min(h, int(max_h)))


class Canvas:
    """描画コマンドを記録する論理キャンバス。

    スタイル（fill/stroke/text）はフレームをまたいで保持し、
    座標変換（translate/scale）は `begin_frame()` でリセットする。
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        max_size: tuple[int, int] | None = None,
    ) -> None:
        self._max_size = None if max_size is None else (int(max_size[0]), int(max_size[1]))
        self._width, self._height = capped_size(width, height, self._max_size)
        self._commands: list[DrawCommand] = []
        self._style = _Style()
        self._transform = _Transform()
        self._stack: list[tuple[_Style, _Transform]] = []

    # ---------- サイズ ----------
    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> tuple[int, int]:
        return (self._width, self._height)

    @property
    def max_size(self) -> tuple[int, int] | None:
        return self._max_size

    def resize(self, width: int, height: int) -> bool:
        """寸法を更新する（max_size で上限クランプ）。変化した場合 True を返す。"""

        size = capped_size(width, height, self._max_size)
        if size == self.size:
            return False
        self._width, self._height = size
        return True

    # ---------- フレーム ----------
    def begin_frame(self) -> None:
        """記録済みコマンドと座標変換を破棄し、新しいフレームを始める。"""

        self._commands.clear()
        self._transform = _Transform()
        self._stack.clear()

    @property
    def commands(self) -> tuple[DrawCommand, ...]:
        """現在フレームで記録されたコマンド列を返す。"""

        return tuple(self._commands)

    # ---------- スタイル ----------
    def fill(self, color: Color) -> None:
        self._style = replace(self._style, fill=color)

    def no_fill(self) -> None:
        self._style = replace(self._style, fill=None)

    def stroke(self, color: Color) -> None:
        self._style = replace(self._style, stroke=color)

    def no_stroke(self) -> None:
        self._style = replace(self._style, stroke=None)

    def stroke_weight(self, weight: float) -> None:
        self._style = replace(self._style, stroke_weight=float(weight))

    def stroke_cap(self, cap: StrokeCap) -> None:
        self._style = replace(self._style, stroke_cap=cap)

    def text_size(self, size: float) -> None:
        self._style = replace(self._style, text_size=float(size))

    def text_font(self, font: str) -> None:
        self._style = replace(self._style, text_font=str(font))

    def text_align(self, align_x: AlignX, align_y: AlignY | None = None) -> None:
        """水平（と任意で垂直）の揃えを設定する。垂直を省略した場合は現状維持。"""

        if align_y is None:
            self._style = replace(self._style, align_x=align_x)
        else:
            self._style = replace(self._style, align_x=align_x, align_y=align_y)

    def text_leading(self, leading: float) -> None:
        self._style = replace(self._style, text_leading=float(leading))

    # ---------- push / pop ----------
    def push(self) -> None:
        self._stack.append((self._style, self._transform))

    def pop(self) -> None:
        if not self._stack:
            raise RuntimeError("push() と対にならない pop() 呼び出し")
        self._style, self._transform = self._stack.pop()

    def translate(self, x: float, y: float) -> None:
        tx, ty = self._transform.apply(x, y)
        self._transform = replace(self._transform, tx=tx, ty=ty)

    def scale(self, s: float) -> None:
        self._transform = replace(self._transform, scale=self._transform.scale * float(s))

    # ---------- プリミティブ ----------
    def background(self, color: Color) -> None:
        self._commands.append(BackgroundCommand(color=color))

    def vertical_gradient(self, top: Color, bottom: Color) -> None:
        self._commands.append(GradientCommand(top=top, bottom=bottom))

    def rect(self, x: float, y: float, w: float, h: float, radius: float = 0.0) -> None:
        """左上 (x, y)、幅 w、高さ h の矩形。radius > 0 で角丸。"""

        st = self._style
        s = self._transform.scale
        px, py = self._transform.apply(x, y)
        self._commands.append(
            RectCommand(
                x=px,
                y=py,
                w=float(w) * s,
                h=float(h) * s,
                fill=st.fill,
                stroke=st.stroke,
                stroke_weight=st.stroke_weight * s,
                radius=float(radius) * s,
            )
        )

    def ellipse(self, cx: float, cy: float, w: float, h: float) -> None:
        st = self._style
        s = self._transform.scale
        px, py = self._transform.apply(cx, cy)
        self._commands.append(
            EllipseCommand(
                cx=px,
                cy=py,
                w=float(w) * s,
                h=float(h) * s,
                fill=st.fill,
                stroke=st.stroke,
                stroke_weight=st.stroke_weight * s,
            )
        )

    def arc(
        self,
        cx: float,
        cy: float,
        w: float,
        h: float,
        start: float,
        stop: float,
        mode: ArcMode = "open",
    ) -> None:
        st = self._style
        s = self._transform.scale
        px, py = self._transform.apply(cx, cy)
        self._commands.append(
            ArcCommand(
                cx=px,
                cy=py,
                w=float(w) * s,
                h=float(h) * s,
                start=float(start),
                stop=float(stop),
                mode=mode,
                fill=st.fill,
                stroke=st.stroke,
                stroke_weight=st.stroke_weight * s,
                cap=st.stroke_cap,
            )
        )

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        st = self._style
        if st.stroke is None:
            return
        s = self._transform.scale
        ax, ay = self._transform.apply(x1, y1)
        bx, by = self._transform.apply(x2, y2)
        self._commands.append(
            LineCommand(
                x1=ax,
                y1=ay,
                x2=bx,
                y2=by,
                stroke=st.stroke,
                stroke_weight=st.stroke_weight * s,
                cap=st.stroke_cap,
            )
        )

    def text(self, text: str, x: float, y: float) -> None:
        """テキストを描く。改行を含む場合は行送り（leading）ごとに 1 行ずつ記録する。"""

        st = self._style
        if st.fill is None:
            return
        s = self._transform.scale
        size = st.text_size * s
        leading = (st.text_leading if st.text_leading is not None else st.text_size * 1.25) * s
        px, py = self._transform.apply(x, y)
        for i, line in enumerate(str(text).split("\n")):
            self._commands.append(
                TextCommand(
                    text=line,
                    x=px,
                    y=py + i * leading,
                    size=size,
                    font=st.text_font,
                    color=st.fill,
                    align_x=st.align_x,
                    align_y=st.align_y,
                )
            )


__all__ = [
    "ArcCommand",
    "BackgroundCommand",
    "Canvas",
    "DrawCommand",
    "EllipseCommand",
    "GradientCommand",
    "LineCommand",
    "RectCommand",
    "TextCommand",
    "capped_size",
]
