"""
どこで: `src/sketchbook/export/svg.py`。
何を: 1 フレーム分の描画コマンド列を SVG として保存する関数を提供する。
なぜ: interactive 依存なしの headless export（SVG）を用意し、スナップショットを反復可能にするため。
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from html import escape
from pathlib import Path

from sketchbook.core.canvas import (
    ArcCommand,
    BackgroundCommand,
    DrawCommand,
    EllipseCommand,
    GradientCommand,
    LineCommand,
    RectCommand,
    TextCommand,
)
from sketchbook.core.color import Color
from sketchbook.core.tessellate import TWO_PI, normalize_arc

_SVG_NS = "http://www.w3.org/2000/svg"
_FLOAT_DECIMALS = 3

_ANCHOR = {"left": "start", "center": "middle", "right": "end"}
_BASELINE = {
    "top": "text-before-edge",
    "center": "central",
    "baseline": "alphabetic",
    "bottom": "text-after-edge",
}
_LINECAP = {"round": "round", "square": "butt"}


def _fmt(value: float, *, decimals: int = _FLOAT_DECIMALS) -> str:
    """SVG 出力向けに float を決定的な文字列へ変換して返す。"""
    text = f"{float(value):.{int(decimals)}f}"
    if text.startswith("-0") and float(text) == 0.0:
        return text[1:]
    return text


def _paint(kind: str, color: Color | None) -> str:
    """fill/stroke 属性（と必要なら opacity）を返す。"""
    if color is None:
        return f'{kind}="none"'
    attrs = f'{kind}="{color.to_hex()}"'
    if color.a < 1.0:
        attrs += f' {kind}-opacity="{_fmt(color.a)}"'
    return attrs


def _stroke_attrs(color: Color | None, weight: float, cap: str = "round") -> str:
    if color is None or weight <= 0:
        return 'stroke="none"'
    return (
        f'{_paint("stroke", color)} stroke-width="{_fmt(weight)}" '
        f'stroke-linecap="{_LINECAP.get(cap, "round")}"'
    )


def _point(cx: float, cy: float, rx: float, ry: float, angle: float) -> str:
    return f"{_fmt(cx + rx * math.cos(angle))} {_fmt(cy + ry * math.sin(angle))}"


def _arc_path_d(cmd: ArcCommand, start: float, sweep: float) -> str:
    rx, ry = cmd.w / 2.0, cmd.h / 2.0
    large = 1 if sweep > math.pi else 0
    p0 = _point(cmd.cx, cmd.cy, rx, ry, start)
    p1 = _point(cmd.cx, cmd.cy, rx, ry, start + sweep)
    arc = f"A {_fmt(rx)} {_fmt(ry)} 0 {large} 1 {p1}"
    if cmd.mode == "pie":
        return f"M {_fmt(cmd.cx)} {_fmt(cmd.cy)} L {p0} {arc} Z"
    return f"M {p0} {arc}"


def _element_lines(
    cmd: DrawCommand,
    *,
    index: int,
    canvas_size: tuple[int, int],
) -> list[str]:
    w, h = canvas_size
    if isinstance(cmd, BackgroundCommand):
        return [
            f'  <rect x="0" y="0" width="{int(w)}" height="{int(h)}" {_paint("fill", cmd.color)} />'
        ]
    if isinstance(cmd, GradientCommand):
        gid = f"gradient{index}"
        return [
            f'  <defs><linearGradient id="{gid}" x1="0" y1="0" x2="0" y2="1">'
            f'<stop offset="0" stop-color="{cmd.top.to_hex()}" stop-opacity="{_fmt(cmd.top.a)}" />'
            f'<stop offset="1" stop-color="{cmd.bottom.to_hex()}" stop-opacity="{_fmt(cmd.bottom.a)}" />'
            f"</linearGradient></defs>",
            f'  <rect x="0" y="0" width="{int(w)}" height="{int(h)}" fill="url(#{gid})" />',
        ]
    if isinstance(cmd, RectCommand):
        radius = f' rx="{_fmt(cmd.radius)}" ry="{_fmt(cmd.radius)}"' if cmd.radius > 0 else ""
        return [
            (
                f'  <rect x="{_fmt(cmd.x)}" y="{_fmt(cmd.y)}" width="{_fmt(cmd.w)}" '
                f'height="{_fmt(cmd.h)}"{radius} {_paint("fill", cmd.fill)} '
                f"{_stroke_attrs(cmd.stroke, cmd.stroke_weight)} />"
            )
        ]
    if isinstance(cmd, EllipseCommand):
        return [
            (
                f'  <ellipse cx="{_fmt(cmd.cx)}" cy="{_fmt(cmd.cy)}" rx="{_fmt(cmd.w / 2.0)}" '
                f'ry="{_fmt(cmd.h / 2.0)}" {_paint("fill", cmd.fill)} '
                f"{_stroke_attrs(cmd.stroke, cmd.stroke_weight)} />"
            )
        ]
    if isinstance(cmd, ArcCommand):
        start, sweep = normalize_arc(cmd.start, cmd.stop)
        if sweep <= 0.0:
            return []
        paint = f'{_paint("fill", cmd.fill)} {_stroke_attrs(cmd.stroke, cmd.stroke_weight, cmd.cap)}'
        if sweep >= TWO_PI:
            # SVG の A コマンドは全周を 1 本で表せないため楕円で代用する
            return [
                (
                    f'  <ellipse cx="{_fmt(cmd.cx)}" cy="{_fmt(cmd.cy)}" rx="{_fmt(cmd.w / 2.0)}" '
                    f'ry="{_fmt(cmd.h / 2.0)}" {paint} />'
                )
            ]
        return [f'  <path d="{_arc_path_d(cmd, start, sweep)}" {paint} />']
    if isinstance(cmd, LineCommand):
        return [
            (
                f'  <line x1="{_fmt(cmd.x1)}" y1="{_fmt(cmd.y1)}" x2="{_fmt(cmd.x2)}" '
                f'y2="{_fmt(cmd.y2)}" {_stroke_attrs(cmd.stroke, cmd.stroke_weight, cmd.cap)} />'
            )
        ]
    if isinstance(cmd, TextCommand):
        if not cmd.text:
            return []
        return [
            (
                f'  <text x="{_fmt(cmd.x)}" y="{_fmt(cmd.y)}" font-family="{escape(cmd.font)}" '
                f'font-size="{_fmt(cmd.size)}" {_paint("fill", cmd.color)} '
                f'text-anchor="{_ANCHOR[cmd.align_x]}" '
                f'dominant-baseline="{_BASELINE[cmd.align_y]}">{escape(cmd.text, quote=False)}</text>'
            )
        ]
    raise TypeError(f"SVG に変換できない型: {type(cmd)!r}")


def svg_document(commands: Sequence[DrawCommand], *, canvas_size: tuple[int, int]) -> str:
    """コマンド列を SVG 文書の文字列にして返す。"""

    canvas_w, canvas_h = canvas_size
    if canvas_w <= 0 or canvas_h <= 0:
        raise ValueError("canvas_size は正の値である必要がある")

    lines: list[str] = []
    lines.append('<?xml version="1.0" encoding="UTF-8"?>')
    lines.append(
        (
            f'<svg xmlns="{_SVG_NS}" viewBox="0 0 {int(canvas_w)} {int(canvas_h)}" '
            f'width="{int(canvas_w)}" height="{int(canvas_h)}">'
        )
    )
    for i, cmd in enumerate(commands):
        lines.extend(_element_lines(cmd, index=i, canvas_size=canvas_size))
    lines.append("</svg>")
    return "\n".join(lines) + "\n"


def export_svg(
    commands: Sequence[DrawCommand],
    path: str | Path,
    *,
    canvas_size: tuple[int, int] | None = None,
) -> Path:
    """コマンド列を SVG として保存する。

    Parameters
    ----------
    commands : Sequence[DrawCommand]
        1 フレーム分の描画コマンド列（記録順に重ねる）。
    path : str or Path
        出力先パス。
    canvas_size : tuple[int, int] or None, optional
        キャンバス寸法。None は未対応。

    Returns
    -------
    Path
        保存先パス。

    Raises
    ------
    ValueError
        canvas_size が None または正でない場合。
    """
    _path = Path(path)
    if canvas_size is None:
        raise ValueError("canvas_size=None は未対応（現在は必須）")

    text = svg_document(commands, canvas_size=canvas_size)

    _path.parent.mkdir(parents=True, exist_ok=True)
    with _path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(text)

    return _path


__all__ = ["export_svg", "svg_document"]
