"""
どこで: `src/sketchbook/core/tessellate.py`。
何を: 描画コマンド列を GPU 向けの三角形列（頂点 + 頂点色）へ分解する。
なぜ: GL 依存なしで形状生成を完結させ、interactive 側は転送と draw call だけに寄せるため。
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Literal

import numpy as np

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

TWO_PI = 2.0 * math.pi
_SEGMENTS_PER_TURN = 96
_CORNER_SEGMENTS = 8


@dataclass(frozen=True, slots=True)
class TriangleBatch:
    """三角形リスト（GL_TRIANGLES）の頂点と頂点色。

    Parameters
    ----------
    vertices : np.ndarray
        float32 型 shape (N, 2)。キャンバス座標（y 下向き）。
    colors : np.ndarray
        float32 型 shape (N, 4)。0..1 の RGBA。

    Notes
    -----
    N は 3 の倍数であることをコンストラクタで検証する。
    """

    vertices: np.ndarray
    colors: np.ndarray

    def __post_init__(self) -> None:
        vertices = np.asarray(self.vertices, dtype=np.float32).reshape(-1, 2)
        colors = np.asarray(self.colors, dtype=np.float32).reshape(-1, 4)
        if vertices.shape[0] != colors.shape[0]:
            raise ValueError("vertices と colors の行数が一致しない")
        if vertices.shape[0] % 3 != 0:
            raise ValueError("頂点数は 3 の倍数である必要がある")
        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "colors", colors)

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    def interleaved(self) -> np.ndarray:
        """`[x, y, r, g, b, a]` を行とする float32 配列を返す（VBO 転送用）。"""

        return np.ascontiguousarray(
            np.concatenate([self.vertices, self.colors], axis=1), dtype=np.float32
        )


def empty_batch() -> TriangleBatch:
    return TriangleBatch(
        vertices=np.zeros((0, 2), dtype=np.float32),
        colors=np.zeros((0, 4), dtype=np.float32),
    )


def concat_batches(batches: Sequence[TriangleBatch]) -> TriangleBatch:
    """複数バッチを描画順を保って連結する。"""

    items = [b for b in batches if b.vertex_count > 0]
    if not items:
        return empty_batch()
    return TriangleBatch(
        vertices=np.concatenate([b.vertices for b in items], axis=0),
        colors=np.concatenate([b.colors for b in items], axis=0),
    )


def _solid(vertices: np.ndarray, color: Color) -> TriangleBatch:
    colors = np.tile(np.asarray(color.to_rgba01(), dtype=np.float32), (vertices.shape[0], 1))
    return TriangleBatch(vertices=vertices, colors=colors)


def _segments_for(sweep: float) -> int:
    return max(8, int(math.ceil(abs(sweep) / TWO_PI * _SEGMENTS_PER_TURN)))


def normalize_arc(start: float, stop: float) -> tuple[float, float]:
    """弧の (開始角, 掃引角) を返す。

    Notes
    -----
    - stop - start が 2π 以上なら全周（掃引 2π）。
    - stop < start の場合は 2π を法として正の掃引に直す（p5 の arc と同じ向き）。
    - 開始と終了が一致する場合は掃引 0（何も描かない）。
    """

    sweep = float(stop) - float(start)
    if sweep >= TWO_PI:
        return float(start), TWO_PI
    if sweep < 0.0:
        sweep = sweep % TWO_PI
    return float(start), float(sweep)


def ellipse_points(
    cx: float,
    cy: float,
    rx: float,
    ry: float,
    start: float,
    sweep: float,
    *,
    segments: int | None = None,
) -> np.ndarray:
    """楕円弧上の点列（shape (M, 2)、両端を含む）を返す。"""

    n = _segments_for(sweep) if segments is None else max(1, int(segments))
    angles = np.linspace(start, start + sweep, num=n + 1, dtype=np.float64)
    x = cx + rx * np.cos(angles)
    y = cy + ry * np.sin(angles)
    return np.stack([x, y], axis=1).astype(np.float32)


def _fan(center: tuple[float, float], points: np.ndarray, color: Color) -> TriangleBatch:
    """center と連続点列で扇状の三角形を作る。"""

    if points.shape[0] < 2:
        return empty_batch()
    m = points.shape[0] - 1
    c = np.tile(np.asarray(center, dtype=np.float32), (m, 1))
    tris = np.stack([c, points[:-1], points[1:]], axis=1).reshape(-1, 2)
    return _solid(tris, color)


def _band(inner: np.ndarray, outer: np.ndarray, color: Color) -> TriangleBatch:
    """同数の内周/外周点列の間を四角形（三角形 2 枚）で埋める。"""

    if inner.shape[0] < 2:
        return empty_batch()
    a, b = inner[:-1], inner[1:]
    c, d = outer[:-1], outer[1:]
    tris = np.stack([a, c, d, a, d, b], axis=1).reshape(-1, 2)
    return _solid(tris, color)


def _quad(x0: float, y0: float, x1: float, y1: float, color: Color) -> TriangleBatch:
    v = np.asarray(
        [[x0, y0], [x1, y0], [x1, y1], [x0, y0], [x1, y1], [x0, y1]], dtype=np.float32
    )
    return _solid(v, color)


def _disc(cx: float, cy: float, r: float, color: Color) -> TriangleBatch:
    if r <= 0:
        return empty_batch()
    return _fan((cx, cy), ellipse_points(cx, cy, r, r, 0.0, TWO_PI, segments=16), color)


def _segment_quad(
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    weight: float,
    color: Color,
) -> TriangleBatch:
    dx = x2 - x1
    dy = y2 - y1
    length = math.hypot(dx, dy)
    if length == 0.0 or weight <= 0:
        return empty_batch()
    nx = -dy / length * weight * 0.5
    ny = dx / length * weight * 0.5
    p = [
        (x1 + nx, y1 + ny),
        (x2 + nx, y2 + ny),
        (x2 - nx, y2 - ny),
        (x1 + nx, y1 + ny),
        (x2 - nx, y2 - ny),
        (x1 - nx, y1 - ny),
    ]
    return _solid(np.asarray(p, dtype=np.float32), color)


def _polyline(points: np.ndarray, weight: float, color: Color) -> TriangleBatch:
    return concat_batches(
        [
            _segment_quad(float(a[0]), float(a[1]), float(b[0]), float(b[1]), weight, color)
            for a, b in zip(points[:-1], points[1:])
        ]
    )


def _rounded_rect_points(x: float, y: float, w: float, h: float, r: float) -> np.ndarray:
    """角丸矩形の外周点列（閉じた点列、先頭を終端に複製）を返す。"""

    r = max(0.0, min(r, abs(w) / 2.0, abs(h) / 2.0))
    corners = (
        (x + w - r, y + r, -math.pi / 2.0),
        (x + w - r, y + h - r, 0.0),
        (x + r, y + h - r, math.pi / 2.0),
        (x + r, y + r, math.pi),
    )
    parts = [
        ellipse_points(cx, cy, r, r, a0, math.pi / 2.0, segments=_CORNER_SEGMENTS)
        for cx, cy, a0 in corners
    ]
    pts = np.concatenate(parts, axis=0)
    return np.concatenate([pts, pts[:1]], axis=0)


def _tessellate_rect(cmd: RectCommand) -> TriangleBatch:
    batches: list[TriangleBatch] = []
    x0, y0, x1, y1 = cmd.x, cmd.y, cmd.x + cmd.w, cmd.y + cmd.h
    outline: np.ndarray | None = None
    if cmd.radius > 0:
        outline = _rounded_rect_points(cmd.x, cmd.y, cmd.w, cmd.h, cmd.radius)
    if cmd.fill is not None:
        if outline is None:
            batches.append(_quad(x0, y0, x1, y1, cmd.fill))
        else:
            center = (cmd.x + cmd.w / 2.0, cmd.y + cmd.h / 2.0)
            batches.append(_fan(center, outline, cmd.fill))
    if cmd.stroke is not None and cmd.stroke_weight > 0:
        if outline is None:
            outline = np.asarray(
                [[x0, y0], [x1, y0], [x1, y1], [x0, y1], [x0, y0]], dtype=np.float32
            )
        batches.append(_polyline(outline, cmd.stroke_weight, cmd.stroke))
    return concat_batches(batches)


def _tessellate_ellipse(cmd: EllipseCommand) -> TriangleBatch:
    batches: list[TriangleBatch] = []
    rx, ry = cmd.w / 2.0, cmd.h / 2.0
    if cmd.fill is not None:
        pts = ellipse_points(cmd.cx, cmd.cy, rx, ry, 0.0, TWO_PI)
        batches.append(_fan((cmd.cx, cmd.cy), pts, cmd.fill))
    if cmd.stroke is not None and cmd.stroke_weight > 0:
        half = cmd.stroke_weight / 2.0
        inner = ellipse_points(cmd.cx, cmd.cy, max(rx - half, 0.0), max(ry - half, 0.0), 0.0, TWO_PI)
        outer = ellipse_points(cmd.cx, cmd.cy, rx + half, ry + half, 0.0, TWO_PI)
        batches.append(_band(inner, outer, cmd.stroke))
    return concat_batches(batches)


def _tessellate_arc(cmd: ArcCommand) -> TriangleBatch:
    start, sweep = normalize_arc(cmd.start, cmd.stop)
    if sweep <= 0.0:
        return empty_batch()
    batches: list[TriangleBatch] = []
    rx, ry = cmd.w / 2.0, cmd.h / 2.0
    pts = ellipse_points(cmd.cx, cmd.cy, rx, ry, start, sweep)
    if cmd.fill is not None:
        if cmd.mode == "pie":
            batches.append(_fan((cmd.cx, cmd.cy), pts, cmd.fill))
        else:
            # open: 弦で閉じた領域を塗る
            batches.append(_fan((float(pts[0, 0]), float(pts[0, 1])), pts[1:], cmd.fill))
    if cmd.stroke is not None and cmd.stroke_weight > 0:
        half = cmd.stroke_weight / 2.0
        inner = ellipse_points(cmd.cx, cmd.cy, max(rx - half, 0.0), max(ry - half, 0.0), start, sweep)
        outer = ellipse_points(cmd.cx, cmd.cy, rx + half, ry + half, start, sweep)
        batches.append(_band(inner, outer, cmd.stroke))
        if cmd.mode == "pie":
            for p in (pts[0], pts[-1]):
                batches.append(
                    _segment_quad(cmd.cx, cmd.cy, float(p[0]), float(p[1]), cmd.stroke_weight, cmd.stroke)
                )
        elif cmd.cap == "round" and sweep < TWO_PI:
            for p in (pts[0], pts[-1]):
                batches.append(_disc(float(p[0]), float(p[1]), half, cmd.stroke))
    return concat_batches(batches)


def _tessellate_line(cmd: LineCommand) -> TriangleBatch:
    batches = [_segment_quad(cmd.x1, cmd.y1, cmd.x2, cmd.y2, cmd.stroke_weight, cmd.stroke)]
    if cmd.cap == "round":
        half = cmd.stroke_weight / 2.0
        batches.append(_disc(cmd.x1, cmd.y1, half, cmd.stroke))
        batches.append(_disc(cmd.x2, cmd.y2, half, cmd.stroke))
    return concat_batches(batches)


def tessellate_command(cmd: DrawCommand, canvas_size: tuple[int, int]) -> TriangleBatch:
    """1 コマンドを三角形列へ変換する（TextCommand は空）。"""

    w, h = canvas_size
    if isinstance(cmd, BackgroundCommand):
        return _quad(0.0, 0.0, float(w), float(h), cmd.color)
    if isinstance(cmd, GradientCommand):
        top = np.asarray(cmd.top.to_rgba01(), dtype=np.float32)
        bottom = np.asarray(cmd.bottom.to_rgba01(), dtype=np.float32)
        v = np.asarray(
            [[0, 0], [w, 0], [w, h], [0, 0], [w, h], [0, h]], dtype=np.float32
        )
        colors = np.stack([top, top, bottom, top, bottom, bottom], axis=0)
        return TriangleBatch(vertices=v, colors=colors)
    if isinstance(cmd, RectCommand):
        return _tessellate_rect(cmd)
    if isinstance(cmd, EllipseCommand):
        return _tessellate_ellipse(cmd)
    if isinstance(cmd, ArcCommand):
        return _tessellate_arc(cmd)
    if isinstance(cmd, LineCommand):
        return _tessellate_line(cmd)
    if isinstance(cmd, TextCommand):
        return empty_batch()
    raise TypeError(f"tessellate で処理できない型: {type(cmd)!r}")


def tessellate(commands: Sequence[DrawCommand], canvas_size: tuple[int, int]) -> TriangleBatch:
    """コマンド列を描画順どおりに 1 つの三角形列へ変換する。"""

    return concat_batches([tessellate_command(c, canvas_size) for c in commands])


RunKind = Literal["shapes", "text"]


def iter_runs(
    commands: Sequence[DrawCommand],
) -> Iterator[tuple[RunKind, list[DrawCommand]]]:
    """コマンド列を「図形の連続」と「テキストの連続」に区切って順に返す。

    Notes
    -----
    図形とテキストは別経路（GL / フォント）で描くため、重なり順を保つ単位に分ける。
    """

    kind: RunKind | None = None
    run: list[DrawCommand] = []
    for cmd in commands:
        k: RunKind = "text" if isinstance(cmd, TextCommand) else "shapes"
        if kind is not None and k != kind:
            yield kind, run
            run = []
        kind = k
        run.append(cmd)
    if kind is not None and run:
        yield kind, run


__all__ = [
    "TriangleBatch",
    "concat_batches",
    "ellipse_points",
    "empty_batch",
    "iter_runs",
    "normalize_arc",
    "tessellate",
    "tessellate_command",
]
