"""
どこで: `src/sketchbook/sketches/balance.py`。
何を: 食事タイプごとの摂取/消費カロリーを集計し、「皿」のグリフで静的に描くチャート。
なぜ: 集計（polars）と描画を分け、グラフィックス無しで分類ロジックをテストできるようにするため。
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import polars as pl

from sketchbook.core.canvas import Canvas
from sketchbook.core.clock import FrameTime
from sketchbook.core.color import Color, map_range
from sketchbook.core.runtime_config import data_root_dir
from sketchbook.core.sketch_registry import sketch

_logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 150.0
TITLE = "Fuel vs Burn: Are Your Meals Helping or Hurting?"
SUBTITLE = "Vegan and Balanced diets stay steady 🌿; Keto and Paleo show more intake 🍕."
CAPTION = (
    "Each plate represents one diet type.\n"
    "Red = Calories consumed, Blue = Calories burned.\n"
    "Higher plate = more balanced ⚖️, Lower plate = excess intake 🍕."
)
PLATE_SIZE = (170.0, 40.0)
SHADOW_SIZE = (180.0, 45.0)


class DatasetUnavailableError(RuntimeError):
    """データセットが読めない（欠損・破損・必要列なし）ことを表す。"""


class BalanceClass(Enum):
    BALANCED = "balanced"
    SURPLUS = "surplus"
    DEFICIT = "deficit"


CLASS_COLORS: dict[BalanceClass, Color] = {
    BalanceClass.BALANCED: Color.rgb(80, 180, 80),
    BalanceClass.SURPLUS: Color.rgb(235, 80, 80),
    BalanceClass.DEFICIT: Color.rgb(70, 130, 230),
}
LEGEND_LABELS: tuple[tuple[BalanceClass, str], ...] = (
    (BalanceClass.BALANCED, "Balanced"),
    (BalanceClass.SURPLUS, "Surplus (Overeating)"),
    (BalanceClass.DEFICIT, "Deficit (More Burn)"),
)


@dataclass(frozen=True, slots=True)
class DietColumns:
    """データセットの列名。"""

    category: str = "diet_type"
    intake: str = "Calories"
    burn: str = "Calories_Burned"


@dataclass(frozen=True, slots=True)
class DietSummary:
    name: str
    mean_intake: float
    mean_burn: float
    balance: float
    classification: BalanceClass


@dataclass(frozen=True, slots=True)
class PlateGeometry:
    """皿グリフの誇張量。drop は縦方向のずれ [px]、stretch は径の倍率。"""

    drop: float
    stretch: float


def _round_half_up(value: float) -> int:
    return int(math.floor(float(value) + 0.5))


def classify_balance(balance: float, threshold: float = DEFAULT_THRESHOLD) -> BalanceClass:
    """収支を分類する（+threshold 超: surplus、-threshold 未満: deficit、境界値は balanced）。"""

    if balance > threshold:
        return BalanceClass.SURPLUS
    if balance < -threshold:
        return BalanceClass.DEFICIT
    return BalanceClass.BALANCED


def load_diet_table(path: str | Path, columns: DietColumns = DietColumns()) -> pl.DataFrame:
    """CSV（ヘッダ行あり）を読み込み、必要列を検証した DataFrame を返す。

    Raises
    ------
    DatasetUnavailableError
        ファイルが無い・読めない・必要列が欠けている場合。
    """

    _path = Path(path)
    if not _path.is_file():
        raise DatasetUnavailableError(f"データセットが見つかりません: {_path}")
    try:
        table = pl.read_csv(_path, infer_schema_length=10000)
    except (OSError, pl.exceptions.PolarsError) as exc:
        raise DatasetUnavailableError(f"データセットの読み込みに失敗しました: {_path}") from exc

    required = (columns.category, columns.intake, columns.burn)
    missing = [c for c in required if c not in table.columns]
    if missing:
        raise DatasetUnavailableError(
            f"データセットに必要な列がありません: missing={missing} path={_path}"
        )
    return table


def summarize_diets(
    table: pl.DataFrame,
    columns: DietColumns = DietColumns(),
    *,
    threshold: float = DEFAULT_THRESHOLD,
) -> tuple[DietSummary, ...]:
    """カテゴリごとに摂取/消費の平均を取り、収支と分類を付けて返す（初出順）。"""

    if table.height == 0:
        return ()
    grouped = (
        table.select(
            pl.col(columns.category).cast(pl.Utf8).alias("name"),
            pl.col(columns.intake).cast(pl.Float64, strict=False).alias("intake"),
            pl.col(columns.burn).cast(pl.Float64, strict=False).alias("burn"),
        )
        .filter(pl.col("name").is_not_null())
        .group_by("name", maintain_order=True)
        .agg(
            pl.col("intake").mean().alias("mean_intake"),
            pl.col("burn").mean().alias("mean_burn"),
        )
    )

    out: list[DietSummary] = []
    for row in grouped.iter_rows(named=True):
        mean_in = row["mean_intake"]
        mean_out = row["mean_burn"]
        if mean_in is None or mean_out is None:
            _logger.warning("数値の無いカテゴリを除外します: %s", row["name"])
            continue
        bal = float(mean_in) - float(mean_out)
        if not (math.isfinite(mean_in) and math.isfinite(mean_out) and math.isfinite(bal)):
            _logger.warning(
                "平均が有限値でないカテゴリを除外します: %s (intake=%s, burn=%s)",
                row["name"],
                mean_in,
                mean_out,
            )
            continue
        out.append(
            DietSummary(
                name=str(row["name"]),
                mean_intake=float(mean_in),
                mean_burn=float(mean_out),
                balance=bal,
                classification=classify_balance(bal, threshold),
            )
        )
    return tuple(out)


def max_abs_balance(summaries: Sequence[DietSummary]) -> float:
    return max((abs(s.balance) for s in summaries), default=0.0)


def plate_geometry(summary: DietSummary, max_abs: float) -> PlateGeometry:
    """収支と摂取比から皿の誇張量を求める。

    Notes
    -----
    max_abs が 0 のときは収支比 0、摂取+消費が 0 のときは摂取比 0.5 として扱い、
    常に有限値を返す。
    """

    balance_ratio = summary.balance / max_abs if max_abs > 0 else 0.0
    drop = map_range(balance_ratio, -1.0, 1.0, -50.0, 50.0)
    total = summary.mean_intake + summary.mean_burn
    intake_ratio = summary.mean_intake / total if total != 0 else 0.5
    stretch = map_range(intake_ratio, 0.3, 0.7, 0.8, 1.3)
    if not (math.isfinite(drop) and math.isfinite(stretch)):
        return PlateGeometry(drop=0.0, stretch=1.0)
    return PlateGeometry(drop=drop, stretch=stretch)


def plate_positions(count: int, width: int, height: int) -> list[tuple[float, float]]:
    """count 枚の皿を等間隔に並べた中心座標を返す。"""

    if count <= 0:
        return []
    step = width / (count + 1)
    y = height / 2.0 + 80.0
    return [(step * (i + 1), y) for i in range(count)]


@dataclass(frozen=True, slots=True)
class BalanceOptions:
    dataset: str = "diet/Final_data.csv"
    columns: DietColumns = DietColumns()
    threshold: float = DEFAULT_THRESHOLD
    canvas_size: tuple[int, int] = (1000, 750)
    fps: float = 30.0

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> BalanceOptions:
        base = cls()
        size = options.get("canvas_size", base.canvas_size)
        return cls(
            dataset=str(options.get("dataset", base.dataset)),
            columns=DietColumns(
                category=str(options.get("category_column", base.columns.category)),
                intake=str(options.get("intake_column", base.columns.intake)),
                burn=str(options.get("burn_column", base.columns.burn)),
            ),
            threshold=float(options.get("threshold", base.threshold)),
            canvas_size=(int(size[0]), int(size[1])),
            fps=float(options.get("fps", base.fps)),
        )

    def dataset_path(self) -> Path:
        path = Path(self.dataset)
        if path.is_absolute():
            return path
        return data_root_dir() / path


class BalanceChart:
    """食事バランスの静的チャート。"""

    name = "balance"
    resizable = False

    def __init__(self, options: BalanceOptions | None = None) -> None:
        self.options = options or BalanceOptions()
        self.fps = float(self.options.fps)
        self.canvas_size = self.options.canvas_size
        self.summaries: tuple[DietSummary, ...] = ()
        self.data_available = False

    def setup(self, canvas: Canvas, now: FrameTime) -> None:
        canvas.text_font("Georgia")
        path = self.options.dataset_path()
        try:
            table = load_diet_table(path, self.options.columns)
        except DatasetUnavailableError as exc:
            _logger.warning("チャートを描画しません（データなし）: %s", exc)
            self.summaries = ()
            self.data_available = False
            return
        self.summaries = summarize_diets(
            table, self.options.columns, threshold=self.options.threshold
        )
        self.data_available = bool(self.summaries)
        if not self.data_available:
            _logger.warning("チャートを描画しません（有効なカテゴリなし）: %s", path)

    def draw(self, canvas: Canvas, now: FrameTime) -> None:
        w, h = canvas.width, canvas.height
        canvas.vertical_gradient(Color.rgb(255, 250, 240), Color.rgb(245, 225, 190))

        canvas.fill(Color.gray(30))
        canvas.text_align("center")
        canvas.text_size(28)
        canvas.text(TITLE, w / 2.0, 50)
        canvas.text_size(16)
        canvas.text(SUBTITLE, w / 2.0, 80)

        if not self.data_available:
            return

        max_abs = max_abs_balance(self.summaries)
        for summary, (x, y) in zip(self.summaries, plate_positions(len(self.summaries), w, h)):
            self._draw_plate(canvas, summary, x, y, max_abs)

        self._draw_legend(canvas)
        self._draw_caption(canvas)

    def _draw_plate(
        self,
        canvas: Canvas,
        summary: DietSummary,
        x: float,
        y: float,
        max_abs: float,
    ) -> None:
        geo = plate_geometry(summary, max_abs)
        pw = PLATE_SIZE[0] * geo.stretch
        ph = PLATE_SIZE[1] * geo.stretch

        canvas.no_stroke()
        canvas.fill(Color.rgb(190, 170, 140, 80))
        canvas.ellipse(x + 5, y + 30 + geo.drop, SHADOW_SIZE[0], SHADOW_SIZE[1])

        canvas.push()
        canvas.translate(x, y + geo.drop)
        canvas.fill(Color.gray(255))
        canvas.stroke(Color.gray(120))
        canvas.stroke_weight(2)
        canvas.ellipse(0, 0, pw, ph)

        canvas.no_stroke()
        canvas.fill(Color.rgb(70, 130, 230, 180))
        canvas.arc(0, 0, pw, ph, math.pi / 2.0, 3.0 * math.pi / 2.0, "pie")
        canvas.fill(Color.rgb(235, 80, 80, 180))
        canvas.arc(0, 0, pw, ph, 3.0 * math.pi / 2.0, math.pi / 2.0, "pie")
        canvas.pop()

        canvas.no_stroke()
        canvas.fill(Color.gray(40))
        canvas.text_size(14)
        canvas.text_align("center")
        canvas.text(summary.name, x, y + 100)

        canvas.text_size(12)
        canvas.fill(Color.gray(70))
        canvas.text(
            f"Calories In: {_round_half_up(summary.mean_intake)}\n"
            f"Calories Burned: {_round_half_up(summary.mean_burn)}",
            x,
            y + 120,
        )

    def _draw_legend(self, canvas: Canvas) -> None:
        start_x = canvas.width - 220
        start_y = canvas.height - 120
        canvas.text_align("left")
        canvas.text_size(13)
        canvas.no_stroke()
        for i, (cls, label) in enumerate(LEGEND_LABELS):
            y = start_y + 25 * i
            canvas.fill(CLASS_COLORS[cls])
            canvas.ellipse(start_x, y, 14, 14)
            canvas.fill(Color.gray(30))
            canvas.text(label, start_x + 25, y)

    def _draw_caption(self, canvas: Canvas) -> None:
        canvas.no_stroke()
        canvas.fill(Color.gray(255, 240))
        canvas.rect(40, 615, 650, 95, radius=12)
        canvas.fill(Color.gray(40))
        canvas.text_size(13)
        canvas.text_align("left")
        canvas.text_leading(20)
        canvas.text(CAPTION, 60, 640)

    def window_resized(self, canvas: Canvas, width: int, height: int) -> None:
        # 固定キャンバス
        return


@sketch("balance")
def balance(options: Mapping[str, Any]) -> BalanceChart:
    return BalanceChart(BalanceOptions.from_mapping(options))


__all__ = [
    "BalanceChart",
    "BalanceClass",
    "BalanceOptions",
    "DatasetUnavailableError",
    "DietColumns",
    "DietSummary",
    "PlateGeometry",
    "classify_balance",
    "load_diet_table",
    "max_abs_balance",
    "plate_geometry",
    "plate_positions",
    "summarize_diets",
]
