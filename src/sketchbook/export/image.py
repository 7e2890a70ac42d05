"""
どこで: `src/sketchbook/export/image.py`。
何を: SVG を外部ラスタライザ（resvg）で PNG に変換して保存する関数を提供する。
なぜ: SVG を正（ソース）として保存し、PNG は任意倍率で再生成できる導線を用意するため。
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

from sketchbook.core.canvas import BackgroundCommand, DrawCommand, GradientCommand
from sketchbook.core.color import Color
from sketchbook.core.runtime_config import output_root_dir, runtime_config
from sketchbook.export.svg import export_svg


def export_image(
    commands: Sequence[DrawCommand],
    path: str | Path,
    *,
    canvas_size: tuple[int, int] | None = None,
    background_color: Color | None = None,
) -> Path:
    """コマンド列を画像として保存する。

    Notes
    -----
    拡張子で形式を決める。`.png` は同名の `.svg` を書いてから resvg でラスタライズする。
    """
    _path = Path(path)
    suffix = _path.suffix.lower()
    if canvas_size is None:
        raise ValueError("canvas_size=None は未対応（現在は必須）")

    if suffix == ".svg":
        return export_svg(commands, _path, canvas_size=canvas_size)

    if suffix == ".png":
        svg_path = _path.with_suffix(".svg")
        export_svg(commands, svg_path, canvas_size=canvas_size)
        return rasterize_svg_to_png(
            svg_path,
            _path,
            output_size=png_output_size(canvas_size),
            background_color=background_color,
        )

    raise ValueError(f"未対応の画像フォーマット: {suffix!r}")


def frame_background(commands: Sequence[DrawCommand]) -> Color | None:
    """フレーム先頭の背景塗り色を返す（無ければ None）。グラデーションは上端色を使う。"""

    for cmd in commands:
        if isinstance(cmd, BackgroundCommand):
            return cmd.color
        if isinstance(cmd, GradientCommand):
            return cmd.top
        return None
    return None


def default_svg_output_path(sketch_name: str) -> Path:
    """`{output_root}/svg/{sketch_name}.svg` を返す。"""

    return output_root_dir() / "svg" / f"{sketch_name}.svg"


def default_png_output_path(sketch_name: str) -> Path:
    """`{output_root}/png/{sketch_name}.png` を返す。"""

    return output_root_dir() / "png" / f"{sketch_name}.png"


def png_output_size(canvas_size: tuple[int, int]) -> tuple[int, int]:
    """canvas_size を基準に PNG 出力ピクセルサイズを返す。"""

    canvas_w, canvas_h = canvas_size
    if int(canvas_w) <= 0 or int(canvas_h) <= 0:
        raise ValueError("canvas_size は正の (width, height) である必要がある")
    scale = float(runtime_config().png_scale)
    return int(int(canvas_w) * scale), int(int(canvas_h) * scale)


def _resvg_command(
    *,
    input_svg: Path,
    output_png: Path,
    output_size: tuple[int, int],
    background_color: Color | None,
) -> list[str]:
    out_w, out_h = output_size
    if int(out_w) <= 0 or int(out_h) <= 0:
        raise ValueError("output_size は正の (width, height) である必要がある")
    cmd = ["resvg", "--width", str(int(out_w)), "--height", str(int(out_h))]
    if background_color is not None:
        cmd += ["--background", background_color.to_hex()]
    return cmd + [str(input_svg), str(output_png)]


def rasterize_svg_to_png(
    svg_path: str | Path,
    png_path: str | Path,
    *,
    output_size: tuple[int, int],
    background_color: Color | None = None,
) -> Path:
    """SVG を PNG として保存する。

    Raises
    ------
    RuntimeError
        resvg が見つからない、またはラスタライズに失敗した場合。
    """

    _svg_path = Path(svg_path)
    _png_path = Path(png_path)
    _png_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = _resvg_command(
        input_svg=_svg_path,
        output_png=_png_path,
        output_size=output_size,
        background_color=background_color,
    )
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError as e:
        raise RuntimeError(
            "resvg が見つかりません（`resvg` をインストールして PATH を通してください）"
        ) from e

    if proc.returncode != 0:
        details = (proc.stderr or proc.stdout or "").strip()
        raise RuntimeError(f"resvg が失敗しました (code={proc.returncode}). {details}".strip())

    return _png_path


__all__ = [
    "default_png_output_path",
    "default_svg_output_path",
    "export_image",
    "frame_background",
    "png_output_size",
    "rasterize_svg_to_png",
]
