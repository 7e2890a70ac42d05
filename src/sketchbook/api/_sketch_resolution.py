# どこで: `src/sketchbook/api/_sketch_resolution.py`。
# 何を: 公開 API が受け取る「スケッチ名 or インスタンス」を Sketch へ解決する。
# なぜ: run/Export で同じ解決規則（設定ファイルの sketches.<name> をオプションに使う）を共有するため。

from __future__ import annotations

from collections.abc import Sequence
from typing import Union

from sketchbook.core.runtime_config import runtime_config
from sketchbook.core.sketch_registry import Sketch, sketch_registry

SketchLike = Union[str, Sketch]


def resolve_sketch(target: SketchLike) -> Sketch:
    """名前ならレジストリから生成し、インスタンスならそのまま返す。

    Raises
    ------
    KeyError
        未登録のスケッチ名が指定された場合。
    TypeError
        名前でも Sketch でもない値が指定された場合。
    """

    if isinstance(target, str):
        options = runtime_config().sketch_options(target)
        return sketch_registry.create(target, options)
    if isinstance(target, Sketch):
        return target
    raise TypeError(f"スケッチ名または Sketch インスタンスを指定してください: {target!r}")


def resolve_sketches(targets: SketchLike | Sequence[SketchLike]) -> list[Sketch]:
    """単体/列のどちらでも受け取り、Sketch のリストへ解決する。"""

    if isinstance(targets, str) or isinstance(targets, Sketch):
        return [resolve_sketch(targets)]
    resolved = [resolve_sketch(t) for t in targets]
    if not resolved:
        raise ValueError("スケッチが 1 つも指定されていません")
    return resolved
