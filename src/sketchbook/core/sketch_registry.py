# src/sketchbook/core/sketch_registry.py
# スケッチ名からスケッチ生成関数を引くレジストリと、スケッチのプロトコル定義。
# ランナー/エクスポートはこのレジストリ経由でスケッチを組み立てる。

from __future__ import annotations

from collections.abc import ItemsView, Mapping
from typing import Any, Callable, Protocol, runtime_checkable

from sketchbook.core.canvas import Canvas
from sketchbook.core.clock import FrameTime


@runtime_checkable
class Sketch(Protocol):
    """ハーネスから setup/draw/window_resized を呼ばれる描画単位。

    Attributes
    ----------
    name : str
        スケッチ名（出力ファイル名にも使う）。
    fps : float
        目標フレームレート。
    resizable : bool
        ウィンドウのリサイズに追従するか。
    canvas_size : tuple[int, int]
        初期キャンバス寸法（resizable の場合は上限も兼ねる）。
    """

    name: str
    fps: float
    resizable: bool
    canvas_size: tuple[int, int]

    def setup(self, canvas: Canvas, now: FrameTime) -> None: ...

    def draw(self, canvas: Canvas, now: FrameTime) -> None: ...

    def window_resized(self, canvas: Canvas, width: int, height: int) -> None: ...


SketchFactory = Callable[[Mapping[str, Any]], Sketch]


class SketchRegistry:
    """スケッチ名と生成関数を対応付けるレジストリ。

    Notes
    -----
    生成関数のシグネチャは ``factory(options: Mapping[str, Any]) -> Sketch`` を想定する。
    options は config.yaml の `sketches.<name>` 節。
    """

    def __init__(self) -> None:
        self._items: dict[str, SketchFactory] = {}

    def _register(self, name: str, factory: SketchFactory, *, overwrite: bool = True) -> None:
        if not overwrite and name in self._items:
            raise ValueError(f"sketch '{name}' は既に登録されている")
        self._items[name] = factory

    def get(self, name: str) -> SketchFactory:
        """スケッチ名に対応する生成関数を取得する。

        Raises
        ------
        KeyError
            未登録のスケッチ名が指定された場合。
        """
        return self._items[name]

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __getitem__(self, name: str) -> SketchFactory:
        return self.get(name)

    def items(self) -> ItemsView[str, SketchFactory]:
        return self._items.items()

    def names(self) -> tuple[str, ...]:
        """登録順のスケッチ名を返す。"""

        return tuple(self._items.keys())

    def create(self, name: str, options: Mapping[str, Any] | None = None) -> Sketch:
        """登録済み生成関数でスケッチを生成する。"""

        return self.get(name)(dict(options or {}))


sketch_registry = SketchRegistry()
"""グローバルなスケッチレジストリインスタンス。"""


def sketch(
    name: str | None = None,
    *,
    overwrite: bool = True,
) -> Callable[[SketchFactory], SketchFactory]:
    """グローバルスケッチレジストリ用デコレータ。

    name を省略した場合は関数名を登録名にする。

    Examples
    --------
    @sketch("countdown")
    def countdown(options):
        return CountdownRing(CountdownOptions.from_mapping(options))
    """

    def decorator(factory: SketchFactory) -> SketchFactory:
        key = str(name) if name is not None else factory.__name__
        sketch_registry._register(key, factory, overwrite=overwrite)
        return factory

    return decorator


def canvas_for(target: Sketch) -> Canvas:
    """スケッチの初期寸法でキャンバスを作る。resizable なら初期寸法を上限にする。"""

    width, height = target.canvas_size
    max_size = (int(width), int(height)) if target.resizable else None
    return Canvas(int(width), int(height), max_size=max_size)


__all__ = ["Sketch", "SketchFactory", "SketchRegistry", "canvas_for", "sketch", "sketch_registry"]
