# どこで: `src/sketchbook/api/__init__.py`。
# 何を: 公開 API パッケージのエントリポイントとして Export/run と、ユーザー定義登録用の sketch を再エクスポートする。
# なぜ: ユーザーコードからシンプルに API を import できるようにするため。

from __future__ import annotations

# 同梱スケッチをレジストリへ登録する。
import sketchbook.sketches  # noqa: F401

from .export import Export
from sketchbook.core.sketch_registry import sketch

__all__ = ["Export", "run", "sketch"]


def run(*args, **kwargs):
    """公開 run API へのラッパ（遅延インポートで GUI 依存を後回しにする）。"""

    from .runner import run as _run

    return _run(*args, **kwargs)
