# どこで: `src/sketchbook/__init__.py`。
# 何を: ルート `sketchbook` パッケージを定義する。
# なぜ: import 起点を `sketchbook` に統一するため。

from __future__ import annotations

from sketchbook.api import Export, run, sketch

__all__ = ["Export", "run", "sketch"]
