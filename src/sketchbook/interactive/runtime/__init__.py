# どこで: `src/sketchbook/interactive/runtime/__init__.py`。
# 何を: interactive 実行時の「ループ/ウィンドウシステム」実装をまとめるパッケージ定義。
# なぜ: `src/sketchbook/api/runner.py` を配線に寄せ、責務ごとの実装差し替えを容易にするため。

from __future__ import annotations

__all__ = []
