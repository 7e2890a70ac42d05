# どこで: `src/sketchbook/sketches/__init__.py`。
# 何を: 組み込みスケッチ（countdown/growth/notebook/balance）を import してレジストリに登録させる。
# なぜ: 名前指定の `run("countdown")` だけで組み込みスケッチを引けるようにするため。

from __future__ import annotations

from sketchbook.sketches import balance as _sketch_balance  # noqa: F401
from sketchbook.sketches import countdown as _sketch_countdown  # noqa: F401
from sketchbook.sketches import growth as _sketch_growth  # noqa: F401
from sketchbook.sketches import notebook as _sketch_notebook  # noqa: F401
from sketchbook.sketches.balance import BalanceChart
from sketchbook.sketches.countdown import CountdownRing
from sketchbook.sketches.growth import GrowthClock
from sketchbook.sketches.notebook import TypewriterNotebook

__all__ = ["BalanceChart", "CountdownRing", "GrowthClock", "TypewriterNotebook"]
