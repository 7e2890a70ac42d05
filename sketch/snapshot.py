"""
どこで: `sketch/snapshot.py`。
何を: ウィンドウを開かずに各スケッチの 1 フレームを SVG へ書き出す。
なぜ: 表示環境の無いマシンでも見た目を確認できるようにするため。
"""

import logging
from datetime import datetime

from sketchbook import Export
from sketchbook.export.image import default_svg_output_path

AT = datetime(2025, 1, 1, 9, 42, 7)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    for name in ["countdown", "growth", "notebook", "balance"]:
        # growth は葉を積み上げるので 1 秒分回してから書き出す
        exported = Export(name, default_svg_output_path(name), at=AT, frames=60)
        print(f"Saved SVG: {exported.output_path}")
