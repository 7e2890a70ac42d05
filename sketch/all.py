"""
どこで: `sketch/all.py`。
何を: 同梱スケッチ 4 つを別ウィンドウで同時に開く。
なぜ: 各スケッチの fps が違っても 1 つのループで回ることを確かめるため。
"""

import logging

from sketchbook import run

SKETCHES = ["countdown", "growth", "notebook", "balance"]


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run(SKETCHES)
