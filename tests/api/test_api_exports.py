from __future__ import annotations

import sketchbook
from sketchbook import api


def test_public_api_exports() -> None:
    assert api.__all__ == ["Export", "run", "sketch"]
    assert sketchbook.Export is api.Export
    assert sketchbook.sketch is api.sketch
    assert callable(sketchbook.run)
