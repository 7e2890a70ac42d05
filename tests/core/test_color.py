"""Color と補間ユーティリティのテスト。"""

from __future__ import annotations

import pytest

from sketchbook.core.color import BLACK, WHITE, Color, lerp, lerp_color, map_range


def test_rgb_converts_255_range_to_unit_floats() -> None:
    c = Color.rgb(255, 0, 51, 102)
    assert c.to_rgba01() == pytest.approx((1.0, 0.0, 0.2, 0.4))


def test_components_are_clamped() -> None:
    c = Color(1.5, -0.5, 0.5, 2.0)
    assert c.to_rgba01() == (1.0, 0.0, 0.5, 1.0)


def test_hsb_primary_hues() -> None:
    assert Color.hsb(0, 100, 100).to_rgb255() == (255, 0, 0)
    assert Color.hsb(120, 100, 100).to_rgb255() == (0, 255, 0)
    assert Color.hsb(240, 100, 100).to_rgb255() == (0, 0, 255)
    # 360 は 0 と同じ色相
    assert Color.hsb(360, 100, 100).to_rgb255() == (255, 0, 0)


def test_hsb_zero_saturation_is_gray() -> None:
    r, g, b = Color.hsb(200, 0, 50).to_rgb255()
    assert r == g == b == 128


def test_hsb_alpha_uses_255_scale() -> None:
    assert Color.hsb(0, 0, 100, 51).a == pytest.approx(0.2)


def test_to_hex_uses_upper_case_rgb() -> None:
    assert Color.rgb(255, 128, 0).to_hex() == "#FF8000"
    assert BLACK.to_hex() == "#000000"
    assert WHITE.to_hex() == "#FFFFFF"


def test_with_alpha_keeps_rgb() -> None:
    c = Color.rgb(10, 20, 30).with_alpha(0)
    assert c.to_rgba255() == (10, 20, 30, 0)


def test_lerp_is_unclamped() -> None:
    assert lerp(0, 120, 0.5) == pytest.approx(60.0)
    assert lerp(0, 10, 1.5) == pytest.approx(15.0)


def test_map_range_maps_and_extrapolates() -> None:
    assert map_range(5, 0, 10, 100, 200) == pytest.approx(150.0)
    assert map_range(20, 0, 10, 0, 1) == pytest.approx(2.0)
    assert map_range(5, 0, 10, 200, 100) == pytest.approx(150.0)


def test_map_range_rejects_zero_width_input() -> None:
    with pytest.raises(ValueError):
        map_range(1, 3, 3, 0, 1)


def test_lerp_color_clamps_amount() -> None:
    assert lerp_color(BLACK, WHITE, 0.5).to_rgb255() == (128, 128, 128)
    assert lerp_color(BLACK, WHITE, 2.0) == WHITE
