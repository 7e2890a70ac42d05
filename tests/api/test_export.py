"""`Export` によるヘッドレス書き出しのテスト。"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import datetime
from pathlib import Path

import pytest

from sketchbook.api import Export, sketch
from sketchbook.api._sketch_resolution import resolve_sketch, resolve_sketches
from sketchbook.core.canvas import Canvas, TextCommand
from sketchbook.core.clock import FrameTime
from sketchbook.core.color import Color
from sketchbook.core.runtime_config import set_config_path
from sketchbook.sketches.countdown import CountdownOptions, CountdownRing
from sketchbook.sketches.growth import GrowthClock, GrowthOptions

_NS = {"svg": "http://www.w3.org/2000/svg"}
AT = datetime(2025, 1, 1, 9, 42, 7)


@pytest.fixture(autouse=True)
def _isolated_workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    set_config_path(None)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    dataset = tmp_path / "data" / "input" / "diet" / "Final_data.csv"
    dataset.parent.mkdir(parents=True)
    dataset.write_text(
        "diet_type,Calories,Calories_Burned\nKeto,2200,2000\nVegan,1800,2100\n",
        encoding="utf-8",
    )
    yield
    set_config_path(None)


def _texts(path: Path) -> list[str]:
    root = ET.fromstring(path.read_text(encoding="utf-8"))
    return [t.text or "" for t in root.iter(f"{{{_NS['svg']}}}text")]


@pytest.mark.parametrize("name", ["countdown", "growth", "notebook", "balance"])
def test_every_builtin_sketch_exports_headlessly(tmp_path: Path, name: str) -> None:
    out = tmp_path / "out" / f"{name}.svg"
    exported = Export(name, out, at=AT)
    assert exported.output_path == out
    assert out.exists()
    assert exported.commands
    root = ET.fromstring(out.read_text(encoding="utf-8"))
    assert root.attrib["width"] == str(exported.canvas.width)


def test_countdown_export_shows_remaining_time(tmp_path: Path) -> None:
    out = tmp_path / "countdown.svg"
    Export("countdown", out, at=AT, elapsed_ms=0.0)
    assert "25:00" in _texts(out)


def test_notebook_export_types_one_char_per_second(tmp_path: Path) -> None:
    out = tmp_path / "notebook.svg"
    Export("notebook", out, at=AT)
    texts = _texts(out)
    assert "09:42:07" in texts
    assert "Focus b|" in texts


def test_balance_export_reads_dataset_under_data_dir(tmp_path: Path) -> None:
    out = tmp_path / "balance.svg"
    Export("balance", out, at=AT)
    texts = _texts(out)
    assert "Keto" in texts and "Vegan" in texts
    assert "Calories In: 2200" in texts


def test_export_accepts_instance_and_frames(tmp_path: Path) -> None:
    out = tmp_path / "growth.svg"
    clock = GrowthClock(GrowthOptions(seed=1))
    exported = Export(clock, out, at=AT, frames=3)
    assert exported.sketch is clock
    assert len(clock.state.leaves) == 42


def test_export_resizes_canvas_for_resizable_sketch(tmp_path: Path) -> None:
    out = tmp_path / "small.svg"
    exported = Export(
        CountdownRing(CountdownOptions()), out, at=AT, canvas_size=(400, 300)
    )
    assert exported.canvas.size == (400, 300)
    root = ET.fromstring(out.read_text(encoding="utf-8"))
    assert root.attrib["viewBox"] == "0 0 400 300"


def test_export_rejects_zero_frames(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        Export("countdown", tmp_path / "x.svg", at=AT, frames=0)


def test_export_uses_sketch_options_from_config(tmp_path: Path) -> None:
    config = tmp_path / "custom.yaml"
    config.write_text("sketches:\n  countdown:\n    total_minutes: 10\n", encoding="utf-8")
    out = tmp_path / "countdown.svg"
    Export("countdown", out, at=AT, config_path=config)
    assert "10:00" in _texts(out)


def test_resolve_sketches_accepts_names_instances_and_lists() -> None:
    ring = CountdownRing()
    assert resolve_sketch(ring) is ring
    resolved = resolve_sketches(["growth", ring])
    assert [s.name for s in resolved] == ["growth", "countdown"]
    assert len(resolve_sketches("notebook")) == 1
    with pytest.raises(KeyError):
        resolve_sketch("missing")
    with pytest.raises(TypeError):
        resolve_sketch(42)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        resolve_sketches([])


class _HelloSketch:
    name = "hello"
    fps = 1.0
    resizable = False
    canvas_size = (120, 80)

    def setup(self, canvas: Canvas, now: FrameTime) -> None:
        canvas.text_size(10)

    def draw(self, canvas: Canvas, now: FrameTime) -> None:
        canvas.background(Color.gray(255))
        canvas.fill(Color.gray(0))
        canvas.text(f"hello {now.frame_count}", 10, 20)

    def window_resized(self, canvas: Canvas, width: int, height: int) -> None:
        pass


def test_user_sketch_registered_with_decorator(tmp_path: Path) -> None:
    @sketch("hello")
    def hello(options):
        return _HelloSketch()

    out = tmp_path / "hello.svg"
    exported = Export("hello", out, at=AT, frames=2)
    (text,) = [c for c in exported.commands if isinstance(c, TextCommand)]
    assert text.text == "hello 2"
