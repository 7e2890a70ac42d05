from __future__ import annotations

import math
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from sketchbook.core.canvas import Canvas
from sketchbook.core.color import Color
from sketchbook.export.svg import export_svg, svg_document

_NS = {"svg": "http://www.w3.org/2000/svg"}


def _sample_canvas() -> Canvas:
    canvas = Canvas(200, 100)
    canvas.background(Color.gray(250))
    canvas.fill(Color.rgb(255, 0, 0, 128))
    canvas.no_stroke()
    canvas.rect(10, 20, 30, 40, radius=5)
    canvas.stroke(Color.rgb(0, 0, 255))
    canvas.stroke_weight(4)
    canvas.stroke_cap("square")
    canvas.no_fill()
    canvas.arc(100, 50, 60, 60, 0.0, math.pi)
    canvas.fill(Color.gray(0))
    canvas.text_align("center", "center")
    canvas.text("a < b & c", 100, 50)
    return canvas


def test_export_svg_writes_parseable_document(tmp_path: Path) -> None:
    canvas = _sample_canvas()
    path = export_svg(canvas.commands, tmp_path / "out" / "frame.svg", canvas_size=canvas.size)
    assert path.exists()

    root = ET.fromstring(path.read_text(encoding="utf-8"))
    assert root.attrib["viewBox"] == "0 0 200 100"
    assert root.attrib["width"] == "200"

    rects = root.findall("svg:rect", _NS)
    assert rects[0].attrib["fill"] == "#FAFAFA"
    assert rects[1].attrib["fill"] == "#FF0000"
    assert rects[1].attrib["fill-opacity"] == "0.502"
    assert rects[1].attrib["rx"] == "5.000"
    assert rects[1].attrib["stroke"] == "none"

    (arc,) = root.findall("svg:path", _NS)
    assert arc.attrib["fill"] == "none"
    assert arc.attrib["stroke"] == "#0000FF"
    assert arc.attrib["stroke-linecap"] == "butt"
    assert arc.attrib["d"].startswith("M 130.000 50.000 A 30.000 30.000")

    (text,) = root.findall("svg:text", _NS)
    assert text.text == "a < b & c"
    assert text.attrib["text-anchor"] == "middle"
    assert text.attrib["dominant-baseline"] == "central"


def test_svg_document_is_deterministic() -> None:
    canvas = _sample_canvas()
    first = svg_document(canvas.commands, canvas_size=canvas.size)
    second = svg_document(_sample_canvas().commands, canvas_size=canvas.size)
    assert first == second


def test_full_circle_arc_becomes_ellipse_and_empty_arc_is_dropped() -> None:
    canvas = Canvas(100, 100)
    canvas.arc(50, 50, 80, 80, 0.0, 2 * math.pi)
    canvas.arc(50, 50, 80, 80, 1.0, 1.0)
    root = ET.fromstring(svg_document(canvas.commands, canvas_size=canvas.size))
    assert len(root.findall("svg:ellipse", _NS)) == 1
    assert root.findall("svg:path", _NS) == []


def test_pie_arc_path_is_closed_through_center() -> None:
    canvas = Canvas(100, 100)
    canvas.arc(50, 50, 40, 20, math.pi / 2, 3 * math.pi / 2, mode="pie")
    root = ET.fromstring(svg_document(canvas.commands, canvas_size=canvas.size))
    (path,) = root.findall("svg:path", _NS)
    d = path.attrib["d"]
    assert d.startswith("M 50.000 50.000 L ")
    assert d.endswith(" Z")


def test_gradient_uses_linear_gradient_definition() -> None:
    canvas = Canvas(100, 100)
    canvas.vertical_gradient(Color.gray(255), Color.gray(0))
    root = ET.fromstring(svg_document(canvas.commands, canvas_size=canvas.size))
    grad = root.find("svg:defs/svg:linearGradient", _NS)
    assert grad is not None
    stops = grad.findall("svg:stop", _NS)
    assert [s.attrib["stop-color"] for s in stops] == ["#FFFFFF", "#000000"]
    rect = root.find("svg:rect", _NS)
    assert rect is not None and rect.attrib["fill"] == f"url(#{grad.attrib['id']})"


def test_export_svg_requires_canvas_size(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        export_svg((), tmp_path / "x.svg")
    with pytest.raises(ValueError):
        svg_document((), canvas_size=(0, 10))
