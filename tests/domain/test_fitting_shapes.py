# tests/domain/test_fitting_shapes.py
import pytest

from route_sketch.domain.errors import InvalidInput
from route_sketch.domain.fitting.fitting_geometry import length
from route_sketch.domain.fitting.fitting_shapes import shape_names, strokes_for


def test_catalog_lists_the_shipped_figures():
    assert {"square", "heart", "hi", "triangle", "circle", "star"} <= set(shape_names())


@pytest.mark.parametrize("name", ["square", "heart", "triangle", "circle", "star", "hi"])
def test_shapes_are_normalized_and_centered(name):
    shape = strokes_for(name)
    pts = [p for s in shape.strokes for p in s]
    assert all(len(s) >= 1 for s in shape.strokes)
    # normalized units, near the origin; real sizes come from scaling
    assert max(abs(p.x) for p in pts) < 2.0
    assert max(abs(p.y) for p in pts) < 2.0
    cx = sum(p.x for p in pts) / len(pts)
    cy = sum(p.y for p in pts) / len(pts)
    assert abs(cx) < 1.0 and abs(cy) < 1.0


@pytest.mark.parametrize("name", ["square", "heart", "triangle", "circle", "star"])
def test_closed_figures_end_where_they_start(name):
    (stroke,) = strokes_for(name).strokes
    assert stroke[0] == stroke[-1]
    assert length(stroke) > 0


def test_hi_is_a_three_stroke_glyph():
    shape = strokes_for("hi")
    assert len(shape.strokes) == 3
    assert shape.glyph and shape.asymmetric


def test_unknown_shape_is_invalid_input():
    with pytest.raises(InvalidInput):
        strokes_for("dodecahedron")
