# route_sketch/domain/fitting/fitting_shapes.py
"""
Shape catalog. Figures live in normalized units centered near the origin;
scaling to a real distance happens in fitting_geometry, never here.
Adding a figure means adding one @register_shape entry.
"""

import math
from collections.abc import Callable

from route_sketch.domain.entities.geography import Shape, to_stroke
from route_sketch.domain.errors import InvalidInput

ShapeFactory = Callable[[], Shape]

_shape_registry: dict[str, ShapeFactory] = {}


def register_shape(name: str):
    def deco(fn: ShapeFactory):
        _shape_registry[name] = fn
        return fn

    return deco


def shape_names() -> list[str]:
    return sorted(_shape_registry)


def strokes_for(name: str) -> Shape:
    try:
        return _shape_registry[name]()
    except KeyError:
        raise InvalidInput(f"Unknown shape {name!r}; pick one of {', '.join(shape_names())}")


def _closed(pts: list[tuple[float, float]]) -> list[tuple[float, float]]:
    return pts + [pts[0]]


@register_shape("square")
def _square():
    return Shape(
        "square",
        (to_stroke([(-0.6, -0.6), (0.6, -0.6), (0.6, 0.6), (-0.6, 0.6), (-0.6, -0.6)]),),
    )


@register_shape("triangle")
def _triangle():
    r = 0.7
    pts = [
        (r * math.cos(math.radians(a)), r * math.sin(math.radians(a)) - 0.1)
        for a in (90.0, 210.0, 330.0)
    ]
    return Shape("triangle", (to_stroke(_closed(pts)),))


@register_shape("circle")
def _circle(n: int = 72):
    pts = [
        (0.6 * math.cos(2 * math.pi * i / n), 0.6 * math.sin(2 * math.pi * i / n))
        for i in range(n)
    ]
    return Shape("circle", (to_stroke(_closed(pts)),))


@register_shape("heart")
def _heart(n: int = 140):
    pts = []
    for i in range(n + 1):
        t = 2 * math.pi * i / n
        x = 16 * math.sin(t) ** 3 / 18
        y = (13 * math.cos(t) - 5 * math.cos(2 * t) - 2 * math.cos(3 * t) - math.cos(4 * t)) / 18
        pts.append((x, y))
    return Shape("heart", (to_stroke(_closed(pts)),), asymmetric=True)


@register_shape("star")
def _star():
    pts = []
    for k in range(10):
        r = 0.7 if k % 2 == 0 else 0.28
        a = math.radians(90.0 + 36.0 * k)
        pts.append((r * math.cos(a), r * math.sin(a)))
    return Shape("star", (to_stroke(_closed(pts)),))


@register_shape("hi")
def _hi():
    # "h", the "i" stem, the "i" dot
    h = [(-1.4, -0.8), (-1.4, 0.9), (-1.4, 0.1), (-0.8, 0.1), (-0.8, 0.9), (-0.8, -0.8)]
    stem = [(0.5, -0.8), (0.5, 0.9)]
    dot = [(0.45, 1.15), (0.55, 1.15), (0.55, 1.05), (0.45, 1.05), (0.45, 1.15)]
    return Shape(
        "hi", (to_stroke(h), to_stroke(stem), to_stroke(dot)), asymmetric=True, glyph=True
    )
