# route_sketch/domain/fitting/fitting_candidates.py
from dataclasses import dataclass
from typing import Literal

from route_sketch.domain.entities.geography import Shape
from route_sketch.domain.entities.route import Candidate

Effort = Literal["lite", "normal", "max"]


@dataclass(frozen=True)
class EffortTier:
    offsets: int
    spacing_m: float
    anchors: int  # single-stroke figures
    glyph_anchors: int  # multi-stroke glyphs


EFFORT_TIERS: dict[str, EffortTier] = {
    "lite": EffortTier(offsets=5, spacing_m=220.0, anchors=12, glyph_anchors=14),
    "normal": EffortTier(offsets=9, spacing_m=240.0, anchors=15, glyph_anchors=18),
    "max": EffortTier(offsets=13, spacing_m=260.0, anchors=18, glyph_anchors=22),
}

# spiral of (east, north) multiples of the spacing, nearest first
_SPIRAL = (
    (0, 0),
    (1, 0), (-1, 0), (0, 1), (0, -1),
    (1, 1), (1, -1), (-1, 1), (-1, -1),
    (2, 0), (0, 2), (-2, 0), (0, -2),
)  # fmt: skip


def tier(effort: str) -> EffortTier:
    try:
        return EFFORT_TIERS[effort]
    except KeyError:
        raise ValueError(f"Unknown effort {effort!r}")


def anchor_count(shape: Shape, effort: str) -> int:
    t = tier(effort)
    return t.glyph_anchors if shape.glyph else t.anchors


def center_offsets(effort: str) -> list[tuple[float, float]]:
    t = tier(effort)
    return [(i * t.spacing_m, j * t.spacing_m) for i, j in _SPIRAL[: t.offsets]]


def fan_rotations(step_deg: float) -> tuple[float, ...]:
    """Regular fan over [0, 180)."""
    n = max(1, int(round(180.0 / step_deg)))
    return tuple(k * 180.0 / n for k in range(n))


def generate(offsets: list[tuple[float, float]], rotations: tuple[float, ...]) -> list[Candidate]:
    """Offset-major, rotation-minor product; bounded, never expanded mid-search."""
    return [Candidate(e, n, r) for e, n in offsets for r in rotations]
