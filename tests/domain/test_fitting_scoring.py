# tests/domain/test_fitting_scoring.py
import math

import pytest

from route_sketch.domain.entities.geography import GeoPoint
from route_sketch.domain.fitting.fitting_scoring import (
    INFEASIBLE,
    aggregate_score,
    mean_deviation,
)

IDEAL = tuple(GeoPoint(40.0 + 0.0001 * i, -75.0 + 0.00005 * (i % 3)) for i in range(12))


def _shift(line, dlat):
    return tuple(GeoPoint(g.lat, g.lon + dlat) for g in line)


def test_identical_geometry_scores_zero():
    assert mean_deviation(IDEAL, IDEAL) == 0.0


def test_deviation_grows_as_candidate_moves_away():
    scores = [mean_deviation(IDEAL, _shift(IDEAL, d)) for d in (0.0, 1e-5, 1e-4, 1e-3, 1e-2)]
    assert scores == sorted(scores)
    assert scores[-1] > scores[1] > 0


def test_parallel_offset_line_scores_its_offset():
    ideal = (GeoPoint(0.0, 0.0), GeoPoint(0.0, 1.0), GeoPoint(0.0, 2.0))
    cand = (GeoPoint(0.5, -1.0), GeoPoint(0.5, 3.0))
    assert mean_deviation(ideal, cand) == pytest.approx(0.5)


def test_detours_near_the_ideal_are_not_penalized():
    ideal = (GeoPoint(0.0, 0.0), GeoPoint(0.0, 1.0))
    detour = (GeoPoint(0.0, 0.0), GeoPoint(5.0, 0.5), GeoPoint(0.0, 1.0), GeoPoint(0.0, 0.0))
    assert mean_deviation(ideal, detour) == 0.0


@pytest.mark.parametrize("cand", [(), (GeoPoint(40.0, -75.0),)])
def test_degenerate_candidate_is_infeasible(cand):
    d = mean_deviation(IDEAL, cand)
    assert d == INFEASIBLE
    assert not math.isnan(d)


def test_aggregate_score_penalty_is_capped():
    assert aggregate_score([2.0, 4.0], 0.0) == pytest.approx(3.0)
    assert aggregate_score([2.0, 4.0], 1000.0) == pytest.approx(3.0 * 1.2)
    # a very long closing connector cannot push past the cap
    assert aggregate_score([2.0, 4.0], 1e7) == pytest.approx(3.0 * 1.35)
    assert aggregate_score([1.0], 1e7, penalty_cap=0.1) == pytest.approx(1.1)


def test_aggregate_score_without_strokes_is_infeasible():
    assert aggregate_score([], 0.0) == INFEASIBLE
