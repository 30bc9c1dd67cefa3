# tests/app/test_build_app.py
import json

import pytest
from pydantic import ValidationError

from route_sketch.app.build import build
from route_sketch.app.hooks import NoopHooks
from route_sketch.cli import main
from route_sketch.io.recorder import MemorySink
from route_sketch.services.offline import FixedBearing, StraightLineRouter
from route_sketch.services.osrm import OSRMRouter
from route_sketch.services.overpass import OverpassBearingOracle


def _offline_cfg(**over):
    cfg = {
        "name": "test",
        "run_id": "t-1",
        "shape": "square",
        "search": {"effort": "lite", "strategy": "match"},
        "router": {"kind": "straight"},
        "bearing": {"kind": "fixed", "bearing_deg": 20.0},
        "geolocation": {"kind": "fixed", "lat": 40.0, "lon": -75.0},
    }
    cfg.update(over)
    return cfg


def test_build_runs():
    app = build(_offline_cfg(), use_logging=False)
    assert isinstance(app.engine.router, StraightLineRouter)
    assert isinstance(app.hooks, NoopHooks)
    assert app.recorder is None

    route = app.session.build_miles(1)
    assert route is not None
    assert route.grid_bearing_deg == 20.0
    assert route.rotation_deg in (20.0, 110.0)
    assert app.session.status.startswith("Ready")


def test_default_config_wires_http_oracles():
    app = build({}, use_logging=False)
    assert isinstance(app.engine.router, OSRMRouter)
    assert isinstance(app.engine.orientation.oracle, OverpassBearingOracle)
    assert app.session.shape == "hi"


def test_injected_deps_override_config():
    bearing = FixedBearing(45.0)
    app = build(_offline_cfg(), use_logging=False, deps={"bearing": bearing})
    assert app.engine.orientation.oracle is bearing


def test_logging_build_records_events():
    sink = MemorySink()
    app = build(_offline_cfg(log={"level": "WARNING"}), sinks=[sink])
    app.session.build(2000.0)
    assert sink.named("BuildCompleted")
    assert app.recorder.failed_writes == 0


@pytest.mark.parametrize(
    "bad",
    [
        {"surprise": 1},
        {"search": {"effort": "extreme"}},
        {"router": {"kind": "teleport"}},
        {"geolocation": {"kind": "fixed", "lat": 123.0, "lon": 0.0}},
    ],
)
def test_invalid_config_is_rejected(bad):
    with pytest.raises(ValidationError):
        build(bad, use_logging=False)


def test_unknown_shape_in_config_is_rejected():
    from route_sketch.domain.errors import InvalidInput

    with pytest.raises(InvalidInput):
        build(_offline_cfg(shape="dodecahedron"), use_logging=False)


# ---------- CLI


def test_cli_writes_geojson(tmp_path, capsys):
    out = tmp_path / "route.geojson"
    events = tmp_path / "events.jsonl"
    rc = main(
        [
            "--offline",
            "--quiet",
            "--shape", "heart",
            "--lat", "40.0", "--lon", "-75.0",
            "--miles", "1",
            "--effort", "lite",
            "--out", str(out),
            "--events", str(events),
        ]
    )  # fmt: skip
    assert rc == 0
    fc = json.loads(out.read_text())
    assert fc["type"] == "FeatureCollection"
    assert fc["properties"]["shape"] == "heart"
    assert fc["properties"]["rotation_deg"] == 0.0
    err = capsys.readouterr().err
    assert "Ready (used ~0°; grid ~0°" in err
    assert "1. Walk" in err


def test_cli_without_location_fails(capsys):
    rc = main(["--offline", "--quiet", "--meters", "2000"])
    assert rc == 1
    assert "location" in capsys.readouterr().err.lower()


def test_cli_rejects_bad_distance(capsys):
    rc = main(["--offline", "--quiet", "--lat", "40", "--lon", "-75", "--miles", "-1"])
    assert rc == 1
    assert "> 0" in capsys.readouterr().err


def test_cli_streams_events_to_jsonl(tmp_path, capsys):
    events = tmp_path / "events.jsonl"
    rc = main(
        [
            "--offline",
            "--shape", "square",
            "--lat", "40.0", "--lon", "-75.0",
            "--meters", "2000",
            "--effort", "lite",
            "--out", str(tmp_path / "route.geojson"),
            "--events", str(events),
        ]
    )  # fmt: skip
    assert rc == 0
    names = [json.loads(line)["name"] for line in events.read_text().splitlines()]
    assert names[0] == "BuildStarted"
    assert names.count("CandidateEvaluated") == 5
    assert names[-1] == "BuildCompleted"


@pytest.mark.parametrize("coords", [["--lat", "40.0"], ["--lon", "-75.0"]])
def test_cli_requires_both_coordinates(coords, capsys):
    with pytest.raises(SystemExit) as ei:
        main(["--offline", "--miles", "1", *coords])
    assert ei.value.code == 2
    assert "--lat and --lon" in capsys.readouterr().err
