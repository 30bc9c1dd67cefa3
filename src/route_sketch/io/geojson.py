# route_sketch/io/geojson.py
import json

from route_sketch.domain.entities.route import FinalRoute, GeoLine, SegmentKind

# map layer styles, keyed by feature role
STYLES = {
    "ideal": {"stroke": "#f97316", "stroke-width": 3, "stroke-dasharray": "6 8", "opacity": 0.85},
    SegmentKind.SHAPE.value: {"stroke": "#22c55e", "stroke-width": 8, "opacity": 1.0},
    SegmentKind.CONNECTOR.value: {"stroke": "#d4d4d8", "stroke-width": 3, "opacity": 0.3},
}


def _line(line: GeoLine) -> dict:
    return {"type": "LineString", "coordinates": [[g.lon, g.lat] for g in line]}


def to_feature_collection(route: FinalRoute) -> dict:
    features = [
        {
            "type": "Feature",
            "geometry": _line(line),
            "properties": {"kind": "ideal", "stroke_index": i, **STYLES["ideal"]},
        }
        for i, line in enumerate(route.ideal)
    ]
    for i, seg in enumerate(route.segments):
        features.append(
            {
                "type": "Feature",
                "geometry": _line(seg.geometry),
                "properties": {
                    "kind": seg.kind.value,
                    "order": i,
                    "distance_m": round(seg.distance_m, 1),
                    **STYLES[seg.kind.value],
                },
            }
        )
    return {
        "type": "FeatureCollection",
        "features": features,
        "properties": {
            "shape": route.shape_name,
            "rotation_deg": route.rotation_deg,
            "grid_bearing_deg": route.grid_bearing_deg,
            "anchors": route.anchor_count,
            "score": route.score,
            "shape_distance_m": round(route.shape_distance_m, 1),
            "total_distance_m": round(route.total_distance_m, 1),
            "instructions": list(route.instructions),
        },
    }


def dumps(route: FinalRoute, **kw) -> str:
    return json.dumps(to_feature_collection(route), **kw)
