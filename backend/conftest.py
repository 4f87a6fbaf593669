"""Shared pytest fixtures: small road networks and point layers in (lon, lat)."""

import json

import pytest


def line(*coords, **properties):
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "LineString", "coordinates": [list(c) for c in coords]},
    }


def point(lon, lat, **properties):
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
    }


def collection(*features):
    return {"type": "FeatureCollection", "features": list(features)}


@pytest.fixture
def two_roads():
    """Two lines sharing the junction (0, 1)."""
    return collection(
        line((0, 0), (0, 1), name="north"),
        line((0, 1), (1, 1), name="east"),
    )


@pytest.fixture
def split_roads():
    """The two-road network plus an island line nothing connects to."""
    return collection(
        line((0, 0), (0, 1), name="north"),
        line((0, 1), (1, 1), name="east"),
        line((5, 5), (6, 5), (6, 6), name="island"),
    )


@pytest.fixture
def poi_points():
    return collection(
        point(0.5, 0.5, fclass="cafe"),
        point(0.2, 0.9, fclass="restaurant"),
        point(2.5, 2.5, fclass="kiosk"),
        point(1.0, 0.5, fclass="fast_food"),  # on the east edge of the unit square
    )


@pytest.fixture
def write_geojson(tmp_path):
    def _write(filename, data):
        path = tmp_path / filename
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write
