import pytest

from geodata.geo_loader import empty_collection, load_feature_collection, load_layers


def test_loads_feature_collection(poi_points, write_geojson):
    path = write_geojson("pois.geojson", poi_points)
    fc = load_feature_collection(str(path))

    assert fc["type"] == "FeatureCollection"
    assert len(fc["features"]) == 4
    first = fc["features"][0]
    assert first["geometry"]["type"] == "Point"
    assert first["geometry"]["coordinates"] == pytest.approx([0.5, 0.5])
    assert first["properties"]["fclass"] == "cafe"


def test_lines_keep_vertex_order(two_roads, write_geojson):
    fc = load_feature_collection(str(write_geojson("roads.geojson", two_roads)))
    assert fc["features"][1]["geometry"]["coordinates"] == [[0.0, 1.0], [1.0, 1.0]]


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_feature_collection(str(tmp_path / "missing.geojson"))


def test_load_layers_fills_missing_optional_layers(two_roads, write_geojson, tmp_path):
    write_geojson("ways.geojson", two_roads)
    layers = load_layers(str(tmp_path), {"ways": "ways.geojson", "water": "water.geojson"})

    assert len(layers["ways"]["features"]) == 2
    assert layers["water"] == empty_collection()


def test_load_layers_required_layer_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_layers(str(tmp_path), {"ways": "ways.geojson"}, required=("ways",))
