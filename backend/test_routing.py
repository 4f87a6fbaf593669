import pytest

from conftest import collection, line
from geodata.graph_builder import build_road_graph
from navigation.errors import NoPathFound, NoRoadData
from navigation.road_index import RoadNetworkIndex
from navigation.routing import find_route


def plan(roads, start, finish, precision=None):
    graph = build_road_graph(roads, precision=precision)
    index = RoadNetworkIndex(roads, precision=precision)
    return find_route(graph, index, start, finish)


def test_route_across_shared_junction(two_roads):
    result = plan(two_roads, (0, 0), (1, 1))

    assert result.path == [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0)]
    assert result.weight == 2.0


def test_route_snaps_query_points(two_roads):
    result = plan(two_roads, (-0.1, -0.2), (1.3, 1.1))
    assert result.path == [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0)]
    # snapping offsets are not part of the weight
    assert result.weight == 2.0
    assert result.start_snap.coord == (0.0, 0.0)
    assert result.finish_snap.coord == (1.0, 1.0)


def test_same_point_gives_single_node(two_roads):
    result = plan(two_roads, (0.1, 0.9), (0.1, 0.9))
    assert result.path == [(0.0, 1.0)]
    assert result.weight == 0.0
    assert result.length_m == 0.0


def test_picks_shorter_of_two_routes():
    roads = collection(
        line((0, 0), (0, 3), (3, 3)),      # long way round
        line((0, 0), (1, 1), (3, 3)),      # diagonal shortcut
    )
    result = plan(roads, (0, 0), (3, 3))
    assert result.path == [(0.0, 0.0), (1.0, 1.0), (3.0, 3.0)]
    assert result.weight == pytest.approx(3 * 2 ** 0.5)


def test_disconnected_components_raise(split_roads):
    with pytest.raises(NoPathFound):
        plan(split_roads, (0, 0), (6, 6))


def test_fragmented_junction_needs_precision():
    roads = collection(
        line((0, 0), (0, 1.00000001)),
        line((0, 1.0), (1, 1)),
    )
    with pytest.raises(NoPathFound):
        plan(roads, (0, 0), (1, 1))
    assert plan(roads, (0, 0), (1, 1), precision=6).weight == pytest.approx(2.0)


def test_empty_network_raises_no_road_data():
    with pytest.raises(NoRoadData):
        plan(collection(), (0, 0), (1, 1))


def test_length_and_geojson(two_roads):
    result = plan(two_roads, (0, 0), (1, 1))

    # one degree of latitude plus one degree of longitude at 1°N, roughly 222 km
    assert 220_000 < result.length_m < 224_000

    feature = result.to_geojson()
    assert feature["geometry"]["type"] == "LineString"
    assert feature["geometry"]["coordinates"] == [[0.0, 0.0], [0.0, 1.0], [1.0, 1.0]]
    assert feature["properties"]["weight"] == 2.0
    assert feature["properties"]["num_nodes"] == 3
