# backend/navigation/routing.py
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import networkx as nx
from pyproj import Geod

from .errors import NoPathFound, NoRoadData
from .geometry import Coord
from .road_index import RoadNetworkIndex, SnapResult

logger = logging.getLogger(__name__)

# Route weights stay in degrees; metres are only reported alongside
_GEOD = Geod(ellps="WGS84")


@dataclass(frozen=True)
class RouteResult:
    path: List[Coord]
    weight: float
    start_snap: Optional[SnapResult] = None
    finish_snap: Optional[SnapResult] = None

    @property
    def length_m(self) -> float:
        """Geodesic length of the path in metres."""
        if len(self.path) < 2:
            return 0.0
        lons = [c[0] for c in self.path]
        lats = [c[1] for c in self.path]
        return float(_GEOD.line_length(lons, lats))

    def to_geojson(self) -> dict:
        return {
            "type": "Feature",
            "properties": {
                "weight": self.weight,
                "length_m": self.length_m,
                "num_nodes": len(self.path),
            },
            "geometry": {
                "type": "LineString",
                "coordinates": [list(c) for c in self.path],
            },
        }


def find_route(graph: nx.Graph, index: RoadNetworkIndex, start: Sequence[float], finish: Sequence[float]) -> RouteResult:
    """
    Snap (lon, lat) start and finish to their nearest road vertices and run
    Dijkstra between them. The weight excludes the snapping offsets.
    """
    if graph is None or graph.number_of_nodes() == 0:
        raise NoRoadData("Road graph is empty; cannot plan a route")

    start_snap = index.nearest(start)
    finish_snap = index.nearest(finish)
    start_node, end_node = start_snap.coord, finish_snap.coord

    if start_node not in graph or end_node not in graph:
        # index and graph were built with different precision
        raise NoPathFound(f"Snapped point {start_node if start_node not in graph else end_node} is not a graph node")

    try:
        weight, path = nx.single_source_dijkstra(
            graph,
            source=start_node,
            target=end_node,
            weight="weight"
        )
    except nx.NetworkXNoPath:
        raise NoPathFound(f"No road connects {start_node} and {end_node}") from None

    logger.debug(f"Route {start_node} -> {end_node}: {len(path)} nodes, weight {weight}")
    return RouteResult(
        path=list(path),
        weight=float(weight),
        start_snap=start_snap,
        finish_snap=finish_snap,
    )
