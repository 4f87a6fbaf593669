# backend/navigation/map_data.py
import logging
from typing import Optional

from geodata.geo_loader import empty_collection, load_layers
from geodata.graph_builder import build_road_graph

from .geometry import ViewportBounds
from .road_index import RoadNetworkIndex, SnapResult
from .routing import RouteResult, find_route
from .viewport import filter_layer

logger = logging.getLogger(__name__)


class MapData:
    """
    Every layer of the map loaded once, plus the road index and road graph
    derived from the roads layer. Read-only after construction; a reload
    builds a new MapData instead of mutating this one.
    """

    def __init__(self, data_dir="data", layers=None, roads_layer="ways", precision: Optional[int] = None):
        self.data_dir = data_dir
        self.roads_layer = roads_layer
        self.precision = precision

        # -----------------------------------------
        # LOAD DATA
        # -----------------------------------------
        self.layers = load_layers(data_dir, layers or {})
        self.roads = self.layers.get(roads_layer) or empty_collection()

        # -----------------------------------------
        # ROUTING STRUCTURES (same precision for both)
        # -----------------------------------------
        self.road_index = RoadNetworkIndex.build(self.roads, precision=precision)
        self.road_graph = build_road_graph(self.roads, precision=precision)

    # -------------------------
    # Layers
    # -------------------------
    def layer_names(self):
        return list(self.layers)

    def layer(self, name):
        """Whole FeatureCollection for a layer; KeyError if unknown."""
        return self.layers[name]

    def layer_in_view(self, name, bounds: ViewportBounds):
        return filter_layer(self.layers[name], bounds)

    # -------------------------
    # Navigation
    # -------------------------
    def snap(self, point, mode="vertex") -> SnapResult:
        if mode == "segment":
            return self.road_index.nearest_on_segment(point)
        return self.road_index.nearest(point)

    def route(self, start, finish) -> RouteResult:
        return find_route(self.road_graph, self.road_index, start, finish)

    def summary(self) -> dict:
        return {
            "data_dir": self.data_dir,
            "layers": {name: len(fc["features"]) for name, fc in self.layers.items()},
            "roads_layer": self.roads_layer,
            "road_lines": len(self.road_index),
            "graph_nodes": self.road_graph.number_of_nodes(),
            "graph_edges": self.road_graph.number_of_edges(),
            "precision": self.precision,
        }
