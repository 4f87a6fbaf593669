import logging

import networkx as nx

from navigation.errors import DegenerateGeometry
from navigation.geometry import distance, features_of, iter_lines, line_coords

from .geo_loader import load_feature_collection

logger = logging.getLogger(__name__)


def build_road_graph(roads, precision=None):
    """
    Convert a roads FeatureCollection into a NetworkX graph.
    Nodes = road vertices (shared junctions merge by equal coordinates)
    Edges = consecutive vertices on a line, weighted by Euclidean length
    """
    G = nx.Graph()

    for idx, feature in enumerate(features_of(roads)):
        geom = feature.get("geometry") if feature else None

        # LineString gives one line, MultiLineString one per part, other types none
        for raw in iter_lines(geom):
            try:
                coords = line_coords(raw, precision)
            except DegenerateGeometry as e:
                logger.debug("Skipping road %d: %s", idx, e)
                continue

            for i in range(len(coords) - 1):
                p1 = coords[i]
                p2 = coords[i + 1]

                # repeated vertex would make a self-loop
                if p1 == p2:
                    continue

                G.add_edge(p1, p2, weight=distance(p1, p2))

    logger.info(f"Graph created: {G.number_of_nodes()} nodes, {G.number_of_edges()} edges")
    return G


def build_road_graph_from_file(geojson_path, precision=None):
    """Load a roads layer from disk and build its graph."""
    logger.info("Loading roads...")
    return build_road_graph(load_feature_collection(geojson_path), precision=precision)
