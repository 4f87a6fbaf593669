# backend/navigation/road_index.py
"""
Nearest-point lookup over the road network.

RoadNetworkIndex copies every road vertex at construction and answers
"which road point is closest to this coordinate?" with a linear scan. The
dataset is static and queries happen once per route request, so O(V) per
query is fine for a few thousand vertices.
"""

import logging
from dataclasses import dataclass, field
from math import sqrt
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .errors import DegenerateGeometry, NoRoadData
from .geometry import Coord, features_of, iter_lines, line_coords, normalize_coord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapResult:
    """
    coord: snapped (lon, lat), always on segment `segment_index` of the road line
    feature: back reference to the owning road feature (not copied)
    feature_index: position of that feature in the source collection
    segment_index: index of the line segment holding coord
    distance: Euclidean degree distance from the query to coord
    """

    coord: Coord
    feature: Mapping[str, Any] = field(compare=False, repr=False)
    feature_index: int
    segment_index: int
    distance: float

    def to_dict(self) -> dict:
        return {
            "coord": list(self.coord),
            "feature_index": self.feature_index,
            "segment_index": self.segment_index,
            "distance": self.distance,
            "properties": dict(self.feature.get("properties") or {}),
        }


def project_onto_segment(p: Coord, a: Coord, b: Coord) -> Tuple[Coord, float]:
    """Return (nearest point on segment AB to P, squared distance)."""
    dx, dy = b[0] - a[0], b[1] - a[1]
    seg_len_sq = dx * dx + dy * dy
    if seg_len_sq == 0:
        q = a
    else:
        t = ((p[0] - a[0]) * dx + (p[1] - a[1]) * dy) / seg_len_sq
        t = max(0.0, min(1.0, t))
        if t == 0.0:
            q = a
        elif t == 1.0:
            q = b
        else:
            q = (a[0] + t * dx, a[1] + t * dy)
    return q, (p[0] - q[0]) ** 2 + (p[1] - q[1]) ** 2


class RoadNetworkIndex:
    def __init__(self, roads, precision: Optional[int] = None):
        """
        roads: FeatureCollection mapping (or list of features) of LineString /
               MultiLineString road features
        precision: decimals to round vertices to; must match the graph builder
        """
        self.precision = precision

        # (feature_index, feature, vertices) per usable line
        self._lines: List[Tuple[int, Mapping[str, Any], Tuple[Coord, ...]]] = []

        for fi, feature in enumerate(features_of(roads)):
            geom = feature.get("geometry") if feature else None
            for raw in iter_lines(geom):
                try:
                    coords = line_coords(raw, precision)
                except DegenerateGeometry as e:
                    logger.debug("Skipping road %d: %s", fi, e)
                    continue
                self._lines.append((fi, feature, tuple(coords)))

        logger.info(f"Road index built: {len(self._lines)} lines, {self.vertex_count} vertices")

    @classmethod
    def build(cls, roads, precision: Optional[int] = None) -> "RoadNetworkIndex":
        return cls(roads, precision=precision)

    def __len__(self):
        return len(self._lines)

    @property
    def vertex_count(self) -> int:
        return sum(len(coords) for _, _, coords in self._lines)

    def _check_data(self):
        if not self._lines:
            raise NoRoadData("Road network is empty; nothing to snap to")

    # -------------------------
    # Queries
    # -------------------------
    def nearest(self, query: Sequence[float]) -> SnapResult:
        """
        Snap query to the closest existing road vertex.
        The first minimal vertex in feature-then-vertex order wins ties.
        A NaN or infinite query raises DegenerateGeometry.
        """
        self._check_data()
        px, py = normalize_coord(query)

        best = None
        min_dist = float("inf")

        for fi, feature, coords in self._lines:
            for vi, (vx, vy) in enumerate(coords):
                dist = (vx - px) ** 2 + (vy - py) ** 2   # squared distance is enough to compare
                if dist < min_dist:
                    min_dist = dist
                    best = (fi, feature, coords, vi)

        fi, feature, coords, vi = best
        return SnapResult(
            coord=coords[vi],
            feature=feature,
            feature_index=fi,
            segment_index=min(vi, len(coords) - 2),
            distance=sqrt(min_dist),
        )

    def nearest_on_segment(self, query: Sequence[float]) -> SnapResult:
        """
        Snap query to the closest point anywhere along a road, interpolating
        inside segments. The result is generally not a graph node.
        """
        self._check_data()
        p = normalize_coord(query)

        best = None
        min_dist = float("inf")

        for fi, feature, coords in self._lines:
            for si in range(len(coords) - 1):
                q, dist = project_onto_segment(p, coords[si], coords[si + 1])
                if dist < min_dist:
                    min_dist = dist
                    best = (fi, feature, si, q)

        fi, feature, si, q = best
        return SnapResult(
            coord=q,
            feature=feature,
            feature_index=fi,
            segment_index=si,
            distance=sqrt(min_dist),
        )
