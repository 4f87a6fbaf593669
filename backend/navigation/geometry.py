# backend/navigation/geometry.py
"""
Planar geometry helpers shared by the road index, the graph builder and the
viewport filter.

Coordinates are (lon, lat) tuples in decimal degrees and every distance here
is plain Euclidean distance in degree space (no geodesic correction).
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from math import isfinite, sqrt
from typing import Iterator, List, Optional, Sequence, Tuple

import shapely
from shapely.geometry import LineString, Point, Polygon, box

from .errors import DegenerateGeometry, InvalidBounds

logger = logging.getLogger(__name__)

Coord = Tuple[float, float]  # (lon, lat)


def distance(p1, p2):
    """Compute Euclidean distance in lon/lat degrees (approx only)."""
    return sqrt((p1[0] - p2[0]) ** 2 + (p1[1] - p2[1]) ** 2)


def normalize_coord(coord: Sequence[float], precision: Optional[int] = None) -> Coord:
    """
    Return coord as a (lon, lat) float tuple, dropping any altitude ordinate.
    When precision is given the ordinates are rounded to that many decimals.
    NaN or infinite ordinates raise DegenerateGeometry.
    """
    if coord is None or len(coord) < 2:
        raise DegenerateGeometry(f"Not a coordinate: {coord!r}")
    lon, lat = float(coord[0]), float(coord[1])
    if not (isfinite(lon) and isfinite(lat)):
        raise DegenerateGeometry(f"Coordinate is not finite: {coord!r}")
    if precision is not None:
        lon, lat = round(lon, precision), round(lat, precision)
    return (lon, lat)


def features_of(collection) -> list:
    """Feature list of a FeatureCollection mapping, or the sequence itself."""
    if collection is None:
        return []
    if isinstance(collection, Mapping):
        return list(collection.get("features") or [])
    return list(collection)


def iter_lines(geometry) -> Iterator[list]:
    """
    Yield the raw coordinate list of every line in a GeoJSON geometry mapping.
    LineString yields one list, MultiLineString one per part, anything else nothing.
    """
    if not geometry:
        return
    gtype = geometry.get("type")
    if gtype == "LineString":
        yield geometry.get("coordinates") or []
    elif gtype == "MultiLineString":
        for part in geometry.get("coordinates") or []:
            yield part or []


# -------------------------
# Viewport rectangle
# -------------------------
@dataclass(frozen=True)
class ViewportBounds:
    """Axis-aligned rectangle given by its south-west and north-east corners."""

    southwest: Coord
    northeast: Coord

    def __post_init__(self):
        try:
            sw = normalize_coord(self.southwest)
            ne = normalize_coord(self.northeast)
        except DegenerateGeometry as e:
            raise InvalidBounds(f"Viewport corners must be finite coordinates: {e}") from None
        if sw[0] > ne[0] or sw[1] > ne[1]:
            raise InvalidBounds(f"South-west corner {sw} is not south-west of north-east corner {ne}")
        object.__setattr__(self, "southwest", sw)
        object.__setattr__(self, "northeast", ne)

    @classmethod
    def from_bbox(cls, west, south, east, north) -> "ViewportBounds":
        return cls((west, south), (east, north))

    @property
    def west(self) -> float:
        return self.southwest[0]

    @property
    def south(self) -> float:
        return self.southwest[1]

    @property
    def east(self) -> float:
        return self.northeast[0]

    @property
    def north(self) -> float:
        return self.northeast[1]

    @property
    def is_degenerate(self) -> bool:
        return self.west == self.east or self.south == self.north

    def ring(self) -> List[Coord]:
        """Closed counter-clockwise ring of the rectangle."""
        return bbox_ring(self)

    def to_polygon(self) -> Polygon:
        return box(self.west, self.south, self.east, self.north)

    def to_list(self) -> List[float]:
        return [self.west, self.south, self.east, self.north]


def bbox_ring(bounds: ViewportBounds) -> List[Coord]:
    w, s, e, n = bounds.west, bounds.south, bounds.east, bounds.north
    return [(w, s), (e, s), (e, n), (w, n), (w, s)]


# -------------------------
# Containment
# -------------------------
def ring_polygon(ring: Sequence[Sequence[float]]) -> Polygon:
    """Build a polygon from a ring, raising DegenerateGeometry below 3 distinct vertices."""
    coords = [normalize_coord(c) for c in ring]
    if len(set(coords)) < 3:
        raise DegenerateGeometry(f"Ring has {len(set(coords))} distinct vertices, need 3")
    # shapely closes open rings itself
    return Polygon(coords)


def point_in_polygon(point: Sequence[float], ring: Sequence[Sequence[float]]) -> bool:
    """
    True if point lies strictly inside the ring. Points on the boundary are
    outside; degenerate rings contain nothing.
    """
    try:
        polygon = ring_polygon(ring)
        pt = Point(normalize_coord(point))
    except DegenerateGeometry as e:
        logger.debug("point_in_polygon on degenerate input: %s", e)
        return False
    return polygon.contains(pt)


def line_coords(line: Sequence[Sequence[float]], precision: Optional[int] = None) -> List[Coord]:
    """Normalize a polyline, raising DegenerateGeometry below 2 distinct vertices."""
    coords = [normalize_coord(c, precision) for c in line or []]
    if len(set(coords)) < 2:
        raise DegenerateGeometry(f"Line has {len(set(coords))} distinct vertices, need 2")
    return coords


# -------------------------
# Clipping
# -------------------------
def _line_parts(geom) -> List[LineString]:
    """Flatten a clipping result to its LineString parts."""
    if geom.is_empty:
        return []
    if isinstance(geom, LineString):
        return [geom]
    parts = []
    for g in getattr(geom, "geoms", []):
        parts.extend(_line_parts(g))
    return parts


def clip_line_to_bbox(line: Sequence[Sequence[float]], bounds: ViewportBounds) -> List[List[Coord]]:
    """
    Clip a polyline against the bounds rectangle.

    Returns the contiguous sub-paths lying inside the rectangle, ordered along
    the input line. A line that leaves and re-enters the box yields several
    sub-paths; a line that crosses itself inside the box stays one sub-path.
    A line that never enters the box (or only touches a corner) yields [].
    """
    try:
        coords = line_coords(line)
    except DegenerateGeometry as e:
        logger.debug("clip_line_to_bbox on degenerate line: %s", e)
        return []
    if bounds.is_degenerate:
        return []

    # rectangle clipping walks the line in order and keeps self-crossings intact
    clipped = shapely.clip_by_rect(LineString(coords), bounds.west, bounds.south, bounds.east, bounds.north)
    return [[(x, y) for x, y, *_ in part.coords] for part in _line_parts(clipped)]
