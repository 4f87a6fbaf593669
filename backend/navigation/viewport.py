# backend/navigation/viewport.py
"""
Viewport filtering for map layers.

Called once per settled pan/zoom (the client debounces to gesture end), so
every call is a linear pass over the layer. Nothing is cached between calls.

  - filter_points(features, bounds): Point features strictly inside bounds
  - clip_lines(features, bounds): line features cut to the bounds rectangle
  - filter_layer(features, bounds): mixed layer, dispatched per geometry type
"""

import logging

from shapely.errors import ShapelyError
from shapely.geometry import Point, shape
from shapely.prepared import prep

from .errors import DegenerateGeometry
from .geometry import ViewportBounds, clip_line_to_bbox, features_of, iter_lines, normalize_coord, ring_polygon

logger = logging.getLogger(__name__)

LINE_TYPES = ("LineString", "MultiLineString")


def _collection(features):
    return {"type": "FeatureCollection", "features": features}


def _geom_type(feature):
    geom = feature.get("geometry") if feature else None
    return geom.get("type") if geom else None


def _point_filter(bounds: ViewportBounds):
    """Same test as point_in_polygon against the bounds ring, prepared once per call."""
    try:
        prepared = prep(ring_polygon(bounds.ring()))
    except DegenerateGeometry:
        return lambda pt: False
    return lambda pt: prepared.contains(Point(pt))


def _outside_bbox(coords, bounds: ViewportBounds):
    """Quick reject: the line's own bbox misses the viewport entirely."""
    lons = [c[0] for c in coords]
    lats = [c[1] for c in coords]
    return (
        max(lons) < bounds.west or min(lons) > bounds.east
        or max(lats) < bounds.south or min(lats) > bounds.north
    )


def _clip_feature(feature, bounds: ViewportBounds):
    out = []
    for raw in iter_lines(feature.get("geometry")):
        if not raw:
            continue
        try:
            if _outside_bbox([normalize_coord(c) for c in raw], bounds):
                continue
        except DegenerateGeometry as e:
            logger.debug("Skipping malformed line: %s", e)
            continue

        for part in clip_line_to_bbox(raw, bounds):
            clipped = {
                "type": "Feature",
                "properties": dict(feature.get("properties") or {}),
                "geometry": {
                    "type": "LineString",
                    "coordinates": [list(c) for c in part],
                },
            }
            if "id" in feature:
                clipped["id"] = feature["id"]
            out.append(clipped)
    return out


def filter_points(features, bounds: ViewportBounds):
    """Keep the Point features strictly inside bounds, in input order."""
    inside = _point_filter(bounds)
    kept = []
    for feature in features_of(features):
        if _geom_type(feature) != "Point":
            continue
        try:
            pt = normalize_coord(feature["geometry"].get("coordinates"))
        except DegenerateGeometry as e:
            logger.debug("Skipping malformed point: %s", e)
            continue
        if inside(pt):
            kept.append(feature)
    return _collection(kept)


def clip_lines(features, bounds: ViewportBounds):
    """Replace each line feature by one feature per sub-path inside bounds."""
    out = []
    for feature in features_of(features):
        if _geom_type(feature) not in LINE_TYPES:
            continue
        out.extend(_clip_feature(feature, bounds))
    return _collection(out)


def filter_layer(features, bounds: ViewportBounds):
    """
    Filter a layer whose features may mix geometry types. Points and lines
    follow filter_points / clip_lines; any other geometry is kept whole when
    it intersects the viewport.
    """
    inside = _point_filter(bounds)
    area = None if bounds.is_degenerate else prep(bounds.to_polygon())
    out = []

    for feature in features_of(features):
        gtype = _geom_type(feature)
        if gtype is None:
            continue

        if gtype == "Point":
            try:
                if inside(normalize_coord(feature["geometry"].get("coordinates"))):
                    out.append(feature)
            except DegenerateGeometry as e:
                logger.debug("Skipping malformed point: %s", e)

        elif gtype in LINE_TYPES:
            out.extend(_clip_feature(feature, bounds))

        elif area is not None:
            try:
                if area.intersects(shape(feature["geometry"])):
                    out.append(feature)
            except (ShapelyError, ValueError, TypeError, AttributeError) as e:
                logger.debug(f"Skipping unreadable {gtype} geometry: {e}")

    return _collection(out)
