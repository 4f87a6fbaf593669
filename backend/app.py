import logging
import math
import threading

from flask import Flask, jsonify, request
from flask_cors import CORS

import config
from navigation.errors import NavigationError
from navigation.geolocation import Position, PositionTracker
from navigation.geometry import ViewportBounds
from navigation.map_data import MapData

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["DATA_DIR"] = config.DATA_DIR
app.config["LAYERS"] = dict(config.LAYERS)
app.config["ROADS_LAYER"] = config.ROADS_LAYER
app.config["COORD_PRECISION"] = config.COORD_PRECISION
CORS(app)

# Global map data holder, swapped whole on reload
MAP_DATA = None
_LOAD_LOCK = threading.Lock()

TRACKER = PositionTracker()
_POSITION_LOG = TRACKER.subscribe(
    lambda pos: logger.debug(f"Position update: lat={pos.latitude} lon={pos.longitude} acc={pos.accuracy}")
)


def load_map_data():
    """Build a fresh MapData from app.config and publish it."""
    global MAP_DATA
    data = MapData(
        data_dir=app.config["DATA_DIR"],
        layers=app.config["LAYERS"],
        roads_layer=app.config["ROADS_LAYER"],
        precision=app.config["COORD_PRECISION"],
    )
    MAP_DATA = data
    logger.info(f"Map data loaded: {data.summary()}")
    return data


def get_map_data():
    data = MAP_DATA
    if data is not None:
        return data
    with _LOAD_LOCK:
        if MAP_DATA is None:
            return load_map_data()
        return MAP_DATA


# ============================================================
# REQUEST PARSING
# ============================================================
def parse_coord(text):
    """Parse 'lon,lat' into a (lon, lat) tuple."""
    if not text:
        raise ValueError("missing coordinate")
    parts = text.split(",")
    if len(parts) != 2:
        raise ValueError(f"coordinate must be 'lon,lat', got '{text}'")
    lon, lat = (float(p) for p in parts)
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise ValueError(f"coordinate must be finite, got '{text}'")
    return (lon, lat)


def parse_bbox(text):
    """Parse 'west,south,east,north' into ViewportBounds (InvalidBounds if misordered)."""
    parts = text.split(",")
    if len(parts) != 4:
        raise ValueError("bbox must have 4 values: west,south,east,north")
    west, south, east, north = (float(p) for p in parts)
    return ViewportBounds.from_bbox(west, south, east, north)


@app.errorhandler(NavigationError)
def navigation_error(e):
    return jsonify({"error": str(e), "type": type(e).__name__}), e.status_code


# ============================================================
# MAP LAYERS API
# ============================================================
@app.route("/api/v1/layers", methods=["GET"])
def list_layers():
    return jsonify({"layers": get_map_data().layer_names()})


@app.route("/api/v1/map/config", methods=["GET"])
def map_config():
    return jsonify({
        "center": list(config.DEFAULT_CENTER),
        "zoom": config.DEFAULT_ZOOM,
        "tiles": {
            "url": config.TILE_URL,
            "min_zoom": config.TILE_MIN_ZOOM,
            "max_zoom": config.TILE_MAX_ZOOM,
            "attribution": config.TILE_ATTRIBUTION,
        },
    })


@app.route("/api/v1/map/<layer>", methods=["GET"])
def get_map_layer(layer):
    data = get_map_data()
    if layer not in data.layers:
        return jsonify({"error": "Invalid layer name"}), 400

    bbox = request.args.get("bbox")
    if not bbox:
        return jsonify(data.layer(layer))

    try:
        bounds = parse_bbox(bbox)
    except ValueError as e:
        return jsonify({"error": f"Invalid bbox: {e}"}), 400

    return jsonify(data.layer_in_view(layer, bounds))


# ============================================================
# NAVIGATION API
# ============================================================
@app.route("/api/v1/snap", methods=["GET"])
def snap_point():
    mode = request.args.get("mode", "vertex")
    if mode not in ("vertex", "segment"):
        return jsonify({"error": "mode must be 'vertex' or 'segment'"}), 400

    try:
        point = parse_coord(request.args.get("point"))
    except ValueError as e:
        return jsonify({"error": f"Invalid point: {e}"}), 400

    result = get_map_data().snap(point, mode=mode)
    return jsonify({"status": "ok", "mode": mode, "snap": result.to_dict()})


@app.route("/api/v1/route", methods=["GET"])
def route():
    try:
        finish = parse_coord(request.args.get("to"))
        start_arg = request.args.get("from")
        start = parse_coord(start_arg) if start_arg else None
    except ValueError as e:
        return jsonify({"error": f"Invalid coordinate: {e}"}), 400

    if start is None:
        current = TRACKER.current
        if current is None:
            return jsonify({"error": "No start given and no known position"}), 409
        start = current.coord

    result = get_map_data().route(start, finish)
    return jsonify({
        "status": "ok",
        "route": result.to_geojson(),
        "path": [list(c) for c in result.path],
        "weight": result.weight,
        "length_m": result.length_m,
        "start_snap": result.start_snap.to_dict(),
        "finish_snap": result.finish_snap.to_dict(),
    })


# ============================================================
# POSITION API
# ============================================================
@app.route("/api/v1/position", methods=["POST"])
def update_position():
    try:
        position = Position.from_dict(request.get_json(silent=True) or {})
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    TRACKER.update(position)
    return jsonify({"status": "ok", "position": position.to_dict()})


@app.route("/api/v1/position", methods=["GET"])
def current_position():
    current = TRACKER.current
    if current is None:
        return jsonify({"position": None})
    return jsonify({"position": current.to_dict()})


# ============================================================
# DATA RELOAD
# ============================================================
@app.route("/api/v1/data/reload", methods=["POST"])
def reload_data():
    try:
        with _LOAD_LOCK:
            data = load_map_data()
    except Exception as e:
        logger.error(f"Reload failed: {e}")
        return jsonify({"error": f"Reload failed: {e}"}), 500

    return jsonify({"status": "reloaded", "summary": data.summary()})


# ============================================================
# RUN SERVER
# ============================================================
if __name__ == "__main__":
    get_map_data()
    app.run(debug=True)
