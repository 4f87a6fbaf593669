# config.py: cycling map backend configuration
# Edit this file (or set the CYCLEMAP_* environment variables) to change the
# data directory, layer files, snapping precision and logging.

import os

# ── Data ─────────────────────────────────────────────────────────────
# Directory holding the layer files, relative to the working directory
DATA_DIR = os.environ.get("CYCLEMAP_DATA_DIR", "data")

# Layer name -> file name inside DATA_DIR.  Any format geopandas reads works.
LAYERS = {
    "parking": "bicycle parking.geojson",
    "shops": "bike rental and shops.geojson",
    "ways": "cycle ways.geojson",
    "water": "drinking water.geojson",
    "food": "food vendors.geojson",
    "toilets": "toilets.geojson",
}

# Layer used as the road network for snapping and routing
ROADS_LAYER = "ways"

# ── Snapping ─────────────────────────────────────────────────────────
# Decimal places road vertices are rounded to before junctions are merged.
# None keeps exact coordinate equality; 7 (~1 cm) joins near-duplicate
# junction coordinates that would otherwise fragment the graph.
_precision = os.environ.get("CYCLEMAP_COORD_PRECISION", "")
COORD_PRECISION = int(_precision) if _precision.strip() else None

# ── Map client defaults ──────────────────────────────────────────────
# Format: (lon, lat)
DEFAULT_CENTER = (34.658638, 31.807663)
DEFAULT_ZOOM = 16
TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
TILE_MIN_ZOOM = 8
TILE_MAX_ZOOM = 16
TILE_ATTRIBUTION = '&copy; <a href="https://openstreetmap.org/copyright">OpenStreetMap contributors</a>'

# ── Logging ──────────────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("CYCLEMAP_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
