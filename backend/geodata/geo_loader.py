import json
import logging
import os

import geopandas as gpd

logger = logging.getLogger(__name__)


def empty_collection():
    return {"type": "FeatureCollection", "features": []}


def load_feature_collection(path):
    """
    Read any vector file geopandas understands and return it as a GeoJSON
    FeatureCollection mapping in (lon, lat) WGS84 coordinates.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Layer file not found: {path}")

    gdf = gpd.read_file(path)
    if gdf.empty:
        return empty_collection()

    # Leaflet-style clients and the routing core both expect EPSG:4326
    if gdf.crs is not None and gdf.crs.to_epsg() != 4326:
        logger.info(f"Reprojecting {path} from {gdf.crs} to EPSG:4326")
        gdf = gdf.to_crs(epsg=4326)

    return json.loads(gdf.to_json(drop_id=True))


def load_layers(data_dir, layers, required=()):
    """
    Load every layer in `layers` (name -> file name) from data_dir.
    Missing layers named in `required` raise; other missing layers load empty.
    """
    out = {}
    for name, filename in layers.items():
        path = os.path.join(data_dir, filename)
        try:
            out[name] = load_feature_collection(path)
        except FileNotFoundError:
            if name in required:
                raise
            logger.warning(f"Layer '{name}' not found at {path}; using an empty collection")
            out[name] = empty_collection()
            continue
        logger.info(f"Loaded layer '{name}': {len(out[name]['features'])} features")
    return out
