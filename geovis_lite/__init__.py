"""geovis-lite – paste WKT / GeoJSON, reproject it and show it on a map."""

from geovis_lite.controller import SyncController, SyncState
from geovis_lite.exceptions import ParseError, ReprojectError
from geovis_lite.io import parse_geometry
from geovis_lite.ops import reproject
from geovis_lite.store import FeatureStore
from geovis_lite.types import (
    DEFAULT_FORMAT,
    DEFAULT_SOURCE_PROJECTION,
    DISPLAY_PROJECTION,
    BoundingBox,
    Feature,
    Format,
    Geometry,
)
from geovis_lite.view import FoliumMapViewAdapter, MapViewAdapter, ViewHandle

__all__ = [
    "SyncController",
    "SyncState",
    "FeatureStore",
    "FoliumMapViewAdapter",
    "MapViewAdapter",
    "ViewHandle",
    "parse_geometry",
    "reproject",
    # value types
    "BoundingBox",
    "Feature",
    "Format",
    "Geometry",
    "DEFAULT_FORMAT",
    "DEFAULT_SOURCE_PROJECTION",
    "DISPLAY_PROJECTION",
    # exceptions
    "ParseError",
    "ReprojectError",
]

__version__ = "0.1.0"
