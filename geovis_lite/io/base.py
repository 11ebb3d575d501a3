"""Parser protocol and checks shared by the WKT and GeoJSON readers."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np
import shapely
from shapely.geometry.base import BaseGeometry

from geovis_lite.types import Geometry

SUPPORTED_GEOMETRY_TYPES = frozenset(
    {
        "Point",
        "LineString",
        "Polygon",
        "MultiPoint",
        "MultiLineString",
        "MultiPolygon",
        "GeometryCollection",
    }
)


@runtime_checkable
class GeometryParser(Protocol):
    """Protocol for text -> :class:`~geovis_lite.types.Geometry` parsers."""

    def parse(self, text: str, *, crs: str) -> Geometry:
        ...


def check_shape(shape: BaseGeometry) -> str | None:
    """Return why *shape* can't be shown on the map, or ``None`` if it can."""
    if shape.geom_type not in SUPPORTED_GEOMETRY_TYPES:
        return f"unsupported geometry type {shape.geom_type!r}"
    if shape.is_empty:
        return "geometry is empty"
    if shape.geom_type == "GeometryCollection":
        for part in shape.geoms:
            reason = check_shape(part)
            if reason is not None:
                return reason
    coords = shapely.get_coordinates(shape)
    if not np.isfinite(coords).all():
        return "coordinates must be finite numbers"
    return None
