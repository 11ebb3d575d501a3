"""GeoJSON reader – a JSON geometry object into a source-space Geometry."""

from __future__ import annotations

import json
from typing import Any

from shapely.errors import GEOSException
from shapely.geometry import shape as to_shape

from geovis_lite.exceptions import ParseError
from geovis_lite.io.base import SUPPORTED_GEOMETRY_TYPES, check_shape
from geovis_lite.types import Format, Geometry


class GeoJsonParser:
    """Default GeoJSON geometry parser using shapely."""

    def parse(self, text: str, *, crs: str) -> Geometry:
        """Parse a GeoJSON geometry object and tag the result with *crs*.

        A ``Feature`` wrapper is accepted and unwrapped to its ``geometry``.
        ``FeatureCollection`` is not: the map holds a single feature.

        Raises
        ------
        ParseError
            On invalid JSON, or a missing / invalid ``type`` or ``coordinates``.
        """
        if not isinstance(text, str):
            raise ParseError(Format.GEOJSON, f"expected text, got {type(text).__name__}")
        try:
            obj = json.loads(text, parse_constant=_reject_constant)
        except ValueError as err:
            raise ParseError(Format.GEOJSON, str(err)) from err

        if isinstance(obj, dict) and obj.get("type") == "Feature":
            obj = obj.get("geometry")

        _check_geometry_object(obj)
        try:
            shape = to_shape(obj)
        except (GEOSException, ValueError, TypeError, IndexError, KeyError, AttributeError) as err:
            raise ParseError(Format.GEOJSON, f"invalid coordinates: {err}") from err

        reason = check_shape(shape)
        if reason is not None:
            raise ParseError(Format.GEOJSON, reason)
        return Geometry(shape=shape, crs=crs)


_default = GeoJsonParser()


def parse_geojson(text: str, *, crs: str) -> Geometry:
    """Parse GeoJSON text.  Delegates to :class:`GeoJsonParser`."""
    return _default.parse(text, crs=crs)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _check_geometry_object(obj: Any) -> None:
    if not isinstance(obj, dict):
        raise ParseError(Format.GEOJSON, "expected a geometry object")
    geom_type = obj.get("type")
    if geom_type not in SUPPORTED_GEOMETRY_TYPES:
        raise ParseError(Format.GEOJSON, f"invalid type {geom_type!r}")
    if geom_type == "GeometryCollection":
        members = obj.get("geometries")
        if not isinstance(members, list):
            raise ParseError(Format.GEOJSON, "missing 'geometries'")
        for member in members:
            _check_geometry_object(member)
    elif not isinstance(obj.get("coordinates"), list):
        raise ParseError(Format.GEOJSON, "missing 'coordinates'")
    else:
        _check_positions(obj["coordinates"], _POSITION_DEPTH[geom_type], geom_type)


# Nesting depth of ``coordinates`` down to a single position.
_POSITION_DEPTH = {
    "Point": 1,
    "LineString": 2,
    "MultiPoint": 2,
    "Polygon": 3,
    "MultiLineString": 3,
    "MultiPolygon": 4,
}


def _check_positions(coords: Any, depth: int, geom_type: str) -> None:
    if not isinstance(coords, list):
        raise ParseError(Format.GEOJSON, f"invalid {geom_type} coordinates")
    if depth == 1:
        if not 2 <= len(coords) <= 3 or not all(_is_number(c) for c in coords):
            raise ParseError(
                Format.GEOJSON, f"a position must be 2 or 3 numbers, got {coords!r}"
            )
        return
    for child in coords:
        _check_positions(child, depth - 1, geom_type)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
