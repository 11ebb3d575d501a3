"""I/O sub-package – geometry text parsers (WKT, GeoJSON)."""

from __future__ import annotations

from geovis_lite.io.base import SUPPORTED_GEOMETRY_TYPES, GeometryParser
from geovis_lite.io.geojson import GeoJsonParser, parse_geojson
from geovis_lite.io.wkt import WktParser, parse_wkt
from geovis_lite.types import Format, Geometry

_PARSERS: dict[Format, GeometryParser] = {
    Format.WKT: WktParser(),
    Format.GEOJSON: GeoJsonParser(),
}


def parse_geometry(
    text: str,
    format: Format | str,
    source_projection: str,
    *,
    parser: GeometryParser | None = None,
) -> Geometry:
    """Parse *text* in the given *format* into a source-space Geometry.

    No coordinate math happens here: the result is tagged with
    *source_projection* exactly as given.

    Parameters
    ----------
    text : str
        Raw geometry text.  May be empty or malformed.
    format : Format | str
        ``Format.WKT`` / ``Format.GEOJSON`` (or their selector strings).
    source_projection : str
        CRS identifier the coordinates are declared in.
    parser : GeometryParser | None
        Custom parser.  Uses the default parser for *format* when ``None``.

    Raises
    ------
    ParseError
        If *text* is not a valid geometry in *format*.
    """
    fmt = Format(format)
    reader = parser if parser is not None else _PARSERS[fmt]
    return reader.parse(text, crs=source_projection)


__all__ = [
    "SUPPORTED_GEOMETRY_TYPES",
    "GeoJsonParser",
    "GeometryParser",
    "WktParser",
    "parse_geojson",
    "parse_geometry",
    "parse_wkt",
]
