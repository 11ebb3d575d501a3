"""WKT reader – Well-Known-Text into a source-space Geometry."""

from __future__ import annotations

import shapely.wkt
from shapely.errors import GEOSException

from geovis_lite.exceptions import ParseError
from geovis_lite.io.base import check_shape
from geovis_lite.types import Format, Geometry


class WktParser:
    """Default WKT parser using shapely's GEOS reader."""

    def parse(self, text: str, *, crs: str) -> Geometry:
        """Parse *text* and tag the result with *crs*.

        Parameters
        ----------
        text : str
            WKT geometry, e.g. ``"POINT (1 2)"``.
        crs : str
            CRS the coordinates are declared in.  Not validated here.

        Raises
        ------
        ParseError
            On any grammar violation or unsupported geometry type.
        """
        if not isinstance(text, str):
            raise ParseError(Format.WKT, f"expected text, got {type(text).__name__}")
        if not text.strip():
            raise ParseError(Format.WKT, "empty input")
        try:
            shape = shapely.wkt.loads(text)
        except (GEOSException, ValueError, TypeError) as err:
            raise ParseError(Format.WKT, str(err)) from err

        reason = check_shape(shape)
        if reason is not None:
            raise ParseError(Format.WKT, reason)
        return Geometry(shape=shape, crs=crs)


_default = WktParser()


def parse_wkt(text: str, *, crs: str) -> Geometry:
    """Parse WKT text.  Delegates to :class:`WktParser`."""
    return _default.parse(text, crs=crs)
