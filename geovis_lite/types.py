"""Core value types and constants shared across geovis-lite."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import geopandas as gpd
from shapely.geometry import mapping
from shapely.geometry.base import BaseGeometry

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DISPLAY_PROJECTION = "EPSG:3857"
"""CRS the map view always renders in (Web Mercator)."""

DEFAULT_SOURCE_PROJECTION = "EPSG:4326"
"""CRS assumed for pasted geometry text until the user declares another."""


class Format(str, Enum):
    """Text format of a pasted geometry."""

    WKT = "WKT"
    GEOJSON = "GEOJSON"

    @classmethod
    def _missing_(cls, value: object) -> "Format | None":
        # Selector strings come from the UI as e.g. "GeoJSON" or "wkt".
        if isinstance(value, str):
            for member in cls:
                if member.value == value.strip().upper():
                    return member
        return None


DEFAULT_FORMAT = Format.WKT


# ---------------------------------------------------------------------------
# Geometry / Feature
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Geometry:
    """A shapely geometry together with the CRS its coordinates are in.

    The CRS is an opaque identifier (``"EPSG:4326"``, a PROJ string, WKT2...)
    and is only resolved when the geometry is reprojected.
    """

    shape: BaseGeometry
    crs: str

    @property
    def geom_type(self) -> str:
        return self.shape.geom_type

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        return self.shape.bounds


@dataclass(frozen=True)
class Feature:
    """The single geometry shown on the map, plus optional attributes."""

    geometry: Geometry
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def crs(self) -> str:
        return self.geometry.crs

    @property
    def __geo_interface__(self) -> dict[str, Any]:
        return {
            "type": "Feature",
            "geometry": mapping(self.geometry.shape),
            "properties": dict(self.properties),
        }

    def to_geodataframe(self) -> gpd.GeoDataFrame:
        """Return a one-row GeoDataFrame carrying the feature's CRS."""
        return gpd.GeoDataFrame(
            [dict(self.properties)],
            geometry=[self.geometry.shape],
            crs=self.geometry.crs,
        )


# ---------------------------------------------------------------------------
# Extent
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box ``(west, south, east, north)``."""

    west: float
    south: float
    east: float
    north: float

    @classmethod
    def from_bounds(cls, bounds: tuple[float, float, float, float]) -> "BoundingBox":
        """Build from a shapely ``(minx, miny, maxx, maxy)`` tuple."""
        west, south, east, north = bounds
        if any(math.isnan(v) for v in bounds):
            raise ValueError("bounds of an empty geometry have no extent")
        return cls(west=west, south=south, east=east, north=north)

    @property
    def width(self) -> float:
        return self.east - self.west

    @property
    def height(self) -> float:
        return self.north - self.south

    @property
    def is_empty_area(self) -> bool:
        """True for a degenerate box (a point or an axis-parallel line)."""
        return self.width == 0 or self.height == 0

    def as_dict(self) -> dict[str, float]:
        """Spatial extent as ``{west, south, east, north}``."""
        return {
            "west": self.west,
            "south": self.south,
            "east": self.east,
            "north": self.north,
        }
