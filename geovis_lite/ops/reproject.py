"""Coordinate reprojection – pyproj transforms applied per vertex with shapely."""

from __future__ import annotations

from functools import lru_cache

import numpy as np
import pyproj
import shapely
from pyproj.exceptions import ProjError
from shapely.ops import transform as shapely_transform

from geovis_lite.exceptions import ReprojectError
from geovis_lite.types import Geometry


def reproject(geometry: Geometry, from_crs: str, to_crs: str) -> Geometry:
    """Transform *geometry* from *from_crs* into *to_crs*.

    Topology is preserved: the geometry type, vertex count and nesting are
    unchanged, only coordinate values differ.

    Parameters
    ----------
    geometry : Geometry
        Geometry whose coordinates are expressed in *from_crs*.
    from_crs : str
        Source CRS identifier (EPSG code string, PROJ string or WKT2).
    to_crs : str
        Target CRS identifier.

    Returns
    -------
    Geometry
        *geometry* itself when ``from_crs == to_crs``, otherwise a new
        Geometry tagged with *to_crs*.

    Raises
    ------
    ReprojectError
        If either identifier can't be resolved by PROJ, or a transformed
        coordinate is not finite (e.g. latitude 100 in Web Mercator).
    """
    if from_crs == to_crs:
        return geometry

    try:
        transformer = get_transformer(from_crs, to_crs)
        shape = shapely_transform(transformer.transform, geometry.shape)
    except ProjError as err:
        raise ReprojectError(from_crs, to_crs, str(err)) from err

    coords = shapely.get_coordinates(shape, include_z=shape.has_z)
    if not np.isfinite(coords).all():
        raise ReprojectError(from_crs, to_crs, "transformed coordinates are not finite")
    return Geometry(shape=shape, crs=to_crs)


@lru_cache(maxsize=32)
def get_transformer(from_crs: str, to_crs: str) -> pyproj.Transformer:
    """Return a cached ``always_xy`` transformer between two CRS identifiers.

    Raises
    ------
    pyproj.exceptions.CRSError
        If either identifier is unknown.
    """
    return pyproj.Transformer.from_crs(from_crs, to_crs, always_xy=True)
