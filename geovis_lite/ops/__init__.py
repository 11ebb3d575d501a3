"""Geometry operations."""

from geovis_lite.ops.reproject import get_transformer, reproject

__all__ = [
    "get_transformer",
    "reproject",
]
