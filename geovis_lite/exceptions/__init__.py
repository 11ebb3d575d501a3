"""geovis-lite exceptions."""

from geovis_lite.exceptions.parse import ParseError
from geovis_lite.exceptions.reproject import ReprojectError

__all__ = [
    "ParseError",
    "ReprojectError",
]
