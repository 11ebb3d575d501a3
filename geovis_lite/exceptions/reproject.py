"""Exceptions raised by the coordinate reprojector."""

from __future__ import annotations


class ReprojectError(Exception):
    """Coordinates can't be transformed between the two reference systems."""

    def __init__(self, from_crs: str, to_crs: str, detail: str | None = None) -> None:
        self.from_crs = from_crs
        self.to_crs = to_crs
        self.detail = detail
        message = f"Cannot reproject from {from_crs!r} to {to_crs!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
