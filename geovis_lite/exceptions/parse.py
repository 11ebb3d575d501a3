"""Exceptions raised by the WKT / GeoJSON parsers."""

from __future__ import annotations

from typing import Any


class ParseError(Exception):
    """The geometry text is not valid for the declared format."""

    def __init__(self, format: Any, detail: str | None = None) -> None:
        self.format = format
        self.detail = detail
        name = getattr(format, "value", format)
        message = f"Invalid {name}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
