"""Map view adapter – the boundary to the rendering engine.

The core never draws anything itself: it issues intents (render this
feature, fit to this box, show / hide the base layer) through the
:class:`MapViewAdapter` protocol.  :class:`FoliumMapViewAdapter` is the
default implementation and renders the view as a Leaflet HTML map with
**folium**, on top of OpenStreetMap tiles.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import folium

from geovis_lite.ops.reproject import get_transformer
from geovis_lite.types import DISPLAY_PROJECTION, BoundingBox, Feature

logger = logging.getLogger(__name__)

# Leaflet takes geographic coordinates, whatever the display CRS is.
LEAFLET_PROJECTION = "EPSG:4326"

# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class MapViewAdapter(Protocol):
    """Protocol for map view adapters driven by the sync controller."""

    def create_view(self, target: Any) -> Any:
        ...

    def destroy_view(self, handle: Any) -> None:
        ...

    def fit_to_extent(self, handle: Any, box: BoundingBox) -> None:
        ...

    def set_base_layer_visible(self, handle: Any, visible: bool) -> None:
        ...

    def render_feature(self, handle: Any, feature: Feature) -> None:
        ...


# ---------------------------------------------------------------------------
# folium implementation
# ---------------------------------------------------------------------------


@dataclass
class ViewHandle:
    """State of one mounted folium view.

    Attributes
    ----------
    target : Path | None
        Path the HTML map is written to, or ``None`` to keep the view in
        memory only (use :meth:`FoliumMapViewAdapter.build_map`).
    feature : Feature | None
        Feature currently drawn in the overlay, in display space.
    base_layer_visible : bool
        Whether the OSM tile layer is shown.
    bounds : list[list[float]] | None
        Last fitted bounds as ``[[south, west], [north, east]]``.
    is_open : bool
        ``False`` once the view has been destroyed.
    """

    target: Path | None = None
    feature: Feature | None = None
    base_layer_visible: bool = True
    bounds: list[list[float]] | None = None
    is_open: bool = True


class FoliumMapViewAdapter:
    """Render the view as a folium (Leaflet) map.

    Each intent updates the :class:`ViewHandle` and, when the handle has a
    target path, re-writes the HTML page so that the latest intent is always
    reflected.

    Parameters
    ----------
    center : tuple[float, float] | None
        Initial ``(lat, lon)`` map center.  Defaults to ``DEFAULT_CENTER``.
    zoom : int | None
        Initial zoom level.  Defaults to ``DEFAULT_ZOOM``.
    """

    DEFAULT_CENTER: tuple[float, float] = (0.0, 0.0)
    DEFAULT_ZOOM: int = 2
    DEFAULT_TILES: str = "OpenStreetMap"
    OVERLAY_STYLE: dict[str, Any] = {"color": "#ffcc33", "weight": 2, "fill": False}

    def __init__(
        self,
        center: tuple[float, float] | None = None,
        zoom: int | None = None,
    ) -> None:
        self.center = center if center is not None else self.DEFAULT_CENTER
        self.zoom = zoom if zoom is not None else self.DEFAULT_ZOOM

    # ------------------------------------------------------------------
    # MapViewAdapter
    # ------------------------------------------------------------------

    def create_view(self, target: str | Path | None) -> ViewHandle:
        handle = ViewHandle(target=Path(target) if target is not None else None)
        logger.info("Created map view (target=%s)", handle.target)
        self._publish(handle)
        return handle

    def destroy_view(self, handle: ViewHandle) -> None:
        """Release the view.  Destroying an already destroyed view is a no-op."""
        if not handle.is_open:
            return
        handle.is_open = False
        handle.feature = None
        handle.bounds = None
        logger.info("Destroyed map view (target=%s)", handle.target)

    def fit_to_extent(self, handle: ViewHandle, box: BoundingBox) -> None:
        """Fit the view to *box*, given in display space."""
        self._assert_open(handle, "fit_to_extent")
        west, south, east, north = get_transformer(
            DISPLAY_PROJECTION, LEAFLET_PROJECTION
        ).transform_bounds(box.west, box.south, box.east, box.north)
        handle.bounds = [[south, west], [north, east]]
        self._publish(handle)

    def set_base_layer_visible(self, handle: ViewHandle, visible: bool) -> None:
        self._assert_open(handle, "set_base_layer_visible")
        handle.base_layer_visible = bool(visible)
        self._publish(handle)

    def render_feature(self, handle: ViewHandle, feature: Feature) -> None:
        """Draw exactly *feature*; whatever was drawn before is dropped."""
        self._assert_open(handle, "render_feature")
        handle.feature = feature
        self._publish(handle)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def build_map(self, handle: ViewHandle) -> folium.Map:
        """Build a fresh :class:`folium.Map` reflecting *handle*."""
        fmap = folium.Map(location=list(self.center), zoom_start=self.zoom, tiles=None)
        folium.TileLayer(
            self.DEFAULT_TILES,
            name="OpenStreetMap",
            show=handle.base_layer_visible,
        ).add_to(fmap)

        if handle.feature is not None:
            gdf = handle.feature.to_geodataframe().to_crs(LEAFLET_PROJECTION)
            style = dict(self.OVERLAY_STYLE)
            folium.GeoJson(
                gdf,
                name="geometry",
                style_function=lambda _: style,
            ).add_to(fmap)

        if handle.bounds is not None:
            fmap.fit_bounds(handle.bounds)
        return fmap

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _publish(self, handle: ViewHandle) -> None:
        if handle.target is None:
            return
        self.build_map(handle).save(str(handle.target))
        logger.debug("Wrote map view to %s", handle.target)

    def _assert_open(self, handle: ViewHandle, method: str) -> None:
        if not handle.is_open:
            raise RuntimeError(f"{method}() called on a destroyed map view")
