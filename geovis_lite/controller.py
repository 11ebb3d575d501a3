"""Sync controller – keeps pasted geometry text and the map view in step.

Usage::

    from geovis_lite import FoliumMapViewAdapter, SyncController

    with SyncController(FoliumMapViewAdapter(), "map.html") as ctl:
        ctl.on_input_changed("POINT (1 2)")
        ctl.on_zoom_to_feature()

Every event runs to completion before the next one: a later
``on_input_changed`` supersedes an earlier one simply by running after it.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from geovis_lite.exceptions import ParseError, ReprojectError
from geovis_lite.io import parse_geometry
from geovis_lite.ops.reproject import reproject
from geovis_lite.store import FeatureStore
from geovis_lite.types import (
    DEFAULT_FORMAT,
    DEFAULT_SOURCE_PROJECTION,
    DISPLAY_PROJECTION,
    Feature,
    Format,
)
from geovis_lite.view import MapViewAdapter

logger = logging.getLogger(__name__)


class SyncState(Enum):
    """Outcome of the most recent input event."""

    IDLE = "idle"
    ERROR = "error"
    READY = "ready"


class SyncController:
    """Owns the feature store and error state, and drives the map view.

    Parameters
    ----------
    adapter : MapViewAdapter
        Rendering engine boundary.  Only ever driven, never polled.
    target : Any
        Where the view is mounted (for the folium adapter, an HTML path).
    format : Format | str
        Initial text format.
    projection : str
        Initial source CRS identifier.
    store : FeatureStore | None
        Store to own.  A new empty store is created when ``None``.
    """

    def __init__(
        self,
        adapter: MapViewAdapter,
        target: Any = None,
        *,
        format: Format | str = DEFAULT_FORMAT,
        projection: str = DEFAULT_SOURCE_PROJECTION,
        store: FeatureStore | None = None,
    ) -> None:
        self._adapter = adapter
        self._target = target
        self._format = Format(format)
        self._projection = projection
        self._store = store if store is not None else FeatureStore()
        self._error: str | None = None
        self._state = SyncState.IDLE
        self._base_layer_visible = True
        self._handle: Any = None
        self._store.subscribe(self._render)

    # ------------------------------------------------------------------
    # Properties (UI-facing outputs)
    # ------------------------------------------------------------------

    @property
    def store(self) -> FeatureStore:
        return self._store

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def error(self) -> str | None:
        """``"Invalid <FORMAT>"`` after a failed attempt, else ``None``."""
        return self._error

    @property
    def format(self) -> Format:
        return self._format

    @property
    def projection(self) -> str:
        return self._projection

    @property
    def base_layer_visible(self) -> bool:
        return self._base_layer_visible

    @property
    def can_zoom(self) -> bool:
        """Whether the zoom-to-feature action is currently permitted."""
        return self._error is None and not self._store.is_empty

    @property
    def is_mounted(self) -> bool:
        return self._handle is not None

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on_input_changed(self, text: str) -> SyncState:
        """Parse, reproject and show *text*.

        On failure the error is set and the held feature is left untouched.
        Errors raised by the adapter while rendering propagate to the caller.
        """
        self._error = None
        fmt = self._format
        try:
            geometry = parse_geometry(text, fmt, self._projection)
            geometry = reproject(geometry, self._projection, DISPLAY_PROJECTION)
        except (ParseError, ReprojectError) as err:
            logger.warning("Invalid %s input: %s", fmt.value, err)
            self._error = f"Invalid {fmt.value}"
            self._state = SyncState.ERROR
            return self._state

        # replace() renders the view; state must already match the store if
        # the adapter raises.
        self._state = SyncState.READY
        self._store.replace(geometry)
        return self._state

    def on_format_changed(self, format: Format | str) -> None:
        """Select the text format used by the next input event.

        Text already entered is not re-parsed.

        Raises
        ------
        ValueError
            If *format* is not a known format.
        """
        self._format = Format(format)

    def on_projection_changed(self, value: str) -> None:
        """Declare the source CRS for the next input event (not validated here)."""
        self._projection = value

    def on_zoom_to_feature(self) -> bool:
        """Fit the view to the current feature.

        Returns ``False`` without touching the view when zoom isn't permitted
        (error set or nothing to zoom to) or no view is mounted.
        """
        if not self.can_zoom or self._handle is None:
            return False
        box = self._store.extent_of()
        if box is None:
            return False
        self._adapter.fit_to_extent(self._handle, box)
        return True

    def on_toggle_base_layer(self) -> bool:
        """Flip base layer visibility and return the new value."""
        self._base_layer_visible = not self._base_layer_visible
        if self._handle is not None:
            self._adapter.set_base_layer_visible(self._handle, self._base_layer_visible)
        return self._base_layer_visible

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> None:
        """Create the view and bring it up to date with the current state.

        Raises
        ------
        RuntimeError
            If a view is already mounted.
        """
        if self._handle is not None:
            raise RuntimeError("map view is already mounted")
        self._handle = self._adapter.create_view(self._target)
        if not self._base_layer_visible:
            self._adapter.set_base_layer_visible(self._handle, False)
        feature = self._store.current()
        if feature is not None:
            self._adapter.render_feature(self._handle, feature)

    def unmount(self) -> None:
        """Release the view.  Calling it again without a mount is a no-op."""
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        self._adapter.destroy_view(handle)

    def __enter__(self) -> "SyncController":
        self.mount()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.unmount()

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"<SyncController {self._state.name} format={self._format.value} "
            f"projection={self._projection!r}>"
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _render(self, feature: Feature) -> None:
        if self._handle is not None:
            self._adapter.render_feature(self._handle, feature)
