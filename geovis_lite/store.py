"""Feature store – holds the single geometry feature shown on the map."""

from __future__ import annotations

import logging
from typing import Callable

from geovis_lite.types import BoundingBox, Feature, Geometry

logger = logging.getLogger(__name__)

ReplaceListener = Callable[[Feature], None]


class FeatureStore:
    """Zero-or-one feature container.

    Every :meth:`replace` swaps the whole feature in one assignment and then
    notifies subscribers, so a reader never observes a half-updated store.

    Usage::

        store = FeatureStore()
        store.subscribe(lambda feature: print(feature.geometry.geom_type))
        store.replace(geometry)
        store.extent_of()
    """

    def __init__(self) -> None:
        self._feature: Feature | None = None
        self._listeners: list[ReplaceListener] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def replace(self, geometry: Geometry) -> None:
        """Discard the current feature and install one wrapping *geometry*."""
        feature = Feature(geometry=geometry)
        self._feature = feature
        logger.debug("Feature replaced with %s", geometry.geom_type)
        for listener in list(self._listeners):
            listener(feature)

    def current(self) -> Feature | None:
        return self._feature

    def extent_of(self) -> BoundingBox | None:
        """Minimal axis-aligned box of the current geometry, or ``None``."""
        if self._feature is None:
            return None
        return BoundingBox.from_bounds(self._feature.geometry.bounds)

    def subscribe(self, listener: ReplaceListener) -> None:
        """Call *listener* with the new feature after every replace."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ReplaceListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            raise KeyError("listener is not subscribed") from None

    @property
    def is_empty(self) -> bool:
        return self._feature is None

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return 0 if self._feature is None else 1

    def __repr__(self) -> str:
        if self._feature is None:
            return "<FeatureStore empty>"
        return f"<FeatureStore {self._feature.geometry.geom_type} ({self._feature.crs})>"
