"""Tests for the SyncController state machine."""

import pytest

from geovis_lite.controller import SyncController, SyncState
from geovis_lite.store import FeatureStore
from geovis_lite.types import DISPLAY_PROJECTION, BoundingBox, Format
from geovis_lite.view import MapViewAdapter


class RecordingAdapter:
    """Map view adapter that records every intent it receives."""

    def __init__(self):
        self.calls = []
        self._views = 0

    def create_view(self, target):
        self._views += 1
        handle = f"view-{self._views}"
        self.calls.append(("create_view", target))
        return handle

    def destroy_view(self, handle):
        self.calls.append(("destroy_view", handle))

    def fit_to_extent(self, handle, box):
        self.calls.append(("fit_to_extent", handle, box))

    def set_base_layer_visible(self, handle, visible):
        self.calls.append(("set_base_layer_visible", handle, visible))

    def render_feature(self, handle, feature):
        self.calls.append(("render_feature", handle, feature))

    def named(self, name):
        return [call for call in self.calls if call[0] == name]


def _make_controller(**kwargs):
    adapter = RecordingAdapter()
    ctl = SyncController(adapter, "map", **kwargs)
    ctl.mount()
    return ctl, adapter


class TestInitialState:
    def test_defaults(self):
        ctl = SyncController(RecordingAdapter())
        assert ctl.state is SyncState.IDLE
        assert ctl.format is Format.WKT
        assert ctl.projection == "EPSG:4326"
        assert ctl.error is None
        assert ctl.base_layer_visible is True
        assert ctl.store.is_empty
        assert not ctl.can_zoom
        assert not ctl.is_mounted

    def test_recording_adapter_satisfies_protocol(self):
        assert isinstance(RecordingAdapter(), MapViewAdapter)


class TestInputChanged:
    def test_wkt_point_scenario(self):
        ctl, adapter = _make_controller()
        assert ctl.on_input_changed("POINT (1 2)") is SyncState.READY
        feature = ctl.store.current()
        assert feature.crs == DISPLAY_PROJECTION
        assert feature.geometry.geom_type == "Point"
        assert feature.geometry.shape.x == pytest.approx(111319.49, abs=0.01)
        assert feature.geometry.shape.y == pytest.approx(222684.20, abs=0.01)
        assert ctl.error is None
        assert ctl.can_zoom
        assert adapter.named("render_feature") == [("render_feature", "view-1", feature)]

    def test_geojson_matches_wkt(self):
        wkt_ctl, _ = _make_controller()
        wkt_ctl.on_input_changed("POINT (1 2)")

        json_ctl, _ = _make_controller(format="GEOJSON")
        json_ctl.on_input_changed('{"type":"Point","coordinates":[1,2]}')

        a = wkt_ctl.store.current().geometry
        b = json_ctl.store.current().geometry
        assert a.crs == b.crs
        assert a.shape.equals_exact(b.shape, 1e-9)

    def test_malformed_wkt_on_first_attempt(self):
        ctl, adapter = _make_controller()
        assert ctl.on_input_changed("POINT (1 2") is SyncState.ERROR
        assert ctl.error == "Invalid WKT"
        assert ctl.store.current() is None
        assert not ctl.can_zoom
        assert adapter.named("render_feature") == []

    def test_failure_keeps_previous_feature(self):
        ctl, adapter = _make_controller()
        ctl.on_input_changed("LINESTRING (0 0, 1 1)")
        before = ctl.store.current()
        extent = ctl.store.extent_of()

        ctl.on_input_changed("LINESTRING (0 0, 1")
        assert ctl.state is SyncState.ERROR
        assert ctl.store.current() is before
        assert ctl.store.extent_of() == extent
        assert len(adapter.named("render_feature")) == 1

    def test_geojson_error_names_format(self):
        ctl, _ = _make_controller(format=Format.GEOJSON)
        ctl.on_input_changed("{not json")
        assert ctl.error == "Invalid GEOJSON"

    def test_unknown_projection_is_an_error(self):
        ctl, _ = _make_controller(projection="EPSG:XXX")
        assert ctl.on_input_changed("POINT (1 2)") is SyncState.ERROR
        assert ctl.error == "Invalid WKT"
        assert ctl.store.is_empty

    def test_non_finite_reprojection_is_an_error(self):
        ctl, _ = _make_controller()
        ctl.on_input_changed("POINT (0 100)")
        assert ctl.error == "Invalid WKT"

    def test_error_cleared_by_next_success(self):
        ctl, _ = _make_controller()
        ctl.on_input_changed("POINT (")
        ctl.on_input_changed("POINT (3 4)")
        assert ctl.error is None
        assert ctl.state is SyncState.READY

    def test_render_failure_leaves_state_matching_store(self):
        class FailingAdapter(RecordingAdapter):
            def render_feature(self, handle, feature):
                raise OSError("target not writable")

        adapter = FailingAdapter()
        ctl = SyncController(adapter, "map")
        ctl.mount()
        ctl.on_input_changed("POINT (")
        with pytest.raises(OSError, match="not writable"):
            ctl.on_input_changed("POINT (1 2)")
        assert not ctl.store.is_empty
        assert ctl.state is SyncState.READY
        assert ctl.error is None

    def test_replay_is_idempotent(self):
        ctl, _ = _make_controller()
        ctl.on_input_changed("POLYGON ((0 0, 1 0, 1 1, 0 0))")
        first = ctl.store.current()
        ctl.on_input_changed("POLYGON ((0 0, 1 0, 1 1, 0 0))")
        second = ctl.store.current()
        assert second.geometry.crs == first.geometry.crs
        assert second.geometry.shape.equals_exact(first.geometry.shape, 0)
        assert ctl.store.extent_of() == BoundingBox.from_bounds(first.geometry.bounds)

    def test_source_equal_to_display_is_identity(self):
        ctl, _ = _make_controller(projection=DISPLAY_PROJECTION)
        ctl.on_input_changed("POINT (123.25 -45.5)")
        shape = ctl.store.current().geometry.shape
        assert (shape.x, shape.y) == (123.25, -45.5)


class TestSelectorsAreNotReactive:
    def test_format_change_does_not_reparse(self):
        ctl, adapter = _make_controller()
        ctl.on_input_changed("POINT (1 2)")
        feature = ctl.store.current()
        ctl.on_format_changed("GEOJSON")
        assert ctl.format is Format.GEOJSON
        assert ctl.store.current() is feature
        assert len(adapter.named("render_feature")) == 1

    def test_projection_change_does_not_reparse(self):
        ctl, _ = _make_controller()
        ctl.on_input_changed("POINT (1 2)")
        feature = ctl.store.current()
        ctl.on_projection_changed("EPSG:XXX")
        assert ctl.projection == "EPSG:XXX"
        assert ctl.store.current() is feature
        assert ctl.error is None

    def test_new_projection_used_on_next_input(self):
        ctl, _ = _make_controller()
        ctl.on_projection_changed(DISPLAY_PROJECTION)
        ctl.on_input_changed("POINT (1 2)")
        shape = ctl.store.current().geometry.shape
        assert (shape.x, shape.y) == (1.0, 2.0)

    def test_unknown_format_raises(self):
        ctl, _ = _make_controller()
        with pytest.raises(ValueError):
            ctl.on_format_changed("KML")
        assert ctl.format is Format.WKT


class TestZoomToFeature:
    def test_zoom_to_point(self):
        ctl, adapter = _make_controller()
        ctl.on_input_changed("POINT (1 2)")
        assert ctl.on_zoom_to_feature() is True
        (call,) = adapter.named("fit_to_extent")
        box = call[2]
        shape = ctl.store.current().geometry.shape
        assert box == BoundingBox(shape.x, shape.y, shape.x, shape.y)
        assert box.is_empty_area

    def test_no_zoom_when_empty(self):
        ctl, adapter = _make_controller()
        assert ctl.on_zoom_to_feature() is False
        assert adapter.named("fit_to_extent") == []

    def test_no_zoom_while_error(self):
        ctl, adapter = _make_controller()
        ctl.on_input_changed("POINT (1 2)")
        ctl.on_input_changed("POINT (1")
        assert not ctl.can_zoom
        assert ctl.on_zoom_to_feature() is False
        assert adapter.named("fit_to_extent") == []

    def test_no_zoom_when_unmounted(self):
        adapter = RecordingAdapter()
        ctl = SyncController(adapter)
        ctl.on_input_changed("POINT (1 2)")
        assert ctl.on_zoom_to_feature() is False
        assert adapter.calls == []


class TestToggleBaseLayer:
    def test_double_toggle_restores(self):
        ctl, adapter = _make_controller()
        assert ctl.on_toggle_base_layer() is False
        assert ctl.on_toggle_base_layer() is True
        assert ctl.base_layer_visible is True
        assert adapter.named("set_base_layer_visible") == [
            ("set_base_layer_visible", "view-1", False),
            ("set_base_layer_visible", "view-1", True),
        ]

    def test_independent_of_error_state(self):
        ctl, adapter = _make_controller()
        ctl.on_input_changed("garbage")
        assert ctl.on_toggle_base_layer() is False
        assert len(adapter.named("set_base_layer_visible")) == 1


class TestLifecycle:
    def test_context_manager_creates_and_destroys_once(self):
        adapter = RecordingAdapter()
        with SyncController(adapter, "map") as ctl:
            assert ctl.is_mounted
        assert not ctl.is_mounted
        assert adapter.named("create_view") == [("create_view", "map")]
        assert adapter.named("destroy_view") == [("destroy_view", "view-1")]

    def test_unmount_twice_destroys_once(self):
        ctl, adapter = _make_controller()
        ctl.unmount()
        ctl.unmount()
        assert len(adapter.named("destroy_view")) == 1

    def test_double_mount_raises(self):
        ctl, _ = _make_controller()
        with pytest.raises(RuntimeError, match="already mounted"):
            ctl.mount()

    def test_no_render_after_unmount(self):
        ctl, adapter = _make_controller()
        ctl.unmount()
        ctl.on_input_changed("POINT (1 2)")
        ctl.on_toggle_base_layer()
        assert adapter.named("render_feature") == []
        assert adapter.named("set_base_layer_visible") == []

    def test_remount_replays_state(self):
        ctl, adapter = _make_controller()
        ctl.on_input_changed("POINT (1 2)")
        ctl.on_toggle_base_layer()
        ctl.unmount()
        ctl.mount()
        feature = ctl.store.current()
        assert adapter.calls[-2:] == [
            ("set_base_layer_visible", "view-2", False),
            ("render_feature", "view-2", feature),
        ]

    def test_shared_store(self):
        store = FeatureStore()
        ctl = SyncController(RecordingAdapter(), store=store)
        ctl.on_input_changed("POINT (1 2)")
        assert ctl.store is store
        assert not store.is_empty
