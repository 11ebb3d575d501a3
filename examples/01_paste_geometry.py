import logging

from geovis_lite import FoliumMapViewAdapter, SyncController

logging.basicConfig(level=logging.INFO)

# Writes the Leaflet page to map.html on every change; open it in a browser.
with SyncController(FoliumMapViewAdapter(), "map.html") as ctl:
    ctl.on_input_changed("POLYGON ((10 50, 11 50, 11 51, 10 51, 10 50))")
    print(f"State: {ctl.state.name}, extent: {ctl.store.extent_of()}")

    # A half-typed keystroke keeps the polygon on the map
    ctl.on_input_changed("POLYGON ((10 50, 11 50")
    print(f"Error: {ctl.error}, zoom allowed: {ctl.can_zoom}")

    # Switch to GeoJSON in UTM zone 32N
    ctl.on_format_changed("GEOJSON")
    ctl.on_projection_changed("EPSG:32632")
    ctl.on_input_changed('{"type": "Point", "coordinates": [500000, 5540000]}')
    ctl.on_zoom_to_feature()
    ctl.on_toggle_base_layer()

    print(f"State: {ctl.state.name}, base layer visible: {ctl.base_layer_visible}")
