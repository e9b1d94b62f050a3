import folium
import httpx
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .. import config
from ..config import Settings
from ..data.fetchers import TimeSeriesFetcher, fetch_station_directory
from ..data.processing import active_stations
from ..models import Station, StatusBoard
from .markers import StationMarkerController, utc_now
from .popup import PopupContent

logger = logging.getLogger(__name__)

Coordinate = Tuple[float, float]


@dataclass
class MapMarker:
    location: Coordinate
    tooltip: Optional[str] = None
    popup: Optional[PopupContent] = None
    popup_options: Dict[str, int] = field(default_factory=dict)
    is_open: bool = False
    layout_version: int = 0
    frame_size: Optional[Tuple[int, int]] = None
    open_handlers: List[Callable[[], Any]] = field(default_factory=list)
    close_handlers: List[Callable[[], Any]] = field(default_factory=list)


class StationMap:
    """Records markers, popups and the view, and builds the folium map from them.

    Popup open/close events are dispatched here by the page shell.
    """

    def __init__(self, container_id: str = "map"):
        self.container_id = container_id
        self.tile_layers: List[Dict[str, Any]] = []
        self.markers: List[MapMarker] = []
        self.bounds: Optional[List[Coordinate]] = None
        self.padding: Optional[Tuple[int, int]] = None
        self.center: Optional[Coordinate] = None
        self.zoom: Optional[int] = None

    def add_tile_layer(self, url_template: str, attribution: str, max_zoom: int) -> None:
        self.tile_layers.append({"tiles": url_template, "attr": attribution, "max_zoom": max_zoom})

    def add_marker(self, lat: float, lng: float, tooltip: Optional[str] = None) -> MapMarker:
        marker = MapMarker(location=(lat, lng), tooltip=tooltip)
        self.markers.append(marker)
        return marker

    def bind_popup(self, marker: MapMarker, content: PopupContent, max_width: int, min_width: int) -> None:
        marker.popup = content
        marker.popup_options = {"max_width": max_width, "min_width": min_width}

    def on_popup_open(self, marker: MapMarker, callback: Callable[[], Any]) -> None:
        marker.open_handlers.append(callback)

    def on_popup_close(self, marker: MapMarker, callback: Callable[[], Any]) -> None:
        marker.close_handlers.append(callback)

    def update_popup_layout(self, marker: MapMarker) -> None:
        """Re-fits the popup frame to the chart it now holds."""
        slot = marker.popup.chart if marker.popup is not None else None
        if slot is not None and slot.has_chart:
            width = marker.popup_options.get("min_width", slot.surface.width)
            marker.frame_size = (width, slot.surface.height + 60)
        else:
            marker.frame_size = None
        marker.layout_version += 1

    def fit_bounds(self, coords: Sequence[Coordinate], padding: Tuple[int, int]) -> None:
        self.bounds = [tuple(c) for c in coords]
        self.padding = tuple(padding)

    def set_view(self, center: Coordinate, zoom: int) -> None:
        self.center = tuple(center)
        self.zoom = zoom
        self.bounds = None

    # --- events ---

    @property
    def open_marker(self) -> Optional[MapMarker]:
        return next((m for m in self.markers if m.is_open), None)

    def find_marker(self, lat: float, lng: float, tooltip: Optional[str] = None,
                    tolerance: float = 1e-9) -> Optional[MapMarker]:
        """Marker at (lat, lng); `tooltip` tells apart markers sharing a location."""
        for marker in self.markers:
            if abs(marker.location[0] - lat) > tolerance or abs(marker.location[1] - lng) > tolerance:
                continue
            if tooltip is None or marker.tooltip == tooltip:
                return marker
        return None

    async def open_popup(self, marker: MapMarker) -> None:
        current = self.open_marker
        if current is not None and current is not marker:
            self.close_popup(current)
        marker.is_open = True
        for handler in list(marker.open_handlers):
            result = handler()
            if inspect.isawaitable(result):
                await result

    def close_popup(self, marker: MapMarker) -> None:
        if not marker.is_open:
            return
        marker.is_open = False
        for handler in list(marker.close_handlers):
            handler()

    # --- rendering ---

    def _popup_element(self, marker: MapMarker) -> Optional[folium.Popup]:
        content = marker.popup
        if content is None:
            return None
        opts = marker.popup_options
        slot = content.chart
        if slot is not None and slot.has_chart and marker.frame_size is not None:
            chart = slot.surface.to_altair()
            html = content.to_html(chart.to_html(fullhtml=False))
            width, height = marker.frame_size
            frame = folium.IFrame(html, width=width, height=height)
            return folium.Popup(frame, show=marker.is_open, max_width=opts.get("max_width", 300))
        return folium.Popup(content.to_html(), show=marker.is_open, **opts)

    def build(self) -> folium.Map:
        """Creates the folium map for the current markers, popups and view."""
        m = folium.Map(location=self.center, zoom_start=self.zoom or config.DEFAULT_ZOOM, tiles=None)
        for layer in self.tile_layers:
            folium.TileLayer(**layer).add_to(m)

        for marker in self.markers:
            folium.Marker(
                list(marker.location),
                tooltip=marker.tooltip,
                popup=self._popup_element(marker),
            ).add_to(m)

        if self.bounds:
            m.fit_bounds(self.bounds, padding=self.padding)
        return m


def _click_location(value: Optional[Dict[str, float]]) -> Optional[Coordinate]:
    if not value:
        return None
    return value["lat"], value["lng"]


class MapClickDispatcher:
    """Turns st_folium click read-backs into popup open/close events.

    st_folium repeats its last clicked values on every rerun, so only a value
    that differs from the previous read-back is an event. A click on the map
    background closes the open popup and remounts the component under a new
    key, which clears `last_object_clicked` so the same marker can be opened
    again.
    """

    returned_objects = ["last_object_clicked", "last_object_clicked_tooltip", "last_clicked"]

    def __init__(self, station_map: StationMap):
        self.station_map = station_map
        self.generation = 0
        self._seen_object: Optional[Tuple[Coordinate, Optional[str]]] = None
        self._seen_background: Optional[Coordinate] = None

    @property
    def key(self) -> str:
        return f"{self.station_map.container_id}-{self.generation}"

    async def dispatch(self, state: Optional[Dict[str, Any]]) -> bool:
        """Applies one read-back. Returns True when the page should rerun."""
        state = state or {}
        location = _click_location(state.get("last_object_clicked"))
        clicked = (location, state.get("last_object_clicked_tooltip")) if location else None
        background = _click_location(state.get("last_clicked"))

        if clicked is not None and clicked != self._seen_object:
            self._seen_object = clicked
            self._seen_background = background
            marker = self.station_map.find_marker(*location, tooltip=clicked[1])
            if marker is None:
                marker = self.station_map.find_marker(*location)
            if marker is None:
                return False
            await self.station_map.open_popup(marker)
            return True

        if background is not None and background != self._seen_background:
            current = self.station_map.open_marker
            if current is not None:
                self.station_map.close_popup(current)
            self.generation += 1
            self._seen_object = None
            self._seen_background = None
            logger.debug(f"Background click, map remounted as {self.key}")
            return True
        return False


def marker_label(station: Station) -> str:
    return f"{station.name} ({station.code})" if station.code else station.name


class StationDirectoryLoader:
    """Loads the station directory once and populates a StationMap with markers."""

    def __init__(self, settings: Settings, fetcher: Optional[TimeSeriesFetcher] = None,
                 client: Optional[httpx.AsyncClient] = None, clock: Callable = utc_now):
        self.settings = settings
        self.fetcher = fetcher or TimeSeriesFetcher(settings, client)
        self._client = client
        self._clock = clock
        self.map: Optional[StationMap] = None
        self.stations: List[Station] = []
        self.controllers: List[StationMarkerController] = []

    async def load(self) -> StatusBoard:
        board = StatusBoard()
        try:
            records = await fetch_station_directory(self.settings, self._client)
            stations = active_stations(records)
            n = len(stations)
            board.status = f"{n} active station{'s' if n != 1 else ''} found"
            logger.info(board.status)

            station_map = StationMap("map")
            station_map.add_tile_layer(self.settings.tile_url, self.settings.tile_attribution,
                                       self.settings.tile_max_zoom)
            controllers, bounds = [], []
            for station in stations:
                if not station.has_location:
                    continue
                bounds.append((station.latitude, station.longitude))
                marker = station_map.add_marker(station.latitude, station.longitude,
                                                tooltip=marker_label(station))
                controller = StationMarkerController(station, self.fetcher, self.settings,
                                                     station_map, marker, clock=self._clock)
                station_map.bind_popup(marker, controller.content, **self.settings.popup_options)
                if controller.has_chart:
                    station_map.on_popup_open(marker, controller.on_popup_open)
                    station_map.on_popup_close(marker, controller.on_popup_close)
                controllers.append(controller)

            if bounds:
                station_map.fit_bounds(bounds, padding=self.settings.fit_padding)
            else:
                station_map.set_view(self.settings.default_center, self.settings.default_zoom)

            self.stations, self.controllers, self.map = stations, controllers, station_map
        except Exception as e:
            logger.exception("Station directory load failed")
            board.status = config.MSG_DIRECTORY_FAILED
            board.error = f"Error: {e}"
        return board
