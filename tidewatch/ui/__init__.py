from .styles import apply_custom_css
from .components import render_header, render_status, render_metrics, render_station_map, render_data_table
from .map import MapClickDispatcher, StationMap, StationDirectoryLoader
from .markers import StationMarkerController
