"""
Configuration module for the Water Level Station Map.
Centralizes API endpoints, chart geometry, map defaults and styling parameters.
"""
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, Tuple

# --- API ENDPOINTS ---
API_BASE_URL = "https://api-sine.dfo-mpo.gc.ca/api/v1"
HTTP_TIMEOUT = 20.0  # seconds

# --- TIME SERIES ---
OBSERVED_CODE = "wlo"
PREDICTED_CODE = "wlp"
FETCH_WINDOW = timedelta(hours=24)

# --- CHART GEOMETRY ---
CHART_WIDTH = 480
CHART_HEIGHT = 200
CHART_MARGIN = {"top": 16, "right": 20, "bottom": 30, "left": 50}
X_TICKS = 6
Y_TICKS = 5
TIME_FORMAT = "%H:%M"
Y_LABEL = "Water Level (m)"
LEGEND_OFFSET = 140  # px left of the drawable right edge
LEGEND_STEP = 16     # px between stacked legend rows

# --- MAP ---
TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
TILE_ATTRIBUTION = "&copy; OpenStreetMap contributors"
TILE_MAX_ZOOM = 18
DEFAULT_CENTER = (56.0, -96.0)  # centre of Canada
DEFAULT_ZOOM = 4
FIT_PADDING = (30, 30)

# --- UI STYLING ---
THEME_COLORS = {
    "observed": "#2980b9",
    "predicted": "#999",
    "now": "#ccc",
    "axis_label": "#666",
    "legend_text": "#333",
    "muted": "#888",
    "error": "#c0392b",
    "background": "#fcfcfc",
    "text_main": "#1a1a1a",
}

# --- MESSAGES ---
MSG_LOADING = "Loading chart…"
MSG_FAILED = "Failed to load data."
MSG_NO_DATA = "No water level data available."
MSG_DIRECTORY_FAILED = "Failed to load stations."


@dataclass(frozen=True)
class Settings:
    """Immutable bundle of the settings above, handed to every collaborator."""
    api_base_url: str = API_BASE_URL
    http_timeout: float = HTTP_TIMEOUT
    observed_code: str = OBSERVED_CODE
    predicted_code: str = PREDICTED_CODE
    fetch_window: timedelta = FETCH_WINDOW
    chart_width: int = CHART_WIDTH
    chart_height: int = CHART_HEIGHT
    chart_margin: Dict[str, int] = field(default_factory=lambda: dict(CHART_MARGIN))
    tile_url: str = TILE_URL
    tile_attribution: str = TILE_ATTRIBUTION
    tile_max_zoom: int = TILE_MAX_ZOOM
    default_center: Tuple[float, float] = DEFAULT_CENTER
    default_zoom: int = DEFAULT_ZOOM
    fit_padding: Tuple[int, int] = FIT_PADDING

    @property
    def stations_url(self) -> str:
        return f"{self.api_base_url}/stations"

    def station_data_url(self, station_id: str) -> str:
        return f"{self.api_base_url}/stations/{station_id}/data"

    @property
    def drawable_width(self) -> int:
        return self.chart_width - self.chart_margin["left"] - self.chart_margin["right"]

    @property
    def drawable_height(self) -> int:
        return self.chart_height - self.chart_margin["top"] - self.chart_margin["bottom"]

    @property
    def popup_options(self) -> Dict[str, int]:
        return {"max_width": self.chart_width + 40, "min_width": self.chart_width + 20}
