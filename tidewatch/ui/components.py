import streamlit as st
import pandas as pd
from streamlit_folium import st_folium
from typing import Any, Dict, List, Optional

from ..config import Settings
from ..models import Station, StatusBoard
from .map import MapClickDispatcher


def render_header():
    st.title("🌊 Water Level Stations")
    st.caption("Observed and predicted water levels from the Canadian Hydrographic Service network.")


def render_status(board: StatusBoard):
    """Status line, plus the error area when loading failed."""
    st.markdown(f"**{board.status}**")
    if board.error_visible:
        st.error(board.error)


def render_metrics(stations: List[Station], settings: Settings):
    """Displays network KPIs in a 4-column layout."""
    c1, c2, c3, c4 = st.columns(4)
    plotted = [s for s in stations if s.has_location]

    c1.metric("🛰️ Active Stations", len(stations))
    c2.metric("📍 On Map", len(plotted))
    c3.metric("📈 Observed Levels", sum(s.has_code(settings.observed_code) for s in plotted))
    c4.metric("🔮 Predictions", sum(s.has_code(settings.predicted_code) for s in plotted),
              help="Stations publishing a 24h water level forecast")


def render_station_map(dispatcher: MapClickDispatcher) -> Optional[Dict[str, Any]]:
    """Renders the map; returns st_folium's click read-back."""
    return st_folium(
        dispatcher.station_map.build(),
        height=600,
        use_container_width=True,
        returned_objects=dispatcher.returned_objects,
        key=dispatcher.key,
    )


def render_data_table(df: pd.DataFrame):
    """Active stations as an exportable table."""
    st.dataframe(df, width="stretch", hide_index=True)
    st.download_button(
        "📥 Download Station List (CSV)",
        df.to_csv(index=False),
        "active_stations.csv",
        help="Export all active stations to CSV",
    )
