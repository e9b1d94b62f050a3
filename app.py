import asyncio
import logging

import streamlit as st

from tidewatch import ui
from tidewatch.config import Settings
from tidewatch.data.processing import stations_frame

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

# --- PAGE SETUP ---
st.set_page_config(page_title="Water Level Stations", layout="wide", page_icon="🌊")
ui.apply_custom_css()

# --- DATA LOADING (once per session) ---
if "loader" not in st.session_state:
    loader = ui.StationDirectoryLoader(Settings())
    with st.spinner("Loading stations…"):
        st.session_state["board"] = asyncio.run(loader.load())
    st.session_state["loader"] = loader
    if loader.map is not None:
        st.session_state["clicks"] = ui.MapClickDispatcher(loader.map)

loader = st.session_state["loader"]
board = st.session_state["board"]

# --- MAIN LAYOUT ---
ui.render_header()
ui.render_status(board)

if loader.map is not None:
    ui.render_metrics(loader.stations, loader.settings)

    tab_map, tab_data = st.tabs(["🗺️ Map", "💾 Stations"])

    with tab_map:
        clicks = st.session_state["clicks"]
        map_state = ui.render_station_map(clicks)

        with st.spinner("Loading chart…"):
            changed = asyncio.run(clicks.dispatch(map_state))
        if changed:
            st.rerun()

    with tab_data:
        st.subheader("💾 Active Stations")
        ui.render_data_table(stations_frame(loader.stations, loader.settings))
