import streamlit as st
from .. import config


def apply_custom_css():
    """Injects page fonts, metric cards and popup styling."""
    st.markdown(f"""
    <style>
        @import url('https://fonts.googleapis.com/css2?family=Poppins:wght@300;400;600;700&display=swap');

        html, body, [class*="css"] {{
            font-family: 'Poppins', sans-serif;
            color: {config.THEME_COLORS["text_main"]};
        }}

        .stApp {{
            background-color: {config.THEME_COLORS["background"]};
        }}

        div[data-testid="stMetric"] {{
            background: #ffffff;
            padding: 20px;
            border-radius: 16px;
            box-shadow: 0 4px 20px rgba(0,0,0,0.04);
            border: 1px solid #f0f0f0;
        }}

        /* Map container */
        iframe {{
            border-radius: 12px;
        }}

        .popup-code {{
            color: {config.THEME_COLORS["muted"]};
            font-size: 12px;
        }}

        .wl-chart {{
            margin-top: 8px;
        }}
    </style>
    """, unsafe_allow_html=True)
